import logging
from datetime import datetime
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from app.core.config import COMMENTS_PAGE_SIZE
from app.core.security import get_current_user
from app.crud import comment as crud
from app.db.models.comment import Comment
from app.db.models.post import Post
from app.db.models.user import User
from app.db.session import get_db
from app.schemas.comment import CommentCreate, CommentOut, CommentUpdate
from app.schemas.common import Page, Pagination, SuccessResponse

logger = logging.getLogger(__name__)

router = APIRouter()


def _get_own_comment(db: Session, comment_id: str, user: User) -> Comment:
    comment = db.query(Comment).filter(Comment.id == comment_id).first()
    if not comment:
        raise HTTPException(status_code=404, detail="Comment not found")
    if comment.user_id != user.id:
        raise HTTPException(status_code=403, detail="Not authorized")
    return comment


@router.get("/post/{post_id}", response_model=Page[CommentOut])
def get_comments(
    post_id: str,
    page: int = Query(1, ge=1),
    db: Session = Depends(get_db)
):
    comments, total = crud.get_comments(db, post_id, page, COMMENTS_PAGE_SIZE)
    return {"data": comments, "pagination": Pagination.build(total, page, COMMENTS_PAGE_SIZE)}


@router.post("", response_model=CommentOut, status_code=status.HTTP_201_CREATED)
def create_comment(
    comment_in: CommentCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    content = (comment_in.content or "").strip()
    if not content or not comment_in.post_id:
        raise HTTPException(status_code=400, detail="Missing required fields")

    post = db.query(Post).filter(Post.id == comment_in.post_id).first()
    if not post:
        raise HTTPException(status_code=404, detail="Post not found")

    try:
        comment = crud.create_comment(db, post, current_user.id, content)
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Database error creating comment: {str(e)}")
        raise HTTPException(500, "Failed to create comment")
    return crud.get_comment(db, comment.id)


@router.put("/{comment_id}", response_model=CommentOut)
def update_comment(
    comment_id: str,
    comment_in: CommentUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    comment = _get_own_comment(db, comment_id, current_user)
    content = (comment_in.content or "").strip()
    if not content:
        raise HTTPException(status_code=400, detail="Content is required")

    try:
        comment.content = content
        comment.updated_at = datetime.utcnow()
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Database error updating comment {comment_id}: {str(e)}")
        raise HTTPException(500, "Failed to update comment")
    return crud.get_comment(db, comment_id)


@router.delete("/{comment_id}", response_model=SuccessResponse)
def delete_comment(
    comment_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    comment = _get_own_comment(db, comment_id, current_user)
    try:
        db.delete(comment)
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Database error deleting comment {comment_id}: {str(e)}")
        raise HTTPException(500, "Failed to delete comment")
    return {"success": True}
