import logging
from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from app.core.config import FEED_PAGE_SIZE, USER_POSTS_PAGE_SIZE
from app.core.security import get_current_user, get_optional_user
from app.crud import post as crud
from app.db.models.post import Post
from app.db.models.user import User
from app.db.session import get_db
from app.schemas.common import Page, Pagination, SuccessResponse
from app.schemas.post import PostCreate, PostOut

logger = logging.getLogger(__name__)

router = APIRouter()


def _viewer_id(viewer: Optional[User]) -> Optional[str]:
    return viewer.id if viewer else None


# Global feed, newest first
@router.get("", response_model=Page[PostOut])
def get_posts(
    page: int = Query(1, ge=1),
    db: Session = Depends(get_db),
    viewer: Optional[User] = Depends(get_optional_user)
):
    posts, total = crud.get_feed(db, _viewer_id(viewer), page, FEED_PAGE_SIZE)
    return {"data": posts, "pagination": Pagination.build(total, page, FEED_PAGE_SIZE)}


@router.get("/user/{user_id}", response_model=Page[PostOut])
def get_user_posts(
    user_id: str,
    page: int = Query(1, ge=1),
    db: Session = Depends(get_db),
    viewer: Optional[User] = Depends(get_optional_user)
):
    posts, total = crud.get_user_posts(db, user_id, _viewer_id(viewer), page, USER_POSTS_PAGE_SIZE)
    return {"data": posts, "pagination": Pagination.build(total, page, USER_POSTS_PAGE_SIZE)}


@router.get("/{post_id}", response_model=PostOut)
def get_post_by_id(
    post_id: str,
    db: Session = Depends(get_db),
    viewer: Optional[User] = Depends(get_optional_user)
):
    post = crud.get_post(db, post_id, _viewer_id(viewer))
    if not post:
        raise HTTPException(status_code=404, detail="Post not found")
    return post


@router.post("", response_model=PostOut, status_code=status.HTTP_201_CREATED)
def create_post(
    post_in: PostCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    content = (post_in.content or "").strip()
    if not content:
        raise HTTPException(status_code=400, detail="Content is required")

    try:
        new_post = crud.create_post(db, current_user.id, content, post_in.image_url)
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Database error creating post: {str(e)}")
        raise HTTPException(500, "Failed to create post")

    logger.info("User %s created post %s", current_user.id, new_post.id)
    return crud.get_post(db, new_post.id, current_user.id)


#delete post
@router.delete("/{post_id}", response_model=SuccessResponse)
def delete_post(
    post_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    post = db.query(Post).filter(Post.id == post_id).first()
    if not post:
        raise HTTPException(status_code=404, detail="Post not found")
    if post.user_id != current_user.id:
        raise HTTPException(status_code=403, detail="Not authorized to delete this post")

    try:
        crud.delete_post(db, post)
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Database error deleting post {post_id}: {str(e)}")
        raise HTTPException(500, "Failed to delete post")
    return {"success": True}
