import logging
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from app.db.session import get_db
from app.db.models.post import Post
from app.db.models.user import User
from app.core.security import get_current_user
from app.crud import like as crud
from app.schemas.post import LikeResult

logger = logging.getLogger(__name__)

router = APIRouter()

@router.post("/{post_id}", response_model=LikeResult)
def like_post(
    post_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    post = db.query(Post).filter(Post.id == post_id).first()
    if not post:
        raise HTTPException(status_code=404, detail="Post not found")

    try:
        crud.like_post(db, post, current_user.id)
    except crud.AlreadyLikedError:
        raise HTTPException(status_code=400, detail="Post already liked")
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Database error liking post {post_id}: {str(e)}")
        raise HTTPException(500, "Failed to like post")

    logger.info("User %s liked post %s", current_user.id, post_id)
    return {"success": True, "like_count": crud.count_likes(db, post_id)}


@router.delete("/{post_id}", response_model=LikeResult)
def unlike_post(
    post_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    try:
        crud.unlike_post(db, post_id, current_user.id)
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Database error unliking post {post_id}: {str(e)}")
        raise HTTPException(500, "Failed to unlike post")
    return {"success": True, "like_count": crud.count_likes(db, post_id)}
