import logging
from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from app.core.config import FOLLOWS_PAGE_SIZE
from app.core.security import get_current_user, get_optional_user
from app.crud import follow as crud
from app.db.models.user import User
from app.db.session import get_db
from app.schemas.common import Page, Pagination, SuccessResponse
from app.schemas.user import UserSummary

logger = logging.getLogger(__name__)

router = APIRouter()


# Follow a user
@router.post("/{user_id}", response_model=SuccessResponse)
def follow_user(
    user_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    if user_id == current_user.id:
        raise HTTPException(status_code=400, detail="Cannot follow yourself")

    target = db.query(User).filter(User.id == user_id).first()
    if not target:
        raise HTTPException(status_code=404, detail="User not found")

    try:
        crud.follow_user(db, current_user.id, user_id)
    except crud.AlreadyFollowingError:
        raise HTTPException(status_code=400, detail="Already following this user")
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Database error following user {user_id}: {str(e)}")
        raise HTTPException(500, "Failed to follow user")

    logger.info("User %s followed user %s", current_user.id, user_id)
    return {"success": True}


# Unfollow is idempotent
@router.delete("/{user_id}", response_model=SuccessResponse)
def unfollow_user(
    user_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    try:
        crud.unfollow_user(db, current_user.id, user_id)
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Database error unfollowing user {user_id}: {str(e)}")
        raise HTTPException(500, "Failed to unfollow user")
    return {"success": True}


@router.get("/{user_id}/status")
def get_follow_status(
    user_id: str,
    db: Session = Depends(get_db),
    viewer: Optional[User] = Depends(get_optional_user)
):
    if viewer is None:
        return {"is_following": False}
    return {"is_following": crud.is_following(db, viewer.id, user_id)}


@router.get("/{user_id}/followers", response_model=Page[UserSummary])
def get_followers(
    user_id: str,
    page: int = Query(1, ge=1),
    db: Session = Depends(get_db)
):
    users, total = crud.get_followers(db, user_id, page, FOLLOWS_PAGE_SIZE)
    return {"data": users, "pagination": Pagination.build(total, page, FOLLOWS_PAGE_SIZE)}


@router.get("/{user_id}/following", response_model=Page[UserSummary])
def get_following(
    user_id: str,
    page: int = Query(1, ge=1),
    db: Session = Depends(get_db)
):
    users, total = crud.get_following(db, user_id, page, FOLLOWS_PAGE_SIZE)
    return {"data": users, "pagination": Pagination.build(total, page, FOLLOWS_PAGE_SIZE)}
