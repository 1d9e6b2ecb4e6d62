import logging
from typing import List
from fastapi import APIRouter, Depends, HTTPException, status, Body
from sqlalchemy import func
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session
from app.core.config import SEARCH_LIMIT
from app.core.security import get_current_user
from app.crud import follow as follow_crud
from app.crud.search import search_users_by_name
from app.db.models.post import Post
from app.db.models.user import User
from app.db.session import get_db
from app.schemas.common import SuccessResponse
from app.schemas.user import UserOut, UserProfile, UserSummary, UserUpdate

logger = logging.getLogger(__name__)

router = APIRouter()


def _get_user_or_404(db: Session, user_id: str) -> User:
    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    return user


# Get user details
@router.get("/me", response_model=UserOut)
def get_user_me(current_user: User = Depends(get_current_user)):
    return current_user


# Partial profile update for the authenticated user
@router.put("/me", response_model=UserOut)
def update_me(
    user_update: UserUpdate = Body(...),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    update_data = user_update.model_dump(exclude_unset=True)

    for field in ("name", "username"):
        if field in update_data:
            value = (update_data[field] or "").strip()
            if not value:
                raise HTTPException(status_code=400, detail=f"{field.capitalize()} cannot be empty")
            update_data[field] = value

    username = update_data.get("username")
    if username and username != current_user.username:
        taken = db.query(User.id).filter(User.username == username).first()
        if taken:
            raise HTTPException(status_code=400, detail="Username already taken")

    try:
        for key, value in update_data.items():
            setattr(current_user, key, value)
        db.commit()
        db.refresh(current_user)
    except IntegrityError:
        db.rollback()
        raise HTTPException(status_code=400, detail="Username already taken")
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Database error updating user {current_user.id}: {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to update user"
        )
    return current_user


# Search users by name or username
@router.get("/search/{query}", response_model=List[UserSummary])
def search_users(query: str, db: Session = Depends(get_db)):
    query = query.strip()
    if len(query) < 2:
        raise HTTPException(status_code=400, detail="Query must be at least 2 characters")
    return search_users_by_name(db, query, SEARCH_LIMIT)


# Profile with follower, following and post counts
@router.get("/{user_id}", response_model=UserProfile)
def get_user(user_id: str, db: Session = Depends(get_db)):
    user = _get_user_or_404(db, user_id)
    profile = UserProfile.model_validate(user)
    profile.follower_count = follow_crud.follower_count(db, user_id)
    profile.following_count = follow_crud.following_count(db, user_id)
    profile.post_count = db.query(func.count(Post.id)).filter(Post.user_id == user_id).scalar()
    return profile


@router.post("/{user_id}/block", response_model=SuccessResponse)
def block_user(
    user_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    if user_id == current_user.id:
        raise HTTPException(status_code=400, detail="Cannot block yourself")
    _get_user_or_404(db, user_id)

    try:
        follow_crud.block_user(db, current_user.id, user_id)
    except follow_crud.AlreadyBlockedError:
        raise HTTPException(status_code=400, detail="User already blocked")
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Database error blocking user {user_id}: {str(e)}")
        raise HTTPException(500, "Failed to block user")
    return {"success": True}


@router.delete("/{user_id}/block", response_model=SuccessResponse)
def unblock_user(
    user_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    try:
        follow_crud.unblock_user(db, current_user.id, user_id)
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Database error unblocking user {user_id}: {str(e)}")
        raise HTTPException(500, "Failed to unblock user")
    return {"success": True}
