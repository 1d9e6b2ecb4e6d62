from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from app.core.config import (
    EXPLORE_PAGE_SIZE,
    MAX_TOP_LIMIT,
    SUGGESTED_USERS_LIMIT,
    TRENDING_HASHTAGS_LIMIT,
    TRENDING_POSTS_LIMIT,
)
from app.core.security import get_current_user
from app.crud import discover as crud
from app.db.models.user import User
from app.db.session import get_db
from app.schemas.common import ListResponse, Page, Pagination
from app.schemas.hashtag import HashtagOut
from app.schemas.post import PostOut, TrendingPostOut
from app.schemas.user import UserWithFollowers

router = APIRouter()


@router.get("/trending/hashtags", response_model=ListResponse[HashtagOut])
def get_trending_hashtags(
    limit: int = Query(TRENDING_HASHTAGS_LIMIT, ge=1, le=MAX_TOP_LIMIT),
    db: Session = Depends(get_db)
):
    return {"data": crud.get_trending_hashtags(db, limit)}


@router.get("/trending/posts", response_model=ListResponse[TrendingPostOut])
def get_trending_posts(
    limit: int = Query(TRENDING_POSTS_LIMIT, ge=1, le=MAX_TOP_LIMIT),
    db: Session = Depends(get_db)
):
    return {"data": crud.get_trending_posts(db, limit)}


# Users the viewer does not follow and has not blocked, most followed first
@router.get("/suggested-users", response_model=ListResponse[UserWithFollowers])
def get_suggested_users(
    limit: int = Query(SUGGESTED_USERS_LIMIT, ge=1, le=MAX_TOP_LIMIT),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    return {"data": crud.get_suggested_users(db, current_user.id, limit)}


@router.get("/explore", response_model=Page[PostOut])
def get_explore(
    page: int = Query(1, ge=1),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    posts, total = crud.get_explore(db, current_user.id, page, EXPLORE_PAGE_SIZE)
    return {"data": posts, "pagination": Pagination.build(total, page, EXPLORE_PAGE_SIZE)}
