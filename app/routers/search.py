from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session
from app.core.config import HASHTAG_POSTS_PAGE_SIZE, SEARCH_LIMIT
from app.core.security import get_optional_user
from app.crud import search as crud
from app.db.models.user import User
from app.db.session import get_db
from app.schemas.common import Page, Pagination
from app.schemas.hashtag import SearchResults
from app.schemas.post import PostOut

router = APIRouter()


# Search users, posts and hashtags
@router.get("", response_model=SearchResults, response_model_exclude_unset=True)
def search(
    q: str = Query(""),
    type: str = Query("all"),
    db: Session = Depends(get_db),
    viewer: Optional[User] = Depends(get_optional_user)
):
    query = q.strip()
    if len(query) < 2:
        raise HTTPException(status_code=400, detail="Query must be at least 2 characters")
    if type not in crud.SEARCH_TYPES:
        raise HTTPException(status_code=400, detail=f"Invalid search type: {type}")

    results = {}
    if type in ("all", "users"):
        results["users"] = crud.search_users(db, query, SEARCH_LIMIT)
    if type in ("all", "posts"):
        results["posts"] = crud.search_posts(db, query, SEARCH_LIMIT, viewer.id if viewer else None)
    if type in ("all", "hashtags"):
        results["hashtags"] = crud.search_hashtags(db, query, SEARCH_LIMIT)
    return results


@router.get("/hashtag/{tag}", response_model=Page[PostOut])
def get_hashtag_posts(
    tag: str,
    page: int = Query(1, ge=1),
    db: Session = Depends(get_db),
    viewer: Optional[User] = Depends(get_optional_user)
):
    viewer_id = viewer.id if viewer else None
    posts, total = crud.get_hashtag_posts(db, tag, page, HASHTAG_POSTS_PAGE_SIZE, viewer_id)
    return {"data": posts, "pagination": Pagination.build(total, page, HASHTAG_POSTS_PAGE_SIZE)}
