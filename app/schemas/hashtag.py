from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel
from app.schemas.post import PostOut
from app.schemas.user import UserWithFollowers


class HashtagOut(BaseModel):
    id: str
    tag: str
    post_count: int
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class SearchResults(BaseModel):
    users: Optional[List[UserWithFollowers]] = None
    posts: Optional[List[PostOut]] = None
    hashtags: Optional[List[HashtagOut]] = None
