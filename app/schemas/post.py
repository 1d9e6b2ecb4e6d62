from pydantic import BaseModel
from datetime import datetime
from typing import Optional

class PostCreate(BaseModel):
    content: Optional[str] = None
    image_url: Optional[str] = None


class PostOut(BaseModel):
    id: str
    user_id: str
    content: str
    image_url: Optional[str] = None
    created_at: datetime
    updated_at: Optional[datetime] = None
    user_name: str
    username: str
    user_image: Optional[str] = None
    like_count: int = 0
    comment_count: int = 0
    is_liked: bool = False

    class Config:
        from_attributes = True


class TrendingPostOut(PostOut):
    score: int = 0


class LikeResult(BaseModel):
    success: bool = True
    like_count: int
