from datetime import datetime
from typing import Optional
from pydantic import BaseModel


class CommentCreate(BaseModel):
    post_id: Optional[str] = None
    content: Optional[str] = None


class CommentUpdate(BaseModel):
    content: Optional[str] = None


class CommentOut(BaseModel):
    id: str
    post_id: str
    user_id: str
    content: str
    created_at: datetime
    updated_at: Optional[datetime] = None
    name: str
    username: str
    image: Optional[str] = None

    class Config:
        from_attributes = True
