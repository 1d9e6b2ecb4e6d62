from datetime import datetime
from pydantic import BaseModel
from typing import Optional


class NotificationOut(BaseModel):
    id: str
    type: str
    triggered_by: str
    post_id: Optional[str] = None
    is_read: bool
    created_at: datetime
    name: str
    username: str
    image: Optional[str] = None
    post_content: Optional[str] = None

    class Config:
        from_attributes = True


class MarkAllReadResult(BaseModel):
    updated: int
