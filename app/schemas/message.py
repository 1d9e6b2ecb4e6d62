from pydantic import BaseModel
from datetime import datetime
from typing import Optional


class MessageCreate(BaseModel):
    recipient_id: Optional[str] = None
    content: Optional[str] = None


class MessageOut(BaseModel):
    id: str
    sender_id: str
    recipient_id: str
    content: str
    is_read: bool
    created_at: datetime

    class Config:
        from_attributes = True


class ConversationOut(BaseModel):
    user_id: str
    name: str
    username: str
    image: Optional[str] = None
    last_message: Optional[str] = None
    last_message_time: datetime
    unread_count: int = 0

    class Config:
        from_attributes = True


class UnreadCount(BaseModel):
    unread_count: int
