from datetime import datetime
from pydantic import BaseModel, EmailStr, Field
from typing import Optional

class UserCreate(BaseModel):
    name: str = Field(..., max_length=100)
    username: str = Field(..., max_length=50)
    email: EmailStr
    password: str


class UserUpdate(BaseModel):
    name: Optional[str] = Field(None, max_length=100)
    username: Optional[str] = Field(None, max_length=50)
    bio: Optional[str] = None
    image: Optional[str] = None


class UserSummary(BaseModel):
    id: str
    name: str
    username: str
    image: Optional[str] = None

    class Config:
        from_attributes = True


class UserOut(UserSummary):
    email: EmailStr
    bio: Optional[str] = None
    created_at: datetime

    class Config:
        from_attributes = True


class UserProfile(UserOut):
    follower_count: int = 0
    following_count: int = 0
    post_count: int = 0


class UserWithFollowers(UserSummary):
    """User row as listed by search and suggestions."""
    bio: Optional[str] = None
    follower_count: int = 0

    class Config:
        from_attributes = True
