from datetime import datetime
from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, Table
from sqlalchemy.orm import relationship
from app.db.base import Base
from app.db.models.user import generate_id

HASHTAG_MAX_LENGTH = 100

# Join table between posts and the hashtags extracted from their content
post_hashtags = Table(
    "post_hashtags",
    Base.metadata,
    Column("post_id", String(36), ForeignKey("posts.id", ondelete="CASCADE"), primary_key=True),
    Column("hashtag_id", String(36), ForeignKey("hashtags.id", ondelete="CASCADE"), primary_key=True),
)


class Hashtag(Base):
    __tablename__ = "hashtags"

    id = Column(String(36), primary_key=True, default=generate_id)
    tag = Column(String(HASHTAG_MAX_LENGTH), unique=True, index=True, nullable=False)
    # Denormalized, kept in sync by post create/delete
    post_count = Column(Integer, default=0, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow)

    posts = relationship("Post", secondary=post_hashtags, back_populates="hashtags")
