from typing import List, Optional, Tuple
from sqlalchemy import func
from sqlalchemy.orm import Session
from app.db.models.notifications import Notification
from app.db.models.post import Post
from app.db.models.user import User
from app.schemas.notifications import NotificationOut


def add_notification(
    db: Session,
    user_id: str,
    type: str,
    triggered_by: str,
    post_id: Optional[str] = None,
) -> Optional[Notification]:
    """Stage a notification in the caller's transaction; nothing is written for self-triggered actions."""
    if user_id == triggered_by:
        return None
    notification = Notification(
        user_id=user_id,
        type=type,
        triggered_by=triggered_by,
        post_id=post_id,
    )
    db.add(notification)
    return notification


def get_notifications(db: Session, user_id: str, page: int, limit: int) -> Tuple[List[NotificationOut], int]:
    rows = (
        db.query(
            Notification.id,
            Notification.type,
            Notification.triggered_by,
            Notification.post_id,
            Notification.is_read,
            Notification.created_at,
            User.name,
            User.username,
            User.image,
            Post.content.label("post_content"),
        )
        .join(User, Notification.triggered_by == User.id)
        .outerjoin(Post, Notification.post_id == Post.id)
        .filter(Notification.user_id == user_id)
        .order_by(Notification.created_at.desc())
        .offset((page - 1) * limit)
        .limit(limit)
        .all()
    )
    total = db.query(func.count(Notification.id)).filter(Notification.user_id == user_id).scalar()
    return [NotificationOut.model_validate(row) for row in rows], total


def count_unread(db: Session, user_id: str) -> int:
    return (
        db.query(func.count(Notification.id))
        .filter(Notification.user_id == user_id, Notification.is_read.is_(False))
        .scalar()
    )


def mark_all_read(db: Session, user_id: str) -> int:
    updated = (
        db.query(Notification)
        .filter(Notification.user_id == user_id, Notification.is_read.is_(False))
        .update({Notification.is_read: True}, synchronize_session=False)
    )
    db.commit()
    return updated
