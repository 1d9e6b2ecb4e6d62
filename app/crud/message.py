"""Conversation aggregation over the flat messages table."""
from typing import List, Tuple
from sqlalchemy import and_, case, func, or_, select
from sqlalchemy.orm import Session, aliased
from app.crud.notification import add_notification
from app.db.models.message import Message
from app.db.models.user import User
from app.schemas.message import ConversationOut, MessageOut


def _between(user_id: str, other_user_id: str, model=Message):
    return or_(
        and_(model.sender_id == user_id, model.recipient_id == other_user_id),
        and_(model.sender_id == other_user_id, model.recipient_id == user_id),
    )


def get_conversations(db: Session, user_id: str, page: int, limit: int) -> Tuple[List[ConversationOut], int]:
    # --- One row per correspondent with the time of the latest message ---
    partner_id = case(
        (Message.sender_id == user_id, Message.recipient_id),
        else_=Message.sender_id,
    ).label("partner_id")
    partners = (
        db.query(
            partner_id,
            func.max(Message.created_at).label("last_message_time"),
        )
        .filter(or_(Message.sender_id == user_id, Message.recipient_id == user_id))
        .group_by("partner_id")
        .subquery()
    )

    latest = aliased(Message)
    last_message = (
        select(latest.content)
        .where(_between(user_id, partners.c.partner_id, latest))
        .order_by(latest.created_at.desc())
        .limit(1)
        .correlate(partners)
        .scalar_subquery()
    )

    unread = aliased(Message)
    unread_count = (
        select(func.count(unread.id))
        .where(
            unread.recipient_id == user_id,
            unread.sender_id == partners.c.partner_id,
            unread.is_read.is_(False),
        )
        .correlate(partners)
        .scalar_subquery()
    )

    rows = (
        db.query(
            User.id.label("user_id"),
            User.name,
            User.username,
            User.image,
            last_message.label("last_message"),
            partners.c.last_message_time,
            unread_count.label("unread_count"),
        )
        .join(partners, User.id == partners.c.partner_id)
        .order_by(partners.c.last_message_time.desc())
        .offset((page - 1) * limit)
        .limit(limit)
        .all()
    )
    total = db.query(func.count()).select_from(partners).scalar()
    return [ConversationOut.model_validate(row) for row in rows], total


def get_chat(db: Session, user_id: str, other_user_id: str, page: int, limit: int) -> Tuple[List[MessageOut], int]:
    """Return one page of the thread in chronological order, newest page first."""
    messages = (
        db.query(Message)
        .filter(_between(user_id, other_user_id))
        .order_by(Message.created_at.desc())
        .offset((page - 1) * limit)
        .limit(limit)
        .all()
    )
    total = db.query(func.count(Message.id)).filter(_between(user_id, other_user_id)).scalar()
    return [MessageOut.model_validate(m) for m in reversed(messages)], total


def mark_thread_read(db: Session, user_id: str, other_user_id: str) -> int:
    updated = (
        db.query(Message)
        .filter(
            Message.recipient_id == user_id,
            Message.sender_id == other_user_id,
            Message.is_read.is_(False),
        )
        .update({Message.is_read: True}, synchronize_session=False)
    )
    db.commit()
    return updated


def send_message(db: Session, sender_id: str, recipient_id: str, content: str) -> Message:
    """Insert the message and the recipient's notification in one commit."""
    message = Message(sender_id=sender_id, recipient_id=recipient_id, content=content)
    db.add(message)
    add_notification(db, user_id=recipient_id, type="message", triggered_by=sender_id)
    db.commit()
    db.refresh(message)
    return message


def count_unread(db: Session, user_id: str) -> int:
    return (
        db.query(func.count(Message.id))
        .filter(Message.recipient_id == user_id, Message.is_read.is_(False))
        .scalar()
    )
