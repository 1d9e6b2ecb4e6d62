import logging
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from app.core.config import CHAT_PAGE_SIZE, CONVERSATIONS_PAGE_SIZE
from app.core.security import get_current_user
from app.crud import message as crud
from app.db.models.user import User
from app.db.session import get_db
from app.schemas.common import Page, Pagination
from app.schemas.message import ConversationOut, MessageCreate, MessageOut, UnreadCount

logger = logging.getLogger(__name__)

router = APIRouter()


#get all conversations
@router.get("/conversations", response_model=Page[ConversationOut])
def get_conversations(
    page: int = Query(1, ge=1),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    conversations, total = crud.get_conversations(db, current_user.id, page, CONVERSATIONS_PAGE_SIZE)
    return {"data": conversations, "pagination": Pagination.build(total, page, CONVERSATIONS_PAGE_SIZE)}


# Get chat history; reading the thread marks the correspondent's messages as read
@router.get("/chat/{other_user_id}", response_model=Page[MessageOut])
def get_chat(
    other_user_id: str,
    page: int = Query(1, ge=1),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    messages, total = crud.get_chat(db, current_user.id, other_user_id, page, CHAT_PAGE_SIZE)
    try:
        crud.mark_thread_read(db, current_user.id, other_user_id)
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Database error marking chat with {other_user_id} as read: {str(e)}")
        raise HTTPException(500, "Failed to fetch messages")
    return {"data": messages, "pagination": Pagination.build(total, page, CHAT_PAGE_SIZE)}


@router.post("", response_model=MessageOut, status_code=status.HTTP_201_CREATED)
def send_message(
    message_in: MessageCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    content = (message_in.content or "").strip()
    if not content or not message_in.recipient_id:
        raise HTTPException(status_code=400, detail="Missing required fields")
    if message_in.recipient_id == current_user.id:
        raise HTTPException(status_code=400, detail="Cannot message yourself")

    recipient = db.query(User).filter(User.id == message_in.recipient_id).first()
    if not recipient:
        raise HTTPException(status_code=404, detail="User not found")

    try:
        message = crud.send_message(db, current_user.id, recipient.id, content)
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Database error sending message: {str(e)}")
        raise HTTPException(500, "Failed to send message")

    logger.info("User %s sent message %s", current_user.id, message.id)
    return message


@router.get("/unread/count", response_model=UnreadCount)
def get_unread_count(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    return {"unread_count": crud.count_unread(db, current_user.id)}
