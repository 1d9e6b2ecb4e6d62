import logging
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from app.core.config import NOTIFICATIONS_PAGE_SIZE
from app.core.security import get_current_user
from app.crud import notification as crud
from app.db.models.notifications import Notification
from app.db.models.user import User
from app.db.session import get_db
from app.schemas.common import Page, Pagination, SuccessResponse
from app.schemas.message import UnreadCount
from app.schemas.notifications import MarkAllReadResult, NotificationOut

logger = logging.getLogger(__name__)

router = APIRouter()


def _get_own_notification(db: Session, notification_id: str, user: User) -> Notification:
    notification = db.query(Notification)\
        .filter(Notification.id == notification_id)\
        .first()
    if not notification:
        raise HTTPException(status_code=404, detail="Notification not found")
    if notification.user_id != user.id:
        raise HTTPException(status_code=403, detail="Not authorized")
    return notification


# Get notifications
@router.get("", response_model=Page[NotificationOut])
def get_notifications(
    page: int = Query(1, ge=1),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    notifications, total = crud.get_notifications(db, current_user.id, page, NOTIFICATIONS_PAGE_SIZE)
    return {"data": notifications, "pagination": Pagination.build(total, page, NOTIFICATIONS_PAGE_SIZE)}


@router.get("/unread/count", response_model=UnreadCount)
def get_unread_count(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    return {"unread_count": crud.count_unread(db, current_user.id)}


# Declared before /{notification_id}/read so "mark-all" is not taken for an id
@router.patch("/mark-all/read", response_model=MarkAllReadResult)
def mark_all_read(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    try:
        updated = crud.mark_all_read(db, current_user.id)
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Database error marking notifications read: {str(e)}")
        raise HTTPException(500, "Failed to mark all as read")
    return {"updated": updated}


# Mark notification as read
@router.patch("/{notification_id}/read", response_model=SuccessResponse)
def mark_notification_read(
    notification_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    notification = _get_own_notification(db, notification_id, current_user)
    try:
        notification.is_read = True
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Database error updating notification {notification_id}: {str(e)}")
        raise HTTPException(500, "Failed to update notification")
    return {"success": True}


@router.delete("/{notification_id}", response_model=SuccessResponse)
def delete_notification(
    notification_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    notification = _get_own_notification(db, notification_id, current_user)
    try:
        db.delete(notification)
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Database error deleting notification {notification_id}: {str(e)}")
        raise HTTPException(500, "Failed to delete notification")
    return {"success": True}
