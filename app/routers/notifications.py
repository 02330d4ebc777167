"""In-app notifications."""
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.database import get_db
from app.dependencies import SessionContext, ensure_owner_or_admin, get_session_context, require_admin
from app.errors import NotFound
from app.models.records import Notification
from app.models.user import User
from app.schemas.base import MessageResponse
from app.schemas.records import BulkUpdateResponse, NotificationCreate, NotificationResponse
from app.services.notifications import add_notification, push_notification

router = APIRouter(prefix="/api/notifications", tags=["notifications"])


def _get_notification(db: Session, notification_id: int) -> Notification:
    n = db.query(Notification).filter(Notification.id == notification_id).first()
    if not n:
        raise NotFound("Notification not found")
    return n


@router.post("", response_model=NotificationResponse, status_code=201)
def create_notification(
    data: NotificationCreate,
    db: Session = Depends(get_db),
    session: SessionContext = Depends(require_admin),
):
    if not db.query(User.id).filter(User.id == data.user_id).first():
        raise NotFound("User not found")
    n = add_notification(db, data.user_id, data.title, data.message, data.type)
    db.commit()
    db.refresh(n)
    push_notification(n)
    return n


# Declared before /{user_id} routes so "read-all" is never taken for an id
@router.patch("/read-all", response_model=BulkUpdateResponse)
def mark_all_read(
    db: Session = Depends(get_db),
    session: SessionContext = Depends(get_session_context),
):
    updated = (
        db.query(Notification)
        .filter(Notification.user_id == session.user_id, Notification.read.is_(False))
        .update({Notification.read: True}, synchronize_session=False)
    )
    db.commit()
    return BulkUpdateResponse(message="All notifications marked as read", updated=updated)


@router.get("/{user_id}", response_model=list[NotificationResponse])
def list_notifications(
    user_id: int,
    db: Session = Depends(get_db),
    session: SessionContext = Depends(get_session_context),
):
    ensure_owner_or_admin(session, user_id)
    return (
        db.query(Notification)
        .filter(Notification.user_id == user_id)
        .order_by(Notification.created_at.desc(), Notification.id.desc())
        .all()
    )


@router.patch("/{notification_id}/read", response_model=NotificationResponse)
def mark_read(
    notification_id: int,
    db: Session = Depends(get_db),
    session: SessionContext = Depends(get_session_context),
):
    n = _get_notification(db, notification_id)
    ensure_owner_or_admin(session, n.user_id)
    n.read = True
    db.commit()
    db.refresh(n)
    return n


@router.delete("/{notification_id}", response_model=MessageResponse)
def delete_notification(
    notification_id: int,
    db: Session = Depends(get_db),
    session: SessionContext = Depends(get_session_context),
):
    n = _get_notification(db, notification_id)
    ensure_owner_or_admin(session, n.user_id)
    db.delete(n)
    db.commit()
    return MessageResponse(message="Notification deleted successfully")
