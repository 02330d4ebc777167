"""In-app notifications: persist, then push to the owner's realtime room."""
from sqlalchemy.orm import Session

from app.models.records import Notification, NotificationType
from app.services.realtime import hub


def notification_payload(n: Notification) -> dict:
    return {
        "id": n.id,
        "userId": n.user_id,
        "title": n.title,
        "message": n.message,
        "type": n.type.value,
        "read": n.read,
        "createdAt": n.created_at.isoformat() if n.created_at else None,
    }


def add_notification(
    db: Session,
    user_id: int,
    title: str,
    message: str,
    type: NotificationType = NotificationType.info,
) -> Notification:
    """Stage a notification in the caller's transaction (flushed, not committed)."""
    n = Notification(user_id=user_id, title=title, message=message, type=type, read=False)
    db.add(n)
    db.flush()
    return n


def push_notification(n: Notification) -> int:
    """Call after commit. Returns how many live connections were targeted."""
    return hub.publish(n.user_id, "notification", notification_payload(n))
