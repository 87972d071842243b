from fastapi import APIRouter, Body, Depends, Query
from sqlalchemy.orm import Session, joinedload
from typing import List, Optional
from evaltrack.core.config import settings
from evaltrack.core.database import get_db
from evaltrack.core.logging_config import get_logger
from evaltrack.core.permissions import Caller
from evaltrack.models.notification import Notification
from evaltrack.schemas.notification import MarkAsRead, NotificationResponse
from evaltrack.services.audit_service import AuditService
from evaltrack.services.outbox import Outbox, get_outbox
from evaltrack.api.v1.dependencies import get_current_caller

router = APIRouter()
logger = get_logger(__name__)


@router.get("", response_model=List[NotificationResponse])
def list_notifications(
    all_notifications: bool = Query(default=False, alias="all"),
    db: Session = Depends(get_db),
    caller: Caller = Depends(get_current_caller)
):
    """The caller's notifications, newest first. Without ``all=true`` only the latest page is returned."""
    query = db.query(Notification).options(joinedload(Notification.actor)).filter(
        Notification.recipient_id == caller.id
    ).order_by(Notification.created_at.desc())
    if not all_notifications:
        query = query.limit(settings.NOTIFICATION_PAGE_SIZE)
    return query.all()


@router.post("/mark-as-read")
def mark_as_read(
    payload: Optional[MarkAsRead] = Body(default=None),
    db: Session = Depends(get_db),
    outbox: Outbox = Depends(get_outbox),
    caller: Caller = Depends(get_current_caller)
):
    """
    Mark the caller's unread notifications as read.

    With ``{"ids": [...]}`` only those notifications are marked, and only if
    they belong to the caller.
    """
    ids = payload.ids if payload is not None else None

    query = db.query(Notification).filter(
        Notification.recipient_id == caller.id,
        Notification.is_read.is_(False),
    )
    if ids is not None:
        query = query.filter(Notification.id.in_(ids))
    count = query.update({Notification.is_read: True}, synchronize_session=False)
    db.commit()

    outbox.enqueue("notification read audit", lambda s: AuditService(s).log_notifications_read(caller.id, count, ids))
    outbox.publish()
    return {"message": f"{count} notification(s) marked as read.", "count": count}
