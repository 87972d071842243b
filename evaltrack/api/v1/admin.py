from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session
from typing import List, Optional
from evaltrack.core.config import settings
from evaltrack.core.database import get_db
from evaltrack.core.exceptions import UpstreamStoreError, ValidationError
from evaltrack.core.logging_config import get_logger
from evaltrack.core.permissions import Caller
from evaltrack.models.system import AuditAction, AuditLog
from evaltrack.models.user import User
from evaltrack.schemas.admin import AuditLogResponse, SystemSettingsSchema, SystemSettingsUpdateSchema
from evaltrack.schemas.user import UserSummary
from evaltrack.services.audit_service import AuditService
from evaltrack.services.backup_service import backup_filename, build_backup
from evaltrack.services.outbox import Outbox, get_outbox
from evaltrack.services.settings_service import apply_settings_update, get_settings
from evaltrack.api.v1.dependencies import get_current_admin

router = APIRouter()
logger = get_logger(__name__)


@router.get("/settings", response_model=SystemSettingsSchema)
def read_settings(
    db: Session = Depends(get_db),
    caller: Caller = Depends(get_current_admin)
):
    return get_settings(db)


@router.put("/settings", response_model=SystemSettingsSchema)
def update_settings(
    settings_in: SystemSettingsUpdateSchema,
    db: Session = Depends(get_db),
    outbox: Outbox = Depends(get_outbox),
    caller: Caller = Depends(get_current_admin)
):
    """
    Update the global settings.

    Only fields whose value actually changes are audited; a payload that
    matches what is stored writes no audit entry.
    """
    update_data = settings_in.model_dump(exclude_unset=True, exclude_none=True)
    if not update_data:
        raise ValidationError("No settings provided to update.")

    settings_row = get_settings(db)
    changes = apply_settings_update(settings_row, update_data)
    if changes:
        db.commit()
        db.refresh(settings_row)
        outbox.enqueue("settings audit", lambda s: AuditService(s).log_settings_update(caller.id, changes))
        outbox.publish()
        logger.info(f"Settings changed by {caller.id}: {sorted(changes)}")
    return settings_row


@router.get("/audit-logs", response_model=List[AuditLogResponse])
def list_audit_logs(
    action: Optional[AuditAction] = Query(default=None),
    db: Session = Depends(get_db),
    caller: Caller = Depends(get_current_admin)
):
    """Most recent audit entries, newest first, with the acting user when they still exist."""
    query = db.query(AuditLog)
    if action is not None:
        query = query.filter(AuditLog.action == action)
    entries = query.order_by(AuditLog.timestamp.desc()).limit(settings.AUDIT_LOG_PAGE_SIZE).all()

    user_ids = {entry.user_id for entry in entries if entry.user_id}
    users = {}
    if user_ids:
        users = {user.id: user for user in db.query(User).filter(User.id.in_(user_ids))}

    return [
        AuditLogResponse(
            id=entry.id,
            user_id=entry.user_id,
            user=UserSummary.model_validate(users[entry.user_id]) if entry.user_id in users else None,
            action=entry.action,
            target_type=entry.target_type,
            target_id=entry.target_id,
            details=entry.details,
            timestamp=entry.timestamp,
        )
        for entry in entries
    ]


@router.get("/backup")
def download_backup(
    db: Session = Depends(get_db),
    outbox: Outbox = Depends(get_outbox),
    caller: Caller = Depends(get_current_admin)
):
    """Full JSON export of the database, served as a file download."""
    filename = backup_filename()
    try:
        document = build_backup(db, filename)
    except Exception as e:
        db.rollback()
        logger.error("Backup failed", exc_info=True)
        outbox.enqueue("backup audit", lambda s: AuditService(s).log_backup(caller.id, success=False, error=str(e)))
        outbox.publish()
        raise UpstreamStoreError("Failed to generate backup.", error=str(e))

    outbox.enqueue("backup audit", lambda s: AuditService(s).log_backup(caller.id, success=True, filename=filename))
    outbox.publish()
    logger.info(f"Backup {filename} generated for {caller.id}")
    return JSONResponse(
        content=document,
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
