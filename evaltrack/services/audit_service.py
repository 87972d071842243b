from typing import Optional, Dict, Any, List

from sqlalchemy.orm import Session

from evaltrack.models.system import AuditLog, AuditAction, GLOBAL_SETTINGS_ID


class AuditService:
    """
    Appends rows to the audit trail. Rows are never updated or deleted.

    Methods add and flush; committing is left to the caller (normally the
    Outbox, which commits each side effect on its own).
    """

    def __init__(self, db: Session):
        self.db = db

    def log(
        self,
        action: AuditAction,
        user_id: Optional[str] = None,
        target_type: Optional[str] = None,
        target_id: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> AuditLog:
        """
        Create an audit log entry.

        Args:
            action: The event kind
            user_id: Who acted; None for unauthenticated or system events
            target_type: Kind of record affected ("User", "SystemSetting", ...)
            target_id: Id of the record affected
            details: JSON-serialisable context
        """
        entry = AuditLog(
            action=action,
            user_id=user_id,
            target_type=target_type,
            target_id=target_id,
            details=details,
        )
        self.db.add(entry)
        self.db.flush()
        return entry

    def log_login_success(self, user_id: str, email: str) -> AuditLog:
        return self.log(AuditAction.AUTH_LOGIN_SUCCESS, user_id=user_id,
                        target_type="User", target_id=user_id, details={"email": email})

    def log_login_failure(self, email: Optional[str], reason: str, user_id: Optional[str] = None,
                          error: Optional[str] = None) -> AuditLog:
        details: Dict[str, Any] = {"email": email, "reason": reason}
        if error:
            details["error"] = error
        return self.log(AuditAction.AUTH_LOGIN_FAILURE, user_id=user_id,
                        target_type="User" if user_id else None, target_id=user_id, details=details)

    def log_password_change(self, user_id: str, success: bool, reason: Optional[str] = None) -> AuditLog:
        action = AuditAction.AUTH_PASSWORD_CHANGE_SUCCESS if success else AuditAction.AUTH_PASSWORD_CHANGE_FAILURE
        return self.log(action, user_id=user_id, target_type="User", target_id=user_id,
                        details={"reason": reason} if reason else None)

    def log_settings_update(self, user_id: str, changes: Dict[str, Dict[str, Any]]) -> AuditLog:
        return self.log(AuditAction.SYSTEM_SETTINGS_UPDATE, user_id=user_id,
                        target_type="SystemSetting", target_id=GLOBAL_SETTINGS_ID, details=changes)

    def log_backup(self, user_id: str, success: bool, filename: Optional[str] = None,
                   error: Optional[str] = None) -> AuditLog:
        if success:
            return self.log(AuditAction.DATA_BACKUP_SUCCESS, user_id=user_id, details={"filename": filename})
        return self.log(AuditAction.DATA_BACKUP_FAILURE, user_id=user_id, details={"error": error})

    def log_batch_assignment(self, user_id: str, employee_ids: List[str], supervisor_id: Optional[str],
                             count: Optional[int] = None, error: Optional[str] = None) -> AuditLog:
        if error is None:
            return self.log(
                AuditAction.BATCH_ASSIGNMENT_SUCCESS, user_id=user_id, target_type="User",
                details={"count": count, "employeeIds": employee_ids, "newSupervisorId": supervisor_id},
            )
        return self.log(
            AuditAction.BATCH_ASSIGNMENT_FAILURE, user_id=user_id, target_type="User",
            details={"error": error, "employeeIds": employee_ids, "newSupervisorId": supervisor_id},
        )

    def log_notifications_read(self, user_id: str, count: int, ids: Optional[List[str]] = None) -> AuditLog:
        details: Dict[str, Any] = {"markedAllAsRead": ids is None, "count": count}
        if ids is not None:
            details["ids"] = ids
        return self.log(AuditAction.NOTIFICATION_READ, user_id=user_id, details=details)

    def log_startup(self, version: str) -> AuditLog:
        return self.log(AuditAction.SYSTEM_STARTUP, details={"version": version})
