from sqlalchemy import Column, String, Boolean, DateTime, JSON, Enum as SQLEnum
import enum
from evaltrack.core.database import Base, new_id, utcnow

GLOBAL_SETTINGS_ID = "global_settings"

class AuditAction(str, enum.Enum):
    AUTH_LOGIN_SUCCESS = "AUTH_LOGIN_SUCCESS"
    AUTH_LOGIN_FAILURE = "AUTH_LOGIN_FAILURE"
    AUTH_PASSWORD_CHANGE_SUCCESS = "AUTH_PASSWORD_CHANGE_SUCCESS"
    AUTH_PASSWORD_CHANGE_FAILURE = "AUTH_PASSWORD_CHANGE_FAILURE"
    SYSTEM_SETTINGS_UPDATE = "SYSTEM_SETTINGS_UPDATE"
    DATA_BACKUP_SUCCESS = "DATA_BACKUP_SUCCESS"
    DATA_BACKUP_FAILURE = "DATA_BACKUP_FAILURE"
    BATCH_ASSIGNMENT_SUCCESS = "BATCH_ASSIGNMENT_SUCCESS"
    BATCH_ASSIGNMENT_FAILURE = "BATCH_ASSIGNMENT_FAILURE"
    NOTIFICATION_READ = "NOTIFICATION_READ"
    SYSTEM_STARTUP = "SYSTEM_STARTUP"

class SystemSetting(Base):
    __tablename__ = "system_settings"

    id = Column(String, primary_key=True, default=GLOBAL_SETTINGS_ID)
    app_name = Column(String, nullable=False, default="EvalTrack")
    system_theme = Column(String, nullable=False, default="system")  # light, dark, system
    maintenance_mode = Column(Boolean, nullable=False, default=False)
    notifications_enabled = Column(Boolean, nullable=False, default=True)
    email_notifications = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), default=utcnow)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)

class AuditLog(Base):
    __tablename__ = "audit_logs"

    id = Column(String(36), primary_key=True, default=new_id)
    # No foreign key: audit rows outlive the users they mention
    user_id = Column(String(36), index=True)
    action = Column(SQLEnum(AuditAction, name="audit_action"), nullable=False, index=True)
    target_type = Column(String)
    target_id = Column(String)
    details = Column(JSON)
    timestamp = Column(DateTime(timezone=True), default=utcnow, index=True)
