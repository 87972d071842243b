from typing import Optional, Any
from datetime import datetime
from evaltrack.models.system import AuditAction
from evaltrack.schemas.base import RequestSchema, ResponseSchema
from evaltrack.schemas.user import UserSummary

class SystemSettingsSchema(ResponseSchema):
    id: str
    app_name: str
    system_theme: str
    maintenance_mode: bool
    notifications_enabled: bool
    email_notifications: bool
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

class SystemSettingsUpdateSchema(RequestSchema):
    app_name: Optional[str] = None
    system_theme: Optional[str] = None
    maintenance_mode: Optional[bool] = None
    notifications_enabled: Optional[bool] = None
    email_notifications: Optional[bool] = None

class AuditLogResponse(ResponseSchema):
    id: str
    user_id: Optional[str] = None
    user: Optional[UserSummary] = None
    action: AuditAction
    target_type: Optional[str] = None
    target_id: Optional[str] = None
    details: Optional[Any] = None
    timestamp: datetime
