from evaltrack.schemas.auth import LoginRequest, LoginResponse, PasswordChange
from evaltrack.schemas.user import UserCreate, UserUpdate, UserResponse, AssignmentUpdate, BatchAssignmentUpdate
from evaltrack.schemas.goal import GoalCreate, GoalUpdate, GoalResponse
from evaltrack.schemas.evaluation import CriteriaCreate, CriteriaResponse, ScoreCreate, ScoreResponse
from evaltrack.schemas.employee import WorkOutputCreate, WorkOutputResponse, AttendanceCreate, AttendanceResponse
from evaltrack.schemas.notification import NotificationResponse, TriggerCreate, TriggerResponse
from evaltrack.schemas.admin import SystemSettingsSchema, SystemSettingsUpdateSchema, AuditLogResponse

__all__ = [
    "LoginRequest", "LoginResponse", "PasswordChange",
    "UserCreate", "UserUpdate", "UserResponse", "AssignmentUpdate", "BatchAssignmentUpdate",
    "GoalCreate", "GoalUpdate", "GoalResponse",
    "CriteriaCreate", "CriteriaResponse", "ScoreCreate", "ScoreResponse",
    "WorkOutputCreate", "WorkOutputResponse", "AttendanceCreate", "AttendanceResponse",
    "NotificationResponse", "TriggerCreate", "TriggerResponse",
    "SystemSettingsSchema", "SystemSettingsUpdateSchema", "AuditLogResponse",
]
