from evaltrack.models.user import User, UserRole
from evaltrack.models.goal import Goal, GoalStatus
from evaltrack.models.evaluation import EvaluationCriteria, PerformanceScore
from evaltrack.models.employee import WorkOutput, AttendanceRecord, AttendanceStatus
from evaltrack.models.notification import Notification, AutoMessageTrigger, MessageEvent
from evaltrack.models.system import SystemSetting, AuditLog, AuditAction, GLOBAL_SETTINGS_ID

__all__ = [
    "User", "UserRole",
    "Goal", "GoalStatus",
    "EvaluationCriteria", "PerformanceScore",
    "WorkOutput", "AttendanceRecord", "AttendanceStatus",
    "Notification", "AutoMessageTrigger", "MessageEvent",
    "SystemSetting", "AuditLog", "AuditAction", "GLOBAL_SETTINGS_ID",
]
