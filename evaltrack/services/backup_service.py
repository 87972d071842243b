"""
Full-data JSON export for administrators.
"""
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Type

from pydantic import BaseModel
from sqlalchemy.orm import Session

from evaltrack.models import (
    User, Goal, PerformanceScore, EvaluationCriteria, WorkOutput,
    AttendanceRecord, SystemSetting, AutoMessageTrigger,
)
from evaltrack.schemas.admin import SystemSettingsSchema
from evaltrack.schemas.employee import AttendanceResponse, WorkOutputResponse
from evaltrack.schemas.evaluation import CriteriaResponse, ScoreResponse
from evaltrack.schemas.goal import GoalResponse
from evaltrack.schemas.notification import TriggerResponse
from evaltrack.schemas.user import UserResponse

# section name -> (model, schema); UserResponse has no password field
BACKUP_SECTIONS = (
    ("users", User, UserResponse),
    ("goals", Goal, GoalResponse),
    ("performanceScores", PerformanceScore, ScoreResponse),
    ("evaluationCriteria", EvaluationCriteria, CriteriaResponse),
    ("workOutputs", WorkOutput, WorkOutputResponse),
    ("attendanceRecords", AttendanceRecord, AttendanceResponse),
    ("systemSettings", SystemSetting, SystemSettingsSchema),
    ("autoMessageTriggers", AutoMessageTrigger, TriggerResponse),
)

# Nested relationship fields some response schemas carry; a snapshot stores ids only
_NESTED_FIELDS = {"employee", "supervisor", "evaluator", "criteria"}


def backup_filename(now: Optional[datetime] = None) -> str:
    now = now or datetime.now(timezone.utc)
    return f"evaltrack-backup-{now.strftime('%Y%m%dT%H%M%SZ')}.json"


def _dump(rows: List[Any], schema: Type[BaseModel]) -> List[Dict[str, Any]]:
    exclude = _NESTED_FIELDS & set(schema.model_fields)
    return [
        schema.model_validate(row).model_dump(mode="json", by_alias=True, exclude=exclude)
        for row in rows
    ]


def build_backup(db: Session, filename: str) -> Dict[str, Any]:
    """Snapshot every domain table into one JSON-ready document."""
    document: Dict[str, Any] = {
        "filename": filename,
        "generatedAt": datetime.now(timezone.utc).isoformat(),
    }
    for section, model, schema in BACKUP_SECTIONS:
        document[section] = _dump(db.query(model).all(), schema)
    return document
