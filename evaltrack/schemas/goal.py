from pydantic import Field
from typing import Optional
from datetime import datetime
from evaltrack.models.goal import GoalStatus
from evaltrack.schemas.base import RequestSchema, ResponseSchema
from evaltrack.schemas.user import UserSummary

class GoalCreate(RequestSchema):
    title: str = Field(min_length=1)
    description: Optional[str] = None
    status: GoalStatus
    due_date: Optional[datetime] = None
    employee_id: str = Field(min_length=1)

class GoalUpdate(RequestSchema):
    title: Optional[str] = Field(default=None, min_length=1)
    description: Optional[str] = None
    status: Optional[GoalStatus] = None
    due_date: Optional[datetime] = None
    employee_id: Optional[str] = None

class GoalResponse(ResponseSchema):
    id: str
    title: str
    description: Optional[str] = None
    status: GoalStatus
    due_date: Optional[datetime] = None
    employee_id: str
    supervisor_id: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

class GoalDetailResponse(GoalResponse):
    employee: Optional[UserSummary] = None
    supervisor: Optional[UserSummary] = None
