from pydantic import Field
from typing import Optional
from datetime import datetime
from evaltrack.models.employee import AttendanceStatus
from evaltrack.schemas.base import RequestSchema, ResponseSchema
from evaltrack.schemas.user import UserSummary

class WorkOutputCreate(RequestSchema):
    employee_id: str = Field(min_length=1)
    title: str = Field(min_length=1)
    description: Optional[str] = None
    file_url: Optional[str] = None
    submission_date: datetime

class WorkOutputUpdate(RequestSchema):
    title: Optional[str] = Field(default=None, min_length=1)
    description: Optional[str] = None
    file_url: Optional[str] = None
    submission_date: Optional[datetime] = None

class WorkOutputResponse(ResponseSchema):
    id: str
    employee_id: str
    title: str
    description: Optional[str] = None
    file_url: Optional[str] = None
    submission_date: datetime
    employee: Optional[UserSummary] = None

class AttendanceCreate(RequestSchema):
    employee_id: str = Field(min_length=1)
    date: datetime
    status: AttendanceStatus
    notes: Optional[str] = None

class AttendanceUpdate(RequestSchema):
    employee_id: Optional[str] = None
    date: Optional[datetime] = None
    status: Optional[AttendanceStatus] = None
    notes: Optional[str] = None

class AttendanceResponse(ResponseSchema):
    id: str
    employee_id: str
    date: datetime
    status: AttendanceStatus
    notes: Optional[str] = None
    employee: Optional[UserSummary] = None
