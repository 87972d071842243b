from pydantic import EmailStr, Field, field_validator
from typing import Optional, List
from datetime import date, datetime
from evaltrack.models.user import UserRole
from evaltrack.schemas.base import RequestSchema, ResponseSchema, blank_to_none

class UserSummary(ResponseSchema):
    id: str
    name: str
    email: Optional[str] = None
    avatar_url: Optional[str] = None

class UserResponse(ResponseSchema):
    id: str
    name: str
    email: str
    department: str
    position: str
    hire_date: date
    avatar_url: Optional[str] = None
    role: UserRole
    supervisor_id: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

class UserDetailResponse(UserResponse):
    supervisor: Optional[UserSummary] = None
    direct_reports: List[UserSummary] = []

class UserCreate(RequestSchema):
    name: str = Field(min_length=1)
    email: EmailStr
    password: str
    department: str = Field(min_length=1)
    position: str = Field(min_length=1)
    hire_date: date
    avatar_url: Optional[str] = None
    role: UserRole = UserRole.EMPLOYEE
    supervisor_id: Optional[str] = None

    @field_validator("supervisor_id", mode="before")
    @classmethod
    def normalize_supervisor(cls, value):
        return blank_to_none(value)

class UserUpdate(RequestSchema):
    name: Optional[str] = Field(default=None, min_length=1)
    email: Optional[EmailStr] = None
    department: Optional[str] = Field(default=None, min_length=1)
    position: Optional[str] = Field(default=None, min_length=1)
    hire_date: Optional[date] = None
    avatar_url: Optional[str] = None
    role: Optional[UserRole] = None
    supervisor_id: Optional[str] = None

    @field_validator("supervisor_id", mode="before")
    @classmethod
    def normalize_supervisor(cls, value):
        return blank_to_none(value)

class AssignmentUpdate(RequestSchema):
    employee_id: str = Field(min_length=1)
    supervisor_id: Optional[str] = None

    @field_validator("supervisor_id", mode="before")
    @classmethod
    def normalize_supervisor(cls, value):
        return blank_to_none(value)

class BatchAssignmentUpdate(RequestSchema):
    employee_ids: List[str] = Field(min_length=1)
    supervisor_id: Optional[str] = None

    @field_validator("supervisor_id", mode="before")
    @classmethod
    def normalize_supervisor(cls, value):
        return blank_to_none(value)

class AssignmentResponse(UserResponse):
    supervisor: Optional[UserSummary] = None
