from pydantic import Field, StrictInt
from typing import Annotated, Optional
from datetime import datetime
from evaltrack.schemas.base import RequestSchema, ResponseSchema
from evaltrack.schemas.user import UserSummary

# Integer 1-5; floats, numeric strings and booleans are rejected
ScoreValue = Annotated[StrictInt, Field(ge=1, le=5)]

class CriteriaCreate(RequestSchema):
    name: str = Field(min_length=1)
    description: str = Field(min_length=1)
    weight: Optional[float] = None

class CriteriaUpdate(RequestSchema):
    name: Optional[str] = Field(default=None, min_length=1)
    description: Optional[str] = Field(default=None, min_length=1)
    weight: Optional[float] = None

class CriteriaResponse(ResponseSchema):
    id: str
    name: str
    description: str
    weight: Optional[float] = None

class CriteriaSummary(ResponseSchema):
    id: str
    name: str

class ScoreCreate(RequestSchema):
    employee_id: str = Field(min_length=1)
    criteria_id: str = Field(min_length=1)
    score: ScoreValue
    comments: Optional[str] = None
    evaluation_date: datetime
    evaluator_id: str = Field(min_length=1)

class ScoreResponse(ResponseSchema):
    id: str
    employee_id: str
    criteria_id: str
    score: int
    comments: Optional[str] = None
    evaluation_date: datetime
    evaluator_id: Optional[str] = None

class ScoreDetailResponse(ScoreResponse):
    employee: Optional[UserSummary] = None
    criteria: Optional[CriteriaSummary] = None
    evaluator: Optional[UserSummary] = None
