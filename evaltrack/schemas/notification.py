from pydantic import Field
from typing import Optional, List
from datetime import datetime
from evaltrack.models.notification import MessageEvent
from evaltrack.schemas.base import RequestSchema, ResponseSchema

class ActorSummary(ResponseSchema):
    name: str
    avatar_url: Optional[str] = None

class NotificationResponse(ResponseSchema):
    id: str
    recipient_id: str
    actor_id: Optional[str] = None
    actor: Optional[ActorSummary] = None
    message: str
    link: Optional[str] = None
    is_read: bool
    created_at: datetime

class MarkAsRead(RequestSchema):
    # None marks every unread notification of the caller
    ids: Optional[List[str]] = None

class TriggerCreate(RequestSchema):
    event_name: MessageEvent
    message_template: str = Field(min_length=1)
    is_active: bool = True
    days_before_event: Optional[int] = None

class TriggerUpdate(RequestSchema):
    event_name: Optional[MessageEvent] = None
    message_template: Optional[str] = Field(default=None, min_length=1)
    is_active: Optional[bool] = None
    days_before_event: Optional[int] = None

class TriggerResponse(ResponseSchema):
    id: str
    event_name: MessageEvent
    message_template: str
    is_active: bool
    days_before_event: Optional[int] = None
