from sqlalchemy import Column, String, Integer, Boolean, ForeignKey, DateTime, Text, Enum as SQLEnum
from sqlalchemy.orm import relationship
import enum
from evaltrack.core.database import Base, new_id, utcnow

class MessageEvent(str, enum.Enum):
    DEADLINE_APPROACHING = "DEADLINE_APPROACHING"
    REVIEW_DUE = "REVIEW_DUE"
    FEEDBACK_REQUEST = "FEEDBACK_REQUEST"
    EVALUATION_COMPLETED = "EVALUATION_COMPLETED"
    NEW_ASSIGNMENT = "NEW_ASSIGNMENT"

class AutoMessageTrigger(Base):
    __tablename__ = "auto_message_triggers"

    id = Column(String(36), primary_key=True, default=new_id)
    event_name = Column(SQLEnum(MessageEvent, name="message_event"), nullable=False)
    message_template = Column(Text, nullable=False)
    is_active = Column(Boolean, nullable=False, default=True)
    days_before_event = Column(Integer)

class Notification(Base):
    __tablename__ = "notifications"

    id = Column(String(36), primary_key=True, default=new_id)
    recipient_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    actor_id = Column(String(36), ForeignKey("users.id"))  # None for system-originated
    message = Column(Text, nullable=False)
    link = Column(String)
    is_read = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), default=utcnow, index=True)

    recipient = relationship("User", foreign_keys=[recipient_id], back_populates="notifications")
    actor = relationship("User", foreign_keys=[actor_id])
