from sqlalchemy import Column, String, ForeignKey, DateTime, Text, Enum as SQLEnum
from sqlalchemy.orm import relationship
import enum
from evaltrack.core.database import Base, new_id, utcnow

class GoalStatus(str, enum.Enum):
    NOT_STARTED = "NOT_STARTED"
    IN_PROGRESS = "IN_PROGRESS"
    COMPLETED = "COMPLETED"
    ON_HOLD = "ON_HOLD"
    CANCELLED = "CANCELLED"

class Goal(Base):
    __tablename__ = "goals"

    id = Column(String(36), primary_key=True, default=new_id)
    title = Column(String, nullable=False)
    description = Column(Text)
    status = Column(SQLEnum(GoalStatus, name="goal_status"), nullable=False, default=GoalStatus.NOT_STARTED)
    due_date = Column(DateTime(timezone=True))
    employee_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    # Copied from the employee's supervisor when the goal is created
    supervisor_id = Column(String(36), ForeignKey("users.id"), index=True)
    created_at = Column(DateTime(timezone=True), default=utcnow)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)

    employee = relationship("User", foreign_keys=[employee_id], back_populates="goals")
    supervisor = relationship("User", foreign_keys=[supervisor_id])
