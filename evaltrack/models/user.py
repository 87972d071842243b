from sqlalchemy import Column, String, ForeignKey, DateTime, Date, Enum as SQLEnum
from sqlalchemy.orm import relationship
import enum
from evaltrack.core.database import Base, new_id, utcnow

class UserRole(str, enum.Enum):
    ADMIN = "ADMIN"
    SUPERVISOR = "SUPERVISOR"
    EMPLOYEE = "EMPLOYEE"

class User(Base):
    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=new_id)
    name = Column(String, nullable=False)
    email = Column(String, unique=True, index=True, nullable=False)
    password = Column(String)  # bcrypt hash
    department = Column(String, nullable=False)
    position = Column(String, nullable=False)
    hire_date = Column(Date, nullable=False)
    avatar_url = Column(String)
    role = Column(SQLEnum(UserRole, name="user_role"), nullable=False, default=UserRole.EMPLOYEE)
    supervisor_id = Column(String(36), ForeignKey("users.id"), index=True)
    created_at = Column(DateTime(timezone=True), default=utcnow)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)

    supervisor = relationship("User", remote_side=[id], back_populates="direct_reports")
    direct_reports = relationship("User", back_populates="supervisor")

    # Records owned by the user go with them; references *to* them are nulled by the delete route
    goals = relationship(
        "Goal", foreign_keys="Goal.employee_id", back_populates="employee",
        cascade="all, delete-orphan",
    )
    scores_received = relationship(
        "PerformanceScore", foreign_keys="PerformanceScore.employee_id", back_populates="employee",
        cascade="all, delete-orphan",
    )
    work_outputs = relationship("WorkOutput", back_populates="employee", cascade="all, delete-orphan")
    attendance_records = relationship("AttendanceRecord", back_populates="employee", cascade="all, delete-orphan")
    notifications = relationship(
        "Notification", foreign_keys="Notification.recipient_id", back_populates="recipient",
        cascade="all, delete-orphan",
    )
