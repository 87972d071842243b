from sqlalchemy import Column, String, ForeignKey, DateTime, Text, Enum as SQLEnum
from sqlalchemy.orm import relationship
import enum
from evaltrack.core.database import Base, new_id

class AttendanceStatus(str, enum.Enum):
    PRESENT = "PRESENT"
    ABSENT = "ABSENT"
    LATE = "LATE"
    ON_LEAVE = "ON_LEAVE"

class WorkOutput(Base):
    __tablename__ = "work_outputs"

    id = Column(String(36), primary_key=True, default=new_id)
    employee_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    title = Column(String, nullable=False)
    description = Column(Text)
    file_url = Column(String)
    submission_date = Column(DateTime(timezone=True), nullable=False)

    employee = relationship("User", back_populates="work_outputs")

class AttendanceRecord(Base):
    __tablename__ = "attendance_records"

    id = Column(String(36), primary_key=True, default=new_id)
    employee_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    date = Column(DateTime(timezone=True), nullable=False)
    status = Column(SQLEnum(AttendanceStatus, name="attendance_status"), nullable=False)
    notes = Column(Text)

    employee = relationship("User", back_populates="attendance_records")
