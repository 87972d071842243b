from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session, joinedload
from typing import List
from evaltrack.core.database import get_db
from evaltrack.core.exceptions import AuthorizationDenied, InvalidReference, NotFound
from evaltrack.core.logging_config import get_logger
from evaltrack.core.permissions import Caller, can_write_employee_record
from evaltrack.models.employee import AttendanceRecord, WorkOutput
from evaltrack.models.user import User
from evaltrack.schemas.employee import (
    AttendanceCreate, AttendanceUpdate, AttendanceResponse,
    WorkOutputCreate, WorkOutputUpdate, WorkOutputResponse,
)
from evaltrack.api.v1.dependencies import get_current_caller

work_outputs_router = APIRouter()
attendance_router = APIRouter()
logger = get_logger(__name__)


def _check_write(db: Session, caller: Caller, employee_id: str, record_kind: str) -> None:
    if not can_write_employee_record(caller, employee_id):
        raise AuthorizationDenied(f"Forbidden: You can only manage your own {record_kind}.")
    if db.get(User, employee_id) is None:
        raise InvalidReference("Invalid employee ID provided.")


# Work outputs

@work_outputs_router.get("", response_model=List[WorkOutputResponse])
def list_work_outputs(db: Session = Depends(get_db)):
    return db.query(WorkOutput).options(joinedload(WorkOutput.employee)).order_by(
        WorkOutput.submission_date.desc()
    ).all()


@work_outputs_router.post("", response_model=WorkOutputResponse, status_code=status.HTTP_201_CREATED)
def create_work_output(
    work_output_in: WorkOutputCreate,
    db: Session = Depends(get_db),
    caller: Caller = Depends(get_current_caller)
):
    _check_write(db, caller, work_output_in.employee_id, "work outputs")
    work_output = WorkOutput(**work_output_in.model_dump())
    db.add(work_output)
    db.commit()
    db.refresh(work_output)
    return work_output


@work_outputs_router.get("/{work_output_id}", response_model=WorkOutputResponse)
def get_work_output(work_output_id: str, db: Session = Depends(get_db)):
    work_output = db.get(WorkOutput, work_output_id)
    if work_output is None:
        raise NotFound("Work output not found")
    return work_output


@work_outputs_router.put("/{work_output_id}", response_model=WorkOutputResponse)
def update_work_output(
    work_output_id: str,
    work_output_update: WorkOutputUpdate,
    db: Session = Depends(get_db),
    caller: Caller = Depends(get_current_caller)
):
    work_output = db.get(WorkOutput, work_output_id)
    if work_output is None:
        raise NotFound("Work output not found")
    _check_write(db, caller, work_output.employee_id, "work outputs")

    update_data = work_output_update.model_dump(exclude_unset=True)
    for field, value in update_data.items():
        if value is None and field in ("title", "submission_date"):
            continue
        setattr(work_output, field, value)

    db.commit()
    db.refresh(work_output)
    return work_output


@work_outputs_router.delete("/{work_output_id}")
def delete_work_output(
    work_output_id: str,
    db: Session = Depends(get_db),
    caller: Caller = Depends(get_current_caller)
):
    work_output = db.get(WorkOutput, work_output_id)
    if work_output is None:
        raise NotFound("Work output not found")
    if not can_write_employee_record(caller, work_output.employee_id):
        raise AuthorizationDenied("Forbidden: You can only manage your own work outputs.")
    db.delete(work_output)
    db.commit()
    return {"message": "Work output deleted successfully"}


# Attendance records

@attendance_router.get("", response_model=List[AttendanceResponse])
def list_attendance_records(db: Session = Depends(get_db)):
    return db.query(AttendanceRecord).options(joinedload(AttendanceRecord.employee)).order_by(
        AttendanceRecord.date.desc()
    ).all()


@attendance_router.post("", response_model=AttendanceResponse, status_code=status.HTTP_201_CREATED)
def create_attendance_record(
    record_in: AttendanceCreate,
    db: Session = Depends(get_db),
    caller: Caller = Depends(get_current_caller)
):
    _check_write(db, caller, record_in.employee_id, "attendance records")
    record = AttendanceRecord(**record_in.model_dump())
    db.add(record)
    db.commit()
    db.refresh(record)
    return record


@attendance_router.get("/{record_id}", response_model=AttendanceResponse)
def get_attendance_record(record_id: str, db: Session = Depends(get_db)):
    record = db.get(AttendanceRecord, record_id)
    if record is None:
        raise NotFound("Attendance record not found")
    return record


@attendance_router.put("/{record_id}", response_model=AttendanceResponse)
def update_attendance_record(
    record_id: str,
    record_update: AttendanceUpdate,
    db: Session = Depends(get_db),
    caller: Caller = Depends(get_current_caller)
):
    record = db.get(AttendanceRecord, record_id)
    if record is None:
        raise NotFound("Attendance record not found")
    _check_write(db, caller, record.employee_id, "attendance records")

    update_data = record_update.model_dump(exclude_unset=True)
    new_employee_id = update_data.pop("employee_id", None)
    if new_employee_id and new_employee_id != record.employee_id:
        _check_write(db, caller, new_employee_id, "attendance records")
        record.employee_id = new_employee_id

    for field, value in update_data.items():
        if value is None and field != "notes":
            continue
        setattr(record, field, value)

    db.commit()
    db.refresh(record)
    return record


@attendance_router.delete("/{record_id}")
def delete_attendance_record(
    record_id: str,
    db: Session = Depends(get_db),
    caller: Caller = Depends(get_current_caller)
):
    record = db.get(AttendanceRecord, record_id)
    if record is None:
        raise NotFound("Attendance record not found")
    if not can_write_employee_record(caller, record.employee_id):
        raise AuthorizationDenied("Forbidden: You can only manage your own attendance records.")
    db.delete(record)
    db.commit()
    return {"message": "Attendance record deleted successfully"}
