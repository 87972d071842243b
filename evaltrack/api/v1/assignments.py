from fastapi import APIRouter, Depends
from sqlalchemy import update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from evaltrack.core.config import settings
from evaltrack.core.database import get_db
from evaltrack.core.exceptions import (
    AuthorizationDenied, InvalidReference, NotFound, UpstreamStoreError, ValidationError,
)
from evaltrack.core.logging_config import get_logger
from evaltrack.core.permissions import Caller, can_update_assignment
from evaltrack.models.user import User
from evaltrack.schemas.user import AssignmentUpdate, AssignmentResponse, BatchAssignmentUpdate
from evaltrack.services.audit_service import AuditService
from evaltrack.services.notification_service import NotificationService
from evaltrack.services.outbox import Outbox, get_outbox
from evaltrack.api.v1.dependencies import get_current_caller, get_current_admin

router = APIRouter()
logger = get_logger(__name__)


@router.post("/update", response_model=AssignmentResponse)
def update_assignment(
    assignment: AssignmentUpdate,
    db: Session = Depends(get_db),
    outbox: Outbox = Depends(get_outbox),
    caller: Caller = Depends(get_current_caller)
):
    """Set or clear one employee's supervisor."""
    if not can_update_assignment(caller, settings.RESTRICT_SINGLE_ASSIGNMENT_TO_ADMIN):
        raise AuthorizationDenied("Forbidden: Admin access required.")

    employee = db.get(User, assignment.employee_id)
    if employee is None:
        raise NotFound("Employee not found")

    supervisor = None
    if assignment.supervisor_id is not None:
        if assignment.supervisor_id == employee.id:
            raise ValidationError("An employee cannot be their own supervisor.")
        supervisor = db.get(User, assignment.supervisor_id)
        if supervisor is None:
            raise NotFound("Supervisor not found")

    previous_supervisor_id = employee.supervisor_id
    employee.supervisor_id = assignment.supervisor_id
    db.commit()
    db.refresh(employee)

    employee_id, new_supervisor_id = employee.id, employee.supervisor_id
    if previous_supervisor_id != new_supervisor_id:
        supervisor_name = supervisor.name if supervisor else None
        outbox.enqueue("supervisor notification", lambda s: NotificationService(s).notify_supervisor_changed(
            employee_id, caller.id, previous_supervisor_id, new_supervisor_id, supervisor_name))
    outbox.publish()
    logger.info(f"Supervisor of {employee_id} set to {new_supervisor_id} by {caller.id}")
    return employee


@router.post("/batch-update")
def batch_update_assignments(
    batch: BatchAssignmentUpdate,
    db: Session = Depends(get_db),
    outbox: Outbox = Depends(get_outbox),
    caller: Caller = Depends(get_current_admin)
):
    """
    Point many employees at one supervisor (or none) in a single statement.

    Either every listed employee is updated or none is. The outcome, success
    or failure, is written to the audit log.
    """
    employee_ids = list(dict.fromkeys(batch.employee_ids))
    supervisor_id = batch.supervisor_id

    def fail(error: Exception):
        db.rollback()
        message = error.message if isinstance(error, ValidationError) else str(error)
        outbox.discard()
        outbox.enqueue("batch assignment audit", lambda s: AuditService(s).log_batch_assignment(
            caller.id, employee_ids, supervisor_id, error=message))
        outbox.publish()

    try:
        supervisor = None
        if supervisor_id is not None:
            if supervisor_id in employee_ids:
                raise ValidationError("An employee cannot be their own supervisor.")
            supervisor = db.get(User, supervisor_id)
            if supervisor is None:
                raise InvalidReference("Invalid supervisor ID provided.")

        employees = db.query(User.id, User.supervisor_id).filter(User.id.in_(employee_ids)).all()
        previous = {row.id: row.supervisor_id for row in employees}
        missing = [employee_id for employee_id in employee_ids if employee_id not in previous]
        if missing:
            raise InvalidReference(f"Invalid employee ID(s): {', '.join(missing)}")

        result = db.execute(
            update(User).where(User.id.in_(employee_ids)).values(supervisor_id=supervisor_id)
        )
        db.commit()
        count = result.rowcount
    except ValidationError as e:
        fail(e)
        raise
    except SQLAlchemyError as e:
        logger.error("Batch assignment failed", exc_info=True)
        fail(e)
        raise UpstreamStoreError("Failed to update assignments.", error=str(e))

    outbox.enqueue("batch assignment audit", lambda s: AuditService(s).log_batch_assignment(
        caller.id, employee_ids, supervisor_id, count=count))
    supervisor_name = supervisor.name if supervisor else None
    for employee_id in employee_ids:
        previous_supervisor_id = previous[employee_id]
        if previous_supervisor_id == supervisor_id:
            continue
        outbox.enqueue(
            "supervisor notification",
            lambda s, employee_id=employee_id, previous_supervisor_id=previous_supervisor_id:
                NotificationService(s).notify_supervisor_changed(
                    employee_id, caller.id, previous_supervisor_id, supervisor_id, supervisor_name),
        )
    outbox.publish()

    logger.info(f"Batch assignment of {count} employee(s) to {supervisor_id} by {caller.id}")
    return {"message": f"Successfully updated {count} employee(s).", "count": count}
