from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session, joinedload
from typing import List, Optional
from evaltrack.core.database import get_db
from evaltrack.core.exceptions import AuthorizationDenied, InvalidReference, NotFound
from evaltrack.core.logging_config import get_logger
from evaltrack.core.permissions import (
    Caller, can_access_goal, can_create_goal, can_reassign_goal,
    goal_supervisor_for, scope_goal_listing,
)
from evaltrack.models.goal import Goal
from evaltrack.models.user import User
from evaltrack.schemas.goal import GoalCreate, GoalUpdate, GoalResponse, GoalDetailResponse
from evaltrack.services.notification_service import NotificationService
from evaltrack.services.outbox import Outbox, get_outbox
from evaltrack.api.v1.dependencies import get_current_caller

router = APIRouter()
logger = get_logger(__name__)


def _current_supervisor_id(db: Session, user_id: str) -> Optional[str]:
    user = db.get(User, user_id)
    return user.supervisor_id if user else None


def _get_accessible_goal(db: Session, goal_id: str, caller: Caller, verb: str) -> Goal:
    goal = db.get(Goal, goal_id)
    if goal is None:
        raise NotFound("Goal not found")
    if not can_access_goal(caller, goal.employee_id, _current_supervisor_id(db, goal.employee_id)):
        logger.warning(f"Caller {caller.id} ({caller.role.value}) denied {verb} on goal {goal_id}")
        raise AuthorizationDenied(f"Forbidden: You do not have permission to {verb} this goal.")
    return goal


@router.get("", response_model=List[GoalDetailResponse])
def list_goals(
    employee_id: Optional[str] = Query(default=None, alias="employeeId"),
    db: Session = Depends(get_db),
    caller: Caller = Depends(get_current_caller)
):
    """
    Goals visible to the caller.

    Admins see everything, supervisors their own goals plus their direct
    reports', employees only their own.
    """
    direct_reports = []
    if caller.is_supervisor:
        direct_reports = [row.id for row in db.query(User.id).filter(User.supervisor_id == caller.id)]

    scope = scope_goal_listing(caller, employee_id, direct_reports)

    query = db.query(Goal).options(joinedload(Goal.employee), joinedload(Goal.supervisor))
    if not scope.unrestricted:
        query = query.filter(Goal.employee_id.in_(scope.employee_ids))
    return query.order_by(Goal.due_date.asc(), Goal.created_at.asc()).all()


@router.post("", response_model=GoalResponse, status_code=status.HTTP_201_CREATED)
def create_goal(
    goal_in: GoalCreate,
    db: Session = Depends(get_db),
    outbox: Outbox = Depends(get_outbox),
    caller: Caller = Depends(get_current_caller)
):
    employee = db.get(User, goal_in.employee_id)
    employee_supervisor_id = employee.supervisor_id if employee else None

    if not can_create_goal(caller, goal_in.employee_id, employee_supervisor_id):
        if caller.is_employee:
            raise AuthorizationDenied("Forbidden: You can only create goals for yourself.")
        raise AuthorizationDenied("Forbidden: You can only create goals for your team members or yourself.")
    if employee is None:
        raise InvalidReference("Invalid employee ID provided for the goal.")

    goal = Goal(
        title=goal_in.title,
        description=goal_in.description,
        status=goal_in.status,
        due_date=goal_in.due_date,
        employee_id=goal_in.employee_id,
        supervisor_id=goal_supervisor_for(caller, goal_in.employee_id, employee_supervisor_id),
    )
    db.add(goal)
    db.commit()
    db.refresh(goal)

    employee_id, title = goal.employee_id, goal.title
    if caller.id != employee_id:
        outbox.enqueue("goal notification", lambda s: NotificationService(s).notify_goal_created(
            employee_id, caller.id, title))
    outbox.publish()
    return goal


@router.get("/{goal_id}", response_model=GoalDetailResponse)
def get_goal(
    goal_id: str,
    db: Session = Depends(get_db),
    caller: Caller = Depends(get_current_caller)
):
    return _get_accessible_goal(db, goal_id, caller, "view")


@router.put("/{goal_id}", response_model=GoalResponse)
def update_goal(
    goal_id: str,
    goal_update: GoalUpdate,
    db: Session = Depends(get_db),
    caller: Caller = Depends(get_current_caller)
):
    """Edit a goal. Only admins may move it to a different employee."""
    goal = _get_accessible_goal(db, goal_id, caller, "update")
    update_data = goal_update.model_dump(exclude_unset=True)

    new_employee_id = update_data.pop("employee_id", None)
    if new_employee_id and new_employee_id != goal.employee_id:
        if not can_reassign_goal(caller):
            raise AuthorizationDenied("Forbidden: Only administrators can reassign a goal to another employee.")
        new_employee = db.get(User, new_employee_id)
        if new_employee is None:
            raise InvalidReference("Invalid employee ID for goal.")
        goal.employee_id = new_employee.id
        goal.supervisor_id = new_employee.supervisor_id

    for field in ("title", "status"):
        # Required columns: an explicit null leaves them untouched
        if update_data.get(field) is not None:
            setattr(goal, field, update_data[field])
    for field in ("description", "due_date"):
        if field in update_data:
            setattr(goal, field, update_data[field])

    db.commit()
    db.refresh(goal)
    return goal


@router.delete("/{goal_id}")
def delete_goal(
    goal_id: str,
    db: Session = Depends(get_db),
    caller: Caller = Depends(get_current_caller)
):
    goal = _get_accessible_goal(db, goal_id, caller, "delete")
    db.delete(goal)
    db.commit()
    return {"message": "Goal deleted successfully"}
