"""
Role-based access policy for EvalTrack records.

Every rule here is a pure function of the caller and a snapshot of the
records involved (ids and the employee's *current* supervisor id), so the
routes do the lookups and these functions only decide. Nothing in this
module touches the database.
"""
from dataclasses import dataclass
from typing import Iterable, Optional, Set

from evaltrack.core.exceptions import AuthorizationDenied
from evaltrack.models.user import UserRole


@dataclass(frozen=True)
class Caller:
    """Identity of whoever is making the request"""
    id: str
    role: UserRole

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN

    @property
    def is_supervisor(self) -> bool:
        return self.role == UserRole.SUPERVISOR

    @property
    def is_employee(self) -> bool:
        return self.role == UserRole.EMPLOYEE


@dataclass(frozen=True)
class GoalScope:
    """
    Result of scoping a goal listing.

    ``employee_ids`` is None when the caller may see every goal.
    """
    employee_ids: Optional[Set[str]] = None

    @property
    def unrestricted(self) -> bool:
        return self.employee_ids is None


def supervises(caller: Caller, employee_supervisor_id: Optional[str]) -> bool:
    return caller.is_supervisor and employee_supervisor_id is not None and employee_supervisor_id == caller.id


# Goals

def can_access_goal(caller: Caller, goal_employee_id: str, employee_supervisor_id: Optional[str]) -> bool:
    """
    Read/update/delete rule for a single goal.

    Args:
        caller: requesting identity
        goal_employee_id: the goal's employee
        employee_supervisor_id: that employee's current supervisor (live, not the goal's stored copy)
    """
    if caller.is_admin:
        return True
    if caller.is_employee:
        return goal_employee_id == caller.id
    if caller.is_supervisor:
        return goal_employee_id == caller.id or supervises(caller, employee_supervisor_id)
    return False


def can_create_goal(caller: Caller, employee_id: str, employee_supervisor_id: Optional[str]) -> bool:
    if caller.is_admin:
        return True
    if employee_id == caller.id:
        return True
    return supervises(caller, employee_supervisor_id)


def goal_supervisor_for(caller: Caller, employee_id: str, employee_supervisor_id: Optional[str]) -> Optional[str]:
    """Supervisor id stamped onto a new goal."""
    if caller.is_supervisor and employee_id != caller.id and supervises(caller, employee_supervisor_id):
        return caller.id
    return employee_supervisor_id


def can_reassign_goal(caller: Caller) -> bool:
    return caller.is_admin


def scope_goal_listing(caller: Caller, requested_employee_id: Optional[str],
                       direct_report_ids: Iterable[str] = ()) -> GoalScope:
    """
    Decide which employees' goals a listing may return.

    Raises AuthorizationDenied when an explicit employee filter falls outside
    the caller's reach.
    """
    if caller.is_admin:
        if requested_employee_id:
            return GoalScope({requested_employee_id})
        return GoalScope()

    if caller.is_supervisor:
        team = set(direct_report_ids)
        if requested_employee_id:
            if requested_employee_id != caller.id and requested_employee_id not in team:
                raise AuthorizationDenied("Forbidden: You can only view goals for your team or yourself.")
            return GoalScope({requested_employee_id})
        return GoalScope(team | {caller.id})

    if requested_employee_id and requested_employee_id != caller.id:
        raise AuthorizationDenied("Forbidden: You can only view your own goals.")
    return GoalScope({caller.id})


# Performance scores

def can_record_score(caller: Caller, evaluator_id: str) -> bool:
    """Scores are self-attested: the evaluator must be the caller, whatever the role."""
    return evaluator_id == caller.id


def can_delete_score(caller: Caller, score_evaluator_id: Optional[str]) -> bool:
    return caller.is_admin or (score_evaluator_id is not None and score_evaluator_id == caller.id)


# Users and assignments

def can_update_assignment(caller: Caller, restrict_to_admin: bool = False) -> bool:
    if restrict_to_admin:
        return caller.is_admin
    return True


def can_batch_assign(caller: Caller) -> bool:
    return caller.is_admin


def can_manage_users(caller: Caller) -> bool:
    return caller.is_admin


def can_edit_profile(caller: Caller, target_user_id: str, changes: Iterable[str]) -> bool:
    """
    Admins edit anyone. Everyone else edits only themselves, and never their
    own role or supervisor.
    """
    if caller.is_admin:
        return True
    if target_user_id != caller.id:
        return False
    return not ({"role", "supervisor_id"} & set(changes))


def can_change_password(caller: Caller, target_user_id: str) -> bool:
    """Self-service only, admins included."""
    return caller.id == target_user_id


# Employee-owned records (work outputs, attendance)

def can_write_employee_record(caller: Caller, employee_id: str) -> bool:
    if caller.is_employee:
        return employee_id == caller.id
    return True


# Admin surfaces (settings, audit logs, backup, criteria, triggers)

def can_administer(caller: Caller) -> bool:
    return caller.is_admin
