from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session, joinedload
from typing import List, Optional
from evaltrack.core.config import settings
from evaltrack.core.database import get_db
from evaltrack.core.exceptions import (
    AuthorizationDenied, Conflict, InvalidReference, NotFound, ValidationError,
)
from evaltrack.core.logging_config import get_logger
from evaltrack.core.permissions import Caller, can_change_password, can_edit_profile
from evaltrack.core.security import get_password_hash, verify_password
from evaltrack.models.evaluation import PerformanceScore
from evaltrack.models.goal import Goal
from evaltrack.models.notification import Notification
from evaltrack.models.user import User, UserRole
from evaltrack.schemas.auth import PasswordChange
from evaltrack.schemas.user import (
    UserCreate, UserUpdate, UserResponse, UserDetailResponse, UserSummary,
)
from evaltrack.services.audit_service import AuditService
from evaltrack.services.notification_service import NotificationService
from evaltrack.services.outbox import Outbox, get_outbox
from evaltrack.api.v1.dependencies import get_current_caller, get_current_admin

router = APIRouter()
supervisors_router = APIRouter()
logger = get_logger(__name__)


def _get_user_or_404(db: Session, user_id: str) -> User:
    user = db.get(User, user_id)
    if user is None:
        raise NotFound("User not found")
    return user


def _check_password_length(password: str) -> None:
    if len(password) < settings.MIN_PASSWORD_LENGTH:
        raise ValidationError(f"Password must be at least {settings.MIN_PASSWORD_LENGTH} characters long.")


def _resolve_supervisor(db: Session, supervisor_id: Optional[str], user_id: Optional[str] = None) -> Optional[User]:
    if supervisor_id is None:
        return None
    if user_id is not None and supervisor_id == user_id:
        raise ValidationError("A user cannot be their own supervisor.")
    supervisor = db.get(User, supervisor_id)
    if supervisor is None:
        raise InvalidReference("Invalid supervisor ID provided.")
    return supervisor


@router.get("", response_model=List[UserResponse])
def list_users(
    db: Session = Depends(get_db),
    caller: Caller = Depends(get_current_caller)
):
    return db.query(User).order_by(User.name.asc()).all()


@router.post("", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
def create_user(
    user_in: UserCreate,
    db: Session = Depends(get_db),
    caller: Caller = Depends(get_current_admin)
):
    """Create an account (admin only). The password is stored as a bcrypt hash."""
    _check_password_length(user_in.password)

    if db.query(User).filter(User.email == user_in.email).first():
        raise Conflict("A user with this email already exists.")
    _resolve_supervisor(db, user_in.supervisor_id)

    data = user_in.model_dump(exclude={"password"})
    user = User(**data, password=get_password_hash(user_in.password))
    db.add(user)
    db.commit()
    db.refresh(user)
    logger.info(f"User {user.id} created by {caller.id} with role {user.role.value}")
    return user


@router.get("/{user_id}", response_model=UserDetailResponse)
def get_user(
    user_id: str,
    db: Session = Depends(get_db),
    caller: Caller = Depends(get_current_caller)
):
    user = db.query(User).options(
        joinedload(User.supervisor), joinedload(User.direct_reports)
    ).filter(User.id == user_id).first()
    if user is None:
        raise NotFound("User not found")
    return user


@router.put("/{user_id}", response_model=UserResponse)
def update_user(
    user_id: str,
    user_update: UserUpdate,
    db: Session = Depends(get_db),
    outbox: Outbox = Depends(get_outbox),
    caller: Caller = Depends(get_current_caller)
):
    """
    Update a profile.

    Admins can edit anyone, including role and supervisor. Other users can
    edit their own profile fields only. A supervisor change notifies the
    employee.
    """
    update_data = user_update.model_dump(exclude_unset=True)
    if not can_edit_profile(caller, user_id, update_data.keys()):
        logger.warning(f"Caller {caller.id} denied profile update of {user_id} ({sorted(update_data)})")
        raise AuthorizationDenied("Forbidden: You do not have permission to make these changes.")

    user = _get_user_or_404(db, user_id)
    previous_supervisor_id = user.supervisor_id

    email = update_data.get("email")
    if email and email != user.email:
        if db.query(User).filter(User.email == email, User.id != user_id).first():
            raise Conflict("A user with this email already exists.")

    new_supervisor = None
    if "supervisor_id" in update_data:
        new_supervisor = _resolve_supervisor(db, update_data["supervisor_id"], user_id)
        user.supervisor_id = update_data.pop("supervisor_id")

    for field, value in update_data.items():
        # Required columns keep their value when null is sent
        if value is None and field != "avatar_url":
            continue
        setattr(user, field, value)

    db.commit()
    db.refresh(user)

    new_supervisor_id = user.supervisor_id
    if new_supervisor_id != previous_supervisor_id:
        new_supervisor_name = new_supervisor.name if new_supervisor else None
        outbox.enqueue("supervisor notification", lambda s: NotificationService(s).notify_supervisor_changed(
            user_id, caller.id, previous_supervisor_id, new_supervisor_id, new_supervisor_name))
    outbox.publish()
    return user


@router.delete("/{user_id}")
def delete_user(
    user_id: str,
    db: Session = Depends(get_db),
    caller: Caller = Depends(get_current_admin)
):
    """
    Delete a user.

    Refused while anyone still reports to them. Scores they gave, goals they
    supervise and notifications they sent stay, with the reference cleared;
    the user's own goals, scores, work outputs, attendance and notifications
    are removed. Audit entries are kept.
    """
    user = _get_user_or_404(db, user_id)

    reports = db.query(User).filter(User.supervisor_id == user_id).count()
    if reports:
        raise Conflict(
            f"Cannot delete user: they supervise {reports} other user(s). Reassign them first."
        )

    db.query(PerformanceScore).filter(PerformanceScore.evaluator_id == user_id).update(
        {PerformanceScore.evaluator_id: None}, synchronize_session=False)
    db.query(Goal).filter(Goal.supervisor_id == user_id).update(
        {Goal.supervisor_id: None}, synchronize_session=False)
    db.query(Notification).filter(Notification.actor_id == user_id).update(
        {Notification.actor_id: None}, synchronize_session=False)
    db.expire_all()

    db.delete(user)
    db.commit()
    logger.info(f"User {user_id} deleted by {caller.id}")
    return {"message": "User deleted successfully"}


@router.post("/{user_id}/change-password")
def change_password(
    user_id: str,
    payload: PasswordChange,
    db: Session = Depends(get_db),
    outbox: Outbox = Depends(get_outbox),
    caller: Caller = Depends(get_current_caller)
):
    """Self-service password change; administrators cannot change someone else's."""
    if not can_change_password(caller, user_id):
        raise AuthorizationDenied("Forbidden: You can only change your own password.")
    if not payload.current_password or not payload.new_password:
        raise ValidationError("Current password and new password are required.")
    _check_password_length(payload.new_password)

    user = _get_user_or_404(db, user_id)
    if not user.password:
        raise NotFound("User not found or password not set")

    if not verify_password(payload.current_password, user.password):
        outbox.enqueue("password change audit", lambda s: AuditService(s).log_password_change(
            user_id, success=False, reason="incorrect current password"))
        outbox.publish()
        raise AuthorizationDenied("Incorrect current password.")

    user.password = get_password_hash(payload.new_password)
    db.commit()

    outbox.enqueue("password change audit", lambda s: AuditService(s).log_password_change(user_id, success=True))
    outbox.publish()
    logger.info(f"Password changed for user {user_id}")
    return {"message": "Password updated successfully"}


@supervisors_router.get("", response_model=List[UserSummary])
def list_supervisors(
    db: Session = Depends(get_db),
    caller: Caller = Depends(get_current_caller)
):
    return db.query(User).filter(User.role == UserRole.SUPERVISOR).order_by(User.name.asc()).all()
