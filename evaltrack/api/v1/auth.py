from fastapi import APIRouter, Depends
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from evaltrack.core.database import get_db
from evaltrack.core.exceptions import AuthenticationRequired, UpstreamStoreError, ValidationError
from evaltrack.core.logging_config import get_logger
from evaltrack.core.security import verify_password, create_access_token
from evaltrack.models.user import User
from evaltrack.schemas.auth import LoginRequest, LoginResponse
from evaltrack.schemas.user import UserResponse, UserSummary
from evaltrack.services.audit_service import AuditService
from evaltrack.services.outbox import Outbox, get_outbox

router = APIRouter()
logger = get_logger(__name__)

INVALID_CREDENTIALS = "Invalid email or password"

@router.post("/login", response_model=LoginResponse)
def login(
    credentials: LoginRequest,
    db: Session = Depends(get_db),
    outbox: Outbox = Depends(get_outbox)
):
    """
    Check email and password. Every outcome is written to the audit log.

    Returns the user without the password hash, plus a signed token usable
    when the API runs in token identity mode.
    """
    email = credentials.email.strip()
    if not email or not credentials.password:
        raise ValidationError("Email and password are required")

    try:
        user = db.query(User).filter(User.email == email).first()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error("Login lookup failed", exc_info=True)
        outbox.enqueue("login failure audit", lambda s: AuditService(s).log_login_failure(
            email, "server error", error=str(e)))
        outbox.publish()
        raise UpstreamStoreError("An internal server error occurred")

    if user is None:
        outbox.enqueue("login failure audit", lambda s: AuditService(s).log_login_failure(email, "user not found"))
        outbox.publish()
        raise AuthenticationRequired(INVALID_CREDENTIALS)

    user_id = user.id
    if not user.password:
        logger.error(f"User {user_id} has no password set")
        outbox.enqueue("login failure audit", lambda s: AuditService(s).log_login_failure(
            email, "no password set", user_id=user_id))
        outbox.publish()
        raise UpstreamStoreError("Authentication error. Please contact support.")

    if not verify_password(credentials.password, user.password):
        outbox.enqueue("login failure audit", lambda s: AuditService(s).log_login_failure(
            email, "password mismatch", user_id=user_id))
        outbox.publish()
        raise AuthenticationRequired(INVALID_CREDENTIALS)

    response = LoginResponse(
        **UserResponse.model_validate(user).model_dump(),
        supervisor=UserSummary.model_validate(user.supervisor) if user.supervisor else None,
        access_token=create_access_token(user.id, user.role.value),
    )
    outbox.enqueue("login success audit", lambda s: AuditService(s).log_login_success(user_id, email))
    outbox.publish()
    logger.info(f"User {user_id} logged in")
    return response
