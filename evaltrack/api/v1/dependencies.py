"""
Identity resolution and the role gates built on it.

In the default ``header`` mode the caller is whoever the X-User-Id and
X-User-Role headers say it is; nothing is verified. ``token`` mode replaces
that with a signed bearer token issued by /auth/login. The access policy in
evaltrack.core.permissions does not care which mode produced the Caller.
"""
from typing import Optional

from fastapi import Depends, Header

from evaltrack.core.config import settings
from evaltrack.core.exceptions import AuthenticationRequired, AuthorizationDenied
from evaltrack.core.logging_config import caller_id_context
from evaltrack.core.permissions import Caller
from evaltrack.core.security import decode_access_token
from evaltrack.models.user import UserRole


def _parse_role(value: Optional[str]) -> Optional[UserRole]:
    if not value:
        return None
    try:
        return UserRole(value.strip().upper())
    except ValueError:
        return None


def resolve_identity(user_id: Optional[str], role: Optional[str]) -> Optional[Caller]:
    """Caller from the identity headers, or None if either is missing or the role is unknown."""
    user_id = (user_id or "").strip()
    parsed_role = _parse_role(role)
    if not user_id or parsed_role is None:
        return None
    return Caller(id=user_id, role=parsed_role)


def resolve_token_identity(authorization: Optional[str]) -> Optional[Caller]:
    if not authorization:
        return None
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token:
        return None
    payload = decode_access_token(token.strip())
    if payload is None:
        return None
    return resolve_identity(payload.get("sub"), payload.get("role"))


async def get_optional_caller(
    x_user_id: Optional[str] = Header(default=None),
    x_user_role: Optional[str] = Header(default=None),
    authorization: Optional[str] = Header(default=None),
) -> Optional[Caller]:
    if settings.IDENTITY_MODE == "token":
        caller = resolve_token_identity(authorization)
    else:
        caller = resolve_identity(x_user_id, x_user_role)
    if caller is not None:
        caller_id_context.set(caller.id)
    return caller


def get_current_caller(caller: Optional[Caller] = Depends(get_optional_caller)) -> Caller:
    if caller is None:
        raise AuthenticationRequired("Authentication required")
    return caller


def get_current_admin(caller: Caller = Depends(get_current_caller)) -> Caller:
    """Require ADMIN role"""
    if not caller.is_admin:
        raise AuthorizationDenied("Forbidden: Admin access required.")
    return caller
