from typing import Optional
from evaltrack.schemas.base import RequestSchema
from evaltrack.schemas.user import UserResponse, UserSummary

class LoginRequest(RequestSchema):
    email: str
    password: str

class LoginResponse(UserResponse):
    supervisor: Optional[UserSummary] = None
    access_token: str
    token_type: str = "bearer"

class PasswordChange(RequestSchema):
    current_password: str
    new_password: str
