from pydantic_settings import BaseSettings
from typing import Optional

class Settings(BaseSettings):
    # Database
    DATABASE_URL: str = "sqlite:///./evaltrack.db"

    # JWT (token identity mode)
    SECRET_KEY: str = "change-me-in-production"
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 30

    # Identity: "header" trusts X-User-Id / X-User-Role, "token" requires a signed bearer token
    IDENTITY_MODE: str = "header"

    # Access policy
    RESTRICT_SINGLE_ASSIGNMENT_TO_ADMIN: bool = False
    MIN_PASSWORD_LENGTH: int = 8
    BCRYPT_ROUNDS: int = 12

    # Listing limits
    NOTIFICATION_PAGE_SIZE: int = 20
    AUDIT_LOG_PAGE_SIZE: int = 100

    # Server
    HOST: str = "0.0.0.0"
    PORT: int = 8000

    # CORS
    FRONTEND_URL: str = "http://localhost:3000"
    EXTRA_CORS_ORIGINS: Optional[str] = None  # comma-separated

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "text"  # "text" or "json"
    LOG_REQUEST_ID: bool = True  # Enable request ID tracking

    class Config:
        env_file = ".env"
        case_sensitive = True

    @property
    def cors_origins(self) -> list:
        origins = [self.FRONTEND_URL]
        if self.EXTRA_CORS_ORIGINS:
            origins.extend(o.strip() for o in self.EXTRA_CORS_ORIGINS.split(",") if o.strip())
        return origins

settings = Settings()
