from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy import text
from evaltrack.core.config import settings
from evaltrack.core.database import SessionLocal, engine
from evaltrack.core.exceptions import register_exception_handlers
from evaltrack.core.logging_config import setup_logging, get_logger
from evaltrack.core.middleware import RequestIDMiddleware
from evaltrack.core.security import is_valid_bcrypt_hash
from evaltrack.services.audit_service import AuditService
from evaltrack.api.v1 import api_router

VERSION = "1.0.0"

# Setup logging
setup_logging(settings.LOG_LEVEL, settings.LOG_FORMAT)
logger = get_logger(__name__)

app = FastAPI(
    title="EvalTrack API",
    description="Employee performance management: goals, evaluations, supervision and audit",
    version=VERSION
)

# Request ID middleware (add first for request tracking)
if settings.LOG_REQUEST_ID:
    app.add_middleware(RequestIDMiddleware)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["X-Request-ID", "Content-Disposition"],
)

register_exception_handlers(app)

# Include routers
app.include_router(api_router, prefix="/api/v1")

@app.get("/")
async def root():
    return {"message": "EvalTrack API", "version": VERSION}

@app.get("/health")
async def health():
    """Health check endpoint"""
    return {"status": "healthy"}

@app.get("/health/detailed")
def health_detailed():
    """Health check with database connectivity and password hash sanity"""
    health_info = {
        "status": "healthy",
        "service": "EvalTrack API",
        "version": VERSION
    }

    try:
        with engine.begin() as conn:
            conn.execute(text("SELECT 1"))
        health_info["database"] = "connected"
    except Exception as e:
        health_info["database"] = f"error: {str(e)}"
        health_info["status"] = "degraded"
        return health_info

    try:
        with engine.begin() as conn:
            hashes = conn.execute(text("SELECT password FROM users")).scalars().all()
        malformed = sum(1 for h in hashes if not is_valid_bcrypt_hash(h))
        health_info["password_hashes"] = {
            "total_users": len(hashes),
            "malformed_count": malformed,
            "status": "healthy" if malformed == 0 else "warning"
        }
        if malformed:
            health_info["status"] = "degraded"
    except Exception as e:
        health_info["password_hashes"] = f"check_failed: {str(e)}"

    return health_info


@app.on_event("startup")
def record_startup():
    """Write a SYSTEM_STARTUP audit entry. Never blocks startup."""
    db = SessionLocal()
    try:
        AuditService(db).log_startup(VERSION)
        db.commit()
        logger.info(f"EvalTrack API {VERSION} started")
    except Exception as e:
        db.rollback()
        logger.warning(f"Startup audit skipped: could not write audit log - {str(e)}")
    finally:
        db.close()
