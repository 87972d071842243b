from fastapi import APIRouter
from evaltrack.api.v1 import (
    auth, users, goals, performance, assignments, admin, notifications, work, triggers, analytics,
)

api_router = APIRouter()

api_router.include_router(auth.router, prefix="/auth", tags=["Authentication"])
api_router.include_router(users.router, prefix="/users", tags=["Users"])
api_router.include_router(users.supervisors_router, prefix="/supervisors", tags=["Users"])
api_router.include_router(goals.router, prefix="/goals", tags=["Goals"])
api_router.include_router(performance.router, prefix="/performance-scores", tags=["Performance"])
api_router.include_router(performance.criteria_router, prefix="/evaluation-criteria", tags=["Performance"])
api_router.include_router(assignments.router, prefix="/assignments", tags=["Assignments"])
api_router.include_router(admin.router, prefix="/admin", tags=["Admin"])
api_router.include_router(notifications.router, prefix="/notifications", tags=["Notifications"])
api_router.include_router(work.work_outputs_router, prefix="/work-outputs", tags=["Work Outputs"])
api_router.include_router(work.attendance_router, prefix="/attendance-records", tags=["Attendance"])
api_router.include_router(triggers.router, prefix="/auto-message-triggers", tags=["Auto Messages"])
api_router.include_router(analytics.router, prefix="/analytics", tags=["Analytics"])
