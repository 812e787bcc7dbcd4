"""
School Enrollment API - Main Application Entry Point

This module initializes and configures the FastAPI application including:
- Logging and currency format
- Database connection
- Background job scheduler
- CORS middleware
- API routing
- Health check endpoints
"""

import logging
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy import text

from app.api import api_router
from app.core.auth import StaffUser, get_current_admin_user
from app.core.config import settings
from app.core.database import async_session_maker, close_db, init_db
from app.core.money import get_money_formatter
from app.core.scheduler import (
    list_registered_jobs,
    pause_job,
    resume_job,
    start_scheduler,
    stop_scheduler,
    trigger_job_manually,
)
from app.modules.enrollment_periods import register_enrollment_period_jobs
from app.modules.enrollments import register_enrollment_jobs

logger = logging.getLogger(__name__)


def configure_logging() -> None:
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


@asynccontextmanager
async def lifespan(_app: FastAPI):
    """
    Application lifespan manager.

    Handles startup and shutdown events including:
    - Currency format validation
    - Database connection
    - Background job scheduler
    """
    # Startup
    configure_logging()
    print(f"Starting School Enrollment API in {settings.python_env} mode...")

    # A bad currency configuration must stop the service before it serves amounts
    money = get_money_formatter()
    print(f"[OK] Currency format: {money.format(123450)} ({money.fmt.code})")

    # Initialize Database
    try:
        await init_db()
        print("[OK] Database connected")
    except Exception as e:
        print(f"[FAIL] Database connection failed: {e}")
        if settings.is_production:
            raise

    # Initialize Background Job Scheduler
    try:
        register_enrollment_period_jobs()
        register_enrollment_jobs()

        await start_scheduler()
        print("[OK] Background scheduler started")
    except Exception as e:
        print(f"[FAIL] Background scheduler failed to start: {e}")
        if settings.is_production:
            raise

    yield  # Application runs here

    # Shutdown
    print("Shutting down School Enrollment API...")

    # Stop the scheduler first (wait for running jobs)
    await stop_scheduler()
    print("[OK] Background scheduler stopped")

    await close_db()
    print("[OK] Cleanup complete")


app = FastAPI(
    title="School Enrollment API",
    description="Enrollment periods, grade level fees and student enrollments",
    version="0.1.0",
    docs_url="/docs" if settings.is_development else None,
    redoc_url="/redoc" if settings.is_development else None,
    lifespan=lifespan,
)

app.include_router(api_router, prefix="/api/v1")

# CORS configuration
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/", tags=["Root"])
async def root() -> dict[str, str]:
    """Root endpoint - API welcome message."""
    return {
        "message": "Welcome to the School Enrollment API",
        "status": "running",
        "environment": settings.python_env,
    }


@app.get("/health", tags=["Health"])
async def health_check() -> dict[str, str]:
    """Health check endpoint for container orchestration."""
    return {"status": "healthy"}


@app.get("/ready", tags=["Health"])
async def readiness_check() -> dict[str, str]:
    """Readiness check endpoint."""
    return {"status": "ready"}


@app.get("/debug/db", tags=["Debug"])
async def debug_db():
    """Test database connection."""
    try:
        async with async_session_maker() as session:
            result = await session.execute(text("SELECT 1"))
            return {"database": "connected", "result": result.scalar()}
    except Exception as e:
        return {"database": "error", "message": str(e)}


# ============================================
# Background Job Debug Endpoints
# ============================================
# Manual triggering of background jobs for testing and debugging.
# In production, jobs run automatically on schedule. Super admins only.


@app.get("/debug/jobs", tags=["Debug"])
async def list_jobs(_admin: StaffUser = Depends(get_current_admin_user)):
    """List all registered background jobs with next run time and pause status."""
    return {"jobs": list_registered_jobs()}


@app.post("/debug/jobs/{job_id}/trigger", tags=["Debug"])
async def trigger_job(
    job_id: str,
    dry_run: bool = False,
    admin: StaffUser = Depends(get_current_admin_user),
):
    """
    Manually trigger a background job.

    Args:
        job_id: The ID of the job to trigger. Available jobs:
            - enrollment_periods_update_statuses
            - enrollments_payment_reminders
        dry_run: Report what the job would do without writing or emailing

    Raises:
        HTTPException 400: If job_id is not found.
    """
    logger.info(f"Admin {admin.id} triggered job {job_id} (dry_run={dry_run})")
    try:
        return await trigger_job_manually(job_id, dry_run=dry_run)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e


@app.post("/debug/jobs/{job_id}/pause", tags=["Debug"])
async def pause_job_endpoint(
    job_id: str,
    _admin: StaffUser = Depends(get_current_admin_user),
):
    """Pause a scheduled job. It stays registered; resume it with /resume."""
    success = pause_job(job_id)
    return {"job_id": job_id, "paused": success}


@app.post("/debug/jobs/{job_id}/resume", tags=["Debug"])
async def resume_job_endpoint(
    job_id: str,
    _admin: StaffUser = Depends(get_current_admin_user),
):
    """Resume a paused background job."""
    success = resume_job(job_id)
    return {"job_id": job_id, "resumed": success}
