from fastapi import APIRouter

from app.modules.enrollment_periods import router as enrollment_periods_router
from app.modules.enrollments import router as enrollments_router
from app.modules.grade_level_fees import router as grade_level_fees_router

api_router = APIRouter()

api_router.include_router(
    enrollment_periods_router, prefix="/enrollment-periods", tags=["Enrollment Periods"]
)

api_router.include_router(
    grade_level_fees_router, prefix="/grade-level-fees", tags=["Grade Level Fees"]
)

api_router.include_router(enrollments_router, prefix="/enrollments", tags=["Enrollments"])
