"""
Enrollments Module

Student enrollments into the active enrollment period:
- Eligibility against the period's window and new/returning rules
- Fee assessment from the grade level fee schedule
- Review workflow and payment recording
- Daily payment reminder job

API Endpoints:
- GET /enrollments/eligibility - Check eligibility
- POST /enrollments - Submit enrollment
- GET /enrollments/{id} - Enrollment details
- POST /enrollments/{id}/status - Change review status
- POST /enrollments/{id}/payments - Record payment
"""

from .jobs import register_enrollment_jobs
from .router import router

__all__ = ["router", "register_enrollment_jobs"]
