"""
Enrollment Periods Module

Recruitment cycles and the rules for when enrollment is open:
- EnrollmentWindow: pure date logic (is_open, days_remaining, phase)
- Period management for super admins (create, edit, activate, close)
- Hourly job that activates and closes periods by date and notifies admins

API Endpoints:
- GET /enrollment-periods/active - Current period (public)
- GET /enrollment-periods - List periods
- GET /enrollment-periods/{id} - Period details
- POST /enrollment-periods - Create period
- PATCH /enrollment-periods/{id} - Edit period
- POST /enrollment-periods/{id}/activate - Activate period
- POST /enrollment-periods/{id}/close - Close period
"""

from .jobs import register_enrollment_period_jobs
from .router import router

__all__ = ["router", "register_enrollment_period_jobs"]
