"""
Grade Level Fees Module

Fee schedule per grade level and enrollment period, stored in cents.

API Endpoints:
- GET /grade-level-fees - List fee schedules
- GET /grade-level-fees/{id} - Fee schedule details
- POST /grade-level-fees - Create fee schedule
- PATCH /grade-level-fees/{id} - Edit fee schedule
"""

from .router import router

__all__ = ["router"]
