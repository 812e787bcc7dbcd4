"""
Authentication and Authorization Module

FastAPI dependencies for JWT validation and role-based access control.

Roles:
- super_admin: manages enrollment periods and system-wide settings
- registrar: reviews enrollments, manages fees and records payments

SECURITY NOTE:
- Development test tokens are ONLY accepted when PYTHON_ENV=development
- Production environments MUST set PYTHON_ENV=production
"""

import logging
import os
from dataclasses import dataclass
from uuid import UUID

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from app.core.config import settings
from app.core.security import decode_token

logger = logging.getLogger(__name__)

ROLE_SUPER_ADMIN = "super_admin"
ROLE_REGISTRAR = "registrar"
STAFF_ROLES = frozenset({ROLE_SUPER_ADMIN, ROLE_REGISTRAR})

security = HTTPBearer(
    auto_error=True,
    description="JWT Bearer token for authentication",
)


@dataclass
class StaffUser:
    """
    An authenticated staff member, populated from JWT claims.

    Attributes:
        id: User's unique identifier
        email: User's email address
        role: "super_admin" or "registrar"
        name: Display name (optional)
    """

    id: UUID
    email: str
    role: str
    name: str | None = None

    @property
    def is_super_admin(self) -> bool:
        return self.role == ROLE_SUPER_ADMIN

    def __str__(self) -> str:
        return f"StaffUser(id={self.id}, email={self.email}, role={self.role})"


def _is_dev_mode_safe() -> bool:
    """
    Development test tokens require PYTHON_ENV=development in both the
    settings and the raw environment, and never production or staging.
    """
    env_var = os.getenv("PYTHON_ENV", "").lower()

    is_safe = (
        settings.is_development
        and not settings.is_production
        and env_var not in ("production", "staging")
    )

    if is_safe:
        logger.warning(
            "SECURITY: Development auth mode is ENABLED. This MUST NOT be used in production!"
        )

    return is_safe


_DEVELOPMENT_MODE = _is_dev_mode_safe()

_DEV_ADMIN = StaffUser(
    id=UUID("00000000-0000-0000-0000-000000000001"),
    email="admin@enrollment.local",
    role=ROLE_SUPER_ADMIN,
    name="Development Admin",
)

_DEV_REGISTRAR = StaffUser(
    id=UUID("00000000-0000-0000-0000-000000000002"),
    email="registrar@enrollment.local",
    role=ROLE_REGISTRAR,
    name="Development Registrar",
)


def _unauthorized(error: str, message: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail={"error": error, "message": message},
        headers={"WWW-Authenticate": "Bearer"},
    )


async def _validate_jwt_token(token: str) -> StaffUser:
    """
    Validate a JWT and extract the staff user.

    Raises:
        HTTPException 401: If the token is invalid, expired or has bad claims
    """
    if _DEVELOPMENT_MODE:
        if token == "dev-admin-token":
            return _DEV_ADMIN
        if token == "dev-registrar-token":
            return _DEV_REGISTRAR

    payload = decode_token(token)

    if payload is None:
        logger.warning("Invalid or expired JWT token")
        raise _unauthorized("INVALID_TOKEN", "Invalid or expired authentication token.")

    if payload.get("type", "access") != "access":
        logger.warning(f"Invalid token type: {payload.get('type')}")
        raise _unauthorized("INVALID_TOKEN_TYPE", "This endpoint requires an access token.")

    try:
        user_id_str = payload.get("sub")
        if not user_id_str:
            raise ValueError("Missing 'sub' claim in token")

        return StaffUser(
            id=UUID(user_id_str),
            email=payload.get("email", ""),
            role=payload.get("role", ""),
            name=payload.get("name"),
        )
    except ValueError as e:
        logger.warning(f"Invalid token claims: {e}")
        raise _unauthorized(
            "INVALID_TOKEN_CLAIMS", "Token contains invalid or missing claims."
        ) from e


async def get_current_staff_user(
    credentials: HTTPAuthorizationCredentials = Depends(security),
) -> StaffUser:
    """
    Require an authenticated registrar or super admin.

    Raises:
        HTTPException 401: If the token is missing or invalid
        HTTPException 403: If the user is not staff
    """
    user = await _validate_jwt_token(credentials.credentials)

    if user.role not in STAFF_ROLES:
        logger.warning(f"Access denied: User {user.id} has role '{user.role}', staff required")
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail={
                "error": "STAFF_ACCESS_REQUIRED",
                "message": "Registrar or administrator access is required for this endpoint.",
            },
        )

    return user


async def get_current_admin_user(
    user: StaffUser = Depends(get_current_staff_user),
) -> StaffUser:
    """
    Require an authenticated super admin.

    Raises:
        HTTPException 403: If the user is staff but not a super admin
    """
    if not user.is_super_admin:
        logger.warning(f"Access denied: User {user.id} ({user.email}) is not a super admin")
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail={
                "error": "ADMIN_ACCESS_REQUIRED",
                "message": "Administrator access is required for this endpoint.",
            },
        )

    logger.debug(f"Authenticated admin: {user.id} ({user.email})")
    return user


__all__ = [
    "ROLE_REGISTRAR",
    "ROLE_SUPER_ADMIN",
    "StaffUser",
    "get_current_admin_user",
    "get_current_staff_user",
]
