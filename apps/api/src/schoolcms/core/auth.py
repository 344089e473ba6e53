"""
Authentication and Authorization Module

Provides authentication dependencies for FastAPI endpoints.
Bearer tokens are decoded with security.decode_token and the caller's role
is checked against the roles allowed to manage website content.

SECURITY NOTE:
- Development mode auth bypass is ONLY enabled when PYTHON_ENV=development
- Production environments MUST set PYTHON_ENV=production to disable test tokens
- The is_production check provides an additional safety layer
"""

import logging
import os
from dataclasses import dataclass
from uuid import UUID

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from schoolcms.core.config import settings
from schoolcms.core.security import decode_token
from schoolcms.modules.users.models import CONTENT_ADMIN_ROLES, UserRole

logger = logging.getLogger(__name__)

# Security scheme for OpenAPI documentation
security = HTTPBearer(
    auto_error=True,
    description="JWT Bearer token for authentication",
)

_ALLOWED_ROLES = frozenset(role.value for role in CONTENT_ADMIN_ROLES)


@dataclass
class AdminUser:
    """
    Represents an authenticated content administrator.

    Populated from JWT claims after token validation.

    Attributes:
        id: User's unique identifier (UUID), used as the acting principal
        email: User's email address
        role: User's role ('super_admin' or 'school_admin' for admin endpoints)
        name: User's display name (optional)
    """

    id: UUID
    email: str
    role: str
    name: str | None = None

    def __str__(self) -> str:
        return f"AdminUser(id={self.id}, email={self.email}, role={self.role})"


def _is_dev_mode_safe() -> bool:
    """
    Check if development mode is safe to enable.

    SECURITY: development auth bypass requires all of:

    1. settings.is_development must be True (PYTHON_ENV=development)
    2. settings.is_production must be False (double-check)
    3. PYTHON_ENV environment variable must not be "production" or "staging"

    Returns:
        True only if ALL safety checks pass
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


# Development mode flag - allows mock authentication for LOCAL testing ONLY
_DEVELOPMENT_MODE = _is_dev_mode_safe()

# Development admin user (only used when PYTHON_ENV=development).
# scripts/seed_dev_admin.py creates the matching users row.
DEV_ADMIN = AdminUser(
    id=UUID("00000000-0000-0000-0000-000000000001"),
    email="admin@schoolcms.dev",
    role=UserRole.SUPER_ADMIN.value,
    name="Development Admin",
)

_DEV_TOKENS = ("dev-token", "test-token", "bearer")


def _unauthorized(error: str, message: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail={"error": error, "message": message},
        headers={"WWW-Authenticate": "Bearer"},
    )


async def _validate_jwt_token(token: str) -> AdminUser:
    """
    Validate JWT token and extract user claims.

    Args:
        token: JWT token string from Authorization header

    Returns:
        AdminUser object with claims from the token

    Raises:
        HTTPException 401: If token is invalid or expired
    """
    if _DEVELOPMENT_MODE:
        if token in _DEV_TOKENS:
            logger.debug("Development mode: Using test token")
            return DEV_ADMIN

        # Accept UUID tokens as user IDs for testing
        try:
            user_id = UUID(token)
        except ValueError:
            pass
        else:
            return AdminUser(
                id=user_id,
                email=f"admin-{str(user_id)[:8]}@schoolcms.dev",
                role=UserRole.SUPER_ADMIN.value,
                name="Test Admin",
            )

    payload = decode_token(token)

    if payload is None:
        logger.warning("Invalid or expired JWT token")
        raise _unauthorized("INVALID_TOKEN", "Invalid or expired authentication token.")

    token_type = payload.get("type", "access")
    if token_type != "access":
        logger.warning(f"Invalid token type: {token_type}")
        raise _unauthorized("INVALID_TOKEN_TYPE", "This endpoint requires an access token.")

    try:
        return AdminUser(
            id=UUID(str(payload["sub"])),
            email=payload.get("email", ""),
            role=payload.get("role", ""),
            name=payload.get("name"),
        )
    except (ValueError, KeyError) as e:
        logger.warning(f"Invalid token claims: {e}")
        raise _unauthorized(
            "INVALID_TOKEN_CLAIMS", "Token contains invalid or missing claims."
        ) from e


async def get_current_admin_user(
    credentials: HTTPAuthorizationCredentials = Depends(security),
) -> AdminUser:
    """
    FastAPI dependency that validates the bearer token and returns the admin.

    Usage:
        @router.post("/careers")
        async def create(admin: AdminUser = Depends(get_current_admin_user)):
            # admin.id is the acting principal

    Raises:
        HTTPException 401: If token is missing, invalid, or expired
        HTTPException 403: If the user may not manage website content
    """
    user = await _validate_jwt_token(credentials.credentials)

    if user.role not in _ALLOWED_ROLES:
        logger.warning(
            f"Access denied: User {user.id} ({user.email}) has role '{user.role}', "
            f"but one of {sorted(_ALLOWED_ROLES)} is required"
        )
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail={
                "error": "ADMIN_ACCESS_REQUIRED",
                "message": "School admin access is required for this endpoint.",
            },
        )

    logger.debug(f"Authenticated admin: {user.id} ({user.email})")
    return user


__all__ = [
    "AdminUser",
    "DEV_ADMIN",
    "get_current_admin_user",
]
