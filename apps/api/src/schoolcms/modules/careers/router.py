"""
Careers Router

Public and admin endpoints for career postings.

Endpoints:
- POST   /careers                     - Create a career (admin)
- GET    /careers                     - List all careers (admin)
- GET    /careers/active              - List live careers (public)
- GET    /careers/pending             - List scheduled careers (public)
- GET    /careers/{id}                - Get a career (public)
- PUT    /careers/{id}                - Partially update a career (admin)
- DELETE /careers/{id}                - Deactivate a career (admin)
- DELETE /careers/{id}/permanent      - Permanently delete a career (admin)
- POST   /careers/update-statuses     - Reconcile statuses now (admin)

Security:
- Admin endpoints require a bearer token with super_admin or school_admin role
- The acting admin is recorded as creator / updater
- Forced reconciliation is rate limited per admin
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from schoolcms.core.auth import AdminUser, get_current_admin_user
from schoolcms.core.database import get_db
from schoolcms.core.rate_limit import RateLimitExceeded, check_rate_limit
from schoolcms.modules.careers import service
from schoolcms.modules.careers.schemas import (
    CareerCreate,
    CareerListResponse,
    CareerResponse,
    CareerUpdate,
    DeleteCareerResponse,
)
from schoolcms.modules.shared.errors import ServiceError
from schoolcms.modules.shared.schemas import ReconcileResponse

logger = logging.getLogger(__name__)

router = APIRouter()


# ============================================
# Rate Limiting Configuration
# ============================================

RATE_LIMIT_UPDATE_STATUSES = (5, 60)  # 5 forced reconciliations per minute


async def _check_admin_rate_limit(
    admin: AdminUser,
    action: str,
    limit: int,
    window_seconds: int,
) -> None:
    """
    Raises:
        RateLimitExceeded: If the admin exceeded ``limit`` calls in the window
    """
    key = f"admin:{action}:{admin.id}"
    allowed = await check_rate_limit(key, limit, window_seconds)

    if not allowed:
        logger.warning(
            f"Rate limit exceeded for admin {admin.id} on action '{action}': "
            f"{limit}/{window_seconds}s"
        )
        raise RateLimitExceeded(limit, window_seconds)


def _handle_service_error(e: ServiceError) -> None:
    """Convert service errors to HTTPExceptions."""
    raise HTTPException(
        status_code=e.status_code,
        detail={
            "error": e.error_code,
            "message": e.message,
        },
    ) from e


_ADMIN_RESPONSES = {
    401: {"description": "Unauthorized - invalid or missing token"},
    403: {"description": "Forbidden - not a content admin"},
}


# ============================================
# Public Endpoints
# ============================================


@router.get(
    "/active",
    response_model=CareerListResponse,
    summary="List Active Careers",
    description="Careers whose window contains the current time, newest first.",
)
async def list_active_careers(db: AsyncSession = Depends(get_db)) -> CareerListResponse:
    try:
        careers = await service.list_active_careers(db)
    except ServiceError as e:
        _handle_service_error(e)

    return CareerListResponse(items=careers, total=len(careers))


@router.get(
    "/pending",
    response_model=CareerListResponse,
    summary="List Pending Careers",
    description="Careers whose start date has not yet been reached, newest first.",
)
async def list_pending_careers(db: AsyncSession = Depends(get_db)) -> CareerListResponse:
    try:
        careers = await service.list_pending_careers(db)
    except ServiceError as e:
        _handle_service_error(e)

    return CareerListResponse(items=careers, total=len(careers))


# ============================================
# Admin Endpoints
# ============================================


@router.get(
    "",
    response_model=CareerListResponse,
    summary="List All Careers",
    description="Every career regardless of status, newest first.\n\n**Access:** Admin only",
    responses=_ADMIN_RESPONSES,
)
async def list_all_careers(
    db: AsyncSession = Depends(get_db),
    admin: AdminUser = Depends(get_current_admin_user),
) -> CareerListResponse:
    try:
        careers = await service.list_all_careers(db)
    except ServiceError as e:
        _handle_service_error(e)

    logger.info(f"Admin {admin.id} listed all careers: total={len(careers)}")
    return CareerListResponse(items=careers, total=len(careers))


@router.post(
    "",
    response_model=CareerResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create Career",
    description="""
Create a career posting.

The initial status follows the window:
- `starts_from` in the future: **pending**
- `ends_at` in the past: **inactive**
- otherwise: **active**

**Access:** Admin only
""",
    responses={
        **_ADMIN_RESPONSES,
        400: {"description": "Invalid window or unknown creator"},
    },
)
async def create_career(
    data: CareerCreate,
    db: AsyncSession = Depends(get_db),
    admin: AdminUser = Depends(get_current_admin_user),
) -> CareerResponse:
    try:
        career = await service.create_career(db, data, admin.id)
    except ServiceError as e:
        _handle_service_error(e)

    logger.info(f"Admin {admin.id} created career {career.id}")
    return career


@router.post(
    "/update-statuses",
    response_model=ReconcileResponse,
    summary="Update Career Statuses",
    description="""
Run the status reconciler immediately instead of waiting for the next
scheduled run.

**Access:** Admin only. Rate limited.
""",
    responses={
        **_ADMIN_RESPONSES,
        429: {"description": "Too many requests"},
    },
)
async def update_career_statuses(
    db: AsyncSession = Depends(get_db),
    admin: AdminUser = Depends(get_current_admin_user),
) -> ReconcileResponse:
    await _check_admin_rate_limit(admin, "update_statuses", *RATE_LIMIT_UPDATE_STATUSES)

    try:
        result = await service.reconcile_career_statuses(db)
    except ServiceError as e:
        _handle_service_error(e)

    logger.info(
        f"Admin {admin.id} reconciled career statuses: "
        f"activated={result.activated_count}, deactivated={result.deactivated_count}"
    )
    return ReconcileResponse(
        activated_count=result.activated_count,
        deactivated_count=result.deactivated_count,
    )


# ============================================
# Single Career Endpoints
# ============================================


@router.get(
    "/{career_id}",
    response_model=CareerResponse,
    summary="Get Career",
    responses={404: {"description": "Career not found"}},
)
async def get_career(career_id: UUID, db: AsyncSession = Depends(get_db)) -> CareerResponse:
    try:
        return await service.get_career(db, career_id)
    except ServiceError as e:
        _handle_service_error(e)


@router.put(
    "/{career_id}",
    response_model=CareerResponse,
    summary="Update Career",
    description="""
Partially update a career. Only fields present in the body are changed.

Supplying `starts_from` or `ends_at` (including `null`) recomputes the
status from the new window.

**Access:** Admin only
""",
    responses={
        **_ADMIN_RESPONSES,
        400: {"description": "Invalid window or unknown updater"},
        404: {"description": "Career not found"},
    },
)
async def update_career(
    career_id: UUID,
    data: CareerUpdate,
    db: AsyncSession = Depends(get_db),
    admin: AdminUser = Depends(get_current_admin_user),
) -> CareerResponse:
    try:
        career = await service.update_career(db, career_id, data, admin.id)
    except ServiceError as e:
        _handle_service_error(e)

    logger.info(f"Admin {admin.id} updated career {career_id}")
    return career


@router.delete(
    "/{career_id}",
    response_model=CareerResponse,
    summary="Deactivate Career",
    description="""
Soft-delete a career. It stays in the admin listing as **inactive** and is
not reactivated by the scheduled reconciler.

**Access:** Admin only
""",
    responses={
        **_ADMIN_RESPONSES,
        404: {"description": "Career not found"},
    },
)
async def deactivate_career(
    career_id: UUID,
    db: AsyncSession = Depends(get_db),
    admin: AdminUser = Depends(get_current_admin_user),
) -> CareerResponse:
    try:
        career = await service.deactivate_career(db, career_id, admin.id)
    except ServiceError as e:
        _handle_service_error(e)

    logger.info(f"Admin {admin.id} deactivated career {career_id}")
    return career


@router.delete(
    "/{career_id}/permanent",
    response_model=DeleteCareerResponse,
    summary="Delete Career Permanently",
    description="Remove a career from the database. This cannot be undone.\n\n**Access:** Admin only",
    responses={
        **_ADMIN_RESPONSES,
        404: {"description": "Career not found"},
    },
)
async def delete_career(
    career_id: UUID,
    db: AsyncSession = Depends(get_db),
    admin: AdminUser = Depends(get_current_admin_user),
) -> DeleteCareerResponse:
    try:
        await service.delete_career(db, career_id)
    except ServiceError as e:
        _handle_service_error(e)

    logger.warning(f"Admin {admin.id} permanently deleted career {career_id}")
    return DeleteCareerResponse(id=career_id)
