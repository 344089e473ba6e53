"""
Careers Service Layer

Business logic for career postings. Orchestrates the repository, the
window status resolver and audit stamping.

This module implements:
1. Create: validate window, verify the creator, resolve initial status
2. Read: single career, active / pending / all listings (newest first),
   each enriched with creator and updater display names
3. Update: apply only supplied fields; status is recomputed only when a
   window bound is supplied
4. Deactivate (soft delete): force INACTIVE, idempotent
5. Delete: physical removal, irreversible
6. Reconcile: bulk status sweep used by the scheduled job

Every function samples ``clock`` at most once, so all comparisons within a
call see the same instant.
"""

import logging
from typing import NoReturn
from uuid import UUID

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from schoolcms.core.clock import Clock, utc_now
from schoolcms.modules.careers.models import Career
from schoolcms.modules.careers.schemas import CareerCreate, CareerResponse, CareerUpdate
from schoolcms.modules.shared.audit import (
    PrincipalDirectory,
    audit_user,
    collect_audit_names,
    ensure_principal_exists,
    stamp_created,
    stamp_updated,
)
from schoolcms.modules.shared.errors import NotFoundError, StoreError
from schoolcms.modules.shared.lifecycle import (
    EntityStatus,
    ReconcileResult,
    resolve_status,
    validate_window,
)
from schoolcms.modules.shared.repository import WindowedRepository
from schoolcms.modules.users.repository import UserRepository

logger = logging.getLogger(__name__)

repository: WindowedRepository[Career] = WindowedRepository(Career)


class CareerNotFoundError(NotFoundError):
    """Raised when a career is not found."""

    def __init__(self, career_id: UUID | None = None):
        message = f"Career {career_id} not found" if career_id else "Career not found"
        super().__init__(message=message, error_code="CAREER_NOT_FOUND")


# ============================================
# Helpers
# ============================================


def _career_to_response(career: Career, names: dict[UUID, str]) -> CareerResponse:
    """Convert a Career model to a CareerResponse with audit names."""
    return CareerResponse(
        id=career.id,
        title=career.title,
        position=career.position,
        description=career.description,
        requirements=career.requirements,
        starts_from=career.starts_from,
        ends_at=career.ends_at,
        status=career.status,
        created_by=career.created_by,
        updated_by=career.updated_by,
        created_at=career.created_at,
        updated_at=career.updated_at,
        created_by_user=audit_user(career.created_by, names),
        updated_by_user=audit_user(career.updated_by, names),
    )


async def _enrich(
    db: AsyncSession,
    careers: list[Career],
    principals: PrincipalDirectory,
) -> list[CareerResponse]:
    names = await collect_audit_names(principals, db, careers)
    return [_career_to_response(career, names) for career in careers]


async def _get_or_raise(db: AsyncSession, career_id: UUID) -> Career:
    career = await repository.get_by_id(db, career_id)
    if career is None:
        raise CareerNotFoundError(career_id)
    return career


async def _rollback_and_raise(db: AsyncSession, action: str, error: SQLAlchemyError) -> NoReturn:
    logger.error(f"Database error while trying to {action}: {error}", exc_info=True)
    await db.rollback()
    raise StoreError() from error


# ============================================
# Commands
# ============================================


async def create_career(
    db: AsyncSession,
    data: CareerCreate,
    creator_id: UUID,
    *,
    clock: Clock = utc_now,
    principals: PrincipalDirectory = UserRepository,
) -> CareerResponse:
    """
    Create a career posting.

    The initial status comes from the window: a future start makes it
    PENDING, an end already in the past makes it INACTIVE.

    Args:
        db: Database session
        data: Validated request body
        creator_id: ID of the acting user
        clock: Source of the current time
        principals: User lookup for existence checks and names

    Returns:
        The created career

    Raises:
        ValidationError: If starts_from is after ends_at
        PrincipalNotFoundError: If the creator does not exist
        StoreError: If the database write fails
    """
    validate_window(data.starts_from, data.ends_at)
    await ensure_principal_exists(principals, db, creator_id)

    now = clock()
    career = Career(
        title=data.title,
        position=data.position,
        description=data.description,
        requirements=data.requirements,
        starts_from=data.starts_from,
        ends_at=data.ends_at,
        status=resolve_status(now, data.starts_from, data.ends_at),
    )
    stamp_created(career, creator_id, now)

    try:
        career = await repository.add(db, career)
    except SQLAlchemyError as e:
        await _rollback_and_raise(db, "create career", e)

    logger.info(f"Created career {career.id} with status {career.status.value}")

    [response] = await _enrich(db, [career], principals)
    return response


async def update_career(
    db: AsyncSession,
    career_id: UUID,
    data: CareerUpdate,
    updater_id: UUID,
    *,
    clock: Clock = utc_now,
    principals: PrincipalDirectory = UserRepository,
) -> CareerResponse:
    """
    Apply a partial update.

    Fields absent from the request keep their stored value. The merged
    window must still be ordered. Status is re-resolved only if starts_from
    or ends_at was supplied, which can bring back a deactivated career.

    Raises:
        CareerNotFoundError: If the career does not exist
        ValidationError: If the merged window is out of order
        PrincipalNotFoundError: If the updater does not exist
        StoreError: If the database write fails
    """
    career = await _get_or_raise(db, career_id)

    changes = data.model_dump(exclude_unset=True)
    starts_from = changes.get("starts_from", career.starts_from)
    ends_at = changes.get("ends_at", career.ends_at)
    validate_window(starts_from, ends_at)

    await ensure_principal_exists(principals, db, updater_id)

    now = clock()
    for field, value in changes.items():
        setattr(career, field, value)

    if data.window_changed:
        career.status = resolve_status(now, starts_from, ends_at)

    stamp_updated(career, updater_id, now)

    try:
        career = await repository.save(db, career)
    except SQLAlchemyError as e:
        await _rollback_and_raise(db, f"update career {career_id}", e)

    logger.info(
        f"Updated career {career_id} (fields: {sorted(changes)}, status: {career.status.value})"
    )

    [response] = await _enrich(db, [career], principals)
    return response


async def deactivate_career(
    db: AsyncSession,
    career_id: UUID,
    updater_id: UUID,
    *,
    clock: Clock = utc_now,
    principals: PrincipalDirectory = UserRepository,
) -> CareerResponse:
    """
    Soft-delete a career.

    Forces INACTIVE regardless of the window. The scheduled reconciler never
    revisits INACTIVE rows, so the career stays inactive until an update
    supplies a new window. Deactivating an inactive career succeeds.

    Raises:
        CareerNotFoundError: If the career does not exist
        PrincipalNotFoundError: If the updater does not exist
        StoreError: If the database write fails
    """
    career = await _get_or_raise(db, career_id)
    await ensure_principal_exists(principals, db, updater_id)

    previous_status = career.status
    career.status = EntityStatus.INACTIVE
    stamp_updated(career, updater_id, clock())

    try:
        career = await repository.save(db, career)
    except SQLAlchemyError as e:
        await _rollback_and_raise(db, f"deactivate career {career_id}", e)

    logger.info(f"Deactivated career {career_id} (was {previous_status.value})")

    [response] = await _enrich(db, [career], principals)
    return response


async def delete_career(db: AsyncSession, career_id: UUID) -> None:
    """
    Permanently delete a career. This cannot be undone.

    Raises:
        CareerNotFoundError: If the career does not exist
        StoreError: If the database write fails
    """
    career = await _get_or_raise(db, career_id)

    try:
        await repository.delete(db, career)
    except SQLAlchemyError as e:
        await _rollback_and_raise(db, f"delete career {career_id}", e)

    logger.info(f"Permanently deleted career {career_id}")


async def reconcile_career_statuses(
    db: AsyncSession,
    *,
    clock: Clock = utc_now,
) -> ReconcileResult:
    """
    Activate careers whose start has passed and expire those whose end has.

    Raises:
        StoreError: If the bulk update fails
    """
    now = clock()

    try:
        result = await repository.reconcile(db, now)
    except SQLAlchemyError as e:
        await _rollback_and_raise(db, "reconcile career statuses", e)

    logger.info(
        f"Reconciled career statuses at {now.isoformat()}: "
        f"activated={result.activated_count}, deactivated={result.deactivated_count}"
    )
    return result


# ============================================
# Queries
# ============================================


async def get_career(
    db: AsyncSession,
    career_id: UUID,
    *,
    principals: PrincipalDirectory = UserRepository,
) -> CareerResponse:
    """
    Raises:
        CareerNotFoundError: If the career does not exist
    """
    career = await _get_or_raise(db, career_id)
    [response] = await _enrich(db, [career], principals)
    return response


async def list_active_careers(
    db: AsyncSession,
    *,
    principals: PrincipalDirectory = UserRepository,
) -> list[CareerResponse]:
    careers = await repository.list_by_status(db, EntityStatus.ACTIVE)
    return await _enrich(db, careers, principals)


async def list_pending_careers(
    db: AsyncSession,
    *,
    principals: PrincipalDirectory = UserRepository,
) -> list[CareerResponse]:
    careers = await repository.list_by_status(db, EntityStatus.PENDING)
    return await _enrich(db, careers, principals)


async def list_all_careers(
    db: AsyncSession,
    *,
    principals: PrincipalDirectory = UserRepository,
) -> list[CareerResponse]:
    """All careers regardless of status, newest first."""
    careers = await repository.list_all(db)
    return await _enrich(db, careers, principals)
