"""
Windowed Entity Repository

Database operations shared by every model built on ``WindowedMixin`` and
``AuditMixin``. Only data access lives here; validation, status resolution
and audit stamping are done by the calling service.

Design Principles:
- Listings are newest first (created_at DESC)
- Reconciliation is two predicate-based bulk UPDATEs, never fetch-modify-save
- Reconciliation never touches INACTIVE rows, so an explicit deactivation
  is not undone by the window mechanism
"""

import logging
from datetime import datetime
from typing import Generic, TypeVar
from uuid import UUID

from sqlalchemy import or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from schoolcms.modules.shared.lifecycle import EntityStatus, ReconcileResult
from schoolcms.modules.shared.models import WindowedModel

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=WindowedModel)


class WindowedRepository(Generic[ModelT]):
    """Repository for a single windowed, audited model."""

    def __init__(self, model: type[ModelT]):
        self.model = model

    async def add(self, db: AsyncSession, entity: ModelT) -> ModelT:
        """Persist a new record."""
        db.add(entity)
        await db.commit()
        await db.refresh(entity)
        return entity

    async def get_by_id(self, db: AsyncSession, entity_id: UUID) -> ModelT | None:
        return await db.get(self.model, entity_id)

    async def list_by_status(self, db: AsyncSession, status: EntityStatus) -> list[ModelT]:
        result = await db.execute(
            select(self.model)
            .where(self.model.status == status)
            .order_by(self.model.created_at.desc())
        )
        return list(result.scalars().all())

    async def list_all(self, db: AsyncSession) -> list[ModelT]:
        result = await db.execute(select(self.model).order_by(self.model.created_at.desc()))
        return list(result.scalars().all())

    async def save(self, db: AsyncSession, entity: ModelT) -> ModelT:
        """Commit pending changes made to a loaded record."""
        await db.commit()
        await db.refresh(entity)
        return entity

    async def delete(self, db: AsyncSession, entity: ModelT) -> None:
        """Physically remove a record."""
        await db.delete(entity)
        await db.commit()

    async def reconcile(self, db: AsyncSession, now: datetime) -> ReconcileResult:
        """
        Bring statuses in line with ``now``.

        1. PENDING rows with ``starts_from <= now`` and no end, or an end
           strictly after ``now``, become ACTIVE.
        2. ACTIVE rows with ``ends_at < now`` become INACTIVE.

        Only ACTIVE rows are expired, so a PENDING row whose whole window
        passed between two sweeps stays PENDING until it is updated. Both
        updates run in one transaction and stamp ``updated_at=now``. Running twice
        with the same ``now`` changes nothing the second time.

        Args:
            db: Database session
            now: The instant to reconcile against

        Returns:
            Number of rows activated and deactivated
        """
        model = self.model

        activate_stmt = (
            update(model)
            .where(
                model.status == EntityStatus.PENDING,
                model.starts_from <= now,
                or_(model.ends_at.is_(None), model.ends_at > now),
            )
            .values(status=EntityStatus.ACTIVE, updated_at=now)
            .returning(model.id)
            .execution_options(synchronize_session="fetch")
        )
        activated = (await db.execute(activate_stmt)).all()

        expire_stmt = (
            update(model)
            .where(
                model.status == EntityStatus.ACTIVE,
                model.ends_at.is_not(None),
                model.ends_at < now,
            )
            .values(status=EntityStatus.INACTIVE, updated_at=now)
            .returning(model.id)
            .execution_options(synchronize_session="fetch")
        )
        deactivated = (await db.execute(expire_stmt)).all()

        await db.commit()

        return ReconcileResult(
            activated_count=len(activated),
            deactivated_count=len(deactivated),
        )
