"""
Audit Stamping

Every mutation records the acting principal and the time. Principals live in
an external directory (the users table in this service); the lifecycle code
only needs to check that a principal exists and to look up display names.
"""

from collections.abc import Iterable
from datetime import datetime
from typing import Protocol
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from schoolcms.modules.shared.errors import PrincipalNotFoundError
from schoolcms.modules.shared.models import AuditMixin, BaseModel
from schoolcms.modules.shared.schemas import AuditUserInfo


class PrincipalDirectory(Protocol):
    """Lookup of acting users."""

    async def exists(self, db: AsyncSession, principal_id: UUID) -> bool: ...

    async def get_full_names(
        self, db: AsyncSession, principal_ids: Iterable[UUID]
    ) -> dict[UUID, str]: ...


async def ensure_principal_exists(
    directory: PrincipalDirectory,
    db: AsyncSession,
    principal_id: UUID,
) -> None:
    """
    Raises:
        PrincipalNotFoundError: If the principal is unknown
    """
    if not await directory.exists(db, principal_id):
        raise PrincipalNotFoundError(principal_id)


def stamp_created(entity: AuditMixin, principal_id: UUID, now: datetime) -> None:
    """Mark a new record as created by ``principal_id`` at ``now``."""
    entity.created_by = principal_id
    entity.updated_by = None
    if isinstance(entity, BaseModel):
        entity.created_at = now
        entity.updated_at = None


def stamp_updated(entity: AuditMixin, principal_id: UUID, now: datetime) -> None:
    """Mark a record as changed by ``principal_id`` at ``now``."""
    entity.updated_by = principal_id
    if isinstance(entity, BaseModel):
        entity.updated_at = now


async def collect_audit_names(
    directory: PrincipalDirectory,
    db: AsyncSession,
    entities: Iterable[AuditMixin],
) -> dict[UUID, str]:
    """Resolve display names for every creator and updater in one lookup."""
    principal_ids: set[UUID] = set()
    for entity in entities:
        principal_ids.add(entity.created_by)
        if entity.updated_by is not None:
            principal_ids.add(entity.updated_by)

    if not principal_ids:
        return {}
    return await directory.get_full_names(db, principal_ids)


def audit_user(principal_id: UUID | None, names: dict[UUID, str]) -> AuditUserInfo | None:
    """Build the audit user block, or None if the principal is unset or gone."""
    if principal_id is None or principal_id not in names:
        return None
    return AuditUserInfo(id=principal_id, full_name=names[principal_id])
