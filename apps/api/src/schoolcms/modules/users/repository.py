"""
User Repository

Read-only user lookups. Serves as the principal directory for audit
stamping (existence checks and display names).
"""

from collections.abc import Iterable
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from schoolcms.modules.users.models import User, build_full_name


class UserRepository:
    """Repository for user lookups."""

    @staticmethod
    async def exists(db: AsyncSession, principal_id: UUID) -> bool:
        """Check whether a user with this ID exists."""
        result = await db.execute(select(User.id).where(User.id == principal_id))
        return result.scalar_one_or_none() is not None

    @staticmethod
    async def get_full_names(db: AsyncSession, principal_ids: Iterable[UUID]) -> dict[UUID, str]:
        """
        Look up display names for several users in one query.

        Unknown IDs are simply absent from the result.
        """
        ids = list(set(principal_ids))
        if not ids:
            return {}

        result = await db.execute(
            select(User.id, User.first_name, User.middle_name, User.last_name).where(
                User.id.in_(ids)
            )
        )
        return {
            row.id: build_full_name(row.first_name, row.middle_name, row.last_name)
            for row in result.all()
        }
