"""
Shared Model Building Blocks

- UTCDateTime: timestamp column that always round-trips as aware UTC
- BaseModel: abstract base with UUID primary key and timestamps
- AuditMixin: created_by / updated_by principal references
- WindowedMixin: validity window and lifecycle status
- WindowedModel: all of the above combined
"""

import uuid
from datetime import datetime

from sqlalchemy import DateTime, Enum, Uuid, func
from sqlalchemy.engine import Dialect
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.types import TypeDecorator

from schoolcms.core.clock import ensure_utc, utc_now
from schoolcms.core.database import Base
from schoolcms.modules.shared.lifecycle import EntityStatus


class UTCDateTime(TypeDecorator):
    """
    Timezone-aware UTC timestamp.

    PostgreSQL stores it as TIMESTAMPTZ. Backends without timezone support
    (SQLite) store naive UTC; values are re-tagged as UTC when loaded.
    """

    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        if value is None:
            return None
        value = ensure_utc(value)
        if dialect.name == "sqlite":
            return value.replace(tzinfo=None)
        return value

    def process_result_value(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        if value is None:
            return None
        return ensure_utc(value)


class BaseModel(Base):
    """Abstract base: UUID primary key plus created/updated timestamps."""

    __abstract__ = True

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)

    created_at: Mapped[datetime] = mapped_column(
        UTCDateTime,
        default=utc_now,
        server_default=func.now(),
        nullable=False,
    )
    # NULL until the first mutation after creation
    updated_at: Mapped[datetime | None] = mapped_column(
        UTCDateTime,
        onupdate=utc_now,
        nullable=True,
    )


class AuditMixin:
    """Who created and last changed a record."""

    created_by: Mapped[uuid.UUID] = mapped_column(Uuid, nullable=False)
    updated_by: Mapped[uuid.UUID | None] = mapped_column(Uuid, nullable=True)


class WindowedMixin:
    """Validity window and the status derived from it."""

    starts_from: Mapped[datetime | None] = mapped_column(UTCDateTime, nullable=True)
    ends_at: Mapped[datetime | None] = mapped_column(UTCDateTime, nullable=True)

    status: Mapped[EntityStatus] = mapped_column(
        Enum(
            EntityStatus,
            name="entity_status",
            values_callable=lambda statuses: [s.value for s in statuses],
        ),
        nullable=False,
        default=EntityStatus.ACTIVE,
        index=True,
    )

    @property
    def is_active(self) -> bool:
        return self.status == EntityStatus.ACTIVE

    @property
    def is_pending(self) -> bool:
        return self.status == EntityStatus.PENDING


class WindowedModel(AuditMixin, WindowedMixin, BaseModel):
    """Abstract base for audited records with a validity window."""

    __abstract__ = True
