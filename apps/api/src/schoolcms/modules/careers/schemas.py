"""
Career Schemas

Pydantic schemas for request validation and response serialization.
"""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, computed_field, field_validator, model_validator

from schoolcms.core.clock import ensure_utc
from schoolcms.modules.shared.lifecycle import EntityStatus
from schoolcms.modules.shared.schemas import AuditUserInfo


def _normalize_datetime(value: datetime | None) -> datetime | None:
    """Naive datetimes from clients are taken to be UTC."""
    if value is None:
        return None
    return ensure_utc(value)


class CareerCreate(BaseModel):
    """Request body for POST /careers."""

    title: str = Field(..., min_length=1, max_length=200)
    position: str = Field(..., min_length=1, max_length=200)
    description: str = Field(..., min_length=1)
    requirements: str = Field(..., min_length=1)
    starts_from: datetime | None = None
    ends_at: datetime | None = None

    @field_validator("starts_from", "ends_at")
    @classmethod
    def normalize_window(cls, value: datetime | None) -> datetime | None:
        return _normalize_datetime(value)

    @model_validator(mode="after")
    def validate_window_order(self) -> "CareerCreate":
        if self.starts_from and self.ends_at and self.starts_from > self.ends_at:
            raise ValueError("starts_from must not be after ends_at")
        return self


class CareerUpdate(BaseModel):
    """
    Request body for PUT /careers/{id}.

    Every field is optional; only fields present in the request are applied.
    Sending ``null`` for starts_from or ends_at removes that bound. Content
    fields cannot be set to null.
    """

    title: str | None = Field(None, min_length=1, max_length=200)
    position: str | None = Field(None, min_length=1, max_length=200)
    description: str | None = Field(None, min_length=1)
    requirements: str | None = Field(None, min_length=1)
    starts_from: datetime | None = None
    ends_at: datetime | None = None

    @field_validator("starts_from", "ends_at")
    @classmethod
    def normalize_window(cls, value: datetime | None) -> datetime | None:
        return _normalize_datetime(value)

    @model_validator(mode="after")
    def validate_update(self) -> "CareerUpdate":
        for field in ("title", "position", "description", "requirements"):
            if field in self.model_fields_set and getattr(self, field) is None:
                raise ValueError(f"{field} cannot be null")

        if self.starts_from and self.ends_at and self.starts_from > self.ends_at:
            raise ValueError("starts_from must not be after ends_at")
        return self

    @property
    def window_changed(self) -> bool:
        """True if either window bound was supplied."""
        return bool({"starts_from", "ends_at"} & self.model_fields_set)


class CareerResponse(BaseModel):
    """A career with creator / updater display names."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    title: str
    position: str
    description: str
    requirements: str
    starts_from: datetime | None
    ends_at: datetime | None
    status: EntityStatus
    created_by: UUID
    updated_by: UUID | None
    created_at: datetime
    updated_at: datetime | None
    created_by_user: AuditUserInfo | None = None
    updated_by_user: AuditUserInfo | None = None

    @computed_field
    @property
    def is_active(self) -> bool:
        return self.status == EntityStatus.ACTIVE

    @computed_field
    @property
    def is_pending(self) -> bool:
        return self.status == EntityStatus.PENDING


class CareerListResponse(BaseModel):
    items: list[CareerResponse]
    total: int


class DeleteCareerResponse(BaseModel):
    id: UUID
    message: str = "Career permanently deleted"
