"""
Shared module - Building blocks for audited, time-windowed records.
"""

from schoolcms.modules.shared.errors import (
    ConflictError,
    NotFoundError,
    PrincipalNotFoundError,
    ServiceError,
    StoreError,
    ValidationError,
)
from schoolcms.modules.shared.lifecycle import (
    EntityStatus,
    ReconcileResult,
    resolve_status,
    validate_window,
)
from schoolcms.modules.shared.models import (
    AuditMixin,
    BaseModel,
    UTCDateTime,
    WindowedMixin,
    WindowedModel,
)
from schoolcms.modules.shared.repository import WindowedRepository

__all__ = [
    # Errors
    "ServiceError",
    "ValidationError",
    "NotFoundError",
    "PrincipalNotFoundError",
    "ConflictError",
    "StoreError",
    # Lifecycle
    "EntityStatus",
    "ReconcileResult",
    "resolve_status",
    "validate_window",
    # Models
    "BaseModel",
    "AuditMixin",
    "WindowedMixin",
    "WindowedModel",
    "UTCDateTime",
    # Repository
    "WindowedRepository",
]
