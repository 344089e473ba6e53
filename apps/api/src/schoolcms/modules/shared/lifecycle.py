"""
Time-Windowed Lifecycle

Status model for records that are only live inside a validity window
``[starts_from, ends_at]``. Either bound may be absent: no start means the
record has always started, no end means it never ends.

Status values:
- PENDING: the window has not opened yet
- ACTIVE: inside the window
- INACTIVE: the window has closed, or the record was explicitly deactivated

``resolve_status`` is the single rule used at creation, on window updates and
(as SQL predicates) by the batch reconciler.
"""

import enum
from dataclasses import dataclass
from datetime import datetime

from schoolcms.core.clock import ensure_utc
from schoolcms.modules.shared.errors import ValidationError


class EntityStatus(str, enum.Enum):
    """Lifecycle status of a windowed record."""

    ACTIVE = "active"
    PENDING = "pending"
    INACTIVE = "inactive"


def resolve_status(
    now: datetime,
    starts_from: datetime | None,
    ends_at: datetime | None,
) -> EntityStatus:
    """
    Compute the status a record should have at ``now``.

    Both bounds are inclusive: a record whose window starts or ends exactly
    at ``now`` is ACTIVE.

    Args:
        now: The instant to evaluate at, sampled once by the caller
        starts_from: Start of the window, or None for "always started"
        ends_at: End of the window, or None for "never ends"

    Returns:
        The resolved status
    """
    now = ensure_utc(now)
    if starts_from is not None and ensure_utc(starts_from) > now:
        return EntityStatus.PENDING
    if ends_at is not None and ensure_utc(ends_at) < now:
        return EntityStatus.INACTIVE
    return EntityStatus.ACTIVE


def validate_window(starts_from: datetime | None, ends_at: datetime | None) -> None:
    """
    Reject windows that end before they start.

    Raises:
        ValidationError: If both bounds are set and starts_from > ends_at
    """
    if starts_from is None or ends_at is None:
        return
    if ensure_utc(starts_from) > ensure_utc(ends_at):
        raise ValidationError(
            "Start date must not be after end date",
            error_code="INVALID_WINDOW",
        )


@dataclass(frozen=True)
class ReconcileResult:
    """Outcome of one reconciliation sweep."""

    activated_count: int
    deactivated_count: int

    @property
    def total_changed(self) -> int:
        return self.activated_count + self.deactivated_count
