"""
Fixtures for careers tests.
"""

from datetime import UTC, datetime
from unittest.mock import AsyncMock, MagicMock
from uuid import uuid4

import pytest

from schoolcms.modules.careers.models import Career
from schoolcms.modules.careers.schemas import CareerCreate
from schoolcms.modules.shared.lifecycle import EntityStatus


@pytest.fixture
def admin_id():
    return uuid4()


@pytest.fixture
def principals(admin_id):
    """A principal directory that knows only ``admin_id``."""
    directory = MagicMock()
    directory.exists = AsyncMock(side_effect=lambda db, principal_id: principal_id == admin_id)
    directory.get_full_names = AsyncMock(return_value={admin_id: "Ada Lovelace"})
    return directory


@pytest.fixture
def sample_career_create():
    """A request body with no window."""
    return CareerCreate(
        title="Mathematics Teacher",
        position="Senior Teacher",
        description="Teach mathematics to senior secondary classes.",
        requirements="B.Ed in Mathematics, 3 years experience.",
    )


@pytest.fixture
def sample_career(admin_id):
    """A stored, active career with no window."""
    return Career(
        id=uuid4(),
        title="Mathematics Teacher",
        position="Senior Teacher",
        description="Teach mathematics to senior secondary classes.",
        requirements="B.Ed in Mathematics, 3 years experience.",
        starts_from=None,
        ends_at=None,
        status=EntityStatus.ACTIVE,
        created_by=admin_id,
        updated_by=None,
        created_at=datetime(2025, 3, 1, 9, 0, tzinfo=UTC),
        updated_at=None,
    )
