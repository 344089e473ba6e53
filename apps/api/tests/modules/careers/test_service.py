"""
Unit tests for careers service layer.

These tests cover:
- Career creation and initial status resolution
- Partial updates and status recomputation
- Deactivation and permanent deletion
- Status reconciliation
- Error handling (validation, unknown principals, store failures)
"""

from datetime import timedelta
from unittest.mock import AsyncMock, patch
from uuid import uuid4

import pytest
from sqlalchemy.exc import OperationalError

from schoolcms.modules.careers.schemas import CareerCreate, CareerUpdate
from schoolcms.modules.careers.service import (
    CareerNotFoundError,
    create_career,
    deactivate_career,
    delete_career,
    get_career,
    list_active_careers,
    list_all_careers,
    list_pending_careers,
    reconcile_career_statuses,
    update_career,
)
from schoolcms.modules.shared.errors import (
    NotFoundError,
    PrincipalNotFoundError,
    StoreError,
    ValidationError,
)
from schoolcms.modules.shared.lifecycle import EntityStatus, ReconcileResult

REPOSITORY = "schoolcms.modules.careers.service.repository"
DAY = timedelta(days=1)


async def _persist(db, career):
    career.id = uuid4()
    return career


async def _save(db, career):
    return career


class TestCreateCareer:
    """Tests for create_career."""

    @pytest.mark.asyncio
    async def test_create_without_window_is_active(
        self, mock_db, clock, principals, admin_id, sample_career_create
    ):
        with patch(REPOSITORY) as mock_repo:
            mock_repo.add = AsyncMock(side_effect=_persist)

            result = await create_career(
                mock_db, sample_career_create, admin_id, clock=clock, principals=principals
            )

            assert result.status == EntityStatus.ACTIVE
            assert result.is_active is True
            assert result.created_by == admin_id
            assert result.created_at == clock()
            assert result.updated_by is None
            assert result.updated_at is None
            assert result.created_by_user.full_name == "Ada Lovelace"
            assert result.updated_by_user is None
            mock_repo.add.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_create_with_future_start_is_pending(
        self, mock_db, clock, principals, admin_id, sample_career_create
    ):
        data = sample_career_create.model_copy(update={"starts_from": clock() + DAY})

        with patch(REPOSITORY) as mock_repo:
            mock_repo.add = AsyncMock(side_effect=_persist)

            result = await create_career(mock_db, data, admin_id, clock=clock, principals=principals)

            assert result.status == EntityStatus.PENDING
            assert result.is_pending is True

    @pytest.mark.asyncio
    async def test_create_with_past_end_is_inactive(
        self, mock_db, clock, principals, admin_id, sample_career_create
    ):
        data = sample_career_create.model_copy(update={"ends_at": clock() - DAY})

        with patch(REPOSITORY) as mock_repo:
            mock_repo.add = AsyncMock(side_effect=_persist)

            result = await create_career(mock_db, data, admin_id, clock=clock, principals=principals)

            assert result.status == EntityStatus.INACTIVE

    @pytest.mark.asyncio
    async def test_create_with_end_exactly_now_is_active(
        self, mock_db, clock, principals, admin_id, sample_career_create
    ):
        data = sample_career_create.model_copy(update={"ends_at": clock()})

        with patch(REPOSITORY) as mock_repo:
            mock_repo.add = AsyncMock(side_effect=_persist)

            result = await create_career(mock_db, data, admin_id, clock=clock, principals=principals)

            assert result.status == EntityStatus.ACTIVE

    @pytest.mark.asyncio
    async def test_create_with_inverted_window_raises_before_write(
        self, mock_db, clock, principals, admin_id, sample_career_create
    ):
        # model_copy skips validators, as a non-HTTP caller could
        data = sample_career_create.model_copy(
            update={"starts_from": clock() + 2 * DAY, "ends_at": clock() + DAY}
        )

        with patch(REPOSITORY) as mock_repo:
            mock_repo.add = AsyncMock(side_effect=_persist)

            with pytest.raises(ValidationError) as exc_info:
                await create_career(mock_db, data, admin_id, clock=clock, principals=principals)

            assert exc_info.value.error_code == "INVALID_WINDOW"
            mock_repo.add.assert_not_called()

    @pytest.mark.asyncio
    async def test_create_with_unknown_creator_raises(
        self, mock_db, clock, principals, sample_career_create
    ):
        with patch(REPOSITORY) as mock_repo:
            mock_repo.add = AsyncMock(side_effect=_persist)

            with pytest.raises(PrincipalNotFoundError):
                await create_career(
                    mock_db, sample_career_create, uuid4(), clock=clock, principals=principals
                )

            mock_repo.add.assert_not_called()

    @pytest.mark.asyncio
    async def test_create_store_failure_rolls_back(
        self, mock_db, clock, principals, admin_id, sample_career_create
    ):
        with patch(REPOSITORY) as mock_repo:
            mock_repo.add = AsyncMock(side_effect=OperationalError("INSERT", {}, Exception("down")))

            with pytest.raises(StoreError) as exc_info:
                await create_career(
                    mock_db, sample_career_create, admin_id, clock=clock, principals=principals
                )

            assert exc_info.value.status_code == 503
            assert isinstance(exc_info.value.__cause__, OperationalError)
            mock_db.rollback.assert_awaited_once()


class TestUpdateCareer:
    """Tests for update_career."""

    @pytest.mark.asyncio
    async def test_update_missing_career_raises(self, mock_db, clock, principals, admin_id):
        with patch(REPOSITORY) as mock_repo:
            mock_repo.get_by_id = AsyncMock(return_value=None)

            with pytest.raises(CareerNotFoundError) as exc_info:
                await update_career(
                    mock_db,
                    uuid4(),
                    CareerUpdate(title="New"),
                    admin_id,
                    clock=clock,
                    principals=principals,
                )

            assert isinstance(exc_info.value, NotFoundError)
            assert exc_info.value.status_code == 404

    @pytest.mark.asyncio
    async def test_update_content_only_keeps_status(
        self, mock_db, clock, principals, admin_id, sample_career
    ):
        """A deactivated career stays inactive when only content changes."""
        sample_career.status = EntityStatus.INACTIVE

        with patch(REPOSITORY) as mock_repo:
            mock_repo.get_by_id = AsyncMock(return_value=sample_career)
            mock_repo.save = AsyncMock(side_effect=_save)

            result = await update_career(
                mock_db,
                sample_career.id,
                CareerUpdate(title="Head of Mathematics"),
                admin_id,
                clock=clock,
                principals=principals,
            )

            assert result.title == "Head of Mathematics"
            assert result.position == "Senior Teacher"
            assert result.status == EntityStatus.INACTIVE

    @pytest.mark.asyncio
    async def test_update_stamps_updater(self, mock_db, clock, principals, admin_id, sample_career):
        created_at = sample_career.created_at

        with patch(REPOSITORY) as mock_repo:
            mock_repo.get_by_id = AsyncMock(return_value=sample_career)
            mock_repo.save = AsyncMock(side_effect=_save)

            result = await update_career(
                mock_db,
                sample_career.id,
                CareerUpdate(description="Updated"),
                admin_id,
                clock=clock,
                principals=principals,
            )

            assert result.updated_by == admin_id
            assert result.updated_at == clock()
            assert result.updated_by_user.full_name == "Ada Lovelace"
            assert result.created_at == created_at

    @pytest.mark.asyncio
    async def test_update_past_end_deactivates(
        self, mock_db, clock, principals, admin_id, sample_career
    ):
        with patch(REPOSITORY) as mock_repo:
            mock_repo.get_by_id = AsyncMock(return_value=sample_career)
            mock_repo.save = AsyncMock(side_effect=_save)

            result = await update_career(
                mock_db,
                sample_career.id,
                CareerUpdate(ends_at=clock() - DAY),
                admin_id,
                clock=clock,
                principals=principals,
            )

            assert result.status == EntityStatus.INACTIVE

    @pytest.mark.asyncio
    async def test_update_window_revives_deactivated_career(
        self, mock_db, clock, principals, admin_id, sample_career
    ):
        sample_career.status = EntityStatus.INACTIVE

        with patch(REPOSITORY) as mock_repo:
            mock_repo.get_by_id = AsyncMock(return_value=sample_career)
            mock_repo.save = AsyncMock(side_effect=_save)

            result = await update_career(
                mock_db,
                sample_career.id,
                CareerUpdate(ends_at=clock() + DAY),
                admin_id,
                clock=clock,
                principals=principals,
            )

            assert result.status == EntityStatus.ACTIVE

    @pytest.mark.asyncio
    async def test_update_clearing_start_activates_pending(
        self, mock_db, clock, principals, admin_id, sample_career
    ):
        sample_career.starts_from = clock() + DAY
        sample_career.status = EntityStatus.PENDING

        with patch(REPOSITORY) as mock_repo:
            mock_repo.get_by_id = AsyncMock(return_value=sample_career)
            mock_repo.save = AsyncMock(side_effect=_save)

            result = await update_career(
                mock_db,
                sample_career.id,
                CareerUpdate(starts_from=None),
                admin_id,
                clock=clock,
                principals=principals,
            )

            assert result.starts_from is None
            assert result.status == EntityStatus.ACTIVE

    @pytest.mark.asyncio
    async def test_update_merged_window_is_validated(
        self, mock_db, clock, principals, admin_id, sample_career
    ):
        """A new start is checked against the stored end."""
        sample_career.ends_at = clock() + DAY

        with patch(REPOSITORY) as mock_repo:
            mock_repo.get_by_id = AsyncMock(return_value=sample_career)
            mock_repo.save = AsyncMock(side_effect=_save)

            with pytest.raises(ValidationError):
                await update_career(
                    mock_db,
                    sample_career.id,
                    CareerUpdate(starts_from=clock() + 2 * DAY),
                    admin_id,
                    clock=clock,
                    principals=principals,
                )

            mock_repo.save.assert_not_called()

    @pytest.mark.asyncio
    async def test_update_with_unknown_updater_raises(
        self, mock_db, clock, principals, sample_career
    ):
        with patch(REPOSITORY) as mock_repo:
            mock_repo.get_by_id = AsyncMock(return_value=sample_career)
            mock_repo.save = AsyncMock(side_effect=_save)

            with pytest.raises(PrincipalNotFoundError):
                await update_career(
                    mock_db,
                    sample_career.id,
                    CareerUpdate(title="x"),
                    uuid4(),
                    clock=clock,
                    principals=principals,
                )

            mock_repo.save.assert_not_called()
            assert sample_career.title == "Mathematics Teacher"


class TestDeactivateCareer:
    """Tests for deactivate_career."""

    @pytest.mark.asyncio
    async def test_deactivate_active_career(
        self, mock_db, clock, principals, admin_id, sample_career
    ):
        with patch(REPOSITORY) as mock_repo:
            mock_repo.get_by_id = AsyncMock(return_value=sample_career)
            mock_repo.save = AsyncMock(side_effect=_save)

            result = await deactivate_career(
                mock_db, sample_career.id, admin_id, clock=clock, principals=principals
            )

            assert result.status == EntityStatus.INACTIVE
            assert result.updated_by == admin_id
            assert result.updated_at == clock()

    @pytest.mark.asyncio
    async def test_deactivate_pending_career_ignores_window(
        self, mock_db, clock, principals, admin_id, sample_career
    ):
        sample_career.starts_from = clock() + DAY
        sample_career.status = EntityStatus.PENDING

        with patch(REPOSITORY) as mock_repo:
            mock_repo.get_by_id = AsyncMock(return_value=sample_career)
            mock_repo.save = AsyncMock(side_effect=_save)

            result = await deactivate_career(
                mock_db, sample_career.id, admin_id, clock=clock, principals=principals
            )

            assert result.status == EntityStatus.INACTIVE
            assert result.starts_from == clock() + DAY

    @pytest.mark.asyncio
    async def test_deactivate_is_idempotent(
        self, mock_db, clock, principals, admin_id, sample_career
    ):
        sample_career.status = EntityStatus.INACTIVE

        with patch(REPOSITORY) as mock_repo:
            mock_repo.get_by_id = AsyncMock(return_value=sample_career)
            mock_repo.save = AsyncMock(side_effect=_save)

            result = await deactivate_career(
                mock_db, sample_career.id, admin_id, clock=clock, principals=principals
            )

            assert result.status == EntityStatus.INACTIVE

    @pytest.mark.asyncio
    async def test_deactivate_missing_career_raises(self, mock_db, clock, principals, admin_id):
        with patch(REPOSITORY) as mock_repo:
            mock_repo.get_by_id = AsyncMock(return_value=None)

            with pytest.raises(CareerNotFoundError):
                await deactivate_career(
                    mock_db, uuid4(), admin_id, clock=clock, principals=principals
                )


class TestDeleteCareer:
    """Tests for delete_career."""

    @pytest.mark.asyncio
    async def test_delete_removes_career(self, mock_db, sample_career):
        with patch(REPOSITORY) as mock_repo:
            mock_repo.get_by_id = AsyncMock(return_value=sample_career)
            mock_repo.delete = AsyncMock()

            await delete_career(mock_db, sample_career.id)

            mock_repo.delete.assert_awaited_once_with(mock_db, sample_career)

    @pytest.mark.asyncio
    async def test_delete_missing_career_raises(self, mock_db):
        with patch(REPOSITORY) as mock_repo:
            mock_repo.get_by_id = AsyncMock(return_value=None)
            mock_repo.delete = AsyncMock()

            with pytest.raises(CareerNotFoundError):
                await delete_career(mock_db, uuid4())

            mock_repo.delete.assert_not_called()

    @pytest.mark.asyncio
    async def test_delete_store_failure_rolls_back(self, mock_db, sample_career):
        with patch(REPOSITORY) as mock_repo:
            mock_repo.get_by_id = AsyncMock(return_value=sample_career)
            mock_repo.delete = AsyncMock(side_effect=OperationalError("DELETE", {}, Exception("x")))

            with pytest.raises(StoreError):
                await delete_career(mock_db, sample_career.id)

            mock_db.rollback.assert_awaited_once()


class TestReconcileCareerStatuses:
    """Tests for reconcile_career_statuses."""

    @pytest.mark.asyncio
    async def test_reconcile_uses_single_clock_sample(self, mock_db, clock):
        with patch(REPOSITORY) as mock_repo:
            mock_repo.reconcile = AsyncMock(
                return_value=ReconcileResult(activated_count=2, deactivated_count=1)
            )

            result = await reconcile_career_statuses(mock_db, clock=clock)

            assert result.activated_count == 2
            assert result.deactivated_count == 1
            mock_repo.reconcile.assert_awaited_once_with(mock_db, clock())

    @pytest.mark.asyncio
    async def test_reconcile_store_failure_raises_store_error(self, mock_db, clock):
        with patch(REPOSITORY) as mock_repo:
            mock_repo.reconcile = AsyncMock(
                side_effect=OperationalError("UPDATE", {}, Exception("x"))
            )

            with pytest.raises(StoreError):
                await reconcile_career_statuses(mock_db, clock=clock)

            mock_db.rollback.assert_awaited_once()


class TestQueries:
    """Tests for read operations."""

    @pytest.mark.asyncio
    async def test_get_career_enriches_names(self, mock_db, principals, sample_career):
        with patch(REPOSITORY) as mock_repo:
            mock_repo.get_by_id = AsyncMock(return_value=sample_career)

            result = await get_career(mock_db, sample_career.id, principals=principals)

            assert result.id == sample_career.id
            assert result.created_by_user.full_name == "Ada Lovelace"

    @pytest.mark.asyncio
    async def test_get_missing_career_raises(self, mock_db, principals):
        with patch(REPOSITORY) as mock_repo:
            mock_repo.get_by_id = AsyncMock(return_value=None)

            with pytest.raises(CareerNotFoundError):
                await get_career(mock_db, uuid4(), principals=principals)

    @pytest.mark.asyncio
    async def test_list_active_filters_by_status(self, mock_db, principals, sample_career):
        with patch(REPOSITORY) as mock_repo:
            mock_repo.list_by_status = AsyncMock(return_value=[sample_career])

            result = await list_active_careers(mock_db, principals=principals)

            assert [c.id for c in result] == [sample_career.id]
            mock_repo.list_by_status.assert_awaited_once_with(mock_db, EntityStatus.ACTIVE)

    @pytest.mark.asyncio
    async def test_list_pending_filters_by_status(self, mock_db, principals):
        with patch(REPOSITORY) as mock_repo:
            mock_repo.list_by_status = AsyncMock(return_value=[])

            result = await list_pending_careers(mock_db, principals=principals)

            assert result == []
            mock_repo.list_by_status.assert_awaited_once_with(mock_db, EntityStatus.PENDING)
            principals.get_full_names.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_list_all_includes_every_status(self, mock_db, principals, sample_career):
        with patch(REPOSITORY) as mock_repo:
            mock_repo.list_all = AsyncMock(return_value=[sample_career])

            result = await list_all_careers(mock_db, principals=principals)

            assert len(result) == 1
            mock_repo.list_all.assert_awaited_once_with(mock_db)
