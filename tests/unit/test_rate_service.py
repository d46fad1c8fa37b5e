"""Tests for RateService."""
import pytest
from datetime import date, datetime
from decimal import Decimal
from unittest.mock import MagicMock
from bson.decimal128 import Decimal128


def rate_doc(owner_kind, owner_id, rate, **extra):
    doc = {
        "user_id": "user123",
        "owner_kind": owner_kind,
        "owner_id": owner_id,
        "rate": Decimal128(rate),
        "rate_type": "hourly",
        "currency": "USD",
        "effective_from": None,
        "effective_until": None,
        "updated_at": datetime(2025, 1, 1),
    }
    doc.update(extra)
    return doc


@pytest.mark.asyncio
class TestRateServiceSet:
    """Tests for setting rates."""

    async def test_set_rate_for_existing_project(self, mock_db):
        """Test a rate is upserted for an existing owner."""
        from solowork.models.billing_rate import BillingRateSet, ProjectRate, RateOwnerKind
        from solowork.services.rate_service import RateService

        mock_db["projects"].find_one.return_value = {"_id": 1, "user_id": "user123", "deleted": False}

        service = RateService(mock_db)
        rate = await service.set_rate(
            user_id="user123",
            owner_kind=RateOwnerKind.PROJECT,
            owner_id=1,
            rate_set=BillingRateSet(rate=Decimal("150")),
        )

        assert isinstance(rate, ProjectRate)
        assert rate.owner_kind == "project"
        assert rate.rate == Decimal("150")
        assert rate.currency == "USD"

        call = mock_db["billing_rates"].update_one.call_args
        assert call[0][0] == {"user_id": "user123", "owner_kind": "project", "owner_id": 1}
        assert call[0][1]["$set"]["rate"] == Decimal128("150")
        assert call[1]["upsert"] is True

    async def test_set_rate_missing_owner(self, mock_db):
        """Test setting a rate on an unknown owner fails."""
        from solowork.models.billing_rate import BillingRateSet, RateOwnerKind
        from solowork.services.rate_service import RateService

        service = RateService(mock_db)

        with pytest.raises(ValueError, match="Time entry not found"):
            await service.set_rate(
                user_id="user123",
                owner_kind=RateOwnerKind.TIME_ENTRY,
                owner_id=9,
                rate_set=BillingRateSet(rate=Decimal("80")),
            )

        mock_db["billing_rates"].update_one.assert_not_called()

    async def test_set_rate_on_deleted_task(self, mock_db):
        """Test soft-deleted owners count as missing."""
        from solowork.models.billing_rate import BillingRateSet, RateOwnerKind
        from solowork.services.rate_service import RateService

        mock_db["tasks"].find_one.return_value = {"_id": 4, "user_id": "user123", "deleted": True}

        service = RateService(mock_db)

        with pytest.raises(ValueError, match="Task not found"):
            await service.set_rate(
                user_id="user123",
                owner_kind=RateOwnerKind.TASK,
                owner_id=4,
                rate_set=BillingRateSet(rate=Decimal("80")),
            )

    async def test_effective_window_stored_as_datetimes(self, mock_db):
        """Test effective dates are stored as midnight datetimes."""
        from solowork.models.billing_rate import BillingRateSet, RateOwnerKind
        from solowork.services.rate_service import RateService

        service = RateService(mock_db)
        rate = await service.upsert_rate(
            "user123",
            RateOwnerKind.CLIENT,
            3,
            BillingRateSet(rate=Decimal("100"), effective_from=date(2025, 1, 1), currency="EUR"),
        )

        stored = mock_db["billing_rates"].update_one.call_args[0][1]["$set"]
        assert stored["effective_from"] == datetime(2025, 1, 1)
        assert rate.effective_from == date(2025, 1, 1)
        assert rate.currency == "EUR"


@pytest.mark.asyncio
class TestRateServiceRead:
    """Tests for reading and deleting rates."""

    async def test_get_rate_found(self, mock_db):
        """Test a stored rate is converted back to Decimal."""
        from solowork.models.billing_rate import ClientRate, RateOwnerKind
        from solowork.services.rate_service import RateService

        mock_db["billing_rates"].find_one.return_value = rate_doc("client", 3, "100.50")

        service = RateService(mock_db)
        rate = await service.get_rate("user123", RateOwnerKind.CLIENT, 3)

        assert isinstance(rate, ClientRate)
        assert rate.rate == Decimal("100.50")

    async def test_get_rate_missing(self, mock_db):
        """Test owners without a rate give None."""
        from solowork.models.billing_rate import RateOwnerKind
        from solowork.services.rate_service import RateService

        service = RateService(mock_db)

        assert await service.get_rate("user123", RateOwnerKind.CLIENT, 3) is None

    async def test_rates_for_maps_by_owner(self, mock_db):
        """Test bulk lookup returns a mapping keyed by owner id."""
        from solowork.models.billing_rate import RateOwnerKind
        from solowork.services.rate_service import RateService

        mock_db["billing_rates"].find.return_value.to_list.return_value = [
            rate_doc("task", 1, "90"),
            rate_doc("task", 3, "120"),
        ]

        service = RateService(mock_db)
        rates = await service.rates_for("user123", RateOwnerKind.TASK, [1, 2, 3])

        assert set(rates) == {1, 3}
        assert rates[3].rate == Decimal("120")

    async def test_rates_for_no_ids(self, mock_db):
        """Test an empty id list does not query."""
        from solowork.models.billing_rate import RateOwnerKind
        from solowork.services.rate_service import RateService

        service = RateService(mock_db)

        assert await service.rates_for("user123", RateOwnerKind.TASK, []) == {}
        mock_db["billing_rates"].find.assert_not_called()

    async def test_list_rates_mixed_kinds(self, mock_db):
        """Test listing returns the variant model for each owner kind."""
        from solowork.models.billing_rate import ClientRate, TimeEntryRate
        from solowork.services.rate_service import RateService

        mock_db["billing_rates"].find.return_value.to_list.return_value = [
            rate_doc("client", 3, "100"),
            rate_doc("time_entry", 12, "75"),
        ]

        service = RateService(mock_db)
        rates = await service.list_rates("user123")

        assert isinstance(rates[0], ClientRate)
        assert isinstance(rates[1], TimeEntryRate)

    async def test_delete_rate_missing(self, mock_db):
        """Test deleting a rate that does not exist fails."""
        from solowork.models.billing_rate import RateOwnerKind
        from solowork.services.rate_service import RateService

        mock_db["billing_rates"].delete_one.return_value = MagicMock(deleted_count=0)

        service = RateService(mock_db)

        with pytest.raises(ValueError, match="Billing rate not found"):
            await service.delete_rate("user123", RateOwnerKind.PROJECT, 1)

    async def test_delete_rate(self, mock_db):
        """Test deleting an existing rate."""
        from solowork.models.billing_rate import RateOwnerKind
        from solowork.services.rate_service import RateService

        mock_db["billing_rates"].delete_one.return_value = MagicMock(deleted_count=1)

        service = RateService(mock_db)
        result = await service.delete_rate("user123", RateOwnerKind.PROJECT, 1)

        assert result == {"deleted_count": 1}
