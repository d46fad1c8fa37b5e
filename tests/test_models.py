"""Tests for Pydantic models."""
import pytest
from datetime import date, datetime, timezone
from decimal import Decimal
from pydantic import TypeAdapter, ValidationError


class TestBillingRateModel:
    """Tests for billing rate models."""

    def test_owner_kind_enum_values(self):
        """Test RateOwnerKind has the four owner kinds."""
        from solowork.models.billing_rate import RateOwnerKind

        assert [kind.value for kind in RateOwnerKind] == ["client", "project", "task", "time_entry"]

    def test_discriminated_union(self):
        """Test owner_kind picks the rate variant."""
        from solowork.models.billing_rate import BillingRate, TaskRate

        rate = TypeAdapter(BillingRate).validate_python({
            "owner_kind": "task",
            "owner_id": 7,
            "rate": "200",
        })

        assert isinstance(rate, TaskRate)
        assert rate.rate == Decimal("200")
        assert rate.currency == "USD"

    def test_unknown_owner_kind_rejected(self):
        """Test owner kinds outside the union are rejected."""
        from solowork.models.billing_rate import BillingRate

        with pytest.raises(ValidationError):
            TypeAdapter(BillingRate).validate_python({"owner_kind": "user", "owner_id": 1, "rate": "1"})

    def test_rate_set_rejects_negative(self):
        """Test rates cannot be negative."""
        from solowork.models.billing_rate import BillingRateSet

        with pytest.raises(ValidationError):
            BillingRateSet(rate=Decimal("-1"))

    def test_rate_set_window_order(self):
        """Test the effective window cannot end before it starts."""
        from solowork.models.billing_rate import BillingRateSet

        with pytest.raises(ValidationError, match="effective_until"):
            BillingRateSet(
                rate=Decimal("100"),
                effective_from=date(2025, 2, 1),
                effective_until=date(2025, 1, 1),
            )

    def test_is_active_on(self):
        """Test effective date bounds are inclusive."""
        from solowork.models.billing_rate import ProjectRate

        rate = ProjectRate(
            owner_id=1,
            rate=Decimal("150"),
            effective_from=date(2025, 1, 1),
            effective_until=date(2025, 1, 31),
        )

        assert rate.is_active_on(date(2025, 1, 1)) is True
        assert rate.is_active_on(date(2025, 1, 31)) is True
        assert rate.is_active_on(date(2025, 2, 1)) is False
        assert rate.is_active_on(None) is True


class TestTimeEntryModel:
    """Tests for time entry models."""

    def test_create_requires_end_after_start(self):
        """Test entries must end after they start."""
        from solowork.models.time_entry import TimeEntryCreate

        with pytest.raises(ValidationError, match="ended_at must be after started_at"):
            TimeEntryCreate(
                started_at=datetime(2025, 1, 15, 11, 0),
                ended_at=datetime(2025, 1, 15, 9, 0),
            )

    def test_create_mixed_offsets(self):
        """Test a Z-suffixed start and a naive end are both read as UTC."""
        from solowork.models.time_entry import TimeEntryCreate

        entry = TimeEntryCreate(started_at="2025-01-15T09:00:00Z", ended_at="2025-01-15T11:30:00")

        assert entry.started_at == datetime(2025, 1, 15, 9, 0)
        assert entry.started_at.tzinfo is None

    def test_create_mixed_offsets_end_before_start(self):
        """Test a mixed pair out of order fails validation."""
        from solowork.models.time_entry import TimeEntryCreate

        with pytest.raises(ValidationError, match="ended_at must be after started_at"):
            TimeEntryCreate(started_at="2025-01-15T09:00:00+00:00", ended_at="2025-01-15T08:00:00")

    def test_timer_models_normalize(self):
        """Test timer start and stop times are stored as naive UTC."""
        from solowork.models.time_entry import TimerStart, TimerStop

        start = TimerStart(started_at="2025-01-15T10:00:00+01:00")
        stop = TimerStop(ended_at=datetime(2025, 1, 15, 11, 30, tzinfo=timezone.utc))

        assert start.started_at == datetime(2025, 1, 15, 9, 0)
        assert stop.ended_at == datetime(2025, 1, 15, 11, 30)
        assert TimerStop().ended_at is None

    def test_create_defaults(self):
        """Test optional fields default to absent."""
        from solowork.models.time_entry import TimeEntryCreate

        entry = TimeEntryCreate(
            started_at=datetime(2025, 1, 15, 9, 0),
            ended_at=datetime(2025, 1, 15, 11, 30),
        )

        assert entry.billable is None
        assert entry.hourly_rate is None
        assert entry.project_id is None

    def test_amount_is_serialized(self):
        """Test the computed amount appears in API output."""
        from solowork.models.time_entry import TimeEntry

        now = datetime(2025, 1, 15)
        entry = TimeEntry(
            _id=1,
            user_id="user123",
            started_at=datetime(2025, 1, 15, 9, 0),
            ended_at=datetime(2025, 1, 15, 11, 30),
            duration_minutes=150,
            hourly_rate=Decimal("100"),
            created_at=now,
            updated_at=now,
        )

        data = entry.model_dump(by_alias=True)

        assert data["id"] == 1
        assert data["amount"] == Decimal("250")


class TestClientModel:
    """Tests for client models."""

    def test_invalid_email(self):
        """Test client emails are validated."""
        from solowork.models.client import ClientCreate

        with pytest.raises(ValidationError):
            ClientCreate(name="Acme", email="not-an-email")

    def test_name_required(self):
        """Test clients need a name."""
        from solowork.models.client import ClientCreate

        with pytest.raises(ValidationError):
            ClientCreate(name="")


class TestInvoiceModel:
    """Tests for invoice models."""

    def test_needs_entries(self):
        """Test an invoice must bill at least one entry."""
        from solowork.models.invoice import InvoiceCreate

        with pytest.raises(ValidationError):
            InvoiceCreate(time_entry_ids=[])

    def test_status_values(self):
        """Test InvoiceStatus values."""
        from solowork.models.invoice import InvoiceStatus

        assert InvoiceStatus.ISSUED.value == "issued"
        assert InvoiceStatus.PAID.value == "paid"


class TestUserModel:
    """Tests for user models."""

    def test_password_min_length(self):
        """Test passwords need at least 8 characters."""
        from solowork.models.user import UserCreate

        with pytest.raises(ValidationError):
            UserCreate(email="sam@example.com", name="Sam", password="short")
