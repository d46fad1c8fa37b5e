"""Tests for InvoiceService."""
import pytest
from datetime import date, datetime
from decimal import Decimal
from unittest.mock import MagicMock
from bson.decimal128 import Decimal128


NOW = datetime(2025, 1, 1)


def entry_doc(entry_id, started_at, minutes, rate, **extra):
    doc = {
        "_id": entry_id,
        "user_id": "user123",
        "project_id": 1,
        "task_id": None,
        "started_at": started_at,
        "duration_minutes": minutes,
        "notes": f"Entry {entry_id}",
        "billable": True,
        "billed": False,
        "hourly_rate": Decimal128(rate) if rate is not None else None,
    }
    doc.update(extra)
    return doc


def invoice_doc(**extra):
    doc = {
        "_id": 1,
        "user_id": "user123",
        "number": "INV-00001",
        "client_id": 3,
        "currency": "USD",
        "status": "issued",
        "issued_on": datetime(2025, 2, 1),
        "due_on": None,
        "paid_on": None,
        "notes": "",
        "lines": [],
        "subtotal": Decimal128("0"),
        "created_at": NOW,
        "updated_at": NOW,
    }
    doc.update(extra)
    return doc


@pytest.mark.asyncio
class TestInvoiceServiceCreate:
    """Tests for creating invoices."""

    async def test_create_invoice_bills_entries(self, mock_db):
        """Test lines, subtotal and the billed transition."""
        from solowork.models.invoice import InvoiceCreate, InvoiceStatus
        from solowork.services.invoice_service import InvoiceService

        mock_db["time_entries"].find.return_value.to_list.return_value = [
            entry_doc(2, datetime(2025, 1, 16, 9, 0), 60, "80"),
            entry_doc(1, datetime(2025, 1, 15, 9, 0), 150, "100"),
        ]
        mock_db["projects"].find.return_value.to_list.return_value = [
            {"_id": 1, "user_id": "user123", "client_id": 3},
        ]
        mock_db["time_entries"].update_many.return_value = MagicMock(modified_count=2)

        service = InvoiceService(mock_db)
        invoice = await service.create_invoice(
            user_id="user123",
            invoice_create=InvoiceCreate(time_entry_ids=[2, 1]),
        )

        assert invoice.number == "INV-00001"
        assert invoice.status == InvoiceStatus.ISSUED
        assert invoice.client_id == 3
        assert [line.time_entry_id for line in invoice.lines] == [1, 2]
        assert invoice.lines[0].amount == Decimal("250")
        assert invoice.subtotal == Decimal("330")

        query, update = mock_db["time_entries"].update_many.call_args[0]
        assert query["_id"] == {"$in": [2, 1]}
        assert update["$set"]["invoice_id"] == 1

    async def test_create_invoice_unknown_entry(self, mock_db):
        """Test every entry must exist."""
        from solowork.models.invoice import InvoiceCreate
        from solowork.services.invoice_service import InvoiceService

        mock_db["time_entries"].find.return_value.to_list.return_value = [
            entry_doc(1, datetime(2025, 1, 15, 9, 0), 150, "100"),
        ]

        service = InvoiceService(mock_db)

        with pytest.raises(ValueError, match="Time entries not found: 4"):
            await service.create_invoice("user123", InvoiceCreate(time_entry_ids=[1, 4]))

        mock_db["invoices"].insert_one.assert_not_called()

    async def test_create_invoice_already_billed(self, mock_db):
        """Test entries cannot be billed twice."""
        from solowork.models.invoice import InvoiceCreate
        from solowork.services.invoice_service import InvoiceService

        mock_db["time_entries"].find.return_value.to_list.return_value = [
            entry_doc(1, datetime(2025, 1, 15, 9, 0), 150, "100", billed=True),
        ]

        service = InvoiceService(mock_db)

        with pytest.raises(ValueError, match="already billed: 1"):
            await service.create_invoice("user123", InvoiceCreate(time_entry_ids=[1]))

    async def test_create_invoice_not_billable(self, mock_db):
        """Test non-billable entries cannot be invoiced."""
        from solowork.models.invoice import InvoiceCreate
        from solowork.services.invoice_service import InvoiceService

        mock_db["time_entries"].find.return_value.to_list.return_value = [
            entry_doc(1, datetime(2025, 1, 15, 9, 0), 150, "100", billable=False),
        ]

        service = InvoiceService(mock_db)

        with pytest.raises(ValueError, match="not billable: 1"):
            await service.create_invoice("user123", InvoiceCreate(time_entry_ids=[1]))

    async def test_create_invoice_unknown_client(self, mock_db):
        """Test an explicit client must exist."""
        from solowork.models.invoice import InvoiceCreate
        from solowork.services.invoice_service import InvoiceService

        mock_db["time_entries"].find.return_value.to_list.return_value = [
            entry_doc(1, datetime(2025, 1, 15, 9, 0), 150, "100"),
        ]

        service = InvoiceService(mock_db)

        with pytest.raises(ValueError, match="Client not found"):
            await service.create_invoice("user123", InvoiceCreate(time_entry_ids=[1], client_id=9))

    async def test_unrated_entry_bills_zero(self, mock_db):
        """Test entries without a rate appear with a zero amount."""
        from solowork.core.time_entries import BillingConfig
        from solowork.models.invoice import InvoiceCreate
        from solowork.services.invoice_service import InvoiceService

        mock_db["time_entries"].find.return_value.to_list.return_value = [
            entry_doc(1, datetime(2025, 1, 15, 9, 0), 150, None, project_id=None),
        ]
        mock_db["time_entries"].update_many.return_value = MagicMock(modified_count=1)

        service = InvoiceService(mock_db)
        invoice = await service.create_invoice(
            "user123",
            InvoiceCreate(time_entry_ids=[1]),
            config=BillingConfig(currency="EUR"),
        )

        assert invoice.client_id is None
        assert invoice.currency == "EUR"
        assert invoice.lines[0].hourly_rate is None
        assert invoice.subtotal == Decimal("0")


@pytest.mark.asyncio
class TestInvoiceServicePayment:
    """Tests for reading and paying invoices."""

    async def test_get_invoice_not_found(self, mock_db):
        """Test getting a missing invoice fails."""
        from solowork.services.invoice_service import InvoiceService

        service = InvoiceService(mock_db)

        with pytest.raises(ValueError, match="Invoice not found"):
            await service.get_invoice("user123", 1)

    async def test_mark_paid(self, mock_db):
        """Test paying sets the status and date."""
        from solowork.models.invoice import InvoiceStatus
        from solowork.services.invoice_service import InvoiceService

        mock_db["invoices"].find_one.return_value = invoice_doc()
        mock_db["invoices"].find_one_and_update.return_value = invoice_doc(
            status="paid",
            paid_on=datetime(2025, 2, 10),
        )

        service = InvoiceService(mock_db)
        invoice = await service.mark_paid("user123", 1, paid_on=date(2025, 2, 10))

        update = mock_db["invoices"].find_one_and_update.call_args[0][1]["$set"]
        assert update["paid_on"] == datetime(2025, 2, 10)
        assert invoice.status == InvoiceStatus.PAID
        assert invoice.paid_on == date(2025, 2, 10)

    async def test_mark_paid_twice(self, mock_db):
        """Test an invoice can only be paid once."""
        from solowork.services.invoice_service import InvoiceService

        mock_db["invoices"].find_one.return_value = invoice_doc(status="paid")

        service = InvoiceService(mock_db)

        with pytest.raises(ValueError, match="Invoice already paid"):
            await service.mark_paid("user123", 1)
