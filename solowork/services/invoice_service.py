"""Invoice service - billing time entries."""
import logging
from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from solowork.core.time_entries import BillingConfig, billable_amount
from solowork.database import (
    date_to_datetime,
    datetime_to_date,
    from_decimal128,
    to_decimal128,
)
from solowork.models.invoice import Invoice, InvoiceCreate, InvoiceLine, InvoiceStatus
from solowork.services.time_entry_service import TimeEntryService
from solowork.utils.sequence import next_id

logger = logging.getLogger(__name__)


def _format_ids(ids) -> str:
    return ", ".join(str(i) for i in sorted(ids))


class InvoiceService:
    """Service for handling invoice operations."""

    def __init__(self, db):
        """Initialize service with database connection."""
        self.db = db
        self.invoices = db["invoices"]
        self.time_entries = db["time_entries"]
        self.projects = db["projects"]
        self.clients = db["clients"]
        self.counters = db["counters"]
        self.time_entry_service = TimeEntryService(db)

    def _doc_to_invoice(self, doc: dict) -> Invoice:
        """
        Convert database document to Invoice model.
        """
        lines = [
            InvoiceLine(
                time_entry_id=line["time_entry_id"],
                description=line.get("description", ""),
                duration_minutes=line["duration_minutes"],
                hourly_rate=from_decimal128(line.get("hourly_rate")),
                amount=from_decimal128(line["amount"]),
            )
            for line in doc.get("lines", [])
        ]

        return Invoice(
            _id=doc["_id"],
            user_id=doc["user_id"],
            number=doc["number"],
            client_id=doc.get("client_id"),
            currency=doc["currency"],
            status=doc.get("status", InvoiceStatus.ISSUED.value),
            issued_on=datetime_to_date(doc["issued_on"]),
            due_on=datetime_to_date(doc.get("due_on")),
            paid_on=datetime_to_date(doc.get("paid_on")),
            notes=doc.get("notes", ""),
            lines=lines,
            subtotal=from_decimal128(doc["subtotal"]),
            created_at=doc["created_at"],
            updated_at=doc["updated_at"],
        )

    async def _infer_client_id(self, user_id: str, entry_docs: list[dict]) -> Optional[int]:
        """
        Find the single client behind the entries' projects, if there is one.
        """
        project_ids = {doc["project_id"] for doc in entry_docs if doc.get("project_id") is not None}
        if not project_ids:
            return None

        cursor = self.projects.find({"_id": {"$in": list(project_ids)}, "user_id": user_id})
        project_docs = await cursor.to_list(length=None)
        client_ids = {doc.get("client_id") for doc in project_docs}

        if len(client_ids) == 1:
            return client_ids.pop()
        return None

    async def create_invoice(
        self,
        user_id: str,
        invoice_create: InvoiceCreate,
        config: Optional[BillingConfig] = None,
    ) -> Invoice:
        """
        Create an invoice for a set of time entries and mark them billed.

        Args:
            user_id: User ID
            invoice_create: Entries to bill plus invoice details
            config: Billing configuration (currency)

        Returns:
            Created invoice

        Raises:
            ValueError: If any entry is missing, already billed or not billable,
                or the client does not exist
        """
        config = config or BillingConfig()
        entry_ids = list(dict.fromkeys(invoice_create.time_entry_ids))

        cursor = self.time_entries.find({"_id": {"$in": entry_ids}, "user_id": user_id})
        entry_docs = await cursor.to_list(length=None)

        missing = set(entry_ids) - {doc["_id"] for doc in entry_docs}
        if missing:
            raise ValueError(f"Time entries not found: {_format_ids(missing)}")

        already_billed = {doc["_id"] for doc in entry_docs if doc.get("billed")}
        if already_billed:
            raise ValueError(f"Time entries already billed: {_format_ids(already_billed)}")

        not_billable = {doc["_id"] for doc in entry_docs if not doc.get("billable", True)}
        if not_billable:
            raise ValueError(f"Time entries not billable: {_format_ids(not_billable)}")

        client_id = invoice_create.client_id
        if client_id is not None:
            client = await self.clients.find_one({"_id": client_id, "user_id": user_id})
            if not client:
                raise ValueError("Client not found")
        else:
            client_id = await self._infer_client_id(user_id, entry_docs)

        entry_docs.sort(key=lambda doc: (doc["started_at"], doc["_id"]))
        lines = []
        subtotal = Decimal(0)
        for doc in entry_docs:
            hourly_rate = from_decimal128(doc.get("hourly_rate"))
            amount = billable_amount(doc["duration_minutes"], hourly_rate, True)
            subtotal += amount
            lines.append({
                "time_entry_id": doc["_id"],
                "description": doc.get("notes") or "",
                "duration_minutes": doc["duration_minutes"],
                "hourly_rate": to_decimal128(hourly_rate),
                "amount": to_decimal128(amount),
            })

        invoice_id = await next_id(self.counters, "invoices")
        now = datetime.utcnow()
        invoice_doc = {
            "_id": invoice_id,
            "user_id": user_id,
            "number": f"INV-{invoice_id:05d}",
            "client_id": client_id,
            "currency": config.currency,
            "status": InvoiceStatus.ISSUED.value,
            "issued_on": date_to_datetime(date.today()),
            "due_on": date_to_datetime(invoice_create.due_on),
            "paid_on": None,
            "notes": invoice_create.notes,
            "lines": lines,
            "subtotal": to_decimal128(subtotal),
            "created_at": now,
            "updated_at": now,
        }

        await self.invoices.insert_one(invoice_doc)
        billed = await self.time_entry_service.mark_billed(user_id, entry_ids, invoice_id)
        logger.info("Issued %s billing %s time entries", invoice_doc["number"], billed)

        return self._doc_to_invoice(invoice_doc)

    async def list_invoices(
        self,
        user_id: str,
        status: Optional[str] = None,
    ) -> list[Invoice]:
        """
        List invoices for a user, newest first.
        """
        query = {"user_id": user_id}
        if status:
            query["status"] = status

        cursor = self.invoices.find(query).sort("_id", -1)
        invoice_docs = await cursor.to_list(length=None)

        return [self._doc_to_invoice(doc) for doc in invoice_docs]

    async def get_invoice(
        self,
        user_id: str,
        invoice_id: int,
    ) -> Invoice:
        """
        Get an invoice by ID.

        Raises:
            ValueError: If invoice not found
        """
        invoice_doc = await self.invoices.find_one({"_id": invoice_id, "user_id": user_id})

        if not invoice_doc:
            raise ValueError("Invoice not found")

        return self._doc_to_invoice(invoice_doc)

    async def mark_paid(
        self,
        user_id: str,
        invoice_id: int,
        paid_on: Optional[date] = None,
    ) -> Invoice:
        """
        Record payment of an invoice.

        Raises:
            ValueError: If invoice not found or already paid
        """
        existing = await self.invoices.find_one({"_id": invoice_id, "user_id": user_id})

        if not existing:
            raise ValueError("Invoice not found")
        if existing.get("status") == InvoiceStatus.PAID.value:
            raise ValueError("Invoice already paid")

        updated_doc = await self.invoices.find_one_and_update(
            {"_id": invoice_id, "user_id": user_id},
            {"$set": {
                "status": InvoiceStatus.PAID.value,
                "paid_on": date_to_datetime(paid_on or date.today()),
                "updated_at": datetime.utcnow(),
            }},
            return_document=True,
        )

        return self._doc_to_invoice(updated_doc)
