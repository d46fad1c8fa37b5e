"""Export service - JSON Lines dump of a user's data."""
import json
import logging
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import AsyncIterator, Optional

from solowork.models.export import ExportRecordType
from solowork.models.time_entry import TimeEntry
from solowork.services.client_service import ClientService
from solowork.services.invoice_service import InvoiceService
from solowork.services.project_service import ProjectService
from solowork.services.rate_service import RateService
from solowork.services.task_service import TaskService
from solowork.services.time_entry_service import TimeEntryService

logger = logging.getLogger(__name__)

# Rates are exported as their own records
_OMIT = {"user_id", "billing_rate"}


def _json_default(value):
    if isinstance(value, Decimal):
        return float(value)
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, Enum):
        return value.value
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def time_entry_data(entry: TimeEntry) -> dict:
    """
    Build the ``data`` object of a time entry export line.

    Key order is part of the export format.
    """
    return {
        "id": entry.id,
        "project_id": entry.project_id,
        "task_id": entry.task_id,
        "started_at": entry.started_at,
        "ended_at": entry.ended_at,
        "duration_minutes": entry.duration_minutes,
        "notes": entry.notes,
        "billable": entry.billable,
        "hourly_rate": entry.hourly_rate,
    }


def export_line(
    record_type: ExportRecordType,
    record_id,
    data: dict,
    exported_at: datetime,
) -> str:
    """
    Serialize one record as a JSON line (without the trailing newline).

    Example:
        >>> export_line(ExportRecordType.CLIENT, 1, {"id": 1}, datetime(2025, 1, 15))
        '{"type":"client","id":1,"data":{"id":1},"exported_at":"2025-01-15T00:00:00"}'
    """
    line = {
        "type": record_type.value,
        "id": record_id,
        "data": data,
        "exported_at": exported_at,
    }
    return json.dumps(line, default=_json_default, separators=(",", ":"))


class ExportService:
    """Service for exporting everything a user owns."""

    def __init__(self, db):
        """Initialize service with database connection."""
        self.db = db
        self.client_service = ClientService(db)
        self.project_service = ProjectService(db)
        self.task_service = TaskService(db)
        self.rate_service = RateService(db)
        self.time_entry_service = TimeEntryService(db)
        self.invoice_service = InvoiceService(db)

    async def export_lines(
        self,
        user_id: str,
        exported_at: Optional[datetime] = None,
    ) -> AsyncIterator[str]:
        """
        Yield newline-terminated JSON lines for every record a user owns.

        Records come out grouped by type (clients, projects, tasks, rates,
        time entries, invoices) and ordered by id within a type.

        Args:
            user_id: User ID
            exported_at: Timestamp stamped on every line (defaults to now)

        Yields:
            One JSON document per line
        """
        exported_at = exported_at or datetime.utcnow()
        count = 0

        clients = await self.client_service.list_clients(user_id, include_archived=True)
        for client in sorted(clients, key=lambda c: c.id):
            data = client.model_dump(exclude=_OMIT)
            yield export_line(ExportRecordType.CLIENT, client.id, data, exported_at) + "\n"
            count += 1

        for project in await self.project_service.list_projects(user_id, include_deleted=True):
            data = project.model_dump(exclude=_OMIT)
            yield export_line(ExportRecordType.PROJECT, project.id, data, exported_at) + "\n"
            count += 1

        for task in await self.task_service.list_tasks(user_id, include_deleted=True):
            data = task.model_dump(exclude=_OMIT)
            yield export_line(ExportRecordType.TASK, task.id, data, exported_at) + "\n"
            count += 1

        for rate in await self.rate_service.list_rates(user_id):
            data = rate.model_dump()
            record_id = f"{rate.owner_kind}:{rate.owner_id}"
            yield export_line(ExportRecordType.BILLING_RATE, record_id, data, exported_at) + "\n"
            count += 1

        entries = await self.time_entry_service.list_entries(user_id)
        for entry in sorted(entries, key=lambda e: e.id):
            yield export_line(
                ExportRecordType.TIME_ENTRY, entry.id, time_entry_data(entry), exported_at
            ) + "\n"
            count += 1

        invoices = await self.invoice_service.list_invoices(user_id)
        for invoice in sorted(invoices, key=lambda i: i.id):
            data = invoice.model_dump(exclude={"user_id"})
            yield export_line(ExportRecordType.INVOICE, invoice.id, data, exported_at) + "\n"
            count += 1

        logger.info("Exported %s records", count)
