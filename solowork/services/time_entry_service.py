"""Time entry service - business logic for time tracking."""
import logging
from datetime import datetime
from functools import partial
from typing import Optional

from solowork.core.rates import RateLookups
from solowork.core.time_entries import BillingConfig, ComputedEntry, as_naive_utc, compute_entry
from solowork.database import from_decimal128, to_decimal128
from solowork.models.billing_rate import BillingRateSet, RateOwnerKind
from solowork.models.project import Project
from solowork.models.task import Task
from solowork.models.time_entry import (
    RunningTimer,
    TimeEntry,
    TimeEntryCreate,
    TimeEntryUpdate,
    TimerStart,
)
from solowork.services.client_service import ClientService
from solowork.services.project_service import ProjectService
from solowork.services.rate_service import RateService
from solowork.services.task_service import TaskService
from solowork.utils.sequence import next_id

logger = logging.getLogger(__name__)


class TimeEntryService:
    """Service for handling time tracking operations."""

    def __init__(self, db):
        """Initialize service with database connection."""
        self.db = db
        self.time_entries = db["time_entries"]
        self.running_timers = db["running_timers"]
        self.counters = db["counters"]
        self.client_service = ClientService(db)
        self.project_service = ProjectService(db)
        self.task_service = TaskService(db)
        self.rate_service = RateService(db)

    def _doc_to_entry(self, doc: dict) -> TimeEntry:
        """
        Convert database document to TimeEntry model.
        """
        return TimeEntry(
            _id=doc["_id"],
            user_id=doc["user_id"],
            project_id=doc.get("project_id"),
            task_id=doc.get("task_id"),
            started_at=doc["started_at"],
            ended_at=doc["ended_at"],
            duration_minutes=doc["duration_minutes"],
            notes=doc.get("notes"),
            billable=doc.get("billable", True),
            billed=doc.get("billed", False),
            hourly_rate=from_decimal128(doc.get("hourly_rate")),
            invoice_id=doc.get("invoice_id"),
            created_at=doc["created_at"],
            updated_at=doc["updated_at"],
        )

    def _doc_to_timer(self, doc: dict) -> RunningTimer:
        return RunningTimer(
            _id=doc["_id"],
            project_id=doc.get("project_id"),
            task_id=doc.get("task_id"),
            notes=doc.get("notes"),
            billable=doc.get("billable"),
            hourly_rate=from_decimal128(doc.get("hourly_rate")),
            started_at=doc["started_at"],
        )

    async def _load_associations(
        self,
        user_id: str,
        project_id: Optional[int],
        task_id: Optional[int],
    ) -> tuple[Optional[Project], Optional[Task]]:
        """
        Load and check the task and project an entry points at.

        Raises:
            ValueError: If either does not exist, or the task is in another project
        """
        task = None
        if task_id is not None:
            task = await self.task_service.get_task(user_id, task_id)

        project = None
        if project_id is not None:
            project = await self.project_service.get_project(user_id, project_id)
            if task is not None and task.project_id != project.id:
                raise ValueError("Task does not belong to project")

        return project, task

    async def _compute(
        self,
        user_id: str,
        *,
        started_at: datetime,
        ended_at: datetime,
        project_id: Optional[int],
        task_id: Optional[int],
        notes: Optional[str],
        billable: Optional[bool],
        hourly_rate,
        config: Optional[BillingConfig],
    ) -> ComputedEntry:
        project, task = await self._load_associations(user_id, project_id, task_id)

        # The task is always pre-loaded; its project and the client are
        # only fetched if the chain gets that far.
        lookups = RateLookups(
            project=partial(self.project_service.find_project, user_id),
            client=partial(self.client_service.find_client, user_id),
        )

        return await compute_entry(
            user_id,
            started_at=started_at,
            ended_at=ended_at,
            project_id=project_id,
            task_id=task_id,
            notes=notes,
            billable=billable,
            hourly_rate=hourly_rate,
            task=task,
            project=project,
            lookups=lookups,
            config=config,
        )

    async def _store(self, computed: ComputedEntry, explicit_rate=None) -> TimeEntry:
        now = datetime.utcnow()
        entry_doc = {
            "_id": await next_id(self.counters, "time_entries"),
            "user_id": computed.user_id,
            "project_id": computed.project_id,
            "task_id": computed.task_id,
            "started_at": computed.started_at,
            "ended_at": computed.ended_at,
            "duration_minutes": computed.duration_minutes,
            "notes": computed.notes,
            "billable": computed.billable,
            "billed": False,
            "hourly_rate": to_decimal128(computed.hourly_rate),
            "invoice_id": None,
            "created_at": now,
            "updated_at": now,
        }

        await self.time_entries.insert_one(entry_doc)
        logger.info(
            "Logged %s minutes as time entry %s",
            computed.duration_minutes,
            entry_doc["_id"],
        )

        if explicit_rate is not None:
            await self.rate_service.upsert_rate(
                computed.user_id,
                RateOwnerKind.TIME_ENTRY,
                entry_doc["_id"],
                BillingRateSet(rate=explicit_rate),
            )

        return self._doc_to_entry(entry_doc)

    async def create_entry(
        self,
        user_id: str,
        entry_create: TimeEntryCreate,
        config: Optional[BillingConfig] = None,
    ) -> TimeEntry:
        """
        Create a time entry from a start and end time.

        Duration, billable flag and hourly rate are derived here; the rate
        is stored as a snapshot that later rate changes do not touch.

        Args:
            user_id: User ID
            entry_create: Time entry creation data
            config: Billing configuration (default rate, currency)

        Returns:
            Created time entry

        Raises:
            ValueError: If the project or task doesn't exist, or the range is invalid
        """
        computed = await self._compute(
            user_id,
            started_at=entry_create.started_at,
            ended_at=entry_create.ended_at,
            project_id=entry_create.project_id,
            task_id=entry_create.task_id,
            notes=entry_create.notes,
            billable=entry_create.billable,
            hourly_rate=entry_create.hourly_rate,
            config=config,
        )

        return await self._store(computed, explicit_rate=entry_create.hourly_rate)

    async def list_entries(
        self,
        user_id: str,
        project_id: Optional[int] = None,
        task_id: Optional[int] = None,
        start_date: Optional[datetime] = None,
        end_date: Optional[datetime] = None,
        billed: Optional[bool] = None,
    ) -> list[TimeEntry]:
        """
        List time entries for a user with optional filtering.

        Args:
            user_id: User ID
            project_id: Optional project filter
            task_id: Optional task filter
            start_date: Optional start date filter
            end_date: Optional end date filter
            billed: Optional billed-state filter

        Returns:
            List of time entries, most recent first
        """
        query = {
            "user_id": user_id,
        }

        if project_id is not None:
            query["project_id"] = project_id
        if task_id is not None:
            query["task_id"] = task_id
        if billed is not None:
            query["billed"] = billed

        if start_date or end_date:
            query["started_at"] = {}
            if start_date:
                query["started_at"]["$gte"] = as_naive_utc(start_date)
            if end_date:
                query["started_at"]["$lte"] = as_naive_utc(end_date)

        cursor = self.time_entries.find(query).sort("started_at", -1)
        entry_docs = await cursor.to_list(length=None)

        return [self._doc_to_entry(doc) for doc in entry_docs]

    async def get_entry(
        self,
        user_id: str,
        entry_id: int,
    ) -> TimeEntry:
        """
        Get a time entry by ID.

        Raises:
            ValueError: If entry not found
        """
        entry_doc = await self.time_entries.find_one({
            "_id": entry_id,
            "user_id": user_id,
        })

        if not entry_doc:
            raise ValueError("Time entry not found")

        return self._doc_to_entry(entry_doc)

    async def update_entry(
        self,
        user_id: str,
        entry_id: int,
        entry_update: TimeEntryUpdate,
    ) -> TimeEntry:
        """
        Update a time entry's notes.

        Raises:
            ValueError: If entry not found
        """
        existing = await self.time_entries.find_one({
            "_id": entry_id,
            "user_id": user_id,
        })

        if not existing:
            raise ValueError("Time entry not found")

        update_doc = {
            "updated_at": datetime.utcnow(),
        }

        if entry_update.notes is not None:
            update_doc["notes"] = entry_update.notes

        updated_doc = await self.time_entries.find_one_and_update(
            {"_id": entry_id, "user_id": user_id},
            {"$set": update_doc},
            return_document=True,
        )

        return self._doc_to_entry(updated_doc)

    async def delete_entry(
        self,
        user_id: str,
        entry_id: int,
    ) -> dict:
        """
        Delete a time entry.

        Billed entries belong to an invoice and cannot be deleted. The entry's own
        rate goes with it.

        Returns:
            Dictionary with deleted_count

        Raises:
            ValueError: If entry not found or already billed
        """
        existing = await self.time_entries.find_one({
            "_id": entry_id,
            "user_id": user_id,
        })

        if not existing:
            raise ValueError("Time entry not found")

        if existing.get("billed"):
            raise ValueError("Billed time entries cannot be deleted")

        # Hard delete for time entries
        result = await self.time_entries.delete_one({
            "_id": entry_id,
            "user_id": user_id,
        })
        await self.rate_service.clear_rate(user_id, RateOwnerKind.TIME_ENTRY, entry_id)

        return {"deleted_count": result.deleted_count}

    async def mark_billed(
        self,
        user_id: str,
        entry_ids: list[int],
        invoice_id: int,
    ) -> int:
        """
        Mark entries as billed on an invoice.

        Only unbilled entries change; there is no way back to unbilled.

        Returns:
            Number of entries updated
        """
        result = await self.time_entries.update_many(
            {"_id": {"$in": entry_ids}, "user_id": user_id, "billed": False},
            {"$set": {
                "billed": True,
                "invoice_id": invoice_id,
                "updated_at": datetime.utcnow(),
            }},
        )

        return result.modified_count

    async def start_timer(
        self,
        user_id: str,
        timer_start: TimerStart,
    ) -> RunningTimer:
        """
        Start a new timer.

        Args:
            user_id: User ID
            timer_start: What the timer is for and when it started

        Returns:
            The running timer

        Raises:
            ValueError: If timer already running or project/task doesn't exist
        """
        running_timer = await self.running_timers.find_one({"_id": user_id})
        if running_timer:
            raise ValueError("Timer already running")

        await self._load_associations(user_id, timer_start.project_id, timer_start.task_id)

        timer_doc = {
            "_id": user_id,
            "project_id": timer_start.project_id,
            "task_id": timer_start.task_id,
            "notes": timer_start.notes,
            "billable": timer_start.billable,
            "hourly_rate": to_decimal128(timer_start.hourly_rate),
            "started_at": timer_start.started_at or datetime.utcnow(),
        }

        await self.running_timers.insert_one(timer_doc)

        return self._doc_to_timer(timer_doc)

    async def get_current_timer(
        self,
        user_id: str,
    ) -> Optional[RunningTimer]:
        """
        Get the currently running timer, if any.
        """
        running_timer = await self.running_timers.find_one({"_id": user_id})

        if not running_timer:
            return None

        return self._doc_to_timer(running_timer)

    async def stop_timer(
        self,
        user_id: str,
        ended_at: Optional[datetime] = None,
        config: Optional[BillingConfig] = None,
    ) -> TimeEntry:
        """
        Stop the running timer and record it as a time entry.

        Args:
            user_id: User ID
            ended_at: Optional end time (defaults to now)
            config: Billing configuration

        Returns:
            The created time entry

        Raises:
            ValueError: If no timer is running or it would end before it started
        """
        running_timer = await self.running_timers.find_one({"_id": user_id})
        if not running_timer:
            raise ValueError("No timer running")

        timer = self._doc_to_timer(running_timer)
        computed = await self._compute(
            user_id,
            started_at=timer.started_at,
            ended_at=ended_at or datetime.utcnow(),
            project_id=timer.project_id,
            task_id=timer.task_id,
            notes=timer.notes,
            billable=timer.billable,
            hourly_rate=timer.hourly_rate,
            config=config,
        )

        entry = await self._store(computed, explicit_rate=timer.hourly_rate)
        await self.running_timers.delete_one({"_id": user_id})

        return entry

    async def discard_timer(
        self,
        user_id: str,
    ) -> dict:
        """
        Throw away the running timer without recording anything.

        Raises:
            ValueError: If no timer is running
        """
        result = await self.running_timers.delete_one({"_id": user_id})

        if result.deleted_count == 0:
            raise ValueError("No timer running")

        return {"deleted_count": result.deleted_count}
