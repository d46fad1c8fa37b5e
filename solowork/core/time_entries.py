"""Time entry computation.

Turns a start/end pair plus its associations into the record that gets
stored: duration, billable flag and a snapshot of the resolved hourly rate.
"""
from dataclasses import asdict, dataclass
from datetime import datetime, timezone
from decimal import ROUND_HALF_UP, Decimal
from typing import Optional

from solowork.core.rates import NO_LOOKUPS, RateLookups, resolve_rate
from solowork.models.client import Client
from solowork.models.project import Project
from solowork.models.task import Task

MINUTES_PER_HOUR = Decimal(60)


class InvalidTimeRangeError(ValueError):
    """Raised when an entry does not end after it starts."""


@dataclass(frozen=True)
class BillingConfig:
    """Billing settings passed in at call time.

    Attributes:
        default_hourly_rate: Applied only when no level of the precedence
            chain has a rate. None keeps the rate absent.
        currency: Currency for amounts and invoices
    """

    default_hourly_rate: Optional[Decimal] = None
    currency: str = "USD"


@dataclass(frozen=True)
class ComputedEntry:
    """A fully derived time entry, ready to persist."""

    user_id: str
    project_id: Optional[int]
    task_id: Optional[int]
    started_at: datetime
    ended_at: datetime
    duration_minutes: int
    notes: Optional[str]
    billable: bool
    hourly_rate: Optional[Decimal]

    def as_dict(self) -> dict:
        return asdict(self)


def as_naive_utc(value: Optional[datetime]) -> Optional[datetime]:
    """
    Convert a timestamp to naive UTC, the form MongoDB hands back.

    Naive values are taken to be UTC already and pass through unchanged.

    Example:
        >>> as_naive_utc(datetime(2025, 1, 15, 11, 30, tzinfo=timezone.utc))
        datetime.datetime(2025, 1, 15, 11, 30)
    """
    if value is None or value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def duration_minutes(started_at: datetime, ended_at: datetime) -> int:
    """
    Calculate the duration between two timestamps in whole minutes.

    Args:
        started_at: Start of the work
        ended_at: End of the work

    Returns:
        Rounded number of minutes

    Raises:
        InvalidTimeRangeError: If ended_at is not after started_at

    Example:
        >>> duration_minutes(datetime(2025, 1, 15, 9, 0), datetime(2025, 1, 15, 11, 30))
        150
    """
    started_at = as_naive_utc(started_at)
    ended_at = as_naive_utc(ended_at)
    if ended_at <= started_at:
        raise InvalidTimeRangeError("ended_at must be after started_at")
    return round((ended_at - started_at).total_seconds() / 60)


def resolve_billable(task: Optional[Task], billable: Optional[bool]) -> bool:
    """
    Decide whether an entry is billable.

    A task's flag always wins over the caller's value; without a task the
    caller's value is used, defaulting to True.
    """
    if task is not None:
        return task.billable
    if billable is None:
        return True
    return billable


def billable_amount(
    duration_minutes: int,
    hourly_rate: Optional[Decimal],
    billable: bool,
) -> Decimal:
    """
    Calculate the amount earned by an entry.

    The result is not rounded; use format_money for display.

    Example:
        >>> billable_amount(150, Decimal("100"), True)
        Decimal('250.0')
    """
    if not billable or hourly_rate is None:
        return Decimal(0)
    return Decimal(duration_minutes) / MINUTES_PER_HOUR * Decimal(hourly_rate)


def format_money(amount: Decimal) -> str:
    """Format an amount with two decimals for display."""
    return str(Decimal(amount).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP))


async def compute_entry(
    user_id: str,
    *,
    started_at: datetime,
    ended_at: datetime,
    project_id: Optional[int] = None,
    task_id: Optional[int] = None,
    notes: Optional[str] = None,
    billable: Optional[bool] = None,
    hourly_rate: Optional[Decimal] = None,
    task: Optional[Task] = None,
    project: Optional[Project] = None,
    client: Optional[Client] = None,
    lookups: RateLookups = NO_LOOKUPS,
    config: Optional[BillingConfig] = None,
) -> ComputedEntry:
    """
    Derive every stored field of a new time entry.

    Args:
        user_id: Owner of the entry
        started_at: Start of the work
        ended_at: End of the work (must be after start)
        project_id: Project the entry is logged against
        task_id: Task the entry is logged against
        notes: Free text
        billable: Caller's billable flag (ignored when a task is associated)
        hourly_rate: Explicit rate for this entry
        task: Pre-loaded task, if any
        project: Pre-loaded project, if any
        client: Pre-loaded client of the project, if any
        lookups: Loaders for associations only known by id
        config: Billing configuration; defaults to no default rate

    Returns:
        ComputedEntry with duration, billable flag and rate snapshot

    Raises:
        InvalidTimeRangeError: If ended_at is not after started_at
    """
    started_at = as_naive_utc(started_at)
    ended_at = as_naive_utc(ended_at)
    config = config or BillingConfig()
    minutes = duration_minutes(started_at, ended_at)

    # Billability depends on the task, so load it up front when only the id is known
    if task is None and task_id is not None and lookups.task is not None:
        task = await lookups.task(task_id)

    if task is not None:
        task_id = task.id
        if project_id is None:
            project_id = task.project_id
    if project is not None and project_id is None:
        project_id = project.id

    rate = await resolve_rate(
        hourly_rate,
        task=task,
        project=project,
        project_id=project_id,
        client=client,
        lookups=lookups,
        on=started_at.date(),
    )
    if rate is None:
        rate = config.default_hourly_rate

    return ComputedEntry(
        user_id=user_id,
        project_id=project_id,
        task_id=task_id,
        started_at=started_at,
        ended_at=ended_at,
        duration_minutes=minutes,
        notes=notes,
        billable=resolve_billable(task, billable),
        hourly_rate=rate,
    )
