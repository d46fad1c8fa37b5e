"""Hourly rate resolution.

The rate for a time entry is chosen from a fixed precedence chain::

    entry > task > project > client

The first level with a (currently active) rate wins; nothing is combined and
no default is invented here. Callers either hand over fully loaded entities or
supply lookups for the ones they only know by id, so every extra database
round trip is visible at the call site.
"""
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Awaitable, Callable, Optional, Union

from solowork.models.client import Client
from solowork.models.project import Project
from solowork.models.task import Task

TaskLookup = Callable[[int], Awaitable[Optional[Task]]]
ProjectLookup = Callable[[int], Awaitable[Optional[Project]]]
ClientLookup = Callable[[int], Awaitable[Optional[Client]]]


@dataclass(frozen=True)
class RateLookups:
    """Lookups for associations the caller has not pre-loaded.

    A missing lookup means that level is skipped when only an id is known.
    """

    task: Optional[TaskLookup] = None
    project: Optional[ProjectLookup] = None
    client: Optional[ClientLookup] = None


NO_LOOKUPS = RateLookups()


def rate_of(owner: Optional[Union[Task, Project, Client]], on: Optional[date] = None) -> Optional[Decimal]:
    """
    Return the owner's own rate, if it has one that is active on ``on``.

    Args:
        owner: Task, project or client (or None)
        on: Day the work happened; None ignores effective dates

    Returns:
        Rate amount or None
    """
    if owner is None or owner.billing_rate is None:
        return None
    if not owner.billing_rate.is_active_on(on):
        return None
    return owner.billing_rate.rate


def select_rate(
    entry_rate: Optional[Decimal],
    task: Optional[Task] = None,
    project: Optional[Project] = None,
    client: Optional[Client] = None,
    on: Optional[date] = None,
) -> Optional[Decimal]:
    """
    Pick a rate from already loaded entities.

    Args:
        entry_rate: Explicit rate given with the entry
        task: Task the entry belongs to
        project: Project the entry belongs to
        client: The project's client
        on: Day the work happened

    Returns:
        The first rate found along entry > task > project > client, or None

    Example:
        >>> select_rate(None, task=None, project=None, client=None) is None
        True
    """
    if entry_rate is not None:
        return entry_rate

    for owner in (task, project, client):
        rate = rate_of(owner, on)
        if rate is not None:
            return rate

    return None


async def resolve_rate(
    entry_rate: Optional[Decimal],
    *,
    task: Optional[Task] = None,
    task_id: Optional[int] = None,
    project: Optional[Project] = None,
    project_id: Optional[int] = None,
    client: Optional[Client] = None,
    lookups: RateLookups = NO_LOOKUPS,
    on: Optional[date] = None,
) -> Optional[Decimal]:
    """
    Resolve the hourly rate for an entry, loading missing levels on demand.

    Lookups only run when the level above produced nothing, so a rate found
    on the task never costs a project or client query. A lookup returning
    None is treated as an absent level.

    Args:
        entry_rate: Explicit rate given with the entry
        task: Pre-loaded task
        task_id: Task id, used with ``lookups.task`` when ``task`` is None
        project: Pre-loaded project
        project_id: Project id, used with ``lookups.project`` when ``project``
            is None; falls back to the task's project
        client: Pre-loaded client of the project
        lookups: Loaders for associations known only by id
        on: Day the work happened

    Returns:
        Resolved rate or None
    """
    if entry_rate is not None:
        return entry_rate

    if task is None and task_id is not None and lookups.task is not None:
        task = await lookups.task(task_id)

    rate = rate_of(task, on)
    if rate is not None:
        return rate

    if project is None:
        if project_id is None and task is not None:
            project_id = task.project_id
        if project_id is not None and lookups.project is not None:
            project = await lookups.project(project_id)

    if project is None:
        return None

    rate = rate_of(project, on)
    if rate is not None:
        return rate

    if client is None and project.client_id is not None and lookups.client is not None:
        client = await lookups.client(project.client_id)

    return rate_of(client, on)
