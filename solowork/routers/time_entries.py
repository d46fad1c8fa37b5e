"""Time entry router - logged work and its billable amount."""
from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status

from solowork.config import get_billing_config
from solowork.core.time_entries import BillingConfig, format_money
from solowork.database import get_database
from solowork.models.time_entry import TimeEntry, TimeEntryCreate, TimeEntryUpdate
from solowork.routers.auth import get_current_user_id
from solowork.services.time_entry_service import TimeEntryService


router = APIRouter(prefix="/time-entries", tags=["time-entries"])


@router.post("", response_model=TimeEntry, status_code=status.HTTP_201_CREATED)
async def create_entry(
    entry_create: TimeEntryCreate,
    user_id: str = Depends(get_current_user_id),
    db=Depends(get_database),
    config: BillingConfig = Depends(get_billing_config),
):
    """
    Create a time entry.

    - Requires authentication
    - Duration is rounded to whole minutes
    - Billable flag comes from the task when there is one
    - Hourly rate is resolved entry > task > project > client and frozen
    """
    service = TimeEntryService(db)
    try:
        return await service.create_entry(
            user_id=user_id,
            entry_create=entry_create,
            config=config,
        )
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))


@router.get("", response_model=list[TimeEntry])
async def list_entries(
    project_id: Optional[int] = Query(None),
    task_id: Optional[int] = Query(None),
    start_date: Optional[datetime] = Query(None),
    end_date: Optional[datetime] = Query(None),
    billed: Optional[bool] = Query(None),
    user_id: str = Depends(get_current_user_id),
    db=Depends(get_database),
):
    """
    List time entries for the authenticated user.

    - Optional filters: project_id, task_id, start_date, end_date, billed
    - Results sorted by started_at descending (most recent first)
    """
    service = TimeEntryService(db)
    return await service.list_entries(
        user_id=user_id,
        project_id=project_id,
        task_id=task_id,
        start_date=start_date,
        end_date=end_date,
        billed=billed,
    )


@router.get("/{entry_id}", response_model=TimeEntry)
async def get_entry(
    entry_id: int,
    user_id: str = Depends(get_current_user_id),
    db=Depends(get_database),
):
    """
    Get a specific time entry by ID.
    """
    service = TimeEntryService(db)
    try:
        return await service.get_entry(user_id=user_id, entry_id=entry_id)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))


@router.get("/{entry_id}/amount")
async def get_entry_amount(
    entry_id: int,
    user_id: str = Depends(get_current_user_id),
    db=Depends(get_database),
):
    """
    Get the billable amount of a time entry.

    Returns the exact amount plus a two-decimal display string.
    """
    service = TimeEntryService(db)
    try:
        entry = await service.get_entry(user_id=user_id, entry_id=entry_id)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))

    return {
        "time_entry_id": entry.id,
        "duration_minutes": entry.duration_minutes,
        "hourly_rate": entry.hourly_rate,
        "billable": entry.billable,
        "amount": entry.amount,
        "formatted": format_money(entry.amount),
    }


@router.patch("/{entry_id}", response_model=TimeEntry)
async def update_entry(
    entry_id: int,
    entry_update: TimeEntryUpdate,
    user_id: str = Depends(get_current_user_id),
    db=Depends(get_database),
):
    """
    Update a time entry's notes.
    """
    service = TimeEntryService(db)
    try:
        return await service.update_entry(
            user_id=user_id,
            entry_id=entry_id,
            entry_update=entry_update,
        )
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))


@router.delete("/{entry_id}")
async def delete_entry(
    entry_id: int,
    user_id: str = Depends(get_current_user_id),
    db=Depends(get_database),
):
    """
    Delete a time entry.

    - Hard delete (permanent)
    - Billed entries are refused with 400
    """
    service = TimeEntryService(db)
    try:
        return await service.delete_entry(user_id=user_id, entry_id=entry_id)
    except ValueError as e:
        code = status.HTTP_404_NOT_FOUND if "not found" in str(e) else status.HTTP_400_BAD_REQUEST
        raise HTTPException(status_code=code, detail=str(e))
