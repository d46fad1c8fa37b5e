"""Timer endpoints - live time tracking."""
from fastapi import APIRouter, Depends, HTTPException

from solowork.config import get_billing_config
from solowork.core.time_entries import BillingConfig
from solowork.database import get_database
from solowork.models.time_entry import RunningTimer, TimeEntry, TimerStart, TimerStop
from solowork.routers.auth import get_current_user_id
from solowork.services.time_entry_service import TimeEntryService


router = APIRouter(prefix="/timers", tags=["timers"])


@router.post("/start", response_model=RunningTimer)
async def start_timer(
    timer_start: TimerStart,
    user_id: str = Depends(get_current_user_id),
    db=Depends(get_database),
):
    """
    Start a new timer.

    - Requires authentication
    - Only one timer can run at a time
    - Project and task must exist when given
    """
    service = TimeEntryService(db)
    try:
        return await service.start_timer(user_id=user_id, timer_start=timer_start)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.post("/stop", response_model=TimeEntry)
async def stop_timer(
    timer_stop: TimerStop = TimerStop(),
    user_id: str = Depends(get_current_user_id),
    db=Depends(get_database),
    config: BillingConfig = Depends(get_billing_config),
):
    """
    Stop the running timer and record it as a time entry.

    - Requires authentication
    - Must have a running timer
    """
    service = TimeEntryService(db)
    try:
        return await service.stop_timer(
            user_id=user_id,
            ended_at=timer_stop.ended_at,
            config=config,
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.get("/current", response_model=RunningTimer)
async def get_current_timer(
    user_id: str = Depends(get_current_user_id),
    db=Depends(get_database),
):
    """
    Get the currently running timer, if any.

    - Returns 404 if no timer is running
    """
    service = TimeEntryService(db)
    timer = await service.get_current_timer(user_id=user_id)

    if not timer:
        raise HTTPException(status_code=404, detail="No timer running")

    return timer


@router.delete("/current")
async def discard_timer(
    user_id: str = Depends(get_current_user_id),
    db=Depends(get_database),
):
    """
    Discard the running timer without recording a time entry.
    """
    service = TimeEntryService(db)
    try:
        return await service.discard_timer(user_id=user_id)
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))
