"""Time entry model definitions."""
from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field, computed_field, field_validator, model_validator

from solowork.core.time_entries import as_naive_utc, billable_amount


class TimeEntryCreate(BaseModel):
    """Time entry creation model.

    ``billable`` is ignored when the entry belongs to a task; the task's
    flag wins. ``hourly_rate`` is an explicit rate for this entry only.
    """

    started_at: datetime
    ended_at: datetime
    project_id: Optional[int] = None
    task_id: Optional[int] = None
    notes: Optional[str] = None
    billable: Optional[bool] = None
    hourly_rate: Optional[Decimal] = Field(None, ge=0)

    @field_validator("started_at", "ended_at")
    @classmethod
    def normalize_timezone(cls, value: Optional[datetime]) -> Optional[datetime]:
        return as_naive_utc(value)

    @model_validator(mode="after")
    def check_time_range(self) -> "TimeEntryCreate":
        if self.ended_at <= self.started_at:
            raise ValueError("ended_at must be after started_at")
        return self


class TimeEntryUpdate(BaseModel):
    """Time entry update model.

    Duration and rate are snapshots taken at creation and cannot be edited.
    """

    notes: Optional[str] = None


class TimeEntry(BaseModel):
    """Full time entry model with database fields."""

    id: int = Field(alias="_id", serialization_alias="id")
    user_id: str
    project_id: Optional[int] = None
    task_id: Optional[int] = None
    started_at: datetime
    ended_at: datetime
    duration_minutes: int
    notes: Optional[str] = None
    billable: bool = True
    billed: bool = False
    hourly_rate: Optional[Decimal] = None
    invoice_id: Optional[int] = None
    created_at: datetime
    updated_at: datetime

    model_config = {"populate_by_name": True}

    @computed_field
    @property
    def amount(self) -> Decimal:
        """Billable amount for this entry (zero when not billable or unrated)."""
        return billable_amount(self.duration_minutes, self.hourly_rate, self.billable)


class TimerStart(BaseModel):
    """Request model for starting a timer."""

    project_id: Optional[int] = None
    task_id: Optional[int] = None
    notes: Optional[str] = None
    billable: Optional[bool] = None
    hourly_rate: Optional[Decimal] = Field(None, ge=0)
    started_at: Optional[datetime] = None

    @field_validator("started_at")
    @classmethod
    def normalize_timezone(cls, value: Optional[datetime]) -> Optional[datetime]:
        return as_naive_utc(value)


class TimerStop(BaseModel):
    """Request model for stopping a timer."""

    ended_at: Optional[datetime] = None

    @field_validator("ended_at")
    @classmethod
    def normalize_timezone(cls, value: Optional[datetime]) -> Optional[datetime]:
        return as_naive_utc(value)


class RunningTimer(BaseModel):
    """A timer that has been started but not yet turned into an entry."""

    user_id: str = Field(alias="_id", serialization_alias="user_id")
    project_id: Optional[int] = None
    task_id: Optional[int] = None
    notes: Optional[str] = None
    billable: Optional[bool] = None
    hourly_rate: Optional[Decimal] = None
    started_at: datetime

    model_config = {"populate_by_name": True}
