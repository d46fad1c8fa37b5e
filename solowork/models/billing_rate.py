"""Billing rate model definitions.

A billing rate belongs to exactly one owner: a client, a project, a task or a
single time entry. Each owner kind is its own model so the union can be
discriminated on ``owner_kind`` instead of dispatching on arbitrary types.
"""
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, Field, model_validator


class RateOwnerKind(str, Enum):
    """Entities a billing rate can attach to."""

    CLIENT = "client"
    PROJECT = "project"
    TASK = "task"
    TIME_ENTRY = "time_entry"


class RateType(str, Enum):
    """How the rate amount is applied."""

    HOURLY = "hourly"
    FIXED = "fixed"
    DAILY = "daily"


class BillingRateSet(BaseModel):
    """Request model for setting (upserting) an owner's rate."""

    rate: Decimal = Field(..., ge=0)
    rate_type: RateType = RateType.HOURLY
    currency: Optional[str] = Field(None, min_length=3, max_length=3)
    effective_from: Optional[date] = None
    effective_until: Optional[date] = None

    @model_validator(mode="after")
    def check_effective_window(self) -> "BillingRateSet":
        if (
            self.effective_from is not None
            and self.effective_until is not None
            and self.effective_until < self.effective_from
        ):
            raise ValueError("effective_until must not be before effective_from")
        return self


class BillingRateBase(BaseModel):
    """Fields shared by every rate variant."""

    owner_id: int
    rate: Decimal
    rate_type: RateType = RateType.HOURLY
    currency: str = "USD"
    effective_from: Optional[date] = None
    effective_until: Optional[date] = None
    updated_at: Optional[datetime] = None

    def is_active_on(self, day: Optional[date]) -> bool:
        """
        Check whether the rate applies on a given day.

        A rate without bounds is always active, and so is any rate when no
        day is given.
        """
        if day is None:
            return True
        if self.effective_from is not None and day < self.effective_from:
            return False
        if self.effective_until is not None and day > self.effective_until:
            return False
        return True


class ClientRate(BillingRateBase):
    owner_kind: Literal["client"] = "client"


class ProjectRate(BillingRateBase):
    owner_kind: Literal["project"] = "project"


class TaskRate(BillingRateBase):
    owner_kind: Literal["task"] = "task"


class TimeEntryRate(BillingRateBase):
    owner_kind: Literal["time_entry"] = "time_entry"


BillingRate = Annotated[
    Union[ClientRate, ProjectRate, TaskRate, TimeEntryRate],
    Field(discriminator="owner_kind"),
]

RATE_MODELS: dict[RateOwnerKind, type[BillingRateBase]] = {
    RateOwnerKind.CLIENT: ClientRate,
    RateOwnerKind.PROJECT: ProjectRate,
    RateOwnerKind.TASK: TaskRate,
    RateOwnerKind.TIME_ENTRY: TimeEntryRate,
}
