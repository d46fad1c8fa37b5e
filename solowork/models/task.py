"""Task model definitions."""
from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field

from solowork.models.billing_rate import TaskRate


class TaskBase(BaseModel):
    """Base task fields."""

    project_id: int
    name: str = Field(..., min_length=1)
    description: str = ""
    billable: bool = True


class TaskCreate(TaskBase):
    """Task creation model.

    ``hourly_rate`` overrides the project and client rates for entries
    logged against this task.
    """

    hourly_rate: Optional[Decimal] = Field(None, ge=0)


class TaskUpdate(BaseModel):
    """Task update model - all fields optional."""

    name: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = None
    billable: Optional[bool] = None
    completed: Optional[bool] = None


class Task(TaskBase):
    """Full task model with database fields."""

    id: int = Field(alias="_id", serialization_alias="id")
    user_id: str
    billing_rate: Optional[TaskRate] = None
    completed: bool = False
    deleted: bool = False
    created_at: datetime
    updated_at: datetime

    model_config = {"populate_by_name": True}
