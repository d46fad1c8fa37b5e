"""Project model definitions."""
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field

from solowork.models.billing_rate import ProjectRate


class ProjectStatus(str, Enum):
    """Project lifecycle states."""

    ACTIVE = "active"
    ON_HOLD = "on_hold"
    COMPLETED = "completed"
    ARCHIVED = "archived"


class ProjectBase(BaseModel):
    """Base project fields."""

    name: str = Field(..., min_length=1)
    client_id: Optional[int] = None
    description: str = ""
    status: ProjectStatus = ProjectStatus.ACTIVE
    due: Optional[date] = None


class ProjectCreate(ProjectBase):
    """Project creation model."""

    hourly_rate: Optional[Decimal] = Field(None, ge=0)


class ProjectUpdate(BaseModel):
    """Project update model - all fields optional."""

    name: Optional[str] = Field(None, min_length=1)
    client_id: Optional[int] = None
    description: Optional[str] = None
    status: Optional[ProjectStatus] = None
    due: Optional[date] = None


class Project(ProjectBase):
    """Full project model with database fields."""

    id: int = Field(alias="_id", serialization_alias="id")
    user_id: str
    billing_rate: Optional[ProjectRate] = None
    deleted: bool = False
    created_at: datetime
    updated_at: datetime

    model_config = {"populate_by_name": True}
