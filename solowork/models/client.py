"""Client model definitions."""
from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, EmailStr, Field

from solowork.models.billing_rate import ClientRate


class ClientBase(BaseModel):
    """Base client fields."""

    name: str = Field(..., min_length=1)
    email: Optional[EmailStr] = None
    address: str = ""
    notes: str = ""


class ClientCreate(ClientBase):
    """Client creation model."""

    hourly_rate: Optional[Decimal] = Field(None, ge=0)


class ClientUpdate(BaseModel):
    """Client update model - all fields optional."""

    name: Optional[str] = Field(None, min_length=1)
    email: Optional[EmailStr] = None
    address: Optional[str] = None
    notes: Optional[str] = None


class Client(ClientBase):
    """Full client model with database fields."""

    id: int = Field(alias="_id", serialization_alias="id")
    user_id: str
    billing_rate: Optional[ClientRate] = None
    archived: bool = False
    created_at: datetime
    updated_at: datetime

    model_config = {"populate_by_name": True}
