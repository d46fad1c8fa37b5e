"""Invoice model definitions."""
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class InvoiceStatus(str, Enum):
    """Invoice states."""

    ISSUED = "issued"
    PAID = "paid"


class InvoiceCreate(BaseModel):
    """Invoice creation model - bills the listed time entries."""

    time_entry_ids: list[int] = Field(..., min_length=1)
    client_id: Optional[int] = None
    due_on: Optional[date] = None
    notes: str = ""


class InvoiceLine(BaseModel):
    """One billed time entry on an invoice."""

    time_entry_id: int
    description: str = ""
    duration_minutes: int
    hourly_rate: Optional[Decimal] = None
    amount: Decimal


class Invoice(BaseModel):
    """Full invoice model with database fields."""

    id: int = Field(alias="_id", serialization_alias="id")
    user_id: str
    number: str
    client_id: Optional[int] = None
    currency: str
    status: InvoiceStatus = InvoiceStatus.ISSUED
    issued_on: date
    due_on: Optional[date] = None
    paid_on: Optional[date] = None
    notes: str = ""
    lines: list[InvoiceLine] = []
    subtotal: Decimal
    created_at: datetime
    updated_at: datetime

    model_config = {"populate_by_name": True}


class InvoicePayment(BaseModel):
    """Request model for recording an invoice payment."""

    paid_on: Optional[date] = None
