"""Invoice router - billing time entries."""
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status

from solowork.config import get_billing_config
from solowork.core.time_entries import BillingConfig
from solowork.database import get_database
from solowork.models.invoice import Invoice, InvoiceCreate, InvoicePayment, InvoiceStatus
from solowork.routers.auth import get_current_user_id
from solowork.services.invoice_service import InvoiceService


router = APIRouter(prefix="/invoices", tags=["invoices"])


@router.post("", response_model=Invoice, status_code=status.HTTP_201_CREATED)
async def create_invoice(
    invoice: InvoiceCreate,
    user_id: str = Depends(get_current_user_id),
    db=Depends(get_database),
    config: BillingConfig = Depends(get_billing_config),
):
    """
    Create an invoice from time entries.

    - Every entry must exist, be billable and not yet billed
    - The entries are marked billed and can no longer be deleted
    """
    service = InvoiceService(db)
    try:
        return await service.create_invoice(
            user_id=user_id,
            invoice_create=invoice,
            config=config,
        )
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))


@router.get("", response_model=list[Invoice])
async def list_invoices(
    invoice_status: Optional[InvoiceStatus] = Query(None, alias="status"),
    user_id: str = Depends(get_current_user_id),
    db=Depends(get_database),
):
    """
    List invoices, newest first.
    """
    service = InvoiceService(db)
    return await service.list_invoices(
        user_id=user_id,
        status=invoice_status.value if invoice_status else None,
    )


@router.get("/{invoice_id}", response_model=Invoice)
async def get_invoice(
    invoice_id: int,
    user_id: str = Depends(get_current_user_id),
    db=Depends(get_database),
):
    """
    Get an invoice by ID.
    """
    service = InvoiceService(db)
    try:
        return await service.get_invoice(user_id=user_id, invoice_id=invoice_id)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))


@router.post("/{invoice_id}/paid", response_model=Invoice)
async def mark_invoice_paid(
    invoice_id: int,
    payment: InvoicePayment = InvoicePayment(),
    user_id: str = Depends(get_current_user_id),
    db=Depends(get_database),
):
    """
    Record payment of an invoice.

    Raises:
        HTTPException: If invoice not found (404) or already paid (400)
    """
    service = InvoiceService(db)
    try:
        return await service.mark_paid(
            user_id=user_id,
            invoice_id=invoice_id,
            paid_on=payment.paid_on,
        )
    except ValueError as e:
        code = status.HTTP_404_NOT_FOUND if "not found" in str(e) else status.HTTP_400_BAD_REQUEST
        raise HTTPException(status_code=code, detail=str(e))
