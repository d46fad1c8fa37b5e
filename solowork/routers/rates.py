"""Rate router - billing rates attached to clients, projects, tasks and entries."""
from fastapi import APIRouter, Depends, HTTPException, status

from solowork.database import get_database
from solowork.models.billing_rate import BillingRate, BillingRateSet, RateOwnerKind
from solowork.routers.auth import get_current_user_id
from solowork.services.rate_service import RateService


router = APIRouter(prefix="/rates", tags=["rates"])


@router.get("", response_model=list[BillingRate])
async def list_rates(
    user_id: str = Depends(get_current_user_id),
    db=Depends(get_database),
):
    """
    List every billing rate.
    """
    service = RateService(db)
    return await service.list_rates(user_id=user_id)


@router.get("/{owner_kind}/{owner_id}", response_model=BillingRate)
async def get_rate(
    owner_kind: RateOwnerKind,
    owner_id: int,
    user_id: str = Depends(get_current_user_id),
    db=Depends(get_database),
):
    """
    Get the rate attached to an owner.

    Raises:
        HTTPException: If the owner has no rate (404)
    """
    service = RateService(db)
    rate = await service.get_rate(user_id=user_id, owner_kind=owner_kind, owner_id=owner_id)

    if rate is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Billing rate not found")

    return rate


@router.put("/{owner_kind}/{owner_id}", response_model=BillingRate)
async def set_rate(
    owner_kind: RateOwnerKind,
    owner_id: int,
    rate_set: BillingRateSet,
    user_id: str = Depends(get_current_user_id),
    db=Depends(get_database),
):
    """
    Set an owner's rate, replacing the current one.

    - Existing time entries keep the rate they were created with
    - Owner must exist
    """
    service = RateService(db)
    try:
        return await service.set_rate(
            user_id=user_id,
            owner_kind=owner_kind,
            owner_id=owner_id,
            rate_set=rate_set,
        )
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))


@router.delete("/{owner_kind}/{owner_id}")
async def delete_rate(
    owner_kind: RateOwnerKind,
    owner_id: int,
    user_id: str = Depends(get_current_user_id),
    db=Depends(get_database),
):
    """
    Remove an owner's rate so the next level of the chain applies.
    """
    service = RateService(db)
    try:
        return await service.delete_rate(user_id=user_id, owner_kind=owner_kind, owner_id=owner_id)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
