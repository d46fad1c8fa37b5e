"""Client router - API endpoints for client management."""
from fastapi import APIRouter, Depends, HTTPException, Query, status

from solowork.database import get_database
from solowork.models.client import Client, ClientCreate, ClientUpdate
from solowork.routers.auth import get_current_user_id
from solowork.services.client_service import ClientService


router = APIRouter(prefix="/clients", tags=["clients"])


@router.post("", response_model=Client, status_code=status.HTTP_201_CREATED)
async def create_client(
    client: ClientCreate,
    user_id: str = Depends(get_current_user_id),
    db=Depends(get_database),
):
    """
    Create a new client.

    - Requires authentication
    - An optional hourly_rate becomes the client's billing rate
    """
    service = ClientService(db)
    return await service.create_client(user_id=user_id, client_create=client)


@router.get("", response_model=list[Client])
async def list_clients(
    include_archived: bool = Query(False, description="Include archived clients"),
    user_id: str = Depends(get_current_user_id),
    db=Depends(get_database),
):
    """
    List clients for the authenticated user, ordered by name.
    """
    service = ClientService(db)
    return await service.list_clients(user_id=user_id, include_archived=include_archived)


@router.get("/{client_id}", response_model=Client)
async def get_client(
    client_id: int,
    user_id: str = Depends(get_current_user_id),
    db=Depends(get_database),
):
    """
    Get a client by ID.

    Raises:
        HTTPException: If client not found (404)
    """
    service = ClientService(db)
    try:
        return await service.get_client(user_id=user_id, client_id=client_id)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))


@router.patch("/{client_id}", response_model=Client)
async def update_client(
    client_id: int,
    client_update: ClientUpdate,
    user_id: str = Depends(get_current_user_id),
    db=Depends(get_database),
):
    """
    Update a client.

    Raises:
        HTTPException: If client not found (404)
    """
    service = ClientService(db)
    try:
        return await service.update_client(
            user_id=user_id,
            client_id=client_id,
            client_update=client_update,
        )
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))


@router.delete("/{client_id}")
async def archive_client(
    client_id: int,
    user_id: str = Depends(get_current_user_id),
    db=Depends(get_database),
):
    """
    Archive a client.

    - Archived clients are hidden from the default listing
    - Their rates still apply to existing projects
    """
    service = ClientService(db)
    try:
        return await service.archive_client(user_id=user_id, client_id=client_id)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
