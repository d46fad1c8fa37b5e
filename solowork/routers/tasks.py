"""Task router - API endpoints for tasks within projects."""
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status

from solowork.database import get_database
from solowork.models.task import Task, TaskCreate, TaskUpdate
from solowork.routers.auth import get_current_user_id
from solowork.services.task_service import TaskService


router = APIRouter(prefix="/tasks", tags=["tasks"])


@router.post("", response_model=Task, status_code=status.HTTP_201_CREATED)
async def create_task(
    task: TaskCreate,
    user_id: str = Depends(get_current_user_id),
    db=Depends(get_database),
):
    """
    Create a task.

    - Requires authentication
    - Project must exist
    - Entries logged against the task inherit its billable flag
    """
    service = TaskService(db)
    try:
        return await service.create_task(user_id=user_id, task_create=task)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))


@router.get("", response_model=list[Task])
async def list_tasks(
    project_id: Optional[int] = Query(None, description="Filter by project"),
    include_completed: bool = Query(True, description="Include completed tasks"),
    user_id: str = Depends(get_current_user_id),
    db=Depends(get_database),
):
    """
    List tasks for the authenticated user.
    """
    service = TaskService(db)
    return await service.list_tasks(
        user_id=user_id,
        project_id=project_id,
        include_completed=include_completed,
    )


@router.get("/{task_id}", response_model=Task)
async def get_task(
    task_id: int,
    user_id: str = Depends(get_current_user_id),
    db=Depends(get_database),
):
    """
    Get a task by ID.
    """
    service = TaskService(db)
    try:
        return await service.get_task(user_id=user_id, task_id=task_id)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))


@router.patch("/{task_id}", response_model=Task)
async def update_task(
    task_id: int,
    task_update: TaskUpdate,
    user_id: str = Depends(get_current_user_id),
    db=Depends(get_database),
):
    """
    Update a task.
    """
    service = TaskService(db)
    try:
        return await service.update_task(
            user_id=user_id,
            task_id=task_id,
            task_update=task_update,
        )
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))


@router.delete("/{task_id}")
async def delete_task(
    task_id: int,
    user_id: str = Depends(get_current_user_id),
    db=Depends(get_database),
):
    """
    Soft delete a task.
    """
    service = TaskService(db)
    try:
        return await service.delete_task(user_id=user_id, task_id=task_id)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
