"""Task service - business logic for tasks within projects."""
import logging
from datetime import datetime
from typing import Optional

from solowork.models.billing_rate import BillingRateSet, RateOwnerKind
from solowork.models.task import Task, TaskCreate, TaskUpdate
from solowork.services.rate_service import RateService
from solowork.utils.sequence import next_id

logger = logging.getLogger(__name__)


class TaskService:
    """Service for handling task operations."""

    def __init__(self, db):
        """Initialize service with database connection."""
        self.db = db
        self.tasks = db["tasks"]
        self.projects = db["projects"]
        self.counters = db["counters"]
        self.rate_service = RateService(db)

    def _doc_to_task(self, doc: dict, billing_rate=None) -> Task:
        """
        Convert database document to Task model.
        """
        return Task(
            _id=doc["_id"],
            user_id=doc["user_id"],
            project_id=doc["project_id"],
            name=doc["name"],
            description=doc.get("description", ""),
            billable=doc.get("billable", True),
            billing_rate=billing_rate,
            completed=doc.get("completed", False),
            deleted=doc.get("deleted", False),
            created_at=doc["created_at"],
            updated_at=doc["updated_at"],
        )

    async def create_task(
        self,
        user_id: str,
        task_create: TaskCreate,
    ) -> Task:
        """
        Create a task under a project.

        Args:
            user_id: User ID
            task_create: Task creation data

        Returns:
            Created task

        Raises:
            ValueError: If the project does not exist
        """
        project = await self.projects.find_one({
            "_id": task_create.project_id,
            "user_id": user_id,
            "deleted": False,
        })

        if not project:
            raise ValueError("Project not found")

        now = datetime.utcnow()
        task_doc = {
            "_id": await next_id(self.counters, "tasks"),
            "user_id": user_id,
            "project_id": task_create.project_id,
            "name": task_create.name,
            "description": task_create.description,
            "billable": task_create.billable,
            "completed": False,
            "deleted": False,
            "created_at": now,
            "updated_at": now,
        }

        await self.tasks.insert_one(task_doc)
        logger.info("Created task %s in project %s", task_doc["_id"], task_create.project_id)

        billing_rate = None
        if task_create.hourly_rate is not None:
            billing_rate = await self.rate_service.upsert_rate(
                user_id,
                RateOwnerKind.TASK,
                task_doc["_id"],
                BillingRateSet(rate=task_create.hourly_rate),
            )

        return self._doc_to_task(task_doc, billing_rate)

    async def list_tasks(
        self,
        user_id: str,
        project_id: Optional[int] = None,
        include_completed: bool = True,
        include_deleted: bool = False,
    ) -> list[Task]:
        """
        List tasks for a user.

        Args:
            user_id: User ID
            project_id: Optional project filter
            include_completed: Also return completed tasks
            include_deleted: Also return soft-deleted tasks

        Returns:
            List of tasks
        """
        query = {
            "user_id": user_id,
        }
        if not include_deleted:
            query["deleted"] = False

        if project_id is not None:
            query["project_id"] = project_id
        if not include_completed:
            query["completed"] = False

        cursor = self.tasks.find(query).sort("_id", 1)
        task_docs = await cursor.to_list(length=None)

        rates = await self.rate_service.rates_for(
            user_id,
            RateOwnerKind.TASK,
            [doc["_id"] for doc in task_docs],
        )

        return [self._doc_to_task(doc, rates.get(doc["_id"])) for doc in task_docs]

    async def find_task(
        self,
        user_id: str,
        task_id: int,
    ) -> Optional[Task]:
        """
        Get a task by ID with its rate, or None if it does not exist.
        """
        task_doc = await self.tasks.find_one({
            "_id": task_id,
            "user_id": user_id,
            "deleted": False,
        })

        if not task_doc:
            return None

        billing_rate = await self.rate_service.get_rate(user_id, RateOwnerKind.TASK, task_id)
        return self._doc_to_task(task_doc, billing_rate)

    async def get_task(
        self,
        user_id: str,
        task_id: int,
    ) -> Task:
        """
        Get a task by ID.

        Raises:
            ValueError: If task not found
        """
        task = await self.find_task(user_id, task_id)
        if task is None:
            raise ValueError("Task not found")
        return task

    async def update_task(
        self,
        user_id: str,
        task_id: int,
        task_update: TaskUpdate,
    ) -> Task:
        """
        Update a task.

        Changing ``billable`` only affects entries logged afterwards.

        Raises:
            ValueError: If task not found
        """
        existing = await self.tasks.find_one({
            "_id": task_id,
            "user_id": user_id,
            "deleted": False,
        })

        if not existing:
            raise ValueError("Task not found")

        update_doc = {
            "updated_at": datetime.utcnow(),
        }

        if task_update.name is not None:
            update_doc["name"] = task_update.name
        if task_update.description is not None:
            update_doc["description"] = task_update.description
        if task_update.billable is not None:
            update_doc["billable"] = task_update.billable
        if task_update.completed is not None:
            update_doc["completed"] = task_update.completed

        updated_doc = await self.tasks.find_one_and_update(
            {"_id": task_id, "user_id": user_id, "deleted": False},
            {"$set": update_doc},
            return_document=True,
        )

        billing_rate = await self.rate_service.get_rate(user_id, RateOwnerKind.TASK, task_id)
        return self._doc_to_task(updated_doc, billing_rate)

    async def delete_task(
        self,
        user_id: str,
        task_id: int,
    ) -> dict:
        """
        Soft delete a task.

        Returns:
            Dictionary with deleted_count

        Raises:
            ValueError: If task not found
        """
        existing = await self.tasks.find_one({
            "_id": task_id,
            "user_id": user_id,
            "deleted": False,
        })

        if not existing:
            raise ValueError("Task not found")

        result = await self.tasks.update_one(
            {"_id": task_id, "user_id": user_id},
            {"$set": {"deleted": True, "updated_at": datetime.utcnow()}},
        )

        return {"deleted_count": result.modified_count}
