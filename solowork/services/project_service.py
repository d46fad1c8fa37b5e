"""Project service - business logic for project management."""
import logging
from datetime import datetime
from typing import Optional

from solowork.database import date_to_datetime, datetime_to_date
from solowork.models.billing_rate import BillingRateSet, RateOwnerKind
from solowork.models.project import Project, ProjectCreate, ProjectStatus, ProjectUpdate
from solowork.services.rate_service import RateService
from solowork.utils.sequence import next_id

logger = logging.getLogger(__name__)


class ProjectService:
    """Service for handling project operations."""

    def __init__(self, db):
        """Initialize service with database connection."""
        self.db = db
        self.projects = db["projects"]
        self.clients = db["clients"]
        self.counters = db["counters"]
        self.rate_service = RateService(db)

    def _doc_to_project(self, doc: dict, billing_rate=None) -> Project:
        """
        Convert database document to Project model.

        Handles datetime to date conversion for the due date.
        """
        return Project(
            _id=doc["_id"],
            user_id=doc["user_id"],
            name=doc["name"],
            client_id=doc.get("client_id"),
            description=doc.get("description", ""),
            status=doc.get("status", ProjectStatus.ACTIVE.value),
            due=datetime_to_date(doc.get("due")),
            billing_rate=billing_rate,
            deleted=doc.get("deleted", False),
            created_at=doc["created_at"],
            updated_at=doc["updated_at"],
        )

    async def _ensure_client(self, user_id: str, client_id: int) -> None:
        client = await self.clients.find_one({"_id": client_id, "user_id": user_id})
        if not client:
            raise ValueError("Client not found")

    async def create_project(
        self,
        user_id: str,
        project_create: ProjectCreate,
    ) -> Project:
        """
        Create a new project.

        Args:
            user_id: User ID who owns the project
            project_create: Project creation data

        Returns:
            Created project object

        Raises:
            ValueError: If the referenced client does not exist
        """
        if project_create.client_id is not None:
            await self._ensure_client(user_id, project_create.client_id)

        now = datetime.utcnow()
        project_doc = {
            "_id": await next_id(self.counters, "projects"),
            "user_id": user_id,
            "name": project_create.name,
            "client_id": project_create.client_id,
            "description": project_create.description,
            "status": project_create.status.value,
            "due": date_to_datetime(project_create.due),
            "deleted": False,
            "created_at": now,
            "updated_at": now,
        }

        await self.projects.insert_one(project_doc)
        logger.info("Created project %s", project_doc["_id"])

        billing_rate = None
        if project_create.hourly_rate is not None:
            billing_rate = await self.rate_service.upsert_rate(
                user_id,
                RateOwnerKind.PROJECT,
                project_doc["_id"],
                BillingRateSet(rate=project_create.hourly_rate),
            )

        return self._doc_to_project(project_doc, billing_rate)

    async def list_projects(
        self,
        user_id: str,
        client_id: Optional[int] = None,
        status: Optional[str] = None,
        include_deleted: bool = False,
    ) -> list[Project]:
        """
        List projects for a user with optional filtering.

        Args:
            user_id: User ID
            client_id: Optional client filter
            status: Optional status filter
            include_deleted: Also return soft-deleted projects

        Returns:
            List of projects
        """
        query = {
            "user_id": user_id,
        }
        if not include_deleted:
            query["deleted"] = False

        if client_id is not None:
            query["client_id"] = client_id
        if status:
            query["status"] = status

        cursor = self.projects.find(query).sort("_id", 1)
        project_docs = await cursor.to_list(length=None)

        rates = await self.rate_service.rates_for(
            user_id,
            RateOwnerKind.PROJECT,
            [doc["_id"] for doc in project_docs],
        )

        return [self._doc_to_project(doc, rates.get(doc["_id"])) for doc in project_docs]

    async def find_project(
        self,
        user_id: str,
        project_id: int,
    ) -> Optional[Project]:
        """
        Get a project by ID with its rate, or None if it does not exist.
        """
        project_doc = await self.projects.find_one({
            "_id": project_id,
            "user_id": user_id,
            "deleted": False,
        })

        if not project_doc:
            return None

        billing_rate = await self.rate_service.get_rate(user_id, RateOwnerKind.PROJECT, project_id)
        return self._doc_to_project(project_doc, billing_rate)

    async def get_project(
        self,
        user_id: str,
        project_id: int,
    ) -> Project:
        """
        Get a project by ID.

        Raises:
            ValueError: If project not found
        """
        project = await self.find_project(user_id, project_id)
        if project is None:
            raise ValueError("Project not found")
        return project

    async def update_project(
        self,
        user_id: str,
        project_id: int,
        project_update: ProjectUpdate,
    ) -> Project:
        """
        Update a project.

        Args:
            user_id: User ID
            project_id: Project ID
            project_update: Update data

        Returns:
            Updated project object

        Raises:
            ValueError: If project (or the new client) not found
        """
        existing = await self.projects.find_one({
            "_id": project_id,
            "user_id": user_id,
            "deleted": False,
        })

        if not existing:
            raise ValueError("Project not found")

        update_doc = {
            "updated_at": datetime.utcnow(),
        }

        if project_update.name is not None:
            update_doc["name"] = project_update.name
        if project_update.client_id is not None:
            await self._ensure_client(user_id, project_update.client_id)
            update_doc["client_id"] = project_update.client_id
        if project_update.description is not None:
            update_doc["description"] = project_update.description
        if project_update.status is not None:
            update_doc["status"] = project_update.status.value
        if project_update.due is not None:
            update_doc["due"] = date_to_datetime(project_update.due)

        updated_doc = await self.projects.find_one_and_update(
            {"_id": project_id, "user_id": user_id, "deleted": False},
            {"$set": update_doc},
            return_document=True,
        )

        billing_rate = await self.rate_service.get_rate(user_id, RateOwnerKind.PROJECT, project_id)
        return self._doc_to_project(updated_doc, billing_rate)

    async def delete_project(
        self,
        user_id: str,
        project_id: int,
    ) -> dict:
        """
        Soft delete a project.

        Existing time entries keep their project_id and rate snapshot.

        Returns:
            Dictionary with deleted_count

        Raises:
            ValueError: If project not found
        """
        existing = await self.projects.find_one({
            "_id": project_id,
            "user_id": user_id,
            "deleted": False,
        })

        if not existing:
            raise ValueError("Project not found")

        result = await self.projects.update_one(
            {"_id": project_id, "user_id": user_id},
            {"$set": {"deleted": True, "updated_at": datetime.utcnow()}},
        )

        return {"deleted_count": result.modified_count}
