"""Client service - business logic for client management."""
import logging
from datetime import datetime
from typing import Optional

from solowork.models.billing_rate import BillingRateSet, RateOwnerKind
from solowork.models.client import Client, ClientCreate, ClientUpdate
from solowork.services.rate_service import RateService
from solowork.utils.sequence import next_id

logger = logging.getLogger(__name__)


class ClientService:
    """Service for handling client operations."""

    def __init__(self, db):
        """Initialize service with database connection."""
        self.db = db
        self.clients = db["clients"]
        self.counters = db["counters"]
        self.rate_service = RateService(db)

    def _doc_to_client(self, doc: dict, billing_rate=None) -> Client:
        """
        Convert database document to Client model.
        """
        return Client(
            _id=doc["_id"],
            user_id=doc["user_id"],
            name=doc["name"],
            email=doc.get("email"),
            address=doc.get("address", ""),
            notes=doc.get("notes", ""),
            billing_rate=billing_rate,
            archived=doc.get("archived", False),
            created_at=doc["created_at"],
            updated_at=doc["updated_at"],
        )

    async def create_client(
        self,
        user_id: str,
        client_create: ClientCreate,
    ) -> Client:
        """
        Create a new client.

        Args:
            user_id: User ID who owns the client
            client_create: Client creation data

        Returns:
            Created client, with its rate if one was given
        """
        now = datetime.utcnow()
        client_doc = {
            "_id": await next_id(self.counters, "clients"),
            "user_id": user_id,
            "name": client_create.name,
            "email": client_create.email,
            "address": client_create.address,
            "notes": client_create.notes,
            "archived": False,
            "created_at": now,
            "updated_at": now,
        }

        await self.clients.insert_one(client_doc)
        logger.info("Created client %s", client_doc["_id"])

        billing_rate = None
        if client_create.hourly_rate is not None:
            billing_rate = await self.rate_service.upsert_rate(
                user_id,
                RateOwnerKind.CLIENT,
                client_doc["_id"],
                BillingRateSet(rate=client_create.hourly_rate),
            )

        return self._doc_to_client(client_doc, billing_rate)

    async def list_clients(
        self,
        user_id: str,
        include_archived: bool = False,
    ) -> list[Client]:
        """
        List clients for a user.

        Args:
            user_id: User ID
            include_archived: Also return archived clients

        Returns:
            List of clients ordered by name
        """
        query = {"user_id": user_id}
        if not include_archived:
            query["archived"] = False

        cursor = self.clients.find(query).sort("name", 1)
        client_docs = await cursor.to_list(length=None)

        rates = await self.rate_service.rates_for(
            user_id,
            RateOwnerKind.CLIENT,
            [doc["_id"] for doc in client_docs],
        )

        return [self._doc_to_client(doc, rates.get(doc["_id"])) for doc in client_docs]

    async def find_client(
        self,
        user_id: str,
        client_id: int,
    ) -> Optional[Client]:
        """
        Get a client by ID, or None if it does not exist.

        Archived clients are still returned; their rates keep applying to
        existing projects.
        """
        client_doc = await self.clients.find_one({
            "_id": client_id,
            "user_id": user_id,
        })

        if not client_doc:
            return None

        billing_rate = await self.rate_service.get_rate(user_id, RateOwnerKind.CLIENT, client_id)
        return self._doc_to_client(client_doc, billing_rate)

    async def get_client(
        self,
        user_id: str,
        client_id: int,
    ) -> Client:
        """
        Get a client by ID.

        Raises:
            ValueError: If client not found
        """
        client = await self.find_client(user_id, client_id)
        if client is None:
            raise ValueError("Client not found")
        return client

    async def update_client(
        self,
        user_id: str,
        client_id: int,
        client_update: ClientUpdate,
    ) -> Client:
        """
        Update a client.

        Args:
            user_id: User ID
            client_id: Client ID
            client_update: Update data

        Returns:
            Updated client

        Raises:
            ValueError: If client not found
        """
        existing = await self.clients.find_one({"_id": client_id, "user_id": user_id})
        if not existing:
            raise ValueError("Client not found")

        update_doc = {
            "updated_at": datetime.utcnow(),
        }

        if client_update.name is not None:
            update_doc["name"] = client_update.name
        if client_update.email is not None:
            update_doc["email"] = client_update.email
        if client_update.address is not None:
            update_doc["address"] = client_update.address
        if client_update.notes is not None:
            update_doc["notes"] = client_update.notes

        updated_doc = await self.clients.find_one_and_update(
            {"_id": client_id, "user_id": user_id},
            {"$set": update_doc},
            return_document=True,
        )

        billing_rate = await self.rate_service.get_rate(user_id, RateOwnerKind.CLIENT, client_id)
        return self._doc_to_client(updated_doc, billing_rate)

    async def archive_client(
        self,
        user_id: str,
        client_id: int,
    ) -> dict:
        """
        Archive a client.

        Returns:
            Dictionary with archived_count

        Raises:
            ValueError: If client not found
        """
        existing = await self.clients.find_one({"_id": client_id, "user_id": user_id})
        if not existing:
            raise ValueError("Client not found")

        result = await self.clients.update_one(
            {"_id": client_id, "user_id": user_id},
            {"$set": {"archived": True, "updated_at": datetime.utcnow()}},
        )

        return {"archived_count": result.modified_count}
