"""Rate service - storage of billing rates for clients, projects, tasks and entries."""
import logging
from datetime import datetime
from typing import Optional

from solowork.config import settings
from solowork.database import (
    date_to_datetime,
    datetime_to_date,
    from_decimal128,
    to_decimal128,
)
from solowork.models.billing_rate import (
    RATE_MODELS,
    BillingRateBase,
    BillingRateSet,
    RateOwnerKind,
)

logger = logging.getLogger(__name__)

# Collection holding the owner documents for each rate owner kind
OWNER_COLLECTIONS = {
    RateOwnerKind.CLIENT: "clients",
    RateOwnerKind.PROJECT: "projects",
    RateOwnerKind.TASK: "tasks",
    RateOwnerKind.TIME_ENTRY: "time_entries",
}


class RateService:
    """Service for handling billing rate operations.

    Rates are keyed by (owner kind, owner id); each owner has at most one.
    """

    def __init__(self, db, default_currency: Optional[str] = None):
        """Initialize service with database connection."""
        self.db = db
        self.rates = db["billing_rates"]
        self.default_currency = default_currency or settings.default_currency

    def _doc_to_rate(self, doc: dict) -> BillingRateBase:
        """
        Convert database document to the rate variant for its owner kind.
        """
        model = RATE_MODELS[RateOwnerKind(doc["owner_kind"])]
        return model(
            owner_id=doc["owner_id"],
            rate=from_decimal128(doc["rate"]),
            rate_type=doc.get("rate_type", "hourly"),
            currency=doc.get("currency", self.default_currency),
            effective_from=datetime_to_date(doc.get("effective_from")),
            effective_until=datetime_to_date(doc.get("effective_until")),
            updated_at=doc.get("updated_at"),
        )

    async def _owner_exists(
        self,
        user_id: str,
        owner_kind: RateOwnerKind,
        owner_id: int,
    ) -> bool:
        owners = self.db[OWNER_COLLECTIONS[owner_kind]]
        owner = await owners.find_one({"_id": owner_id, "user_id": user_id})
        if not owner:
            return False
        return not owner.get("deleted", False)

    async def upsert_rate(
        self,
        user_id: str,
        owner_kind: RateOwnerKind,
        owner_id: int,
        rate_set: BillingRateSet,
    ) -> BillingRateBase:
        """
        Store a rate for an owner, replacing any existing one.

        Does not check that the owner exists; callers that just created
        the owner use this directly.

        Args:
            user_id: User ID
            owner_kind: Kind of entity the rate attaches to
            owner_id: ID of that entity
            rate_set: Rate data

        Returns:
            Stored rate
        """
        rate_doc = {
            "user_id": user_id,
            "owner_kind": owner_kind.value,
            "owner_id": owner_id,
            "rate": to_decimal128(rate_set.rate),
            "rate_type": rate_set.rate_type.value,
            "currency": rate_set.currency or self.default_currency,
            "effective_from": date_to_datetime(rate_set.effective_from),
            "effective_until": date_to_datetime(rate_set.effective_until),
            "updated_at": datetime.utcnow(),
        }

        await self.rates.update_one(
            {"user_id": user_id, "owner_kind": owner_kind.value, "owner_id": owner_id},
            {"$set": rate_doc},
            upsert=True,
        )
        logger.info(
            "Set %s rate for %s %s",
            rate_set.rate_type.value,
            owner_kind.value,
            owner_id,
        )

        return self._doc_to_rate(rate_doc)

    async def set_rate(
        self,
        user_id: str,
        owner_kind: RateOwnerKind,
        owner_id: int,
        rate_set: BillingRateSet,
    ) -> BillingRateBase:
        """
        Set the rate for an existing owner.

        Raises:
            ValueError: If the owner does not exist
        """
        if not await self._owner_exists(user_id, owner_kind, owner_id):
            raise ValueError(f"{owner_kind.value.replace('_', ' ').capitalize()} not found")

        return await self.upsert_rate(user_id, owner_kind, owner_id, rate_set)

    async def get_rate(
        self,
        user_id: str,
        owner_kind: RateOwnerKind,
        owner_id: int,
    ) -> Optional[BillingRateBase]:
        """
        Get the rate attached to an owner, if any.
        """
        doc = await self.rates.find_one({
            "user_id": user_id,
            "owner_kind": owner_kind.value,
            "owner_id": owner_id,
        })

        if not doc:
            return None

        return self._doc_to_rate(doc)

    async def rates_for(
        self,
        user_id: str,
        owner_kind: RateOwnerKind,
        owner_ids: list[int],
    ) -> dict[int, BillingRateBase]:
        """
        Get rates for many owners of one kind in a single query.

        Returns:
            Mapping of owner id to rate (owners without a rate are absent)
        """
        if not owner_ids:
            return {}

        cursor = self.rates.find({
            "user_id": user_id,
            "owner_kind": owner_kind.value,
            "owner_id": {"$in": owner_ids},
        })
        docs = await cursor.to_list(length=None)

        return {doc["owner_id"]: self._doc_to_rate(doc) for doc in docs}

    async def list_rates(self, user_id: str) -> list[BillingRateBase]:
        """
        List every rate owned by a user.
        """
        cursor = self.rates.find({"user_id": user_id}).sort([("owner_kind", 1), ("owner_id", 1)])
        docs = await cursor.to_list(length=None)
        return [self._doc_to_rate(doc) for doc in docs]

    async def delete_rate(
        self,
        user_id: str,
        owner_kind: RateOwnerKind,
        owner_id: int,
    ) -> dict:
        """
        Remove an owner's rate.

        Returns:
            Dictionary with deleted_count

        Raises:
            ValueError: If the owner has no rate
        """
        deleted_count = await self.clear_rate(user_id, owner_kind, owner_id)

        if deleted_count == 0:
            raise ValueError("Billing rate not found")

        return {"deleted_count": deleted_count}

    async def clear_rate(
        self,
        user_id: str,
        owner_kind: RateOwnerKind,
        owner_id: int,
    ) -> int:
        """Remove an owner's rate if it has one; returns the number removed."""
        result = await self.rates.delete_one({
            "user_id": user_id,
            "owner_kind": owner_kind.value,
            "owner_id": owner_id,
        })
        return result.deleted_count
