"""MongoDB database connection using Motor (async driver)."""
import logging
from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from bson.decimal128 import Decimal128
from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase

from solowork.config import settings

logger = logging.getLogger(__name__)


class Database:
    """MongoDB database connection manager."""

    client: AsyncIOMotorClient | None = None
    db: AsyncIOMotorDatabase | None = None

    async def connect(self) -> None:
        """Connect to MongoDB."""
        self.client = AsyncIOMotorClient(settings.mongodb_url)
        self.db = self.client[settings.mongodb_db_name]
        logger.info("Connected to MongoDB: %s", settings.mongodb_db_name)

    async def disconnect(self) -> None:
        """Disconnect from MongoDB."""
        if self.client:
            self.client.close()
            logger.info("Disconnected from MongoDB")

    def get_collection(self, name: str):
        """Get a MongoDB collection."""
        if self.db is None:
            raise RuntimeError("Database not connected")
        return self.db[name]


# Global database instance
database = Database()


async def get_database() -> AsyncIOMotorDatabase:
    """Dependency to get database instance."""
    if database.db is None:
        raise RuntimeError("Database not connected")
    return database.db


def to_decimal128(value: Optional[Decimal]) -> Optional[Decimal128]:
    """Convert a Decimal to its BSON representation (None passes through)."""
    if value is None:
        return None
    return Decimal128(str(value))


def from_decimal128(value) -> Optional[Decimal]:
    """
    Convert a stored numeric value back to Decimal.

    Accepts Decimal128 as well as plain numbers and strings, which older
    documents (and test fixtures) may contain.
    """
    if value is None:
        return None
    if isinstance(value, Decimal128):
        return value.to_decimal()
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def date_to_datetime(value: Optional[date]) -> Optional[datetime]:
    """BSON has no date type; store dates as midnight datetimes."""
    if value is None:
        return None
    return datetime.combine(value, datetime.min.time())


def datetime_to_date(value) -> Optional[date]:
    """Inverse of date_to_datetime."""
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    return value
