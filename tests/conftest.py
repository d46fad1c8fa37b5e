"""Pytest configuration and fixtures."""
import os

os.environ.setdefault("MONGODB_URL", "mongodb://localhost:27017")
os.environ.setdefault("JWT_SECRET", "test-secret-key")
os.environ.setdefault("ALLOW_REGISTRATION", "true")

import pytest
import pytest_asyncio
from unittest.mock import AsyncMock, MagicMock
from httpx import AsyncClient, ASGITransport
from motor.motor_asyncio import AsyncIOMotorClient
from pymongo.errors import PyMongoError

from solowork.main import app
from solowork.config import settings


@pytest_asyncio.fixture
async def app_client():
    """
    Create a test client with a clean test database.

    This fixture:
    - Creates a test database connection (skips if MongoDB is unreachable)
    - Yields an async HTTP client for testing
    - Cleans up the test database after each test
    """
    # Create test database client
    test_client = AsyncIOMotorClient(settings.mongodb_url, serverSelectionTimeoutMS=2000)
    try:
        await test_client.admin.command("ping")
    except PyMongoError:
        test_client.close()
        pytest.skip("MongoDB is not available")

    test_db_name = f"{settings.mongodb_db_name}_test"
    test_db = test_client[test_db_name]

    # Override the database dependency
    from solowork.database import database
    original_db = database.db
    database.db = test_db

    # Create HTTP client
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test"
    ) as client:
        yield client

    # Cleanup: drop test database
    await test_client.drop_database(test_db_name)

    # Restore original database
    database.db = original_db
    test_client.close()


@pytest_asyncio.fixture
async def auth_headers(app_client):
    """Register the account owner and return bearer headers."""
    register_data = {
        "email": "owner@example.com",
        "password": "password123",
        "name": "Solo Owner",
    }
    await app_client.post("/auth/register", json=register_data)

    login_data = {"email": "owner@example.com", "password": "password123"}
    login_response = await app_client.post("/auth/login", json=login_data)
    token = login_response.json()["access_token"]

    return {"Authorization": f"Bearer {token}"}


def make_collection(docs=None):
    """
    Build a mock Motor collection.

    Single-document operations are AsyncMocks; ``find`` returns a cursor
    whose ``sort`` chains and whose ``to_list`` yields ``docs``.
    """
    collection = MagicMock()

    cursor = MagicMock()
    cursor.sort.return_value = cursor
    cursor.to_list = AsyncMock(return_value=docs or [])
    collection.find.return_value = cursor

    for name in (
        "find_one",
        "find_one_and_update",
        "insert_one",
        "update_one",
        "update_many",
        "delete_one",
        "count_documents",
    ):
        setattr(collection, name, AsyncMock())
    collection.find_one.return_value = None
    collection.count_documents.return_value = 0

    return collection


@pytest.fixture
def mock_db():
    """
    Mock database that hands out one mock collection per name.

    The counters collection allocates id 1 unless a test says otherwise.
    """
    collections = {}

    def get_collection(name):
        if name not in collections:
            collections[name] = make_collection()
            if name == "counters":
                collections[name].find_one_and_update.return_value = {"_id": name, "seq": 1}
        return collections[name]

    db = MagicMock()
    db.__getitem__.side_effect = get_collection
    return db
