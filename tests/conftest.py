"""Pytest configuration and fixtures."""
import os

# Settings are read at import time; provide test values before any app import.
os.environ.setdefault("MONGODB_URL", "mongodb://localhost:27017")
os.environ.setdefault("JWT_SECRET", "test-secret")

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from motor.motor_asyncio import AsyncIOMotorClient
from pymongo.errors import PyMongoError

from hr_workflow.main import app
from hr_workflow.config import settings
from hr_workflow.models.user import Principal, Role


@pytest.fixture
def employee():
    """An employee principal."""
    return Principal(id="emp-a", role=Role.EMPLOYEE, employee_id="EMP001", department="Engineering")


@pytest.fixture
def other_employee():
    """A second employee principal."""
    return Principal(id="emp-b", role=Role.EMPLOYEE, employee_id="EMP002", department="Marketing")


@pytest.fixture
def manager():
    """A manager principal."""
    return Principal(id="mgr-a", role=Role.MANAGER, employee_id="MGR001", department="Engineering")


def mongodb_unavailable(error: Exception) -> None:
    """
    Skip a test that needs MongoDB, or fail it when MONGODB_REQUIRED is set.

    CI sets MONGODB_REQUIRED so a missing database service cannot silently
    skip the integration suite.
    """
    message = f"MongoDB is not available at {settings.mongodb_url}: {error}"
    if os.environ.get("MONGODB_REQUIRED"):
        pytest.fail(message)
    pytest.skip(message)


@pytest_asyncio.fixture
async def app_client():
    """
    Create a test client with a clean test database.

    This fixture:
    - Skips the test when no MongoDB server is reachable (fails instead
      when MONGODB_REQUIRED is set)
    - Points the app at a throw-away database with all indexes created
    - Yields an async HTTP client for testing
    - Drops the test database after each test
    """
    from hr_workflow.database import database, ensure_indexes

    test_client = AsyncIOMotorClient(settings.mongodb_url, serverSelectionTimeoutMS=1000)
    try:
        await test_client.admin.command("ping")
    except PyMongoError as e:
        test_client.close()
        mongodb_unavailable(e)

    test_db_name = f"{settings.mongodb_db_name}_test"
    await test_client.drop_database(test_db_name)
    test_db = test_client[test_db_name]
    await ensure_indexes(test_db)

    # Override the database dependency
    original_db = database.db
    database.db = test_db

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


@pytest.fixture
def login_as(app_client):
    """
    Factory fixture: register a user and return bearer auth headers.

    Usage:
        headers = await login_as("EMP001", role="employee")
    """

    async def _login_as(employee_id: str, role: str = "employee", department: str = "Engineering") -> dict:
        email = f"{employee_id.lower()}@company.com"
        await app_client.post(
            "/auth/register",
            json={
                "email": email,
                "password": "password123",
                "first_name": "Test",
                "last_name": employee_id,
                "employee_id": employee_id,
                "role": role,
                "department": department,
            },
        )
        login_response = await app_client.post(
            "/auth/login",
            json={"email": email, "password": "password123"},
        )
        token = login_response.json()["access_token"]
        return {"Authorization": f"Bearer {token}"}

    return _login_as
