"""MongoDB database connection using Motor (async driver)."""
import logging

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase
from pymongo import ASCENDING, DESCENDING

from hr_workflow.config import settings

logger = logging.getLogger(__name__)


class Database:
    """MongoDB database connection manager."""

    client: AsyncIOMotorClient | None = None
    db: AsyncIOMotorDatabase | None = None

    async def connect(self) -> None:
        """Connect to MongoDB and make sure indexes exist."""
        self.client = AsyncIOMotorClient(settings.mongodb_url)
        self.db = self.client[settings.mongodb_db_name]
        await ensure_indexes(self.db)
        logger.info("Connected to MongoDB: %s", settings.mongodb_db_name)

    async def disconnect(self) -> None:
        """Disconnect from MongoDB."""
        if self.client:
            self.client.close()
            logger.info("Disconnected from MongoDB")


async def ensure_indexes(db) -> None:
    """
    Create the indexes the workflow relies on.

    The unique (user_id, week_start_date) index is what actually prevents
    two timesheets for the same week; the service-level check only produces
    a friendlier error.
    """
    timesheets = db["timesheets"]
    await timesheets.create_index(
        [("user_id", ASCENDING), ("week_start_date", ASCENDING)],
        unique=True,
        name="user_week_unique",
    )
    await timesheets.create_index(
        [("user_id", ASCENDING), ("status", ASCENDING)],
        name="user_status",
    )
    await timesheets.create_index(
        [("status", ASCENDING), ("submitted_at", ASCENDING)],
        name="status_submitted_at",
    )

    time_off = db["time_off_requests"]
    await time_off.create_index(
        [("user_id", ASCENDING), ("status", ASCENDING)],
        name="user_status",
    )
    await time_off.create_index(
        [("status", ASCENDING), ("created_at", DESCENDING)],
        name="status_created_at",
    )

    users = db["users"]
    await users.create_index("email", unique=True, name="email_unique")
    await users.create_index("employee_id", unique=True, name="employee_id_unique")

    # Expired advisory locks are reaped by MongoDB itself.
    await db["locks"].create_index("expires_at", expireAfterSeconds=0, name="lock_ttl")


# Global database instance
database = Database()


async def get_database() -> AsyncIOMotorDatabase:
    """Dependency to get database instance."""
    if database.db is None:
        raise RuntimeError("Database not connected")
    return database.db
