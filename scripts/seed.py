"""Recreate the demo employees and managers.

Usage:
    python scripts/seed.py [--mongodb-url mongodb://localhost:27017] [--db-name hr_workflow]

Reads MONGODB_URL and JWT_SECRET from the environment or .env like the API.
"""
import argparse
import asyncio
import sys
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from motor.motor_asyncio import AsyncIOMotorClient

from hr_workflow.config import settings
from hr_workflow.database import ensure_indexes
from hr_workflow.models.user import Role, UserCreate
from hr_workflow.services.auth_service import AuthService

DEMO_PASSWORD = "password123"

DEMO_USERS = [
    ("John", "Employee", "john.employee@company.com", Role.EMPLOYEE, "EMP001", "Engineering"),
    ("Jane", "Employee", "jane.employee@company.com", Role.EMPLOYEE, "EMP002", "Marketing"),
    ("Mike", "Manager", "mike.manager@company.com", Role.MANAGER, "MGR001", "Engineering"),
    ("Sarah", "Manager", "sarah.manager@company.com", Role.MANAGER, "MGR002", "Marketing"),
]


async def seed_users(mongodb_url: str, db_name: str) -> None:
    """Drop existing users and register the demo accounts."""
    client = AsyncIOMotorClient(mongodb_url)
    db = client[db_name]

    result = await db["users"].delete_many({})
    print(f"Cleared {result.deleted_count} existing users")

    await ensure_indexes(db)
    service = AuthService(db)

    for first_name, last_name, email, role, employee_id, department in DEMO_USERS:
        user = await service.register_user(UserCreate(
            email=email,
            password=DEMO_PASSWORD,
            first_name=first_name,
            last_name=last_name,
            employee_id=employee_id,
            role=role,
            department=department,
        ))
        print(f"Created {user.role.value}: {user.email} ({user.employee_id})")

    client.close()
    print(f"Done! All demo users use the password '{DEMO_PASSWORD}'")


def main() -> None:
    parser = argparse.ArgumentParser(description="Seed demo users")
    parser.add_argument("--mongodb-url", default=settings.mongodb_url, help="MongoDB connection URL")
    parser.add_argument("--db-name", default=settings.mongodb_db_name, help="Database name")
    args = parser.parse_args()

    asyncio.run(seed_users(args.mongodb_url, args.db_name))


if __name__ == "__main__":
    main()
