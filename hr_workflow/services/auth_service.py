"""Authentication service - users and principals."""
import logging
from datetime import datetime

from bson import ObjectId
from bson.errors import InvalidId

from hr_workflow.models.user import Principal, Role, User, UserCreate
from hr_workflow.utils.auth import create_access_token, hash_password, verify_password

logger = logging.getLogger(__name__)


class AuthService:
    """Service for handling user authentication."""

    def __init__(self, db):
        """Initialize service with database connection."""
        self.db = db
        self.users = db["users"]

    def _doc_to_user(self, doc: dict) -> User:
        return User(
            _id=str(doc["_id"]),
            email=doc["email"],
            first_name=doc["first_name"],
            last_name=doc["last_name"],
            employee_id=doc["employee_id"],
            role=doc.get("role", Role.EMPLOYEE.value),
            department=doc.get("department", ""),
            is_active=doc.get("is_active", True),
            created_at=doc["created_at"],
            updated_at=doc["updated_at"],
        )

    async def register_user(self, user_create: UserCreate) -> User:
        """
        Register a new user.

        Args:
            user_create: Registration data

        Returns:
            User object (without password)

        Raises:
            ValueError: If the email or employee ID is already registered
        """
        existing = await self.users.find_one({
            "$or": [
                {"email": user_create.email},
                {"employee_id": user_create.employee_id},
            ]
        })
        if existing:
            if existing.get("email") == user_create.email:
                raise ValueError("Email already registered")
            raise ValueError("Employee ID already registered")

        now = datetime.utcnow()
        user_doc = {
            "email": user_create.email,
            "hashed_password": hash_password(user_create.password),
            "first_name": user_create.first_name,
            "last_name": user_create.last_name,
            "employee_id": user_create.employee_id,
            "role": user_create.role.value,
            "department": user_create.department,
            "is_active": True,
            "created_at": now,
            "updated_at": now,
        }

        result = await self.users.insert_one(user_doc)
        user_doc["_id"] = result.inserted_id

        logger.info("Registered %s %s", user_create.role.value, user_create.employee_id)
        return self._doc_to_user(user_doc)

    async def login(self, email: str, password: str) -> str:
        """
        Login user and return an access token.

        Raises:
            ValueError: If credentials are invalid or the account is inactive
        """
        user_doc = await self.users.find_one({"email": email})
        if not user_doc:
            raise ValueError("Invalid email or password")

        if not verify_password(password, user_doc["hashed_password"]):
            raise ValueError("Invalid email or password")

        if not user_doc.get("is_active", True):
            raise ValueError("Account is not active")

        return create_access_token(
            user_id=str(user_doc["_id"]),
            role=user_doc.get("role", Role.EMPLOYEE.value),
        )

    async def _get_active_doc(self, user_id: str) -> dict:
        try:
            object_id = ObjectId(user_id)
        except (InvalidId, TypeError):
            raise ValueError("Invalid user ID format") from None

        user_doc = await self.users.find_one({"_id": object_id})
        if not user_doc or not user_doc.get("is_active", True):
            raise ValueError("User not found")
        return user_doc

    async def get_user_by_id(self, user_id: str) -> User:
        """
        Get an active user by ID.

        Raises:
            ValueError: If the user does not exist or is inactive
        """
        return self._doc_to_user(await self._get_active_doc(user_id))

    async def get_principal(self, user_id: str) -> Principal:
        """
        Resolve the principal for an authenticated user ID.

        Raises:
            ValueError: If the user does not exist or is inactive
        """
        user_doc = await self._get_active_doc(user_id)
        return Principal(
            id=str(user_doc["_id"]),
            role=user_doc.get("role", Role.EMPLOYEE.value),
            employee_id=user_doc.get("employee_id", ""),
            department=user_doc.get("department", ""),
        )
