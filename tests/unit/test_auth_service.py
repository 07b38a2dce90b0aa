"""Tests for AuthService."""
import pytest
from datetime import datetime
from unittest.mock import AsyncMock, MagicMock
from bson import ObjectId

from hr_workflow.models.user import Role, UserCreate
from hr_workflow.services.auth_service import AuthService
from hr_workflow.utils.auth import hash_password, verify_access_token


def _user_create(**overrides) -> UserCreate:
    data = {
        "email": "john@company.com",
        "password": "password123",
        "first_name": "John",
        "last_name": "Doe",
        "employee_id": "EMP001",
        "role": "employee",
        "department": "Engineering",
    }
    data.update(overrides)
    return UserCreate(**data)


def _user_doc(**overrides) -> dict:
    doc = {
        "_id": ObjectId(),
        "email": "john@company.com",
        "hashed_password": hash_password("password123"),
        "first_name": "John",
        "last_name": "Doe",
        "employee_id": "EMP001",
        "role": "employee",
        "department": "Engineering",
        "is_active": True,
        "created_at": datetime.now(),
        "updated_at": datetime.now(),
    }
    doc.update(overrides)
    return doc


def _service():
    mock_db = MagicMock()
    mock_users = AsyncMock()
    mock_db.__getitem__.return_value = mock_users
    return AuthService(mock_db), mock_users


@pytest.mark.asyncio
class TestAuthServiceRegister:
    """Tests for user registration."""

    async def test_register_user_success(self):
        """Test successful user registration."""
        service, mock_users = _service()
        mock_users.find_one.return_value = None
        mock_users.insert_one.return_value = MagicMock(inserted_id=ObjectId())

        user = await service.register_user(_user_create())

        assert user.email == "john@company.com"
        assert user.employee_id == "EMP001"
        assert user.role == Role.EMPLOYEE
        assert user.is_active is True
        assert not hasattr(user, "hashed_password")  # Should not expose password

        mock_users.find_one.assert_called_once()
        mock_users.insert_one.assert_called_once()

    async def test_register_hashes_password(self):
        """Test that password is hashed before storing."""
        service, mock_users = _service()
        mock_users.find_one.return_value = None
        mock_users.insert_one.return_value = MagicMock(inserted_id=ObjectId())

        await service.register_user(_user_create(password="plaintext"))

        insert_call = mock_users.insert_one.call_args[0][0]
        assert insert_call["hashed_password"] != "plaintext"
        assert insert_call["hashed_password"].startswith("$2b$")
        assert insert_call["role"] == "employee"

    async def test_register_duplicate_email(self):
        """Test registration with duplicate email fails."""
        service, mock_users = _service()
        mock_users.find_one.return_value = _user_doc()

        with pytest.raises(ValueError, match="Email already registered"):
            await service.register_user(_user_create(employee_id="EMP999"))

    async def test_register_duplicate_employee_id(self):
        """Test registration with duplicate employee ID fails."""
        service, mock_users = _service()
        mock_users.find_one.return_value = _user_doc(email="someone@company.com")

        with pytest.raises(ValueError, match="Employee ID already registered"):
            await service.register_user(_user_create())


@pytest.mark.asyncio
class TestAuthServiceLogin:
    """Tests for user login."""

    async def test_login_success(self):
        """Test successful login returns a token for the user."""
        service, mock_users = _service()
        doc = _user_doc()
        mock_users.find_one.return_value = doc

        token = await service.login(email="john@company.com", password="password123")

        assert verify_access_token(token) == str(doc["_id"])

    async def test_login_wrong_password(self):
        """Test login with wrong password fails."""
        service, mock_users = _service()
        mock_users.find_one.return_value = _user_doc()

        with pytest.raises(ValueError, match="Invalid email or password"):
            await service.login(email="john@company.com", password="wrongpassword")

    async def test_login_unknown_email(self):
        """Test login with unknown email fails the same way."""
        service, mock_users = _service()
        mock_users.find_one.return_value = None

        with pytest.raises(ValueError, match="Invalid email or password"):
            await service.login(email="nobody@company.com", password="password123")

    async def test_login_inactive(self):
        """Test inactive accounts cannot log in."""
        service, mock_users = _service()
        mock_users.find_one.return_value = _user_doc(is_active=False)

        with pytest.raises(ValueError, match="Account is not active"):
            await service.login(email="john@company.com", password="password123")


@pytest.mark.asyncio
class TestAuthServicePrincipal:
    """Tests for resolving users and principals."""

    async def test_get_principal(self):
        """Test the principal carries role and department."""
        service, mock_users = _service()
        doc = _user_doc(role="manager", employee_id="MGR001")
        mock_users.find_one.return_value = doc

        principal = await service.get_principal(str(doc["_id"]))

        assert principal.id == str(doc["_id"])
        assert principal.role == Role.MANAGER
        assert principal.is_manager
        assert principal.department == "Engineering"

    async def test_get_user_by_id(self):
        """Test getting a user by ID."""
        service, mock_users = _service()
        doc = _user_doc()
        mock_users.find_one.return_value = doc

        user = await service.get_user_by_id(str(doc["_id"]))

        assert user.id == str(doc["_id"])
        assert user.first_name == "John"

    async def test_invalid_user_id(self):
        """Test a malformed user ID is rejected."""
        service, mock_users = _service()

        with pytest.raises(ValueError, match="Invalid user ID format"):
            await service.get_principal("not-an-object-id")

    async def test_inactive_user(self):
        """Test inactive users do not resolve to a principal."""
        service, mock_users = _service()
        mock_users.find_one.return_value = _user_doc(is_active=False)

        with pytest.raises(ValueError, match="User not found"):
            await service.get_principal(str(ObjectId()))
