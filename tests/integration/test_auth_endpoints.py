"""Integration tests for auth endpoints."""
import pytest


def _registration(**overrides) -> dict:
    data = {
        "email": "newuser@company.com",
        "password": "securepassword123",
        "first_name": "New",
        "last_name": "User",
        "employee_id": "EMP100",
        "role": "employee",
        "department": "Engineering",
    }
    data.update(overrides)
    return data


@pytest.mark.asyncio
class TestAuthRegister:
    """Tests for POST /auth/register endpoint."""

    async def test_register_success(self, app_client):
        """Test successful user registration."""
        response = await app_client.post("/auth/register", json=_registration())

        assert response.status_code == 201
        data = response.json()
        assert data["email"] == "newuser@company.com"
        assert data["employee_id"] == "EMP100"
        assert data["role"] == "employee"
        assert "id" in data
        assert "password" not in data
        assert "hashed_password" not in data

    async def test_register_manager(self, app_client):
        """Test registering a manager."""
        response = await app_client.post(
            "/auth/register",
            json=_registration(email="boss@company.com", employee_id="MGR100", role="manager"),
        )

        assert response.status_code == 201
        assert response.json()["role"] == "manager"

    async def test_register_duplicate_email(self, app_client):
        """Test registration with duplicate email returns 400."""
        await app_client.post("/auth/register", json=_registration())

        response = await app_client.post(
            "/auth/register",
            json=_registration(employee_id="EMP101"),
        )

        assert response.status_code == 400
        assert "already registered" in response.json()["detail"].lower()

    async def test_register_duplicate_employee_id(self, app_client):
        """Test registration with duplicate employee ID returns 400."""
        await app_client.post("/auth/register", json=_registration())

        response = await app_client.post(
            "/auth/register",
            json=_registration(email="other@company.com"),
        )

        assert response.status_code == 400
        assert response.json()["detail"] == "Employee ID already registered"

    async def test_register_invalid_role(self, app_client):
        """Test registration with an unknown role returns 422."""
        response = await app_client.post("/auth/register", json=_registration(role="admin"))

        assert response.status_code == 422

    async def test_register_missing_fields(self, app_client):
        """Test registration with missing fields returns 422."""
        response = await app_client.post(
            "/auth/register",
            json={"email": "test@company.com"},
        )

        assert response.status_code == 422


@pytest.mark.asyncio
class TestAuthLogin:
    """Tests for POST /auth/login endpoint."""

    async def test_login_success(self, app_client):
        """Test successful login returns access token."""
        await app_client.post("/auth/register", json=_registration())

        response = await app_client.post(
            "/auth/login",
            json={"email": "newuser@company.com", "password": "securepassword123"},
        )

        assert response.status_code == 200
        data = response.json()
        assert data["token_type"] == "bearer"
        assert isinstance(data["access_token"], str)
        assert len(data["access_token"]) > 0

    async def test_login_wrong_password(self, app_client):
        """Test login with wrong password returns 401."""
        await app_client.post("/auth/register", json=_registration())

        response = await app_client.post(
            "/auth/login",
            json={"email": "newuser@company.com", "password": "wrongpassword"},
        )

        assert response.status_code == 401
        assert "invalid" in response.json()["detail"].lower()

    async def test_login_nonexistent_user(self, app_client):
        """Test login with non-existent user returns 401."""
        response = await app_client.post(
            "/auth/login",
            json={"email": "notfound@company.com", "password": "somepassword"},
        )

        assert response.status_code == 401


@pytest.mark.asyncio
class TestAuthMe:
    """Tests for GET /auth/me endpoint."""

    async def test_get_current_user_authenticated(self, app_client, login_as):
        """Test getting current user with valid token."""
        headers = await login_as("MGR001", role="manager", department="Sales")

        response = await app_client.get("/auth/me", headers=headers)

        assert response.status_code == 200
        data = response.json()
        assert data["email"] == "mgr001@company.com"
        assert data["role"] == "manager"
        assert data["department"] == "Sales"
        assert "id" in data

    async def test_get_current_user_no_token(self, app_client):
        """Test getting current user without token returns 401."""
        response = await app_client.get("/auth/me")

        assert response.status_code == 401

    async def test_get_current_user_invalid_token(self, app_client):
        """Test getting current user with invalid token returns 401."""
        response = await app_client.get(
            "/auth/me",
            headers={"Authorization": "Bearer invalid.token.here"},
        )

        assert response.status_code == 401
