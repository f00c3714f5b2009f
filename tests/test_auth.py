from carebook.core.config import settings
from carebook.core.security import create_access_token

# Test data
test_user_data = {
    "name": "Test User",
    "email": "test@example.com",
    "password": "TestPassword123",
    "role": "PATIENT",
}

test_login_data = {
    "email": "test@example.com",
    "password": "TestPassword123"
}

class TestAuthentication:

    def test_register_user(self, client):
        """Test user registration."""
        response = client.post("/api/auth/register", json=test_user_data)
        assert response.status_code == 201

        data = response.json()
        assert data["email"] == test_user_data["email"]
        assert data["name"] == test_user_data["name"]
        assert data["role"] == test_user_data["role"]
        assert "password" not in data
        assert "password_hash" not in data

    def test_register_duplicate_email(self, client):
        """Test registration with duplicate email."""
        client.post("/api/auth/register", json=test_user_data)

        response = client.post("/api/auth/register", json=test_user_data)
        assert response.status_code == 409
        assert "already registered" in response.json()["detail"]
        assert response.json()["error"] == "Conflict"

    def test_register_invalid_password(self, client):
        """Test registration with a password shorter than seven characters."""
        invalid_data = test_user_data.copy()
        invalid_data["password"] = "weak"

        response = client.post("/api/auth/register", json=invalid_data)
        assert response.status_code == 400
        assert response.json()["error"] == "ValidationError"
        assert "password" in response.json()["detail"]

    def test_register_invalid_email(self, client):
        invalid_data = test_user_data.copy()
        invalid_data["email"] = "not-an-email"

        response = client.post("/api/auth/register", json=invalid_data)
        assert response.status_code == 400
        assert response.json()["error"] == "ValidationError"

    def test_register_unknown_role(self, client):
        invalid_data = test_user_data.copy()
        invalid_data["role"] = "NURSE"

        response = client.post("/api/auth/register", json=invalid_data)
        assert response.status_code == 400
        assert response.json()["error"] == "ValidationError"

    def test_login_success(self, client):
        """Test successful login."""
        client.post("/api/auth/register", json=test_user_data)

        response = client.post("/api/auth/login", json=test_login_data)
        assert response.status_code == 200

        data = response.json()
        assert "access_token" in data
        assert data["token_type"] == "bearer"
        assert data["expires_in"] == settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60
        assert data["user"]["email"] == test_user_data["email"]
        assert data["user"]["name"] == test_user_data["name"]
        assert data["user"]["role"] == "PATIENT"

    def test_login_invalid_credentials(self, client):
        """Test login with an unknown email."""
        invalid_login = {
            "email": "nonexistent@example.com",
            "password": "wrongpassword"
        }

        response = client.post("/api/auth/login", json=invalid_login)
        assert response.status_code == 401
        assert response.json()["detail"] == "Invalid credentials"

    def test_login_wrong_password(self, client):
        """Test login with wrong password."""
        client.post("/api/auth/register", json=test_user_data)

        wrong_login = test_login_data.copy()
        wrong_login["password"] = "wrongpassword"

        response = client.post("/api/auth/login", json=wrong_login)
        assert response.status_code == 401

    def test_get_current_user(self, client):
        """Test getting current user info."""
        client.post("/api/auth/register", json=test_user_data)
        login_response = client.post("/api/auth/login", json=test_login_data)

        token = login_response.json()["access_token"]
        headers = {"Authorization": f"Bearer {token}"}

        response = client.get("/api/auth/me", headers=headers)
        assert response.status_code == 200

        data = response.json()
        assert data["email"] == test_user_data["email"]
        assert data["role"] == "PATIENT"

    def test_get_current_user_invalid_token(self, client):
        """Test get current user with invalid token."""
        headers = {"Authorization": "Bearer invalid_token"}

        response = client.get("/api/auth/me", headers=headers)
        assert response.status_code == 401

    def test_get_current_user_without_token(self, client):
        response = client.get("/api/auth/me")
        assert response.status_code in (401, 403)

    def test_token_for_missing_user_is_rejected(self, client):
        token = create_access_token({"sub": "4242", "role": "ADMIN"})
        headers = {"Authorization": f"Bearer {token}"}

        response = client.get("/api/auth/me", headers=headers)
        assert response.status_code == 401

    def test_login_rate_limit(self, client, monkeypatch):
        monkeypatch.setattr(settings, "AUTH_RATE_LIMIT", 2)

        for _ in range(2):
            response = client.post("/api/auth/login", json=test_login_data)
            assert response.status_code == 401

        response = client.post("/api/auth/login", json=test_login_data)
        assert response.status_code == 429
