import os

# Set testing environment before the application reads its settings
os.environ["TESTING"] = "1"
os.environ.setdefault("TEST_DATABASE_URL", "sqlite:///./test.db")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker

from carebook import models  # noqa: F401
from carebook.main import app
from carebook.core.database import Base, engine, get_db, get_redis
from carebook.core.security import Principal, UserRole

TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

def override_get_db():
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()

app.dependency_overrides[get_db] = override_get_db


class FakeRedis:
    """In-memory stand-in for the few Redis commands the rate limiter uses."""

    def __init__(self):
        self.data = {}

    def get(self, key):
        return self.data.get(key)

    def setex(self, key, ttl, value):
        self.data[key] = str(value)
        return True

    def incr(self, key):
        self.data[key] = str(int(self.data.get(key, 0)) + 1)
        return int(self.data[key])


@pytest.fixture(scope="function")
def test_db():
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)

@pytest.fixture
def db_session(test_db):
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()

@pytest.fixture
def fake_redis():
    return FakeRedis()

@pytest.fixture
def client(test_db, fake_redis):
    app.dependency_overrides[get_redis] = lambda: fake_redis
    with TestClient(app, base_url="http://testserver") as test_client:
        yield test_client
    app.dependency_overrides.pop(get_redis, None)

@pytest.fixture
def make_user(db_session):
    """Insert a user row directly and return it."""
    def _make_user(name: str, role: UserRole, email: str = None):
        user = models.User(
            name=name,
            email=email or f"{name.lower().replace(' ', '.')}@example.com",
            password_hash="not-a-real-hash",
            role=role,
        )
        db_session.add(user)
        db_session.commit()
        db_session.refresh(user)
        return user
    return _make_user

@pytest.fixture
def principal_for():
    return Principal.from_user

@pytest.fixture
def register_and_login(client):
    """Register a user through the API and return (user, auth headers)."""
    def _register_and_login(name: str, role: str, email: str = None, password: str = "Secret123"):
        email = email or f"{name.lower().replace(' ', '.')}@example.com"
        response = client.post("/api/auth/register", json={
            "name": name,
            "email": email,
            "password": password,
            "role": role,
        })
        assert response.status_code == 201, response.text

        login_response = client.post("/api/auth/login", json={
            "email": email,
            "password": password,
        })
        assert login_response.status_code == 200, login_response.text

        token = login_response.json()["access_token"]
        return response.json(), {"Authorization": f"Bearer {token}"}
    return _register_and_login
