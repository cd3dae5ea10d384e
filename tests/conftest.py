"""Pytest configuration and fixtures."""

import os

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from backoffice.database import Base, get_db
from backoffice.main import app


class AuthHeaders(dict):
    """Dict subclass that also stores user info."""

    def __init__(self, *args, user_id: int | None = None, email: str | None = None, **kwargs):
        super().__init__(*args, **kwargs)
        self.user_id = user_id
        self.email = email


# Use a PostgreSQL test database when one is configured, SQLite otherwise
SQLALCHEMY_DATABASE_URL = os.getenv("TEST_DATABASE_URL", "sqlite:///./test.db")

connect_args = {"check_same_thread": False} if "sqlite" in SQLALCHEMY_DATABASE_URL else {}
engine = create_engine(SQLALCHEMY_DATABASE_URL, connect_args=connect_args)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture(scope="session", autouse=True)
def setup_test_database():
    """Create test database schema once at the start of the test session."""
    if "postgresql" in SQLALCHEMY_DATABASE_URL:
        from sqlalchemy_utils import create_database, database_exists

        if not database_exists(SQLALCHEMY_DATABASE_URL):
            create_database(SQLALCHEMY_DATABASE_URL)

    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield


@pytest.fixture(scope="function", autouse=True)
def db():
    """Create a fresh database session for each test with cleanup."""
    session = TestingSessionLocal()

    yield session

    # Clean up all data after test
    session.rollback()
    for table in reversed(Base.metadata.sorted_tables):
        session.execute(table.delete())
    session.commit()
    session.close()


@pytest.fixture(scope="function")
def client(db):
    """Create a test client with database override."""

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def _register(client, email: str, name: str) -> AuthHeaders:
    response = client.post(
        "/api/v1/auth/register",
        json={"email": email, "password": "testpass123", "name": name},
    )
    assert response.status_code == 201
    data = response.json()
    return AuthHeaders(
        {"Authorization": f"Bearer {data['access_token']}"},
        user_id=data["user"]["id"],
        email=data["user"]["email"],
    )


@pytest.fixture
def auth_headers(client):
    """Register the first user (who becomes Admin) and return auth headers."""
    return _register(client, "owner@example.com", "Owner")


@pytest.fixture
def staff_headers(client, auth_headers):
    """Register a second user, who gets the Staff role."""
    return _register(client, "waiter@example.com", "Waiter")


@pytest.fixture
def flour(client, auth_headers):
    """20 kg of flour bought for 22.00, reorder below 5 kg."""
    response = client.post(
        "/api/v1/inventory",
        headers=auth_headers,
        json={
            "name": "Flour",
            "quantity": 20,
            "unit": "kg",
            "total_cost": 22.0,
            "reorder_threshold": 5000,
            "category": "Grains",
        },
    )
    assert response.status_code == 201
    return response.json()
