"""
Pytest configuration and fixtures for backend testing.

Provides an in-memory SQLite test database, the FastAPI test client with
the database dependency overridden, and helpers for registering users in
separate clients.
"""
import os

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("TEST_DATABASE_URL", "sqlite://")
os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("BCRYPT_ROUNDS", "4")

import pytest
from typing import Callable, Dict, Generator
from uuid import uuid4
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from project_portal.api.main import app
from project_portal.database.connection import (
    get_db, TestSessionLocal, create_test_tables, drop_test_tables
)
from .test_base import bearer


@pytest.fixture(scope="function")
def db_session() -> Generator[Session, None, None]:
    """Create a fresh test database and session for each test."""
    create_test_tables()
    session = TestSessionLocal()
    try:
        yield session
    finally:
        session.close()
        drop_test_tables()


@pytest.fixture(scope="function")
def client(db_session: Session) -> Generator[TestClient, None, None]:
    """Create FastAPI test client with database dependency override."""
    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def client_a_id() -> str:
    """First client (tenant) ID."""
    return str(uuid4())


@pytest.fixture
def client_b_id() -> str:
    """Second client (tenant) ID."""
    return str(uuid4())


@pytest.fixture
def sample_project_data() -> Dict:
    """Sample project data for testing."""
    return {
        "name": "Alpha",
        "description": "First project"
    }


@pytest.fixture
def register(client: TestClient) -> Callable[..., Dict]:
    """Register a user and return the response body."""
    def _register(email: str, client_id: str, role: str = "member",
                  password: str = "secret123", **extra) -> Dict:
        payload = {
            "email": email,
            "password": password,
            "role": role,
            "clientId": client_id,
            **extra
        }
        response = client.post("/api/auth/register", json=payload)
        assert response.status_code == 201, response.text
        return response.json()

    return _register


@pytest.fixture
def admin_a(register, client_a_id) -> Dict:
    """Admin user in client A."""
    return register("admin.a@example.com", client_a_id, role="admin")


@pytest.fixture
def member_a(register, client_a_id) -> Dict:
    """Member user in client A."""
    return register("member.a@example.com", client_a_id)


@pytest.fixture
def admin_b(register, client_b_id) -> Dict:
    """Admin user in client B."""
    return register("admin.b@example.com", client_b_id, role="admin")


@pytest.fixture
def admin_a_headers(admin_a) -> Dict[str, str]:
    return bearer(admin_a["token"])


@pytest.fixture
def member_a_headers(member_a) -> Dict[str, str]:
    return bearer(member_a["token"])


@pytest.fixture
def admin_b_headers(admin_b) -> Dict[str, str]:
    return bearer(admin_b["token"])


@pytest.fixture
def project_a(client, admin_a_headers, sample_project_data) -> Dict:
    """Project created by the client A admin."""
    response = client.post("/api/projects", json=sample_project_data, headers=admin_a_headers)
    assert response.status_code == 201, response.text
    return response.json()
