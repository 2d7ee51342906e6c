"""
Authentication and authorization tests for the project portal.

Tests cover registration, login, token contents, the current-user
endpoint and the identity guard.
"""
from datetime import timedelta
from unittest.mock import patch
from uuid import UUID, uuid4
from fastapi import status
from passlib.context import CryptContext

from project_portal.auth import jwt_handler
from project_portal.auth.jwt_handler import JWTHandler, create_access_token
from project_portal.database.models import Client, User
from .test_base import BaseAPITest, bearer


class TestRegistration(BaseAPITest):
    """Test cases for user registration."""

    def test_register_returns_user_and_token(self, client, client_a_id):
        """Registration returns public user fields and a token."""
        result = client.post("/api/auth/register", json={
            "email": "alice@example.com",
            "password": "secret123",
            "role": "admin",
            "clientId": client_a_id
        })

        self.assert_success_response(result, status.HTTP_201_CREATED)
        data = result.json()
        assert set(data) == {"user", "token"}
        assert set(data["user"]) == {"id", "email", "role", "clientId"}
        assert data["user"]["email"] == "alice@example.com"
        assert data["user"]["role"] == "admin"
        assert data["user"]["clientId"] == client_a_id

    def test_register_defaults_role_to_member(self, register, client_a_id):
        data = register("bob@example.com", client_a_id, role=None)
        assert data["user"]["role"] == "member"

    def test_register_token_carries_identity(self, register, client_a_id):
        """The token payload carries subject, email, role and client."""
        data = register("carol@example.com", client_a_id, role="admin")

        payload = JWTHandler.verify_token(data["token"])
        assert payload["sub"] == data["user"]["id"]
        assert payload["email"] == "carol@example.com"
        assert payload["role"] == "admin"
        assert payload["clientId"] == client_a_id
        assert "exp" in payload

    def test_register_stores_hashed_password(self, register, db_session, client_a_id):
        register("dave@example.com", client_a_id, password="plaintext-pw")

        user = db_session.query(User).filter(User.email == "dave@example.com").one()
        assert user.password_hash != "plaintext-pw"
        assert user.password_hash.startswith("$2")

    def test_register_provisions_missing_client(self, register, db_session, client_a_id):
        """An unknown client ID is provisioned on first registration."""
        register("erin@example.com", client_a_id, clientName="Acme")

        clients = db_session.query(Client).all()
        assert len(clients) == 1
        assert clients[0].id == UUID(client_a_id)
        assert clients[0].name == "Acme"

    def test_register_reuses_existing_client(self, register, db_session, client_a_id):
        register("frank@example.com", client_a_id, role="admin")
        register("grace@example.com", client_a_id)

        assert db_session.query(Client).count() == 1
        assert db_session.query(User).filter(User.client_id == UUID(client_a_id)).count() == 2

    def test_register_duplicate_email(self, client, register, client_a_id, client_b_id):
        """Registering an already-used email fails with an authorization error."""
        register("heidi@example.com", client_a_id)

        result = client.post("/api/auth/register", json={
            "email": "heidi@example.com",
            "password": "another123",
            "clientId": client_b_id
        })

        self.assert_unauthorized(result, "User already exists")

    def test_register_invalid_email(self, client, client_a_id):
        result = client.post("/api/auth/register", json={
            "email": "not-an-email",
            "password": "secret123",
            "clientId": client_a_id
        })

        self.assert_validation_error(result, "email")

    def test_register_short_password(self, client, client_a_id):
        result = client.post("/api/auth/register", json={
            "email": "ivan@example.com",
            "password": "12345",
            "clientId": client_a_id
        })

        self.assert_validation_error(result, "password")

    def test_register_unknown_role(self, client, client_a_id):
        result = client.post("/api/auth/register", json={
            "email": "judy@example.com",
            "password": "secret123",
            "role": "superuser",
            "clientId": client_a_id
        })

        self.assert_validation_error(result, "role")

    def test_register_requires_client_uuid(self, client):
        result = client.post("/api/auth/register", json={
            "email": "mallory@example.com",
            "password": "secret123",
            "clientId": "C1"
        })

        self.assert_validation_error(result, "clientId")


class TestLogin(BaseAPITest):
    """Test cases for user login."""

    def test_login_success(self, client, register, client_a_id):
        registered = register("oscar@example.com", client_a_id, role="admin")

        result = client.post("/api/auth/login", json={
            "email": "oscar@example.com",
            "password": "secret123"
        })

        self.assert_success_response(result)
        data = result.json()
        assert data["user"] == registered["user"]
        assert JWTHandler.verify_token(data["token"])["sub"] == registered["user"]["id"]

    def test_login_failures_are_indistinguishable(self, client, register, client_a_id):
        """Wrong password and unknown email produce the same error."""
        register("peggy@example.com", client_a_id)

        wrong_password = client.post("/api/auth/login", json={
            "email": "peggy@example.com",
            "password": "wrong-password"
        })
        unknown_email = client.post("/api/auth/login", json={
            "email": "nobody@example.com",
            "password": "secret123"
        })

        self.assert_unauthorized(wrong_password, "Invalid credentials")
        self.assert_unauthorized(unknown_email, "Invalid credentials")
        assert wrong_password.json() == unknown_email.json()

    def test_unknown_email_still_checks_a_hash(self, client, register, client_a_id):
        """Unknown emails go through a dummy hash check; known emails do not."""
        register("rita@example.com", client_a_id)

        with patch.object(jwt_handler.PasswordHandler, "dummy_verify", return_value=False) as dummy:
            unknown = client.post("/api/auth/login", json={
                "email": "nobody@example.com",
                "password": "secret123"
            })
            wrong = client.post("/api/auth/login", json={
                "email": "rita@example.com",
                "password": "wrong-password"
            })

        self.assert_unauthorized(unknown, "Invalid credentials")
        self.assert_unauthorized(wrong, "Invalid credentials")
        dummy.assert_called_once_with()

    def test_login_upgrades_weak_hash(self, client, db_session, register, client_a_id, monkeypatch):
        """A hash below the configured bcrypt cost is replaced on login."""
        register("quinn@example.com", client_a_id)
        old_hash = db_session.query(User).filter(User.email == "quinn@example.com").one().password_hash
        stronger = CryptContext(schemes=["bcrypt"], bcrypt__rounds=5, bcrypt__min_rounds=5)
        monkeypatch.setattr(jwt_handler, "pwd_context", stronger)

        result = client.post("/api/auth/login", json={
            "email": "quinn@example.com",
            "password": "secret123"
        })

        self.assert_success_response(result)
        user = db_session.query(User).filter(User.email == "quinn@example.com").one()
        assert user.password_hash != old_hash
        assert user.password_hash.startswith("$2b$05$")
        assert stronger.verify("secret123", user.password_hash)


class TestCurrentUser(BaseAPITest):
    """Test cases for the current-user endpoint and the identity guard."""

    def test_me_returns_public_fields(self, client, admin_a, admin_a_headers):
        result = client.get("/api/auth/me", headers=admin_a_headers)

        self.assert_success_response(result)
        assert result.json() == admin_a["user"]

    def test_me_without_token(self, client):
        result = client.get("/api/auth/me")

        self.assert_unauthorized(result, "Could not validate credentials")
        assert result.headers["www-authenticate"] == "Bearer"

    def test_me_with_invalid_token(self, client):
        result = client.get("/api/auth/me", headers=bearer("not-a-jwt"))

        self.assert_unauthorized(result)

    def test_me_with_expired_token(self, client, admin_a):
        payload = JWTHandler.verify_token(admin_a["token"])
        payload.pop("exp")
        expired = create_access_token(payload, expires_delta=timedelta(minutes=-5))

        result = client.get("/api/auth/me", headers=bearer(expired))

        self.assert_unauthorized(result)

    def test_me_with_token_missing_client(self, client, admin_a):
        token = create_access_token({"sub": admin_a["user"]["id"], "role": "admin"})

        result = client.get("/api/auth/me", headers=bearer(token))

        self.assert_unauthorized(result)

    def test_me_for_unknown_user(self, client):
        token = JWTHandler.create_user_token(uuid4(), uuid4(), "ghost@example.com", "member")

        result = client.get("/api/auth/me", headers=bearer(token))

        self.assert_not_found(result, "User not found")
