"""
Authentication state for the frontend.

The signed-in user and token live in one immutable ``AuthSession`` value.
Pages receive it as an argument; the Streamlit session store only keeps it
between reruns under a single key.
"""
from dataclasses import dataclass, asdict
from typing import Any, Dict, MutableMapping, Optional

SESSION_KEY = "auth_session"


@dataclass(frozen=True)
class AuthUser:
    """Public fields of the signed-in user."""
    id: str
    email: str
    role: str
    client_id: str

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "AuthUser":
        """Build from the backend's camelCase user object."""
        return cls(
            id=str(data["id"]),
            email=data["email"],
            role=data.get("role") or "member",
            client_id=str(data["clientId"]),
        )


@dataclass(frozen=True)
class AuthSession:
    """Bearer token plus the user it was issued for."""
    token: str
    user: AuthUser

    @property
    def is_admin(self) -> bool:
        return self.user.is_admin

    def to_dict(self) -> Dict[str, Any]:
        return {"token": self.token, "user": asdict(self.user)}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AuthSession":
        return cls(token=data["token"], user=AuthUser(**data["user"]))


def load_session(store: MutableMapping[str, Any]) -> Optional[AuthSession]:
    """Return the stored session, or None if nobody is signed in."""
    data = store.get(SESSION_KEY)
    if not data:
        return None
    try:
        return AuthSession.from_dict(data)
    except (KeyError, TypeError):
        # Unreadable session, force a fresh login
        store.pop(SESSION_KEY, None)
        return None


def save_session(store: MutableMapping[str, Any], session: AuthSession) -> None:
    store[SESSION_KEY] = session.to_dict()


def clear_session(store: MutableMapping[str, Any]) -> None:
    store.pop(SESSION_KEY, None)
