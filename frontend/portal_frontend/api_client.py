"""
API client for the project portal backend.

All backend calls go through ``PortalAPIClient``. The client is built with
an explicit ``AuthSession`` (or none for the public auth endpoints) and
attaches the bearer token to every protected request.
"""
import logging
from typing import Any, Dict, List, Optional

import requests

from .config import API_TIMEOUT, get_api_base_url
from .session import AuthSession, AuthUser

logger = logging.getLogger(__name__)

PUBLIC_PATHS = ("/api/auth/login", "/api/auth/register")


class APIError(Exception):
    """A failed backend call with a user-facing message."""

    def __init__(self, status_code: Optional[int], message: str):
        super().__init__(message)
        self.status_code = status_code
        self.message = message

    @property
    def is_unauthorized(self) -> bool:
        return self.status_code == 401


def error_message(response: requests.Response, default: str) -> str:
    """
    Extract a readable message from an error response.

    FastAPI returns ``{"detail": "..."}`` for HTTP errors and a list of
    validation errors for 422 responses.
    """
    try:
        detail = response.json().get("detail")
    except ValueError:
        return default
    if isinstance(detail, str) and detail:
        return detail
    if isinstance(detail, list) and detail:
        return "; ".join(str(item.get("msg", item)) for item in detail if item)
    return default


class PortalAPIClient:
    """Thin wrapper around the REST endpoints."""

    def __init__(
        self,
        session: Optional[AuthSession] = None,
        base_url: Optional[str] = None,
        http: Optional[requests.Session] = None,
        timeout: float = API_TIMEOUT,
    ):
        self.session = session
        self.base_url = (base_url or get_api_base_url()).rstrip("/")
        self.http = http or requests.Session()
        self.timeout = timeout

    def with_session(self, session: Optional[AuthSession]) -> "PortalAPIClient":
        """Return a client for ``session`` sharing the same HTTP connection pool."""
        return PortalAPIClient(session=session, base_url=self.base_url, http=self.http, timeout=self.timeout)

    def _request(self, method: str, path: str, json: Optional[Dict[str, Any]] = None,
                 default_error: str = "Request failed") -> Any:
        headers = {"Accept": "application/json"}
        if path not in PUBLIC_PATHS:
            if self.session is None:
                raise APIError(401, "Authentication required. Please log in.")
            headers["Authorization"] = f"Bearer {self.session.token}"

        try:
            response = self.http.request(
                method, f"{self.base_url}{path}", json=json, headers=headers, timeout=self.timeout
            )
        except requests.exceptions.Timeout:
            logger.warning("Timeout on %s %s", method, path)
            raise APIError(None, f"Request timed out after {self.timeout:g}s. Please try again.")
        except requests.exceptions.ConnectionError:
            logger.warning("Connection error on %s %s", method, path)
            raise APIError(None, f"Cannot connect to backend at {self.base_url}.")

        if not response.ok:
            message = error_message(response, default_error)
            logger.info("%s %s failed with %s: %s", method, path, response.status_code, message)
            raise APIError(response.status_code, message)
        return response.json()

    def _auth(self, path: str, payload: Dict[str, Any], default_error: str) -> AuthSession:
        data = self._request("POST", path, json=payload, default_error=default_error)
        return AuthSession(token=data["token"], user=AuthUser.from_api(data["user"]))

    def login(self, email: str, password: str) -> AuthSession:
        return self._auth(
            "/api/auth/login",
            {"email": email, "password": password},
            "Login failed. Please check your credentials.",
        )

    def register(self, email: str, password: str, client_id: str,
                 role: str = "member", client_name: Optional[str] = None) -> AuthSession:
        payload = {"email": email, "password": password, "clientId": client_id, "role": role}
        if client_name:
            payload["clientName"] = client_name
        return self._auth("/api/auth/register", payload, "Registration failed")

    def me(self) -> AuthUser:
        return AuthUser.from_api(self._request("GET", "/api/auth/me"))

    def list_projects(self) -> List[Dict[str, Any]]:
        return self._request("GET", "/api/projects", default_error="Failed to load projects")

    def get_project(self, project_id: str) -> Dict[str, Any]:
        return self._request("GET", f"/api/projects/{project_id}", default_error="Failed to load project")

    def create_project(self, name: str, description: Optional[str] = None) -> Dict[str, Any]:
        return self._request(
            "POST", "/api/projects", json=project_payload(name, description),
            default_error="Failed to create project",
        )

    def update_project(self, project_id: str, name: str, description: Optional[str] = None) -> Dict[str, Any]:
        return self._request(
            "PUT", f"/api/projects/{project_id}", json=project_payload(name, description),
            default_error="Failed to update project",
        )

    def delete_project(self, project_id: str) -> str:
        data = self._request(
            "DELETE", f"/api/projects/{project_id}", default_error="Failed to delete project"
        )
        return data.get("message", "Project deleted")


def project_payload(name: str, description: Optional[str]) -> Dict[str, Any]:
    """Request body for create/update; a blank description is left out."""
    payload: Dict[str, Any] = {"name": name.strip()}
    if description and description.strip():
        payload["description"] = description.strip()
    return payload
