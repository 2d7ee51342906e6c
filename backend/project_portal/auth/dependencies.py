"""
Authentication dependencies for FastAPI endpoints.

Provides dependency functions for extracting user identity from the bearer
token, enforcing role requirements, and resolving the project write policy.
"""
from typing import Optional, Callable
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session
from uuid import UUID

from ..config import ProjectWritePolicy, get_membership_enabled
from ..database.models import Project, ProjectUser, UserRole
from .jwt_handler import JWTHandler

security = HTTPBearer(auto_error=False)


class CurrentUser:
    """Current user information from JWT token."""

    def __init__(self, user_id: UUID, client_id: UUID, email: str, role: str):
        self.user_id = user_id
        self.client_id = client_id
        self.email = email
        self.role = role
        self.is_admin = role == UserRole.ADMIN.value


# PUBLIC_INTERFACE
async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security)
) -> CurrentUser:
    """
    Get current authenticated user from JWT token.

    Args:
        credentials: HTTP authorization credentials

    Returns:
        CurrentUser: Current user information

    Raises:
        HTTPException: If the token is missing, invalid or incomplete
    """
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )

    if credentials is None:
        raise credentials_exception

    claims = JWTHandler.decode_user_token(credentials.credentials)
    if claims is None:
        raise credentials_exception

    try:
        return CurrentUser(
            user_id=UUID(claims["sub"]),
            client_id=UUID(claims["clientId"]),
            email=claims.get("email"),
            role=claims.get("role")
        )
    except (AttributeError, TypeError, ValueError):
        raise credentials_exception


# PUBLIC_INTERFACE
def require_roles(*roles: str) -> Callable:
    """
    Build a dependency that admits only callers whose role is in ``roles``.

    Args:
        roles: Allowed role values

    Returns:
        Callable: FastAPI dependency returning the current user
    """
    allowed = set(roles)

    async def role_guard(current_user: CurrentUser = Depends(get_current_user)) -> CurrentUser:
        if current_user.role not in allowed:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Insufficient permissions"
            )
        return current_user

    return role_guard


get_current_admin_user = require_roles(UserRole.ADMIN.value)


# PUBLIC_INTERFACE
async def require_membership_enabled(enabled: bool = Depends(get_membership_enabled)) -> None:
    """Hide the membership endpoints unless they are switched on."""
    if not enabled:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Not Found")


def is_assigned_to_project(db: Session, project: Project, current_user: CurrentUser) -> bool:
    """Return True if the caller has any assignment on ``project``, whatever its role."""
    assignment = db.query(ProjectUser).filter(
        ProjectUser.project_id == project.id,
        ProjectUser.user_id == current_user.user_id
    ).first()
    return assignment is not None


def ensure_can_modify_project(
    db: Session,
    project: Project,
    current_user: CurrentUser,
    policy: ProjectWritePolicy,
    action: str
) -> None:
    """
    Enforce the configured write policy for an update or delete.

    Under ``tenant_member`` any caller who reached the project through the
    client filter may modify it. Under ``owner_or_admin`` the caller must be
    an admin or be assigned to the project in any project role.

    Raises:
        HTTPException: 403 if the policy rejects the caller
    """
    if policy == ProjectWritePolicy.TENANT_MEMBER:
        return
    if current_user.is_admin or is_assigned_to_project(db, project, current_user):
        return
    raise HTTPException(
        status_code=status.HTTP_403_FORBIDDEN,
        detail=f"Only project owner or admin can {action}"
    )
