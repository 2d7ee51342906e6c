"""
Project-related Pydantic schemas.

Defines request/response models for project CRUD and project membership.
"""
from datetime import datetime
from typing import Optional, Literal
from pydantic import BaseModel, Field, field_validator
from uuid import UUID

from .auth import UserInfo


class ProjectCreateRequest(BaseModel):
    """Project creation request schema."""
    name: str = Field(..., min_length=1, max_length=255, description="Project name")
    description: Optional[str] = Field(None, description="Project description")


class ProjectUpdateRequest(BaseModel):
    """Project update request schema."""
    name: Optional[str] = Field(None, min_length=1, max_length=255, description="Project name")
    description: Optional[str] = Field(None, description="Project description")

    @field_validator("name")
    @classmethod
    def name_not_null(cls, value: Optional[str]) -> str:
        """The name may be omitted but not cleared."""
        if value is None:
            raise ValueError("name cannot be null")
        return value


class ProjectResponse(BaseModel):
    """Project response schema."""
    id: UUID = Field(..., description="Project ID")
    name: str = Field(..., description="Project name")
    description: Optional[str] = Field(None, description="Project description")
    client_id: UUID = Field(..., alias="clientId", description="Client ID")
    created_at: datetime = Field(..., alias="createdAt", description="Creation timestamp")
    updated_at: datetime = Field(..., alias="updatedAt", description="Last update timestamp")

    class Config:
        from_attributes = True
        populate_by_name = True


class ProjectUserAssignRequest(BaseModel):
    """Assign a user to a project."""
    user_id: UUID = Field(..., alias="userId", description="User to assign")
    role: Literal["owner", "developer", "viewer"] = Field(..., description="Project role")

    class Config:
        populate_by_name = True


class ProjectUserRoleUpdateRequest(BaseModel):
    """Change a user's role on a project."""
    role: Literal["owner", "developer", "viewer"] = Field(..., description="Project role")


class ProjectUserResponse(BaseModel):
    """Project membership response schema."""
    id: UUID = Field(..., description="Assignment ID")
    project_id: UUID = Field(..., alias="projectId", description="Project ID")
    user_id: UUID = Field(..., alias="userId", description="User ID")
    role: str = Field(..., description="Project role")
    created_at: datetime = Field(..., alias="createdAt", description="Assignment timestamp")
    user: Optional[UserInfo] = Field(None, description="Assigned user")

    class Config:
        from_attributes = True
        populate_by_name = True
