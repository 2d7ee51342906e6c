"""
Authentication and user-related Pydantic schemas.

Defines request/response models for registration, login and the
current-user endpoint. Wire keys are camelCase.
"""
from typing import Optional, Literal
from pydantic import BaseModel, EmailStr, Field
from uuid import UUID


class UserRegistrationRequest(BaseModel):
    """User registration request schema."""
    email: EmailStr = Field(..., description="User email address")
    password: str = Field(..., min_length=6, description="User password (minimum 6 characters)")
    role: Optional[Literal["admin", "member"]] = Field(None, description="User role, defaults to member")
    client_id: UUID = Field(..., alias="clientId", description="Client (tenant) the user belongs to")
    client_name: Optional[str] = Field(
        None, alias="clientName", min_length=1, max_length=255,
        description="Name used when the client does not exist yet"
    )

    class Config:
        populate_by_name = True


class UserLoginRequest(BaseModel):
    """User login request schema."""
    email: EmailStr = Field(..., description="User email address")
    password: str = Field(..., description="User password")


class UserInfo(BaseModel):
    """Public user fields."""
    id: UUID = Field(..., description="User ID")
    email: EmailStr = Field(..., description="User email address")
    role: str = Field(..., description="User role")
    client_id: UUID = Field(..., alias="clientId", description="Client (tenant) ID")

    class Config:
        from_attributes = True
        populate_by_name = True


class AuthResponse(BaseModel):
    """Registration and login response schema."""
    user: UserInfo = Field(..., description="User information")
    token: str = Field(..., description="JWT access token")


class StandardResponse(BaseModel):
    """Standard API response schema."""
    message: str = Field(..., description="Response message")

