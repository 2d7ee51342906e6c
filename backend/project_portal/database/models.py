"""
SQLAlchemy database models for the project portal.

Defines the tables for clients (tenants), users, projects and the
project-to-user assignments.
"""
import uuid
from datetime import datetime, timezone
from sqlalchemy import (
    Column, String, DateTime, Text, ForeignKey, UniqueConstraint, Index, Enum, Uuid
)
from sqlalchemy.orm import declarative_base, relationship
import enum

Base = declarative_base()


class UserRole(str, enum.Enum):
    """User roles within a client."""
    ADMIN = "admin"
    MEMBER = "member"


class ProjectRole(str, enum.Enum):
    """Roles a user can hold on a single project."""
    OWNER = "owner"
    DEVELOPER = "developer"
    VIEWER = "viewer"


class Client(Base):
    """Client model, the tenant boundary for users and projects."""
    __tablename__ = "clients"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    name = Column(String(255), nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))
    updated_at = Column(DateTime(timezone=True), nullable=True, onupdate=lambda: datetime.now(timezone.utc))

    # Relationships
    users = relationship("User", back_populates="client")
    projects = relationship("Project", back_populates="client")

    def __repr__(self):
        return f"<Client(id={self.id}, name='{self.name}')>"


class User(Base):
    """User model with client association."""
    __tablename__ = "users"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    client_id = Column(Uuid(as_uuid=True), ForeignKey("clients.id"), nullable=False)
    email = Column(String(255), nullable=False)
    password_hash = Column(String(255), nullable=False)
    role = Column(Enum(UserRole), nullable=False, default=UserRole.MEMBER)
    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))
    updated_at = Column(DateTime(timezone=True), nullable=True, onupdate=lambda: datetime.now(timezone.utc))

    # Relationships
    client = relationship("Client", back_populates="users")
    project_users = relationship("ProjectUser", back_populates="user", cascade="all, delete-orphan")

    # Constraints
    __table_args__ = (
        UniqueConstraint('email', name='uq_user_email'),
        Index('idx_user_client', 'client_id'),
    )

    def __repr__(self):
        return f"<User(id={self.id}, email='{self.email}', client_id={self.client_id})>"


class Project(Base):
    """Project model owned by a client."""
    __tablename__ = "projects"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    client_id = Column(Uuid(as_uuid=True), ForeignKey("clients.id"), nullable=False)
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc)
    )

    # Relationships
    client = relationship("Client", back_populates="projects")
    project_users = relationship("ProjectUser", back_populates="project", cascade="all, delete-orphan")

    # Constraints
    __table_args__ = (
        Index('idx_project_client', 'client_id'),
    )

    def __repr__(self):
        return f"<Project(id={self.id}, name='{self.name}', client_id={self.client_id})>"


class ProjectUser(Base):
    """Association between a project and a user with a project role."""
    __tablename__ = "project_users"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    project_id = Column(Uuid(as_uuid=True), ForeignKey("projects.id", ondelete="CASCADE"), nullable=False)
    user_id = Column(Uuid(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    role = Column(Enum(ProjectRole), nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))

    # Relationships
    project = relationship("Project", back_populates="project_users")
    user = relationship("User", back_populates="project_users")

    # Constraints
    __table_args__ = (
        UniqueConstraint('project_id', 'user_id', name='uq_project_user'),
    )

    def __repr__(self):
        return f"<ProjectUser(project_id={self.project_id}, user_id={self.user_id}, role='{self.role}')>"
