"""
Project management API routes.

Provides endpoints for project CRUD operations and project membership
within the caller's client.
"""
import logging
from typing import List
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from uuid import UUID, uuid4

from ...config import ProjectWritePolicy, get_project_write_policy
from ...database.connection import get_db
from ...database.models import Project, ProjectUser, ProjectRole, User
from ...schemas.auth import StandardResponse, UserInfo
from ...schemas.project import (
    ProjectCreateRequest, ProjectUpdateRequest, ProjectResponse,
    ProjectUserAssignRequest, ProjectUserRoleUpdateRequest, ProjectUserResponse
)
from ...auth.dependencies import (
    get_current_user, get_current_admin_user, require_membership_enabled,
    ensure_can_modify_project, CurrentUser
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/projects", tags=["Projects"])


def _project_response(project: Project) -> ProjectResponse:
    return ProjectResponse(
        id=project.id,
        name=project.name,
        description=project.description,
        client_id=project.client_id,
        created_at=project.created_at,
        updated_at=project.updated_at
    )


def _project_user_response(assignment: ProjectUser) -> ProjectUserResponse:
    user = assignment.user
    return ProjectUserResponse(
        id=assignment.id,
        project_id=assignment.project_id,
        user_id=assignment.user_id,
        role=assignment.role.value,
        created_at=assignment.created_at,
        user=UserInfo(
            id=user.id,
            email=user.email,
            role=user.role.value,
            client_id=user.client_id
        ) if user else None
    )


def _get_client_project(db: Session, project_id: UUID, current_user: CurrentUser) -> Project:
    """Load a project of the caller's client or raise 404."""
    project = db.query(Project).filter(
        Project.id == project_id,
        Project.client_id == current_user.client_id
    ).first()

    if not project:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Project not found"
        )
    return project


# PUBLIC_INTERFACE
@router.get("", response_model=List[ProjectResponse],
           summary="List projects",
           description="List all projects of the caller's client.")
async def list_projects(
    current_user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """
    List projects of the current client, newest first.
    """
    projects = db.query(Project).filter(
        Project.client_id == current_user.client_id
    ).order_by(Project.created_at.desc()).all()

    return [_project_response(project) for project in projects]


# PUBLIC_INTERFACE
@router.get("/{project_id}", response_model=ProjectResponse,
           summary="Get project details",
           description="Get a single project of the caller's client.")
async def get_project(
    project_id: UUID,
    current_user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """
    Get project details.

    Projects of other clients are reported as not found.
    """
    project = _get_client_project(db, project_id, current_user)
    return _project_response(project)


# PUBLIC_INTERFACE
@router.post("", response_model=ProjectResponse, status_code=status.HTTP_201_CREATED,
            summary="Create new project",
            description="Create a new project in the caller's client. Admin only.")
async def create_project(
    request: ProjectCreateRequest,
    current_user: CurrentUser = Depends(get_current_admin_user),
    db: Session = Depends(get_db)
):
    """
    Create a new project.

    The creator is recorded as the project owner.
    """
    project = Project(
        id=uuid4(),
        client_id=current_user.client_id,
        name=request.name,
        description=request.description
    )
    db.add(project)
    db.flush()

    db.add(ProjectUser(
        id=uuid4(),
        project_id=project.id,
        user_id=current_user.user_id,
        role=ProjectRole.OWNER
    ))
    db.commit()
    db.refresh(project)

    logger.info("Project %s created in client %s by %s", project.id, project.client_id, current_user.email)
    return _project_response(project)


# PUBLIC_INTERFACE
@router.put("/{project_id}", response_model=ProjectResponse,
           summary="Update project",
           description="Update project information.")
async def update_project(
    project_id: UUID,
    request: ProjectUpdateRequest,
    current_user: CurrentUser = Depends(get_current_user),
    policy: ProjectWritePolicy = Depends(get_project_write_policy),
    db: Session = Depends(get_db)
):
    """
    Update project information.

    Only provided fields will be updated.
    """
    project = _get_client_project(db, project_id, current_user)
    ensure_can_modify_project(db, project, current_user, policy, "update")

    update_data = request.model_dump(exclude_unset=True)
    for field, value in update_data.items():
        setattr(project, field, value)

    db.commit()
    db.refresh(project)

    return _project_response(project)


# PUBLIC_INTERFACE
@router.delete("/{project_id}", response_model=StandardResponse,
              summary="Delete project",
              description="Delete a project of the caller's client.")
async def delete_project(
    project_id: UUID,
    current_user: CurrentUser = Depends(get_current_user),
    policy: ProjectWritePolicy = Depends(get_project_write_policy),
    db: Session = Depends(get_db)
):
    """
    Delete a project together with its memberships.
    """
    project = _get_client_project(db, project_id, current_user)
    ensure_can_modify_project(db, project, current_user, policy, "delete")

    db.delete(project)
    db.commit()

    logger.info("Project %s deleted by %s", project_id, current_user.email)
    return StandardResponse(message="Project deleted successfully")


# PUBLIC_INTERFACE
@router.get("/{project_id}/users", response_model=List[ProjectUserResponse],
           dependencies=[Depends(require_membership_enabled)],
           summary="List project members",
           description="List the users assigned to a project.")
async def list_project_users(
    project_id: UUID,
    current_user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """
    List project members.
    """
    project = _get_client_project(db, project_id, current_user)
    assignments = db.query(ProjectUser).filter(
        ProjectUser.project_id == project.id
    ).order_by(ProjectUser.created_at).all()

    return [_project_user_response(assignment) for assignment in assignments]


# PUBLIC_INTERFACE
@router.post("/{project_id}/users", response_model=ProjectUserResponse, status_code=status.HTTP_201_CREATED,
            dependencies=[Depends(require_membership_enabled)],
            summary="Assign user to project",
            description="Assign a user of the same client to a project. Admin only.")
async def assign_project_user(
    project_id: UUID,
    request: ProjectUserAssignRequest,
    current_user: CurrentUser = Depends(get_current_admin_user),
    db: Session = Depends(get_db)
):
    """
    Assign a user to a project with a project role.
    """
    project = _get_client_project(db, project_id, current_user)

    user = db.query(User).filter(
        User.id == request.user_id,
        User.client_id == current_user.client_id
    ).first()
    if not user:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="User not found"
        )

    existing = db.query(ProjectUser).filter(
        ProjectUser.project_id == project.id,
        ProjectUser.user_id == user.id
    ).first()
    if existing:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="User is already assigned to this project"
        )

    assignment = ProjectUser(
        id=uuid4(),
        project_id=project.id,
        user_id=user.id,
        role=ProjectRole(request.role)
    )
    db.add(assignment)
    db.commit()
    db.refresh(assignment)

    return _project_user_response(assignment)


def _get_assignment(db: Session, project: Project, user_id: UUID) -> ProjectUser:
    assignment = db.query(ProjectUser).filter(
        ProjectUser.project_id == project.id,
        ProjectUser.user_id == user_id
    ).first()
    if not assignment:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Project assignment not found"
        )
    return assignment


# PUBLIC_INTERFACE
@router.put("/{project_id}/users/{user_id}", response_model=ProjectUserResponse,
           dependencies=[Depends(require_membership_enabled)],
           summary="Change project role",
           description="Change the project role of an assigned user. Admin only.")
async def update_project_user_role(
    project_id: UUID,
    user_id: UUID,
    request: ProjectUserRoleUpdateRequest,
    current_user: CurrentUser = Depends(get_current_admin_user),
    db: Session = Depends(get_db)
):
    """
    Change a member's project role.
    """
    project = _get_client_project(db, project_id, current_user)
    assignment = _get_assignment(db, project, user_id)

    assignment.role = ProjectRole(request.role)
    db.commit()
    db.refresh(assignment)

    return _project_user_response(assignment)


# PUBLIC_INTERFACE
@router.delete("/{project_id}/users/{user_id}", response_model=StandardResponse,
              dependencies=[Depends(require_membership_enabled)],
              summary="Remove user from project",
              description="Remove a user's assignment from a project. Admin only.")
async def remove_project_user(
    project_id: UUID,
    user_id: UUID,
    current_user: CurrentUser = Depends(get_current_admin_user),
    db: Session = Depends(get_db)
):
    """
    Remove a member from a project.
    """
    project = _get_client_project(db, project_id, current_user)
    assignment = _get_assignment(db, project, user_id)

    db.delete(assignment)
    db.commit()

    return StandardResponse(message="User removed from project successfully")
