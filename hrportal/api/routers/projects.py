from __future__ import annotations

import logging
from uuid import UUID

from fastapi import APIRouter, Body, Depends, status
from sqlalchemy import select
from sqlalchemy.orm import Session, selectinload

from hrportal.core.db import get_db, get_or_404
from hrportal.core.errors import Conflict, NotFound, ValidationFailed
from hrportal.core.roles import MANAGERS, PROJECT_MANAGEMENT
from hrportal.deps.auth import Principal, get_current_principal, require_roles
from hrportal.models.hrms import Project, ProjectMembership, User
from hrportal.schemas.hrms import (
    MembershipOut,
    MembershipRequest,
    ProjectCreate,
    ProjectMemberOut,
    ProjectMembersOut,
    ProjectOut,
    ProjectUpdate,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/projects", tags=["Projects"])


def _active_user_exists(db: Session, user_id: UUID) -> bool:
    return db.scalar(select(User.id).where(User.id == user_id, User.is_active.is_(True))) is not None


@router.post(
    "",
    response_model=ProjectOut,
    status_code=status.HTTP_201_CREATED,
    summary="Create project",
    description="Creates a project managed by an active user. Requires Administrator or HR Manager.",
    operation_id="projects_create",
)
def create_project(
    payload: ProjectCreate,
    principal: Principal = Depends(require_roles(PROJECT_MANAGEMENT)),
    db: Session = Depends(get_db),
) -> ProjectOut:
    if not _active_user_exists(db, payload.manager_id):
        raise NotFound("The specified Project Manager ID does not exist or the user is inactive.")

    project = Project(
        name=payload.name,
        description=payload.description,
        start_date=payload.start_date,
        end_date=payload.end_date,
        status=payload.status,
        manager_id=payload.manager_id,
    )
    db.add(project)
    db.commit()
    logger.info("Project %s created by %s", project.id, principal.email)
    return ProjectOut.model_validate(project)


@router.get(
    "",
    response_model=list[ProjectOut],
    summary="List projects",
    description="Lists all projects, newest first, with the manager's name and email.",
    operation_id="projects_list",
)
def list_projects(
    principal: Principal = Depends(get_current_principal),
    db: Session = Depends(get_db),
) -> list[ProjectOut]:
    projects = db.scalars(
        select(Project).options(selectinload(Project.manager)).order_by(Project.created_at.desc())
    ).all()
    return [ProjectOut.model_validate(p) for p in projects]


@router.put(
    "/{project_id}",
    response_model=ProjectOut,
    summary="Update project",
    description="Partially updates a project; a new manager must be an active user.",
    operation_id="projects_update",
)
def update_project(
    project_id: UUID,
    payload: ProjectUpdate,
    principal: Principal = Depends(require_roles(PROJECT_MANAGEMENT)),
    db: Session = Depends(get_db),
) -> ProjectOut:
    changes = payload.model_dump(include=payload.model_fields_set)
    if not changes:
        raise ValidationFailed("No valid fields provided for update.")

    if "manager_id" in changes and not _active_user_exists(db, changes["manager_id"]):
        raise NotFound("The specified new Project Manager ID does not exist or the user is inactive.")

    project = get_or_404(db, Project, project_id, "Project not found.")
    for field_name, value in changes.items():
        setattr(project, field_name, value)
    db.commit()
    logger.info("Project %s updated by %s: %s", project_id, principal.email, sorted(changes))
    return ProjectOut.model_validate(project)


@router.get(
    "/{project_id}/members",
    response_model=ProjectMembersOut,
    summary="List project members",
    description="Returns the team members of a project with their role names.",
    operation_id="projects_members_list",
)
def list_project_members(
    project_id: UUID,
    principal: Principal = Depends(get_current_principal),
    db: Session = Depends(get_db),
) -> ProjectMembersOut:
    get_or_404(db, Project, project_id, "Project not found.")

    memberships = db.scalars(
        select(ProjectMembership)
        .where(ProjectMembership.project_id == project_id)
        .options(selectinload(ProjectMembership.user).selectinload(User.role))
        .order_by(ProjectMembership.created_at.asc())
    ).all()

    members = [
        ProjectMemberOut(
            id=m.user.id,
            full_name=m.user.full_name,
            email=m.user.email,
            job_title=m.user.job_title,
            department=m.user.department,
            is_active=m.user.is_active,
            role_name=m.user.role.name,
        )
        for m in memberships
    ]
    return ProjectMembersOut(project_id=project_id, members=members)


@router.post(
    "/members",
    response_model=MembershipOut,
    status_code=status.HTTP_201_CREATED,
    summary="Add project member",
    description="Adds an active user to a project team. Requires a manager-class role.",
    operation_id="projects_members_add",
)
def add_project_member(
    payload: MembershipRequest,
    principal: Principal = Depends(require_roles(MANAGERS)),
    db: Session = Depends(get_db),
) -> MembershipOut:
    existing = db.scalar(
        select(ProjectMembership.id).where(
            ProjectMembership.user_id == payload.user_id,
            ProjectMembership.project_id == payload.project_id,
        )
    )
    if existing is not None:
        raise Conflict("This user is already a member of this project.")

    # Both lookups run in the session's current transaction, before the insert.
    project_found = db.get(Project, payload.project_id) is not None
    user_found = _active_user_exists(db, payload.user_id)
    if not project_found:
        raise NotFound("Project not found.")
    if not user_found:
        raise NotFound("User not found or is inactive.")

    membership = ProjectMembership(project_id=payload.project_id, user_id=payload.user_id)
    db.add(membership)
    db.commit()
    logger.info("User %s added to project %s by %s", payload.user_id, payload.project_id, principal.email)
    return MembershipOut.model_validate(membership)


@router.delete(
    "/members",
    response_model=MembershipOut,
    summary="Remove project member",
    description="Removes a user from a project team. Requires a manager-class role.",
    operation_id="projects_members_remove",
)
def remove_project_member(
    payload: MembershipRequest = Body(...),
    principal: Principal = Depends(require_roles(MANAGERS)),
    db: Session = Depends(get_db),
) -> MembershipOut:
    membership = db.scalar(
        select(ProjectMembership).where(
            ProjectMembership.user_id == payload.user_id,
            ProjectMembership.project_id == payload.project_id,
        )
    )
    if membership is None:
        raise NotFound("Membership record not found. User is not currently assigned to this project.")

    out = MembershipOut.model_validate(membership)
    db.delete(membership)
    db.commit()
    logger.info("User %s removed from project %s by %s", payload.user_id, payload.project_id, principal.email)
    return out
