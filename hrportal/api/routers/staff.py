from __future__ import annotations

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy import select
from sqlalchemy.orm import Session, selectinload

from hrportal.core.db import get_db, get_or_404
from hrportal.core.errors import Conflict, NotFound, ValidationFailed
from hrportal.core.roles import STAFF_MANAGEMENT, RoleRegistry
from hrportal.core.security import hash_password
from hrportal.deps.auth import Principal, get_role_registry, require_roles
from hrportal.models.hrms import User
from hrportal.schemas.common import DeletedOut
from hrportal.schemas.hrms import StaffCreate, StaffUpdate, UserOut

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/staff", tags=["Staff"])


def _require_role(registry: RoleRegistry, role_id: UUID) -> None:
    # Only roles the authorization gate can resolve may be assigned.
    if role_id not in registry:
        raise NotFound("The specified role does not exist.")


@router.post(
    "",
    response_model=UserOut,
    status_code=status.HTTP_201_CREATED,
    summary="Register staff member",
    description="Creates a user account. Requires Administrator or HR Manager.",
    operation_id="staff_create",
)
def create_staff(
    payload: StaffCreate,
    principal: Principal = Depends(require_roles(STAFF_MANAGEMENT)),
    db: Session = Depends(get_db),
    registry: RoleRegistry = Depends(get_role_registry),
) -> UserOut:
    """Register a new staff member."""
    email = payload.email.lower()
    if db.scalar(select(User.id).where(User.email == email)) is not None:
        raise Conflict("User with this email already exists.")
    _require_role(registry, payload.role_id)

    user = User(
        full_name=payload.full_name,
        email=email,
        password_hash=hash_password(payload.password),
        role_id=payload.role_id,
        job_title=payload.job_title,
        department=payload.department,
        phone_number=payload.phone_number,
    )
    db.add(user)
    db.commit()
    logger.info("Staff member %s registered by %s", email, principal.email)
    return UserOut.model_validate(user)


@router.get(
    "",
    response_model=list[UserOut],
    summary="List staff",
    description="Lists all staff members ordered by full name. Requires Administrator or HR Manager.",
    operation_id="staff_list",
)
def list_staff(
    principal: Principal = Depends(require_roles(STAFF_MANAGEMENT)),
    db: Session = Depends(get_db),
) -> list[UserOut]:
    users = db.scalars(select(User).options(selectinload(User.role)).order_by(User.full_name.asc())).all()
    return [UserOut.model_validate(u) for u in users]


@router.put(
    "/{staff_id}",
    response_model=UserOut,
    summary="Update staff member",
    description="Partially updates a staff profile; only fields present in the body change.",
    operation_id="staff_update",
)
def update_staff(
    staff_id: UUID,
    payload: StaffUpdate,
    principal: Principal = Depends(require_roles(STAFF_MANAGEMENT)),
    db: Session = Depends(get_db),
    registry: RoleRegistry = Depends(get_role_registry),
) -> UserOut:
    """Update staff profile fields, including the active flag."""
    changes = payload.model_dump(include=payload.model_fields_set)
    if not changes:
        raise ValidationFailed("No valid fields provided for update.")

    user = get_or_404(db, User, staff_id, "Staff member not found.")
    if "role_id" in changes:
        _require_role(registry, changes["role_id"])

    for field_name, value in changes.items():
        setattr(user, field_name, value)
    db.commit()
    logger.info("Staff member %s updated by %s: %s", user.email, principal.email, sorted(changes))
    return UserOut.model_validate(user)


@router.delete(
    "/{staff_id}",
    response_model=DeletedOut,
    summary="Delete staff member",
    description="Hard-deletes a staff record. Prefer deactivation via isActive for normal offboarding.",
    operation_id="staff_delete",
)
def delete_staff(
    staff_id: UUID,
    principal: Principal = Depends(require_roles(STAFF_MANAGEMENT)),
    db: Session = Depends(get_db),
) -> DeletedOut:
    user = get_or_404(db, User, staff_id, "Staff member not found.")
    name = user.full_name
    db.delete(user)
    db.commit()
    logger.info("Staff member %s deleted by %s", staff_id, principal.email)
    return DeletedOut(message=f"Staff member ({name}) deleted successfully.", id=staff_id)
