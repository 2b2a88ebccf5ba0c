from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy import select
from sqlalchemy.orm import Session

from hrportal.core.db import get_db
from hrportal.deps.auth import Principal, get_current_principal
from hrportal.models.hrms import Role
from hrportal.schemas.hrms import RoleOut

router = APIRouter(prefix="/roles", tags=["Roles"])


@router.get(
    "",
    response_model=list[RoleOut],
    summary="List roles",
    description="Lists all roles ordered by name.",
    operation_id="roles_list",
)
def list_roles(
    principal: Principal = Depends(get_current_principal),
    db: Session = Depends(get_db),
) -> list[RoleOut]:
    roles = db.scalars(select(Role).order_by(Role.name.asc())).all()
    return [RoleOut.model_validate(r) for r in roles]
