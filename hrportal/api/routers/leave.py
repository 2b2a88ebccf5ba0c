from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, status
from sqlalchemy import select
from sqlalchemy.orm import Session, selectinload

from hrportal.core.db import get_db
from hrportal.core.errors import ValidationFailed
from hrportal.deps.auth import Principal, get_current_principal
from hrportal.models.hrms import LeaveRequest, LeaveStatus, LeaveType
from hrportal.schemas.hrms import LeaveRequestCreate, LeaveRequestOut, LeaveTypeOut

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/leave", tags=["Leave"])


def _to_out(leave: LeaveRequest) -> LeaveRequestOut:
    return LeaveRequestOut(
        id=leave.id,
        user_id=leave.user_id,
        type_id=leave.type_id,
        type_name=leave.type.name if leave.type else None,
        start_date=leave.start_date,
        end_date=leave.end_date,
        reason=leave.reason,
        status=leave.status,
        submitted_at=leave.submitted_at,
    )


@router.post(
    "",
    response_model=LeaveRequestOut,
    status_code=status.HTTP_201_CREATED,
    summary="Submit leave request (current user)",
    description="Creates a PENDING leave request owned by the authenticated user.",
    operation_id="leave_submit",
)
def submit_leave(
    payload: LeaveRequestCreate,
    principal: Principal = Depends(get_current_principal),
    db: Session = Depends(get_db),
) -> LeaveRequestOut:
    """Submit a leave request; approval happens outside this service."""
    if db.get(LeaveType, payload.type_id) is None:
        raise ValidationFailed(errors={"typeId": ["Unknown leave type."]})

    leave = LeaveRequest(
        user_id=principal.user_id,
        type_id=payload.type_id,
        start_date=payload.date_range.from_,
        end_date=payload.date_range.to,
        reason=payload.reason,
        status=LeaveStatus.PENDING,
    )
    db.add(leave)
    db.commit()
    logger.info("Leave request %s submitted by %s", leave.id, principal.email)
    return _to_out(leave)


@router.get(
    "/history",
    response_model=list[LeaveRequestOut],
    summary="My leave history",
    description="Returns the authenticated user's own leave requests, newest first. Query parameters are ignored.",
    operation_id="leave_history",
)
def leave_history(
    principal: Principal = Depends(get_current_principal),
    db: Session = Depends(get_db),
) -> list[LeaveRequestOut]:
    rows = db.scalars(
        select(LeaveRequest)
        .where(LeaveRequest.user_id == principal.user_id)
        .options(selectinload(LeaveRequest.type))
        .order_by(LeaveRequest.submitted_at.desc())
    ).all()
    return [_to_out(r) for r in rows]


@router.get(
    "/types",
    response_model=list[LeaveTypeOut],
    summary="List leave types",
    description="Lists the available leave types ordered by name.",
    operation_id="leave_types_list",
)
def list_leave_types(
    principal: Principal = Depends(get_current_principal),
    db: Session = Depends(get_db),
) -> list[LeaveTypeOut]:
    types = db.scalars(select(LeaveType).order_by(LeaveType.name.asc())).all()
    return [LeaveTypeOut.model_validate(t) for t in types]
