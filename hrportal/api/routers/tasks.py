from __future__ import annotations

import logging
from typing import Any
from uuid import UUID

from fastapi import APIRouter, Body, Depends, Query, status
from pydantic import ValidationError
from sqlalchemy import select
from sqlalchemy.orm import Session, selectinload

from hrportal.core.db import get_db, get_or_404
from hrportal.core.errors import Forbidden, NotFound, ValidationFailed, field_errors_from_pydantic
from hrportal.core.roles import MANAGERS
from hrportal.deps.auth import Principal, get_current_principal, require_roles
from hrportal.models.hrms import Project, Task, TaskStatus, User
from hrportal.schemas.common import DeletedOut
from hrportal.schemas.hrms import TaskCreate, TaskOut, TaskUpdate

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/tasks", tags=["Tasks"])

# Raw body key a non-manager may send to PUT /tasks/{id}.
_EMPLOYEE_EDITABLE = frozenset({"status"})


def _active_user_exists(db: Session, user_id: UUID) -> bool:
    return db.scalar(select(User.id).where(User.id == user_id, User.is_active.is_(True))) is not None


@router.post(
    "",
    response_model=TaskOut,
    status_code=status.HTTP_201_CREATED,
    summary="Create task",
    description="Creates a task in a project, assigned to an active user. New tasks always start as To_Do.",
    operation_id="tasks_create",
)
def create_task(
    payload: TaskCreate,
    principal: Principal = Depends(require_roles(MANAGERS)),
    db: Session = Depends(get_db),
) -> TaskOut:
    # Both lookups share the transaction the insert commits; FKs catch a later delete.
    project_found = db.get(Project, payload.project_id) is not None
    assignee_found = _active_user_exists(db, payload.assigned_to_user_id)
    if not project_found:
        raise NotFound("The specified Project ID is invalid or does not exist.")
    if not assignee_found:
        raise NotFound("The specified assigned user ID is invalid or the user is inactive.")

    task = Task(
        title=payload.title,
        description=payload.description,
        priority=payload.priority,
        status=TaskStatus.TO_DO,
        due_date=payload.due_date,
        project_id=payload.project_id,
        assigned_to_user_id=payload.assigned_to_user_id,
    )
    db.add(task)
    db.commit()
    logger.info("Task %s created in project %s by %s", task.id, task.project_id, principal.email)
    return TaskOut.model_validate(task)


@router.get(
    "",
    response_model=list[TaskOut],
    summary="List tasks",
    description=(
        "Lists tasks, optionally filtered by projectId and assignedToUserId. "
        "Non-managers only ever see tasks assigned to themselves."
    ),
    operation_id="tasks_list",
)
def list_tasks(
    project_id: UUID | None = Query(None, alias="projectId"),
    assigned_to_user_id: UUID | None = Query(None, alias="assignedToUserId"),
    principal: Principal = Depends(get_current_principal),
    db: Session = Depends(get_db),
) -> list[TaskOut]:
    stmt = select(Task).options(selectinload(Task.assigned_to), selectinload(Task.project))

    if project_id is not None:
        stmt = stmt.where(Task.project_id == project_id)

    if not principal.is_manager:
        if assigned_to_user_id is not None and assigned_to_user_id != principal.user_id:
            raise Forbidden("Forbidden: employees can only view tasks assigned to themselves.")
        assigned_to_user_id = principal.user_id

    if assigned_to_user_id is not None:
        stmt = stmt.where(Task.assigned_to_user_id == assigned_to_user_id)

    tasks = db.scalars(stmt.order_by(Task.due_date.asc().nulls_last(), Task.created_at.desc())).all()
    return [TaskOut.model_validate(t) for t in tasks]


@router.put(
    "/{task_id}",
    response_model=TaskOut,
    summary="Update task",
    description=(
        "Managers may change any field. Other users may only change the status "
        "of tasks currently assigned to them."
    ),
    operation_id="tasks_update",
)
def update_task(
    task_id: UUID,
    body: dict[str, Any] = Body(...),
    principal: Principal = Depends(get_current_principal),
    db: Session = Depends(get_db),
) -> TaskOut:
    if not principal.is_manager and set(body) - _EMPLOYEE_EDITABLE:
        raise Forbidden("Employees can only update the task status.")

    try:
        payload = TaskUpdate.model_validate(body)
    except ValidationError as exc:
        raise ValidationFailed(errors=field_errors_from_pydantic(exc.errors())) from exc

    changes = payload.model_dump(include=payload.model_fields_set)
    if not changes:
        raise ValidationFailed("No valid fields provided for update.")

    if principal.is_manager:
        if "assigned_to_user_id" in changes and not _active_user_exists(db, changes["assigned_to_user_id"]):
            raise NotFound("New assigned user ID is invalid or inactive.")
        task = get_or_404(db, Task, task_id, "Task not found.")
    else:
        task = db.get(Task, task_id)
        if task is None or task.assigned_to_user_id != principal.user_id:
            raise Forbidden("Forbidden: you can only update the status of tasks assigned to you.")

    for field_name, value in changes.items():
        setattr(task, field_name, value)
    db.commit()
    logger.info("Task %s updated by %s: %s", task_id, principal.email, sorted(changes))
    return TaskOut.model_validate(task)


@router.delete(
    "/{task_id}",
    response_model=DeletedOut,
    summary="Delete task",
    description="Deletes a task. Requires a manager-class role.",
    operation_id="tasks_delete",
)
def delete_task(
    task_id: UUID,
    principal: Principal = Depends(require_roles(MANAGERS)),
    db: Session = Depends(get_db),
) -> DeletedOut:
    task = get_or_404(db, Task, task_id, "Task not found.")
    title = task.title
    db.delete(task)
    db.commit()
    logger.info("Task %s deleted by %s", task_id, principal.email)
    return DeletedOut(message=f'Task "{title}" deleted successfully.', id=task_id)
