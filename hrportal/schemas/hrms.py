from __future__ import annotations

from datetime import date, datetime
from uuid import UUID

from pydantic import EmailStr, Field, field_validator, model_validator

from hrportal.models.hrms import LeaveStatus, ProjectStatus, TaskPriority, TaskStatus
from hrportal.schemas.common import CamelModel, OptionalText, reject_explicit_null


# --- Roles / staff ---


class RoleOut(CamelModel):
    id: UUID
    name: str


class UserSummary(CamelModel):
    id: UUID
    full_name: str
    email: str


class UserOut(CamelModel):
    id: UUID
    full_name: str
    email: str
    role_id: UUID
    role: RoleOut | None = None
    job_title: str | None
    department: str | None
    phone_number: str | None
    is_active: bool
    created_at: datetime
    updated_at: datetime


class StaffCreate(CamelModel):
    full_name: str = Field(..., min_length=2, description="Full name.")
    email: EmailStr = Field(..., description="Unique login email.")
    password: str = Field(..., min_length=8, description="Initial password.")
    role_id: UUID = Field(..., description="Role id.")
    job_title: OptionalText = Field(None, description="Job title.")
    department: OptionalText = Field(None, description="Department.")
    phone_number: OptionalText = Field(None, description="Phone number.")


class StaffUpdate(CamelModel):
    full_name: str | None = Field(None, min_length=2)
    role_id: UUID | None = None
    job_title: OptionalText = None
    department: OptionalText = None
    phone_number: OptionalText = None
    is_active: bool | None = None

    @field_validator("full_name", "role_id", "is_active")
    @classmethod
    def _not_null(cls, value):
        return reject_explicit_null(value)


# --- Projects ---


class ProjectCreate(CamelModel):
    name: str = Field(..., min_length=3, description="Project name.")
    description: OptionalText = Field(None, description="Description.")
    manager_id: UUID = Field(..., description="Active user managing the project.")
    start_date: date = Field(..., description="Start date.")
    end_date: date | None = Field(None, description="Planned end date.")
    status: ProjectStatus = Field(ProjectStatus.PLANNED, description="Project status.")


class ProjectUpdate(CamelModel):
    name: str | None = Field(None, min_length=3)
    description: OptionalText = None
    manager_id: UUID | None = None
    start_date: date | None = None
    end_date: date | None = None
    status: ProjectStatus | None = None

    @field_validator("name", "manager_id", "start_date", "status")
    @classmethod
    def _not_null(cls, value):
        return reject_explicit_null(value)


class ProjectOut(CamelModel):
    id: UUID
    name: str
    description: str | None
    start_date: date
    end_date: date | None
    status: ProjectStatus
    manager_id: UUID
    manager: UserSummary | None = None
    created_at: datetime
    updated_at: datetime


class ProjectSummary(CamelModel):
    id: UUID
    name: str
    manager_id: UUID


class MembershipRequest(CamelModel):
    project_id: UUID = Field(..., description="Project id.")
    user_id: UUID = Field(..., description="User id.")


class MembershipOut(CamelModel):
    id: UUID
    project_id: UUID
    user_id: UUID


class ProjectMemberOut(CamelModel):
    id: UUID
    full_name: str
    email: str
    job_title: str | None
    department: str | None
    is_active: bool
    role_name: str


class ProjectMembersOut(CamelModel):
    project_id: UUID
    members: list[ProjectMemberOut]


# --- Tasks ---


class TaskCreate(CamelModel):
    title: str = Field(..., min_length=5, description="Task title.")
    description: OptionalText = Field(None, description="Description.")
    project_id: UUID = Field(..., description="Project id.")
    assigned_to_user_id: UUID = Field(..., description="Active assignee id.")
    priority: TaskPriority = Field(TaskPriority.MEDIUM, description="Priority.")
    due_date: date | None = Field(None, description="Due date.")


class TaskUpdate(CamelModel):
    title: str | None = Field(None, min_length=5)
    description: OptionalText = None
    priority: TaskPriority | None = None
    status: TaskStatus | None = None
    due_date: date | None = None
    assigned_to_user_id: UUID | None = None

    @field_validator("title", "priority", "status", "assigned_to_user_id")
    @classmethod
    def _not_null(cls, value):
        return reject_explicit_null(value)


class TaskOut(CamelModel):
    id: UUID
    title: str
    description: str | None
    priority: TaskPriority
    status: TaskStatus
    due_date: date | None
    project_id: UUID
    assigned_to_user_id: UUID
    assigned_to: UserSummary | None = None
    project: ProjectSummary | None = None
    created_at: datetime
    updated_at: datetime


# --- Leave ---


class LeaveTypeOut(CamelModel):
    id: UUID
    name: str
    default_days: int


class DateRange(CamelModel):
    from_: date | None = Field(..., alias="from", description="First day of leave.")
    to: date | None = Field(..., description="Last day of leave.")

    @field_validator("from_")
    @classmethod
    def _start_required(cls, value: date | None) -> date:
        if value is None:
            raise ValueError("Start date is required.")
        return value

    @field_validator("to")
    @classmethod
    def _end_required(cls, value: date | None) -> date:
        if value is None:
            raise ValueError("End date is required.")
        return value

    @model_validator(mode="after")
    def _ordered(self) -> DateRange:
        if self.from_ and self.to and self.from_ > self.to:
            raise ValueError("End date cannot be before the start date.")
        return self


class LeaveRequestCreate(CamelModel):
    type_id: UUID = Field(..., description="Leave type id.")
    date_range: DateRange = Field(..., description="Inclusive leave period.")
    reason: str = Field(..., min_length=10, max_length=500, description="Reason for the request.")


class LeaveRequestOut(CamelModel):
    id: UUID
    user_id: UUID
    type_id: UUID
    type_name: str | None = None
    start_date: date
    end_date: date
    reason: str
    status: LeaveStatus
    submitted_at: datetime
