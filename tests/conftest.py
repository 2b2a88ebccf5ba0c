from __future__ import annotations

from datetime import date
from functools import lru_cache
from uuid import uuid4

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import select

from hrportal.api.main import create_app
from hrportal.core.config import Settings
from hrportal.core.jwt import TokenClaims
from hrportal.core.roles import RoleName
from hrportal.core.security import hash_password
from hrportal.models.hrms import LeaveType, Project, Task, TaskPriority, TaskStatus, User

TEST_SECRET = "test-secret"
USER_PASSWORD = "user-pass-123"


@lru_cache(maxsize=None)
def _user_password_hash() -> str:
    return hash_password(USER_PASSWORD)


@pytest.fixture
def user_password() -> str:
    return USER_PASSWORD


@pytest.fixture
def settings() -> Settings:
    return Settings(
        database_url="sqlite+pysqlite:///:memory:",
        jwt_secret_key=TEST_SECRET,
        admin_email="hr.admin@inovera.com",
        admin_initial_password="admin-pass-123",
        log_level="WARNING",
    )


@pytest.fixture
def app(settings):
    return create_app(settings)


@pytest.fixture
def client(app):
    with TestClient(app) as c:
        yield c


@pytest.fixture
def session(app, client):
    """Session factory for arranging rows and asserting on persisted state."""
    return app.state.database.session


@pytest.fixture
def role_id(app, client):
    def _role_id(role: RoleName):
        return app.state.role_registry.id_of(role)

    return _role_id


@pytest.fixture
def make_user(session, role_id):
    def _make(role: RoleName = RoleName.EMPLOYEE, *, email: str | None = None, is_active: bool = True, full_name: str = "Test User") -> User:
        user = User(
            full_name=full_name,
            email=email or f"user-{uuid4().hex[:8]}@inovera.com",
            password_hash=_user_password_hash(),
            role_id=role_id(role),
            is_active=is_active,
        )
        with session() as db:
            db.add(user)
            db.commit()
        return user

    return _make


@pytest.fixture
def auth_headers(app, client):
    def _headers(user: User) -> dict[str, str]:
        token = app.state.token_service.issue(TokenClaims(user_id=user.id, email=user.email, role_id=user.role_id))
        return {"Authorization": f"Bearer {token}"}

    return _headers


@pytest.fixture
def make_project(session):
    def _make(manager: User, name: str = "Payroll Revamp", **fields) -> Project:
        project = Project(name=name, manager_id=manager.id, start_date=date(2024, 1, 1), **fields)
        with session() as db:
            db.add(project)
            db.commit()
        return project

    return _make


@pytest.fixture
def make_task(session):
    def _make(project: Project, assignee: User, title: str = "Prepare onboarding pack", **fields) -> Task:
        task = Task(
            title=title,
            project_id=project.id,
            assigned_to_user_id=assignee.id,
            priority=fields.pop("priority", TaskPriority.MEDIUM),
            status=fields.pop("status", TaskStatus.TO_DO),
            **fields,
        )
        with session() as db:
            db.add(task)
            db.commit()
        return task

    return _make


@pytest.fixture
def annual_leave(session) -> LeaveType:
    with session() as db:
        return db.scalars(select(LeaveType).where(LeaveType.name == "Annual Leave")).one()
