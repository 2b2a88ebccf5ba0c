from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from hrportal.api.routers import auth, leave, projects, roles, staff, tasks
from hrportal.core.config import Settings, get_settings
from hrportal.core.db import Database
from hrportal.core.errors import register_exception_handlers
from hrportal.core.jwt import TokenService
from hrportal.services.bootstrap import seed_reference_data

logger = logging.getLogger(__name__)

openapi_tags = [
    {"name": "Health", "description": "Service health check."},
    {"name": "Auth", "description": "Login and JWT token issuance."},
    {"name": "Staff", "description": "Staff directory management."},
    {"name": "Projects", "description": "Projects and project team membership."},
    {"name": "Tasks", "description": "Task assignment and status tracking."},
    {"name": "Leave", "description": "Leave requests, history and leave types."},
    {"name": "Roles", "description": "Role reference data."},
]


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    database: Database = app.state.database
    database.create_all()
    with database.session() as db:
        app.state.role_registry = seed_reference_data(db, app.state.settings)
    logger.info("HR Portal API started")
    try:
        yield
    finally:
        database.dispose()
        logger.info("HR Portal API stopped; database connections released")


# PUBLIC_INTERFACE
def create_app(settings: Settings | None = None) -> FastAPI:
    """Create and configure the FastAPI app instance.

    Settings default to the environment; a missing JWT secret or database URL
    aborts startup.
    """
    settings = settings or get_settings()
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    app = FastAPI(
        title="HR Portal API",
        description="Role-based HR administration: staff, projects, tasks and leave requests behind JWT auth.",
        version="1.0.0",
        openapi_tags=openapi_tags,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.database = Database(settings.database_url)
    app.state.token_service = TokenService(settings.jwt_secret_key, settings.jwt_algorithm)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allow_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    register_exception_handlers(app)

    @app.get(
        "/health",
        summary="Health check",
        description="Service health check endpoint.",
        tags=["Health"],
        operation_id="health_check",
    )
    def health_check():
        """Health check endpoint.

        Returns:
            JSON with a 'status' field.
        """
        return {"status": "ok"}

    app.include_router(auth.router)
    app.include_router(staff.router)
    app.include_router(projects.router)
    app.include_router(tasks.router)
    app.include_router(leave.router)
    app.include_router(roles.router)
    return app
