from __future__ import annotations

from collections.abc import Generator
from typing import Any, TypeVar

from fastapi import Request
from sqlalchemy import create_engine, event, select
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.exc import NoResultFound
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from hrportal.core.errors import NotFound
from hrportal.models.base import Base

ModelT = TypeVar("ModelT", bound=Base)


def _enable_sqlite_foreign_keys(dbapi_connection: Any, _connection_record: Any) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


class Database:
    """Owns the SQLAlchemy engine and session factory for one application instance."""

    def __init__(self, url: str) -> None:
        parsed = make_url(url)
        if parsed.get_backend_name() == "sqlite":
            options: dict[str, Any] = {"connect_args": {"check_same_thread": False}}
            if parsed.database in (None, "", ":memory:"):
                # In-memory SQLite only exists inside one connection; share it across threads.
                options["poolclass"] = StaticPool
            self.engine: Engine = create_engine(url, **options)
            event.listen(self.engine, "connect", _enable_sqlite_foreign_keys)
        else:
            self.engine = create_engine(url, pool_pre_ping=True)

        self.session_factory = sessionmaker(
            bind=self.engine,
            autocommit=False,
            autoflush=False,
            expire_on_commit=False,
        )

    def create_all(self) -> None:
        """Create tables that do not exist yet."""
        Base.metadata.create_all(self.engine)

    def session(self) -> Session:
        return self.session_factory()

    def dispose(self) -> None:
        self.engine.dispose()


# PUBLIC_INTERFACE
def get_db(request: Request) -> Generator[Session, None, None]:
    """FastAPI dependency that yields a SQLAlchemy Session and closes it after use."""
    database: Database = request.app.state.database
    db = database.session()
    try:
        yield db
    finally:
        db.close()


# PUBLIC_INTERFACE
def get_or_404(db: Session, model: type[ModelT], ident: Any, detail: str) -> ModelT:
    """Load a row by primary key, mapping a missing row to NotFound."""
    try:
        return db.execute(select(model).where(model.id == ident)).scalar_one()
    except NoResultFound as exc:
        raise NotFound(detail) from exc
