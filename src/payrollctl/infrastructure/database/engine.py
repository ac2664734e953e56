"""Database engine setup.

SQLAlchemy Core (not ORM) is used: the CLI is a short-lived process and
every record is a plain mapping validated before it is written.  The
default database is SQLite at ``{root}/.payrollctl/payroll.db``; any
SQLAlchemy URL can be configured under ``[database] url``.
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Any

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine

from payrollctl.config.settings import DATA_DIRNAME
from payrollctl.infrastructure.database.schema import metadata

if TYPE_CHECKING:
    from payrollctl.config.settings import PayrollSettings

DB_FILENAME = "payroll.db"


def default_db_path(root: Path) -> Path:
    return root / DATA_DIRNAME / DB_FILENAME


def resolve_db_url(settings: PayrollSettings) -> str:
    """Configured URL, or the SQLite file under the project root."""
    if settings.database.url:
        return settings.database.url
    return f"sqlite:///{default_db_path(settings.root)}"


def create_db_engine(url: str, *, echo: bool = False, **engine_kwargs: Any) -> Engine:
    """Create an engine; SQLite connections get foreign keys enabled."""
    engine = create_engine(url, echo=echo, **engine_kwargs)

    if engine.dialect.name == "sqlite":

        @event.listens_for(engine, "connect")
        def _set_sqlite_pragma(dbapi_conn: Any, _: Any) -> None:
            cursor = dbapi_conn.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()

    return engine


def init_database(settings: PayrollSettings) -> Engine:
    """Create all tables for *settings* and return the engine.

    Creates the ``.payrollctl/`` directory when the default SQLite
    location is used.  Idempotent — safe to call on an existing database.
    """
    if not settings.database.url:
        default_db_path(settings.root).parent.mkdir(parents=True, exist_ok=True)

    engine = create_db_engine(resolve_db_url(settings), echo=settings.database.echo)
    metadata.create_all(engine)
    return engine
