"""RecordStore — the record store adapter over the relational database.

The store is the single dependency injected into every service.  It owns
the SQLAlchemy engine and exposes row-level operations keyed by
:class:`~payrollctl.domain.types.EntityType`:

- reads: :meth:`find_by_id`, :meth:`find_first_where`, :meth:`list_all`
  (these satisfy the validation engine's ``RecordReader`` protocol);
- writes: :meth:`insert`, :meth:`update`, :meth:`delete`.

Rows are returned as plain dicts.  Database errors are not caught here.
"""

from __future__ import annotations

import logging
import uuid
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any

from sqlalchemy import delete, insert, select, update

from payrollctl.infrastructure.database.engine import init_database
from payrollctl.infrastructure.database.schema import table_for

if TYPE_CHECKING:
    from sqlalchemy.engine import Engine

    from payrollctl.config.settings import PayrollSettings
    from payrollctl.domain.types import EntityType

logger = logging.getLogger(__name__)


def now_iso() -> str:
    """Current UTC time as standard ISO 8601."""
    return datetime.now(UTC).isoformat()


class RecordStore:
    """Row-level access to the payroll tables.

    Wraps a ready engine; :meth:`open` builds one from settings and makes
    sure the tables exist.
    """

    def __init__(self, engine: Engine) -> None:
        self._engine = engine

    @classmethod
    def open(cls, settings: PayrollSettings) -> RecordStore:
        return cls(init_database(settings))

    @property
    def db_url(self) -> str:
        return self._engine.url.render_as_string(hide_password=False)

    @property
    def engine(self) -> Engine:
        return self._engine

    def close(self) -> None:
        """Dispose the engine's connection pool."""
        self._engine.dispose()

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def find_by_id(self, entity_type: EntityType, record_id: Any) -> dict[str, Any] | None:
        """Fetch one row by primary key."""
        return self.find_first_where(entity_type, "id", record_id)

    def find_first_where(
        self, entity_type: EntityType, field: str, value: Any
    ) -> dict[str, Any] | None:
        """Fetch the first row whose *field* equals *value*."""
        table = table_for(entity_type)
        stmt = select(table).where(table.c[field] == value).limit(1)
        with self._engine.connect() as conn:
            row = conn.execute(stmt).mappings().first()
        return dict(row) if row is not None else None

    def list_all(self, entity_type: EntityType) -> list[dict[str, Any]]:
        """Fetch every row, oldest first."""
        table = table_for(entity_type)
        stmt = select(table).order_by(table.c.create_date, table.c.id)
        with self._engine.connect() as conn:
            rows = conn.execute(stmt).mappings().all()
        return [dict(row) for row in rows]

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def insert(self, entity_type: EntityType, values: dict[str, Any]) -> str:
        """Insert a row with a fresh uuid4 id and timestamps; return the id."""
        record_id = str(uuid.uuid4())
        now = now_iso()
        table = table_for(entity_type)
        with self._engine.begin() as conn:
            conn.execute(
                insert(table).values(
                    {**values, "id": record_id, "create_date": now, "update_date": now}
                )
            )
        logger.debug("Inserted %s row %s", entity_type, record_id)
        return record_id

    def update(self, entity_type: EntityType, record_id: str, values: dict[str, Any]) -> int:
        """Apply *values* to one row; return the number of rows affected."""
        table = table_for(entity_type)
        stmt = (
            update(table)
            .where(table.c.id == record_id)
            .values({**values, "update_date": now_iso()})
        )
        with self._engine.begin() as conn:
            return conn.execute(stmt).rowcount

    def delete(self, entity_type: EntityType, record_id: str) -> int:
        """Delete one row; return the number of rows affected."""
        table = table_for(entity_type)
        with self._engine.begin() as conn:
            return conn.execute(delete(table).where(table.c.id == record_id)).rowcount
