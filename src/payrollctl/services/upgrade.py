"""UpgradeService — database migration with Alembic.

Pipeline: BACKUP → MIGRATE → REPORT
"""

from __future__ import annotations

import logging
import shutil
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

from alembic import command
from alembic.runtime.migration import MigrationContext
from alembic.script import ScriptDirectory
from sqlalchemy import inspect

from payrollctl.domain.types import EntityType
from payrollctl.infrastructure.database.migrations import build_config
from payrollctl.services.base import BaseService
from payrollctl.services.result import ServiceResult

logger = logging.getLogger(__name__)


class UpgradeService(BaseService):
    """Handles database schema migrations via Alembic."""

    def _tables_exist(self) -> bool:
        """Check if core tables exist (pre-Alembic database detection)."""
        return EntityType.USERS.value in inspect(self._store.engine).get_table_names()

    def _backup_db(self) -> Path | None:
        """Copy a SQLite database file aside; None for server databases."""
        engine = self._store.engine
        if engine.dialect.name != "sqlite" or not engine.url.database:
            return None
        db_path = Path(engine.url.database)
        backup_dir = db_path.parent / "backups"
        backup_dir.mkdir(parents=True, exist_ok=True)
        stamp = datetime.now(UTC).strftime("%Y%m%dT%H%M%S")
        backup_path = backup_dir / f"{db_path.stem}-{stamp}{db_path.suffix}"
        shutil.copy2(db_path, backup_path)
        return backup_path

    def check_pending(self) -> ServiceResult:
        """List pending migrations without applying."""
        op = "upgrade"

        try:
            cfg = build_config(self._store.db_url)
            script = ScriptDirectory.from_config(cfg)
            head = script.get_current_head()

            with self._store.engine.connect() as conn:
                ctx = MigrationContext.configure(conn)
                current = ctx.get_current_revision()

            # Walk from head down to current
            pending: list[dict[str, Any]] = []
            if current != head and head is not None:
                rev_obj = script.get_revision(head)
                while rev_obj is not None and rev_obj.revision != current:
                    pending.append(
                        {
                            "revision": rev_obj.revision,
                            "description": rev_obj.doc or "",
                        }
                    )
                    down = rev_obj.down_revision
                    if down is None:
                        break
                    rev_obj = script.get_revision(str(down))

            return ServiceResult(
                ok=True,
                op=op,
                data={
                    "pending_count": len(pending),
                    "pending": pending,
                    "current": current,
                    "head": head,
                },
            )
        except Exception as exc:
            logger.debug("Migration check failed", exc_info=True)
            return ServiceResult.failure(op, "CHECK_FAILED", f"Failed to check migrations: {exc}")

    def apply(self) -> ServiceResult:
        """BACKUP → MIGRATE → REPORT pipeline."""
        op = "upgrade"
        warnings: list[str] = []

        check_result = self.check_pending()
        if not check_result.ok:
            return check_result

        pending_count = check_result.data["pending_count"]
        if pending_count == 0:
            return ServiceResult(
                ok=True,
                op=op,
                data={
                    "applied_count": 0,
                    "current": check_result.data["head"],
                    "message": "Database is already up to date",
                },
            )

        # BACKUP
        try:
            backup_path = self._backup_db()
        except OSError as exc:
            return ServiceResult.failure(op, "BACKUP_FAILED", f"Backup failed: {exc}")
        if backup_path is None:
            warnings.append("No backup taken: only SQLite databases are backed up")

        # MIGRATE (or STAMP when the tables predate version tracking)
        try:
            cfg = build_config(self._store.db_url)
            current = check_result.data.get("current")
            if current is None and self._tables_exist():
                command.stamp(cfg, "head")
            else:
                command.upgrade(cfg, "head")
        except Exception as exc:
            return ServiceResult.failure(
                op,
                "MIGRATION_FAILED",
                f"Migration failed: {exc}. Backup at: {backup_path}",
                backup_path=str(backup_path) if backup_path else None,
            )

        data: dict[str, Any] = {
            "applied_count": pending_count,
            "current": check_result.data["head"],
        }
        if backup_path is not None:
            data["backup_path"] = str(backup_path)
        return ServiceResult(ok=True, op=op, data=data, warnings=warnings)
