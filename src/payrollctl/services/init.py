"""InitService — create a fresh payroll database."""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import inspect

from payrollctl.infrastructure.database.engine import init_database, resolve_db_url
from payrollctl.infrastructure.database.migrations import stamp_head
from payrollctl.services.result import ServiceResult

if TYPE_CHECKING:
    from payrollctl.config.settings import PayrollSettings


class InitService:
    """Creates tables and stamps the migration head.

    Static: there is no store to inject before the database exists.
    """

    @staticmethod
    def init_database(settings: PayrollSettings) -> ServiceResult:
        op = "init"
        db_url = resolve_db_url(settings)
        try:
            engine = init_database(settings)
            try:
                tables = sorted(inspect(engine).get_table_names())
            finally:
                engine.dispose()
            stamp_head(db_url)
        except Exception as exc:
            return ServiceResult.failure(
                op, "INIT_FAILED", f"Could not initialize database: {exc}", url=db_url
            )
        return ServiceResult(ok=True, op=op, data={"database": db_url, "tables": tables})
