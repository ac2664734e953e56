"""Relational database engine, schema, and migrations via SQLAlchemy Core."""

from payrollctl.infrastructure.database.engine import (
    create_db_engine,
    init_database,
    resolve_db_url,
)
from payrollctl.infrastructure.database.schema import (
    TABLES,
    employees,
    insurance_companies,
    insurance_policies,
    metadata,
    positions,
    projects,
    subcontracts,
    table_for,
    users,
    weekly_payroll_histories,
)

__all__ = [
    "TABLES",
    "create_db_engine",
    "employees",
    "init_database",
    "insurance_companies",
    "insurance_policies",
    "metadata",
    "positions",
    "projects",
    "resolve_db_url",
    "subcontracts",
    "table_for",
    "users",
    "weekly_payroll_histories",
]
