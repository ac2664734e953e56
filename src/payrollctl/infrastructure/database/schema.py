"""SQLAlchemy Core table definitions for the payroll database.

One table per entity type; table names are the ``EntityType`` values.
Ids are uuid4 strings assigned by the record store.  Dates are stored as
ISO text, money and hours as REAL.
"""

from __future__ import annotations

from sqlalchemy import REAL, Column, ForeignKey, Index, MetaData, Table, Text

from payrollctl.domain.schemas import PAYROLL_NUMBER_FIELDS
from payrollctl.domain.types import EntityType

metadata = MetaData()


def _timestamps() -> list[Column]:
    return [
        Column("create_date", Text, nullable=False),
        Column("update_date", Text, nullable=False),
    ]


projects = Table(
    EntityType.PROJECTS.value,
    metadata,
    Column("id", Text, primary_key=True),
    *_timestamps(),
    Column("code", Text, nullable=False),
    Column("name", Text, nullable=False),
    Column("acronym", Text, nullable=False),
    Column("accumulation_amount", REAL, nullable=False),
    Column("address", Text, nullable=False),
    Column("end_date", Text, nullable=False),
    Column("project_group", Text, nullable=False),
    Column("start_date", Text, nullable=False),
)

positions = Table(
    EntityType.POSITIONS.value,
    metadata,
    Column("id", Text, primary_key=True),
    *_timestamps(),
    Column("code", Text, nullable=False),
    Column("name", Text, nullable=False),
    Column("minimum_pay", REAL, nullable=False),
    Column("maximum_pay", REAL, nullable=False),
)

subcontracts = Table(
    EntityType.SUBCONTRACTS.value,
    metadata,
    Column("id", Text, primary_key=True),
    *_timestamps(),
    Column("code", Text, nullable=False),
    Column("name", Text, nullable=False),
    Column("down_payment1", REAL),
    Column("down_payment2", REAL),
    Column("down_payment3", REAL),
)

employees = Table(
    EntityType.EMPLOYEES.value,
    metadata,
    Column("id", Text, primary_key=True),
    *_timestamps(),
    Column("code", Text, nullable=False),
    Column("name", Text, nullable=False),
    Column("address", Text, nullable=False),
    Column("phone", Text, nullable=False),
    Column("date_of_birth", Text, nullable=False),
    Column("sex", Text, nullable=False),
    Column("marital_status", Text, nullable=False),
    Column("referee", Text, nullable=False),
    Column("emergency_name", Text, nullable=False),
    Column("emergency_address", Text, nullable=False),
    Column("emergency_phone", Text, nullable=False),
    Column("hired_date", Text, nullable=False),
    Column("skill", Text, nullable=False),
    Column("hourly_rate", REAL, nullable=False),
    Column("overtime_rate", REAL, nullable=False),
    Column("project_id", Text, ForeignKey("projects.id"), nullable=False),
    Column("position_id", Text, ForeignKey("positions.id"), nullable=False),
    Column("subcontract_id", Text, ForeignKey("subcontracts.id")),
)

insurance_companies = Table(
    EntityType.INSURANCE_COMPANIES.value,
    metadata,
    Column("id", Text, primary_key=True),
    *_timestamps(),
    Column("code", Text, nullable=False),
    Column("name", Text, nullable=False),
)

insurance_policies = Table(
    EntityType.INSURANCE_POLICIES.value,
    metadata,
    Column("id", Text, primary_key=True),
    *_timestamps(),
    Column("code", Text, nullable=False),
    Column("project_id", Text, ForeignKey("projects.id"), nullable=False),
    Column(
        "insurance_company_id", Text, ForeignKey("insurance_companies.id"), nullable=False
    ),
    Column("start_date", Text, nullable=False),
    Column("end_date", Text, nullable=False),
    Column("details", Text, nullable=False),
)

users = Table(
    EntityType.USERS.value,
    metadata,
    Column("id", Text, primary_key=True),
    *_timestamps(),
    Column("name", Text, nullable=False),
    Column("email", Text, nullable=False, unique=True),
    Column("password_hash", Text, nullable=False),
    Column("role", Text, nullable=False),
)

weekly_payroll_histories = Table(
    EntityType.WEEKLY_PAYROLL_HISTORIES.value,
    metadata,
    Column("id", Text, primary_key=True),
    *_timestamps(),
    Column("week_start_date", Text, nullable=False),
    Column("project_id", Text, ForeignKey("projects.id")),
    Column("employee_id", Text, ForeignKey("employees.id"), nullable=False),
    Column("employee_position", Text, nullable=False),
    Column("employee_hourly_rate", REAL, nullable=False),
    Column("employee_overtime_rate", REAL, nullable=False),
    *(Column(name, REAL, nullable=False) for name in PAYROLL_NUMBER_FIELDS),
)

# ---------------------------------------------------------------------------
# Indexes for foreign keys
# ---------------------------------------------------------------------------

Index("ix_employees_project_id", employees.c.project_id)
Index("ix_employees_position_id", employees.c.position_id)
Index("ix_insurance_policies_project_id", insurance_policies.c.project_id)
Index("ix_weekly_payroll_histories_employee_id", weekly_payroll_histories.c.employee_id)

TABLES: dict[EntityType, Table] = {
    EntityType(table.name): table for table in metadata.sorted_tables
}


def table_for(entity_type: EntityType) -> Table:
    """Return the table backing *entity_type*."""
    return TABLES[EntityType(entity_type)]
