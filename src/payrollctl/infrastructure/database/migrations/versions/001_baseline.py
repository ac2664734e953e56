"""Baseline schema — the eight payroll tables.

Revision ID: 001_baseline
Revises: None
Create Date: 2026-10-19

Fresh databases created by ``payrollctl init`` are stamped at this
revision without running it; databases created before version tracking
get it applied (or stamped, when the tables exist) by ``payrollctl upgrade``.
"""

from __future__ import annotations

import sqlalchemy as sa
from alembic import op

revision: str = "001_baseline"
down_revision: str | None = None
branch_labels: tuple[str, ...] | None = None
depends_on: tuple[str, ...] | None = None

_PAYROLL_NUMBER_FIELDS = (
    *(f"hours_day_{day}" for day in range(1, 8)),
    "slip_regular_hours",
    "slip_overtime_hours",
    *(f"slip_addition_{n}" for n in range(1, 4)),
    *(f"slip_deduction_{n}" for n in range(1, 7)),
)


def _base_columns() -> list[sa.Column]:
    return [
        sa.Column("id", sa.Text, primary_key=True),
        sa.Column("create_date", sa.Text, nullable=False),
        sa.Column("update_date", sa.Text, nullable=False),
    ]


def upgrade() -> None:
    op.create_table(
        "projects",
        *_base_columns(),
        sa.Column("code", sa.Text, nullable=False),
        sa.Column("name", sa.Text, nullable=False),
        sa.Column("acronym", sa.Text, nullable=False),
        sa.Column("accumulation_amount", sa.REAL, nullable=False),
        sa.Column("address", sa.Text, nullable=False),
        sa.Column("end_date", sa.Text, nullable=False),
        sa.Column("project_group", sa.Text, nullable=False),
        sa.Column("start_date", sa.Text, nullable=False),
    )

    op.create_table(
        "positions",
        *_base_columns(),
        sa.Column("code", sa.Text, nullable=False),
        sa.Column("name", sa.Text, nullable=False),
        sa.Column("minimum_pay", sa.REAL, nullable=False),
        sa.Column("maximum_pay", sa.REAL, nullable=False),
    )

    op.create_table(
        "subcontracts",
        *_base_columns(),
        sa.Column("code", sa.Text, nullable=False),
        sa.Column("name", sa.Text, nullable=False),
        sa.Column("down_payment1", sa.REAL),
        sa.Column("down_payment2", sa.REAL),
        sa.Column("down_payment3", sa.REAL),
    )

    op.create_table(
        "employees",
        *_base_columns(),
        sa.Column("code", sa.Text, nullable=False),
        sa.Column("name", sa.Text, nullable=False),
        sa.Column("address", sa.Text, nullable=False),
        sa.Column("phone", sa.Text, nullable=False),
        sa.Column("date_of_birth", sa.Text, nullable=False),
        sa.Column("sex", sa.Text, nullable=False),
        sa.Column("marital_status", sa.Text, nullable=False),
        sa.Column("referee", sa.Text, nullable=False),
        sa.Column("emergency_name", sa.Text, nullable=False),
        sa.Column("emergency_address", sa.Text, nullable=False),
        sa.Column("emergency_phone", sa.Text, nullable=False),
        sa.Column("hired_date", sa.Text, nullable=False),
        sa.Column("skill", sa.Text, nullable=False),
        sa.Column("hourly_rate", sa.REAL, nullable=False),
        sa.Column("overtime_rate", sa.REAL, nullable=False),
        sa.Column("project_id", sa.Text, sa.ForeignKey("projects.id"), nullable=False),
        sa.Column("position_id", sa.Text, sa.ForeignKey("positions.id"), nullable=False),
        sa.Column("subcontract_id", sa.Text, sa.ForeignKey("subcontracts.id")),
    )
    op.create_index("ix_employees_project_id", "employees", ["project_id"])
    op.create_index("ix_employees_position_id", "employees", ["position_id"])

    op.create_table(
        "insurance_companies",
        *_base_columns(),
        sa.Column("code", sa.Text, nullable=False),
        sa.Column("name", sa.Text, nullable=False),
    )

    op.create_table(
        "insurance_policies",
        *_base_columns(),
        sa.Column("code", sa.Text, nullable=False),
        sa.Column("project_id", sa.Text, sa.ForeignKey("projects.id"), nullable=False),
        sa.Column(
            "insurance_company_id",
            sa.Text,
            sa.ForeignKey("insurance_companies.id"),
            nullable=False,
        ),
        sa.Column("start_date", sa.Text, nullable=False),
        sa.Column("end_date", sa.Text, nullable=False),
        sa.Column("details", sa.Text, nullable=False),
    )
    op.create_index("ix_insurance_policies_project_id", "insurance_policies", ["project_id"])

    op.create_table(
        "users",
        *_base_columns(),
        sa.Column("name", sa.Text, nullable=False),
        sa.Column("email", sa.Text, nullable=False, unique=True),
        sa.Column("password_hash", sa.Text, nullable=False),
        sa.Column("role", sa.Text, nullable=False),
    )

    op.create_table(
        "weekly_payroll_histories",
        *_base_columns(),
        sa.Column("week_start_date", sa.Text, nullable=False),
        sa.Column("project_id", sa.Text, sa.ForeignKey("projects.id")),
        sa.Column("employee_id", sa.Text, sa.ForeignKey("employees.id"), nullable=False),
        sa.Column("employee_position", sa.Text, nullable=False),
        sa.Column("employee_hourly_rate", sa.REAL, nullable=False),
        sa.Column("employee_overtime_rate", sa.REAL, nullable=False),
        *(sa.Column(name, sa.REAL, nullable=False) for name in _PAYROLL_NUMBER_FIELDS),
    )
    op.create_index(
        "ix_weekly_payroll_histories_employee_id",
        "weekly_payroll_histories",
        ["employee_id"],
    )


def downgrade() -> None:
    op.drop_table("weekly_payroll_histories")
    op.drop_table("users")
    op.drop_table("insurance_policies")
    op.drop_table("insurance_companies")
    op.drop_table("employees")
    op.drop_table("subcontracts")
    op.drop_table("positions")
    op.drop_table("projects")
