"""Write transforms — shape an accepted payload into the stored row.

Runs after validation and before the row is written:

- users: credentials are replaced by ``password_hash`` (only when a new
  password was supplied; an update without one keeps the stored hash);
- weekly payroll histories: the employee's position name and rates are
  copied onto the entry so historical slips survive later rate changes.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from payrollctl.domain.types import EntityType
from payrollctl.services.security import hash_password

if TYPE_CHECKING:
    from payrollctl.config.models import SecurityConfig
    from payrollctl.domain.rules import RecordReader

UNKNOWN_POSITION = "Unknown"


def transform_user(payload: dict[str, Any], *, security: SecurityConfig | None) -> dict[str, Any]:
    row = {k: v for k, v in payload.items() if k not in ("password", "password_confirmation")}
    password = payload.get("password")
    if password:
        row["password_hash"] = hash_password(password, security)
    return row


def transform_weekly_payroll_history(
    payload: dict[str, Any], *, store: RecordReader
) -> dict[str, Any]:
    employee = store.find_by_id(EntityType.EMPLOYEES, payload.get("employee_id"))
    position = (
        store.find_by_id(EntityType.POSITIONS, employee["position_id"])
        if employee is not None
        else None
    )
    return {
        **payload,
        "employee_position": position["name"] if position is not None else UNKNOWN_POSITION,
        "employee_hourly_rate": employee["hourly_rate"] if employee is not None else 0,
        "employee_overtime_rate": employee["overtime_rate"] if employee is not None else 0,
    }


def apply_transform(
    entity_type: EntityType,
    payload: dict[str, Any],
    *,
    store: RecordReader,
    security: SecurityConfig | None = None,
) -> dict[str, Any]:
    """Return the row to persist for an accepted *payload*."""
    if entity_type == EntityType.USERS:
        return transform_user(payload, security=security)
    if entity_type == EntityType.WEEKLY_PAYROLL_HISTORIES:
        return transform_weekly_payroll_history(payload, store=store)
    return dict(payload)
