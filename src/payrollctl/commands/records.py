"""Commands: create, update, check, show, list, and delete records.

Every command takes the entity type (its table name) as the first
argument and acts as the ``--as`` user.  Write payloads are JSON, either
the bare record object or wrapped in the singular entity key::

    {"position": {"code": "POS-1", "name": "Fitter", "minimum_pay": 20, "maximum_pay": 50}}
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from typing import IO, TYPE_CHECKING, Any

import click

from payrollctl.commands._base import (
    PayrollCommand,
    entity_argument,
    payload_options,
    read_payload,
    record_id_argument,
)
from payrollctl.domain.types import EntityType

if TYPE_CHECKING:
    from payrollctl.commands._context import AppContext
    from payrollctl.services.records import RecordService

AS_ADMIN = "--as staff@swinpayroll.xyz"

PROJECT_EXAMPLE = {
    "code": "P-001",
    "name": "Tower B",
    "acronym": "TB",
    "accumulation_amount": 1000,
    "address": "1 Main St",
    "start_date": "2026-01-05",
    "end_date": "2027-12-31",
    "project_group": "Commercial",
}
POSITION_EXAMPLE = {"code": "POS-1", "name": "Fitter", "minimum_pay": 20, "maximum_pay": 60}
USER_EXAMPLE = {"name": "Sam", "email": "sam@example.com", "role": "level2"}


def _json_arg(payload: Mapping[str, Any]) -> str:
    return f"'{json.dumps(payload)}'"


def _service(app: AppContext) -> RecordService:
    from payrollctl.services.records import RecordService

    return RecordService(app.store, security=app.settings.security)


@click.command(
    cls=PayrollCommand,
    examples=[
        f"{AS_ADMIN} create projects --data {_json_arg(PROJECT_EXAMPLE)}",
        f"{AS_ADMIN} create employees --file employee.json",
        f"{AS_ADMIN} --json create insurance_policies --file - < policy.json",
    ],
)
@entity_argument
@payload_options
@click.pass_obj
def create(app: AppContext, entity: str, data: str | None, payload_file: IO[str] | None) -> None:
    """Validate and create a record."""
    body = read_payload(data, payload_file)
    actor = app.resolve_actor(f"create_{EntityType(entity).singular}")
    app.emit(_service(app).create(entity, body, actor=actor))


@click.command(
    cls=PayrollCommand,
    examples=[
        f"{AS_ADMIN} update positions 6f1c... --data {_json_arg(POSITION_EXAMPLE)}",
        f"{AS_ADMIN} update users 9a2e... --data {_json_arg(USER_EXAMPLE)}",
    ],
)
@entity_argument
@record_id_argument
@payload_options
@click.pass_obj
def update(
    app: AppContext,
    entity: str,
    record_id: str,
    data: str | None,
    payload_file: IO[str] | None,
) -> None:
    """Validate and apply changes to an existing record."""
    body = read_payload(data, payload_file)
    actor = app.resolve_actor(f"update_{EntityType(entity).singular}")
    app.emit(_service(app).update(entity, record_id, body, actor=actor))


@click.command(
    cls=PayrollCommand,
    examples=[
        f"{AS_ADMIN} check positions --data {_json_arg(POSITION_EXAMPLE)}",
        f"{AS_ADMIN} --json check users --id 9a2e... --data {_json_arg(USER_EXAMPLE)}",
    ],
)
@entity_argument
@click.option("--id", "record_id", default=None, help="Validate as an update of this record.")
@payload_options
@click.pass_obj
def check(
    app: AppContext,
    entity: str,
    record_id: str | None,
    data: str | None,
    payload_file: IO[str] | None,
) -> None:
    """Validate a payload without writing anything."""
    body = read_payload(data, payload_file)
    actor = app.resolve_actor(f"check_{EntityType(entity).singular}")
    app.emit(_service(app).check(entity, body, actor=actor, record_id=record_id))


@click.command(
    cls=PayrollCommand,
    examples=[
        f"{AS_ADMIN} show employees 3b7d...",
        f"{AS_ADMIN} --json show projects 1c0a...",
    ],
)
@entity_argument
@record_id_argument
@click.pass_obj
def show(app: AppContext, entity: str, record_id: str) -> None:
    """Show one record."""
    actor = app.resolve_actor(f"get_{EntityType(entity).singular}")
    app.emit(_service(app).get(entity, record_id, actor=actor))


@click.command(
    "list",
    cls=PayrollCommand,
    examples=[
        f"{AS_ADMIN} list employees",
        f"{AS_ADMIN} --json list weekly_payroll_histories",
    ],
)
@entity_argument
@click.pass_obj
def list_cmd(app: AppContext, entity: str) -> None:
    """List every record of an entity type."""
    actor = app.resolve_actor(f"list_{EntityType(entity).value}")
    app.emit(_service(app).list_all(entity, actor=actor))


@click.command(cls=PayrollCommand, examples=[f"{AS_ADMIN} delete subcontracts 8d4f..."])
@entity_argument
@record_id_argument
@click.pass_obj
def delete(app: AppContext, entity: str, record_id: str) -> None:
    """Delete a record."""
    actor = app.resolve_actor(f"delete_{EntityType(entity).singular}")
    app.emit(_service(app).delete(entity, record_id, actor=actor))
