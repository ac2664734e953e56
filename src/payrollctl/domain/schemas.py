"""Entity schemas — one ordered mapping of attribute -> FieldRule per entity type.

Each ``*_schema()`` builder returns plain data; no behaviour is overridden
per entity.  Declaration order is the order errors are reported in.
The registry is assembled once at import time and is read-only.
"""

from __future__ import annotations

from collections.abc import Mapping
from types import MappingProxyType

from payrollctl.domain.rules import (
    EMAIL_PATTERN,
    MAX_STRING_LENGTH,
    PASSWORD_MAX_LENGTH,
    PASSWORD_MIN_LENGTH,
    PHONE_PATTERN,
    CheckContext,
    FieldRule,
    ValueKind,
    field_rule,
    is_number,
    non_negative,
    only_when_new,
    parse_date,
    past_date,
    references,
    valid_date,
)
from payrollctl.domain.types import EntityType, MaritalStatus, Role, Sex

EntitySchema = Mapping[str, FieldRule]


class UnknownEntityTypeError(LookupError):
    """No schema is registered for the requested entity type."""


def _text(*, required: bool = True) -> FieldRule:
    return field_rule(ValueKind.STRING, required=required, max_length=MAX_STRING_LENGTH)


def _phone() -> FieldRule:
    return field_rule(ValueKind.STRING, required=True, pattern=PHONE_PATTERN)


# ---------------------------------------------------------------------------
# Cross-field checks
# ---------------------------------------------------------------------------


def _lower_bound(sibling: str, label: str) -> FieldRule:
    """Required number >= 0 that must not exceed *sibling*."""

    def _check(ctx: CheckContext) -> None:
        other = ctx.payload.get(sibling)
        if ctx.value < 0:
            ctx.report("must be higher than 0")
        elif is_number(other) and ctx.value > other:
            ctx.report(f"must be lower than {label}")

    return field_rule(ValueKind.NUMBER, required=True, custom_check=_check)


def _upper_bound(sibling: str, label: str) -> FieldRule:
    """Required number >= 0 that must not be below *sibling*."""

    def _check(ctx: CheckContext) -> None:
        other = ctx.payload.get(sibling)
        if ctx.value < 0:
            ctx.report("must be higher than 0")
        elif is_number(other) and ctx.value < other:
            ctx.report(f"must be higher than {label}")

    return field_rule(ValueKind.NUMBER, required=True, custom_check=_check)


def _position_pay_band(ctx: CheckContext) -> None:
    """position_id exists and its pay band covers both employee rates."""
    position = ctx.store.find_by_id(EntityType.POSITIONS, ctx.value)
    if position is None:
        ctx.report("is invalid")
        return

    hourly_rate = ctx.payload.get("hourly_rate")
    overtime_rate = ctx.payload.get("overtime_rate")
    if not (is_number(hourly_rate) and is_number(overtime_rate)):
        return

    minimum_pay = position["minimum_pay"]
    maximum_pay = position["maximum_pay"]
    for rate, label in ((hourly_rate, "hourly rate"), (overtime_rate, "overtime rate")):
        if maximum_pay < rate:
            ctx.report(f"has a lower maximum pay than the specified {label}")
        if minimum_pay > rate:
            ctx.report(f"has a higher minimum pay than the specified {label}")


def _starts_before(sibling: str) -> FieldRule:
    def _check(ctx: CheckContext) -> None:
        start = parse_date(ctx.value)
        if start is None:
            ctx.report("is invalid")
            return
        end = parse_date(ctx.payload.get(sibling))
        if end is not None and start > end:
            ctx.report("cannot be after the end date")

    return field_rule(ValueKind.STRING, required=True, custom_check=_check)


def _ends_after(sibling: str) -> FieldRule:
    def _check(ctx: CheckContext) -> None:
        end = parse_date(ctx.value)
        if end is None:
            ctx.report("is invalid")
            return
        start = parse_date(ctx.payload.get(sibling))
        if start is not None and end < start:
            ctx.report("cannot be before the start date")

    return field_rule(ValueKind.STRING, required=True, custom_check=_check)


# ---------------------------------------------------------------------------
# Schema builders
# ---------------------------------------------------------------------------


def employee_schema() -> dict[str, FieldRule]:
    return {
        "code": _text(),
        "name": _text(),
        "address": _text(),
        "phone": _phone(),
        "date_of_birth": field_rule(ValueKind.STRING, required=True, custom_check=past_date),
        "sex": field_rule(ValueKind.STRING, required=True, allowed_values=Sex),
        "marital_status": field_rule(
            ValueKind.STRING, required=True, allowed_values=MaritalStatus
        ),
        "referee": _text(),
        "emergency_name": _text(),
        "emergency_address": _text(),
        "emergency_phone": _phone(),
        "hired_date": field_rule(ValueKind.STRING, required=True, custom_check=past_date),
        "skill": _text(),
        "hourly_rate": _lower_bound("overtime_rate", "overtime rate"),
        "overtime_rate": _upper_bound("hourly_rate", "hourly rate"),
        "project_id": field_rule(
            ValueKind.STRING, required=True, custom_check=references(EntityType.PROJECTS)
        ),
        "position_id": field_rule(
            ValueKind.STRING, required=True, custom_check=_position_pay_band
        ),
        "subcontract_id": field_rule(
            ValueKind.STRING, required=False, custom_check=references(EntityType.SUBCONTRACTS)
        ),
    }


def project_schema() -> dict[str, FieldRule]:
    return {
        "code": _text(),
        "name": _text(),
        "acronym": _text(),
        "accumulation_amount": field_rule(ValueKind.NUMBER, required=True),
        "address": _text(),
        "end_date": field_rule(ValueKind.STRING, required=True, custom_check=valid_date),
        "project_group": _text(),
        "start_date": field_rule(ValueKind.STRING, required=True, custom_check=valid_date),
    }


def position_schema() -> dict[str, FieldRule]:
    return {
        "code": _text(),
        "name": _text(),
        "minimum_pay": _lower_bound("maximum_pay", "maximum pay"),
        "maximum_pay": _upper_bound("minimum_pay", "minimum pay"),
    }


def insurance_company_schema() -> dict[str, FieldRule]:
    return {
        "code": _text(),
        "name": _text(),
    }


def insurance_policy_schema() -> dict[str, FieldRule]:
    return {
        "code": _text(),
        "project_id": field_rule(
            ValueKind.STRING, required=True, custom_check=references(EntityType.PROJECTS)
        ),
        "insurance_company_id": field_rule(
            ValueKind.STRING,
            required=True,
            custom_check=references(EntityType.INSURANCE_COMPANIES),
        ),
        "start_date": _starts_before("end_date"),
        "end_date": _ends_after("start_date"),
        "details": _text(),
    }


def subcontract_schema() -> dict[str, FieldRule]:
    down_payment = non_negative("must be higher than 0")
    return {
        "code": _text(),
        "name": _text(),
        "down_payment1": field_rule(ValueKind.NUMBER, required=False, custom_check=down_payment),
        "down_payment2": field_rule(ValueKind.NUMBER, required=False, custom_check=down_payment),
        "down_payment3": field_rule(ValueKind.NUMBER, required=False, custom_check=down_payment),
    }


def user_schema() -> dict[str, FieldRule]:
    return {
        "name": _text(),
        "email": field_rule(
            ValueKind.STRING,
            required=True,
            max_length=MAX_STRING_LENGTH,
            pattern=EMAIL_PATTERN,
            unique=True,
        ),
        # Credentials keep their whitespace; only embedded newlines are stripped.
        "password": field_rule(
            ValueKind.STRING,
            required_if=only_when_new,
            min_length=PASSWORD_MIN_LENGTH,
            max_length=PASSWORD_MAX_LENGTH,
            preserve_whitespace=True,
        ),
        "password_confirmation": field_rule(
            ValueKind.STRING,
            required_if=only_when_new,
            equal_to="password",
            max_length=PASSWORD_MAX_LENGTH,
            preserve_whitespace=True,
        ),
        "role": field_rule(ValueKind.STRING, required=True, allowed_values=Role),
    }


PAYROLL_NUMBER_FIELDS: tuple[str, ...] = (
    *(f"hours_day_{day}" for day in range(1, 8)),
    "slip_regular_hours",
    "slip_overtime_hours",
    *(f"slip_addition_{n}" for n in range(1, 4)),
    *(f"slip_deduction_{n}" for n in range(1, 7)),
)


def weekly_payroll_history_schema() -> dict[str, FieldRule]:
    schema: dict[str, FieldRule] = {
        "week_start_date": field_rule(ValueKind.STRING, required=True, custom_check=valid_date),
        "employee_id": field_rule(
            ValueKind.STRING, required=True, custom_check=references(EntityType.EMPLOYEES)
        ),
        "project_id": field_rule(
            ValueKind.STRING, required=False, custom_check=references(EntityType.PROJECTS)
        ),
    }
    at_least_zero = non_negative("must be at least 0")
    for name in PAYROLL_NUMBER_FIELDS:
        schema[name] = field_rule(ValueKind.NUMBER, required=True, custom_check=at_least_zero)
    return schema


# ---------------------------------------------------------------------------
# Registry
# ---------------------------------------------------------------------------

_BUILDERS = {
    EntityType.EMPLOYEES: employee_schema,
    EntityType.INSURANCE_COMPANIES: insurance_company_schema,
    EntityType.INSURANCE_POLICIES: insurance_policy_schema,
    EntityType.POSITIONS: position_schema,
    EntityType.PROJECTS: project_schema,
    EntityType.SUBCONTRACTS: subcontract_schema,
    EntityType.USERS: user_schema,
    EntityType.WEEKLY_PAYROLL_HISTORIES: weekly_payroll_history_schema,
}

SCHEMA_REGISTRY: Mapping[EntityType, EntitySchema] = MappingProxyType(
    {entity: MappingProxyType(build()) for entity, build in _BUILDERS.items()}
)


def schema_for(entity_type: EntityType | str) -> EntitySchema:
    """Look up the schema for *entity_type*.

    Raises:
        UnknownEntityTypeError: If no schema is registered for it.
    """
    try:
        return SCHEMA_REGISTRY[EntityType(entity_type)]
    except (KeyError, ValueError):
        msg = f"No schema registered for entity type: {entity_type!r}"
        raise UnknownEntityTypeError(msg) from None
