"""Validation engine — admits or rejects a write payload for one entity type.

Given an entity type, a raw payload, and the request context, the engine:

1. treats a non-mapping payload as empty;
2. on update, fetches the stored record (``NotFound`` when absent);
3. drops every key the entity schema does not declare;
4. trims strings (or, for ``preserve_whitespace`` rules, strips newlines);
5. evaluates every declared attribute in schema order.

Per attribute, checks run in a fixed order and the first three
(``equal_to``, required, type) stop at the first failure.  Uniqueness,
enum/pattern, and length checks may each report.  The custom check runs
last whenever it is reached and may report any number of errors.

The engine never writes.  Store exceptions propagate to the caller.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import TYPE_CHECKING, Any

from payrollctl.domain.rules import CheckContext, RequirednessContext
from payrollctl.domain.schemas import schema_for

if TYPE_CHECKING:
    from payrollctl.domain.rules import FieldRule, RecordReader
    from payrollctl.domain.schemas import EntitySchema
    from payrollctl.domain.types import Actor, EntityType


# ---------------------------------------------------------------------------
# Outcomes
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class FieldError:
    """One validation failure for one attribute."""

    attribute: str
    message: str

    def to_dict(self) -> dict[str, str]:
        return {"attribute": self.attribute, "message": self.message}


@dataclass(frozen=True)
class Accepted:
    """The payload passed; ``payload`` is whitelisted, trimmed, and cleaned."""

    payload: dict[str, Any]


@dataclass(frozen=True)
class Rejected:
    """One or more attributes failed, in schema declaration order."""

    errors: tuple[FieldError, ...]

    def to_list(self) -> list[dict[str, str]]:
        return [error.to_dict() for error in self.errors]


@dataclass(frozen=True)
class NotFound:
    """The record targeted by an update does not exist."""

    record_id: str | None


ValidationOutcome = Accepted | Rejected | NotFound


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def is_blank(value: Any) -> bool:
    """None, absent, or the empty string."""
    return value is None or value == ""


def start_case(name: str) -> str:
    """``password_confirmation`` -> ``Password Confirmation``."""
    words = name.replace("-", " ").replace("_", " ").split()
    return " ".join(word[:1].upper() + word[1:] for word in words)


def _normalise(value: Any, rule: FieldRule) -> Any:
    if not isinstance(value, str):
        return value
    if rule.preserve_whitespace:
        return value.replace("\n", "")
    return value.strip()


def clean_payload(schema: EntitySchema, raw_payload: Any) -> dict[str, Any]:
    """Whitelist and normalise *raw_payload* against *schema* (copying it)."""
    if not isinstance(raw_payload, Mapping):
        return {}
    return {
        attribute: _normalise(value, schema[attribute])
        for attribute, value in raw_payload.items()
        if attribute in schema
    }


# ---------------------------------------------------------------------------
# Engine
# ---------------------------------------------------------------------------


class ValidationEngine:
    """Applies entity schemas to candidate payloads.

    The engine holds only a read handle on the record store and keeps no
    state between calls, so one instance can serve any number of requests.
    """

    def __init__(self, store: RecordReader) -> None:
        self._store = store

    def validate(
        self,
        entity_type: EntityType,
        *,
        is_new: bool,
        raw_payload: Any,
        actor: Actor | None = None,
        record_id: str | None = None,
    ) -> ValidationOutcome:
        """Validate *raw_payload* for a create (*is_new*) or an update.

        Raises:
            UnknownEntityTypeError: If *entity_type* has no schema.
        """
        schema = schema_for(entity_type)

        stored_record: dict[str, Any] | None = None
        if not is_new:
            stored_record = (
                self._store.find_by_id(entity_type, record_id) if record_id is not None else None
            )
            if stored_record is None:
                return NotFound(record_id)

        payload = clean_payload(schema, raw_payload)
        errors: list[FieldError] = []

        for attribute, rule in schema.items():
            self._check_attribute(
                entity_type,
                attribute,
                rule,
                payload=payload,
                stored_record=stored_record,
                is_new=is_new,
                actor=actor,
                errors=errors,
            )

        if errors:
            return Rejected(tuple(errors))
        return Accepted(payload)

    def _check_attribute(
        self,
        entity_type: EntityType,
        attribute: str,
        rule: FieldRule,
        *,
        payload: dict[str, Any],
        stored_record: dict[str, Any] | None,
        is_new: bool,
        actor: Actor | None,
        errors: list[FieldError],
    ) -> None:
        value = payload.get(attribute)

        def report(message: str) -> None:
            errors.append(FieldError(attribute, message))

        # a. equality with a sibling attribute
        if rule.equal_to is not None:
            other = payload.get(rule.equal_to)
            if (not is_blank(value) or not is_blank(other)) and value != other:
                report(f"does not match {start_case(rule.equal_to)}")
                return

        # b. requiredness
        required = rule.requiredness.resolve(
            RequirednessContext(is_new=is_new, payload=MappingProxyType(payload), actor=actor)
        )
        if required and is_blank(value):
            report("can't be blank")
            return

        # c. runtime kind; optional attributes of the wrong kind are dropped
        if not rule.type_check.matches(value):
            if required:
                report("is invalid")
            else:
                payload.pop(attribute, None)
            return

        # d. uniqueness
        if rule.unique and (is_new or stored_record is None or value != stored_record.get(attribute)):
            if self._store.find_first_where(entity_type, attribute, value) is not None:
                report("is already in use")

        # e. membership, else pattern
        if rule.allowed_values is not None and value not in rule.allowed_values:
            report("is invalid")
        elif rule.pattern is not None and not (
            isinstance(value, str) and rule.pattern.search(value)
        ):
            report(rule.pattern_message or "is invalid")

        # f. length
        if not is_blank(value) and isinstance(value, str):
            if rule.min_length is not None and len(value) < rule.min_length:
                report(f"can't be shorter than {rule.min_length} characters")
            elif rule.max_length is not None and len(value) > rule.max_length:
                report(f"can't be longer than {rule.max_length} characters")

        # g. custom
        if rule.custom_check is not None:
            rule.custom_check(
                CheckContext(
                    attribute=attribute,
                    value=value,
                    payload=MappingProxyType(payload),
                    stored_record=(
                        MappingProxyType(stored_record) if stored_record is not None else None
                    ),
                    store=self._store,
                    report=report,
                )
            )
