"""Field rules — the declarative constraint vocabulary for one attribute.

A :class:`FieldRule` is pure configuration: it is built once when the
entity schemas are assembled and never mutated afterwards.  Two choices
on a rule are mutually exclusive and modelled as tagged variants:

- requiredness: :class:`Always` (a fixed flag) or :class:`Conditional`
  (a predicate over the request context);
- type check: :class:`Primitive` (a :class:`ValueKind`) or :class:`Shape`
  (an ``isinstance`` class check).

Use :func:`field_rule` to build rules; it enforces the exclusivity at
construction time.
"""

from __future__ import annotations

import re
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from datetime import UTC, date, datetime
from enum import StrEnum
from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from payrollctl.domain.types import Actor, EntityType

# ---------------------------------------------------------------------------
# Shared vocabulary
# ---------------------------------------------------------------------------

EMAIL_PATTERN = re.compile(
    r"^(([^<>()\[\]\\.,;:\s@\"]+(\.[^<>()\[\]\\.,;:\s@\"]+)*)|(\".+\"))@"
    r"((\[[0-9]{1,3}\.[0-9]{1,3}\.[0-9]{1,3}\.[0-9]{1,3}\])|(([a-zA-Z\-0-9]+\.)+[a-zA-Z]{2,}))$"
)
PHONE_PATTERN = re.compile(r"^\+?[0-9\s]+$")
# Extended calendar form only; basic (20260105) and week dates are rejected.
ISO_DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}(?:[T ]\d{2}:\d{2}|$)")

MAX_STRING_LENGTH = 255
MAX_TEXT_LENGTH = 10000
PASSWORD_MIN_LENGTH = 8
PASSWORD_MAX_LENGTH = 100


class RecordReader(Protocol):
    """Read side of the record store, as seen by the validation engine."""

    def find_by_id(self, entity_type: EntityType, record_id: str) -> dict[str, Any] | None: ...

    def find_first_where(
        self, entity_type: EntityType, field: str, value: Any
    ) -> dict[str, Any] | None: ...


# ---------------------------------------------------------------------------
# Requiredness variant
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class RequirednessContext:
    """Inputs available to a conditional-requiredness predicate."""

    is_new: bool
    payload: Mapping[str, Any]
    actor: Actor | None


@dataclass(frozen=True)
class Always:
    required: bool

    def resolve(self, _ctx: RequirednessContext) -> bool:
        return self.required


@dataclass(frozen=True)
class Conditional:
    predicate: Callable[[RequirednessContext], bool]

    def resolve(self, ctx: RequirednessContext) -> bool:
        return bool(self.predicate(ctx))


Requiredness = Always | Conditional


def only_when_new(ctx: RequirednessContext) -> bool:
    """Predicate: required on creation, optional on update."""
    return ctx.is_new


# ---------------------------------------------------------------------------
# Type-check variant
# ---------------------------------------------------------------------------


class ValueKind(StrEnum):
    """Runtime kinds a JSON payload value can take."""

    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"
    OBJECT = "object"


@dataclass(frozen=True)
class Primitive:
    kind: ValueKind

    def matches(self, value: Any) -> bool:
        if self.kind is ValueKind.STRING:
            return isinstance(value, str)
        if self.kind is ValueKind.NUMBER:
            # bool is an int subclass; JSON true is not a number
            return isinstance(value, int | float) and not isinstance(value, bool)
        if self.kind is ValueKind.BOOLEAN:
            return isinstance(value, bool)
        return isinstance(value, dict | list)


@dataclass(frozen=True)
class Shape:
    cls: type

    def matches(self, value: Any) -> bool:
        return isinstance(value, self.cls)


TypeCheck = Primitive | Shape


# ---------------------------------------------------------------------------
# Custom checks
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class CheckContext:
    """Everything a custom check may look at.

    ``payload`` is a read-only view of the candidate payload.  ``report``
    appends an error for ``attribute``; it may be called any number of times.
    """

    attribute: str
    value: Any
    payload: Mapping[str, Any]
    stored_record: Mapping[str, Any] | None
    store: RecordReader
    report: Callable[[str], None]


CustomCheck = Callable[[CheckContext], None]


# ---------------------------------------------------------------------------
# FieldRule
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class FieldRule:
    """Declarative constraint set for one attribute of an entity type."""

    requiredness: Requiredness
    type_check: TypeCheck
    allowed_values: frozenset[Any] | None = None
    pattern: re.Pattern[str] | None = None
    pattern_message: str | None = None
    min_length: int | None = None
    max_length: int | None = None
    equal_to: str | None = None
    unique: bool = False
    preserve_whitespace: bool = False
    custom_check: CustomCheck | None = None


def field_rule(
    kind: ValueKind | type,
    *,
    required: bool | None = None,
    required_if: Callable[[RequirednessContext], bool] | None = None,
    allowed_values: type[StrEnum] | frozenset[Any] | None = None,
    pattern: re.Pattern[str] | None = None,
    pattern_message: str | None = None,
    min_length: int | None = None,
    max_length: int | None = None,
    equal_to: str | None = None,
    unique: bool = False,
    preserve_whitespace: bool = False,
    custom_check: CustomCheck | None = None,
) -> FieldRule:
    """Build a :class:`FieldRule`.

    *kind* is either a :class:`ValueKind` or a class for ``isinstance``
    checks.  Exactly one of *required* / *required_if* must be given.
    *allowed_values* may be a ``StrEnum`` class, in which case its member
    values are used.

    Raises:
        ValueError: If both or neither of *required* / *required_if* are
            given, or *pattern_message* is given without *pattern*.
    """
    if (required is None) == (required_if is None):
        msg = "Exactly one of 'required' or 'required_if' must be set"
        raise ValueError(msg)
    if pattern_message is not None and pattern is None:
        msg = "'pattern_message' requires 'pattern'"
        raise ValueError(msg)

    requiredness: Requiredness = (
        Always(required) if required is not None else Conditional(required_if)  # type: ignore[arg-type]
    )
    type_check: TypeCheck = kind_check(kind)

    values: frozenset[Any] | None = None
    if isinstance(allowed_values, type):
        values = frozenset(member.value for member in allowed_values)
    elif allowed_values is not None:
        values = frozenset(allowed_values)

    return FieldRule(
        requiredness=requiredness,
        type_check=type_check,
        allowed_values=values,
        pattern=pattern,
        pattern_message=pattern_message,
        min_length=min_length,
        max_length=max_length,
        equal_to=equal_to,
        unique=unique,
        preserve_whitespace=preserve_whitespace,
        custom_check=custom_check,
    )


def kind_check(kind: ValueKind | type) -> TypeCheck:
    if isinstance(kind, ValueKind):
        return Primitive(kind)
    if isinstance(kind, type):
        return Shape(kind)
    msg = f"Expected a ValueKind or a class, got {kind!r}"
    raise TypeError(msg)


# ---------------------------------------------------------------------------
# Reusable custom checks
# ---------------------------------------------------------------------------


def is_number(value: Any) -> bool:
    return isinstance(value, int | float) and not isinstance(value, bool)


def parse_date(value: Any) -> datetime | None:
    """Parse ``YYYY-MM-DD`` or an ISO 8601 datetime; None when unparseable.

    Datetimes take a ``T`` or space separator and an optional ``Z`` or
    ``+HH:MM`` offset.  Naive values are treated as UTC.
    """
    if not isinstance(value, str) or not ISO_DATE_PATTERN.match(value):
        return None
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        try:
            parsed = datetime.combine(date.fromisoformat(value), datetime.min.time())
        except ValueError:
            return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed


def references(entity_type: EntityType) -> CustomCheck:
    """Check that the value is the id of an existing *entity_type* row."""

    def _check(ctx: CheckContext) -> None:
        if ctx.store.find_by_id(entity_type, ctx.value) is None:
            ctx.report("is invalid")

    return _check


def valid_date(ctx: CheckContext) -> None:
    if parse_date(ctx.value) is None:
        ctx.report("is invalid")


def past_date(ctx: CheckContext) -> None:
    """The value parses as a date that is not in the future."""
    parsed = parse_date(ctx.value)
    if parsed is None:
        ctx.report("is invalid")
        return
    if parsed > datetime.now(UTC):
        ctx.report("can't be in the future")


def non_negative(message: str) -> CustomCheck:
    def _check(ctx: CheckContext) -> None:
        if is_number(ctx.value) and ctx.value < 0:
            ctx.report(message)

    return _check
