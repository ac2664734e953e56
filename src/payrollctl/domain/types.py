"""Entity types, classification enums, and the request actor.

``EntityType`` values double as table names so the registry, the store,
and the CLI all agree on one identifier per record kind.
"""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel


class EntityType(StrEnum):
    """The eight record kinds managed by payrollctl."""

    EMPLOYEES = "employees"
    INSURANCE_COMPANIES = "insurance_companies"
    INSURANCE_POLICIES = "insurance_policies"
    POSITIONS = "positions"
    PROJECTS = "projects"
    SUBCONTRACTS = "subcontracts"
    USERS = "users"
    WEEKLY_PAYROLL_HISTORIES = "weekly_payroll_histories"

    @property
    def singular(self) -> str:
        """Envelope key for one record (``insurance_policies`` -> ``insurance_policy``)."""
        return singularise(self.value)


class Sex(StrEnum):
    M = "m"
    F = "f"
    O = "o"  # noqa: E741


class MaritalStatus(StrEnum):
    SINGLE = "single"
    DE_FACTO = "de_facto"
    MARRIED = "married"
    DIVORCED = "divorced"
    WIDOWED = "widowed"
    OTHER = "other"


class Role(StrEnum):
    """Access levels. ``level1`` administers, ``level2`` reads and enters payroll."""

    LEVEL_1 = "level1"
    LEVEL_2 = "level2"
    LEVEL_3 = "level3"


class Actor(BaseModel):
    """Identity of the requester.

    Passed through the validation engine unexamined except by
    conditional-requiredness predicates.
    """

    model_config = {"frozen": True}

    id: str
    name: str
    email: str
    role: Role


def singularise(word: str) -> str:
    """Naive English singular for table names.

    Examples:
        >>> singularise("histories")
        'history'
        >>> singularise("users")
        'user'
    """
    if word.endswith("ies"):
        return f"{word[:-3]}y"
    if word.endswith("s"):
        return word[:-1]
    return word
