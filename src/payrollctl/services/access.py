"""Role gate — which roles may read or write each entity type.

Reads are open to level1 and level2; writes to level1 only.  Weekly
payroll histories are readable by every role and writable by level1
and level2, since timesheet entry is delegated.
"""

from __future__ import annotations

from enum import StrEnum
from typing import TYPE_CHECKING

from payrollctl.domain.types import EntityType, Role

if TYPE_CHECKING:
    from payrollctl.domain.types import Actor


class Action(StrEnum):
    READ = "read"
    WRITE = "write"


_DEFAULT_ROLES: dict[Action, frozenset[Role]] = {
    Action.READ: frozenset({Role.LEVEL_1, Role.LEVEL_2}),
    Action.WRITE: frozenset({Role.LEVEL_1}),
}

_OVERRIDES: dict[tuple[EntityType, Action], frozenset[Role]] = {
    (EntityType.WEEKLY_PAYROLL_HISTORIES, Action.READ): frozenset(Role),
    (EntityType.WEEKLY_PAYROLL_HISTORIES, Action.WRITE): frozenset({Role.LEVEL_1, Role.LEVEL_2}),
}


def allowed_roles(entity_type: EntityType, action: Action) -> frozenset[Role]:
    return _OVERRIDES.get((entity_type, action), _DEFAULT_ROLES[action])


def is_permitted(actor: Actor | None, entity_type: EntityType, action: Action) -> bool:
    """True when *actor* holds a role allowed to perform *action*."""
    if actor is None:
        return False
    return actor.role in allowed_roles(entity_type, action)
