"""Resolve the acting user for a command."""

from __future__ import annotations

from typing import TYPE_CHECKING

from payrollctl.domain.types import Actor, EntityType

if TYPE_CHECKING:
    from payrollctl.domain.rules import RecordReader


def find_actor(store: RecordReader, email: str) -> Actor | None:
    """Look up the user with *email*; the match is exact after trimming."""
    row = store.find_first_where(EntityType.USERS, "email", email.strip())
    if row is None:
        return None
    return Actor(id=row["id"], name=row["name"], email=row["email"], role=row["role"])
