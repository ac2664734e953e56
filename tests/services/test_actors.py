"""Tests for actor lookup."""

from __future__ import annotations

from payrollctl.domain.types import Actor, Role
from payrollctl.infrastructure.store import RecordStore
from payrollctl.services.actors import find_actor


class TestFindActor:
    def test_found(self, store: RecordStore, clerk: Actor) -> None:
        assert find_actor(store, "clerk@example.com") == clerk

    def test_surrounding_whitespace(self, store: RecordStore, clerk: Actor) -> None:
        actor = find_actor(store, "  clerk@example.com ")
        assert actor is not None
        assert actor.role is Role.LEVEL_2

    def test_unknown(self, store: RecordStore) -> None:
        assert find_actor(store, "nobody@example.com") is None
