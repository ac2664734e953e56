"""Tests for entity types, enums, and the Actor model."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from payrollctl.domain.types import Actor, EntityType, MaritalStatus, Role, Sex, singularise


class TestEntityType:
    def test_values_are_table_names(self) -> None:
        assert EntityType.WEEKLY_PAYROLL_HISTORIES == "weekly_payroll_histories"
        assert EntityType("insurance_companies") is EntityType.INSURANCE_COMPANIES

    def test_eight_entity_types(self) -> None:
        assert len(EntityType) == 8

    @pytest.mark.parametrize(
        ("entity", "singular"),
        [
            (EntityType.EMPLOYEES, "employee"),
            (EntityType.INSURANCE_COMPANIES, "insurance_company"),
            (EntityType.INSURANCE_POLICIES, "insurance_policy"),
            (EntityType.SUBCONTRACTS, "subcontract"),
            (EntityType.WEEKLY_PAYROLL_HISTORIES, "weekly_payroll_history"),
        ],
    )
    def test_singular(self, entity: EntityType, singular: str) -> None:
        assert entity.singular == singular

    def test_singularise_leaves_singular_words(self) -> None:
        assert singularise("staff") == "staff"


class TestEnums:
    def test_sex_values(self) -> None:
        assert {s.value for s in Sex} == {"m", "f", "o"}

    def test_marital_status_includes_de_facto(self) -> None:
        assert MaritalStatus("de_facto") is MaritalStatus.DE_FACTO

    def test_roles(self) -> None:
        assert [r.value for r in Role] == ["level1", "level2", "level3"]


class TestActor:
    def test_role_coerced_from_string(self) -> None:
        actor = Actor(id="u1", name="Kim", email="kim@example.com", role="level2")
        assert actor.role is Role.LEVEL_2

    def test_unknown_role_rejected(self) -> None:
        with pytest.raises(ValidationError):
            Actor(id="u1", name="Kim", email="kim@example.com", role="admin")

    def test_frozen(self) -> None:
        actor = Actor(id="u1", name="Kim", email="kim@example.com", role="level1")
        with pytest.raises(ValidationError):
            actor.role = Role.LEVEL_3  # type: ignore[misc]
