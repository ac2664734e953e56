"""Shared pytest fixtures for payrollctl tests."""

from __future__ import annotations

import copy
import logging
from collections.abc import Iterator
from pathlib import Path
from typing import Any

import pytest
from click.testing import CliRunner

from payrollctl.config.settings import PayrollSettings
from payrollctl.domain.schemas import PAYROLL_NUMBER_FIELDS
from payrollctl.domain.types import Actor, EntityType, Role
from payrollctl.infrastructure.store import RecordStore
from payrollctl.services.security import hash_password


class MemoryReader:
    """In-memory stand-in for the read side of RecordStore."""

    def __init__(self) -> None:
        self.rows: dict[EntityType, dict[str, dict[str, Any]]] = {}
        self.calls: list[tuple[str, EntityType, Any]] = []

    def add(self, entity_type: EntityType, record_id: str, **values: Any) -> dict[str, Any]:
        row = {"id": record_id, **values}
        self.rows.setdefault(entity_type, {})[record_id] = row
        return row

    def find_by_id(self, entity_type: EntityType, record_id: Any) -> dict[str, Any] | None:
        self.calls.append(("find_by_id", entity_type, record_id))
        row = self.rows.get(entity_type, {}).get(record_id)
        return copy.deepcopy(row) if row is not None else None

    def find_first_where(
        self, entity_type: EntityType, field: str, value: Any
    ) -> dict[str, Any] | None:
        self.calls.append(("find_first_where", entity_type, (field, value)))
        for row in self.rows.get(entity_type, {}).values():
            if row.get(field) == value:
                return copy.deepcopy(row)
        return None


@pytest.fixture
def memory_reader() -> MemoryReader:
    return MemoryReader()


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep the developer's PAYROLLCTL_* variables out of the tests."""
    for name in ("PAYROLLCTL_CONFIG", "PAYROLLCTL_ACTOR", "PAYROLLCTL_DATABASE__URL"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def settings(tmp_path: Path) -> PayrollSettings:
    return PayrollSettings.from_cli(root=tmp_path)


@pytest.fixture
def store(settings: PayrollSettings) -> Iterator[RecordStore]:
    """Record store over a fresh SQLite file under tmp_path."""
    s = RecordStore.open(settings)
    try:
        yield s
    finally:
        s.close()


@pytest.fixture
def _isolated_project(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Change CWD to tmp_path so the CLI creates an isolated database."""
    monkeypatch.chdir(tmp_path)


# ---------------------------------------------------------------------------
# Actors
# ---------------------------------------------------------------------------


def _insert_user(store: RecordStore, email: str, role: Role) -> Actor:
    name = f"{role.value} user"
    record_id = store.insert(
        EntityType.USERS,
        {
            "name": name,
            "email": email,
            "password_hash": hash_password("correct-horse"),
            "role": role.value,
        },
    )
    return Actor(id=record_id, name=name, email=email, role=role)


@pytest.fixture
def admin(store: RecordStore) -> Actor:
    return _insert_user(store, "admin@example.com", Role.LEVEL_1)


@pytest.fixture
def clerk(store: RecordStore) -> Actor:
    return _insert_user(store, "clerk@example.com", Role.LEVEL_2)


@pytest.fixture
def viewer(store: RecordStore) -> Actor:
    return _insert_user(store, "viewer@example.com", Role.LEVEL_3)


# ---------------------------------------------------------------------------
# Valid payloads
# ---------------------------------------------------------------------------


@pytest.fixture
def project_payload() -> dict[str, Any]:
    return {
        "code": "P-001",
        "name": "Tower B",
        "acronym": "TB",
        "accumulation_amount": 1000,
        "address": "1 Main St",
        "end_date": "2027-12-31",
        "project_group": "Commercial",
        "start_date": "2026-01-05",
    }


@pytest.fixture
def position_payload() -> dict[str, Any]:
    return {"code": "POS-1", "name": "Fitter", "minimum_pay": 20, "maximum_pay": 50}


@pytest.fixture
def project_id(store: RecordStore, project_payload: dict[str, Any]) -> str:
    return store.insert(EntityType.PROJECTS, project_payload)


@pytest.fixture
def position_id(store: RecordStore, position_payload: dict[str, Any]) -> str:
    return store.insert(EntityType.POSITIONS, position_payload)


@pytest.fixture
def employee_payload(project_id: str, position_id: str) -> dict[str, Any]:
    return {
        "code": "E-001",
        "name": "Alex Doe",
        "address": "12 High St",
        "phone": "+61 400 000 000",
        "date_of_birth": "1990-04-12",
        "sex": "f",
        "marital_status": "single",
        "referee": "Sam Roe",
        "emergency_name": "Jo Doe",
        "emergency_address": "12 High St",
        "emergency_phone": "0400 111 222",
        "hired_date": "2020-02-01",
        "skill": "Welding",
        "hourly_rate": 25,
        "overtime_rate": 37.5,
        "project_id": project_id,
        "position_id": position_id,
    }


@pytest.fixture
def employee_id(store: RecordStore, employee_payload: dict[str, Any]) -> str:
    return store.insert(EntityType.EMPLOYEES, employee_payload)


@pytest.fixture
def insurance_company_id(store: RecordStore) -> str:
    return store.insert(EntityType.INSURANCE_COMPANIES, {"code": "IC-1", "name": "Acme Cover"})


@pytest.fixture
def insurance_policy_payload(project_id: str, insurance_company_id: str) -> dict[str, Any]:
    return {
        "code": "POL-1",
        "project_id": project_id,
        "insurance_company_id": insurance_company_id,
        "start_date": "2026-01-01",
        "end_date": "2026-12-31",
        "details": "Public liability",
    }


@pytest.fixture
def user_payload() -> dict[str, Any]:
    return {
        "name": "Pat Lee",
        "email": "pat@example.com",
        "password": "s3cret-pass",
        "password_confirmation": "s3cret-pass",
        "role": "level2",
    }


@pytest.fixture
def payroll_payload(employee_id: str, project_id: str) -> dict[str, Any]:
    payload: dict[str, Any] = {
        "week_start_date": "2026-03-02",
        "employee_id": employee_id,
        "project_id": project_id,
    }
    for name in PAYROLL_NUMBER_FIELDS:
        payload[name] = 8 if name.startswith("hours_day_") else 0
    return payload


@pytest.fixture(autouse=True)
def _restore_logging() -> Iterator[None]:
    """Undo handlers installed by CLI invocations (their streams close with the runner)."""
    root = logging.getLogger()
    original_handlers = root.handlers[:]
    original_level = root.level
    yield
    root.handlers = original_handlers
    root.setLevel(original_level)
