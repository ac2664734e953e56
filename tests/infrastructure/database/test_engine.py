"""Tests for database engine setup and initialization."""

from pathlib import Path

import pytest
from sqlalchemy import inspect, text

from payrollctl.config.settings import PayrollSettings
from payrollctl.domain.types import EntityType
from payrollctl.infrastructure.database.engine import (
    create_db_engine,
    default_db_path,
    init_database,
    resolve_db_url,
)


class TestCreateDbEngine:
    def test_foreign_keys_enabled(self, tmp_path: Path) -> None:
        engine = create_db_engine(f"sqlite:///{tmp_path / 'test.db'}")
        try:
            with engine.connect() as conn:
                assert conn.execute(text("PRAGMA foreign_keys")).scalar() == 1
        finally:
            engine.dispose()


class TestResolveDbUrl:
    def test_default_sqlite_under_root(self, tmp_path: Path) -> None:
        settings = PayrollSettings.from_cli(root=tmp_path)
        assert resolve_db_url(settings) == f"sqlite:///{tmp_path / '.payrollctl' / 'payroll.db'}"
        assert default_db_path(tmp_path).name == "payroll.db"

    def test_configured_url(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("PAYROLLCTL_DATABASE__URL", "sqlite:///:memory:")
        settings = PayrollSettings.from_cli(root=tmp_path)
        assert resolve_db_url(settings) == "sqlite:///:memory:"


class TestInitDatabase:
    def test_creates_db_file(self, tmp_path: Path) -> None:
        engine = init_database(PayrollSettings.from_cli(root=tmp_path))
        engine.dispose()
        assert (tmp_path / ".payrollctl" / "payroll.db").exists()

    def test_creates_all_tables(self, tmp_path: Path) -> None:
        engine = init_database(PayrollSettings.from_cli(root=tmp_path))
        try:
            table_names = set(inspect(engine).get_table_names())
        finally:
            engine.dispose()
        assert {entity.value for entity in EntityType} == table_names

    def test_idempotent(self, tmp_path: Path) -> None:
        settings = PayrollSettings.from_cli(root=tmp_path)
        init_database(settings).dispose()
        init_database(settings).dispose()
