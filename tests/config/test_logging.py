"""Tests for structlog configuration."""

from __future__ import annotations

import json
import logging
from collections.abc import Generator

import pytest
import structlog

from payrollctl.config.logging import (
    REDACTED,
    bind_command_context,
    configure_logging,
    redact_credentials,
)


@pytest.fixture(autouse=True)
def _restore_logging() -> Generator[None]:
    """Restore root logger state after each test."""
    root = logging.getLogger()
    original_handlers = root.handlers[:]
    original_level = root.level
    app = logging.getLogger("payrollctl")
    app_level = app.level
    yield
    root.handlers = original_handlers
    root.setLevel(original_level)
    app.setLevel(app_level)
    structlog.contextvars.clear_contextvars()


class TestConfigureLogging:
    def test_verbose_enables_debug(self) -> None:
        configure_logging(verbose=True, log_json=False)
        assert logging.getLogger("payrollctl").level == logging.DEBUG
        assert logging.getLogger().level == logging.WARNING

    def test_non_verbose_sets_warning(self) -> None:
        configure_logging(verbose=False, log_json=False)
        assert logging.getLogger("payrollctl").level == logging.WARNING

    def test_json_mode_output(self, capfd: pytest.CaptureFixture[str]) -> None:
        configure_logging(verbose=True, log_json=True)
        log = structlog.get_logger("payrollctl.test")
        log.warning("validation.rejected", entity="projects")
        parsed = json.loads(capfd.readouterr().err.strip())
        assert parsed["event"] == "validation.rejected"
        assert parsed["entity"] == "projects"
        assert parsed["level"] == "warning"
        assert parsed["logger"] == "payrollctl.test"
        assert "timestamp" in parsed

    def test_stdlib_logger_gets_structured_fields(
        self, capfd: pytest.CaptureFixture[str]
    ) -> None:
        configure_logging(verbose=True, log_json=True)
        logging.getLogger("payrollctl.infrastructure.store").debug("Inserted row")
        parsed = json.loads(capfd.readouterr().err.strip())
        assert parsed["event"] == "Inserted row"
        assert parsed["level"] == "debug"

    def test_info_hidden_without_verbose(self, capfd: pytest.CaptureFixture[str]) -> None:
        configure_logging(verbose=False, log_json=True)
        structlog.get_logger("payrollctl.test").info("record.created")
        assert capfd.readouterr().err == ""

    def test_third_party_debug_is_suppressed(self, capfd: pytest.CaptureFixture[str]) -> None:
        configure_logging(verbose=True, log_json=True)
        logging.getLogger("alembic").debug("migration noise")
        logging.getLogger("sqlalchemy.engine").info("SELECT 1")
        logging.getLogger("sqlalchemy.pool").debug("checkout")
        assert capfd.readouterr().err == ""

    def test_idempotent_calls(self) -> None:
        configure_logging(verbose=False, log_json=False)
        configure_logging(verbose=False, log_json=False)
        assert len(logging.getLogger().handlers) == 1


class TestCommandContext:
    def test_bound_values_on_every_line(self, capfd: pytest.CaptureFixture[str]) -> None:
        configure_logging(verbose=True, log_json=True)
        bind_command_context(op="create_project", actor="admin@example.com")
        structlog.get_logger("payrollctl.test").warning("access.denied")
        parsed = json.loads(capfd.readouterr().err.strip())
        assert parsed["op"] == "create_project"
        assert parsed["actor"] == "admin@example.com"

    def test_none_values_skipped(self, capfd: pytest.CaptureFixture[str]) -> None:
        configure_logging(verbose=True, log_json=True)
        bind_command_context(op="list_projects", actor=None)
        structlog.get_logger("payrollctl.test").warning("access.denied")
        parsed = json.loads(capfd.readouterr().err.strip())
        assert "actor" not in parsed


class TestRedactCredentials:
    def test_top_level_and_nested_keys(self) -> None:
        event = {
            "event": "user.created",
            "password": "s3cret-pass",
            "payload": {
                "email": "pat@example.com",
                "password_confirmation": "s3cret-pass",
                "history": [{"password_hash": "pbkdf2:sha256$..."}],
            },
        }
        redacted = redact_credentials(None, "info", event)
        assert redacted["password"] == REDACTED
        assert redacted["payload"]["email"] == "pat@example.com"
        assert redacted["payload"]["password_confirmation"] == REDACTED
        assert redacted["payload"]["history"] == [{"password_hash": REDACTED}]

    def test_other_values_untouched(self) -> None:
        event = {"event": "validation.rejected", "errors": [["name", "can't be blank"]]}
        assert redact_credentials(None, "warning", dict(event)) == event

    def test_rendered_line_hides_password(self, capfd: pytest.CaptureFixture[str]) -> None:
        configure_logging(verbose=True, log_json=True)
        structlog.get_logger("payrollctl.test").warning(
            "validation.rejected", payload={"email": "pat@example.com", "password": "hunter22"}
        )
        err = capfd.readouterr().err
        assert "hunter22" not in err
        assert json.loads(err.strip())["payload"]["password"] == REDACTED
