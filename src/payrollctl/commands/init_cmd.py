"""Command: database initialization (named init_cmd to avoid shadowing builtins)."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from payrollctl.commands._base import PayrollCommand

if TYPE_CHECKING:
    from payrollctl.commands._context import AppContext


@click.command(
    "init",
    cls=PayrollCommand,
    examples=["init", "--config /srv/payroll/payrollctl.toml init"],
)
@click.pass_obj
def init_cmd(app: AppContext) -> None:
    """Create the payroll tables and mark the schema as current."""
    from payrollctl.services.init import InitService

    app.emit(InitService.init_database(app.settings))
