"""Command: create the default level1 user."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from payrollctl.commands._base import PayrollCommand

if TYPE_CHECKING:
    from payrollctl.commands._context import AppContext


@click.command(
    cls=PayrollCommand,
    examples=["seed", "--json seed"],
)
@click.pass_obj
def seed(app: AppContext) -> None:
    """Insert the default user configured under [seed]."""
    from payrollctl.services.seed import SeedService

    svc = SeedService(app.store, seed=app.settings.seed, security=app.settings.security)
    app.emit(svc.seed_default_user())
