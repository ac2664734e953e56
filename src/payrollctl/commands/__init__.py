"""Subcommand modules for payrollctl.

``register_commands()`` uses deferred imports to keep ``payrollctl --help``
fast.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register all commands on the root CLI group."""
    # --- Database lifecycle ---
    from payrollctl.commands.init_cmd import init_cmd
    from payrollctl.commands.seed import seed
    from payrollctl.commands.upgrade import upgrade

    cli.add_command(init_cmd)
    cli.add_command(seed)
    cli.add_command(upgrade)

    # --- Records ---
    from payrollctl.commands.records import check, create, delete, list_cmd, show, update

    cli.add_command(create)
    cli.add_command(update)
    cli.add_command(check)
    cli.add_command(show)
    cli.add_command(list_cmd)
    cli.add_command(delete)
