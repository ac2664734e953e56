"""AppContext — shared Click context for all commands.

Created once by the root CLI group and handed to subcommands via
``@click.pass_obj``.  Provides lazy store initialization, actor lookup,
and centralized result emission (stdout/stderr routing + exit codes).
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from payrollctl.config.logging import bind_command_context, configure_logging
from payrollctl.output.formatters import OutputSettings, format_result
from payrollctl.services.result import ServiceResult

if TYPE_CHECKING:
    from payrollctl.config.settings import PayrollSettings
    from payrollctl.domain.types import Actor
    from payrollctl.infrastructure.store import RecordStore


class AppContext:
    """Shared context flowing through Click's command hierarchy.

    The store is created on first use so ``--help`` and ``--version``
    never touch the database.
    """

    def __init__(self, settings: PayrollSettings) -> None:
        self.settings = settings
        self._store: RecordStore | None = None
        configure_logging(verbose=settings.verbose, log_json=settings.log_json)

    @property
    def store(self) -> RecordStore:
        """The record store (opened lazily on first access)."""
        if self._store is None:
            from payrollctl.infrastructure.store import RecordStore

            self._store = RecordStore.open(self.settings)
        return self._store

    def close(self) -> None:
        if self._store is not None:
            self._store.close()
            self._store = None

    def resolve_actor(self, op: str) -> Actor | None:
        """Look up the ``--as`` user.

        Returns None when no actor was named (services then refuse role-gated
        operations).  An unknown email is emitted as a failure and exits.
        """
        email = self.settings.actor
        bind_command_context(op=op, actor=email)
        if not email:
            return None

        from payrollctl.services.actors import find_actor

        actor = find_actor(self.store, email)
        if actor is None:
            self.emit(
                ServiceResult.failure(op, "UNKNOWN_ACTOR", f"No user with email: {email}", email=email)
            )
        return actor

    def emit(self, result: ServiceResult) -> None:
        """Format and output a ServiceResult with correct exit semantics.

        * Success: writes to stdout.  Warnings go to stderr so they don't
          pollute piped output.
        * Failure: writes to stderr, exits with code 1.
        """
        settings = OutputSettings(
            json_output=self.settings.json_output,
            quiet=self.settings.quiet,
            verbose=self.settings.verbose,
        )
        output = format_result(result, settings=settings)
        if result.ok:
            click.echo(output)
            # In JSON mode, warnings are already in the serialized payload.
            if not settings.json_output:
                for warning in result.warnings:
                    click.echo(f"WARNING: {warning}", err=True)
        else:
            click.echo(output, err=True)
            raise SystemExit(1)
