"""Root CLI group for payrollctl with global flags and command registration."""

from __future__ import annotations

import click

from payrollctl import __version__
from payrollctl.commands import register_commands
from payrollctl.commands._context import AppContext
from payrollctl.config.settings import ConfigFileError, PayrollSettings


@click.group(invoke_without_command=True)
@click.version_option(version=__version__, prog_name="payrollctl")
@click.option("--json", "json_output", is_flag=True, help="Structured JSON output.")
@click.option("-q", "--quiet", is_flag=True, help="Minimal output.")
@click.option("-v", "--verbose", is_flag=True, help="Detailed output with debug info.")
@click.option("--log-json", is_flag=True, help="Structured JSON log output to stderr.")
@click.option("-c", "--config", "config_path", default=None, help="Override config file path.")
@click.option(
    "--as",
    "actor",
    default=None,
    metavar="EMAIL",
    help="Act as this user (default: PAYROLLCTL_ACTOR).",
)
@click.pass_context
def cli(
    ctx: click.Context,
    json_output: bool,
    quiet: bool,
    verbose: bool,
    log_json: bool,
    config_path: str | None,
    actor: str | None,
) -> None:
    """payrollctl — payroll and HR records with role-gated validation."""
    ctx.ensure_object(dict)
    # Unset flags stay None so env vars and payrollctl.toml can supply them.
    try:
        settings = PayrollSettings.from_cli(
            config_path=config_path,
            json_output=json_output or None,
            quiet=quiet or None,
            verbose=verbose or None,
            log_json=log_json or None,
            actor=actor,
        )
    except ConfigFileError as exc:
        raise click.ClickException(str(exc)) from exc
    app = AppContext(settings)
    ctx.obj = app
    ctx.call_on_close(app.close)
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


register_commands(cli)
