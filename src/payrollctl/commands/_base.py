"""Shared Click plumbing for payrollctl commands.

``PayrollCommand`` carries a list of usage examples behind an eager
``--examples`` flag.  The entity argument and the JSON payload options
used by the record commands live here too.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from typing import IO, Any, TypeVar

import click

from payrollctl.domain.types import EntityType

F = TypeVar("F", bound=Callable[..., Any])

ENTITY_CHOICE = click.Choice([entity.value for entity in EntityType], case_sensitive=False)


def render_examples(ctx: click.Context, examples: Sequence[str]) -> str:
    """Prefix each example with the program name as invoked."""
    prog = ctx.find_root().info_name or "payrollctl"
    lines = [f"Examples for '{ctx.command_path}':", ""]
    lines.extend(f"  $ {prog} {example}" for example in examples)
    return "\n".join(lines)


class PayrollCommand(click.Command):
    """Click command with an optional ``--examples`` flag.

    *examples* are argument strings without the program name, e.g.
    ``"--as staff@swinpayroll.xyz list employees"``.
    """

    def __init__(self, *args: Any, examples: Sequence[str] = (), **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.examples = tuple(examples)
        if self.examples:
            self.params.append(
                click.Option(
                    ["--examples"],
                    is_flag=True,
                    expose_value=False,
                    is_eager=True,
                    callback=self._show_examples,
                    help="Show usage examples.",
                )
            )

    def _show_examples(self, ctx: click.Context, _param: click.Parameter, value: bool) -> None:
        if value:
            click.echo(render_examples(ctx, self.examples))
            ctx.exit(0)


def entity_argument(func: F) -> F:
    """Positional entity type, matched against table names."""
    return click.argument("entity", type=ENTITY_CHOICE, metavar="ENTITY")(func)


def record_id_argument(func: F) -> F:
    return click.argument("record_id", metavar="RECORD_ID")(func)


def payload_options(func: F) -> F:
    """Add ``--data`` and ``--file`` for a JSON request body."""
    func = click.option(
        "--file",
        "payload_file",
        type=click.File("r", encoding="utf-8"),
        default=None,
        help="Read the JSON payload from a file ('-' for stdin).",
    )(func)
    return click.option("--data", default=None, help="JSON payload.")(func)


def read_payload(data: str | None, payload_file: IO[str] | None) -> str:
    """Return the raw JSON body from exactly one of ``--data``/``--file``."""
    if data is not None and payload_file is not None:
        raise click.UsageError("Use either --data or --file, not both.")
    if payload_file is not None:
        return payload_file.read()
    if data is None:
        raise click.UsageError("A JSON payload is required (--data or --file).")
    return data
