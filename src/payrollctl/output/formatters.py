"""Rich/JSON output helpers.

The CLI renders ServiceResult for humans (key/value lines, record tables,
a validation error table) or machines (--json, the full result model).
"""

from __future__ import annotations

import json as _json
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from rich.table import Table
from rich.text import Text

from payrollctl.output.console import create_console, get_output

if TYPE_CHECKING:
    from rich.console import Console

    from payrollctl.services.result import ServiceResult


@dataclass(frozen=True)
class OutputSettings:
    json_output: bool = False
    quiet: bool = False
    verbose: bool = False


def _scalar(value: Any) -> str:
    if isinstance(value, (dict, list)):
        return _json.dumps(value, separators=(",", ":"))
    return "" if value is None else str(value)


def _render_mapping(console: Console, data: dict[str, Any], indent: int = 2) -> None:
    pad = " " * indent
    for key, value in data.items():
        if isinstance(value, dict):
            console.print(Text(f"{pad}{key}:", style="payroll.key"))
            _render_mapping(console, value, indent + 2)
        elif isinstance(value, list) and value and all(isinstance(v, dict) for v in value):
            _render_rows(console, key, value)
        else:
            line = Text(f"{pad}{key}: ", style="payroll.key")
            line.append(_scalar(value), style="payroll.id" if key == "id" else "")
            console.print(line)


def _render_rows(console: Console, title: str, rows: list[dict[str, Any]]) -> None:
    columns: list[str] = []
    for row in rows:
        columns.extend(key for key in row if key not in columns)
    table = Table(title=title, show_lines=False)
    for column in columns:
        table.add_column(column)
    for row in rows:
        table.add_row(*(_scalar(row.get(column)) for column in columns))
    console.print(table)


def _render_field_errors(console: Console, errors: list[dict[str, str]]) -> None:
    table = Table(show_header=True, header_style="payroll.error")
    table.add_column("attribute", style="payroll.attribute")
    table.add_column("message")
    for error in errors:
        table.add_row(error.get("attribute", ""), error.get("message", ""))
    console.print(table)


def format_result(
    result: ServiceResult,
    *,
    settings: OutputSettings | None = None,
    console: Console | None = None,
) -> str:
    """Format a ServiceResult for display."""
    settings = settings or OutputSettings()
    if settings.json_output:
        return result.model_dump_json(indent=2)

    console = console or create_console()
    if result.ok:
        header = Text("OK: ", style="payroll.ok")
        header.append(result.op, style="payroll.op")
        console.print(header)
        if result.data and not settings.quiet:
            _render_mapping(console, result.data)
        if settings.verbose and result.meta:
            _render_mapping(console, {"meta": result.meta})
        return get_output(console).rstrip("\n")

    error = result.error
    header = Text("ERROR: ", style="payroll.error")
    header.append(result.op, style="payroll.op")
    header.append(f" - {error.message if error else 'Unknown error'}")
    console.print(header)
    if result.field_errors:
        _render_field_errors(console, result.field_errors)
    return get_output(console).rstrip("\n")
