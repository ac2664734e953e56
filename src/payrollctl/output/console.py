"""Rich Console factory and theme for payrollctl output.

Consoles render to a StringIO buffer, preserving the
``format_result() -> str`` contract.  In non-TTY environments (tests,
pipes) Rich automatically disables color codes.
"""

from __future__ import annotations

from io import StringIO

from rich.console import Console
from rich.theme import Theme

PAYROLL_THEME = Theme(
    {
        "payroll.ok": "bold green",
        "payroll.error": "bold red",
        "payroll.warning": "bold yellow",
        "payroll.op": "bold cyan",
        "payroll.key": "dim",
        "payroll.id": "bold blue",
        "payroll.attribute": "bold",
    }
)


def create_console(*, no_color: bool = False, width: int | None = None) -> Console:
    """Create a Console that renders to a StringIO buffer.

    Args:
        no_color: Disable ANSI escape codes (used in tests).
        width: Override terminal width (useful for consistent test output).
    """
    return Console(
        file=StringIO(),
        theme=PAYROLL_THEME,
        no_color=no_color,
        highlight=False,
        width=width or 120,
    )


def get_output(console: Console) -> str:
    """Extract rendered text from a StringIO-backed Console."""
    assert isinstance(console.file, StringIO)
    return console.file.getvalue()
