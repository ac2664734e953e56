"""Tests for the Rich console factory."""

from payrollctl.output.console import create_console, get_output


class TestConsole:
    def test_renders_to_buffer(self) -> None:
        console = create_console(no_color=True)
        console.print("hello")
        assert get_output(console) == "hello\n"

    def test_theme_styles_available(self) -> None:
        console = create_console(no_color=True)
        console.print("[payroll.ok]OK[/payroll.ok]")
        assert get_output(console).strip() == "OK"
