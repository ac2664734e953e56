"""Help and --examples output for every command."""

from __future__ import annotations

import pytest
from click.testing import CliRunner

from payrollctl.cli import cli

HELP_COMMANDS: list[tuple[list[str], list[str]]] = [
    (["--help"], ["--as", "--json", "create", "list", "upgrade"]),
    (["init", "--help"], ["--examples"]),
    (["seed", "--help"], ["[seed]"]),
    (["upgrade", "--help"], ["--check"]),
    (["create", "--help"], ["ENTITY", "--data", "--file"]),
    (["update", "--help"], ["RECORD_ID", "--data"]),
    (["check", "--help"], ["--id", "--data"]),
    (["show", "--help"], ["RECORD_ID"]),
    (["list", "--help"], ["ENTITY"]),
    (["delete", "--help"], ["RECORD_ID"]),
]


@pytest.mark.parametrize(
    ("args", "keywords"), HELP_COMMANDS, ids=[" ".join(a) for a, _ in HELP_COMMANDS]
)
def test_help(cli_runner: CliRunner, args: list[str], keywords: list[str]) -> None:
    result = cli_runner.invoke(cli, args)
    assert result.exit_code == 0, result.output
    for keyword in keywords:
        assert keyword in result.output


EXAMPLE_COMMANDS = ["init", "seed", "upgrade", "create", "update", "check", "show", "list", "delete"]


@pytest.mark.parametrize("command", EXAMPLE_COMMANDS)
def test_examples(cli_runner: CliRunner, command: str) -> None:
    result = cli_runner.invoke(cli, [command, "--examples"], prog_name="payrollctl")
    assert result.exit_code == 0
    assert result.output.startswith(f"Examples for 'payrollctl {command}':")
    example_lines = [line for line in result.output.splitlines() if line.startswith("  $ ")]
    assert example_lines
    assert all(line.startswith("  $ payrollctl ") for line in example_lines)
    assert all(command in line for line in example_lines)


def test_entity_metavar_in_usage(cli_runner: CliRunner) -> None:
    result = cli_runner.invoke(cli, ["show", "--help"], prog_name="payrollctl")
    assert "Usage: payrollctl show [OPTIONS] ENTITY RECORD_ID" in result.output


def test_version(cli_runner: CliRunner) -> None:
    result = cli_runner.invoke(cli, ["--version"])
    assert result.exit_code == 0
    assert "payrollctl" in result.output


def test_no_command_prints_help(cli_runner: CliRunner) -> None:
    result = cli_runner.invoke(cli, [])
    assert result.exit_code == 0
    assert "Commands:" in result.output
