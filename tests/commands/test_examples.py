"""Tests for --examples flag on CLI commands.

Parametrized to cover all commands that define examples text.
"""

from __future__ import annotations

from pathlib import Path

import pytest
from click.testing import CliRunner

from fluencectl.cli import cli

# (CLI args, expected keywords in output)
EXAMPLES_COMMANDS: list[tuple[list[str], list[str]]] = [
    (["service", "--examples"], ["fluencectl service new", "fluencectl service add"]),
    (["service", "new", "--examples"], ["--path services/custom"]),
    (["service", "add", "--examples"], ["--name renamed"]),
    (["deal", "--examples"], ["fluencectl deal deploy"]),
    (["deal", "deploy", "--examples"], ["--network local"]),
    (["delegator", "--examples"], ["delegator wc"]),
    (["delegator", "withdraw-collateral", "--examples"], ["withdraw-collateral 0xabc"]),
    (["delegator", "reward-withdraw", "--examples"], ["delegator rw"]),
    (["init", "--examples"], ["--template ts"]),
    (["upgrade", "--examples"], ["fluencectl upgrade --check"]),
    (["check", "--examples"], ["fluencectl -v check"]),
]


def _examples_id(item: tuple[list[str], list[str]]) -> str:
    """Generate a readable test ID from args."""
    args, _ = item
    return "_".join(a for a in args if a != "--examples")


@pytest.mark.parametrize(
    ("args", "keywords"),
    EXAMPLES_COMMANDS,
    ids=[_examples_id(item) for item in EXAMPLES_COMMANDS],
)
def test_examples_flag(cli_runner: CliRunner, args: list[str], keywords: list[str]) -> None:
    result = cli_runner.invoke(cli, args)
    assert result.exit_code == 0, result.output
    assert "Examples for" in result.output
    for keyword in keywords:
        assert keyword in result.output


def test_examples_not_in_help(cli_runner: CliRunner) -> None:
    result = cli_runner.invoke(cli, ["deal", "deploy", "--help"])
    assert result.exit_code == 0
    assert "--examples" in result.output
    assert "fluencectl -q deal deploy" not in result.output


def test_examples_run_outside_project(
    cli_runner: CliRunner, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.chdir(tmp_path)
    result = cli_runner.invoke(cli, ["upgrade", "--examples"])
    assert result.exit_code == 0
