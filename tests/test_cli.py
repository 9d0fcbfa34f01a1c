"""Tests for the root fluencectl CLI."""

from pathlib import Path

import pytest
from click.testing import CliRunner

from fluencectl import __version__
from fluencectl.cli import cli


def test_cli_help(cli_runner: CliRunner) -> None:
    result = cli_runner.invoke(cli, ["--help"])
    assert result.exit_code == 0
    assert "fluencectl" in result.output


def test_cli_version(cli_runner: CliRunner) -> None:
    result = cli_runner.invoke(cli, ["--version"])
    assert result.exit_code == 0
    assert __version__ in result.output
    assert "fluencectl" in result.output


def test_cli_no_args(cli_runner: CliRunner) -> None:
    result = cli_runner.invoke(cli, [])
    assert result.exit_code == 0
    assert "Usage" in result.output


# --- Global flags ---


@pytest.mark.parametrize(
    "flags",
    [["--json"], ["-q"], ["-v"], ["--log-json"], ["--no-interact"], ["--env", "local"]],
    ids=lambda flags: flags[0].lstrip("-"),
)
def test_flag_accepted(cli_runner: CliRunner, flags: list[str]) -> None:
    result = cli_runner.invoke(cli, [*flags, "--version"])
    assert result.exit_code == 0


def test_unknown_env_rejected(cli_runner: CliRunner) -> None:
    result = cli_runner.invoke(cli, ["--env", "mainnet", "check"])
    assert result.exit_code == 2


def test_bad_fluence_env_is_usage_error(
    cli_runner: CliRunner, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("FLUENCE_ENV", "mainnet")
    result = cli_runner.invoke(cli, ["check"])
    assert result.exit_code == 2
    assert "Invalid settings" in result.stderr
    assert "FLUENCE_*" in result.stderr


def test_project_dir_must_exist(cli_runner: CliRunner, tmp_path: Path) -> None:
    result = cli_runner.invoke(cli, ["-C", str(tmp_path / "missing"), "check"])
    assert result.exit_code == 2


def test_project_dir_selects_project(
    cli_runner: CliRunner, project_root: Path, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.chdir(tmp_path)
    result = cli_runner.invoke(cli, ["-C", str(project_root), "check"])
    assert result.exit_code == 0, result.output
    assert "No issues found" in result.stdout


def test_dotenv_selects_network(
    cli_runner: CliRunner, project_root: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    (project_root / ".env").write_text("FLUENCE_ENV=local\n")
    monkeypatch.chdir(project_root)
    result = cli_runner.invoke(cli, ["--json", "--no-interact", "delegator", "wc", "0x1"])
    # No chain plugin here: the error message names the selected network.
    assert "'local'" in result.stderr


# --- Commands registered ---

EXPECTED_GROUPS = ["service", "deal", "delegator"]
EXPECTED_COMMANDS = ["init", "upgrade", "check"]


@pytest.mark.parametrize("name", EXPECTED_GROUPS + EXPECTED_COMMANDS)
def test_command_registered(name: str) -> None:
    assert name in cli.commands
