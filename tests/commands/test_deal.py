"""Tests for the deal CLI group."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from click.testing import CliRunner

from fluencectl.cli import cli
from fluencectl.domain.manifests import DEPLOYED_DEALS
from fluencectl.infrastructure.config_store import open_readonly_config


@pytest.mark.usefixtures("_isolated_project")
class TestDealDeploy:
    def test_deploy_json(self, cli_runner: CliRunner, project_root: Path) -> None:
        result = cli_runner.invoke(cli, ["--json", "--no-interact", "deal", "deploy"])
        assert result.exit_code == 0, result.output
        data = json.loads(result.stdout)
        assert data["op"] == "deal_deploy"
        assert data["data"]["network"] == "kras"
        (deal,) = data["data"]["deals"]
        assert deal["worker_name"] == "defaultWorker"
        assert deal["worker_cid"] == "bafydefaultworker"
        assert deal["deal_address"].startswith("0x")
        assert len(deal["deal_address"]) == 42
        records = open_readonly_config(DEPLOYED_DEALS, project_root).data.deals
        assert records[0].network == "kras"

    def test_network_option(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(
            cli, ["--json", "--no-interact", "deal", "deploy", "--network", "local"]
        )
        assert result.exit_code == 0, result.output
        assert json.loads(result.stdout)["data"]["network"] == "local"

    def test_env_flag(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(
            cli, ["--json", "--no-interact", "--env", "stage", "deal", "deploy"]
        )
        assert result.exit_code == 0, result.output
        assert json.loads(result.stdout)["data"]["network"] == "stage"

    def test_fluence_env_var(self, cli_runner: CliRunner, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("FLUENCE_ENV", "testnet")
        result = cli_runner.invoke(cli, ["--json", "--no-interact", "deal", "deploy"])
        assert json.loads(result.stdout)["data"]["network"] == "testnet"

    def test_quiet_prints_addresses(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["-q", "--no-interact", "deal", "deploy", "defaultWorker"])
        assert result.exit_code == 0, result.output
        (line,) = result.stdout.strip().splitlines()
        assert line.startswith("0x")

    def test_redeploy_non_interactive_updates(self, cli_runner: CliRunner) -> None:
        cli_runner.invoke(cli, ["--no-interact", "deal", "deploy"])
        result = cli_runner.invoke(cli, ["--json", "--no-interact", "deal", "deploy"])
        assert json.loads(result.stdout)["data"]["deals"][0]["updated"] is True

    def test_redeploy_interactive_declined(self, cli_runner: CliRunner) -> None:
        cli_runner.invoke(cli, ["--no-interact", "deal", "deploy"])
        result = cli_runner.invoke(cli, ["--json", "deal", "deploy"], input="n\n")
        assert result.exit_code == 0, result.output
        assert "previously deployed deal for worker 'defaultWorker'" in result.stderr
        assert json.loads(result.stdout)["data"]["deals"][0]["updated"] is False

    def test_unknown_worker(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["--json", "--no-interact", "deal", "deploy", "a,b"])
        assert result.exit_code == 1
        assert json.loads(result.stderr)["error"]["code"] == "UNKNOWN_WORKER"

    def test_bad_network_rejected(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["deal", "deploy", "--network", "mainnet"])
        assert result.exit_code == 2


class TestDealWithoutPlugin:
    def test_no_chain_client(
        self, cli_runner: CliRunner, project_root: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.chdir(project_root)
        result = cli_runner.invoke(cli, ["--json", "--no-interact", "deal", "deploy"])
        assert result.exit_code == 1
        assert json.loads(result.stderr)["error"]["code"] == "NO_CHAIN_CLIENT"
