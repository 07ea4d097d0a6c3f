"""
CLI integration tests using Click's test runner.

Tests verify that the CLI commands work end-to-end via the Click
CliRunner, with contract reads and transactions patched out so no
network access or chain interaction is required.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Iterator
from unittest.mock import MagicMock, patch

import pytest
from click.testing import CliRunner
from eth_account import Account

from conftest import DAY, PROJECT_ID, REGISTRY, SALE_END, make_project_response, make_reader
from inpayment.cli import VERSION, cli

ENV_VARS = (
    "INPAYMENT_PROJECT_ID",
    "INPAYMENT_RPC_URL",
    "PROJECT_REGISTRY_ADDRESS",
    "PRICE_FEED_MANAGER_ADDRESS",
    "CHAIN_ID",
    "PRIVATE_KEY",
)

PROJECT_ARGS = ["--project-id", PROJECT_ID, "--registry", REGISTRY, "--chain-id", "31337"]


@pytest.fixture()
def runner() -> CliRunner:
    return CliRunner()


@pytest.fixture(autouse=True)
def isolated_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point ~/.inpayment/.env at a missing file and clear SDK variables."""
    env_path = tmp_path / ".inpayment" / ".env"
    monkeypatch.setattr("inpayment.config.INPAYMENT_ENV", env_path)
    monkeypatch.setattr("inpayment.wallet.INPAYMENT_ENV", env_path)
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    return env_path


@pytest.fixture()
def wallet(monkeypatch: pytest.MonkeyPatch) -> tuple[str, str]:
    account = Account.create()
    private_key = "0x" + account.key.hex().removeprefix("0x")
    monkeypatch.setenv("PRIVATE_KEY", private_key)
    return private_key, account.address


@pytest.fixture()
def reader() -> Iterator[MagicMock]:
    mock = make_reader()
    with patch("inpayment.sdk.read_contract", mock):
        yield mock


@pytest.fixture()
def sender() -> Iterator[MagicMock]:
    with patch(
        "inpayment.sdk.send_contract_tx",
        return_value={"tx_hash": "0xfeed", "status": 1, "receipt": {}},
    ) as mock:
        yield mock


class TestVersionAndOffline:
    """Commands that need neither a project nor a node."""

    def test_version(self, runner: CliRunner) -> None:
        result = runner.invoke(cli, ["--version"])
        assert result.exit_code == 0
        assert VERSION in result.output

    def test_periods(self, runner: CliRunner) -> None:
        result = runner.invoke(cli, ["periods", "--start", "0", "--end", "25", "--period-length", "10"])
        assert result.exit_code == 0
        lines = result.output.strip().splitlines()
        assert [line.split()[0] for line in lines] == ["10", "20", "25"]
        assert "1970-01-01T00:00:10Z" in lines[0]

    def test_missing_project_id(self, runner: CliRunner) -> None:
        result = runner.invoke(cli, ["progress"])
        assert result.exit_code != 0
        assert "Project ID not set" in result.output


class TestProjectCommands:
    """Project reads against a patched registry."""

    def test_project(self, runner: CliRunner, reader: MagicMock) -> None:
        result = runner.invoke(cli, [*PROJECT_ARGS, "project"])
        assert result.exit_code == 0, result.output
        assert f"=== Project {PROJECT_ID} ===" in result.output
        assert "Round #0" in result.output
        assert "Vesting:  STEP" in result.output

    def test_project_json(self, runner: CliRunner, reader: MagicMock) -> None:
        result = runner.invoke(cli, [*PROJECT_ARGS, "project", "--json"])
        assert result.exit_code == 0, result.output
        data = json.loads(result.output)
        assert data["rounds"][0]["end_time"] == SALE_END

    def test_project_read_error(self, runner: CliRunner) -> None:
        mock = make_reader({"getProject": RuntimeError("connection refused")})
        with patch("inpayment.sdk.read_contract", mock):
            result = runner.invoke(cli, [*PROJECT_ARGS, "project"])
        assert result.exit_code == 3
        assert "Initialization failed" in result.output

    def test_progress(self, runner: CliRunner, reader: MagicMock) -> None:
        result = runner.invoke(cli, [*PROJECT_ARGS, "progress"])
        assert result.exit_code == 0
        assert "Sold: 25.00%" in result.output


class TestVestingCommands:
    """Unlock schedule and releases."""

    def test_unlock_time_json(self, runner: CliRunner, reader: MagicMock) -> None:
        first = SALE_END + 32 * DAY
        result = runner.invoke(cli, [*PROJECT_ARGS, "unlock-time", "--now", str(first + DAY), "--json"])
        assert result.exit_code == 0, result.output
        data = json.loads(result.output)
        assert data["unlock_time_list"] == [first, first + 2 * DAY, first + 4 * DAY, first + 6 * DAY]
        assert data["current_unlock_time"] == first + 2 * DAY

    def test_unlock_time_table(self, runner: CliRunner, reader: MagicMock) -> None:
        first = SALE_END + 32 * DAY
        result = runner.invoke(cli, [*PROJECT_ARGS, "unlock-time", "--now", str(first + DAY)])
        assert result.exit_code == 0
        assert result.output.count("unlocked") == 1
        assert result.output.count("locked") == 4

    def test_unlock_time_unavailable(self, runner: CliRunner) -> None:
        mock = make_reader({"getProject": make_project_response(vesting_config=(True, 2, 0, DAY, 0, 0))})
        with patch("inpayment.sdk.read_contract", mock):
            result = runner.invoke(cli, [*PROJECT_ARGS, "unlock-time", "--now", "0"])
        assert result.exit_code == 0
        assert "Unlock schedule unavailable" in result.output

    def test_release_all(
        self, runner: CliRunner, reader: MagicMock, sender: MagicMock, wallet: tuple[str, str]
    ) -> None:
        result = runner.invoke(cli, [*PROJECT_ARGS, "release", "--all", "--start-idx", "5", "--batch-size", "10"])
        assert result.exit_code == 0, result.output
        assert "Releasing schedules 5..14" in result.output
        assert "SUCCESS: Release confirmed!" in result.output
        assert sender.call_args.kwargs["args"] == [PROJECT_ID, 5, 10]
        assert sender.call_args.kwargs["private_key"] == wallet[0]

    def test_release_without_key(self, runner: CliRunner, reader: MagicMock, sender: MagicMock) -> None:
        result = runner.invoke(cli, [*PROJECT_ARGS, "release"])
        assert result.exit_code == 1
        assert "PRIVATE_KEY not found" in result.output
        sender.assert_not_called()


class TestBuy:
    """Purchases through the CLI."""

    def test_buy_native(
        self, runner: CliRunner, reader: MagicMock, sender: MagicMock, wallet: tuple[str, str]
    ) -> None:
        result = runner.invoke(cli, [*PROJECT_ARGS, "buy", "--amount", "0.5"])
        assert result.exit_code == 0, result.output
        assert f"Buyer:   {wallet[1]}" in result.output
        assert "TX: 0xfeed" in result.output
        assert sender.call_args.kwargs["value"] == 5 * 10**17

    def test_buy_failure_exits_nonzero(
        self, runner: CliRunner, reader: MagicMock, sender: MagicMock, wallet: tuple[str, str]
    ) -> None:
        result = runner.invoke(cli, [*PROJECT_ARGS, "buy", "--amount", "1", "--referrer", "0xbad"])
        assert result.exit_code == 1
        assert "FAILED: Purchase" in result.output
        sender.assert_not_called()


class TestWhoami:
    """Test signer identity display."""

    def test_whoami_with_wallet(self, runner: CliRunner, wallet: tuple[str, str]) -> None:
        result = runner.invoke(cli, ["whoami"])
        assert result.exit_code == 0
        assert f"Address: {wallet[1]}" in result.output

    def test_whoami_without_wallet(self, runner: CliRunner) -> None:
        result = runner.invoke(cli, ["whoami"])
        assert result.exit_code == 1
        assert "No signer key found." in result.output
