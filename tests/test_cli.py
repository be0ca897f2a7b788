"""Tests for the coinwatch command line."""

import tempfile
from decimal import Decimal
from pathlib import Path
from unittest.mock import patch

import click
import pytest
from click.testing import CliRunner

from coinwatch.cli.alerts import parse_condition_type, parse_threshold
from coinwatch.cli.main import cli
from coinwatch.db.store import DataStore
from coinwatch.fetchers.static import StaticFetcher


@pytest.fixture
def workspace():
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def invoke(workspace):
    runner = CliRunner()
    env = {"COINWATCH_DB_PATH": str(workspace / "cli.db"), "TELEGRAM_BOT_TOKEN": ""}

    def _invoke(*args):
        return runner.invoke(
            cli,
            ["--config", str(workspace / "config.toml"), *args],
            env=env,
            catch_exceptions=False,
        )

    return _invoke


class TestParsing:
    @pytest.mark.parametrize(
        "value, expected",
        [
            ("above", "price_above"),
            ("BELOW", "price_below"),
            ("up", "percentage_change_up"),
            ("percentage_change_down", "percentage_change_down"),
        ],
    )
    def test_condition_aliases(self, value, expected):
        assert parse_condition_type(value) == expected

    def test_unknown_condition(self):
        with pytest.raises(click.BadParameter):
            parse_condition_type("sideways")

    @pytest.mark.parametrize(
        "value, expected",
        [("100000", "100000"), ("$1,250.50", "1250.50"), ("5%", "5")],
    )
    def test_threshold(self, value, expected):
        assert parse_threshold(value) == Decimal(expected)

    @pytest.mark.parametrize("value", ["abc", "-5", "NaN", "inf"])
    def test_invalid_threshold(self, value):
        with pytest.raises(click.BadParameter):
            parse_threshold(value)


class TestAlertCommands:
    def test_create_and_list(self, invoke, workspace):
        result = invoke("alert", "42", "bitcoin", "above", "100000", "--symbol", "btc", "--name", "Bitcoin")
        assert result.exit_code == 0, result.output
        assert "Alert Created" in result.output

        stored = DataStore(workspace / "cli.db").list_subscriptions()
        assert len(stored) == 1
        assert stored[0].resource_key == "bitcoin"
        assert stored[0].resource_symbol == "BTC"
        assert stored[0].condition_type == "price_above"
        assert stored[0].threshold == Decimal("100000")

        result = invoke("alerts", "--owner", "42")
        assert result.exit_code == 0
        assert "BTC" in result.output

    def test_invalid_condition_rejected(self, invoke):
        result = invoke("alert", "42", "bitcoin", "sideways", "1")
        assert result.exit_code != 0

    def test_disable_and_remove(self, invoke, workspace):
        invoke("alert", "42", "bitcoin", "below", "1")
        store = DataStore(workspace / "cli.db")
        alert_id = store.list_subscriptions()[0].id

        assert invoke("alerts", "--disable", str(alert_id)).exit_code == 0
        assert store.get_subscription(alert_id).is_active is False

        assert invoke("alerts", "--remove", str(alert_id)).exit_code == 0
        assert store.get_subscription(alert_id) is None

        result = invoke("alerts", "--remove", str(alert_id))
        assert "not found" in result.output

    def test_summary(self, invoke):
        invoke("alert", "42", "bitcoin", "above", "1")
        invoke("alert", "42", "ethereum", "down", "10", "--repeat")

        result = invoke("summary", "42")
        assert result.exit_code == 0
        assert "Total:     2" in result.output


class TestMonitorCommands:
    def test_check_triggers_and_prints(self, invoke, workspace):
        invoke("alert", "42", "bitcoin", "above", "100")
        fetcher = StaticFetcher()
        fetcher.set_price("bitcoin", 150, 2)

        with patch("coinwatch.cli.monitor.build_fetcher", return_value=fetcher):
            result = invoke("check", "--dry-run")

        assert result.exit_code == 0, result.output
        assert "Crypto Alert Triggered!" in result.output
        assert DataStore(workspace / "cli.db").list_subscriptions()[0].is_triggered is True

    def test_cleanup(self, invoke):
        result = invoke("cleanup", "--days", "30")
        assert result.exit_code == 0
        assert "Removed 0" in result.output
