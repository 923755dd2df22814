"""Tests for the market CLI commands."""

from __future__ import annotations

import json

import pytest
from typer.testing import CliRunner

from cspi.cli import main as main_module
from cspi.cli import market as market_module
from cspi.cli.main import create_app


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


@pytest.fixture(autouse=True)
def quiet_logging(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(main_module, "_configure_logging", lambda level: None)


@pytest.fixture
def use_engine(monkeypatch: pytest.MonkeyPatch, stub_engine_factory):
    def _use(**values):
        monkeypatch.setattr(market_module, "create_engine", stub_engine_factory(**values))

    return _use


def test_refresh_table_output(runner: CliRunner, use_engine) -> None:
    use_engine()

    result = runner.invoke(create_app(), ["--no-color", "refresh"])

    assert result.exit_code == 0, result.output
    assert "PARTIAL" in result.output
    assert "partial data (3/6)" in result.output
    assert "sell_signals" in result.output


def test_refresh_json_output(runner: CliRunner, use_engine) -> None:
    use_engine()

    result = runner.invoke(create_app(), ["--format", "json", "refresh"])

    assert result.exit_code == 0, result.output
    document = json.loads(result.stdout)
    snapshot = {row["field"]: row["value"] for row in document["snapshot"]}
    assert snapshot["cspi_score"] == 36.4
    assert snapshot["cspi_level"] == "PARTIAL"
    assert {row["indicator"] for row in document["breakdown"]} == {"mvrv", "fear_greed", "kimchi_premium"}
    assert [row["stage"] for row in document["sell_signals"]] == ["stage_1", "stage_2", "stage_3", "stage_4"]
    indicators = {row["indicator"]: row for row in document["indicators"]}
    assert indicators["price"]["value"] == 67000.0
    assert indicators["rsi"]["status"] == "failed"


def test_refresh_reports_failed_cycle(runner: CliRunner, use_engine) -> None:
    use_engine(price=RuntimeError("unexpected payload shape"))

    result = runner.invoke(create_app(), ["--format", "json", "refresh"])

    assert result.exit_code == 30
    assert "COLLECTION_FAILED" in result.output
    assert "unexpected payload shape" in result.output


def test_probe_scalar_indicator(runner: CliRunner, use_engine) -> None:
    use_engine()

    result = runner.invoke(create_app(), ["--format", "json", "probe", "mvrv"])

    assert result.exit_code == 0, result.output
    assert json.loads(result.stdout) == {"probe": [{"indicator": "mvrv", "value": 2.4}]}


def test_probe_structured_indicator(runner: CliRunner, use_engine) -> None:
    use_engine()

    result = runner.invoke(create_app(), ["--format", "json", "probe", "price"])

    assert result.exit_code == 0, result.output
    row = json.loads(result.stdout)["probe"][0]
    assert row["price"] == 67000.0
    assert row["market_cap"] == 1.3e12


def test_probe_unknown_indicator(runner: CliRunner, use_engine) -> None:
    use_engine()

    result = runner.invoke(create_app(), ["probe", "hash_ribbons"])

    assert result.exit_code == 10
    assert "UNKNOWN_INDICATOR" in result.output


def test_probe_unavailable_indicator(runner: CliRunner, use_engine) -> None:
    use_engine()

    result = runner.invoke(create_app(), ["probe", "rsi"])

    assert result.exit_code == 20
    assert "INDICATOR_UNAVAILABLE" in result.output


def test_indicators_lists_collectors(runner: CliRunner, use_engine) -> None:
    use_engine()

    result = runner.invoke(create_app(), ["--format", "json", "indicators"])

    assert result.exit_code == 0, result.output
    names = [row["indicator"] for row in json.loads(result.stdout)["indicators"]]
    assert names == ["price", "fear_greed", "mvrv", "kimchi_premium", "rsi", "altcoin_season", "btc_dominance"]


def test_invalid_format_is_rejected(runner: CliRunner) -> None:
    result = runner.invoke(create_app(), ["--format", "xml", "indicators"])

    assert result.exit_code == 2
