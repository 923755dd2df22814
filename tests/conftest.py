"""Pytest configuration for the cspi test suite."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

import httpx
import pytest
from prometheus_client import CollectorRegistry

from cspi.core.collectors.base import IndicatorCollector
from cspi.core.config import CSPIConfig
from cspi.core.exceptions import ExtractionError
from cspi.core.models import FearGreedReading, PriceQuote
from cspi.core.monitoring import MetricsCollector, configure_metrics_collector
from cspi.core.services.engine import MarketEngine

INDICATOR_ORDER = ("price", "fear_greed", "mvrv", "kimchi_premium", "rsi", "altcoin_season", "btc_dominance")


def pytest_addoption(parser: pytest.Parser) -> None:
    """Register command-line options for controlling integration tests."""

    parser.addoption(
        "--cspi-run-integration",
        action="store_true",
        default=False,
        help="Run cspi integration tests that hit live upstream sources.",
    )


def pytest_configure(config: pytest.Config) -> None:
    """Register the integration marker for cspi tests."""

    config.addinivalue_line(
        "markers",
        "integration: marks cspi tests requiring network or external services",
    )


def pytest_collection_modifyitems(config: pytest.Config, items: list[pytest.Item]) -> None:
    """Skip integration tests unless explicitly requested."""

    if config.getoption("--cspi-run-integration"):
        return

    cspi_skip_integration = pytest.mark.skip(
        reason="integration tests require --cspi-run-integration",
    )
    for cspi_item in items:
        if "integration" in cspi_item.keywords:
            cspi_item.add_marker(cspi_skip_integration)


@pytest.fixture
def metrics() -> MetricsCollector:
    """Isolated metrics collector installed as the process-wide one for the test."""

    collector = MetricsCollector(registry=CollectorRegistry())
    configure_metrics_collector(collector)
    yield collector
    configure_metrics_collector(None)


@pytest.fixture
def mock_client() -> Callable[[Callable[[httpx.Request], httpx.Response]], httpx.AsyncClient]:
    """Build an AsyncClient whose requests are answered by ``handler``."""

    def _build(handler: Callable[[httpx.Request], httpx.Response]) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(handler))

    return _build


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def fake_clock() -> FakeClock:
    return FakeClock()


class StaticCollector(IndicatorCollector):
    """Collector returning a fixed value; ``None`` fails like an unparseable upstream."""

    def __init__(self, name: str, value: Any = None) -> None:
        self.name = name
        self.value = value

    async def fetch(self) -> Any:
        if isinstance(self.value, BaseException):
            raise self.value
        if self.value is None:
            raise ExtractionError(f"{self.name} value could not be parsed", self.name)
        return self.value


DEFAULT_VALUES: dict[str, Any] = {
    "price": PriceQuote(price=67000.0, change_24h=1.5, market_cap=1.3e12, volume=2.9e10),
    "fear_greed": FearGreedReading(value=60, classification="Greed"),
    "mvrv": 2.4,
    "kimchi_premium": 2.0,
}


@pytest.fixture
def stub_engine_factory(metrics: MetricsCollector) -> Callable[..., Callable[[], MarketEngine]]:
    """Return ``build(**values)`` producing engine factories backed by static collectors."""

    def build(**overrides: Any) -> Callable[[], MarketEngine]:
        values = {**DEFAULT_VALUES, **overrides}

        def factory() -> MarketEngine:
            collectors = {name: StaticCollector(name, values.get(name)) for name in INDICATOR_ORDER}
            client = httpx.AsyncClient(transport=httpx.MockTransport(lambda request: httpx.Response(404)))
            return MarketEngine(CSPIConfig(), client=client, collectors=collectors, metrics=metrics)

        return factory

    return build
