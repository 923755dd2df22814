"""Market engine: owns the market snapshot and runs collection cycles.

The engine is the only writer of its snapshot. Consumers read copies through
:meth:`MarketEngine.get_current` or receive them through "data updated"
listeners, which fire once per completed cycle whatever its outcome.
"""

from __future__ import annotations

import asyncio
import inspect
import time
from collections.abc import Awaitable, Callable, Mapping
from datetime import UTC, datetime
from typing import Any

import httpx
from loguru import logger

from cspi.core.collectors import IndicatorCollector, build_default_collectors
from cspi.core.config import ConfigManager, CSPIConfig
from cspi.core.data.cache import CacheStrategy, FifoTTLCache
from cspi.core.exceptions import CollectionInProgressError
from cspi.core.logging import log_context
from cspi.core.models import (
    CollectionResult,
    FearGreedReading,
    IndicatorName,
    IndicatorResult,
    MarketSnapshot,
    PriceQuote,
)
from cspi.core.monitoring import MetricsCollector, get_metrics_collector
from cspi.core.transport import FetchRacer, create_http_client, resolve_routes

from .aggregation import classify, compute_breakdown
from .sell_signals import evaluate_sell_signals

DataListener = Callable[[MarketSnapshot], Awaitable[None] | None]

PRICE = "price"

# scalar indicators: collector name -> snapshot field
SNAPSHOT_FIELDS: dict[str, str] = {
    IndicatorName.MVRV.value: "mvrv_z_score",
    IndicatorName.KIMCHI_PREMIUM.value: "kimchi_premium",
    IndicatorName.RSI.value: "rsi_14d",
    IndicatorName.ALTCOIN_SEASON.value: "altcoin_season_index",
    IndicatorName.BTC_DOMINANCE.value: "btc_dominance",
}


class MarketEngine:
    """Collects every indicator, scores the partial result and publishes the snapshot."""

    def __init__(
        self,
        config: CSPIConfig | None = None,
        *,
        client: httpx.AsyncClient | None = None,
        cache: CacheStrategy | None = None,
        collectors: Mapping[str, IndicatorCollector] | None = None,
        metrics: MetricsCollector | None = None,
        clock: Callable[[], datetime] | None = None,
    ):
        self.config = config or ConfigManager().get_config()
        self._owns_client = client is None
        self.client = client or create_http_client(self.config.transport)
        self.cache = cache or FifoTTLCache(
            ttl=self.config.cache.ttl_seconds,
            max_size=self.config.cache.max_entries,
        )
        self._metrics = metrics
        self.racer = FetchRacer(
            self.client,
            self.cache,
            resolve_routes(self.config.transport.relay_routes),
            default_timeout=self.config.transport.default_timeout,
            min_payload_chars=self.config.transport.min_payload_chars,
            metrics=metrics,
        )
        self.collectors: dict[str, IndicatorCollector] = dict(
            collectors
            if collectors is not None
            else build_default_collectors(self.client, self.racer, self.config.sources)
        )
        self._now = clock or (lambda: datetime.now(UTC))
        self._snapshot = MarketSnapshot()
        self._listeners: list[DataListener] = []
        self._collecting = False

    @property
    def metrics(self) -> MetricsCollector:
        return self._metrics or get_metrics_collector()

    @property
    def is_collecting(self) -> bool:
        return self._collecting

    async def __aenter__(self) -> "MarketEngine":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Close the HTTP client if the engine created it."""
        if self._owns_client:
            await self.client.aclose()

    def subscribe(self, listener: DataListener) -> None:
        """Register a "data updated" listener (sync or async callable)."""
        self._listeners.append(listener)

    def unsubscribe(self, listener: DataListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def get_current(self) -> MarketSnapshot:
        """Return a copy of the current snapshot."""
        return self._snapshot.model_copy()

    async def collect_all(self) -> CollectionResult:
        """Run one collection cycle.

        Never raises for upstream problems: per-indicator failures degrade the
        score, and an unexpected error inside the cycle is reported as
        ``success=False`` with the previous values kept.
        """
        if self._collecting:
            error = CollectionInProgressError()
            logger.warning(error.message)
            return CollectionResult(success=False, snapshot=self.get_current(), error=error.message)

        self._collecting = True
        started = time.perf_counter()
        try:
            with log_context(operation="collect_all"):
                result = await self._run_cycle()
        finally:
            self._collecting = False

        self.metrics.observe_cycle(time.perf_counter() - started, success=result.success)
        await self._notify()
        return result

    async def test_indicator(self, name: str) -> Any | None:
        """Debug probe for a single collector; returns its value or None."""
        collector = self.collectors.get(name)
        if collector is None:
            logger.warning(f"{name} is not a known indicator (available: {', '.join(self.collectors)})")
            return None
        result = await collector.collect()
        return result.value if result.ok else None

    async def _run_cycle(self) -> CollectionResult:
        logger.info("Collection cycle started")
        outcomes: dict[str, IndicatorResult] = {}
        try:
            outcomes = await self._gather_outcomes()
            draft = self._snapshot.model_copy()
            self._apply_outcomes(draft, outcomes)

            breakdown = compute_breakdown(draft.indicator_values())
            level, recommendation = classify(breakdown.total_score, breakdown.valid_data_count)
            draft.cspi_score = breakdown.total_score
            draft.cspi_level = level
            draft.cspi_recommendation = recommendation
            draft.timestamp = self._now()
            sell_signals = evaluate_sell_signals(draft.mvrv_z_score, draft.fear_greed_index)
        except Exception as exc:
            logger.opt(exception=exc).error(f"Collection cycle failed: {exc}")
            self._snapshot.timestamp = self._now()
            return CollectionResult(
                success=False,
                snapshot=self.get_current(),
                error=str(exc),
                outcomes=outcomes,
            )

        self._snapshot = draft
        self.metrics.set_score(breakdown.total_score, breakdown.valid_data_count)
        if breakdown.total_score is None:
            logger.warning("CSPI unavailable - no indicator data")
        else:
            logger.info(
                f"CSPI {breakdown.total_score}/100 level={level.value} "
                f"({breakdown.valid_data_count}/6 indicators)"
            )
        return CollectionResult(
            success=True,
            snapshot=self.get_current(),
            breakdown=breakdown,
            sell_signals=sell_signals,
            outcomes=outcomes,
        )

    async def _gather_outcomes(self) -> dict[str, IndicatorResult]:
        try:
            async with asyncio.TaskGroup() as group:
                tasks = {
                    name: group.create_task(collector.collect(), name=f"collect:{name}")
                    for name, collector in self.collectors.items()
                }
        except ExceptionGroup as errors:
            # siblings are already cancelled and awaited here
            raise errors.exceptions[0] from errors
        outcomes = {name: task.result() for name, task in tasks.items()}
        for name, result in outcomes.items():
            self.metrics.record_indicator(name, success=result.ok)
        succeeded = sum(1 for result in outcomes.values() if result.ok)
        logger.info(f"Indicator collection finished: {succeeded}/{len(outcomes)} succeeded")
        return outcomes

    def _apply_outcomes(self, snapshot: MarketSnapshot, outcomes: Mapping[str, IndicatorResult]) -> None:
        """Overwrite only the fields whose collector succeeded."""
        price = outcomes.get(PRICE)
        if price is not None and price.ok:
            quote: PriceQuote = price.value
            snapshot.btc_price_previous = snapshot.btc_price
            snapshot.btc_price = quote.price
            # None: the source never reports the field. Zero: CoinGecko omitted it.
            if quote.change_24h is not None:
                snapshot.btc_change_24h = quote.change_24h
            if quote.market_cap:
                snapshot.btc_market_cap = quote.market_cap
            if quote.volume:
                snapshot.btc_volume = quote.volume

        fear_greed = outcomes.get(IndicatorName.FEAR_GREED.value)
        if fear_greed is not None and fear_greed.ok:
            reading: FearGreedReading = fear_greed.value
            snapshot.fear_greed_index = reading.value
            snapshot.fear_greed_classification = reading.classification

        for name, field_name in SNAPSHOT_FIELDS.items():
            outcome = outcomes.get(name)
            if outcome is not None and outcome.ok:
                setattr(snapshot, field_name, outcome.value)

    async def _notify(self) -> None:
        for listener in list(self._listeners):
            try:
                maybe_awaitable = listener(self.get_current())
                if inspect.isawaitable(maybe_awaitable):
                    await maybe_awaitable
            except Exception as exc:
                logger.opt(exception=exc).error(f"Data listener {listener!r} failed: {exc}")
