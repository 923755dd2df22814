"""Prometheus metrics helpers for the CSPI engine."""

from __future__ import annotations

from prometheus_client import CollectorRegistry, Counter, Gauge, Histogram, generate_latest


class MetricsCollector:
    """Collects and exposes Prometheus metrics for collection cycles."""

    def __init__(self, *, registry: CollectorRegistry | None = None) -> None:
        self.registry = registry or CollectorRegistry()
        self.cycle_duration_seconds = Histogram(
            "cspi_cycle_duration_seconds",
            "Wall time of a full indicator collection cycle.",
            buckets=(0.1, 0.5, 1.0, 2.5, 5.0, 10.0, 15.0, 30.0, float("inf")),
            registry=self.registry,
        )
        self.cycles_total = Counter(
            "cspi_cycles_total",
            "Completed collection cycles by outcome.",
            ("outcome",),
            registry=self.registry,
        )
        self.indicator_outcomes_total = Counter(
            "cspi_indicator_outcomes_total",
            "Indicator collector outcomes.",
            ("indicator", "outcome"),
            registry=self.registry,
        )
        self.relay_attempts_total = Counter(
            "cspi_relay_attempts_total",
            "Relay route attempts made by the fetch racer.",
            ("route", "outcome"),
            registry=self.registry,
        )
        self.cache_lookups_total = Counter(
            "cspi_cache_lookups_total",
            "Fetch cache lookups by result.",
            ("result",),
            registry=self.registry,
        )
        self.cspi_score = Gauge(
            "cspi_score",
            "Most recent composite score (NaN when unavailable).",
            registry=self.registry,
        )
        self.valid_indicators = Gauge(
            "cspi_valid_indicators",
            "Number of indicators used in the most recent score.",
            registry=self.registry,
        )

    def observe_cycle(self, latency_seconds: float, *, success: bool) -> None:
        """Record a finished collection cycle."""

        self.cycle_duration_seconds.observe(latency_seconds)
        self.cycles_total.labels(outcome="success" if success else "error").inc()

    def record_indicator(self, indicator: str, *, success: bool) -> None:
        """Record a single collector outcome."""

        self.indicator_outcomes_total.labels(indicator=indicator, outcome="success" if success else "failure").inc()

    def record_relay_attempt(self, route: str, *, success: bool) -> None:
        """Record a relay attempt outcome; cancelled losers are not recorded."""

        self.relay_attempts_total.labels(route=route, outcome="success" if success else "failure").inc()

    def record_cache_lookup(self, *, hit: bool) -> None:
        self.cache_lookups_total.labels(result="hit" if hit else "miss").inc()

    def set_score(self, score: float | None, valid_count: int) -> None:
        self.cspi_score.set(float("nan") if score is None else score)
        self.valid_indicators.set(valid_count)

    def render(self) -> bytes:
        """Render metrics in Prometheus exposition format."""

        return generate_latest(self.registry)


_DEFAULT_COLLECTOR: MetricsCollector | None = None


def get_metrics_collector() -> MetricsCollector:
    """Return the global metrics collector instance."""

    global _DEFAULT_COLLECTOR
    if _DEFAULT_COLLECTOR is None:
        _DEFAULT_COLLECTOR = MetricsCollector()
    return _DEFAULT_COLLECTOR


def configure_metrics_collector(collector: MetricsCollector | None) -> None:
    """Override the global metrics collector for application wiring or tests."""

    global _DEFAULT_COLLECTOR
    _DEFAULT_COLLECTOR = collector
