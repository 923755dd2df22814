"""Tests for the Prometheus metrics collector."""

import math

from prometheus_client import CollectorRegistry

from cspi.core.monitoring.metrics import MetricsCollector, configure_metrics_collector, get_metrics_collector


def test_observe_cycle_updates_metrics() -> None:
    registry = CollectorRegistry()
    collector = MetricsCollector(registry=registry)

    collector.observe_cycle(1.5, success=True)
    collector.observe_cycle(0.5, success=False)

    assert registry.get_sample_value("cspi_cycle_duration_seconds_count") == 2.0
    assert registry.get_sample_value("cspi_cycle_duration_seconds_sum") == 2.0
    assert registry.get_sample_value("cspi_cycles_total", {"outcome": "success"}) == 1.0
    assert registry.get_sample_value("cspi_cycles_total", {"outcome": "error"}) == 1.0


def test_indicator_relay_and_cache_counters() -> None:
    registry = CollectorRegistry()
    collector = MetricsCollector(registry=registry)

    collector.record_indicator("mvrv", success=True)
    collector.record_indicator("mvrv", success=False)
    collector.record_relay_attempt("allorigins", success=False)
    collector.record_cache_lookup(hit=True)
    collector.record_cache_lookup(hit=False)
    collector.record_cache_lookup(hit=False)

    assert registry.get_sample_value("cspi_indicator_outcomes_total", {"indicator": "mvrv", "outcome": "success"}) == 1.0
    assert registry.get_sample_value("cspi_indicator_outcomes_total", {"indicator": "mvrv", "outcome": "failure"}) == 1.0
    assert registry.get_sample_value("cspi_relay_attempts_total", {"route": "allorigins", "outcome": "failure"}) == 1.0
    assert registry.get_sample_value("cspi_cache_lookups_total", {"result": "miss"}) == 2.0


def test_score_gauge_is_nan_without_data() -> None:
    registry = CollectorRegistry()
    collector = MetricsCollector(registry=registry)

    collector.set_score(None, 0)

    assert math.isnan(registry.get_sample_value("cspi_score"))
    assert registry.get_sample_value("cspi_valid_indicators") == 0.0


def test_render_and_global_override() -> None:
    collector = MetricsCollector(registry=CollectorRegistry())
    configure_metrics_collector(collector)
    try:
        collector.set_score(42.0, 5)
        assert get_metrics_collector() is collector
        assert b"cspi_score 42.0" in collector.render()
    finally:
        configure_metrics_collector(None)

    assert get_metrics_collector() is not collector
