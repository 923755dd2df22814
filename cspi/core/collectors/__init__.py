"""Indicator collectors."""

from __future__ import annotations

import httpx

from cspi.core.collectors.base import IndicatorCollector, as_finite_float, fetch_json
from cspi.core.collectors.degraded import DEGRADED_INDICATORS, UnavailableCollector
from cspi.core.collectors.extraction import (
    extract_kimchi_premium,
    extract_mvrv,
    kimchi_candidates,
)
from cspi.core.collectors.fear_greed import FearGreedCollector, parse_fear_greed
from cspi.core.collectors.kimchi import KimchiPremiumCollector
from cspi.core.collectors.mvrv import MvrvCollector, parse_mvrv_service
from cspi.core.collectors.price import BtcPriceCollector, parse_coinbase, parse_coingecko
from cspi.core.config import SourceConfig
from cspi.core.transport import FetchRacer


def build_default_collectors(
    client: httpx.AsyncClient,
    racer: FetchRacer,
    sources: SourceConfig,
) -> dict[str, IndicatorCollector]:
    """Wire the standard collector set, keyed by collector name."""
    collectors: list[IndicatorCollector] = [
        BtcPriceCollector(client, sources),
        FearGreedCollector(client, sources),
        MvrvCollector(client, racer, sources),
        KimchiPremiumCollector(racer, sources),
    ]
    collectors.extend(UnavailableCollector(indicator.value) for indicator in DEGRADED_INDICATORS)
    return {collector.name: collector for collector in collectors}


__all__ = [
    "IndicatorCollector",
    "BtcPriceCollector",
    "FearGreedCollector",
    "MvrvCollector",
    "KimchiPremiumCollector",
    "UnavailableCollector",
    "DEGRADED_INDICATORS",
    "build_default_collectors",
    "extract_mvrv",
    "extract_kimchi_premium",
    "kimchi_candidates",
    "parse_coingecko",
    "parse_coinbase",
    "parse_fear_greed",
    "parse_mvrv_service",
    "fetch_json",
    "as_finite_float",
]
