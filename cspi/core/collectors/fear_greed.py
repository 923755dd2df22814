"""Fear & Greed index collector."""

from __future__ import annotations

import math
import re
from typing import Any

import httpx

from cspi.core.config import SourceConfig
from cspi.core.exceptions import ExtractionError
from cspi.core.models import FearGreedReading, IndicatorName

from .base import IndicatorCollector, fetch_json

NAME = IndicatorName.FEAR_GREED.value

# leading integer, so "50.5" reads as 50 like the dashboard's parseInt
LEADING_INT = re.compile(r"\s*([-+]?\d+)")


def parse_fear_greed(data: Any) -> FearGreedReading:
    """Take the newest entry of the ``data`` array."""
    entries = data.get("data") if isinstance(data, dict) else None
    if not entries or not isinstance(entries, list) or not isinstance(entries[0], dict):
        raise ExtractionError("Invalid Fear & Greed data format", NAME)
    first = entries[0]
    raw = first.get("value")
    match = LEADING_INT.match(raw) if isinstance(raw, str) else None
    if isinstance(raw, int | float) and not isinstance(raw, bool) and math.isfinite(raw):
        value = int(raw)
    elif match is not None:
        value = int(match.group(1))
    else:
        raise ExtractionError(f"Fear & Greed value is not an integer: {raw!r}", NAME)
    if not 0 <= value <= 100:
        raise ExtractionError(f"Fear & Greed value out of range: {value}", NAME)
    return FearGreedReading(value=value, classification=first.get("value_classification"))


class FearGreedCollector(IndicatorCollector):
    name = NAME

    def __init__(self, client: httpx.AsyncClient, sources: SourceConfig):
        self.client = client
        self.sources = sources

    async def fetch(self) -> FearGreedReading:
        data = await fetch_json(self.client, self.sources.fear_greed_url, name=NAME, timeout=self.sources.api_timeout)
        return parse_fear_greed(data)
