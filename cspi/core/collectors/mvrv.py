"""MVRV Z-Score collector: companion service first, scraped chart page as backup."""

from __future__ import annotations

import time
from collections.abc import Callable
from typing import Any

import httpx

from cspi.core.config import SourceConfig
from cspi.core.exceptions import ExtractionError
from cspi.core.models import IndicatorName
from cspi.core.patterns import with_fallback
from cspi.core.transport import FetchRacer, RaceRequest

from .base import IndicatorCollector, as_finite_float, fetch_json
from .extraction import extract_mvrv, mvrv_in_range

NAME = IndicatorName.MVRV.value
BACKUP_NAME = "mvrv_backup"


def parse_mvrv_service(data: Any) -> float:
    """Parse ``{success, data: {mvrv_z_score | valuation_ratio}, error?}``."""
    if not isinstance(data, dict):
        raise ExtractionError("MVRV service returned unexpected payload", NAME)
    if not data.get("success"):
        raise ExtractionError(f"API error: {data.get('error')}", NAME)
    body = data.get("data") or {}
    raw = body.get("mvrv_z_score", body.get("valuation_ratio")) if isinstance(body, dict) else None
    value = as_finite_float(raw, name=NAME, field="mvrv_z_score")
    if not mvrv_in_range(value):
        raise ExtractionError(f"MVRV value out of range: {value}", NAME)
    return value


class MvrvCollector(IndicatorCollector):
    name = NAME

    def __init__(
        self,
        client: httpx.AsyncClient,
        racer: FetchRacer,
        sources: SourceConfig,
        *,
        clock_ms: Callable[[], int] = lambda: int(time.time() * 1000),
    ):
        self.client = client
        self.racer = racer
        self.sources = sources
        self._clock_ms = clock_ms

    async def fetch_primary(self) -> float:
        data = await fetch_json(
            self.client,
            self.sources.mvrv_service_url,
            name=NAME,
            timeout=self.sources.mvrv_service_timeout,
        )
        return parse_mvrv_service(data)

    async def fetch_backup(self) -> float:
        url = f"{self.sources.mvrv_page_url}?t={self._clock_ms()}"
        request = RaceRequest(name=BACKUP_NAME, extractor=extract_mvrv, timeout=self.sources.mvrv_page_timeout)
        return await self.racer.race(url, request)

    async def fetch(self) -> float:
        return await with_fallback(NAME, self.fetch_primary, self.fetch_backup)
