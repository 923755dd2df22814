"""Indicator collector contract and shared fetch helpers."""

from __future__ import annotations

import asyncio
import math
from abc import ABC, abstractmethod
from typing import Any

import httpx
from loguru import logger

from cspi.core.exceptions import ExtractionError, NetworkError
from cspi.core.models import IndicatorResult
from cspi.core.patterns import RECOVERABLE_ERRORS


class IndicatorCollector(ABC):
    """Fetches, parses and validates a single indicator.

    ``fetch`` raises on any failure; ``collect`` folds the outcome into an
    :class:`IndicatorResult` so callers always get a definite answer.
    """

    name: str

    @abstractmethod
    async def fetch(self) -> Any:
        """Return the validated value or raise."""

    async def collect(self) -> IndicatorResult:
        log = logger.bind(indicator=self.name)
        try:
            value = await self.fetch()
        except RECOVERABLE_ERRORS as exc:
            log.bind(error_code=getattr(exc, "error_code", None)).error(f"{self.name} collection failed: {exc}")
            return IndicatorResult.failure(self.name, str(exc))
        log.info(f"{self.name} collected: {value}")
        return IndicatorResult.success(self.name, value)


async def fetch_json(client: httpx.AsyncClient, url: str, *, name: str, timeout: float) -> Any:
    """GET ``url`` and decode JSON, mapping every failure onto the CSPI error taxonomy."""
    try:
        async with asyncio.timeout(timeout):
            response = await client.get(url, headers={"Accept": "application/json"})
    except TimeoutError as exc:
        raise NetworkError(f"{name} request timed out after {timeout}s", name) from exc
    except httpx.HTTPError as exc:
        raise NetworkError(f"{name} request failed: {type(exc).__name__}: {exc}", name) from exc

    if not response.is_success:
        raise NetworkError(
            f"HTTP error! status: {response.status_code} {response.reason_phrase}".rstrip(),
            name,
            response.status_code,
        )
    try:
        return response.json()
    except ValueError as exc:
        raise ExtractionError(f"{name} returned invalid JSON", name) from exc


def as_finite_float(value: Any, *, name: str, field: str) -> float:
    """Coerce an upstream number (or numeric string) to a finite float."""
    if value is None or isinstance(value, bool):
        raise ExtractionError(f"{name} field '{field}' is missing", name)
    try:
        number = float(value)
    except (TypeError, ValueError, OverflowError) as exc:
        raise ExtractionError(f"{name} field '{field}' is not numeric: {value!r}", name) from exc
    if not math.isfinite(number):
        raise ExtractionError(f"{name} field '{field}' is not finite", name)
    return number
