"""Collectors for indicators that currently have no working source."""

from __future__ import annotations

from loguru import logger

from cspi.core.exceptions import IndicatorUnavailableError
from cspi.core.models import IndicatorName, IndicatorResult

from .base import IndicatorCollector


class UnavailableCollector(IndicatorCollector):
    """Always fails; its indicator contributes null to the score."""

    def __init__(self, name: str):
        self.name = name

    async def fetch(self) -> None:
        raise IndicatorUnavailableError(self.name)

    async def collect(self) -> IndicatorResult:
        logger.bind(indicator=self.name).debug(f"{self.name} has no source, reporting null")
        return IndicatorResult.failure(self.name, str(IndicatorUnavailableError(self.name)))


DEGRADED_INDICATORS = (
    IndicatorName.RSI,
    IndicatorName.ALTCOIN_SEASON,
    IndicatorName.BTC_DOMINANCE,
)
