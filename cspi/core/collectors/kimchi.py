"""Kimchi premium collector (scraped through the fetch racer)."""

from __future__ import annotations

from cspi.core.config import SourceConfig
from cspi.core.models import IndicatorName
from cspi.core.transport import FetchRacer, RaceRequest

from .base import IndicatorCollector
from .extraction import extract_kimchi_premium

NAME = IndicatorName.KIMCHI_PREMIUM.value


class KimchiPremiumCollector(IndicatorCollector):
    name = NAME

    def __init__(self, racer: FetchRacer, sources: SourceConfig):
        self.racer = racer
        self.sources = sources

    async def fetch(self) -> float:
        request = RaceRequest(name=NAME, extractor=extract_kimchi_premium, timeout=self.sources.kimchi_page_timeout)
        return await self.racer.race(self.sources.kimchi_page_url, request)
