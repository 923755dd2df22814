"""BTC price / market data collector."""

from __future__ import annotations

from typing import Any

import httpx

from cspi.core.config import SourceConfig
from cspi.core.exceptions import ExtractionError
from cspi.core.models import PriceQuote
from cspi.core.patterns import with_fallback

from .base import IndicatorCollector, as_finite_float, fetch_json

NAME = "price"


def parse_coingecko(data: Any) -> PriceQuote:
    """Parse a CoinGecko ``simple/price`` payload; optional fields default to 0."""
    if not isinstance(data, dict) or not isinstance(data.get("bitcoin"), dict):
        raise ExtractionError("Invalid BTC data format", NAME)
    btc = data["bitcoin"]
    price = as_finite_float(btc.get("usd"), name=NAME, field="usd")
    if price <= 0:
        raise ExtractionError(f"BTC price must be positive, got {price}", NAME)
    market_cap = as_finite_float(btc.get("usd_market_cap") or 0, name=NAME, field="usd_market_cap")
    volume = as_finite_float(btc.get("usd_24h_vol") or 0, name=NAME, field="usd_24h_vol")
    if market_cap < 0 or volume < 0:
        raise ExtractionError(
            f"BTC market cap and volume must not be negative, got {market_cap} / {volume}",
            NAME,
            {"market_cap": market_cap, "volume": volume},
        )
    return PriceQuote(
        price=price,
        change_24h=as_finite_float(btc.get("usd_24h_change") or 0, name=NAME, field="usd_24h_change"),
        market_cap=market_cap,
        volume=volume,
    )


def parse_coinbase(data: Any) -> PriceQuote:
    """Parse a Coinbase ``exchange-rates`` payload; it only carries the price, so the rest stay ``None``."""
    try:
        raw = data["data"]["rates"]["USD"]
    except (KeyError, TypeError) as exc:
        raise ExtractionError("Invalid Coinbase exchange-rate format", NAME) from exc
    price = as_finite_float(raw, name=NAME, field="rates.USD")
    if price <= 0:
        raise ExtractionError(f"BTC price must be positive, got {price}", NAME)
    return PriceQuote(price=price)


class BtcPriceCollector(IndicatorCollector):
    """CoinGecko market data with a Coinbase spot-price fallback."""

    name = NAME

    def __init__(self, client: httpx.AsyncClient, sources: SourceConfig):
        self.client = client
        self.sources = sources

    async def fetch_primary(self) -> PriceQuote:
        data = await fetch_json(self.client, self.sources.btc_price_url, name=NAME, timeout=self.sources.api_timeout)
        return parse_coingecko(data)

    async def fetch_backup(self) -> PriceQuote:
        data = await fetch_json(
            self.client, self.sources.btc_price_backup_url, name=NAME, timeout=self.sources.api_timeout
        )
        return parse_coinbase(data)

    async def fetch(self) -> PriceQuote:
        return await with_fallback(NAME, self.fetch_primary, self.fetch_backup)
