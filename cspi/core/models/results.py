"""Transient results produced by collectors, the aggregation engine and a cycle."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from pydantic import BaseModel, Field

from .indicators import IndicatorName
from .snapshot import MarketSnapshot


@dataclass(frozen=True)
class PriceQuote:
    """BTC/USD market data from the price collector.

    Optional fields are ``None`` when the source does not report them at all.
    """

    price: float
    change_24h: float | None = None
    market_cap: float | None = None
    volume: float | None = None


@dataclass(frozen=True)
class FearGreedReading:
    """Fear & Greed index value and its label."""

    value: int
    classification: str | None


@dataclass(frozen=True)
class IndicatorResult:
    """Outcome of one collector: a value or a failure reason, never both."""

    name: str
    ok: bool
    value: Any = None
    reason: str | None = None

    @classmethod
    def success(cls, name: str, value: Any) -> IndicatorResult:
        return cls(name=name, ok=True, value=value)

    @classmethod
    def failure(cls, name: str, reason: str) -> IndicatorResult:
        return cls(name=name, ok=False, reason=reason)


class CSPIBreakdown(BaseModel):
    """How the composite score was assembled."""

    total_score: float | None = None
    normalized_values: dict[IndicatorName, float] = Field(default_factory=dict)
    contributions: dict[IndicatorName, float] = Field(default_factory=dict)
    adjusted_weights: dict[IndicatorName, float] = Field(default_factory=dict)
    valid_data_count: int = Field(0, ge=0, le=6)
    total_weight: float = Field(0.0, ge=0, le=1.0)


class SellSignalStage(BaseModel):
    """One staged sell trigger."""

    condition: str
    threshold: float
    active: bool
    distance: float | None = None


class SellSignals(BaseModel):
    """All four staged sell triggers, evaluated independently."""

    stage_1: SellSignalStage
    stage_2: SellSignalStage
    stage_3: SellSignalStage
    stage_4: SellSignalStage

    def active_stages(self) -> list[str]:
        return [name for name, stage in self if stage.active]


class CollectionResult(BaseModel):
    """Everything a consumer needs after a refresh."""

    success: bool
    snapshot: MarketSnapshot
    breakdown: CSPIBreakdown | None = None
    sell_signals: SellSignals | None = None
    error: str | None = None
    outcomes: dict[str, IndicatorResult] = Field(default_factory=dict)
