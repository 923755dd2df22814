"""Data models."""

from cspi.core.models.indicators import CSPILevel, IndicatorName
from cspi.core.models.results import (
    CollectionResult,
    CSPIBreakdown,
    FearGreedReading,
    IndicatorResult,
    PriceQuote,
    SellSignals,
    SellSignalStage,
)
from cspi.core.models.snapshot import MarketSnapshot

__all__ = [
    "CSPILevel",
    "IndicatorName",
    "MarketSnapshot",
    "IndicatorResult",
    "PriceQuote",
    "FearGreedReading",
    "CSPIBreakdown",
    "SellSignalStage",
    "SellSignals",
    "CollectionResult",
]
