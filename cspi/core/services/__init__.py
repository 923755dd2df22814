"""Scoring, sell signals and the market engine."""

from cspi.core.services.aggregation import (
    BASE_WEIGHTS,
    SCORING_ORDER,
    TIERS,
    classify,
    compute_breakdown,
    normalize,
    round_half_up,
)
from cspi.core.services.engine import MarketEngine
from cspi.core.services.sell_signals import evaluate_sell_signals

__all__ = [
    "MarketEngine",
    "BASE_WEIGHTS",
    "SCORING_ORDER",
    "TIERS",
    "classify",
    "compute_breakdown",
    "normalize",
    "round_half_up",
    "evaluate_sell_signals",
]
