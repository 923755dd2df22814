"""Composite score aggregation and risk-tier classification.

Only indicators that are present contribute. Their base weights are
renormalised so the weights in use always sum to one, which keeps the score
on the same 0-100 scale no matter how many sources failed.
"""

from __future__ import annotations

import math
from collections.abc import Callable, Mapping

from cspi.core.models import CSPIBreakdown, CSPILevel, IndicatorName

TOTAL_INDICATORS = 6
MIN_INDICATORS_FOR_TIER = 4

BASE_WEIGHTS: dict[IndicatorName, float] = {
    IndicatorName.MVRV: 0.30,
    IndicatorName.ALTCOIN_SEASON: 0.25,
    IndicatorName.KIMCHI_PREMIUM: 0.20,
    IndicatorName.BTC_DOMINANCE: 0.15,
    IndicatorName.FEAR_GREED: 0.05,
    IndicatorName.RSI: 0.05,
}

# accumulation order of the weighted sum
SCORING_ORDER: tuple[IndicatorName, ...] = (
    IndicatorName.MVRV,
    IndicatorName.FEAR_GREED,
    IndicatorName.ALTCOIN_SEASON,
    IndicatorName.RSI,
    IndicatorName.KIMCHI_PREMIUM,
    IndicatorName.BTC_DOMINANCE,
)

# (exclusive upper bound, level, recommendation); scores at or above the last bound are HIGH
TIERS: tuple[tuple[float, CSPILevel, str], ...] = (
    (25.0, CSPILevel.LOW, "aggressive buy"),
    (45.0, CSPILevel.MEDIUM_LOW, "gradual buy"),
    (65.0, CSPILevel.MEDIUM, "hold/watch"),
    (80.0, CSPILevel.MEDIUM_HIGH, "partial sell"),
)
TOP_TIER: tuple[CSPILevel, str] = (CSPILevel.HIGH, "aggressive sell")


def _clamp(value: float, low: float = 0.0, high: float = 100.0) -> float:
    return max(low, min(high, value))


def round_half_up(value: float, digits: int = 1) -> float:
    """Round halves towards +inf, the way the dashboard reports numbers."""
    factor = 10**digits
    return math.floor(value * factor + 0.5) / factor


NORMALIZERS: dict[IndicatorName, Callable[[float], float]] = {
    # no lower clamp: a negative MVRV drags the score down
    IndicatorName.MVRV: lambda v: min(v / 12.0 * 100, 100.0),
    IndicatorName.FEAR_GREED: float,
    IndicatorName.ALTCOIN_SEASON: float,
    IndicatorName.RSI: float,
    IndicatorName.KIMCHI_PREMIUM: lambda v: _clamp((v + 20) / 40 * 100),
    IndicatorName.BTC_DOMINANCE: lambda v: _clamp((70 - v) / 35 * 100),
}


def normalize(indicator: IndicatorName, value: float) -> float:
    """Map a raw indicator value onto the 0-100 risk scale."""
    return NORMALIZERS[indicator](value)


def compute_breakdown(values: Mapping[IndicatorName, float | None]) -> CSPIBreakdown:
    """Score whichever indicators are present.

    Args:
        values: raw indicator values; ``None`` or missing means unavailable

    Returns:
        The breakdown; ``total_score`` is None when nothing is available.
    """
    normalized: dict[IndicatorName, float] = {}
    total_weight = 0.0
    for indicator in SCORING_ORDER:
        value = values.get(indicator)
        if value is None:
            continue
        normalized[indicator] = normalize(indicator, value)
        total_weight += BASE_WEIGHTS[indicator]

    if total_weight == 0:
        return CSPIBreakdown()

    score = 0.0
    contributions: dict[IndicatorName, float] = {}
    normalized_values: dict[IndicatorName, float] = {}
    adjusted_weights: dict[IndicatorName, float] = {}
    for indicator, norm in normalized.items():
        adjusted = BASE_WEIGHTS[indicator] / total_weight
        contribution = norm * adjusted
        score += contribution
        contributions[indicator] = round_half_up(contribution, 1)
        normalized_values[indicator] = round_half_up(norm, 1)
        adjusted_weights[indicator] = adjusted

    return CSPIBreakdown(
        total_score=round_half_up(score, 1),
        normalized_values=normalized_values,
        contributions=contributions,
        adjusted_weights=adjusted_weights,
        valid_data_count=len(normalized),
        total_weight=round_half_up(total_weight, 2),
    )


def classify(score: float | None, valid_data_count: int) -> tuple[CSPILevel, str]:
    """Return ``(level, recommendation)``.

    Fewer than four indicators force ``PARTIAL`` whatever the score is.
    Tier bounds are lower-inclusive, so 25/45/65/80 land in the higher tier.
    """
    if valid_data_count == 0 or score is None:
        return CSPILevel.NO_DATA, "collecting data"
    if valid_data_count < MIN_INDICATORS_FOR_TIER:
        return CSPILevel.PARTIAL, f"partial data ({valid_data_count}/{TOTAL_INDICATORS})"
    for upper, level, recommendation in TIERS:
        if score < upper:
            return level, recommendation
    return TOP_TIER
