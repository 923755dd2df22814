"""Staged sell triggers derived from MVRV and Fear & Greed."""

from __future__ import annotations

from cspi.core.models import SellSignals, SellSignalStage


def _stage(condition: str, threshold: float, mvrv: float | None, extra_ok: bool = True) -> SellSignalStage:
    if mvrv is None:
        return SellSignalStage(condition=condition, threshold=threshold, active=False, distance=None)
    return SellSignalStage(
        condition=condition,
        threshold=threshold,
        active=mvrv >= threshold and extra_ok,
        distance=threshold - mvrv,
    )


def evaluate_sell_signals(mvrv: float | None, fear_greed: int | None) -> SellSignals:
    """Evaluate all four stages from scratch.

    Stages are independent; a null input leaves a stage inactive.
    ``distance`` is ``threshold - mvrv`` and goes negative once triggered.
    """
    greed_extreme = fear_greed is not None and fear_greed >= 85
    return SellSignals(
        stage_1=_stage("MVRV >= 5.0", 5.0, mvrv),
        stage_2=_stage("MVRV >= 6.0 and F&G >= 85", 6.0, mvrv, greed_extreme),
        stage_3=_stage("MVRV >= 7.5", 7.5, mvrv),
        stage_4=_stage("MVRV >= 9.0", 9.0, mvrv),
    )
