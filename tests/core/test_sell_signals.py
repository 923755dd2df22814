"""Tests for staged sell signals."""

import pytest

from cspi.core.services import evaluate_sell_signals


def test_stages_one_and_two_active_in_extreme_greed():
    signals = evaluate_sell_signals(6.5, 90)

    assert signals.stage_1.active
    assert signals.stage_2.active
    assert not signals.stage_3.active
    assert not signals.stage_4.active
    assert signals.active_stages() == ["stage_1", "stage_2"]
    assert signals.stage_1.distance == pytest.approx(-1.5)
    assert signals.stage_3.distance == pytest.approx(1.0)


def test_stage_two_requires_extreme_greed():
    signals = evaluate_sell_signals(6.5, 84)

    assert signals.stage_1.active
    assert not signals.stage_2.active


def test_stage_two_inactive_when_fear_greed_missing():
    assert not evaluate_sell_signals(8.0, None).stage_2.active


def test_thresholds_are_inclusive():
    signals = evaluate_sell_signals(9.0, 10)

    assert signals.active_stages() == ["stage_1", "stage_3", "stage_4"]
    assert signals.stage_4.distance == 0.0


def test_missing_mvrv_deactivates_everything():
    signals = evaluate_sell_signals(None, 95)

    assert signals.active_stages() == []
    for _, stage in signals:
        assert stage.distance is None
