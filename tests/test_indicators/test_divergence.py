"""
Tests for price/indicator divergence detection.
"""
import pandas as pd
import pytest

from techanalysis.indicators.divergence import apply_divergence, detect_divergence
from techanalysis.indicators.results import RSIResult
from techanalysis.shared.types import SignalType


class TestDetectDivergence:

    def test_lower_price_higher_indicator_is_bullish(self):
        flags = detect_divergence([10, 9, 8], [30, 35, 40], lookback=2)
        assert flags == ["none", "none", "bullish"]

    def test_higher_price_lower_indicator_is_bearish(self):
        flags = detect_divergence([10, 11, 12], [70, 65, 60], lookback=2)
        assert flags == ["none", "none", "bearish"]

    def test_no_full_window_means_no_flags(self):
        assert detect_divergence([10, 9], [30, 35], lookback=2) == ["none", "none"]

    def test_zone_restricts_bullish_to_low_readings(self):
        prices = [10, 9, 8]
        assert detect_divergence(prices, [30, 35, 40], lookback=2, zone=50) == ["none", "none", "bullish"]
        assert detect_divergence(prices, [55, 60, 65], lookback=2, zone=50) == ["none", "none", "none"]

    def test_earliest_bar_decides_without_preference(self):
        # Against bar 0 bearish, against bar 1 bullish
        prices = [9, 11, 10]
        values = [50, 30, 40]
        assert detect_divergence(prices, values, lookback=2)[-1] == "bearish"
        assert detect_divergence(prices, values, lookback=2, prefer_bullish=True)[-1] == "bullish"


def test_apply_divergence_boosts_and_relabels():
    date = pd.Timestamp("2024-01-01")
    results = [
        RSIResult(date, 40.0, SignalType.HOLD, 0.34, False, False),
        RSIResult(date, 25.0, SignalType.BUY, 0.95, False, True),
        RSIResult(date, 60.0, SignalType.HOLD, 0.38, False, False),
    ]
    out = apply_divergence(results, ["bullish", "bullish", "none"])

    assert out[0].divergence == "bullish"
    assert out[0].signal == SignalType.BUY
    assert out[0].strength == pytest.approx(0.54)
    assert out[1].strength == 1.0
    assert out[2] is results[2]
    # inputs are untouched
    assert results[0].divergence == "none"
