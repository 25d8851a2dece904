"""
Tests for the aggregate market summary.
"""
import pandas as pd
import pytest

from techanalysis.data import generate_sample_price_data
from techanalysis.shared.types import (
    Momentum,
    Sentiment,
    SignalType,
    TechnicalSignal,
    TrendDirection,
    Volatility,
)
from techanalysis.signals.summary import (
    Summary,
    annualized_volatility,
    calculate_confidence,
    calculate_momentum,
    calculate_sentiment,
    calculate_trend_direction,
    calculate_volatility,
    generate_summary,
)


def _signal(signal, strength):
    return TechnicalSignal("RSI", signal, strength, 0.0, pd.Timestamp("2024-01-01"))


class TestSentiment:

    def test_no_signals_is_neutral(self):
        assert calculate_sentiment([]) == (Sentiment.NEUTRAL, 0.5)

    def test_holds_do_not_count(self):
        assert calculate_sentiment([_signal(SignalType.HOLD, 0.9)]) == (Sentiment.NEUTRAL, 0.5)

    def test_bullish_strength(self):
        overall, strength = calculate_sentiment([_signal(SignalType.BUY, 0.8), _signal(SignalType.SELL, 0.2)])

        assert overall == Sentiment.BULLISH
        # ratio 0.8 -> 0.5 + 0.3 * 0.8
        assert strength == pytest.approx(0.74)

    def test_bearish_strength_capped(self):
        overall, strength = calculate_sentiment([_signal(SignalType.SELL, 1.0)])
        assert overall == Sentiment.BEARISH
        assert strength == pytest.approx(0.9)

    def test_balanced_is_neutral(self):
        signals = [_signal(SignalType.BUY, 0.5), _signal(SignalType.SELL, 0.5)]
        assert calculate_sentiment(signals) == (Sentiment.NEUTRAL, 0.5)


@pytest.mark.parametrize("count,expected", [(0, 0.1), (1, 0.1), (5, 0.5), (9, 0.9), (50, 0.9)])
def test_confidence(count, expected):
    assert calculate_confidence(count) == pytest.approx(expected)


class TestTrendMomentumVolatility:

    def test_short_series_defaults(self, bar_factory):
        bars = bar_factory([100.0, 101.0, 102.0, 103.0])
        assert calculate_trend_direction(bars) == TrendDirection.SIDEWAYS
        assert calculate_momentum(bars) == Momentum.STABLE
        assert calculate_volatility(bars) == Volatility.MEDIUM

    def test_trend_up_and_down(self, uptrend_bars, bar_factory):
        assert calculate_trend_direction(uptrend_bars[-20:]) == TrendDirection.UP
        falling = bar_factory([200.0 - 2 * i for i in range(20)])
        assert calculate_trend_direction(falling) == TrendDirection.DOWN

    def test_momentum_increasing(self, bar_factory):
        closes = [100.0, 100.1, 100.0, 100.1, 100.0, 100.1, 105.0, 100.0, 105.0, 100.0, 105.0]
        assert calculate_momentum(bar_factory(closes)) == Momentum.INCREASING

    def test_momentum_decreasing(self, bar_factory):
        closes = [100.0, 105.0, 100.0, 105.0, 100.0, 105.0, 105.1, 105.0, 105.1, 105.0, 105.1]
        assert calculate_momentum(bar_factory(closes)) == Momentum.DECREASING

    def test_momentum_from_standstill(self, bar_factory):
        closes = [100.0] * 6 + [101.0, 102.0, 103.0, 104.0, 105.0]
        assert calculate_momentum(bar_factory(closes)) == Momentum.INCREASING

    def test_volatility_levels(self, flat_bars):
        assert calculate_volatility(flat_bars) == Volatility.LOW
        noisy = generate_sample_price_data(50, volatility=0.1, seed=11)
        assert annualized_volatility(noisy) > 0.30
        assert calculate_volatility(noisy[-20:]) == Volatility.HIGH


class TestGenerateSummary:

    def test_flat_market(self, flat_bars):
        summary = generate_summary([], flat_bars)

        assert summary.overall == Sentiment.NEUTRAL
        assert summary.confidence == pytest.approx(0.1)
        assert summary.trend_direction == TrendDirection.SIDEWAYS
        assert summary.momentum == Momentum.STABLE
        assert summary.volatility == Volatility.LOW

    def test_uses_trailing_window(self, bar_factory):
        # Falls for 30 bars, then rises for 20
        closes = [200.0 - i for i in range(30)] + [171.0 + 2 * i for i in range(20)]
        summary = generate_summary([], bar_factory(closes), window=20)
        assert summary.trend_direction == TrendDirection.UP

    def test_to_dict(self):
        assert Summary().to_dict() == {
            "overall": "neutral",
            "strength": 0.5,
            "confidence": 0.5,
            "trend_direction": "sideways",
            "momentum": "stable",
            "volatility": "medium",
        }
