"""
Tests for the Stochastic, Williams %R and ADX oscillators.
"""
import logging

import pytest

from techanalysis.indicators.momentum import (
    analyze_adx,
    analyze_momentum,
    analyze_stochastic,
    analyze_williams_r,
    calculate_adx,
    calculate_stochastic,
    calculate_williams_r,
    generate_momentum_signals,
)
from techanalysis.shared.errors import InvalidParameterError
from techanalysis.shared.types import SignalType


class TestStochastic:

    def test_range_and_length(self, sample_bars):
        results = calculate_stochastic(sample_bars, k_period=14, d_period=3)

        assert len(results) == len(sample_bars) - 14 - 3 + 2
        assert results[-1].date == sample_bars[-1].date
        assert all(0 <= r.k <= 100 and 0 <= r.d <= 100 for r in results)

    def test_d_is_average_of_k(self, sample_bars):
        results = calculate_stochastic(sample_bars, k_period=14, d_period=1)
        assert all(r.k == pytest.approx(r.d) for r in results)

    def test_zero_range_reads_50(self, flat_bars):
        results, signals = analyze_stochastic(flat_bars)

        assert all(r.k == 50.0 and r.d == 50.0 for r in results)
        assert signals == []

    def test_buy_needs_k_above_d_in_oversold_zone(self, sample_bars):
        for r in calculate_stochastic(sample_bars):
            if r.signal == SignalType.BUY:
                assert r.k <= 20 and r.d <= 20 and r.k > r.d
            elif r.signal == SignalType.SELL:
                assert r.k >= 80 and r.d >= 80 and r.k < r.d

    def test_invalid_k_period(self, declining_bars):
        with pytest.raises(InvalidParameterError, match="Invalid K period"):
            calculate_stochastic(declining_bars, k_period=20)

    def test_invalid_d_period(self, declining_bars):
        with pytest.raises(InvalidParameterError, match="Invalid D period"):
            calculate_stochastic(declining_bars, k_period=14, d_period=10)


class TestWilliamsR:

    def test_range(self, sample_bars):
        results = calculate_williams_r(sample_bars, period=14)

        assert len(results) == len(sample_bars) - 13
        assert all(-100 <= r.value <= 0 for r in results)

    def test_falling_close_at_range_bottom_is_oversold(self, bar_factory):
        bars = bar_factory([100.0 - i for i in range(20)], spread=0.0)
        results, signals = analyze_williams_r(bars, period=14)

        assert results[-1].value == pytest.approx(-100.0)
        assert results[-1].signal == SignalType.BUY
        # 0.6 + 20 / 20, capped
        assert results[-1].strength == pytest.approx(0.9)
        assert signals[-1].indicator == "Williams %R"

    def test_zero_range_reads_minus_50(self, flat_bars):
        results = calculate_williams_r(flat_bars)
        assert all(r.value == -50.0 and r.signal == SignalType.HOLD for r in results)

    @pytest.mark.parametrize("period", [0, 20])
    def test_invalid_period(self, declining_bars, period):
        with pytest.raises(InvalidParameterError, match="Williams %R"):
            calculate_williams_r(declining_bars, period=period)


class TestADX:

    def test_length_and_range(self, sample_bars):
        results = calculate_adx(sample_bars, period=14)

        assert len(results) == len(sample_bars) - 2 * 14 + 1
        assert results[0].date == sample_bars[2 * 14 - 1].date
        for r in results:
            assert 0 <= r.adx <= 100
            assert r.plus_di >= 0 and r.minus_di >= 0

    def test_trend_classification(self, sample_bars):
        for r in calculate_adx(sample_bars):
            if r.adx >= 25:
                assert r.trend == "strong"
            elif r.adx >= 20:
                assert r.trend == "weak"
            else:
                assert r.trend == "no_trend" and r.direction == "neutral"

    def test_uptrend_is_strong_and_bullish(self, uptrend_bars):
        results, signals = analyze_adx(uptrend_bars)

        assert results[-1].plus_di > results[-1].minus_di
        assert results[-1].direction == "bullish"
        assert signals
        assert all(s.signal == SignalType.BUY for s in signals)
        assert all(s.strength <= 0.8 for s in signals)

    def test_flat_series_has_no_trend(self, flat_bars):
        results, signals = analyze_adx(flat_bars)
        assert all(r.adx == 0 and r.trend == "no_trend" for r in results)
        assert signals == []

    def test_too_little_data(self, declining_bars):
        with pytest.raises(InvalidParameterError, match="Invalid period for ADX"):
            calculate_adx(declining_bars, period=14)


class TestAnalyzeMomentum:

    def test_all_three_run(self, sample_bars):
        stochastic, williams, adx, signals = analyze_momentum(sample_bars, "TEST")

        assert stochastic and williams and adx
        expected = generate_momentum_signals(stochastic, williams, adx, "TEST")
        assert signals == expected

    def test_unfit_parameters_are_skipped_with_warning(self, declining_bars, caplog):
        with caplog.at_level(logging.WARNING):
            stochastic, williams, adx, _ = analyze_momentum(
                declining_bars,
                stochastic={"k_period": 5, "d_period": 3},
                williams_r={"period": 5},
                adx={"period": 14},
            )

        assert stochastic and williams
        assert adx == []
        assert "Skipping ADX" in caplog.text

    def test_signal_order(self, uptrend_bars):
        _, _, _, signals = analyze_momentum(uptrend_bars)
        order = {"Stochastic": 0, "Williams %R": 1, "ADX": 2}
        ranks = [order[s.indicator] for s in signals]
        assert ranks == sorted(ranks)
