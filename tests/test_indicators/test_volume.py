"""
Tests for OBV, Volume-Price Trend and the Accumulation/Distribution line.
"""
import pandas as pd
import pytest

from techanalysis.indicators.volume import (
    analyze_volume,
    calculate_accumulation_distribution,
    calculate_obv,
    calculate_volume_price_trend,
    generate_volume_signals,
)
from techanalysis.shared.types import PriceBar, SignalType


def _bars(closes, volumes, highs=None, lows=None):
    dates = pd.date_range("2024-01-01", periods=len(closes), freq="D")
    highs = highs or [c + 1 for c in closes]
    lows = lows or [c - 1 for c in closes]
    return [
        PriceBar(date=d, open=c, high=h, low=lo, close=c, volume=v)
        for d, c, v, h, lo in zip(dates, closes, volumes, highs, lows)
    ]


class TestOBV:

    def test_accumulates_signed_volume(self):
        bars = _bars([10, 11, 10, 10, 12], [100, 200, 300, 400, 500])
        values = [r.value for r in calculate_obv(bars)]
        assert values == [100, 300, 0, 0, 500]

    def test_flat_prices_keep_obv_constant(self, flat_bars):
        results = calculate_obv(flat_bars)

        assert all(r.value == flat_bars[0].volume for r in results)
        assert all(r.signal == SignalType.HOLD and r.trend == "neutral" for r in results)

    def test_uptrend_is_bullish_after_window(self, uptrend_bars):
        results = calculate_obv(uptrend_bars)

        assert all(r.signal == SignalType.HOLD for r in results[:10])
        assert all(r.trend == "bullish" for r in results[10:])
        assert all(r.strength <= 0.8 for r in results)

    def test_empty_series(self):
        assert calculate_obv([]) == []


class TestVolumePriceTrend:

    def test_starts_at_zero_and_adds_weighted_change(self):
        bars = _bars([10, 11, 11], [100, 200, 300])
        values = [r.value for r in calculate_volume_price_trend(bars)]
        assert values == pytest.approx([0.0, 20.0, 20.0])


class TestAccumulationDistribution:

    def test_close_at_high_is_accumulation(self):
        bars = _bars([10, 11], [100, 100], highs=[10, 11], lows=[9, 10])
        results = calculate_accumulation_distribution(bars)

        assert [r.value for r in results] == pytest.approx([100.0, 200.0])
        assert all(r.trend == "accumulation" and r.signal == SignalType.BUY for r in results)
        assert results[0].strength == pytest.approx(0.8)

    def test_zero_range_contributes_nothing(self, flat_bars):
        results = calculate_accumulation_distribution(flat_bars)
        assert all(r.value == 0.0 and r.signal == SignalType.HOLD for r in results)


class TestVolumeSignals:

    def test_flat_series_gives_no_signals(self, flat_bars):
        obv, vpt, ad, signals = analyze_volume(flat_bars)

        assert len(obv) == len(vpt) == len(ad) == len(flat_bars)
        assert signals == []

    def test_signal_names_and_order(self, sample_bars):
        obv, vpt, ad, signals = analyze_volume(sample_bars)
        order = {"OBV": 0, "VPT": 1, "A/D Line": 2}

        ranks = [order[s.indicator] for s in signals]
        assert ranks == sorted(ranks)
        assert signals == generate_volume_signals(obv, vpt, ad)

    def test_divergence_relabels_obv(self, sample_bars):
        plain, _, _, _ = analyze_volume(sample_bars, detect_divergences=False)
        enriched, _, _, _ = analyze_volume(sample_bars, detect_divergences=True, lookback=5)

        assert all(r.divergence == "none" for r in plain)
        for before, after in zip(plain, enriched):
            if after.divergence == "bullish":
                assert after.signal == SignalType.BUY
                assert after.strength == pytest.approx(min(1.0, before.strength + 0.2))
            elif after.divergence == "bearish":
                assert after.signal == SignalType.SELL
