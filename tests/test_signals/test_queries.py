"""
Tests for the signal query helpers.
"""
import pandas as pd
import pytest

from techanalysis.shared.types import SignalType, TechnicalSignal
from techanalysis.signals.queries import (
    get_consensus_signals,
    get_signals_by_indicator,
    get_strong_signals,
    signals_to_frame,
)

DAY1 = pd.Timestamp("2024-01-01")
DAY2 = pd.Timestamp("2024-01-02")


@pytest.fixture
def signals():
    return [
        TechnicalSignal("RSI", SignalType.BUY, 0.9, 25.0, DAY1, "RSI oversold"),
        TechnicalSignal("MACD", SignalType.BUY, 0.7, -0.2, DAY1, "MACD crossover"),
        TechnicalSignal("OBV", SignalType.SELL, 0.6, 1e6, DAY1, "OBV bearish"),
        TechnicalSignal("ADX", SignalType.BUY, 0.5, 30.0, DAY2, "ADX strong"),
        TechnicalSignal("RSI", SignalType.HOLD, 0.6, 50.0, DAY2, "RSI neutral"),
        TechnicalSignal("Stochastic", SignalType.BUY, 0.8, 10.0, DAY1, "Stochastic oversold"),
    ]


class TestStrongSignals:

    def test_threshold_is_inclusive(self, signals):
        strong = get_strong_signals(signals, min_strength=0.7)
        assert [s.indicator for s in strong] == ["RSI", "MACD", "Stochastic"]

    def test_accepts_result_object(self, signals):
        class Result:
            pass

        result = Result()
        result.signals = signals
        assert get_strong_signals(result, 0.85) == [signals[0]]


def test_signals_by_indicator_is_exact_match(signals):
    assert len(get_signals_by_indicator(signals, "RSI")) == 2
    assert get_signals_by_indicator(signals, "rsi") == []


class TestConsensus:

    def test_groups_by_direction_and_timestamp(self, signals):
        consensus = get_consensus_signals(signals, min_consensus=2)

        assert len(consensus) == 1
        merged = consensus[0]
        assert merged.indicator == "Consensus (RSI, MACD, Stochastic)"
        assert merged.signal == SignalType.BUY
        assert merged.strength == pytest.approx(0.8)
        assert merged.value == 25.0
        assert merged.timestamp == DAY1
        assert merged.description == "Multiple indicators agree: RSI oversold"

    def test_every_group_meets_minimum(self, signals):
        for minimum in (1, 2, 3, 4):
            for merged in get_consensus_signals(signals, minimum):
                members = merged.indicator[len("Consensus ("):-1].split(", ")
                assert len(members) >= minimum

    def test_minimum_of_one_includes_singletons(self, signals):
        consensus = get_consensus_signals(signals, min_consensus=1)
        assert len(consensus) == 4

    def test_group_below_minimum_drops_out(self):
        buy_rsi = TechnicalSignal("RSI", SignalType.BUY, 0.8, 25.0, DAY1, "RSI oversold")
        buy_macd = TechnicalSignal("MACD", SignalType.BUY, 0.7, -0.2, DAY1, "MACD crossover")
        sell_obv = TechnicalSignal("OBV", SignalType.SELL, 0.6, 1e6, DAY2, "OBV bearish")
        sell_adx = TechnicalSignal("ADX", SignalType.SELL, 0.5, 30.0, DAY2, "ADX strong")

        both = get_consensus_signals([buy_rsi, buy_macd, sell_obv, sell_adx], min_consensus=2)
        assert sorted(s.indicator for s in both) == ["Consensus (OBV, ADX)", "Consensus (RSI, MACD)"]

        remaining = get_consensus_signals([buy_rsi, sell_obv, sell_adx], min_consensus=2)
        assert [s.indicator for s in remaining] == ["Consensus (OBV, ADX)"]
        assert remaining[0].signal == SignalType.SELL
        assert remaining[0].timestamp == DAY2

    def test_input_not_modified(self, signals):
        before = list(signals)
        get_consensus_signals(signals)
        assert signals == before


def test_signals_to_frame(signals):
    df = signals_to_frame(signals)

    assert list(df.columns) == ["timestamp", "indicator", "signal", "strength", "value", "description"]
    assert len(df) == len(signals)
    assert df["signal"].iloc[0] == "buy"
    assert signals_to_frame([]).empty
