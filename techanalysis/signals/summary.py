"""
Aggregate market assessment.

Reduces a signal list and the tail of the price series into one Summary:
sentiment from the buy/sell strength balance, confidence from the signal
count, and trend, momentum and volatility from the last SUMMARY_WINDOW bars.
"""
from dataclasses import dataclass
from typing import Sequence

import numpy as np

from ..data.preparation import closes
from ..shared.defaults import (
    BEARISH_RATIO,
    BULLISH_RATIO,
    MAX_SUMMARY_STRENGTH,
    MOMENTUM_THRESHOLD,
    SUMMARY_WINDOW,
    TRADING_DAYS_PER_YEAR,
    TREND_THRESHOLD,
    VOLATILITY_HIGH,
    VOLATILITY_LOW,
)
from ..shared.types import (
    Momentum,
    PriceBar,
    Sentiment,
    SignalType,
    TechnicalSignal,
    TrendDirection,
    Volatility,
)

MIN_TREND_BARS = 10
MIN_MOMENTUM_BARS = 5
MIN_VOLATILITY_BARS = 10
MOMENTUM_WINDOW = 5


@dataclass(frozen=True)
class Summary:
    overall: Sentiment = Sentiment.NEUTRAL
    strength: float = 0.5
    confidence: float = 0.5
    trend_direction: TrendDirection = TrendDirection.SIDEWAYS
    momentum: Momentum = Momentum.STABLE
    volatility: Volatility = Volatility.MEDIUM

    def to_dict(self) -> dict:
        return {
            "overall": self.overall.value,
            "strength": self.strength,
            "confidence": self.confidence,
            "trend_direction": self.trend_direction.value,
            "momentum": self.momentum.value,
            "volatility": self.volatility.value,
        }


def calculate_sentiment(signals: Sequence[TechnicalSignal]):
    """
    Overall sentiment and its strength from the buy/sell strength balance.

    Hold signals do not count. Without any buy or sell strength the result
    is neutral at 0.5.

    Returns:
        (Sentiment, strength)
    """
    buy_strength = sum(s.strength for s in signals if s.signal == SignalType.BUY)
    sell_strength = sum(s.strength for s in signals if s.signal == SignalType.SELL)
    total = buy_strength + sell_strength
    if total <= 0:
        return Sentiment.NEUTRAL, 0.5

    bullish_ratio = buy_strength / total
    if bullish_ratio > BULLISH_RATIO:
        return Sentiment.BULLISH, min(MAX_SUMMARY_STRENGTH, 0.5 + (bullish_ratio - 0.5) * 0.8)
    if bullish_ratio < BEARISH_RATIO:
        return Sentiment.BEARISH, min(MAX_SUMMARY_STRENGTH, 0.5 + (0.5 - bullish_ratio) * 0.8)
    return Sentiment.NEUTRAL, 0.5


def calculate_confidence(signal_count: int) -> float:
    """Saturating function of the number of signals, in [0.1, 0.9]."""
    return min(0.9, max(0.1, signal_count / 10))


def calculate_trend_direction(bars: Sequence[PriceBar]) -> TrendDirection:
    """Compare the average close of the second half of `bars` with the first."""
    if len(bars) < MIN_TREND_BARS:
        return TrendDirection.SIDEWAYS
    prices = closes(bars)
    half = len(prices) // 2
    first_avg = prices[:half].mean()
    second_avg = prices[half:].mean()
    change = (second_avg - first_avg) / first_avg
    if change > TREND_THRESHOLD:
        return TrendDirection.UP
    if change < -TREND_THRESHOLD:
        return TrendDirection.DOWN
    return TrendDirection.SIDEWAYS


def _returns(bars: Sequence[PriceBar]) -> np.ndarray:
    prices = closes(bars)
    return np.diff(prices) / prices[:-1]


def calculate_momentum(bars: Sequence[PriceBar]) -> Momentum:
    """
    Mean absolute return of the last 5 returns vs the 5 before them.

    A relative change above MOMENTUM_THRESHOLD either way is increasing or
    decreasing momentum. When the earlier returns are all zero, any recent
    movement counts as increasing.
    """
    if len(bars) < MIN_MOMENTUM_BARS:
        return Momentum.STABLE
    changes = _returns(bars)
    recent = changes[-MOMENTUM_WINDOW:]
    earlier = changes[-2 * MOMENTUM_WINDOW:-MOMENTUM_WINDOW]
    if len(earlier) == 0:
        return Momentum.STABLE

    recent_avg = np.abs(recent).mean()
    earlier_avg = np.abs(earlier).mean()
    if earlier_avg == 0:
        return Momentum.INCREASING if recent_avg > 0 else Momentum.STABLE

    change = (recent_avg - earlier_avg) / earlier_avg
    if change > MOMENTUM_THRESHOLD:
        return Momentum.INCREASING
    if change < -MOMENTUM_THRESHOLD:
        return Momentum.DECREASING
    return Momentum.STABLE


def annualized_volatility(bars: Sequence[PriceBar]) -> float:
    """Population std of close-to-close returns scaled by sqrt(252)."""
    returns = _returns(bars)
    if len(returns) == 0:
        return 0.0
    return float(returns.std() * np.sqrt(TRADING_DAYS_PER_YEAR))


def calculate_volatility(bars: Sequence[PriceBar]) -> Volatility:
    if len(bars) < MIN_VOLATILITY_BARS:
        return Volatility.MEDIUM
    annualized = annualized_volatility(bars)
    if annualized < VOLATILITY_LOW:
        return Volatility.LOW
    if annualized > VOLATILITY_HIGH:
        return Volatility.HIGH
    return Volatility.MEDIUM


def generate_summary(
    signals: Sequence[TechnicalSignal],
    bars: Sequence[PriceBar],
    window: int = SUMMARY_WINDOW,
) -> Summary:
    """
    Build the Summary for a date-sorted series and its signals.

    Trend, momentum and volatility use only the last `window` bars.
    """
    recent = list(bars[-window:])
    overall, strength = calculate_sentiment(signals)
    return Summary(
        overall=overall,
        strength=float(strength),
        confidence=calculate_confidence(len(signals)),
        trend_direction=calculate_trend_direction(recent),
        momentum=calculate_momentum(recent),
        volatility=calculate_volatility(recent),
    )
