"""
Shared types for price data and trading signals.

This module consolidates the SignalType enum, the PriceBar input record,
the TechnicalSignal output record and the summary classification enums
used across the indicator modules, the engine and the query helpers.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Sequence

import pandas as pd


class SignalType(Enum):
    """Direction of a trading signal."""
    BUY = "buy"
    SELL = "sell"
    HOLD = "hold"


@dataclass(frozen=True)
class PriceBar:
    """One trading period of OHLCV data."""
    date: pd.Timestamp
    open: float
    high: float
    low: float
    close: float
    volume: float


# Any ordered sequence of bars; the engine sorts a copy before use
PriceSeries = Sequence[PriceBar]


@dataclass(frozen=True)
class TechnicalSignal:
    """
    A discrete, indicator-attributed trading event.

    timestamp is the date of the bar that triggered the signal; value is the
    indicator reading at that bar.
    """
    indicator: str
    signal: SignalType
    strength: float  # 0-1 confidence
    value: float
    timestamp: pd.Timestamp
    description: str = ""


class Sentiment(Enum):
    """Overall market assessment."""
    BULLISH = "bullish"
    BEARISH = "bearish"
    NEUTRAL = "neutral"


class TrendDirection(Enum):
    UP = "up"
    DOWN = "down"
    SIDEWAYS = "sideways"


class Momentum(Enum):
    INCREASING = "increasing"
    DECREASING = "decreasing"
    STABLE = "stable"


class Volatility(Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
