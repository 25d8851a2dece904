"""
Per-indicator result records.

One record per bar for which an indicator has enough history; `date` is the
date of that bar. Records are immutable: enrichment passes (divergence,
band walking) build new records with dataclasses.replace().
"""
from dataclasses import dataclass
from typing import Optional

import pandas as pd

from ..shared.types import SignalType


@dataclass(frozen=True)
class RSIResult:
    date: pd.Timestamp
    value: float
    signal: SignalType
    strength: float
    overbought: bool
    oversold: bool
    divergence: str = "none"  # 'bullish', 'bearish' or 'none'


@dataclass(frozen=True)
class MACDResult:
    date: pd.Timestamp
    macd: float
    signal_line: float
    histogram: float
    crossover: str = "none"  # MACD line vs signal line: 'bullish', 'bearish' or 'none'


@dataclass(frozen=True)
class BollingerBandsResult:
    date: pd.Timestamp
    close: float
    upper: float
    middle: float
    lower: float
    bandwidth: float  # (upper - lower) / middle
    percent_b: float  # 0 at the lower band, 1 at the upper band, may leave [0, 1]
    squeeze: bool
    walking: Optional[str] = None  # 'upper' / 'lower' while walking a band


@dataclass(frozen=True)
class MovingAverageResult:
    date: pd.Timestamp
    value: float
    type: str  # 'SMA' or 'EMA'
    period: int


@dataclass(frozen=True)
class StochasticResult:
    date: pd.Timestamp
    k: float
    d: float
    signal: SignalType
    overbought: bool
    oversold: bool


@dataclass(frozen=True)
class WilliamsRResult:
    date: pd.Timestamp
    value: float
    signal: SignalType
    strength: float
    overbought: bool
    oversold: bool


@dataclass(frozen=True)
class ADXResult:
    date: pd.Timestamp
    adx: float
    plus_di: float
    minus_di: float
    trend: str  # 'strong', 'weak' or 'no_trend'
    direction: str  # 'bullish', 'bearish' or 'neutral'


@dataclass(frozen=True)
class OBVResult:
    date: pd.Timestamp
    value: float
    signal: SignalType
    strength: float
    trend: str  # 'bullish', 'bearish' or 'neutral'
    divergence: str = "none"


@dataclass(frozen=True)
class VolumePriceTrendResult:
    date: pd.Timestamp
    value: float
    signal: SignalType
    strength: float
    trend: str  # 'bullish', 'bearish' or 'neutral'


@dataclass(frozen=True)
class AccumulationDistributionResult:
    date: pd.Timestamp
    value: float
    signal: SignalType
    strength: float
    trend: str  # 'accumulation', 'distribution' or 'neutral'
    divergence: str = "none"
