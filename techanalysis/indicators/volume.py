"""
Volume indicators: On-Balance Volume, Volume-Price Trend and the
Accumulation/Distribution line.

OBV and VPT classify their trend by correlating the indicator's previous
values with recent closes; A/D classifies each bar by its money flow
multiplier. OBV and A/D can be post-processed by the divergence detector.
"""
import logging
from typing import List, Sequence, Tuple

import numpy as np

from ..data.preparation import closes, highs, lows, volumes
from ..shared.defaults import (
    AD_MULTIPLIER_THRESHOLD,
    DIVERGENCE_LOOKBACK,
    OBV_CORRELATION_THRESHOLD,
    VOLUME_CORRELATION_WINDOW,
    VPT_CORRELATION_THRESHOLD,
)
from ..shared.types import PriceBar, SignalType, TechnicalSignal
from .divergence import apply_divergence, detect_divergence
from .results import AccumulationDistributionResult, OBVResult, VolumePriceTrendResult
from .utils import calculate_correlation

logger = logging.getLogger(__name__)

MAX_VOLUME_STRENGTH = 0.8


def _correlation_trends(
    values: np.ndarray,
    prices: np.ndarray,
    threshold: float,
    window: int = VOLUME_CORRELATION_WINDOW,
) -> List[Tuple[str, SignalType, float]]:
    """
    (trend, signal, strength) per bar from indicator/price correlation.

    Bar i (i >= window) correlates the indicator's values at bars
    i - window .. i - 1 with the closes at bars i - window + 1 .. i.
    """
    out = []
    for i in range(len(values)):
        trend, signal, strength = "neutral", SignalType.HOLD, 0.5
        if i >= window:
            correlation = calculate_correlation(values[i - window:i], prices[i - window + 1:i + 1])
            if correlation > threshold:
                trend, signal = "bullish", SignalType.BUY
                strength = min(MAX_VOLUME_STRENGTH, 0.5 + correlation * 0.3)
            elif correlation < -threshold:
                trend, signal = "bearish", SignalType.SELL
                strength = min(MAX_VOLUME_STRENGTH, 0.5 + abs(correlation) * 0.3)
        out.append((trend, signal, strength))
    return out


def calculate_obv(
    bars: Sequence[PriceBar],
    correlation_threshold: float = OBV_CORRELATION_THRESHOLD,
) -> List[OBVResult]:
    """
    On-Balance Volume for a date-sorted series.

    Starts at the first bar's volume, then adds the volume of up-close bars
    and subtracts that of down-close bars; unchanged closes leave it as is.
    """
    if not bars:
        return []
    prices = closes(bars)
    direction = np.sign(np.diff(prices))
    obv = volumes(bars)[0] + np.concatenate(([0.0], np.cumsum(direction * volumes(bars)[1:])))

    return [
        OBVResult(date=bar.date, value=float(value), signal=signal, strength=strength, trend=trend)
        for bar, value, (trend, signal, strength) in zip(
            bars, obv, _correlation_trends(obv, prices, correlation_threshold)
        )
    ]


def calculate_volume_price_trend(
    bars: Sequence[PriceBar],
    correlation_threshold: float = VPT_CORRELATION_THRESHOLD,
) -> List[VolumePriceTrendResult]:
    """
    Volume-Price Trend for a date-sorted series.

    Starts at 0 and adds volume * fractional close-to-close change.
    """
    if not bars:
        return []
    prices = closes(bars)
    pct_change = np.diff(prices) / prices[:-1]
    vpt = np.concatenate(([0.0], np.cumsum(volumes(bars)[1:] * pct_change)))

    return [
        VolumePriceTrendResult(date=bar.date, value=float(value), signal=signal, strength=strength, trend=trend)
        for bar, value, (trend, signal, strength) in zip(
            bars, vpt, _correlation_trends(vpt, prices, correlation_threshold)
        )
    ]


def calculate_accumulation_distribution(
    bars: Sequence[PriceBar],
    multiplier_threshold: float = AD_MULTIPLIER_THRESHOLD,
) -> List[AccumulationDistributionResult]:
    """
    Accumulation/Distribution line for a date-sorted series.

    money flow multiplier = ((close - low) - (high - close)) / (high - low),
    0 when high == low; the line accumulates multiplier * volume.
    """
    if not bars:
        return []
    high, low, close = highs(bars), lows(bars), closes(bars)
    price_range = high - low
    with np.errstate(divide="ignore", invalid="ignore"):
        multipliers = np.where(price_range > 0, ((close - low) - (high - close)) / price_range, 0.0)
    ad_line = np.cumsum(multipliers * volumes(bars))

    results = []
    for bar, value, multiplier in zip(bars, ad_line, multipliers):
        trend, signal, strength = "neutral", SignalType.HOLD, 0.5
        if multiplier > multiplier_threshold:
            trend, signal = "accumulation", SignalType.BUY
            strength = min(MAX_VOLUME_STRENGTH, 0.5 + multiplier * 0.3)
        elif multiplier < -multiplier_threshold:
            trend, signal = "distribution", SignalType.SELL
            strength = min(MAX_VOLUME_STRENGTH, 0.5 + abs(multiplier) * 0.3)
        results.append(AccumulationDistributionResult(
            date=bar.date,
            value=float(value),
            signal=signal,
            strength=float(strength),
            trend=trend,
        ))
    return results


def detect_volume_divergence(bars: Sequence[PriceBar], results, lookback: int = DIVERGENCE_LOOKBACK):
    """
    Return a copy of OBV or A/D results with divergence bars turned into signals.

    No zone rule applies; the earliest bar in the window that diverges
    decides the direction.
    """
    flags = detect_divergence(closes(bars), [r.value for r in results], lookback)
    return apply_divergence(results, flags)


def generate_volume_signals(
    obv: Sequence[OBVResult] = (),
    vpt: Sequence[VolumePriceTrendResult] = (),
    ad: Sequence[AccumulationDistributionResult] = (),
    symbol: str = "",
) -> List[TechnicalSignal]:
    """OBV, then VPT, then A/D Line signals; hold results produce nothing."""
    signals = []

    for r in obv:
        if r.signal == SignalType.HOLD:
            continue
        if r.divergence == "bullish":
            description = "OBV bullish divergence - volume supporting potential price reversal"
        elif r.divergence == "bearish":
            description = "OBV bearish divergence - volume suggesting potential price weakness"
        elif r.trend == "bullish":
            description = "OBV showing bullish trend - buying pressure increasing"
        else:
            description = "OBV showing bearish trend - selling pressure increasing"
        signals.append(TechnicalSignal("OBV", r.signal, r.strength, r.value, r.date, description))

    for r in vpt:
        if r.signal == SignalType.HOLD:
            continue
        if r.trend == "bullish":
            description = "Volume Price Trend bullish - volume confirming price movement"
        else:
            description = "Volume Price Trend bearish - volume confirming price decline"
        signals.append(TechnicalSignal("VPT", r.signal, r.strength, r.value, r.date, description))

    for r in ad:
        if r.signal == SignalType.HOLD:
            continue
        if r.divergence == "bullish":
            description = "A/D Line bullish divergence - accumulation despite price weakness"
        elif r.divergence == "bearish":
            description = "A/D Line bearish divergence - distribution despite price strength"
        elif r.trend == "accumulation":
            description = "A/D Line showing accumulation - smart money buying"
        else:
            description = "A/D Line showing distribution - smart money selling"
        signals.append(TechnicalSignal("A/D Line", r.signal, r.strength, r.value, r.date, description))

    logger.debug("%s: %d volume signals", symbol, len(signals))
    return signals


def analyze_volume(
    bars: Sequence[PriceBar],
    symbol: str = "",
    detect_divergences: bool = True,
    lookback: int = DIVERGENCE_LOOKBACK,
) -> Tuple[List[OBVResult], List[VolumePriceTrendResult], List[AccumulationDistributionResult], List[TechnicalSignal]]:
    """
    Calculate OBV, VPT and the A/D line and generate their signals.

    Returns:
        (obv, vpt, ad, signals)
    """
    obv = calculate_obv(bars)
    vpt = calculate_volume_price_trend(bars)
    ad = calculate_accumulation_distribution(bars)

    if detect_divergences:
        obv = detect_volume_divergence(bars, obv, lookback)
        ad = detect_volume_divergence(bars, ad, lookback)

    return obv, vpt, ad, generate_volume_signals(obv, vpt, ad, symbol)
