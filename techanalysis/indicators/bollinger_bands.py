"""
Bollinger Bands.

Middle band = SMA(period), upper/lower = middle +/- k * rolling std.
%B places the close inside the bands (0 = lower, 1 = upper, can leave
[0, 1]); bandwidth = (upper - lower) / middle measures volatility and a
bandwidth below the squeeze threshold marks a squeeze.
"""
import logging
from dataclasses import replace
from typing import List, Optional, Sequence, Tuple

from ..data.preparation import closes
from ..shared.defaults import (
    BOLLINGER_PERIOD,
    BOLLINGER_SQUEEZE_BANDWIDTH,
    BOLLINGER_STD_DEVS,
    BOLLINGER_TOUCH_TOLERANCE,
    BOLLINGER_WALK_PERIODS,
    BOLLINGER_WALK_TOLERANCE,
)
from ..shared.errors import InvalidParameterError
from ..shared.types import PriceBar, SignalType, TechnicalSignal
from .results import BollingerBandsResult
from .utils import align_to_bars, calculate_sma, calculate_standard_deviation

logger = logging.getLogger(__name__)

INDICATOR_NAME = "Bollinger Bands"


def calculate_bollinger_bands(
    bars: Sequence[PriceBar],
    period: int = BOLLINGER_PERIOD,
    standard_deviations: float = BOLLINGER_STD_DEVS,
    squeeze_threshold: float = BOLLINGER_SQUEEZE_BANDWIDTH,
) -> List[BollingerBandsResult]:
    """
    Calculate Bollinger Bands for a date-sorted series.

    Raises:
        InvalidParameterError: If period <= 0 or period > len(bars)
    """
    if period <= 0 or period > len(bars):
        raise InvalidParameterError(
            f"Invalid period for Bollinger Bands calculation: period={period}, data length={len(bars)}"
        )

    prices = closes(bars)
    middles = calculate_sma(prices, period)
    deviations = calculate_standard_deviation(prices, period) * standard_deviations

    results = []
    for bar, middle, deviation in align_to_bars(bars, middles, deviations):
        upper = middle + deviation
        lower = middle - deviation
        width = upper - lower
        # Zero-width bands put the close dead centre
        percent_b = (bar.close - lower) / width if width > 0 else 0.5
        bandwidth = width / middle
        results.append(BollingerBandsResult(
            date=bar.date,
            close=bar.close,
            upper=float(upper),
            middle=float(middle),
            lower=float(lower),
            bandwidth=float(bandwidth),
            percent_b=float(percent_b),
            squeeze=bool(bandwidth < squeeze_threshold),
        ))
    return results


def detect_band_walking(
    results: Sequence[BollingerBandsResult],
    min_periods: int = BOLLINGER_WALK_PERIODS,
    tolerance: float = BOLLINGER_WALK_TOLERANCE,
) -> List[Optional[str]]:
    """
    Flag bars that end a run of `min_periods` closes hugging one band.

    A close within `tolerance` (fraction) of the upper band, or beyond it,
    counts toward an upper walk; likewise for the lower band. Upper wins
    when both hold.

    Returns:
        'upper', 'lower' or None per result
    """
    walking = []
    for i in range(len(results)):
        if i < min_periods - 1:
            walking.append(None)
            continue
        window = results[i - min_periods + 1:i + 1]
        if all(r.close >= r.upper * (1 - tolerance) for r in window):
            walking.append("upper")
        elif all(r.close <= r.lower * (1 + tolerance) for r in window):
            walking.append("lower")
        else:
            walking.append(None)
    return walking


def _near(price: float, band: float, tolerance: float) -> bool:
    # A band at or below zero cannot be touched by a positive price
    return band > 0 and abs(price - band) < tolerance * band


def _band_touch(previous: BollingerBandsResult, current: BollingerBandsResult, tolerance: float) -> Optional[str]:
    """A band reached on this bar that was not reached on the previous one."""
    if _near(current.close, current.upper, tolerance) and not _near(previous.close, previous.upper, tolerance):
        return "upper"
    if _near(current.close, current.lower, tolerance) and not _near(previous.close, previous.lower, tolerance):
        return "lower"
    return None


def _band_breakout(previous: BollingerBandsResult, current: BollingerBandsResult) -> Optional[str]:
    if current.close > current.upper and previous.close <= previous.upper:
        return "upper"
    if current.close < current.lower and previous.close >= previous.lower:
        return "lower"
    return None


def _touch_strength(result: BollingerBandsResult, band: str) -> float:
    strength = 0.6
    if band == "upper" and result.percent_b > 0.95:
        strength += 0.2
    elif band == "lower" and result.percent_b < 0.05:
        strength += 0.2
    if result.squeeze:
        strength += 0.1
    return min(1.0, strength)


def _breakout_strength(result: BollingerBandsResult, band: str) -> float:
    if band == "upper":
        extremeness = max(0.0, result.percent_b - 1)
    else:
        extremeness = max(0.0, -result.percent_b)
    strength = 0.7 + min(0.2, extremeness * 2)
    if result.squeeze:
        strength += 0.1
    return min(1.0, strength)


def _squeeze_ending(previous: BollingerBandsResult, current: BollingerBandsResult) -> bool:
    return previous.squeeze and not current.squeeze and current.bandwidth > previous.bandwidth * 1.2


def generate_bollinger_bands_signals(
    results: Sequence[BollingerBandsResult],
    symbol: str = "",
    touch_tolerance: float = BOLLINGER_TOUCH_TOLERANCE,
) -> List[TechnicalSignal]:
    """
    Band touches, breakouts, squeeze endings and %B extremes.

    Touches and breakouts compare each result with the one before it; the
    %B extreme check runs on every result after the first.
    """
    signals = []
    for previous, current in zip(results, results[1:]):
        touch = _band_touch(previous, current, touch_tolerance)
        if touch:
            signal = SignalType.SELL if touch == "upper" else SignalType.BUY
            signals.append(TechnicalSignal(
                indicator=INDICATOR_NAME,
                signal=signal,
                strength=_touch_strength(current, touch),
                value=current.close,
                timestamp=current.date,
                description=(
                    f"Price touched {touch} Bollinger Band - potential "
                    f"{'bounce up' if signal == SignalType.BUY else 'bounce down'}"
                ),
            ))

        breakout = _band_breakout(previous, current)
        if breakout:
            signals.append(TechnicalSignal(
                indicator=INDICATOR_NAME,
                signal=SignalType.BUY if breakout == "upper" else SignalType.SELL,
                strength=_breakout_strength(current, breakout),
                value=current.close,
                timestamp=current.date,
                description=(
                    f"Price broke {'above upper' if breakout == 'upper' else 'below lower'} "
                    f"Bollinger Band - potential {'upward' if breakout == 'upper' else 'downward'} momentum"
                ),
            ))

        if _squeeze_ending(previous, current):
            signals.append(TechnicalSignal(
                indicator=INDICATOR_NAME,
                signal=SignalType.HOLD,
                strength=0.6,
                value=current.bandwidth,
                timestamp=current.date,
                description="Bollinger Band squeeze ending - volatility expansion expected",
            ))

        if current.percent_b < 0.05:
            signals.append(TechnicalSignal(
                indicator=INDICATOR_NAME,
                signal=SignalType.BUY,
                strength=0.7,
                value=current.percent_b,
                timestamp=current.date,
                description=f"%B at {current.percent_b * 100:.1f}% - extremely oversold condition",
            ))
        elif current.percent_b > 0.95:
            signals.append(TechnicalSignal(
                indicator=INDICATOR_NAME,
                signal=SignalType.SELL,
                strength=0.7,
                value=current.percent_b,
                timestamp=current.date,
                description=f"%B at {current.percent_b * 100:.1f}% - extremely overbought condition",
            ))

    logger.debug("%s: %d Bollinger Bands signals from %d values", symbol, len(signals), len(results))
    return signals


def analyze_bollinger_bands(
    bars: Sequence[PriceBar],
    symbol: str = "",
    period: int = BOLLINGER_PERIOD,
    standard_deviations: float = BOLLINGER_STD_DEVS,
    squeeze_threshold: float = BOLLINGER_SQUEEZE_BANDWIDTH,
    detect_walking: bool = True,
) -> Tuple[List[BollingerBandsResult], List[TechnicalSignal]]:
    """Calculate the bands, mark band walking, and generate signals."""
    results = calculate_bollinger_bands(bars, period, standard_deviations, squeeze_threshold)
    if detect_walking:
        results = [
            replace(r, walking=flag) if flag else r
            for r, flag in zip(results, detect_band_walking(results))
        ]
    return results, generate_bollinger_bands_signals(results, symbol)
