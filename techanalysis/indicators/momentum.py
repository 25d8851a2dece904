"""
Momentum oscillators: Stochastic, Williams %R and ADX.

Each has calculate_*, generate_*_signals and analyze_* functions.
analyze_momentum() runs all three and keeps going when one of them cannot
be computed for the given data.
"""
import logging
from typing import Any, Callable, List, Mapping, Optional, Sequence, Tuple

import numpy as np

from ..data.preparation import closes, highs, lows
from ..shared.defaults import (
    ADX_PERIOD,
    ADX_STRONG_TREND,
    ADX_WEAK_TREND,
    STOCHASTIC_D_PERIOD,
    STOCHASTIC_K_PERIOD,
    STOCHASTIC_OVERBOUGHT,
    STOCHASTIC_OVERSOLD,
    WILLIAMS_R_OVERBOUGHT,
    WILLIAMS_R_OVERSOLD,
    WILLIAMS_R_PERIOD,
)
from ..shared.errors import InvalidParameterError
from ..shared.types import PriceBar, SignalType, TechnicalSignal
from .results import ADXResult, StochasticResult, WilliamsRResult
from .utils import align_to_bars, calculate_sma, calculate_true_range, rolling_high, rolling_low

logger = logging.getLogger(__name__)

# %K and %D closer than this are treated as equal (no crossover)
CROSS_EPSILON = 1e-9

STOCHASTIC_SIGNAL_STRENGTH = 0.7


# =============================================================================
# Stochastic
# =============================================================================

def calculate_stochastic(
    bars: Sequence[PriceBar],
    k_period: int = STOCHASTIC_K_PERIOD,
    d_period: int = STOCHASTIC_D_PERIOD,
    overbought: float = STOCHASTIC_OVERBOUGHT,
    oversold: float = STOCHASTIC_OVERSOLD,
) -> List[StochasticResult]:
    """
    Stochastic oscillator for a date-sorted series.

    %K = (close - lowest low) / (highest high - lowest low) * 100 over
    k_period bars (50 when the range is zero); %D = SMA(%K, d_period).
    Buy: both lines oversold with %K above %D. Sell: both overbought with
    %K below %D.

    Raises:
        InvalidParameterError: If k_period <= 0, k_period >= len(bars), or
            fewer than d_period %K values exist
    """
    if k_period <= 0 or k_period >= len(bars):
        raise InvalidParameterError(
            f"Invalid K period for Stochastic calculation: k_period={k_period}, data length={len(bars)}"
        )
    k_count = len(bars) - k_period + 1
    if d_period <= 0 or d_period > k_count:
        raise InvalidParameterError(
            f"Invalid D period for Stochastic calculation: d_period={d_period}, %K values={k_count}"
        )

    highest = rolling_high(highs(bars), k_period)
    lowest = rolling_low(lows(bars), k_period)
    price = closes(bars)[k_period - 1:]
    price_range = highest - lowest
    with np.errstate(divide="ignore", invalid="ignore"):
        k_values = np.where(price_range > 0, (price - lowest) / price_range * 100, 50.0)
    d_values = calculate_sma(k_values, d_period)

    results = []
    for bar, k, d in align_to_bars(bars, k_values[d_period - 1:], d_values):
        k, d = float(k), float(d)
        signal = SignalType.HOLD
        if k <= oversold and d <= oversold and k - d > CROSS_EPSILON:
            signal = SignalType.BUY
        elif k >= overbought and d >= overbought and d - k > CROSS_EPSILON:
            signal = SignalType.SELL
        results.append(StochasticResult(
            date=bar.date,
            k=k,
            d=d,
            signal=signal,
            overbought=k >= overbought,
            oversold=k <= oversold,
        ))
    return results


def generate_stochastic_signals(results: Sequence[StochasticResult], symbol: str = "") -> List[TechnicalSignal]:
    signals = []
    for r in results:
        if r.signal == SignalType.BUY and r.oversold:
            description = f"Stochastic oversold crossover - %K ({r.k:.1f}) crossed above %D ({r.d:.1f})"
        elif r.signal == SignalType.SELL and r.overbought:
            description = f"Stochastic overbought crossover - %K ({r.k:.1f}) crossed below %D ({r.d:.1f})"
        else:
            continue
        signals.append(TechnicalSignal(
            indicator="Stochastic",
            signal=r.signal,
            strength=STOCHASTIC_SIGNAL_STRENGTH,
            value=r.k,
            timestamp=r.date,
            description=description,
        ))
    logger.debug("%s: %d Stochastic signals", symbol, len(signals))
    return signals


def analyze_stochastic(
    bars: Sequence[PriceBar],
    symbol: str = "",
    k_period: int = STOCHASTIC_K_PERIOD,
    d_period: int = STOCHASTIC_D_PERIOD,
    overbought: float = STOCHASTIC_OVERBOUGHT,
    oversold: float = STOCHASTIC_OVERSOLD,
) -> Tuple[List[StochasticResult], List[TechnicalSignal]]:
    results = calculate_stochastic(bars, k_period, d_period, overbought, oversold)
    return results, generate_stochastic_signals(results, symbol)


# =============================================================================
# Williams %R
# =============================================================================

def calculate_williams_r(
    bars: Sequence[PriceBar],
    period: int = WILLIAMS_R_PERIOD,
    overbought: float = WILLIAMS_R_OVERBOUGHT,
    oversold: float = WILLIAMS_R_OVERSOLD,
) -> List[WilliamsRResult]:
    """
    Williams %R for a date-sorted series.

    %R = (highest high - close) / (highest high - lowest low) * -100, on a
    scale from 0 (top of the range) to -100 (bottom); -50 when the range
    is zero. Strength grows with the distance past the threshold, capped
    at 0.9.

    Raises:
        InvalidParameterError: If period <= 0 or period >= len(bars)
    """
    if period <= 0 or period >= len(bars):
        raise InvalidParameterError(
            f"Invalid period for Williams %R calculation: period={period}, data length={len(bars)}"
        )

    highest = rolling_high(highs(bars), period)
    lowest = rolling_low(lows(bars), period)

    results = []
    for bar, hh, ll in align_to_bars(bars, highest, lowest):
        price_range = hh - ll
        value = float((hh - bar.close) / price_range * -100) if price_range > 0 else -50.0

        signal, strength = SignalType.HOLD, 0.5
        if value <= oversold:
            signal, strength = SignalType.BUY, min(0.9, 0.6 + abs(value - oversold) / 20)
        elif value >= overbought:
            signal, strength = SignalType.SELL, min(0.9, 0.6 + abs(value - overbought) / 20)

        results.append(WilliamsRResult(
            date=bar.date,
            value=value,
            signal=signal,
            strength=strength,
            overbought=value >= overbought,
            oversold=value <= oversold,
        ))
    return results


def generate_williams_r_signals(results: Sequence[WilliamsRResult], symbol: str = "") -> List[TechnicalSignal]:
    signals = []
    for r in results:
        if r.signal == SignalType.BUY and r.oversold:
            description = f"Williams %R oversold at {r.value:.1f}% - potential reversal"
        elif r.signal == SignalType.SELL and r.overbought:
            description = f"Williams %R overbought at {r.value:.1f}% - potential reversal"
        else:
            continue
        signals.append(TechnicalSignal(
            indicator="Williams %R",
            signal=r.signal,
            strength=r.strength,
            value=r.value,
            timestamp=r.date,
            description=description,
        ))
    logger.debug("%s: %d Williams %%R signals", symbol, len(signals))
    return signals


def analyze_williams_r(
    bars: Sequence[PriceBar],
    symbol: str = "",
    period: int = WILLIAMS_R_PERIOD,
    overbought: float = WILLIAMS_R_OVERBOUGHT,
    oversold: float = WILLIAMS_R_OVERSOLD,
) -> Tuple[List[WilliamsRResult], List[TechnicalSignal]]:
    results = calculate_williams_r(bars, period, overbought, oversold)
    return results, generate_williams_r_signals(results, symbol)


# =============================================================================
# ADX
# =============================================================================

def _directional_movement(bars: Sequence[PriceBar]) -> Tuple[np.ndarray, np.ndarray]:
    """+DM and -DM per bar from the second bar on."""
    high = highs(bars)
    low = lows(bars)
    up_move = np.diff(high)
    down_move = -np.diff(low)
    plus_dm = np.where((up_move > down_move) & (up_move > 0), up_move, 0.0)
    minus_dm = np.where((down_move > up_move) & (down_move > 0), down_move, 0.0)
    return plus_dm, minus_dm


def calculate_adx(
    bars: Sequence[PriceBar],
    period: int = ADX_PERIOD,
    strong_trend: float = ADX_STRONG_TREND,
) -> List[ADXResult]:
    """
    Average Directional Index for a date-sorted series.

    True range and +DM/-DM are smoothed with SMA(period);
    +DI/-DI = smoothed DM / smoothed TR * 100 (0 when the smoothed TR is 0);
    DX = |+DI - -DI| / (+DI + -DI) * 100 (0 when undefined); ADX = SMA(DX).
    The first result belongs to bar 2 * period - 1.

    Raises:
        InvalidParameterError: If period <= 0 or len(bars) < 2 * period
    """
    if period <= 0 or period >= len(bars) - 1 or len(bars) < 2 * period:
        raise InvalidParameterError(
            f"Invalid period for ADX calculation: period={period}, data length={len(bars)}"
        )

    plus_dm, minus_dm = _directional_movement(bars)
    smoothed_tr = calculate_sma(calculate_true_range(bars), period)
    smoothed_plus = calculate_sma(plus_dm, period)
    smoothed_minus = calculate_sma(minus_dm, period)

    with np.errstate(divide="ignore", invalid="ignore"):
        plus_di = np.where(smoothed_tr > 0, smoothed_plus / smoothed_tr * 100, 0.0)
        minus_di = np.where(smoothed_tr > 0, smoothed_minus / smoothed_tr * 100, 0.0)
        dx = np.abs(plus_di - minus_di) / (plus_di + minus_di) * 100
    dx = np.nan_to_num(dx, nan=0.0, posinf=0.0, neginf=0.0)
    adx_values = calculate_sma(dx, period)

    results = []
    for bar, adx, pdi, mdi in align_to_bars(bars, adx_values, plus_di[period - 1:], minus_di[period - 1:]):
        adx, pdi, mdi = float(adx), float(pdi), float(mdi)
        if adx >= strong_trend:
            trend = "strong"
        elif adx >= ADX_WEAK_TREND:
            trend = "weak"
        else:
            trend = "no_trend"
        if trend == "no_trend":
            direction = "neutral"
        else:
            direction = "bullish" if pdi > mdi else "bearish"
        results.append(ADXResult(
            date=bar.date,
            adx=adx,
            plus_di=pdi,
            minus_di=mdi,
            trend=trend,
            direction=direction,
        ))
    return results


def generate_adx_signals(
    results: Sequence[ADXResult],
    symbol: str = "",
    strong_trend: float = ADX_STRONG_TREND,
) -> List[TechnicalSignal]:
    """A buy or sell for every bar in a strong trend, following its direction."""
    signals = [
        TechnicalSignal(
            indicator="ADX",
            signal=SignalType.BUY if r.direction == "bullish" else SignalType.SELL,
            strength=min(0.8, 0.5 + (r.adx - strong_trend) / 50),
            value=r.adx,
            timestamp=r.date,
            description=f"Strong {r.direction} trend detected - ADX at {r.adx:.1f}",
        )
        for r in results
        if r.trend == "strong"
    ]
    logger.debug("%s: %d ADX signals", symbol, len(signals))
    return signals


def analyze_adx(
    bars: Sequence[PriceBar],
    symbol: str = "",
    period: int = ADX_PERIOD,
    strong_trend: float = ADX_STRONG_TREND,
) -> Tuple[List[ADXResult], List[TechnicalSignal]]:
    results = calculate_adx(bars, period, strong_trend)
    return results, generate_adx_signals(results, symbol, strong_trend)


# =============================================================================
# Family-level helpers
# =============================================================================

def generate_momentum_signals(
    stochastic: Optional[Sequence[StochasticResult]] = None,
    williams_r: Optional[Sequence[WilliamsRResult]] = None,
    adx: Optional[Sequence[ADXResult]] = None,
    symbol: str = "",
    strong_trend: float = ADX_STRONG_TREND,
) -> List[TechnicalSignal]:
    """Stochastic, then Williams %R, then ADX signals."""
    signals: List[TechnicalSignal] = []
    if stochastic:
        signals.extend(generate_stochastic_signals(stochastic, symbol))
    if williams_r:
        signals.extend(generate_williams_r_signals(williams_r, symbol))
    if adx:
        signals.extend(generate_adx_signals(adx, symbol, strong_trend))
    return signals


def _calculate_or_empty(name: str, calculate: Callable[..., list], bars: Sequence[PriceBar], params: Mapping[str, Any]) -> list:
    try:
        return calculate(bars, **params)
    except InvalidParameterError as e:
        logger.warning("Skipping %s: %s", name, e)
        return []


def analyze_momentum(
    bars: Sequence[PriceBar],
    symbol: str = "",
    stochastic: Optional[Mapping[str, Any]] = None,
    williams_r: Optional[Mapping[str, Any]] = None,
    adx: Optional[Mapping[str, Any]] = None,
) -> Tuple[List[StochasticResult], List[WilliamsRResult], List[ADXResult], List[TechnicalSignal]]:
    """
    Run all three oscillators with keyword parameters per oscillator.

    A sub-indicator whose parameters do not fit the data is logged at
    WARNING and contributes an empty list; the others still run.

    Returns:
        (stochastic, williams_r, adx, signals)
    """
    stochastic_results = _calculate_or_empty("Stochastic", calculate_stochastic, bars, stochastic or {})
    williams_results = _calculate_or_empty("Williams %R", calculate_williams_r, bars, williams_r or {})
    adx_params = adx or {}
    adx_results = _calculate_or_empty("ADX", calculate_adx, bars, adx_params)

    signals = generate_momentum_signals(
        stochastic_results,
        williams_results,
        adx_results,
        symbol,
        adx_params.get("strong_trend", ADX_STRONG_TREND),
    )
    return stochastic_results, williams_results, adx_results, signals
