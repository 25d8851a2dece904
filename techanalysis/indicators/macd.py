"""
MACD (Moving Average Convergence Divergence).

MACD line = fast EMA - slow EMA, signal line = EMA of the MACD line,
histogram = MACD line - signal line.
"""
import logging
from dataclasses import replace
from typing import List, Optional, Sequence, Tuple

from ..data.preparation import closes
from ..shared.defaults import DIVERGENCE_LOOKBACK, MACD_FAST, MACD_SIGNAL, MACD_SLOW
from ..shared.errors import InvalidParameterError
from ..shared.types import PriceBar, SignalType, TechnicalSignal
from .divergence import detect_divergence
from .results import MACDResult
from .utils import align_to_bars, calculate_ema, detect_crossovers, source_offset

logger = logging.getLogger(__name__)


def calculate_macd(
    bars: Sequence[PriceBar],
    fast_period: int = MACD_FAST,
    slow_period: int = MACD_SLOW,
    signal_period: int = MACD_SIGNAL,
) -> List[MACDResult]:
    """
    Calculate MACD for a date-sorted series.

    The first result belongs to bar slow_period + signal_period - 2, the
    first bar with a signal line value.

    Raises:
        InvalidParameterError: If fast_period >= slow_period, any period is
            not positive, or the series is shorter than slow + signal periods
    """
    if fast_period <= 0 or signal_period <= 0:
        raise InvalidParameterError(
            f"MACD periods must be positive: fast={fast_period}, signal={signal_period}"
        )
    if fast_period >= slow_period:
        raise InvalidParameterError("Fast period must be less than slow period")
    if len(bars) < slow_period + signal_period:
        raise InvalidParameterError(
            f"Insufficient data for MACD calculation: need {slow_period + signal_period} bars, got {len(bars)}"
        )

    prices = closes(bars)
    fast_ema = calculate_ema(prices, fast_period)
    slow_ema = calculate_ema(prices, slow_period)
    macd_line = fast_ema[slow_period - fast_period:] - slow_ema

    signal_line = calculate_ema(macd_line, signal_period)
    macd_values = macd_line[signal_period - 1:]
    histogram = macd_values - signal_line

    # crossovers[i] is the step from value i to value i + 1
    crossovers = ["none"] + detect_crossovers(macd_values, signal_line)

    return [
        MACDResult(
            date=bar.date,
            macd=float(macd),
            signal_line=float(signal),
            histogram=float(hist),
            crossover=crossover,
        )
        for (bar, macd, signal, hist), crossover in zip(
            align_to_bars(bars, macd_values, signal_line, histogram), crossovers
        )
    ]


def detect_macd_divergence(
    bars: Sequence[PriceBar],
    results: Sequence[MACDResult],
    lookback: int = DIVERGENCE_LOOKBACK,
) -> List[MACDResult]:
    """
    Return a copy of `results` with divergences recorded as crossovers.

    Only results without a signal-line crossover are relabelled. Bullish
    needs both MACD readings below zero, bearish both above.
    """
    prices = closes(bars)[source_offset(len(bars), len(results)):]
    flags = detect_divergence(prices, [r.macd for r in results], lookback, zone=0.0)
    return [
        replace(r, crossover=flag) if flag != "none" and r.crossover == "none" else r
        for r, flag in zip(results, flags)
    ]


def _crossover_strength(result: MACDResult, direction: str) -> float:
    strength = 0.6
    strength += min(0.2, abs(result.macd) * 0.1)
    strength += min(0.2, abs(result.histogram) * 0.05)
    if direction == "bullish" and result.macd > 0 and result.histogram > 0:
        strength += 0.1
    elif direction == "bearish" and result.macd < 0 and result.histogram < 0:
        strength += 0.1
    return min(1.0, strength)


def _histogram_turning(previous: MACDResult, current: MACDResult) -> Optional[str]:
    """Histogram moving back toward zero on the same side."""
    if previous.histogram < 0 and current.histogram < 0 and current.histogram > previous.histogram:
        return "bullish"
    if previous.histogram > 0 and current.histogram > 0 and current.histogram < previous.histogram:
        return "bearish"
    return None


def _zero_line_cross(previous: MACDResult, current: MACDResult) -> Optional[str]:
    if previous.macd <= 0 and current.macd > 0:
        return "bullish"
    if previous.macd >= 0 and current.macd < 0:
        return "bearish"
    return None


def _lines_crossed(previous: MACDResult, current: MACDResult) -> str:
    """'bullish', 'bearish' or 'none' for the MACD line against the signal line."""
    return detect_crossovers([previous.macd, current.macd], [previous.signal_line, current.signal_line])[0]


def _crossover_description(previous: MACDResult, current: MACDResult) -> str:
    direction = current.crossover
    if _lines_crossed(previous, current) != direction:
        # Recorded by detect_macd_divergence, not by the lines crossing
        if direction == "bullish":
            return f"MACD bullish divergence - MACD ({current.macd:.4f}) rising while price makes lower lows"
        return f"MACD bearish divergence - MACD ({current.macd:.4f}) falling while price makes higher highs"
    return (
        f"MACD {direction} crossover - MACD line ({current.macd:.4f}) "
        f"crossed {'above' if direction == 'bullish' else 'below'} signal line ({current.signal_line:.4f})"
    )


def generate_macd_signals(results: Sequence[MACDResult], symbol: str = "") -> List[TechnicalSignal]:
    """
    Signal-line crossovers, histogram turns and zero-line crosses.

    Each is checked between consecutive results, so the first result never
    produces a signal. Divergences recorded in `crossover` signal like
    crossovers but are described as divergences.
    """
    signals = []
    for previous, current in zip(results, results[1:]):
        if current.crossover in ("bullish", "bearish"):
            signals.append(TechnicalSignal(
                indicator="MACD",
                signal=SignalType.BUY if current.crossover == "bullish" else SignalType.SELL,
                strength=_crossover_strength(current, current.crossover),
                value=current.macd,
                timestamp=current.date,
                description=_crossover_description(previous, current),
            ))

        turning = _histogram_turning(previous, current)
        if turning:
            ratio = abs(current.histogram) / max(abs(current.macd), 0.001)
            signals.append(TechnicalSignal(
                indicator="MACD",
                signal=SignalType.BUY if turning == "bullish" else SignalType.SELL,
                strength=min(0.8, max(0.4, ratio)),
                value=current.histogram,
                timestamp=current.date,
                description=(
                    f"MACD histogram {turning} momentum - histogram turning "
                    f"{'positive' if turning == 'bullish' else 'negative'}"
                ),
            ))

        zero_cross = _zero_line_cross(previous, current)
        if zero_cross:
            signals.append(TechnicalSignal(
                indicator="MACD",
                signal=SignalType.BUY if zero_cross == "bullish" else SignalType.SELL,
                strength=0.7,
                value=current.macd,
                timestamp=current.date,
                description=(
                    f"MACD zero line crossover - MACD line crossed "
                    f"{'above' if zero_cross == 'bullish' else 'below'} zero line"
                ),
            ))

    logger.debug("%s: %d MACD signals from %d values", symbol, len(signals), len(results))
    return signals


def analyze_macd(
    bars: Sequence[PriceBar],
    symbol: str = "",
    fast_period: int = MACD_FAST,
    slow_period: int = MACD_SLOW,
    signal_period: int = MACD_SIGNAL,
    detect_divergence: bool = True,
    lookback: int = DIVERGENCE_LOOKBACK,
) -> Tuple[List[MACDResult], List[TechnicalSignal]]:
    """Calculate MACD, optionally enrich with divergences, and generate signals."""
    results = calculate_macd(bars, fast_period, slow_period, signal_period)
    if detect_divergence:
        results = detect_macd_divergence(bars, results, lookback)
    return results, generate_macd_signals(results, symbol)
