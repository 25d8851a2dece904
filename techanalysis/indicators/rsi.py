"""
RSI (Relative Strength Index).

Average gain and loss are EMAs of the gain/loss split of close-to-close
changes. RSI = 100 - 100 / (1 + avg_gain / avg_loss).
"""
import logging
from typing import List, Sequence, Tuple

from ..data.preparation import closes
from ..shared.defaults import (
    DIVERGENCE_LOOKBACK,
    RSI_OVERBOUGHT,
    RSI_OVERSOLD,
    RSI_PERIOD,
)
from ..shared.errors import InvalidParameterError
from ..shared.types import PriceBar, SignalType, TechnicalSignal
from .divergence import apply_divergence, detect_divergence
from .results import RSIResult
from .utils import align_to_bars, calculate_ema, calculate_gains_and_losses, source_offset

logger = logging.getLogger(__name__)

# RS used when there are gains but no losses at all
MAX_RS = 100.0


def _rsi_value(avg_gain: float, avg_loss: float) -> float:
    if avg_loss == 0:
        if avg_gain == 0:
            return 50.0
        rs = MAX_RS
    else:
        rs = avg_gain / avg_loss
    return float(100 - 100 / (1 + rs))


def _classify(rsi: float, overbought: float, oversold: float) -> Tuple[SignalType, float]:
    if rsi <= oversold:
        return SignalType.BUY, min(1.0, max(0.6, (oversold - rsi) / oversold + 0.5))
    if rsi >= overbought:
        return SignalType.SELL, min(1.0, max(0.6, (rsi - overbought) / (100 - overbought) + 0.5))
    return SignalType.HOLD, 0.3 + abs(rsi - 50) / 50 * 0.4


def calculate_rsi(
    bars: Sequence[PriceBar],
    period: int = RSI_PERIOD,
    overbought: float = RSI_OVERBOUGHT,
    oversold: float = RSI_OVERSOLD,
) -> List[RSIResult]:
    """
    Calculate RSI for a date-sorted series.

    The first result belongs to bar `period`, the first bar with `period`
    price changes behind it.

    Raises:
        InvalidParameterError: If period <= 0 or the series has <= period bars
    """
    if period <= 0 or len(bars) <= period:
        raise InvalidParameterError(
            f"Invalid period for RSI calculation: period={period}, data length={len(bars)}"
        )

    gains, losses = calculate_gains_and_losses(closes(bars))
    avg_gains = calculate_ema(gains, period)
    avg_losses = calculate_ema(losses, period)

    results = []
    for bar, avg_gain, avg_loss in align_to_bars(bars, avg_gains, avg_losses):
        rsi = _rsi_value(avg_gain, avg_loss)
        signal, strength = _classify(rsi, overbought, oversold)
        results.append(RSIResult(
            date=bar.date,
            value=rsi,
            signal=signal,
            strength=strength,
            overbought=rsi >= overbought,
            oversold=rsi <= oversold,
        ))
    return results


def detect_rsi_divergence(
    bars: Sequence[PriceBar],
    results: Sequence[RSIResult],
    lookback: int = DIVERGENCE_LOOKBACK,
) -> List[RSIResult]:
    """
    Return a copy of `results` with divergence bars turned into signals.

    Bullish needs both RSI readings below 50, bearish both above 50.
    """
    prices = closes(bars)[source_offset(len(bars), len(results)):]
    flags = detect_divergence(prices, [r.value for r in results], lookback, zone=50.0, prefer_bullish=True)
    return apply_divergence(results, flags)


def _describe(result: RSIResult) -> str:
    if result.signal == SignalType.BUY:
        if result.oversold:
            return f"RSI oversold at {result.value:.2f} - potential buying opportunity"
        if result.divergence == "bullish":
            return "Bullish RSI divergence detected - price momentum may reverse upward"
        return f"RSI showing bullish momentum at {result.value:.2f}"
    if result.overbought:
        return f"RSI overbought at {result.value:.2f} - potential selling opportunity"
    if result.divergence == "bearish":
        return "Bearish RSI divergence detected - price momentum may reverse downward"
    return f"RSI showing bearish momentum at {result.value:.2f}"


def generate_rsi_signals(results: Sequence[RSIResult], symbol: str = "") -> List[TechnicalSignal]:
    """One signal per buy/sell result; hold results produce nothing."""
    signals = [
        TechnicalSignal(
            indicator="RSI",
            signal=r.signal,
            strength=r.strength,
            value=r.value,
            timestamp=r.date,
            description=_describe(r),
        )
        for r in results
        if r.signal != SignalType.HOLD
    ]
    logger.debug("%s: %d RSI signals from %d values", symbol, len(signals), len(results))
    return signals


def analyze_rsi(
    bars: Sequence[PriceBar],
    symbol: str = "",
    period: int = RSI_PERIOD,
    overbought: float = RSI_OVERBOUGHT,
    oversold: float = RSI_OVERSOLD,
    detect_divergence: bool = True,
    lookback: int = DIVERGENCE_LOOKBACK,
) -> Tuple[List[RSIResult], List[TechnicalSignal]]:
    """Calculate RSI, optionally enrich with divergences, and generate signals."""
    results = calculate_rsi(bars, period, overbought, oversold)
    if detect_divergence:
        results = detect_rsi_divergence(bars, results, lookback)
    return results, generate_rsi_signals(results, symbol)
