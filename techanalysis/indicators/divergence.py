"""
Price/indicator divergence detection.

Bullish divergence: price is lower than at some bar in the lookback window
while the indicator is higher. Bearish divergence: price higher, indicator
lower. An optional zone restricts bullish divergences to readings below it
and bearish ones to readings above it (50 for RSI, 0 for MACD).
"""
from dataclasses import replace
from typing import List, Optional, Sequence, TypeVar

from ..shared.defaults import DIVERGENCE_LOOKBACK, DIVERGENCE_STRENGTH_BOOST
from ..shared.types import SignalType

R = TypeVar("R")


def detect_divergence(
    prices: Sequence[float],
    values: Sequence[float],
    lookback: int = DIVERGENCE_LOOKBACK,
    zone: Optional[float] = None,
    prefer_bullish: bool = False,
) -> List[str]:
    """
    Flag divergences between a price series and an indicator aligned with it.

    Each bar with a full lookback window behind it is compared against every
    bar in that window.

    Args:
        prices: Close prices, one per indicator value
        values: Indicator values
        lookback: Number of earlier bars compared against
        zone: If set, bullish needs both readings below zone, bearish both above
        prefer_bullish: If True, any bullish match in the window wins over a
            bearish one; otherwise the earliest matching bar decides

    Returns:
        'bullish', 'bearish' or 'none' per value
    """
    n = min(len(prices), len(values))
    flags = ["none"] * len(values)
    if lookback <= 0 or n <= lookback:
        return flags

    def bullish(i: int, j: int) -> bool:
        if not (prices[i] < prices[j] and values[i] > values[j]):
            return False
        return zone is None or (values[i] < zone and values[j] < zone)

    def bearish(i: int, j: int) -> bool:
        if not (prices[i] > prices[j] and values[i] < values[j]):
            return False
        return zone is None or (values[i] > zone and values[j] > zone)

    for i in range(lookback, n):
        window = range(i - lookback, i)
        if prefer_bullish:
            if any(bullish(i, j) for j in window):
                flags[i] = "bullish"
            elif any(bearish(i, j) for j in window):
                flags[i] = "bearish"
            continue
        for j in window:
            if bullish(i, j):
                flags[i] = "bullish"
                break
            if bearish(i, j):
                flags[i] = "bearish"
                break
    return flags


def apply_divergence(
    results: Sequence[R],
    flags: Sequence[str],
    boost: float = DIVERGENCE_STRENGTH_BOOST,
) -> List[R]:
    """
    Return new records with divergence bars turned into buy/sell signals.

    Records must have `signal`, `strength` and `divergence` fields. Flagged
    records get the divergence label, the matching signal and strength
    raised by `boost` (capped at 1); others are passed through unchanged.
    """
    out = []
    for result, flag in zip(results, flags):
        if flag == "bullish":
            result = replace(
                result,
                divergence="bullish",
                signal=SignalType.BUY,
                strength=min(1.0, result.strength + boost),
            )
        elif flag == "bearish":
            result = replace(
                result,
                divergence="bearish",
                signal=SignalType.SELL,
                strength=min(1.0, result.strength + boost),
            )
        out.append(result)
    return out
