"""
Statistical primitives shared by the indicator modules.

Pure, stateless functions over plain numeric arrays (callers extract the
price fields from validated bars first). Windowed outputs are "valid-only":
a statistic over `period` values has len(values) - period + 1 entries and
its last entry lines up with the last input value. align_to_bars() maps any
such output back onto the bars it was computed from.
"""
from typing import Iterator, List, Sequence, Tuple

import numpy as np
import pandas as pd

from ..shared.errors import InvalidParameterError
from ..shared.types import PriceBar


def _as_array(values: Sequence[float]) -> np.ndarray:
    return np.asarray(values, dtype=float)


def _check_period(period: int, length: int, name: str) -> None:
    if period <= 0 or period > length:
        raise InvalidParameterError(
            f"Invalid period for {name} calculation: period={period}, data length={length}"
        )


def calculate_sma(values: Sequence[float], period: int) -> np.ndarray:
    """
    Simple moving average.

    Returns:
        Array of length len(values) - period + 1

    Raises:
        InvalidParameterError: If period <= 0 or period > len(values)
    """
    arr = _as_array(values)
    _check_period(period, len(arr), "SMA")
    return pd.Series(arr).rolling(period).mean().to_numpy()[period - 1:]


def calculate_ema(values: Sequence[float], period: int) -> np.ndarray:
    """
    Exponential moving average with smoothing factor 2 / (period + 1).

    The first value is the SMA of the first `period` inputs, so the output
    has the same length and alignment as calculate_sma().
    """
    arr = _as_array(values)
    _check_period(period, len(arr), "EMA")
    k = 2.0 / (period + 1)
    out = np.empty(len(arr) - period + 1)
    out[0] = arr[:period].mean()
    for i, x in enumerate(arr[period:], start=1):
        prev = out[i - 1]
        out[i] = prev + k * (x - prev)
    return out


def calculate_standard_deviation(values: Sequence[float], period: int) -> np.ndarray:
    """Rolling population standard deviation, aligned like calculate_sma()."""
    arr = _as_array(values)
    _check_period(period, len(arr), "standard deviation")
    # Two-pass per window so constant windows give exactly 0
    windows = np.lib.stride_tricks.sliding_window_view(arr, period)
    return windows.std(axis=1)


def calculate_price_changes(values: Sequence[float]) -> np.ndarray:
    """Period-over-period differences; one shorter than the input."""
    return np.diff(_as_array(values))


def calculate_gains_and_losses(values: Sequence[float]) -> Tuple[np.ndarray, np.ndarray]:
    """
    Split price changes into gains and losses.

    Returns:
        (gains, losses): gains hold positive changes else 0, losses hold the
        absolute value of negative changes else 0
    """
    changes = calculate_price_changes(values)
    gains = np.where(changes > 0, changes, 0.0)
    losses = np.where(changes < 0, -changes, 0.0)
    return gains, losses


def calculate_correlation(series1: Sequence[float], series2: Sequence[float]) -> float:
    """
    Pearson correlation of two equal-length series, in [-1, 1].

    NaN entries contribute nothing; zero variance on either side gives 0.

    Raises:
        InvalidParameterError: If the series differ in length or are empty
    """
    a = _as_array(series1)
    b = _as_array(series2)
    if len(a) != len(b) or len(a) == 0:
        raise InvalidParameterError("Series must have the same non-zero length")

    valid = np.isfinite(a) & np.isfinite(b)
    if not valid.any():
        return 0.0
    da = np.where(valid, a - a[valid].mean(), 0.0)
    db = np.where(valid, b - b[valid].mean(), 0.0)

    denominator = np.sqrt((da * da).sum() * (db * db).sum())
    if denominator == 0 or not np.isfinite(denominator):
        return 0.0
    return float(np.clip((da * db).sum() / denominator, -1.0, 1.0))


def find_highest_high(bars: Sequence[PriceBar], start_index: int, period: int) -> float:
    """Max high over bars[start_index:start_index + period] (clipped to the series)."""
    return max(bar.high for bar in bars[start_index:start_index + period])


def find_lowest_low(bars: Sequence[PriceBar], start_index: int, period: int) -> float:
    """Min low over bars[start_index:start_index + period] (clipped to the series)."""
    return min(bar.low for bar in bars[start_index:start_index + period])


def rolling_high(highs: Sequence[float], period: int) -> np.ndarray:
    """Highest value of each trailing window, aligned like calculate_sma()."""
    arr = _as_array(highs)
    _check_period(period, len(arr), "rolling high")
    return pd.Series(arr).rolling(period).max().to_numpy()[period - 1:]


def rolling_low(lows: Sequence[float], period: int) -> np.ndarray:
    """Lowest value of each trailing window, aligned like calculate_sma()."""
    arr = _as_array(lows)
    _check_period(period, len(arr), "rolling low")
    return pd.Series(arr).rolling(period).min().to_numpy()[period - 1:]


def calculate_true_range(bars: Sequence[PriceBar]) -> np.ndarray:
    """True range per bar from the second bar on (needs the previous close)."""
    high = np.array([b.high for b in bars[1:]], dtype=float)
    low = np.array([b.low for b in bars[1:]], dtype=float)
    prev_close = np.array([b.close for b in bars[:-1]], dtype=float)
    return np.maximum.reduce([high - low, np.abs(high - prev_close), np.abs(low - prev_close)])


def calculate_atr(bars: Sequence[PriceBar], period: int) -> np.ndarray:
    """Average true range: SMA of the true range."""
    return calculate_sma(calculate_true_range(bars), period)


def detect_crossovers(series1: Sequence[float], series2: Sequence[float]) -> List[str]:
    """
    Classify each step where series1 crosses series2.

    Returns:
        'bullish' (crossed above), 'bearish' (crossed below) or 'none' per step;
        length is min(len(series1), len(series2)) - 1
    """
    n = min(len(series1), len(series2))
    result = []
    for i in range(1, n):
        prev_diff = series1[i - 1] - series2[i - 1]
        curr_diff = series1[i] - series2[i]
        if prev_diff <= 0 and curr_diff > 0:
            result.append("bullish")
        elif prev_diff >= 0 and curr_diff < 0:
            result.append("bearish")
        else:
            result.append("none")
    return result


def calculate_percentage_change(old_value: float, new_value: float) -> float:
    """Percent change from old_value to new_value; 0 when old_value is 0."""
    if old_value == 0:
        return 0.0
    return (new_value - old_value) / old_value * 100


def normalize_values(values: Sequence[float]) -> np.ndarray:
    """Scale to [0, 1]; a constant series maps to 0.5 everywhere."""
    arr = _as_array(values)
    if len(arr) == 0:
        return arr
    lo, hi = arr.min(), arr.max()
    if hi == lo:
        return np.full(len(arr), 0.5)
    return (arr - lo) / (hi - lo)


def source_offset(n_bars: int, n_values: int) -> int:
    """Index of the bar that a windowed output's first value belongs to."""
    offset = n_bars - n_values
    if offset < 0:
        raise InvalidParameterError(
            f"Cannot align {n_values} values to {n_bars} bars"
        )
    return offset


def align_to_bars(bars: Sequence[PriceBar], *series: Sequence[float]) -> Iterator[Tuple]:
    """
    Pair each value of equally long windowed outputs with its source bar.

    Every windowed output ends at the last bar, so value i of an output with
    m values belongs to bar len(bars) - m + i.

    Yields:
        (bar, value_from_series_1, value_from_series_2, ...)
    """
    if not series:
        return iter(())
    length = len(series[0])
    if any(len(s) != length for s in series):
        raise InvalidParameterError("Aligned series must have equal length")
    offset = source_offset(len(bars), length)
    return zip(bars[offset:], *series)
