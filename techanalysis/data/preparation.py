"""
Price series validation and preparation.

Validates the structural and numeric sanity of OHLCV bars and produces a
chronologically sorted copy for the indicator modules.
Fail-fast approach: raises ValidationError on the first bad bar.
"""
from __future__ import annotations

import math
from collections.abc import Mapping
from typing import Any, List, Sequence, Union

import numpy as np
import pandas as pd

from ..shared.errors import ValidationError
from ..shared.types import PriceBar
from .loader import bars_from_frame


PRICE_FIELDS = ("open", "high", "low", "close")
BAR_FIELDS = ("date",) + PRICE_FIELDS + ("volume",)


def _field(item: Any, name: str, index: int) -> Any:
    """Read a bar field from a PriceBar-like object or a mapping."""
    if isinstance(item, Mapping):
        if name not in item:
            raise ValidationError(f"Invalid price data at index {index}: missing required field '{name}'")
        return item[name]
    if not hasattr(item, name):
        raise ValidationError(f"Invalid price data at index {index}: missing required field '{name}'")
    return getattr(item, name)


def _to_number(value: Any, name: str, index: int) -> float:
    if isinstance(value, bool):
        raise ValidationError(f"Invalid price data at index {index}: {name} must be numeric, got {value!r}")
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise ValidationError(
            f"Invalid price data at index {index}: {name} must be numeric, got {value!r}"
        ) from None
    if not math.isfinite(number):
        raise ValidationError(f"Invalid price data at index {index}: {name} must be finite, got {number}")
    return number


def _to_timestamp(value: Any, index: int) -> pd.Timestamp:
    if value is None:
        raise ValidationError(f"Invalid price data at index {index}: missing required field 'date'")
    try:
        ts = pd.Timestamp(value)
    except (TypeError, ValueError):
        raise ValidationError(f"Invalid price data at index {index}: unparseable date {value!r}") from None
    if pd.isna(ts):
        raise ValidationError(f"Invalid price data at index {index}: unparseable date {value!r}")
    return ts


def coerce_bar(item: Any, index: int = 0) -> PriceBar:
    """
    Convert a PriceBar-like object or mapping into a validated PriceBar.

    Args:
        item: PriceBar, object with OHLCV attributes, or mapping with OHLCV keys
        index: Position of the bar in its series (used in error messages)

    Returns:
        PriceBar with float fields and a pandas Timestamp date

    Raises:
        ValidationError: If any field is missing, non-numeric, non-finite or inconsistent
    """
    date = _to_timestamp(_field(item, "date", index), index)
    open_, high, low, close = (_to_number(_field(item, f, index), f, index) for f in PRICE_FIELDS)
    volume = _to_number(_field(item, "volume", index), "volume", index)

    for name, price in zip(PRICE_FIELDS, (open_, high, low, close)):
        if price <= 0:
            raise ValidationError(
                f"Invalid price data at index {index}: {name} must be positive, got {price}"
            )
    if volume < 0:
        raise ValidationError(f"Invalid price data at index {index}: volume cannot be negative, got {volume}")
    if high < max(open_, close, low):
        raise ValidationError(
            f"Invalid price data at index {index}: high ({high}) cannot be less than open, close or low"
        )
    if low > min(open_, close, high):
        raise ValidationError(
            f"Invalid price data at index {index}: low ({low}) cannot exceed open, close or high"
        )

    return PriceBar(date=date, open=open_, high=high, low=low, close=close, volume=volume)


def _as_sequence(data: Union[Sequence[Any], pd.DataFrame]) -> Sequence[Any]:
    if isinstance(data, pd.DataFrame):
        try:
            return bars_from_frame(data)
        except (TypeError, ValueError) as e:
            raise ValidationError(f"Invalid price frame: {e}") from e
    if data is None or isinstance(data, (str, bytes)) or not hasattr(data, "__len__"):
        raise ValidationError("Price data must be a non-empty sequence of bars")
    return data


def validate_price_data(data: Union[Sequence[Any], pd.DataFrame]) -> List[PriceBar]:
    """
    Validate a price series.

    Passing validation does not imply chronological order.

    Args:
        data: Sequence of PriceBar-like items, or an OHLCV DataFrame

    Returns:
        The bars as validated PriceBar objects, in input order

    Raises:
        ValidationError: If the series is empty or any bar is malformed
    """
    items = _as_sequence(data)
    if len(items) == 0:
        raise ValidationError("Price data must be a non-empty sequence of bars")
    bars = [coerce_bar(item, i) for i, item in enumerate(items)]

    # Aware and naive timestamps cannot be ordered against each other
    aware = bars[0].date.tzinfo is not None
    for i, bar in enumerate(bars):
        if (bar.date.tzinfo is not None) != aware:
            raise ValidationError(
                f"Invalid price data at index {i}: date {bar.date} mixes timezone-aware and naive timestamps"
            )
    return bars


def sort_price_data(bars: Sequence[PriceBar]) -> List[PriceBar]:
    """Return a new list ordered ascending by date; ties keep input order."""
    return sorted(bars, key=lambda bar: bar.date)


def prepare_series(data: Union[Sequence[Any], pd.DataFrame]) -> List[PriceBar]:
    """Validate then sort. The input is never reordered in place."""
    return sort_price_data(validate_price_data(data))


def closes(bars: Sequence[PriceBar]) -> np.ndarray:
    """Close prices as a float array."""
    return np.array([bar.close for bar in bars], dtype=float)


def highs(bars: Sequence[PriceBar]) -> np.ndarray:
    return np.array([bar.high for bar in bars], dtype=float)


def lows(bars: Sequence[PriceBar]) -> np.ndarray:
    return np.array([bar.low for bar in bars], dtype=float)


def volumes(bars: Sequence[PriceBar]) -> np.ndarray:
    return np.array([bar.volume for bar in bars], dtype=float)
