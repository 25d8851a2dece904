"""
OHLCV interchange between pandas and PriceBar lists.

Loads OHLCV CSV files (Date index, Open/High/Low/Close/Volume columns) and
converts DataFrames to and from the PriceBar records the engine consumes.
"""
import pandas as pd
from pathlib import Path
from typing import List, Optional, Sequence, Union
from datetime import datetime

from ..shared.types import PriceBar


# Column name variants accepted for each bar field
_COLUMN_ALIASES = {
    "open": ("Open", "open", "OPEN"),
    "high": ("High", "high", "HIGH"),
    "low": ("Low", "low", "LOW"),
    "close": ("Close", "close", "CLOSE", "Adj Close"),
    "volume": ("Volume", "volume", "VOLUME"),
}
_DATE_COLUMNS = ("Date", "date", "Datetime", "datetime", "timestamp")


def _resolve_column(df: pd.DataFrame, field: str) -> str:
    for name in _COLUMN_ALIASES[field]:
        if name in df.columns:
            return name
    raise ValueError(
        f"Column for '{field}' not found. Available: {list(df.columns)}"
    )


def bars_from_frame(df: pd.DataFrame) -> List[PriceBar]:
    """
    Convert an OHLCV DataFrame into PriceBar records.

    Dates come from a Date-like column if present, else from the index.
    Row order is preserved; values are not validated here.

    Args:
        df: DataFrame with Open/High/Low/Close/Volume columns

    Returns:
        List of PriceBar, one per row
    """
    columns = {field: _resolve_column(df, field) for field in _COLUMN_ALIASES}
    date_col = next((c for c in _DATE_COLUMNS if c in df.columns), None)
    dates = pd.to_datetime(df[date_col]) if date_col is not None else pd.to_datetime(df.index)

    return [
        PriceBar(
            date=pd.Timestamp(date),
            open=float(o),
            high=float(h),
            low=float(lo),
            close=float(c),
            volume=float(v),
        )
        for date, o, h, lo, c, v in zip(
            dates,
            df[columns["open"]],
            df[columns["high"]],
            df[columns["low"]],
            df[columns["close"]],
            df[columns["volume"]],
        )
    ]


def bars_to_frame(bars: Sequence[PriceBar]) -> pd.DataFrame:
    """Convert PriceBar records into an OHLCV DataFrame indexed by date."""
    df = pd.DataFrame(
        {
            "Open": [b.open for b in bars],
            "High": [b.high for b in bars],
            "Low": [b.low for b in bars],
            "Close": [b.close for b in bars],
            "Volume": [b.volume for b in bars],
        },
        index=pd.DatetimeIndex([b.date for b in bars], name="Date"),
    )
    return df


def load_price_csv(
    path: Union[str, Path],
    start_date: Optional[Union[str, datetime, pd.Timestamp]] = None,
    end_date: Optional[Union[str, datetime, pd.Timestamp]] = None,
) -> List[PriceBar]:
    """
    Load OHLCV bars from a CSV file with optional date filtering.

    Args:
        path: CSV file with the date in the first column
        start_date: Start date for filtering (inclusive). If None, no start filter.
        end_date: End date for filtering (inclusive). If None, no end filter.

    Returns:
        List of PriceBar sorted by date

    Raises:
        FileNotFoundError: If the file doesn't exist
        ValueError: If required OHLCV columns are missing
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Data file not found: {path}")

    df = pd.read_csv(path, index_col=0, parse_dates=True)
    if not isinstance(df.index, pd.DatetimeIndex):
        df.index = pd.to_datetime(df.index)
    df = df.sort_index()

    if start_date is not None:
        df = df[df.index >= pd.to_datetime(start_date)]
    if end_date is not None:
        df = df[df.index <= pd.to_datetime(end_date)]

    return bars_from_frame(df)
