"""
Synthetic OHLCV generator for demos and tests.
"""
from typing import List, Optional, Union
from datetime import datetime

import numpy as np
import pandas as pd

from ..shared.types import PriceBar


def generate_sample_price_data(
    days: int,
    start_price: float = 100.0,
    volatility: float = 0.02,
    seed: Optional[int] = None,
    start_date: Optional[Union[str, datetime, pd.Timestamp]] = None,
) -> List[PriceBar]:
    """
    Generate a random-walk price series with a consistent high/low envelope.

    Args:
        days: Number of daily bars
        start_price: Opening price of the first bar
        volatility: Maximum relative move per bar (uniform in +/- volatility)
        seed: Seed for reproducible output
        start_date: Date of the first bar (default: `days` days before today)

    Returns:
        List of PriceBar in ascending date order
    """
    rng = np.random.default_rng(seed)
    if start_date is None:
        start = pd.Timestamp.today().normalize() - pd.Timedelta(days=days)
    else:
        start = pd.Timestamp(start_date)
    dates = pd.date_range(start, periods=days, freq="D")

    bars: List[PriceBar] = []
    current = float(start_price)
    for date in dates:
        change = (rng.random() - 0.5) * 2 * volatility * current
        close = max(current + change, 0.01)
        high = close * (1 + rng.random() * 0.02)
        low = close * (1 - rng.random() * 0.02)
        open_ = current
        bars.append(PriceBar(
            date=date,
            open=open_,
            high=max(high, open_, close),
            low=min(low, open_, close),
            close=close,
            volume=float(rng.integers(100_000, 1_100_000)),
        ))
        current = close
    return bars
