"""
Data preparation module.

Provides:
- Validation and chronological sorting of OHLCV price series
- DataFrame / CSV interchange for PriceBar lists
- Synthetic sample data
"""
from .preparation import (
    validate_price_data,
    sort_price_data,
    prepare_series,
    coerce_bar,
)
from .loader import bars_from_frame, bars_to_frame, load_price_csv
from .sample import generate_sample_price_data

__all__ = [
    'validate_price_data',
    'sort_price_data',
    'prepare_series',
    'coerce_bar',
    'bars_from_frame',
    'bars_to_frame',
    'load_price_csv',
    'generate_sample_price_data',
]
