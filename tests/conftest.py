import pandas as pd
import pytest

from techanalysis.data import generate_sample_price_data
from techanalysis.shared.types import PriceBar


def make_bars(closes, start="2024-01-01", volume=1_000_000.0, spread=0.01):
    """Bars opening at the previous close with a symmetric high/low envelope."""
    dates = pd.date_range(start, periods=len(closes), freq="D")
    bars = []
    previous = closes[0]
    for date, close in zip(dates, closes):
        bars.append(PriceBar(
            date=date,
            open=previous,
            high=max(previous, close) * (1 + spread),
            low=min(previous, close) * (1 - spread),
            close=close,
            volume=volume,
        ))
        previous = close
    return bars


@pytest.fixture
def uptrend_bars():
    """50 bars rising 1% per bar on constant volume."""
    dates = pd.date_range("2024-01-01", periods=50, freq="D")
    bars = []
    close = 100.0
    for i, date in enumerate(dates):
        previous = close / 1.01 if i == 0 else close
        if i > 0:
            close = close * 1.01
        bars.append(PriceBar(
            date=date,
            open=previous,
            high=close * 1.01,
            low=close * 0.97,
            close=close,
            volume=1_000_000.0,
        ))
    return bars


@pytest.fixture
def flat_bars():
    dates = pd.date_range("2024-01-01", periods=50, freq="D")
    return [PriceBar(date=d, open=100.0, high=100.0, low=100.0, close=100.0, volume=1_000_000.0) for d in dates]


@pytest.fixture
def declining_bars():
    """20 bars falling 1 per bar."""
    return make_bars([120.0 - i for i in range(20)])


@pytest.fixture
def sample_bars():
    return generate_sample_price_data(250, seed=42, start_date="2023-01-01")


@pytest.fixture
def bar_factory():
    return make_bars
