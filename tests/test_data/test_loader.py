"""
Tests for CSV/DataFrame interchange and the sample data generator.
"""
import pandas as pd
import pytest

from techanalysis.data import (
    bars_from_frame,
    bars_to_frame,
    generate_sample_price_data,
    load_price_csv,
    prepare_series,
)


@pytest.fixture
def ohlcv_csv(tmp_path):
    """Unsorted five-day OHLCV CSV in the downloader layout."""
    df = pd.DataFrame(
        {
            "Open": [100.0, 101.0, 102.0, 103.0, 104.0],
            "High": [102.0, 103.0, 104.0, 105.0, 106.0],
            "Low": [99.0, 100.0, 101.0, 102.0, 103.0],
            "Close": [101.0, 102.0, 103.0, 104.0, 105.0],
            "Volume": [1000, 1100, 1200, 1300, 1400],
        },
        index=pd.DatetimeIndex(
            ["2024-01-03", "2024-01-01", "2024-01-02", "2024-01-05", "2024-01-04"], name="Date"
        ),
    )
    path = tmp_path / "TEST.csv"
    df.to_csv(path)
    return path


class TestLoadPriceCsv:

    def test_loads_sorted_bars(self, ohlcv_csv):
        bars = load_price_csv(ohlcv_csv)

        assert len(bars) == 5
        assert [b.date for b in bars] == list(pd.date_range("2024-01-01", periods=5, freq="D"))
        assert bars[0].close == 102.0

    def test_date_filter_is_inclusive(self, ohlcv_csv):
        bars = load_price_csv(ohlcv_csv, start_date="2024-01-02", end_date="2024-01-04")
        assert [b.date.day for b in bars] == [2, 3, 4]

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError, match="Data file not found"):
            load_price_csv(tmp_path / "missing.csv")

    def test_missing_column(self, tmp_path):
        path = tmp_path / "bad.csv"
        pd.DataFrame({"Close": [1.0]}, index=pd.DatetimeIndex(["2024-01-01"], name="Date")).to_csv(path)
        with pytest.raises(ValueError, match="Column for 'open' not found"):
            load_price_csv(path)


class TestFrameConversion:

    def test_lowercase_columns_and_date_column(self):
        df = pd.DataFrame({
            "date": ["2024-01-01", "2024-01-02"],
            "open": [1.0, 2.0],
            "high": [2.0, 3.0],
            "low": [0.5, 1.5],
            "close": [1.5, 2.5],
            "volume": [10, 20],
        })
        bars = bars_from_frame(df)
        assert bars[1].date == pd.Timestamp("2024-01-02")
        assert bars[1].volume == 20.0

    def test_to_frame_matches_bars(self, sample_bars):
        df = bars_to_frame(sample_bars)

        assert list(df.columns) == ["Open", "High", "Low", "Close", "Volume"]
        assert df.index.name == "Date"
        assert len(df) == len(sample_bars)
        assert df["Close"].iloc[-1] == sample_bars[-1].close


class TestSampleData:

    def test_length_and_dates(self):
        bars = generate_sample_price_data(30, seed=1, start_date="2024-03-01")
        assert len(bars) == 30
        assert bars[0].date == pd.Timestamp("2024-03-01")
        assert bars[-1].date == pd.Timestamp("2024-03-30")

    def test_seed_is_reproducible(self):
        assert generate_sample_price_data(20, seed=7) == generate_sample_price_data(20, seed=7)

    def test_bars_pass_validation(self):
        bars = generate_sample_price_data(100, volatility=0.1, seed=3)
        assert prepare_series(bars) == bars

    def test_opens_at_previous_close(self):
        bars = generate_sample_price_data(10, start_price=50.0, seed=5)
        assert bars[0].open == 50.0
        assert all(b.open == a.close for a, b in zip(bars, bars[1:]))
