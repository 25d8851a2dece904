"""
Simple and exponential moving averages over a list of periods, plus the
trend and crossover signals derived from them.
"""
import logging
from typing import Dict, List, Sequence, Tuple

import pandas as pd

from ..data.preparation import closes
from ..shared.defaults import MA_PERIODS
from ..shared.errors import InvalidParameterError
from ..shared.types import PriceBar, SignalType, TechnicalSignal
from .results import MovingAverageResult
from .utils import align_to_bars, calculate_ema, calculate_sma, detect_crossovers, source_offset

logger = logging.getLogger(__name__)

MA_TYPES = ("SMA", "EMA")

PRICE_CROSS_STRENGTH = 0.6
AVERAGE_CROSS_STRENGTH = 0.75
MAX_TREND_STRENGTH = 0.8


def calculate_moving_average(
    bars: Sequence[PriceBar],
    period: int,
    ma_type: str = "SMA",
) -> List[MovingAverageResult]:
    """
    One moving average series for a date-sorted series.

    Raises:
        InvalidParameterError: If ma_type is unknown or period does not fit the data
    """
    if ma_type not in MA_TYPES:
        raise InvalidParameterError(f"Unknown moving average type: {ma_type}")
    calculate = calculate_sma if ma_type == "SMA" else calculate_ema
    values = calculate(closes(bars), period)
    return [
        MovingAverageResult(date=bar.date, value=float(value), type=ma_type, period=period)
        for bar, value in align_to_bars(bars, values)
    ]


def calculate_moving_averages(
    bars: Sequence[PriceBar],
    periods: Sequence[int] = MA_PERIODS,
    include_ema: bool = True,
) -> Tuple[List[MovingAverageResult], List[MovingAverageResult]]:
    """
    SMA (and optionally EMA) for every period that fits the data.

    Periods longer than the series are skipped.

    Returns:
        (sma, ema): flat lists ordered by period then date; ema is empty
        when include_ema is False
    """
    sma: List[MovingAverageResult] = []
    ema: List[MovingAverageResult] = []
    for period in periods:
        if period > len(bars):
            logger.debug("Skipping %d-period moving average: only %d bars", period, len(bars))
            continue
        sma.extend(calculate_moving_average(bars, period, "SMA"))
        if include_ema:
            ema.extend(calculate_moving_average(bars, period, "EMA"))
    return sma, ema


def _by_period(results: Sequence[MovingAverageResult]) -> Dict[int, List[MovingAverageResult]]:
    grouped: Dict[int, List[MovingAverageResult]] = {}
    for r in results:
        grouped.setdefault(r.period, []).append(r)
    return grouped


def detect_moving_average_crossovers(
    short: Sequence[MovingAverageResult],
    long: Sequence[MovingAverageResult],
) -> List[Tuple[pd.Timestamp, str]]:
    """
    Dates where the short average crosses the long one.

    Both series must end on the same bar; the longer-period series is the
    shorter list.

    Returns:
        (date, 'bullish' | 'bearish') per crossing, in date order
    """
    if not short or not long:
        return []
    n = min(len(short), len(long))
    short_tail = short[len(short) - n:]
    long_tail = long[len(long) - n:]
    steps = detect_crossovers([r.value for r in short_tail], [r.value for r in long_tail])
    return [
        (long_tail[i + 1].date, direction)
        for i, direction in enumerate(steps)
        if direction != "none"
    ]


def _trend_strength(price: float, average: float) -> float:
    return min(MAX_TREND_STRENGTH, 0.5 + abs(price / average - 1) * 3)


def _series_signals(bars: Sequence[PriceBar], series: Sequence[MovingAverageResult]) -> List[TechnicalSignal]:
    """Trend alignment and price crossovers for one average."""
    if len(series) < 2:
        return []
    ma_type, period = series[0].type, series[0].period
    name = f"{ma_type} {period}"
    prices = closes(bars)[source_offset(len(bars), len(series)):]

    signals = []
    for i in range(1, len(series)):
        prev, cur = series[i - 1], series[i]
        prev_price, price = float(prices[i - 1]), float(prices[i])

        if price > cur.value and cur.value > prev.value:
            signals.append(TechnicalSignal(
                indicator=name,
                signal=SignalType.BUY,
                strength=_trend_strength(price, cur.value),
                value=cur.value,
                timestamp=cur.date,
                description=f"Price above rising {period}-period {ma_type} ({cur.value:.2f}) - uptrend intact",
            ))
        elif price < cur.value and cur.value < prev.value:
            signals.append(TechnicalSignal(
                indicator=name,
                signal=SignalType.SELL,
                strength=_trend_strength(price, cur.value),
                value=cur.value,
                timestamp=cur.date,
                description=f"Price below falling {period}-period {ma_type} ({cur.value:.2f}) - downtrend intact",
            ))

        if prev_price <= prev.value and price > cur.value:
            signals.append(TechnicalSignal(
                indicator=name,
                signal=SignalType.BUY,
                strength=PRICE_CROSS_STRENGTH,
                value=cur.value,
                timestamp=cur.date,
                description=f"Price crossed above {period}-period {ma_type} ({cur.value:.2f})",
            ))
        elif prev_price >= prev.value and price < cur.value:
            signals.append(TechnicalSignal(
                indicator=name,
                signal=SignalType.SELL,
                strength=PRICE_CROSS_STRENGTH,
                value=cur.value,
                timestamp=cur.date,
                description=f"Price crossed below {period}-period {ma_type} ({cur.value:.2f})",
            ))
    return signals


def _average_cross_signals(results: Sequence[MovingAverageResult]) -> List[TechnicalSignal]:
    """Golden/death cross between the shortest and longest period of one type."""
    grouped = _by_period(results)
    if len(grouped) < 2:
        return []
    short_period, long_period = min(grouped), max(grouped)
    short, long = grouped[short_period], grouped[long_period]
    ma_type = short[0].type
    long_by_date = {r.date: r for r in long}

    signals = []
    for date, direction in detect_moving_average_crossovers(short, long):
        bullish = direction == "bullish"
        signals.append(TechnicalSignal(
            indicator=f"{ma_type} {short_period}/{long_period}",
            signal=SignalType.BUY if bullish else SignalType.SELL,
            strength=AVERAGE_CROSS_STRENGTH,
            value=long_by_date[date].value,
            timestamp=date,
            description=(
                f"{'Golden' if bullish else 'Death'} cross - {short_period}-period {ma_type} crossed "
                f"{'above' if bullish else 'below'} {long_period}-period {ma_type}"
            ),
        ))
    return signals


def generate_moving_average_signals(
    bars: Sequence[PriceBar],
    sma: Sequence[MovingAverageResult],
    ema: Sequence[MovingAverageResult] = (),
    symbol: str = "",
    include_crossovers: bool = True,
) -> List[TechnicalSignal]:
    """
    Signals from every average, ordered by date.

    - Trend alignment: close above a rising average is a buy, below a
      falling one a sell; strength grows with the distance to the average.
    - Price crossover: close crossing its average.
    - Average crossover (when include_crossovers): shortest vs longest period.
    """
    signals: List[TechnicalSignal] = []
    for results in (sma, ema):
        for series in _by_period(results).values():
            signals.extend(_series_signals(bars, series))
        if include_crossovers:
            signals.extend(_average_cross_signals(results))

    # Stable sort keeps SMA before EMA on the same bar
    signals.sort(key=lambda s: s.timestamp)
    logger.debug("%s: %d moving average signals", symbol, len(signals))
    return signals


def analyze_moving_averages(
    bars: Sequence[PriceBar],
    symbol: str = "",
    periods: Sequence[int] = MA_PERIODS,
    include_ema: bool = True,
    include_crossovers: bool = True,
) -> Tuple[List[MovingAverageResult], List[MovingAverageResult], List[TechnicalSignal]]:
    """
    Calculate the averages and their signals.

    Returns:
        (sma, ema, signals)
    """
    sma, ema = calculate_moving_averages(bars, periods, include_ema)
    signals = generate_moving_average_signals(bars, sma, ema, symbol, include_crossovers)
    return sma, ema, signals
