"""
Technical analysis engine.

Validates and sorts a price series once, runs every enabled indicator
family that has enough data, and reduces the collected signals into a
Summary. Only input validation can raise; an indicator that fails at
runtime is logged, recorded in `errors` and left out of the result.
"""
import logging
from dataclasses import asdict, dataclass, field, fields
from enum import Enum
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence, Tuple, Union

import pandas as pd

from ..data.preparation import prepare_series
from ..indicators.bollinger_bands import analyze_bollinger_bands
from ..indicators.macd import analyze_macd
from ..indicators.momentum import analyze_adx, analyze_stochastic, analyze_williams_r
from ..indicators.moving_averages import analyze_moving_averages
from ..indicators.results import (
    ADXResult,
    AccumulationDistributionResult,
    BollingerBandsResult,
    MACDResult,
    MovingAverageResult,
    OBVResult,
    RSIResult,
    StochasticResult,
    VolumePriceTrendResult,
    WilliamsRResult,
)
from ..indicators.rsi import analyze_rsi
from ..indicators.volume import analyze_volume
from ..shared.defaults import MIN_CONSENSUS, STRONG_SIGNAL_THRESHOLD
from ..shared.types import PriceBar, TechnicalSignal
from .config import IndicatorConfig, merge_config
from .queries import get_consensus_signals, get_signals_by_indicator, get_strong_signals, signals_to_frame
from .summary import Summary, generate_summary

logger = logging.getLogger(__name__)

ConfigInput = Union[None, IndicatorConfig, Mapping[str, Any]]


@dataclass(frozen=True)
class IndicatorSet:
    """Indicator results of one analysis; None where an indicator did not run."""
    rsi: Optional[List[RSIResult]] = None
    macd: Optional[List[MACDResult]] = None
    bollinger_bands: Optional[List[BollingerBandsResult]] = None
    sma: Optional[List[MovingAverageResult]] = None
    ema: Optional[List[MovingAverageResult]] = None
    stochastic: Optional[List[StochasticResult]] = None
    williams_r: Optional[List[WilliamsRResult]] = None
    adx: Optional[List[ADXResult]] = None
    obv: Optional[List[OBVResult]] = None
    volume_price_trend: Optional[List[VolumePriceTrendResult]] = None
    accumulation_distribution: Optional[List[AccumulationDistributionResult]] = None

    def available(self) -> List[str]:
        """Names of the populated fields, in declaration order."""
        return [f.name for f in fields(self) if getattr(self, f.name) is not None]

    def get(self, name: str) -> Optional[list]:
        if name not in {f.name for f in fields(self)}:
            raise KeyError(f"Unknown indicator: {name}")
        return getattr(self, name)

    def to_frame(self, name: str) -> pd.DataFrame:
        """
        One indicator's records as a DataFrame indexed by date.

        Enum values are stored as their strings. An indicator that did not
        run gives an empty frame.
        """
        records = self.get(name) or []
        rows = [
            {k: v.value if isinstance(v, Enum) else v for k, v in asdict(r).items()}
            for r in records
        ]
        if not rows:
            return pd.DataFrame()
        return pd.DataFrame(rows).set_index("date")


@dataclass(frozen=True)
class IndicatorOutput:
    """What one indicator family contributes: IndicatorSet fields and signals."""
    results: Dict[str, list]
    signals: List[TechnicalSignal]


@dataclass(frozen=True)
class IndicatorOutcome:
    """Either the output of one indicator family or the error it raised."""
    name: str
    output: Optional[IndicatorOutput] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass
class TechnicalAnalysisResult:
    symbol: str
    timestamp: pd.Timestamp
    indicators: IndicatorSet = field(default_factory=IndicatorSet)
    signals: List[TechnicalSignal] = field(default_factory=list)
    summary: Summary = field(default_factory=Summary)
    errors: Dict[str, str] = field(default_factory=dict)

    def signals_frame(self) -> pd.DataFrame:
        return signals_to_frame(self.signals)


def minimum_bars(name: str, config: Any) -> int:
    """Fewest bars the indicator family `name` needs with the given sub-config."""
    if name == "rsi":
        return config.period + 1
    if name == "macd":
        return config.slow_period + config.signal_period
    if name == "bollinger_bands":
        return config.period
    if name == "moving_averages":
        return min(config.periods)
    if name == "stochastic":
        return max(config.k_period + config.d_period - 1, config.k_period + 1)
    if name == "williams_r":
        return config.period + 1
    if name == "adx":
        return max(2 * config.period, config.period + 2)
    if name == "volume":
        return config.min_periods
    raise KeyError(f"Unknown indicator: {name}")


# =============================================================================
# Per-family runners
# =============================================================================

def _run_rsi(bars: Sequence[PriceBar], symbol: str, cfg) -> IndicatorOutput:
    results, signals = analyze_rsi(
        bars, symbol,
        period=cfg.period,
        overbought=cfg.overbought,
        oversold=cfg.oversold,
        detect_divergence=cfg.detect_divergence,
        lookback=cfg.lookback,
    )
    return IndicatorOutput({"rsi": results}, signals)


def _run_macd(bars: Sequence[PriceBar], symbol: str, cfg) -> IndicatorOutput:
    results, signals = analyze_macd(
        bars, symbol,
        fast_period=cfg.fast_period,
        slow_period=cfg.slow_period,
        signal_period=cfg.signal_period,
        detect_divergence=cfg.detect_divergence,
        lookback=cfg.lookback,
    )
    return IndicatorOutput({"macd": results}, signals)


def _run_bollinger_bands(bars: Sequence[PriceBar], symbol: str, cfg) -> IndicatorOutput:
    results, signals = analyze_bollinger_bands(
        bars, symbol,
        period=cfg.period,
        standard_deviations=cfg.standard_deviations,
        squeeze_threshold=cfg.squeeze_threshold,
        detect_walking=cfg.detect_walking,
    )
    return IndicatorOutput({"bollinger_bands": results}, signals)


def _run_moving_averages(bars: Sequence[PriceBar], symbol: str, cfg) -> IndicatorOutput:
    sma, ema, signals = analyze_moving_averages(
        bars, symbol,
        periods=cfg.periods,
        include_ema=cfg.include_ema,
        include_crossovers=cfg.include_crossovers,
    )
    results = {"sma": sma}
    if cfg.include_ema:
        results["ema"] = ema
    return IndicatorOutput(results, signals)


def _run_stochastic(bars: Sequence[PriceBar], symbol: str, cfg) -> IndicatorOutput:
    results, signals = analyze_stochastic(
        bars, symbol,
        k_period=cfg.k_period,
        d_period=cfg.d_period,
        overbought=cfg.overbought,
        oversold=cfg.oversold,
    )
    return IndicatorOutput({"stochastic": results}, signals)


def _run_williams_r(bars: Sequence[PriceBar], symbol: str, cfg) -> IndicatorOutput:
    results, signals = analyze_williams_r(
        bars, symbol,
        period=cfg.period,
        overbought=cfg.overbought,
        oversold=cfg.oversold,
    )
    return IndicatorOutput({"williams_r": results}, signals)


def _run_adx(bars: Sequence[PriceBar], symbol: str, cfg) -> IndicatorOutput:
    results, signals = analyze_adx(bars, symbol, period=cfg.period, strong_trend=cfg.strong_trend)
    return IndicatorOutput({"adx": results}, signals)


def _run_volume(bars: Sequence[PriceBar], symbol: str, cfg) -> IndicatorOutput:
    obv, vpt, ad, signals = analyze_volume(
        bars, symbol,
        detect_divergences=cfg.detect_divergences,
        lookback=cfg.lookback,
    )
    return IndicatorOutput(
        {"obv": obv, "volume_price_trend": vpt, "accumulation_distribution": ad},
        signals,
    )


# Processing order; also the order of result.signals
RUNNERS: Tuple[Tuple[str, Callable[..., IndicatorOutput]], ...] = (
    ("rsi", _run_rsi),
    ("macd", _run_macd),
    ("bollinger_bands", _run_bollinger_bands),
    ("moving_averages", _run_moving_averages),
    ("stochastic", _run_stochastic),
    ("williams_r", _run_williams_r),
    ("adx", _run_adx),
    ("volume", _run_volume),
)


class TechnicalAnalysisEngine:
    """
    Runs the configured indicators over a price series.

    The merged configuration is fixed at construction; analyze() keeps no
    state between calls.
    """

    def __init__(self, config: ConfigInput = None):
        self.config = merge_config(config)

    def run_indicator(self, name: str, runner: Callable[..., IndicatorOutput],
                      bars: Sequence[PriceBar], symbol: str) -> IndicatorOutcome:
        """Run one family, turning any exception into an error outcome."""
        try:
            output = runner(bars, symbol, getattr(self.config, name))
        except Exception as e:
            logger.exception("Indicator %s failed for %s", name, symbol)
            return IndicatorOutcome(name, error=f"{type(e).__name__}: {e}")
        return IndicatorOutcome(name, output=output)

    def run_indicators(self, bars: Sequence[PriceBar], symbol: str) -> List[IndicatorOutcome]:
        """Outcomes of every enabled family with enough data, in processing order."""
        outcomes = []
        for name, runner in RUNNERS:
            cfg = getattr(self.config, name)
            if cfg is None:
                continue
            needed = minimum_bars(name, cfg)
            if len(bars) < needed:
                logger.debug("Skipping %s for %s: %d bars, need %d", name, symbol, len(bars), needed)
                continue
            outcomes.append(self.run_indicator(name, runner, bars, symbol))
        return outcomes

    def analyze(self, data: Union[Sequence[Any], pd.DataFrame], symbol: str = "") -> TechnicalAnalysisResult:
        """
        Analyze one price series.

        Args:
            data: PriceBar-like items (any order) or an OHLCV DataFrame
            symbol: Label carried into the result and log messages

        Returns:
            TechnicalAnalysisResult, possibly with fewer indicators than
            configured

        Raises:
            ValidationError: If the series is empty or any bar is malformed
        """
        bars = prepare_series(data)

        results: Dict[str, list] = {}
        signals: List[TechnicalSignal] = []
        errors: Dict[str, str] = {}
        for outcome in self.run_indicators(bars, symbol):
            if outcome.ok:
                results.update(outcome.output.results)
                signals.extend(outcome.output.signals)
            else:
                errors[outcome.name] = outcome.error

        indicators = IndicatorSet(**results)
        result = TechnicalAnalysisResult(
            symbol=symbol,
            timestamp=pd.Timestamp.now(),
            indicators=indicators,
            signals=signals,
            summary=generate_summary(signals, bars),
            errors=errors,
        )
        logger.info(
            "Analyzed %s: %d bars, %d indicators, %d signals, %d errors",
            symbol, len(bars), len(indicators.available()), len(signals), len(errors),
        )
        return result

    def get_strong_signals(self, result: TechnicalAnalysisResult,
                           min_strength: float = STRONG_SIGNAL_THRESHOLD) -> List[TechnicalSignal]:
        return get_strong_signals(result, min_strength)

    def get_signals_by_indicator(self, result: TechnicalAnalysisResult, indicator: str) -> List[TechnicalSignal]:
        return get_signals_by_indicator(result, indicator)

    def get_consensus_signals(self, result: TechnicalAnalysisResult,
                              min_consensus: int = MIN_CONSENSUS) -> List[TechnicalSignal]:
        return get_consensus_signals(result, min_consensus)


def analyze_technicals(
    data: Union[Sequence[Any], pd.DataFrame],
    symbol: str = "",
    config: ConfigInput = None,
) -> TechnicalAnalysisResult:
    """Build an engine with `config` and analyze `data` in one step."""
    return TechnicalAnalysisEngine(config).analyze(data, symbol)
