"""
Indicator configuration for the analysis engine.

One sub-config per indicator family; a family whose sub-config is None is
skipped. Config validation runs at construction time (fail fast with clear
errors). merge_config() layers partial user settings over the defaults.
"""
from dataclasses import dataclass, field, fields, replace
from typing import Any, Dict, Mapping, Optional, Tuple, Union

from ..shared.defaults import (
    RSI_PERIOD, RSI_OVERBOUGHT, RSI_OVERSOLD,
    MACD_FAST, MACD_SLOW, MACD_SIGNAL,
    BOLLINGER_PERIOD, BOLLINGER_STD_DEVS, BOLLINGER_SQUEEZE_BANDWIDTH,
    MA_PERIODS,
    STOCHASTIC_K_PERIOD, STOCHASTIC_D_PERIOD, STOCHASTIC_OVERBOUGHT, STOCHASTIC_OVERSOLD,
    WILLIAMS_R_PERIOD, WILLIAMS_R_OVERBOUGHT, WILLIAMS_R_OVERSOLD,
    ADX_PERIOD, ADX_STRONG_TREND,
    VOLUME_MIN_PERIODS, DIVERGENCE_LOOKBACK,
)


def _require_period(name: str, value: int) -> None:
    if isinstance(value, bool) or not isinstance(value, int) or value < 1:
        raise ValueError(f"{name} must be an integer >= 1, got {value!r}")


def _require_thresholds(name: str, oversold: float, overbought: float, low: float, high: float) -> None:
    if not (low <= oversold < overbought <= high):
        raise ValueError(
            f"{name} thresholds must satisfy {low} <= oversold ({oversold}) "
            f"< overbought ({overbought}) <= {high}"
        )


@dataclass
class RSIConfig:
    period: int = RSI_PERIOD
    overbought: float = RSI_OVERBOUGHT
    oversold: float = RSI_OVERSOLD
    detect_divergence: bool = True
    lookback: int = DIVERGENCE_LOOKBACK

    def __post_init__(self) -> None:
        _require_period("RSI period", self.period)
        _require_period("RSI divergence lookback", self.lookback)
        if not (0 < self.oversold < self.overbought < 100):
            raise ValueError(
                f"RSI oversold ({self.oversold}) must be less than overbought ({self.overbought}), both in (0, 100)"
            )


@dataclass
class MACDConfig:
    fast_period: int = MACD_FAST
    slow_period: int = MACD_SLOW
    signal_period: int = MACD_SIGNAL
    detect_divergence: bool = True
    lookback: int = DIVERGENCE_LOOKBACK

    def __post_init__(self) -> None:
        _require_period("MACD fast_period", self.fast_period)
        _require_period("MACD slow_period", self.slow_period)
        _require_period("MACD signal_period", self.signal_period)
        _require_period("MACD divergence lookback", self.lookback)
        if self.fast_period >= self.slow_period:
            raise ValueError(
                f"MACD fast_period ({self.fast_period}) must be less than slow_period ({self.slow_period})"
            )


@dataclass
class BollingerBandsConfig:
    period: int = BOLLINGER_PERIOD
    standard_deviations: float = BOLLINGER_STD_DEVS
    squeeze_threshold: float = BOLLINGER_SQUEEZE_BANDWIDTH
    detect_walking: bool = True

    def __post_init__(self) -> None:
        _require_period("Bollinger Bands period", self.period)
        if self.standard_deviations <= 0:
            raise ValueError(f"standard_deviations must be > 0, got {self.standard_deviations}")
        if self.squeeze_threshold <= 0:
            raise ValueError(f"squeeze_threshold must be > 0, got {self.squeeze_threshold}")


@dataclass
class MovingAveragesConfig:
    periods: Tuple[int, ...] = MA_PERIODS
    include_ema: bool = True
    include_crossovers: bool = True

    def __post_init__(self) -> None:
        self.periods = tuple(self.periods)
        if not self.periods:
            raise ValueError("Moving average periods must not be empty")
        for period in self.periods:
            _require_period("Moving average period", period)


@dataclass
class StochasticConfig:
    k_period: int = STOCHASTIC_K_PERIOD
    d_period: int = STOCHASTIC_D_PERIOD
    overbought: float = STOCHASTIC_OVERBOUGHT
    oversold: float = STOCHASTIC_OVERSOLD

    def __post_init__(self) -> None:
        _require_period("Stochastic k_period", self.k_period)
        _require_period("Stochastic d_period", self.d_period)
        _require_thresholds("Stochastic", self.oversold, self.overbought, 0, 100)


@dataclass
class WilliamsRConfig:
    period: int = WILLIAMS_R_PERIOD
    overbought: float = WILLIAMS_R_OVERBOUGHT
    oversold: float = WILLIAMS_R_OVERSOLD

    def __post_init__(self) -> None:
        _require_period("Williams %R period", self.period)
        _require_thresholds("Williams %R", self.oversold, self.overbought, -100, 0)


@dataclass
class ADXConfig:
    period: int = ADX_PERIOD
    strong_trend: float = ADX_STRONG_TREND

    def __post_init__(self) -> None:
        _require_period("ADX period", self.period)
        if not (0 < self.strong_trend < 100):
            raise ValueError(f"ADX strong_trend must be in (0, 100), got {self.strong_trend}")


@dataclass
class VolumeConfig:
    min_periods: int = VOLUME_MIN_PERIODS
    detect_divergences: bool = True
    lookback: int = DIVERGENCE_LOOKBACK

    def __post_init__(self) -> None:
        _require_period("Volume min_periods", self.min_periods)
        _require_period("Volume divergence lookback", self.lookback)


@dataclass
class IndicatorConfig:
    """
    Per-family indicator settings.

    Every family is enabled with default parameters unless its field is
    set to None.
    """
    rsi: Optional[RSIConfig] = field(default_factory=RSIConfig)
    macd: Optional[MACDConfig] = field(default_factory=MACDConfig)
    bollinger_bands: Optional[BollingerBandsConfig] = field(default_factory=BollingerBandsConfig)
    moving_averages: Optional[MovingAveragesConfig] = field(default_factory=MovingAveragesConfig)
    stochastic: Optional[StochasticConfig] = field(default_factory=StochasticConfig)
    williams_r: Optional[WilliamsRConfig] = field(default_factory=WilliamsRConfig)
    adx: Optional[ADXConfig] = field(default_factory=ADXConfig)
    volume: Optional[VolumeConfig] = field(default_factory=VolumeConfig)

    def enabled(self) -> Tuple[str, ...]:
        """Names of the families that will run."""
        return tuple(f.name for f in fields(self) if getattr(self, f.name) is not None)


# Field name -> sub-config class
SUB_CONFIGS = {
    "rsi": RSIConfig,
    "macd": MACDConfig,
    "bollinger_bands": BollingerBandsConfig,
    "moving_averages": MovingAveragesConfig,
    "stochastic": StochasticConfig,
    "williams_r": WilliamsRConfig,
    "adx": ADXConfig,
    "volume": VolumeConfig,
}


def _merge_section(name: str, value: Any) -> Any:
    """Build one sub-config from a partial mapping over its defaults."""
    cls = SUB_CONFIGS[name]
    if value is None:
        return None
    if isinstance(value, cls):
        # Copy so later changes to the caller's object cannot reach the engine
        return replace(value)
    if not isinstance(value, Mapping):
        raise ValueError(f"Config section '{name}' must be a mapping, got {type(value).__name__}")

    options = dict(value)
    if not options.pop("enabled", True):
        return None
    known = {f.name for f in fields(cls)}
    unknown = sorted(set(options) - known)
    if unknown:
        raise ValueError(f"Unknown {name} option(s): {', '.join(unknown)}. Valid: {', '.join(sorted(known))}")
    return cls(**options)


def merge_config(overrides: Union[None, IndicatorConfig, Mapping[str, Any]] = None) -> IndicatorConfig:
    """
    Merge partial settings over the default IndicatorConfig.

    Args:
        overrides: None (all defaults), a complete IndicatorConfig, or a
            mapping such as {"rsi": {"period": 7}, "adx": None}. A section
            set to None or containing enabled: false disables that family;
            options left out keep their defaults.

    Returns:
        A new IndicatorConfig

    Raises:
        ValueError: On unknown sections or options, or invalid values
    """
    if overrides is None:
        return IndicatorConfig()
    if isinstance(overrides, IndicatorConfig):
        return IndicatorConfig(**{name: _merge_section(name, getattr(overrides, name)) for name in SUB_CONFIGS})
    if not isinstance(overrides, Mapping):
        raise ValueError(f"Config overrides must be a mapping, got {type(overrides).__name__}")

    unknown = sorted(set(overrides) - set(SUB_CONFIGS))
    if unknown:
        raise ValueError(
            f"Unknown indicator section(s): {', '.join(unknown)}. Valid: {', '.join(SUB_CONFIGS)}"
        )
    sections: Dict[str, Any] = {name: _merge_section(name, value) for name, value in overrides.items()}
    return IndicatorConfig(**sections)
