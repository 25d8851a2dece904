"""
Technical analysis engine.

Computes technical indicators over historical OHLCV series and reduces
their trading signals into an overall market assessment.

Provides:
- shared: PriceBar / TechnicalSignal types, errors, parameter defaults
- data: validation, sorting, CSV/DataFrame interchange, sample data
- indicators: RSI, MACD, Bollinger Bands, moving averages, momentum, volume
- signals: configuration, the analysis engine, summary and signal queries
"""
from .shared import (
    SignalType,
    PriceBar,
    TechnicalSignal,
    Sentiment,
    TrendDirection,
    Momentum,
    Volatility,
    TechnicalAnalysisError,
    ValidationError,
    InvalidParameterError,
)
from .signals import (
    IndicatorConfig,
    merge_config,
    load_config_from_yaml,
    TechnicalAnalysisEngine,
    TechnicalAnalysisResult,
    IndicatorSet,
    Summary,
    analyze_technicals,
    get_strong_signals,
    get_signals_by_indicator,
    get_consensus_signals,
)

__version__ = "0.1.0"

__all__ = [
    'SignalType',
    'PriceBar',
    'TechnicalSignal',
    'Sentiment',
    'TrendDirection',
    'Momentum',
    'Volatility',
    'TechnicalAnalysisError',
    'ValidationError',
    'InvalidParameterError',
    'IndicatorConfig',
    'merge_config',
    'load_config_from_yaml',
    'TechnicalAnalysisEngine',
    'TechnicalAnalysisResult',
    'IndicatorSet',
    'Summary',
    'analyze_technicals',
    'get_strong_signals',
    'get_signals_by_indicator',
    'get_consensus_signals',
]
