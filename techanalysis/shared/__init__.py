"""
Shared types, errors and defaults for the technical analysis engine.

This module provides:
- SignalType and summary enums, PriceBar and TechnicalSignal dataclasses
- ValidationError / InvalidParameterError
- Centralized default values for all indicator parameters
"""
from .types import (
    SignalType, PriceBar, PriceSeries, TechnicalSignal,
    Sentiment, TrendDirection, Momentum, Volatility,
)
from .errors import TechnicalAnalysisError, ValidationError, InvalidParameterError
from .defaults import (
    RSI_PERIOD, RSI_OVERBOUGHT, RSI_OVERSOLD,
    MACD_FAST, MACD_SLOW, MACD_SIGNAL,
    BOLLINGER_PERIOD, BOLLINGER_STD_DEVS,
    MA_PERIODS,
    STOCHASTIC_K_PERIOD, STOCHASTIC_D_PERIOD, STOCHASTIC_OVERBOUGHT, STOCHASTIC_OVERSOLD,
    WILLIAMS_R_PERIOD, WILLIAMS_R_OVERBOUGHT, WILLIAMS_R_OVERSOLD,
    ADX_PERIOD, ADX_STRONG_TREND,
    VOLUME_MIN_PERIODS, DIVERGENCE_LOOKBACK,
)

__all__ = [
    'SignalType',
    'PriceBar',
    'PriceSeries',
    'TechnicalSignal',
    'Sentiment',
    'TrendDirection',
    'Momentum',
    'Volatility',
    'TechnicalAnalysisError',
    'ValidationError',
    'InvalidParameterError',
    'RSI_PERIOD', 'RSI_OVERBOUGHT', 'RSI_OVERSOLD',
    'MACD_FAST', 'MACD_SLOW', 'MACD_SIGNAL',
    'BOLLINGER_PERIOD', 'BOLLINGER_STD_DEVS',
    'MA_PERIODS',
    'STOCHASTIC_K_PERIOD', 'STOCHASTIC_D_PERIOD', 'STOCHASTIC_OVERBOUGHT', 'STOCHASTIC_OVERSOLD',
    'WILLIAMS_R_PERIOD', 'WILLIAMS_R_OVERBOUGHT', 'WILLIAMS_R_OVERSOLD',
    'ADX_PERIOD', 'ADX_STRONG_TREND',
    'VOLUME_MIN_PERIODS', 'DIVERGENCE_LOOKBACK',
]
