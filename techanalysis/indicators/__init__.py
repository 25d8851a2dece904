"""
Indicator calculation module.

Provides all technical indicators:
- Statistical primitives (SMA, EMA, rolling std, correlation, alignment)
- RSI, MACD, Bollinger Bands, moving averages
- Momentum oscillators (Stochastic, Williams %R, ADX)
- Volume indicators (OBV, Volume-Price Trend, Accumulation/Distribution)
- Price/indicator divergence detection

Every family follows the same interface: calculate_* builds result records,
generate_*_signals turns them into TechnicalSignal objects and analyze_*
does both.
"""
from .results import (
    RSIResult,
    MACDResult,
    BollingerBandsResult,
    MovingAverageResult,
    StochasticResult,
    WilliamsRResult,
    ADXResult,
    OBVResult,
    VolumePriceTrendResult,
    AccumulationDistributionResult,
)
from .divergence import detect_divergence, apply_divergence
from .rsi import calculate_rsi, detect_rsi_divergence, generate_rsi_signals, analyze_rsi
from .macd import calculate_macd, detect_macd_divergence, generate_macd_signals, analyze_macd
from .bollinger_bands import (
    calculate_bollinger_bands,
    detect_band_walking,
    generate_bollinger_bands_signals,
    analyze_bollinger_bands,
)
from .moving_averages import (
    calculate_moving_average,
    calculate_moving_averages,
    detect_moving_average_crossovers,
    generate_moving_average_signals,
    analyze_moving_averages,
)
from .momentum import (
    calculate_stochastic,
    generate_stochastic_signals,
    analyze_stochastic,
    calculate_williams_r,
    generate_williams_r_signals,
    analyze_williams_r,
    calculate_adx,
    generate_adx_signals,
    analyze_adx,
    generate_momentum_signals,
    analyze_momentum,
)
from .volume import (
    calculate_obv,
    calculate_volume_price_trend,
    calculate_accumulation_distribution,
    detect_volume_divergence,
    generate_volume_signals,
    analyze_volume,
)

__all__ = [
    'RSIResult',
    'MACDResult',
    'BollingerBandsResult',
    'MovingAverageResult',
    'StochasticResult',
    'WilliamsRResult',
    'ADXResult',
    'OBVResult',
    'VolumePriceTrendResult',
    'AccumulationDistributionResult',
    'detect_divergence',
    'apply_divergence',
    'calculate_rsi',
    'detect_rsi_divergence',
    'generate_rsi_signals',
    'analyze_rsi',
    'calculate_macd',
    'detect_macd_divergence',
    'generate_macd_signals',
    'analyze_macd',
    'calculate_bollinger_bands',
    'detect_band_walking',
    'generate_bollinger_bands_signals',
    'analyze_bollinger_bands',
    'calculate_moving_average',
    'calculate_moving_averages',
    'detect_moving_average_crossovers',
    'generate_moving_average_signals',
    'analyze_moving_averages',
    'calculate_stochastic',
    'generate_stochastic_signals',
    'analyze_stochastic',
    'calculate_williams_r',
    'generate_williams_r_signals',
    'analyze_williams_r',
    'calculate_adx',
    'generate_adx_signals',
    'analyze_adx',
    'generate_momentum_signals',
    'analyze_momentum',
    'calculate_obv',
    'calculate_volume_price_trend',
    'calculate_accumulation_distribution',
    'detect_volume_divergence',
    'generate_volume_signals',
    'analyze_volume',
]
