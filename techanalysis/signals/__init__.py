"""
Signal aggregation module.

The engine runs every configured indicator over a price series and reduces
their signals into one Summary; the query helpers slice a finished result.
"""
from .config import (
    IndicatorConfig,
    RSIConfig,
    MACDConfig,
    BollingerBandsConfig,
    MovingAveragesConfig,
    StochasticConfig,
    WilliamsRConfig,
    ADXConfig,
    VolumeConfig,
    merge_config,
)
from .config_loader import load_config_from_yaml, save_config_to_yaml
from .summary import Summary, generate_summary
from .queries import get_strong_signals, get_signals_by_indicator, get_consensus_signals, signals_to_frame
from .engine import (
    TechnicalAnalysisEngine,
    TechnicalAnalysisResult,
    IndicatorSet,
    IndicatorOutcome,
    IndicatorOutput,
    analyze_technicals,
)

__all__ = [
    'IndicatorConfig',
    'RSIConfig',
    'MACDConfig',
    'BollingerBandsConfig',
    'MovingAveragesConfig',
    'StochasticConfig',
    'WilliamsRConfig',
    'ADXConfig',
    'VolumeConfig',
    'merge_config',
    'load_config_from_yaml',
    'save_config_to_yaml',
    'Summary',
    'generate_summary',
    'get_strong_signals',
    'get_signals_by_indicator',
    'get_consensus_signals',
    'signals_to_frame',
    'TechnicalAnalysisEngine',
    'TechnicalAnalysisResult',
    'IndicatorSet',
    'IndicatorOutcome',
    'IndicatorOutput',
    'analyze_technicals',
]
