"""
Centralized default values for indicator parameters.

This is the SINGLE SOURCE OF TRUTH for all indicator parameter defaults.
All modules should import from here to ensure consistency.

Values follow the conventional textbook settings for daily bars.
"""

# RSI (Relative Strength Index) defaults
RSI_PERIOD = 14
RSI_OVERBOUGHT = 70
RSI_OVERSOLD = 30

# MACD (Moving Average Convergence Divergence) defaults
MACD_FAST = 12
MACD_SLOW = 26
MACD_SIGNAL = 9

# Bollinger Bands defaults
BOLLINGER_PERIOD = 20
BOLLINGER_STD_DEVS = 2.0
BOLLINGER_SQUEEZE_BANDWIDTH = 0.1  # Bandwidth below this is a squeeze
BOLLINGER_TOUCH_TOLERANCE = 0.001  # Price within 0.1% of a band counts as a touch
BOLLINGER_WALK_TOLERANCE = 0.02  # Price within 2% of a band counts as walking it
BOLLINGER_WALK_PERIODS = 3  # Consecutive bars required for band walking

# Moving average defaults
MA_PERIODS = (20, 50, 200)

# Stochastic oscillator defaults
STOCHASTIC_K_PERIOD = 14
STOCHASTIC_D_PERIOD = 3
STOCHASTIC_OVERBOUGHT = 80
STOCHASTIC_OVERSOLD = 20

# Williams %R defaults (negative scale: 0 = top of range, -100 = bottom)
WILLIAMS_R_PERIOD = 14
WILLIAMS_R_OVERBOUGHT = -20
WILLIAMS_R_OVERSOLD = -80

# ADX (Average Directional Index) defaults
ADX_PERIOD = 14
ADX_STRONG_TREND = 25
ADX_WEAK_TREND = 20  # Below this there is no trend at all

# Volume indicator defaults
VOLUME_MIN_PERIODS = 20  # Bars required before volume indicators run
VOLUME_CORRELATION_WINDOW = 10  # Bars of indicator-vs-price correlation
OBV_CORRELATION_THRESHOLD = 0.7
VPT_CORRELATION_THRESHOLD = 0.6
AD_MULTIPLIER_THRESHOLD = 0.5

# Divergence detection
DIVERGENCE_LOOKBACK = 20
DIVERGENCE_STRENGTH_BOOST = 0.2

# Summary / aggregation
SUMMARY_WINDOW = 20  # Trailing bars used for trend, momentum and volatility
TRADING_DAYS_PER_YEAR = 252
TREND_THRESHOLD = 0.02  # Half-window average change that counts as a trend
MOMENTUM_THRESHOLD = 0.2  # Relative change in mean absolute return
VOLATILITY_LOW = 0.15  # Annualized
VOLATILITY_HIGH = 0.30  # Annualized
BULLISH_RATIO = 0.6
BEARISH_RATIO = 0.4
MAX_SUMMARY_STRENGTH = 0.9

# Signal queries
STRONG_SIGNAL_THRESHOLD = 0.7
MIN_CONSENSUS = 2
