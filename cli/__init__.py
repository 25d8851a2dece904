"""
Command-line entry points for the technical analysis engine.

Provides:
- analyze: indicators, signals and summary for one OHLCV series
"""
