#!/usr/bin/env python3
"""
Run the technical analysis engine over one OHLCV series.

Loads a CSV file (or generates a synthetic series), applies the indicator
configuration and prints the market summary, the strong signals and the
consensus signals.
"""
import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from techanalysis.data import generate_sample_price_data, load_price_csv
from techanalysis.shared.defaults import MIN_CONSENSUS, STRONG_SIGNAL_THRESHOLD
from techanalysis.shared.errors import ValidationError
from techanalysis.shared.types import TechnicalSignal
from techanalysis.signals import (
    TechnicalAnalysisEngine,
    TechnicalAnalysisResult,
    get_consensus_signals,
    get_strong_signals,
    load_config_from_yaml,
)

logger = logging.getLogger(__name__)


def setup_logging(verbose: bool = False):
    """Log to stderr so stdout only carries the report."""
    level = logging.DEBUG if verbose else logging.WARNING
    formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )
    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers.clear()
    root_logger.addHandler(handler)


def format_signal(signal: TechnicalSignal) -> str:
    return (
        f"  {signal.timestamp.date()}  {signal.signal.value.upper():<4}  "
        f"{signal.strength:.2f}  {signal.indicator}: {signal.description}"
    )


def format_report(result: TechnicalAnalysisResult, strong: List[TechnicalSignal],
                  consensus: List[TechnicalSignal], min_strength: float) -> str:
    summary = result.summary
    lines = [
        "=" * 60,
        f"TECHNICAL ANALYSIS{': ' + result.symbol if result.symbol else ''}",
        "=" * 60,
        f"Overall:     {summary.overall.value} (strength {summary.strength:.2f}, "
        f"confidence {summary.confidence:.2f})",
        f"Trend:       {summary.trend_direction.value}",
        f"Momentum:    {summary.momentum.value}",
        f"Volatility:  {summary.volatility.value}",
        f"Indicators:  {', '.join(result.indicators.available()) or 'none'}",
        f"Signals:     {len(result.signals)}",
        "",
        f"Strong signals (strength >= {min_strength}): {len(strong)}",
    ]
    lines.extend(format_signal(s) for s in strong)
    lines.append("")
    lines.append(f"Consensus signals: {len(consensus)}")
    lines.extend(format_signal(s) for s in consensus)
    if result.errors:
        lines.append("")
        lines.append("Failed indicators:")
        lines.extend(f"  {name}: {error}" for name, error in result.errors.items())
    return "\n".join(lines)


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for single-series analysis."""
    parser = argparse.ArgumentParser(
        description="Compute technical indicators and trading signals for an OHLCV series",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    # Analyze a downloaded CSV with default indicator settings
    python -m cli.analyze data/AAPL.csv --symbol AAPL

    # Use a YAML indicator config and only show very strong signals
    python -m cli.analyze data/AAPL.csv --config configs/indicators.yaml --min-strength 0.8

    # Try the engine on 250 synthetic bars
    python -m cli.analyze --sample 250 --seed 7
        """
    )

    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument("csv", nargs="?", help="OHLCV CSV file with the date in the first column")
    source.add_argument("--sample", type=int, metavar="DAYS", help="Analyze a synthetic series of DAYS bars")
    parser.add_argument("--seed", type=int, help="Seed for --sample")
    parser.add_argument("--symbol", default="", help="Symbol shown in the report and logs")
    parser.add_argument("--config", type=str, help="YAML indicator configuration")
    parser.add_argument("--start", type=str, help="First date to include (YYYY-MM-DD)")
    parser.add_argument("--end", type=str, help="Last date to include (YYYY-MM-DD)")
    parser.add_argument(
        "--min-strength",
        type=float,
        default=STRONG_SIGNAL_THRESHOLD,
        help=f"Strength threshold for strong signals (default: {STRONG_SIGNAL_THRESHOLD})"
    )
    parser.add_argument(
        "--consensus",
        type=int,
        default=MIN_CONSENSUS,
        help=f"Indicators that must agree for a consensus signal (default: {MIN_CONSENSUS})"
    )
    parser.add_argument("--output", type=str, help="Write all signals to this CSV file")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")

    args = parser.parse_args(argv)
    setup_logging(args.verbose)

    try:
        config = load_config_from_yaml(args.config) if args.config else None
        if args.sample is not None:
            bars = generate_sample_price_data(args.sample, seed=args.seed)
        else:
            bars = load_price_csv(args.csv, start_date=args.start, end_date=args.end)
        engine = TechnicalAnalysisEngine(config)
        result = engine.analyze(bars, args.symbol)
    except (ValidationError, ValueError, FileNotFoundError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    strong = get_strong_signals(result, args.min_strength)
    consensus = get_consensus_signals(result, args.consensus)
    print(format_report(result, strong, consensus, args.min_strength))

    if args.output:
        output_path = Path(args.output)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        result.signals_frame().to_csv(output_path, index=False)
        print(f"\nSignals written to {output_path}")

    return 0


if __name__ == "__main__":
    sys.exit(main())
