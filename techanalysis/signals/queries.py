"""
Read-only helpers for slicing the signals of a completed analysis.

All functions accept either a result object with a `signals` attribute or
a plain sequence of TechnicalSignal, and never modify their input.
"""
from typing import Dict, List, Sequence, Tuple, Union

import pandas as pd

from ..shared.defaults import MIN_CONSENSUS, STRONG_SIGNAL_THRESHOLD
from ..shared.types import SignalType, TechnicalSignal


def _signals_of(source) -> Sequence[TechnicalSignal]:
    return getattr(source, "signals", source)


def get_strong_signals(source, min_strength: float = STRONG_SIGNAL_THRESHOLD) -> List[TechnicalSignal]:
    """Signals with strength >= min_strength, in original order."""
    return [s for s in _signals_of(source) if s.strength >= min_strength]


def get_signals_by_indicator(source, indicator: str) -> List[TechnicalSignal]:
    """Signals whose indicator name matches exactly."""
    return [s for s in _signals_of(source) if s.indicator == indicator]


def get_consensus_signals(source, min_consensus: int = MIN_CONSENSUS) -> List[TechnicalSignal]:
    """
    Synthesize one signal per group of agreeing signals.

    Signals are grouped by (direction, timestamp); every group with at least
    `min_consensus` members yields a new signal named after all members
    ("Consensus (RSI, MACD)") with their mean strength. The first member
    supplies value, timestamp and the quoted description. Groups are
    returned in order of their first member.
    """
    groups: Dict[Tuple[SignalType, pd.Timestamp], List[TechnicalSignal]] = {}
    for signal in _signals_of(source):
        groups.setdefault((signal.signal, signal.timestamp), []).append(signal)

    consensus = []
    for members in groups.values():
        if len(members) < min_consensus:
            continue
        first = members[0]
        consensus.append(TechnicalSignal(
            indicator=f"Consensus ({', '.join(s.indicator for s in members)})",
            signal=first.signal,
            strength=sum(s.strength for s in members) / len(members),
            value=first.value,
            timestamp=first.timestamp,
            description=f"Multiple indicators agree: {first.description}",
        ))
    return consensus


def signals_to_frame(source: Union[Sequence[TechnicalSignal], object]) -> pd.DataFrame:
    """Signals as a DataFrame with one row per signal, in original order."""
    columns = ["timestamp", "indicator", "signal", "strength", "value", "description"]
    rows = [
        {
            "timestamp": s.timestamp,
            "indicator": s.indicator,
            "signal": s.signal.value,
            "strength": s.strength,
            "value": s.value,
            "description": s.description,
        }
        for s in _signals_of(source)
    ]
    return pd.DataFrame(rows, columns=columns)
