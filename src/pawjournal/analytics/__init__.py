"""
Health analytics: window aggregation, pattern detection, scoring, digests.

All functions here are pure and work on in-memory snapshots.
"""

from .aggregator import (
    WindowAggregate,
    WindowAggregator,
    aggregate_window,
    is_poor_digestion,
    parse_duration_minutes,
    previous_window,
    trailing_window,
)
from .digest import WeeklyDigest, build_weekly_digest
from .patterns import Pattern, PatternKind, PatternThresholds, detect_patterns
from .score import HealthScore, ScoreBand, ScoreConfig, calculate_health_score

__all__ = [
    "HealthScore",
    "Pattern",
    "PatternKind",
    "PatternThresholds",
    "ScoreBand",
    "ScoreConfig",
    "WeeklyDigest",
    "WindowAggregate",
    "WindowAggregator",
    "aggregate_window",
    "build_weekly_digest",
    "calculate_health_score",
    "detect_patterns",
    "is_poor_digestion",
    "parse_duration_minutes",
    "previous_window",
    "trailing_window",
]
