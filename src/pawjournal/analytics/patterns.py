"""
Week-over-week pattern detection.

Compares a current window aggregate against the prior one and emits
typed insights, each with a recommendation addressed to the pet by name.
Rules run in a fixed order and are evaluated independently, except the
two activity rules, which are exclusive.

Pure math: no I/O, no state.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from enum import StrEnum
from typing import Any

from .aggregator import WindowAggregate


class PatternKind(StrEnum):
    POSITIVE = "Positive"
    WARNING = "Warning"
    ALERT = "Alert"
    INFO = "Info"


@dataclass(frozen=True)
class Pattern:
    """A detected trend or anomaly."""

    kind: PatternKind
    title: str
    description: str
    recommendation: str


@dataclass(frozen=True)
class PatternThresholds:
    """Tunable cut-offs for the detector.

    Attributes:
        activity_change_pct: Minimum whole-percent change for an activity pattern.
        recurring_symptom_min: Occurrences of one symptom type to call it recurring.
        digestive_issue_min: Poor-digestion events to raise an alert.
        low_mood_threshold: Average mood strictly below this is low.
        min_meals_per_day: Expected meal logs per day; the gap threshold
            scales with the window length (2/day x 7 days = 14).
        max_correlated_meal_types: Meal types listed in a food correlation.
    """

    activity_change_pct: int = 20
    recurring_symptom_min: int = 2
    digestive_issue_min: int = 2
    low_mood_threshold: float = 3.0
    min_meals_per_day: int = 2
    max_correlated_meal_types: int = 3

    @classmethod
    def from_config(cls, config: Any) -> PatternThresholds:
        return cls(
            activity_change_pct=config.get_int("analytics.activity_change_pct", cls.activity_change_pct),
            recurring_symptom_min=config.get_int("analytics.recurring_symptom_min", cls.recurring_symptom_min),
            digestive_issue_min=config.get_int("analytics.digestive_issue_min", cls.digestive_issue_min),
            low_mood_threshold=config.get_float("analytics.low_mood_threshold", cls.low_mood_threshold),
            min_meals_per_day=config.get_int("analytics.min_meals_per_day", cls.min_meals_per_day),
            max_correlated_meal_types=config.get_int(
                "analytics.max_correlated_meal_types", cls.max_correlated_meal_types
            ),
        )


def detect_patterns(
    current: WindowAggregate,
    previous: WindowAggregate,
    pet_name: str,
    thresholds: PatternThresholds | None = None,
) -> list[Pattern]:
    """Return the ordered list of patterns for *current* vs *previous*.

    An empty current window yields no patterns at all.

    Args:
        current: The most recent window (e.g. the last 7 days).
        previous: The window right before it, same length.
        pet_name: Used in recommendation text.
        thresholds: Cut-offs; defaults apply when omitted.
    """
    if current.is_empty:
        return []

    t = thresholds or PatternThresholds()
    name = pet_name or "your pet"
    patterns: list[Pattern] = []

    activity = _activity_pattern(current.activity_minutes, previous.activity_minutes, name, t)
    if activity:
        patterns.append(activity)
    patterns.extend(_recurring_symptoms(current, name, t))
    if len(current.poor_digestion_events) >= t.digestive_issue_min:
        patterns.append(
            Pattern(
                kind=PatternKind.ALERT,
                title="Digestive Issues",
                description=f"{len(current.poor_digestion_events)} instances of digestive problems this week",
                recommendation=(
                    f"Review recent diet changes or new foods that might be upsetting {name}'s stomach"
                ),
            )
        )
    if current.average_mood is not None and current.average_mood < t.low_mood_threshold:
        patterns.append(
            Pattern(
                kind=PatternKind.WARNING,
                title="Low Mood Trend",
                description=f"Average mood this week is {current.average_mood:.1f}/5",
                recommendation=(
                    f"Consider extra enrichment activities for {name} or check for underlying health issues"
                ),
            )
        )
    if current.meals_count < t.min_meals_per_day * current.days:
        patterns.append(
            Pattern(
                kind=PatternKind.INFO,
                title="Meal Logging",
                description=f"Only {current.meals_count} meals logged this week",
                recommendation=f"Try to log all of {name}'s meals for better nutrition tracking",
            )
        )
    correlation = _food_correlation(current, name, t)
    if correlation:
        patterns.append(correlation)
    return patterns


def _activity_pattern(current: int, previous: int, name: str, t: PatternThresholds) -> Pattern | None:
    if current < previous and previous > 0:
        decrease = (previous - current) * 100 // previous
        if decrease >= t.activity_change_pct:
            return Pattern(
                kind=PatternKind.WARNING,
                title="Activity Decreased",
                description=(
                    f"Activity is down {decrease}% from last week ({current} min vs {previous} min)"
                ),
                recommendation=f"Try to increase walks or playtime to maintain {name}'s fitness",
            )
    elif current > previous and current > 0:
        increase = (current - previous) * 100 // previous if previous > 0 else 100
        if increase >= t.activity_change_pct:
            return Pattern(
                kind=PatternKind.POSITIVE,
                title="Activity Increased",
                description=f"Great job! Activity is up {increase}% from last week",
                recommendation=f"Keep up the good work with {name}'s regular exercise",
            )
    return None


def _recurring_symptoms(current: WindowAggregate, name: str, t: PatternThresholds) -> list[Pattern]:
    counts: dict[str, int] = {}
    for event in current.symptom_events:
        symptom = (event.symptom_type or "").strip() or "Unknown"
        counts[symptom] = counts.get(symptom, 0) + 1

    return [
        Pattern(
            kind=PatternKind.ALERT,
            title="Recurring Symptom",
            description=f"{symptom} occurred {count} times this week",
            recommendation=f"Consider consulting your vet if {name}'s {symptom.lower()} continues",
        )
        for symptom, count in counts.items()
        if count >= t.recurring_symptom_min
    ]


def problem_days(current: WindowAggregate) -> set[date]:
    """Calendar days with a symptom or a poor-digestion event."""
    return {e.day for e in current.symptom_events} | {e.day for e in current.poor_digestion_events}


def _food_correlation(current: WindowAggregate, name: str, t: PatternThresholds) -> Pattern | None:
    days = problem_days(current)
    if not days:
        return None

    meal_types: list[str] = []
    for meal in current.meal_events:
        meal_type = (meal.meal_type or "").strip()
        if meal.day in days and meal_type and meal_type not in meal_types:
            meal_types.append(meal_type)
    meal_types = meal_types[: t.max_correlated_meal_types]
    if not meal_types:
        return None

    return Pattern(
        kind=PatternKind.INFO,
        title="Possible Food Correlation",
        description=f"Symptoms occurred on days with: {', '.join(meal_types)}",
        recommendation=f"Consider tracking specific ingredients in {name}'s food to identify potential triggers",
    )
