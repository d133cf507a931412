"""Weekly digest: headline totals plus the detected patterns."""

from __future__ import annotations

from dataclasses import dataclass, field

from .aggregator import WindowAggregate
from .patterns import Pattern, PatternThresholds, detect_patterns


@dataclass(frozen=True)
class WeeklyDigest:
    """What the digest screen shows for one pet.

    ``week_over_week_change`` is the percentage change in total logged
    events against the prior window, or None when that window is empty.
    """

    pet_id: str
    total_events: int = 0
    meals_count: int = 0
    activity_minutes: int = 0
    symptoms_count: int = 0
    average_mood: float | None = None
    patterns: list[Pattern] = field(default_factory=list)
    week_over_week_change: float | None = None

    @property
    def is_empty(self) -> bool:
        return self.total_events == 0


def build_weekly_digest(
    current: WindowAggregate,
    previous: WindowAggregate,
    pet_name: str,
    thresholds: PatternThresholds | None = None,
) -> WeeklyDigest:
    if current.is_empty:
        return WeeklyDigest(pet_id=current.pet_id)

    change = None
    if not previous.is_empty:
        change = (current.total_events - previous.total_events) / previous.total_events * 100

    return WeeklyDigest(
        pet_id=current.pet_id,
        total_events=current.total_events,
        meals_count=current.meals_count,
        activity_minutes=current.activity_minutes,
        symptoms_count=len(current.symptom_events),
        average_mood=current.average_mood,
        patterns=detect_patterns(current, previous, pet_name, thresholds),
        week_over_week_change=change,
    )
