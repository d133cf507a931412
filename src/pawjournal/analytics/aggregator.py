"""
Time-window aggregation over a pet's event log.

Reduces the events of one pet inside ``[range_start, range_end)`` to the
handful of counts and retained event lists the pattern detector and the
score calculator need.  Pure: the same snapshot always yields an equal
aggregate.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import datetime, timedelta

from pawjournal.events.models import ACTIVITY_CATEGORIES, EventCategory, HealthEvent
from pawjournal.events.store import EventStore

# Free-text digestion classifier.  Exact words are part of the contract.
POOR_DIGESTION_QUALITY_WORDS = ("poor", "bad")
POOR_DIGESTION_NOTE_WORDS = ("diarrhea", "vomit")


@dataclass(frozen=True)
class WindowAggregate:
    """Summary of one pet's events over a date range.

    Attributes:
        pet_id: Pet the window belongs to.
        range_start: Inclusive start.
        range_end: Exclusive end.
        total_events: Every matching event regardless of category.
        meals_count: Number of Meal events.
        activity_minutes: Summed Walk + Playtime duration.
        symptom_events: Symptom events, kept so they can be grouped by type.
        average_mood: Mean mood level, or None without mood logs.
        poor_digestion_events: Digestion events flagged by the heuristic.
        meal_events: Meal events, kept for food correlation.
        water_count: Number of Water events.
        logged_days: Distinct calendar days with at least one event.
    """

    pet_id: str
    range_start: datetime
    range_end: datetime
    total_events: int = 0
    meals_count: int = 0
    activity_minutes: int = 0
    symptom_events: tuple[HealthEvent, ...] = field(default_factory=tuple)
    average_mood: float | None = None
    poor_digestion_events: tuple[HealthEvent, ...] = field(default_factory=tuple)
    meal_events: tuple[HealthEvent, ...] = field(default_factory=tuple)
    water_count: int = 0
    logged_days: int = 0

    @property
    def days(self) -> int:
        """Window length in whole days (at least 1)."""
        return max(1, (self.range_end - self.range_start).days)

    @property
    def is_empty(self) -> bool:
        return self.total_events == 0


def parse_duration_minutes(value: str | int | None) -> int:
    """Parse a duration field as whole minutes; anything unparseable is 0."""
    if value is None or isinstance(value, bool):
        return 0
    try:
        minutes = int(str(value).strip())
    except ValueError:
        return 0
    return max(0, minutes)


def is_poor_digestion(event: HealthEvent) -> bool:
    """Heuristic: quality says poor/bad, or notes mention diarrhea/vomit."""
    if event.category != EventCategory.DIGESTION:
        return False
    quality = (event.digestion_quality or "").lower()
    notes = (event.notes or "").lower()
    return any(w in quality for w in POOR_DIGESTION_QUALITY_WORDS) or any(
        w in notes for w in POOR_DIGESTION_NOTE_WORDS
    )


def aggregate_window(
    events: Iterable[HealthEvent],
    pet_id: str,
    range_start: datetime,
    range_end: datetime,
) -> WindowAggregate:
    """Aggregate *events* for *pet_id* with ``range_start <= timestamp < range_end``.

    Events for other pets or outside the range are ignored, so the caller
    may pass a wider snapshot than the window.
    """
    in_range = sorted(
        (e for e in events if e.pet_id == pet_id and range_start <= e.timestamp < range_end),
        key=lambda e: (e.timestamp, e.id),
    )

    meals: list[HealthEvent] = []
    symptoms: list[HealthEvent] = []
    poor_digestion: list[HealthEvent] = []
    moods: list[int] = []
    activity_minutes = 0
    water_count = 0

    for event in in_range:
        category = event.category
        if category == EventCategory.MEAL:
            meals.append(event)
        elif category in ACTIVITY_CATEGORIES:
            activity_minutes += parse_duration_minutes(event.duration_minutes)
        elif category == EventCategory.SYMPTOM:
            symptoms.append(event)
        elif category == EventCategory.MOOD:
            if event.mood_level is not None:
                moods.append(event.mood_level)
        elif category == EventCategory.DIGESTION:
            if is_poor_digestion(event):
                poor_digestion.append(event)
        elif category == EventCategory.WATER:
            water_count += 1

    return WindowAggregate(
        pet_id=pet_id,
        range_start=range_start,
        range_end=range_end,
        total_events=len(in_range),
        meals_count=len(meals),
        activity_minutes=activity_minutes,
        symptom_events=tuple(symptoms),
        average_mood=sum(moods) / len(moods) if moods else None,
        poor_digestion_events=tuple(poor_digestion),
        meal_events=tuple(meals),
        water_count=water_count,
        logged_days=len({e.day for e in in_range}),
    )


def trailing_window(now: datetime, days: int = 7) -> tuple[datetime, datetime]:
    """The ``days``-long window ending at *now* (exclusive end just after now)."""
    end = now + timedelta(microseconds=1)
    return end - timedelta(days=days), end


def previous_window(range_start: datetime, range_end: datetime) -> tuple[datetime, datetime]:
    """The equal-length, non-overlapping window immediately before."""
    return range_start - (range_end - range_start), range_start


class WindowAggregator:
    """Computes aggregates by querying an ``EventStore``."""

    def __init__(self, store: EventStore):
        self.store = store

    def aggregate(self, pet_id: str, range_start: datetime, range_end: datetime) -> WindowAggregate:
        events = self.store.query(pet_id, range_start=range_start, range_end=range_end)
        return aggregate_window(events, pet_id, range_start, range_end)

    def week_over_week(
        self, pet_id: str, now: datetime, days: int = 7
    ) -> tuple[WindowAggregate, WindowAggregate]:
        """Return ``(current, previous)`` windows of *days* each, ending at *now*."""
        start, end = trailing_window(now, days)
        prev_start, prev_end = previous_window(start, end)
        events = self.store.query(pet_id, range_start=prev_start, range_end=end)
        return (
            aggregate_window(events, pet_id, start, end),
            aggregate_window(events, pet_id, prev_start, prev_end),
        )
