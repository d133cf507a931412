"""
Health journal data models.

Events are an append-only log of things the owner observed about a pet;
medications and their dose records live alongside.  Everything the
analytics layer derives is recomputed from these, never stored.
"""

from __future__ import annotations

import dataclasses
import uuid
from dataclasses import dataclass, field
from datetime import date, datetime, time
from enum import StrEnum


def _new_id() -> str:
    return str(uuid.uuid4())


# ── Enumerations ─────────────────────────────────────────────────────


class EventCategory(StrEnum):
    """Closed set of loggable event kinds."""

    MEAL = "Meal"
    WALK = "Walk"
    PLAYTIME = "Playtime"
    WATER = "Water"
    SYMPTOM = "Symptom"
    MOOD = "Mood"
    DIGESTION = "Digestion"
    MEDICATION_NOTE = "Medication-note"
    APPOINTMENT = "Appointment"
    GROOMING = "Grooming"
    SUPPLEMENT = "Supplement"
    TREAT = "Treat"
    NOTE = "Note"

    @classmethod
    def from_label(cls, label: str) -> EventCategory:
        """Resolve a loosely formatted label ("meals", "PLAYTIME", "Medication note")."""
        normalized = (label or "").strip().lower().replace(" ", "-").replace("_", "-")
        if normalized == "meals":
            normalized = "meal"
        for member in cls:
            if member.value.lower() == normalized:
                return member
        raise ValueError(f"Unknown event category: {label!r}")


class MealType(StrEnum):
    BREAKFAST = "Breakfast"
    LUNCH = "Lunch"
    DINNER = "Dinner"
    SNACK = "Snack"


class MedicationFrequency(StrEnum):
    """How often a medication is prescribed."""

    DAILY = "Daily"
    TWICE_DAILY = "Twice Daily"
    EVERY_OTHER_DAY = "Every Other Day"
    WEEKLY = "Weekly"
    AS_NEEDED = "As Needed"


ACTIVITY_CATEGORIES = frozenset({EventCategory.WALK, EventCategory.PLAYTIME})


# ── Records ──────────────────────────────────────────────────────────


def as_local_naive(value: datetime) -> datetime:
    """Wall-clock local time without tzinfo.

    Aware timestamps (e.g. synced ``...Z`` values) are converted to the
    local zone first, so they compare with ``datetime.now()``.
    """
    if value.tzinfo is None:
        return value
    return value.astimezone().replace(tzinfo=None)


def clamp_level(value: int | None) -> int | None:
    """Clamp a 1-5 rating; ``None`` stays unset."""
    if value is None:
        return None
    return min(5, max(1, int(value)))


@dataclass
class HealthEvent:
    """One logged occurrence for a pet.

    Category-specific fields are optional and only meaningful for the
    matching category.  ``duration_minutes`` keeps the raw user input
    (the original form field is free text), the aggregator parses it.

    Attributes:
        id: Stable identity; survives edits.
        pet_id: Owning pet.
        category: What kind of event this is.
        timestamp: When it happened, as naive local time.  Changed only
            through ``edit_event``.
        mood_level, severity_level: 1-5; out-of-range input is clamped.
        notes: Free text, may be empty.
        needs_sync: Set when the event changed locally and the external
            store has not acknowledged it yet.
    """

    pet_id: str
    category: EventCategory
    timestamp: datetime
    notes: str = ""
    id: str = field(default_factory=_new_id)
    duration_minutes: str | int | None = None
    meal_type: str | None = None
    mood_level: int | None = None
    symptom_type: str | None = None
    severity_level: int | None = None
    digestion_quality: str | None = None
    amount: str | None = None
    water_amount: str | None = None
    appointment_type: str | None = None
    location: str | None = None
    needs_sync: bool = True

    def __post_init__(self):
        if not isinstance(self.category, EventCategory):
            self.category = EventCategory.from_label(str(self.category))
        if self.notes is None:
            self.notes = ""
        self.timestamp = as_local_naive(self.timestamp)
        self.mood_level = clamp_level(self.mood_level)
        self.severity_level = clamp_level(self.severity_level)

    @property
    def day(self) -> date:
        """Calendar day of the event."""
        return self.timestamp.date()


def edit_event(event: HealthEvent, **changes) -> HealthEvent:
    """Return an edited copy of *event* that keeps its identity.

    The copy is flagged ``needs_sync`` so the external store picks it up.
    """
    if "id" in changes and changes["id"] != event.id:
        raise ValueError("Event id cannot be changed by an edit")
    changes["needs_sync"] = True
    return dataclasses.replace(event, **changes)


@dataclass
class Medication:
    """A prescribed treatment.

    ``scheduled_times`` may be empty; adherence and reminders then simply
    expect nothing for that slot list.
    """

    pet_id: str
    name: str
    dosage: str
    frequency: MedicationFrequency = MedicationFrequency.DAILY
    scheduled_times: list[time] = field(default_factory=list)
    start_date: date = field(default_factory=date.today)
    end_date: date | None = None
    active: bool = True
    refill_reminder: bool = False
    refill_date: datetime | None = None
    notes: str | None = None
    id: str = field(default_factory=_new_id)

    def __post_init__(self):
        if not isinstance(self.frequency, MedicationFrequency):
            self.frequency = MedicationFrequency(self.frequency)
        if not self.name:
            raise ValueError("Medication name cannot be empty")


@dataclass(frozen=True)
class MedicationDoseRecord:
    """One administration (or skip) of a medication."""

    medication_id: str
    timestamp: datetime
    skipped: bool = False
    notes: str | None = None
    id: str = field(default_factory=_new_id)

    def __post_init__(self):
        object.__setattr__(self, "timestamp", as_local_naive(self.timestamp))
