"""Health event, medication and dose-record models plus store contracts."""

from .models import (
    ACTIVITY_CATEGORIES,
    EventCategory,
    HealthEvent,
    MealType,
    Medication,
    MedicationDoseRecord,
    MedicationFrequency,
    edit_event,
)
from .store import (
    EventStore,
    EventWriter,
    InMemoryEventStore,
    MedicationRepository,
    WriteResult,
    guarded_write,
)

__all__ = [
    "ACTIVITY_CATEGORIES",
    "EventCategory",
    "EventStore",
    "EventWriter",
    "HealthEvent",
    "InMemoryEventStore",
    "MealType",
    "Medication",
    "MedicationDoseRecord",
    "MedicationFrequency",
    "MedicationRepository",
    "WriteResult",
    "edit_event",
    "guarded_write",
]
