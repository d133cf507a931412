"""Event store contracts and an in-memory reference implementation.

The engine never owns persistence.  It reads through ``EventStore`` /
``MedicationRepository`` and writes through the repository's ``save_*``
methods, which report failures as a ``WriteResult`` instead of raising so
the caller can roll back optimistic state.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass
from datetime import datetime
from typing import Protocol, runtime_checkable

from loguru import logger

from pawjournal.core.exceptions import PersistenceError

from .models import EventCategory, HealthEvent, Medication, MedicationDoseRecord, as_local_naive


@dataclass(frozen=True)
class WriteResult:
    """Outcome of a persistence write.

    Attributes:
        ok: Whether the store accepted the write.
        record_id: Id of the record written (or attempted).
        error: Failure description when ``ok`` is False.
    """

    ok: bool
    record_id: str = ""
    error: str | None = None

    @classmethod
    def success(cls, record_id: str) -> WriteResult:
        return cls(ok=True, record_id=record_id)

    @classmethod
    def failure(cls, record_id: str, error: Exception | str) -> WriteResult:
        return cls(ok=False, record_id=record_id, error=str(error))


@runtime_checkable
class EventStore(Protocol):
    """Read surface over persisted health events."""

    def query(
        self,
        pet_id: str,
        category: EventCategory | None = None,
        range_start: datetime | None = None,
        range_end: datetime | None = None,
    ) -> list[HealthEvent]:
        """Return events for *pet_id*, newest first.

        Args:
            pet_id: Pet to filter on.
            category: Only this category when given.
            range_start: Inclusive lower bound. None = unbounded.
            range_end: Exclusive upper bound. None = unbounded.
        """
        ...


@runtime_checkable
class EventWriter(Protocol):
    """Write surface for health events.  Methods raise on failure."""

    def add_event(self, event: HealthEvent) -> None: ...

    def update_event(self, event: HealthEvent) -> None: ...

    def delete_event(self, event_id: str) -> None: ...


@runtime_checkable
class MedicationRepository(Protocol):
    """Medication and dose-record access used by the medication service."""

    def query_medications(self, pet_id: str) -> list[Medication]: ...

    def get_medication(self, medication_id: str) -> Medication | None: ...

    def query_dose_records(self, medication_id: str) -> list[MedicationDoseRecord]: ...

    def save_medication(self, medication: Medication) -> None: ...

    def delete_medication(self, medication_id: str) -> None: ...

    def save_dose_record(self, record: MedicationDoseRecord) -> None: ...


class InMemoryEventStore:
    """Thread-safe in-memory store implementing both protocols.

    Writes raise ``PersistenceError``; wrap them with ``guarded_write`` to
    obtain a ``WriteResult``.
    """

    def __init__(self, events: list[HealthEvent] | None = None):
        self._lock = threading.Lock()
        self._events: dict[str, HealthEvent] = {}
        self._medications: dict[str, Medication] = {}
        self._doses: dict[str, list[MedicationDoseRecord]] = {}
        for event in events or []:
            self._events[event.id] = event

    # ── Events ────────────────────────────────────────────────────────

    def query(
        self,
        pet_id: str,
        category: EventCategory | None = None,
        range_start: datetime | None = None,
        range_end: datetime | None = None,
    ) -> list[HealthEvent]:
        range_start = as_local_naive(range_start) if range_start else None
        range_end = as_local_naive(range_end) if range_end else None
        with self._lock:
            events = list(self._events.values())
        matches = [
            e
            for e in events
            if e.pet_id == pet_id
            and (category is None or e.category == category)
            and (range_start is None or e.timestamp >= range_start)
            and (range_end is None or e.timestamp < range_end)
        ]
        return sorted(matches, key=lambda e: e.timestamp, reverse=True)

    def add_event(self, event: HealthEvent) -> None:
        with self._lock:
            if event.id in self._events:
                raise PersistenceError(f"Event {event.id} already exists")
            self._events[event.id] = event

    def update_event(self, event: HealthEvent) -> None:
        with self._lock:
            if event.id not in self._events:
                raise PersistenceError(f"Event {event.id} not found")
            self._events[event.id] = event

    def delete_event(self, event_id: str) -> None:
        with self._lock:
            self._events.pop(event_id, None)

    # ── Medications ───────────────────────────────────────────────────

    def query_medications(self, pet_id: str) -> list[Medication]:
        with self._lock:
            return [m for m in self._medications.values() if m.pet_id == pet_id]

    def get_medication(self, medication_id: str) -> Medication | None:
        with self._lock:
            return self._medications.get(medication_id)

    def query_dose_records(self, medication_id: str) -> list[MedicationDoseRecord]:
        with self._lock:
            records = list(self._doses.get(medication_id, []))
        return sorted(records, key=lambda r: r.timestamp, reverse=True)

    def save_medication(self, medication: Medication) -> None:
        with self._lock:
            self._medications[medication.id] = medication

    def delete_medication(self, medication_id: str) -> None:
        """Remove a medication and cascade to its dose records."""
        with self._lock:
            self._medications.pop(medication_id, None)
            self._doses.pop(medication_id, None)

    def save_dose_record(self, record: MedicationDoseRecord) -> None:
        with self._lock:
            if record.medication_id not in self._medications:
                raise PersistenceError(f"Medication {record.medication_id} not found")
            self._doses.setdefault(record.medication_id, []).append(record)


def guarded_write(action, record_id: str, description: str) -> WriteResult:
    """Run a store write, converting failures into a ``WriteResult``.

    Args:
        action: Zero-argument callable performing the write.
        record_id: Id reported back in the result.
        description: Short label for the log line ("save medication").
    """
    try:
        action()
    except Exception as e:
        logger.error(f"Failed to {description} {record_id}: {e}")
        return WriteResult.failure(record_id, e)
    return WriteResult.success(record_id)
