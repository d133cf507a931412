"""Medication reminder scheduling.

Derives notification requests from a medication's schedule and hands them
to an injected ``NotificationScheduler``.  Identifiers are deterministic
(``medication-{id}-{index}`` and ``medication-refill-{id}``) so an update
can cancel everything a previous schedule could have registered before
issuing the new set.

Known gap: Every Other Day medications get a *daily* trigger here, while
adherence expects a dose every second day.  Kept as-is until the intended
cadence is decided.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Protocol, runtime_checkable

from loguru import logger

from pawjournal.events.models import Medication, MedicationFrequency

MEDICATION_REMINDER_TITLE = "Medication Reminder"
REFILL_REMINDER_TITLE = "Refill Reminder"
DEFAULT_MAX_REMINDER_SLOTS = 10

_DAILY_FREQUENCIES = frozenset(
    {
        MedicationFrequency.DAILY,
        MedicationFrequency.TWICE_DAILY,
        MedicationFrequency.EVERY_OTHER_DAY,
    }
)


# ── Triggers & requests ──────────────────────────────────────────────


@dataclass(frozen=True)
class OneTimeTrigger:
    """Fire once at ``at``."""

    at: datetime


@dataclass(frozen=True)
class DailyTrigger:
    """Repeat every day at hour:minute."""

    hour: int
    minute: int


@dataclass(frozen=True)
class WeeklyTrigger:
    """Repeat every week on ``weekday`` (0 = Monday, as ``date.weekday()``)."""

    weekday: int
    hour: int
    minute: int


Trigger = OneTimeTrigger | DailyTrigger | WeeklyTrigger


@dataclass(frozen=True)
class NotificationRequest:
    identifier: str
    title: str
    body: str
    trigger: Trigger
    metadata: dict[str, Any] = field(default_factory=dict, compare=False)


@runtime_checkable
class NotificationScheduler(Protocol):
    """The system notification scheduler the engine writes to.

    Scheduling under an identifier that is already registered replaces it.
    Cancelling unknown identifiers is a no-op.
    """

    def schedule(self, request: NotificationRequest) -> None: ...

    def cancel(self, identifiers: list[str]) -> None: ...


# ── Identifiers ──────────────────────────────────────────────────────


def reminder_identifier(medication_id: str, index: int) -> str:
    return f"medication-{medication_id}-{index}"


def refill_identifier(medication_id: str) -> str:
    return f"medication-refill-{medication_id}"


@dataclass(frozen=True)
class ReminderConfig:
    """Reminder settings.

    Attributes:
        max_reminder_slots: Minimum number of per-time slots cancelled on
            update or delete.  The range grows with the medication's time count.
    """

    max_reminder_slots: int = DEFAULT_MAX_REMINDER_SLOTS

    @classmethod
    def from_config(cls, config: Any) -> ReminderConfig:
        return cls(max_reminder_slots=config.get_int("reminders.max_reminder_slots", DEFAULT_MAX_REMINDER_SLOTS))


def cancellation_identifiers(
    medication_id: str,
    scheduled_count: int = 0,
    max_slots: int = DEFAULT_MAX_REMINDER_SLOTS,
) -> list[str]:
    """Every identifier a schedule for this medication may have registered."""
    slots = max(max_slots, scheduled_count)
    return [reminder_identifier(medication_id, i) for i in range(slots)] + [refill_identifier(medication_id)]


def build_trigger(medication: Medication, hour: int, minute: int) -> Trigger | None:
    if medication.frequency in _DAILY_FREQUENCIES:
        return DailyTrigger(hour=hour, minute=minute)
    if medication.frequency == MedicationFrequency.WEEKLY:
        return WeeklyTrigger(weekday=medication.start_date.weekday(), hour=hour, minute=minute)
    return None


def build_requests(medication: Medication) -> list[NotificationRequest]:
    """Notification requests for an active medication (empty when inactive)."""
    if not medication.active:
        return []

    requests: list[NotificationRequest] = []
    for index, at in enumerate(medication.scheduled_times):
        trigger = build_trigger(medication, at.hour, at.minute)
        if trigger is None:
            break
        requests.append(
            NotificationRequest(
                identifier=reminder_identifier(medication.id, index),
                title=MEDICATION_REMINDER_TITLE,
                body=f"Time to give {medication.name} ({medication.dosage})",
                trigger=trigger,
                metadata={"medication_id": medication.id, "pet_id": medication.pet_id},
            )
        )

    if medication.refill_reminder and medication.refill_date is not None:
        requests.append(
            NotificationRequest(
                identifier=refill_identifier(medication.id),
                title=REFILL_REMINDER_TITLE,
                body=f"Time to refill {medication.name}",
                trigger=OneTimeTrigger(at=medication.refill_date),
                metadata={"medication_id": medication.id, "pet_id": medication.pet_id},
            )
        )
    return requests


# ── Scheduler ────────────────────────────────────────────────────────


class ReminderScheduler:
    """Keeps a notifier in step with medication create / update / delete.

    Holds no state besides its collaborators.

    Args:
        notifier: Where requests and cancellations go.
        config: Slot bound for cancellation.
    """

    def __init__(self, notifier: NotificationScheduler, config: ReminderConfig | None = None):
        self.notifier = notifier
        self.config = config or ReminderConfig()

    def identifiers_for(self, medication: Medication, previous: Medication | None = None) -> list[str]:
        count = len(medication.scheduled_times)
        if previous is not None:
            count = max(count, len(previous.scheduled_times))
        return cancellation_identifiers(medication.id, count, self.config.max_reminder_slots)

    def on_create(self, medication: Medication) -> list[NotificationRequest]:
        requests = build_requests(medication)
        for request in requests:
            self.notifier.schedule(request)
        if medication.frequency == MedicationFrequency.EVERY_OTHER_DAY and requests:
            logger.debug(f"Medication {medication.id} is every other day; reminders repeat daily")
        logger.info(f"Scheduled {len(requests)} reminder(s) for medication {medication.id}")
        return requests

    def on_update(self, medication: Medication, previous: Medication | None = None) -> list[NotificationRequest]:
        self.notifier.cancel(self.identifiers_for(medication, previous))
        if not medication.active:
            logger.info(f"Medication {medication.id} inactive; reminders cancelled")
            return []
        return self.on_create(medication)

    def on_delete(self, medication: Medication) -> None:
        self.notifier.cancel(self.identifiers_for(medication))
        logger.info(f"Cancelled reminders for deleted medication {medication.id}")
