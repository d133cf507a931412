"""
Preventive care reminders: vaccinations, flea & tick, heartworm, grooming,
vet appointments.

A care reminder has a next due date and a repeat frequency.  Completing it
moves the due date forward by one frequency interval counted from the
completion time; a one-off reminder keeps its date.  Month and year steps
use calendar arithmetic (Jan 31 + 1 month is the last day of February).
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from enum import StrEnum

from dateutil.relativedelta import relativedelta
from loguru import logger

from pawjournal.events.models import as_local_naive
from pawjournal.medications.reminders import NotificationRequest, NotificationScheduler, OneTimeTrigger


class CareReminderType(StrEnum):
    VACCINATION = "Vaccination"
    MEDICATION = "Medication"
    FLEA_TICK = "Flea & Tick"
    HEARTWORM = "Heartworm"
    GROOMING = "Grooming"
    VET_APPOINTMENT = "Vet Appointment"
    OTHER = "Other"

    @classmethod
    def parse(cls, label: str) -> CareReminderType:
        """Unknown labels become ``OTHER``."""
        try:
            return cls(label)
        except ValueError:
            return cls.OTHER


class ReminderFrequency(StrEnum):
    ONCE = "Once"
    DAILY = "Daily"
    WEEKLY = "Weekly"
    BIWEEKLY = "Every 2 Weeks"
    MONTHLY = "Monthly"
    QUARTERLY = "Every 3 Months"
    BIANNUALLY = "Every 6 Months"
    ANNUALLY = "Yearly"

    @classmethod
    def parse(cls, label: str) -> ReminderFrequency:
        """Unknown labels become ``ONCE``."""
        try:
            return cls(label)
        except ValueError:
            return cls.ONCE

    @property
    def interval(self) -> relativedelta | None:
        """Calendar step to the next occurrence, ``None`` for one-off reminders."""
        match self:
            case ReminderFrequency.DAILY:
                return relativedelta(days=1)
            case ReminderFrequency.WEEKLY:
                return relativedelta(weeks=1)
            case ReminderFrequency.BIWEEKLY:
                return relativedelta(weeks=2)
            case ReminderFrequency.MONTHLY:
                return relativedelta(months=1)
            case ReminderFrequency.QUARTERLY:
                return relativedelta(months=3)
            case ReminderFrequency.BIANNUALLY:
                return relativedelta(months=6)
            case ReminderFrequency.ANNUALLY:
                return relativedelta(years=1)
            case _:
                return None


@dataclass
class CareReminder:
    """One recurring (or one-off) care task for a pet.

    Attributes:
        next_due_date: When the task is next due, as naive local time.
        last_completed: When ``mark_completed`` last ran.
        enabled: Disabled reminders are kept but never notified.
        needs_sync: Set on every local change until the external store
            acknowledges it.
    """

    pet_id: str
    title: str
    reminder_type: CareReminderType
    frequency: ReminderFrequency
    next_due_date: datetime
    notes: str | None = None
    last_completed: datetime | None = None
    enabled: bool = True
    needs_sync: bool = True
    id: str = field(default_factory=lambda: str(uuid.uuid4()))

    def __post_init__(self):
        if not isinstance(self.reminder_type, CareReminderType):
            self.reminder_type = CareReminderType.parse(str(self.reminder_type))
        if not isinstance(self.frequency, ReminderFrequency):
            self.frequency = ReminderFrequency.parse(str(self.frequency))
        self.next_due_date = as_local_naive(self.next_due_date)

    def is_due(self, now: datetime | None = None) -> bool:
        now = as_local_naive(now) if now else datetime.now()
        return self.next_due_date <= now

    def days_until_due(self, now: datetime | None = None) -> int:
        """Whole days until due, truncated toward zero; negative when overdue."""
        now = as_local_naive(now) if now else datetime.now()
        return int((self.next_due_date - now) / timedelta(days=1))

    def mark_completed(self, now: datetime | None = None) -> None:
        now = as_local_naive(now) if now else datetime.now()
        self.last_completed = now
        self.needs_sync = True
        interval = self.frequency.interval
        if interval is not None:
            self.next_due_date = now + interval


def due_reminders(reminders: list[CareReminder], now: datetime | None = None) -> list[CareReminder]:
    """Enabled reminders that are due, oldest due date first."""
    return sorted((r for r in reminders if r.enabled and r.is_due(now)), key=lambda r: r.next_due_date)


def upcoming_reminders(reminders: list[CareReminder], now: datetime | None = None) -> list[CareReminder]:
    """Enabled reminders not yet due, soonest first."""
    return sorted((r for r in reminders if r.enabled and not r.is_due(now)), key=lambda r: r.next_due_date)


# ── Notifications ────────────────────────────────────────────────────


def care_identifier(reminder_id: str) -> str:
    return f"care-reminder-{reminder_id}"


def build_care_request(reminder: CareReminder) -> NotificationRequest | None:
    """One-time notification at the next due date; ``None`` when disabled."""
    if not reminder.enabled:
        return None
    return NotificationRequest(
        identifier=care_identifier(reminder.id),
        title=f"{reminder.reminder_type.value} Reminder",
        body=f"{reminder.title} is due",
        trigger=OneTimeTrigger(at=reminder.next_due_date),
        metadata={"care_reminder_id": reminder.id, "pet_id": reminder.pet_id},
    )


class CareReminderScheduler:
    """Keeps one pending notification per care reminder, keyed by its id."""

    def __init__(self, notifier: NotificationScheduler):
        self.notifier = notifier

    def sync(self, reminder: CareReminder) -> NotificationRequest | None:
        """Cancel the reminder's notification, then reschedule it if enabled."""
        self.notifier.cancel([care_identifier(reminder.id)])
        request = build_care_request(reminder)
        if request is not None:
            self.notifier.schedule(request)
            logger.info(f"Care reminder {reminder.id} scheduled for {reminder.next_due_date:%Y-%m-%d %H:%M}")
        return request

    def complete(self, reminder: CareReminder, now: datetime | None = None) -> NotificationRequest | None:
        """Mark *reminder* done and move its notification to the new due date."""
        reminder.mark_completed(now)
        if reminder.frequency.interval is None:
            self.remove(reminder.id)
            return None
        return self.sync(reminder)

    def remove(self, reminder_id: str) -> None:
        self.notifier.cancel([care_identifier(reminder_id)])
        logger.info(f"Cancelled care reminder {reminder_id}")
