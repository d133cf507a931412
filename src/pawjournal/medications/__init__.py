"""Medication adherence, reminder scheduling and the medication service."""

from .adherence import AdherenceRate, adherence_rate, dose_given_today, expected_doses, todays_doses
from .reminders import (
    DailyTrigger,
    NotificationRequest,
    NotificationScheduler,
    OneTimeTrigger,
    ReminderConfig,
    ReminderScheduler,
    WeeklyTrigger,
    build_requests,
    cancellation_identifiers,
    refill_identifier,
    reminder_identifier,
)
from .service import MedicationService

__all__ = [
    "AdherenceRate",
    "DailyTrigger",
    "MedicationService",
    "NotificationRequest",
    "NotificationScheduler",
    "OneTimeTrigger",
    "ReminderConfig",
    "ReminderScheduler",
    "WeeklyTrigger",
    "adherence_rate",
    "build_requests",
    "cancellation_identifiers",
    "dose_given_today",
    "expected_doses",
    "refill_identifier",
    "reminder_identifier",
    "todays_doses",
]
