"""Care reminders (vaccinations, grooming, vet visits) and daily meal/walk reminders."""

from .reminders import (
    CareReminder,
    CareReminderScheduler,
    CareReminderType,
    ReminderFrequency,
    build_care_request,
    care_identifier,
    due_reminders,
    upcoming_reminders,
)
from .routine import ROUTINE_IDENTIFIERS, RoutineReminderScheduler, RoutineSettings, routine_requests

__all__ = [
    "ROUTINE_IDENTIFIERS",
    "CareReminder",
    "CareReminderScheduler",
    "CareReminderType",
    "ReminderFrequency",
    "RoutineReminderScheduler",
    "RoutineSettings",
    "build_care_request",
    "care_identifier",
    "due_reminders",
    "routine_requests",
    "upcoming_reminders",
]
