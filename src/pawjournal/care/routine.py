"""
Daily routine reminders for meals and walks.

Four fixed identifiers, each a daily trigger.  Applying new settings
cancels all four and schedules the enabled group(s) again, leaving
medication and care reminders alone.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import time
from typing import Any

from loguru import logger

from pawjournal.core.exceptions import ConfigurationError
from pawjournal.medications.reminders import DailyTrigger, NotificationRequest, NotificationScheduler

BREAKFAST_REMINDER = "breakfast-reminder"
DINNER_REMINDER = "dinner-reminder"
MORNING_WALK_REMINDER = "morning-walk-reminder"
EVENING_WALK_REMINDER = "evening-walk-reminder"

ROUTINE_IDENTIFIERS = (BREAKFAST_REMINDER, DINNER_REMINDER, MORNING_WALK_REMINDER, EVENING_WALK_REMINDER)


def parse_clock(value: Any, key: str = "time") -> time:
    """Accept a ``time`` or an ``"HH:MM"`` string.

    Unquoted ``18:00`` in YAML loads as the sexagesimal int 1080, which is
    read back as minutes past midnight.
    """
    if isinstance(value, time):
        return value
    try:
        if isinstance(value, int) and not isinstance(value, bool):
            return time(*divmod(value, 60))
        hour, minute = str(value).split(":")
        return time(int(hour), int(minute))
    except ValueError as e:
        raise ConfigurationError(f"{key} must be HH:MM, got {value!r}") from e


def _flag(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in ("1", "true", "yes", "on")
    return bool(value)


@dataclass(frozen=True)
class RoutineSettings:
    meal_reminders: bool = False
    walk_reminders: bool = False
    breakfast_time: time = time(8, 0)
    dinner_time: time = time(18, 0)
    morning_walk_time: time = time(7, 30)
    evening_walk_time: time = time(17, 30)

    @classmethod
    def from_config(cls, config: Any) -> RoutineSettings:
        def clock(name: str, default: time) -> time:
            key = f"routine.{name}"
            return parse_clock(config.get(key, default.strftime("%H:%M")), key)

        return cls(
            meal_reminders=_flag(config.get("routine.meal_reminders", False)),
            walk_reminders=_flag(config.get("routine.walk_reminders", False)),
            breakfast_time=clock("breakfast_time", cls.breakfast_time),
            dinner_time=clock("dinner_time", cls.dinner_time),
            morning_walk_time=clock("morning_walk_time", cls.morning_walk_time),
            evening_walk_time=clock("evening_walk_time", cls.evening_walk_time),
        )


def _daily(identifier: str, title: str, body: str, at: time) -> NotificationRequest:
    return NotificationRequest(
        identifier=identifier,
        title=title,
        body=body,
        trigger=DailyTrigger(hour=at.hour, minute=at.minute),
    )


def routine_requests(settings: RoutineSettings) -> list[NotificationRequest]:
    requests: list[NotificationRequest] = []
    if settings.meal_reminders:
        requests += [
            _daily(
                BREAKFAST_REMINDER,
                "Breakfast Time!",
                "Time to feed your furry friend their morning meal",
                settings.breakfast_time,
            ),
            _daily(
                DINNER_REMINDER,
                "Dinner Time!",
                "Don't forget to feed your pet their evening meal",
                settings.dinner_time,
            ),
        ]
    if settings.walk_reminders:
        requests += [
            _daily(
                MORNING_WALK_REMINDER,
                "Morning Walk Time!",
                "Your pet is ready for their morning walk",
                settings.morning_walk_time,
            ),
            _daily(
                EVENING_WALK_REMINDER,
                "Evening Walk Time!",
                "Time for an evening stroll with your pet",
                settings.evening_walk_time,
            ),
        ]
    return requests


class RoutineReminderScheduler:
    def __init__(self, notifier: NotificationScheduler):
        self.notifier = notifier

    def apply(self, settings: RoutineSettings) -> list[NotificationRequest]:
        self.notifier.cancel(list(ROUTINE_IDENTIFIERS))
        requests = routine_requests(settings)
        for request in requests:
            self.notifier.schedule(request)
        logger.info(f"Routine reminders: {len(requests)} scheduled")
        return requests
