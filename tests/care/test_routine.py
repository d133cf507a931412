"""Tests for pawjournal.care.routine."""

from datetime import time

import pytest

from pawjournal.care.routine import (
    ROUTINE_IDENTIFIERS,
    RoutineReminderScheduler,
    RoutineSettings,
    parse_clock,
    routine_requests,
)
from pawjournal.core.config import Config
from pawjournal.core.exceptions import ConfigurationError
from pawjournal.medications.reminders import DailyTrigger, NotificationRequest
from pawjournal.notifications.memory import InMemoryNotificationCenter


class TestRequests:
    @pytest.mark.smoke
    def test_identifier_set(self):
        requests = routine_requests(RoutineSettings(meal_reminders=True, walk_reminders=True))
        assert [r.identifier for r in requests] == [
            "breakfast-reminder",
            "dinner-reminder",
            "morning-walk-reminder",
            "evening-walk-reminder",
        ]
        assert {r.identifier for r in requests} == set(ROUTINE_IDENTIFIERS)

    def test_default_times(self):
        requests = routine_requests(RoutineSettings(meal_reminders=True, walk_reminders=True))
        assert [r.trigger for r in requests] == [
            DailyTrigger(hour=8, minute=0),
            DailyTrigger(hour=18, minute=0),
            DailyTrigger(hour=7, minute=30),
            DailyTrigger(hour=17, minute=30),
        ]
        assert requests[0].title == "Breakfast Time!"

    def test_groups_independent(self):
        walks_only = routine_requests(RoutineSettings(walk_reminders=True, evening_walk_time=time(19, 15)))
        assert [r.identifier for r in walks_only] == ["morning-walk-reminder", "evening-walk-reminder"]
        assert walks_only[1].trigger == DailyTrigger(hour=19, minute=15)

    def test_all_disabled(self):
        assert routine_requests(RoutineSettings()) == []


class TestScheduler:
    def test_apply_replaces_previous_settings(self):
        center = InMemoryNotificationCenter()
        scheduler = RoutineReminderScheduler(center)
        scheduler.apply(RoutineSettings(meal_reminders=True, walk_reminders=True))
        assert len(center) == 4

        scheduler.apply(RoutineSettings(meal_reminders=True))
        assert [r.identifier for r in center.pending()] == ["breakfast-reminder", "dinner-reminder"]

    def test_leaves_medication_reminders(self):
        center = InMemoryNotificationCenter()
        center.schedule(
            NotificationRequest(
                identifier="medication-a-0", title="Medication Reminder", body="", trigger=DailyTrigger(8, 0)
            )
        )
        RoutineReminderScheduler(center).apply(RoutineSettings())
        assert center.get("medication-a-0") is not None


class TestSettings:
    def test_from_config_defaults(self):
        settings = RoutineSettings.from_config(Config(env_prefix=""))
        assert settings == RoutineSettings()

    def test_from_env(self, monkeypatch):
        monkeypatch.setenv("PAWJOURNAL_ROUTINE__MEAL_REMINDERS", "true")
        monkeypatch.setenv("PAWJOURNAL_ROUTINE__DINNER_TIME", "19:45")
        settings = RoutineSettings.from_config(Config())
        assert settings.meal_reminders
        assert not settings.walk_reminders
        assert settings.dinner_time == time(19, 45)

    @pytest.mark.parametrize("value, expected", [("06:05", time(6, 5)), (1080, time(18, 0)), (time(7, 0), time(7, 0))])
    def test_parse_clock(self, value, expected):
        assert parse_clock(value) == expected

    @pytest.mark.parametrize("value", ["noon", "25:00", 1500])
    def test_parse_clock_rejects(self, value):
        with pytest.raises(ConfigurationError, match="HH:MM"):
            parse_clock(value)
