"""Tests for APSchedulerNotificationCenter."""

from datetime import datetime

import pytest

pytest.importorskip("apscheduler")

from apscheduler.triggers.cron import CronTrigger
from apscheduler.triggers.date import DateTrigger

from pawjournal.core.config import Config
from pawjournal.medications.reminders import (
    DailyTrigger,
    NotificationRequest,
    NotificationScheduler,
    OneTimeTrigger,
    ReminderScheduler,
    WeeklyTrigger,
)
from pawjournal.notifications.apscheduler_center import APSchedulerNotificationCenter

FUTURE = datetime(2099, 1, 1, 9, 0)


def _request(identifier, trigger):
    return NotificationRequest(identifier=identifier, title="Medication Reminder", body="Time to give X", trigger=trigger)


@pytest.fixture
def delivered():
    return []


@pytest.fixture
def center(delivered):
    center = APSchedulerNotificationCenter(deliver_fn=delivered.append)
    yield center
    center.shutdown()


class TestRegistration:
    @pytest.mark.smoke
    def test_protocol(self, center):
        assert isinstance(center, NotificationScheduler)

    def test_schedule_and_cancel(self, center):
        center.schedule(_request("medication-a-0", DailyTrigger(hour=8, minute=0)))
        center.schedule(_request("medication-a-1", DailyTrigger(hour=20, minute=0)))
        center.schedule(_request("medication-refill-a", OneTimeTrigger(at=FUTURE)))
        assert center.scheduled_identifiers("medication-a") == ["medication-a-0", "medication-a-1"]

        center.cancel(["medication-a-0", "medication-a-1", "medication-a-2", "medication-refill-a"])
        assert center.scheduled_identifiers() == []

    def test_reschedule_replaces_job(self, center):
        center.schedule(_request("medication-a-0", DailyTrigger(hour=8, minute=0)))
        center.schedule(_request("medication-a-0", DailyTrigger(hour=9, minute=30)))
        jobs = center.apscheduler.get_jobs()
        assert len(jobs) == 1
        assert isinstance(jobs[0].trigger, CronTrigger)

    def test_trigger_mapping(self, center):
        assert isinstance(center._build_trigger(OneTimeTrigger(at=FUTURE)), DateTrigger)
        assert isinstance(center._build_trigger(DailyTrigger(hour=8, minute=0)), CronTrigger)
        weekly = center._build_trigger(WeeklyTrigger(weekday=2, hour=8, minute=0))
        assert "day_of_week='2'" in str(weekly)

    def test_unsupported_trigger(self, center):
        with pytest.raises(TypeError):
            center._build_trigger("tomorrow")

    def test_cancel_before_any_schedule(self, center):
        center.cancel(["medication-a-0"])
        assert center.scheduled_identifiers() == []

    def test_works_with_reminder_scheduler(self, center, make_medication):
        med = make_medication(times=((8, 0), (20, 0)))
        reminders = ReminderScheduler(center)
        reminders.on_create(med)
        assert len(center.scheduled_identifiers(f"medication-{med.id}")) == 2
        reminders.on_delete(med)
        assert center.scheduled_identifiers(f"medication-{med.id}") == []


class TestLifecycle:
    def test_start_and_shutdown(self, center):
        center.schedule(_request("medication-a-0", DailyTrigger(hour=8, minute=0)))
        center.start()
        assert center.apscheduler.running
        assert center.scheduled_identifiers() == ["medication-a-0"]
        center.shutdown()
        assert not center.apscheduler.running

    def test_from_config(self, delivered):
        config = Config(env_prefix="")
        config.set("reminders.timezone", "Europe/London")
        center = APSchedulerNotificationCenter.from_config(config, delivered.append)
        assert center._timezone == "Europe/London"


class TestDelivery:
    def test_fire_delivers(self, center, delivered):
        request = _request("medication-a-0", DailyTrigger(hour=8, minute=0))
        center._fire(request)
        assert delivered == [request]

    def test_fire_survives_delivery_errors(self):
        def broken(request):
            raise RuntimeError("push service down")

        center = APSchedulerNotificationCenter(deliver_fn=broken)
        center._fire(_request("medication-a-0", DailyTrigger(hour=8, minute=0)))
