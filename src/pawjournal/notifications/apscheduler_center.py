"""Notification center backed by APScheduler.

Each notification request becomes one APScheduler job whose job id is the
request identifier, so cancel-then-reschedule maps directly onto
``remove_job`` / ``add_job``.  When a job fires, the request is handed to
``deliver_fn`` (push to the OS, a chat channel, a test list...).

APScheduler is imported lazily so the module can be imported without the
``scheduler`` extra installed.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from loguru import logger

from pawjournal.medications.reminders import (
    DailyTrigger,
    NotificationRequest,
    OneTimeTrigger,
    Trigger,
    WeeklyTrigger,
)

DeliverFn = Callable[[NotificationRequest], None]
"""Callable invoked with the request when its trigger fires."""


def _require_apscheduler():
    try:
        from apscheduler.schedulers.background import BackgroundScheduler
        from apscheduler.triggers.cron import CronTrigger
        from apscheduler.triggers.date import DateTrigger

        return BackgroundScheduler, CronTrigger, DateTrigger
    except ImportError:
        raise ImportError(
            "APScheduler is required for scheduled notifications. Install with: pip install pawjournal[scheduler]"
        ) from None


class APSchedulerNotificationCenter:
    """Registers notification requests as APScheduler jobs.

    Args:
        deliver_fn: Called with the request each time a job fires.
            Dependency-injected so the center is decoupled from delivery.
        timezone: Timezone for cron and date triggers.
        scheduler: Optional pre-built APScheduler scheduler; a
            ``BackgroundScheduler`` is created otherwise.
    """

    def __init__(self, deliver_fn: DeliverFn, timezone: str = "UTC", scheduler: Any = None):
        self._deliver_fn = deliver_fn
        self._timezone = timezone
        self._scheduler = scheduler

    @classmethod
    def from_config(cls, config: Any, deliver_fn: DeliverFn) -> APSchedulerNotificationCenter:
        return cls(deliver_fn=deliver_fn, timezone=config.get("reminders.timezone", "UTC"))

    @property
    def apscheduler(self) -> Any:
        """The underlying APScheduler instance (created on first use)."""
        if self._scheduler is None:
            BackgroundScheduler, _, _ = _require_apscheduler()
            self._scheduler = BackgroundScheduler(timezone=self._timezone)
        return self._scheduler

    # ── Lifecycle ──────────────────────────────────────────────────

    def start(self) -> None:
        self.apscheduler.start()
        logger.info(f"Notification center started, tz={self._timezone}")

    def shutdown(self) -> None:
        if self._scheduler is not None and self._scheduler.running:
            self._scheduler.shutdown(wait=False)
            logger.info("Notification center shut down")

    # ── NotificationScheduler ──────────────────────────────────────

    def schedule(self, request: NotificationRequest) -> None:
        scheduler = self.apscheduler
        self._remove(request.identifier)
        scheduler.add_job(
            self._fire,
            trigger=self._build_trigger(request.trigger),
            id=request.identifier,
            name=request.title,
            kwargs={"request": request},
        )
        logger.debug(f"Registered notification {request.identifier}: {request.trigger}")

    def cancel(self, identifiers: list[str]) -> None:
        if self._scheduler is None:
            return
        removed = [i for i in identifiers if self._remove(i)]
        if removed:
            logger.debug(f"Cancelled {len(removed)} notification job(s)")

    def scheduled_identifiers(self, prefix: str = "") -> list[str]:
        if self._scheduler is None:
            return []
        return sorted(job.id for job in self._scheduler.get_jobs() if job.id.startswith(prefix))

    # ── Internals ──────────────────────────────────────────────────

    def _remove(self, identifier: str) -> bool:
        if self._scheduler.get_job(identifier) is None:
            return False
        self._scheduler.remove_job(identifier)
        return True

    def _build_trigger(self, trigger: Trigger) -> Any:
        _, CronTrigger, DateTrigger = _require_apscheduler()
        match trigger:
            case OneTimeTrigger(at=at):
                return DateTrigger(run_date=at, timezone=self._timezone)
            case DailyTrigger(hour=hour, minute=minute):
                return CronTrigger(hour=hour, minute=minute, timezone=self._timezone)
            case WeeklyTrigger(weekday=weekday, hour=hour, minute=minute):
                return CronTrigger(day_of_week=weekday, hour=hour, minute=minute, timezone=self._timezone)
        raise TypeError(f"Unsupported trigger: {trigger!r}")

    def _fire(self, request: NotificationRequest) -> None:
        logger.debug(f"Notification fired: {request.identifier}")
        try:
            self._deliver_fn(request)
        except Exception as e:
            logger.warning(f"Delivering notification {request.identifier} failed: {e}")
