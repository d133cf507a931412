"""
Notification centers implementing ``NotificationScheduler``.

Core module (no heavy deps).  ``APSchedulerNotificationCenter`` needs the
``pawjournal[scheduler]`` extra.
"""

from .apscheduler_center import APSchedulerNotificationCenter
from .memory import InMemoryNotificationCenter

__all__ = [
    "APSchedulerNotificationCenter",
    "InMemoryNotificationCenter",
]
