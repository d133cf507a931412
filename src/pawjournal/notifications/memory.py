"""In-memory notification center.

Records scheduled requests by identifier.  Useful as the notifier in tests
and for hosts that render reminders themselves.
"""

from __future__ import annotations

import threading

from loguru import logger

from pawjournal.medications.reminders import NotificationRequest


class InMemoryNotificationCenter:
    def __init__(self):
        self._lock = threading.Lock()
        self._pending: dict[str, NotificationRequest] = {}

    def schedule(self, request: NotificationRequest) -> None:
        with self._lock:
            self._pending[request.identifier] = request
        logger.debug(f"Notification scheduled: {request.identifier}")

    def cancel(self, identifiers: list[str]) -> None:
        with self._lock:
            removed = [i for i in identifiers if self._pending.pop(i, None) is not None]
        if removed:
            logger.debug(f"Notifications cancelled: {', '.join(removed)}")

    def pending(self, prefix: str = "") -> list[NotificationRequest]:
        """Pending requests, optionally only those whose identifier starts with *prefix*."""
        with self._lock:
            return [r for i, r in sorted(self._pending.items()) if i.startswith(prefix)]

    def get(self, identifier: str) -> NotificationRequest | None:
        with self._lock:
            return self._pending.get(identifier)

    def __len__(self) -> int:
        with self._lock:
            return len(self._pending)
