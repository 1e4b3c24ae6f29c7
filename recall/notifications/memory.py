"""In-memory notification sink."""

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime

from loguru import logger

from .base import NotificationSink, PendingNotification, notification_keys


class InMemoryNotificationSink(NotificationSink):
    """Keeps pending alerts in a dict keyed by alert key."""

    def __init__(self) -> None:
        self._pending: dict[str, PendingNotification] = {}

    def schedule_notifications(self, item_id: str, body: str, times: Sequence[datetime]) -> None:
        for key, moment in notification_keys(item_id, times):
            self._pending[key] = PendingNotification(key=key, item_id=item_id, fire_at=moment, body=body)
        logger.debug(f"Scheduled {len(times)} notifications for {item_id}")

    def cancel_notifications(self, item_id: str) -> None:
        doomed = [key for key, p in self._pending.items() if p.item_id == item_id]
        for key in doomed:
            del self._pending[key]
        logger.debug(f"Cancelled {len(doomed)} notifications for {item_id}")

    def cancel_all(self) -> None:
        self._pending.clear()

    def list_pending(self) -> list[PendingNotification]:
        return sorted(self._pending.values(), key=lambda p: p.fire_at)
