"""
Port (interface) for the notification sink.

The engine depends on this abstraction, never on a concrete delivery
mechanism. A sink owns no domain state: it mirrors whatever timelines the
orchestrator last installed.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class PendingNotification:
    """One scheduled alert."""

    key: str
    item_id: str
    fire_at: datetime
    body: str


def notification_keys(item_id: str, times: Iterable[datetime]) -> list[tuple[str, datetime]]:
    """
    Build one key per timestamp.

    Keys are ``"{item_id}-{epoch_seconds}"``; a repeated timestamp within the
    same batch gets a ``#n`` suffix so both alerts survive.
    """
    seen: dict[str, int] = {}
    keys = []
    for moment in times:
        base = f"{item_id}-{moment.timestamp()}"
        count = seen.get(base, 0)
        seen[base] = count + 1
        keys.append((base if count == 0 else f"{base}#{count}", moment))
    return keys


class NotificationSink(ABC):
    """
    Port for delivering reminder alerts.

    Implementations:
        - InMemoryNotificationSink: dict-backed, for tests and previews.
        - SQLiteNotificationSink: persists pending alerts in a local database.
    """

    @abstractmethod
    def schedule_notifications(self, item_id: str, body: str, times: Sequence[datetime]) -> None:
        """Register one pending alert per timestamp."""

    @abstractmethod
    def cancel_notifications(self, item_id: str) -> None:
        """Remove every pending alert owned by exactly ``item_id``."""

    @abstractmethod
    def cancel_all(self) -> None:
        """Remove every pending alert."""

    @abstractmethod
    def list_pending(self) -> list[PendingNotification]:
        """Pending alerts sorted by fire time (diagnostics)."""
