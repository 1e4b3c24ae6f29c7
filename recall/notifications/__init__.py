"""Notification sinks: the port the engine schedules against, plus adapters."""

from .base import NotificationSink, PendingNotification, notification_keys
from .memory import InMemoryNotificationSink
from .sqlite import SQLiteNotificationSink

__all__ = [
    "NotificationSink",
    "PendingNotification",
    "notification_keys",
    "InMemoryNotificationSink",
    "SQLiteNotificationSink",
]
