"""
SQLite notification sink.

Persists pending reminder alerts so they survive between CLI invocations.
Delivery is pull-based: ``pop_due`` hands back (and forgets) every alert
whose fire time has passed.

Database location: ~/.recall/notifications.db
"""

from __future__ import annotations

import sqlite3
from collections.abc import Sequence
from datetime import datetime
from pathlib import Path

from loguru import logger

from .base import NotificationSink, PendingNotification, notification_keys


class SQLiteNotificationSink(NotificationSink):
    """
    SQLite-backed pending-alert table.

    Each row is one alert: key, owning item, fire time (ISO text for exact
    round-trip plus epoch seconds for ordering) and display body.
    """

    DEFAULT_DB_PATH = Path.home() / ".recall" / "notifications.db"

    def __init__(self, db_path: Path | None = None):
        """
        Initialize the sink.

        Args:
            db_path: Custom database path (defaults to ~/.recall/notifications.db)
        """
        self.db_path = Path(db_path) if db_path else self.DEFAULT_DB_PATH
        self.db_path.parent.mkdir(parents=True, exist_ok=True)

        self._conn: sqlite3.Connection | None = None
        self._init_schema()

        logger.debug(f"SQLiteNotificationSink initialized at {self.db_path}")

    @property
    def conn(self) -> sqlite3.Connection:
        """Get or create database connection."""
        if self._conn is None:
            # The background dispatcher calls in from its worker thread
            self._conn = sqlite3.connect(str(self.db_path), check_same_thread=False)
            self._conn.row_factory = sqlite3.Row
        return self._conn

    def _init_schema(self) -> None:
        cursor = self.conn.cursor()
        cursor.execute("""
            CREATE TABLE IF NOT EXISTS pending_notifications (
                key TEXT PRIMARY KEY,
                item_id TEXT NOT NULL,
                fire_at TEXT NOT NULL,
                fire_epoch REAL NOT NULL,
                body TEXT NOT NULL
            )
        """)
        cursor.execute("""
            CREATE INDEX IF NOT EXISTS idx_pending_fire_epoch
            ON pending_notifications(fire_epoch)
        """)
        cursor.execute("""
            CREATE INDEX IF NOT EXISTS idx_pending_item_id
            ON pending_notifications(item_id)
        """)
        self.conn.commit()

    @staticmethod
    def _row_to_pending(row: sqlite3.Row) -> PendingNotification:
        return PendingNotification(
            key=row["key"],
            item_id=row["item_id"],
            fire_at=datetime.fromisoformat(row["fire_at"]),
            body=row["body"],
        )

    # =========================================================================
    # NotificationSink
    # =========================================================================

    def schedule_notifications(self, item_id: str, body: str, times: Sequence[datetime]) -> None:
        rows = [
            (key, item_id, moment.isoformat(), moment.timestamp(), body)
            for key, moment in notification_keys(item_id, times)
        ]
        self.conn.executemany(
            """
            INSERT INTO pending_notifications (key, item_id, fire_at, fire_epoch, body)
            VALUES (?, ?, ?, ?, ?)
            ON CONFLICT(key) DO UPDATE SET
                fire_at = excluded.fire_at,
                fire_epoch = excluded.fire_epoch,
                body = excluded.body
            """,
            rows,
        )
        self.conn.commit()
        logger.debug(f"Scheduled {len(rows)} notifications for {item_id}")

    def cancel_notifications(self, item_id: str) -> None:
        cursor = self.conn.execute(
            "DELETE FROM pending_notifications WHERE item_id = ?",
            (item_id,),
        )
        self.conn.commit()
        logger.debug(f"Cancelled {cursor.rowcount} notifications for {item_id}")

    def cancel_all(self) -> None:
        cursor = self.conn.execute("DELETE FROM pending_notifications")
        self.conn.commit()
        logger.info(f"Cancelled all {cursor.rowcount} pending notifications")

    def list_pending(self) -> list[PendingNotification]:
        cursor = self.conn.execute(
            "SELECT * FROM pending_notifications ORDER BY fire_epoch ASC, key ASC"
        )
        return [self._row_to_pending(row) for row in cursor.fetchall()]

    # =========================================================================
    # Delivery
    # =========================================================================

    def pop_due(self, now: datetime | None = None) -> list[PendingNotification]:
        """
        Remove and return alerts whose fire time is at or before ``now``.

        Args:
            now: Reference time (defaults to the current local time)

        Returns:
            Due alerts, oldest first
        """
        cutoff = (now or datetime.now()).timestamp()
        cursor = self.conn.execute(
            "SELECT * FROM pending_notifications WHERE fire_epoch <= ? ORDER BY fire_epoch ASC, key ASC",
            (cutoff,),
        )
        due = [self._row_to_pending(row) for row in cursor.fetchall()]
        if due:
            self.conn.executemany(
                "DELETE FROM pending_notifications WHERE key = ?",
                [(p.key,) for p in due],
            )
            self.conn.commit()
        return due

    def close(self) -> None:
        if self._conn is not None:
            self._conn.close()
            self._conn = None
