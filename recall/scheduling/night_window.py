"""
Night window: the nightly span during which reminders are postponed.

The window is ``[night_start_hour, morning_wake_hour)`` in local wall-clock
hours and wraps midnight (22:00 - 07:00 by default). Naive datetimes are read
as local wall-clock time; aware datetimes are first converted to the window's
timezone when one is configured.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from datetime import datetime, timedelta, tzinfo

from recall.constants import MORNING_WAKE_HOUR, NIGHT_START_HOUR

# Checked in order; first match wins
_REGION_PREFIXES: tuple[tuple[str, str], ...] = (
    ("Europe/", "Europe"),
    ("Asia/", "Asia"),
    ("Africa/", "Africa"),
    ("Australia/", "Oceania"),
    ("Pacific/", "Oceania"),
    ("Antarctica/", "Antarctica"),
    ("Atlantic/", "the Atlantic"),
    ("Indian/", "the Indian Ocean"),
)

_NORTH_AMERICA_MARKERS = (
    "North_",
    "New_York",
    "Chicago",
    "Denver",
    "Los_Angeles",
    "Toronto",
    "Vancouver",
    "Phoenix",
    "Anchorage",
    "Halifax",
    "Mexico_City",
    "Detroit",
    "Edmonton",
    "Winnipeg",
)

GENERIC_REGION = "your region"


def region_label(timezone_name: str | None = None) -> str:
    """
    Map a timezone identifier to a coarse, continent-level label.

    Used only for user-facing wording. Unknown or missing identifiers fall
    back to a generic label; this function never raises.
    """
    if timezone_name is None:
        timezone_name = os.environ.get("TZ", "")
    if not isinstance(timezone_name, str) or not timezone_name:
        return GENERIC_REGION

    name = timezone_name.lstrip(":")
    if name.startswith("America/") or name.startswith("US/") or name.startswith("Canada/"):
        if name.startswith(("US/", "Canada/")) or any(m in name for m in _NORTH_AMERICA_MARKERS):
            return "North America"
        return "South America"

    for prefix, label in _REGION_PREFIXES:
        if name.startswith(prefix):
            return label

    return GENERIC_REGION


@dataclass(frozen=True)
class NightWindow:
    """Fixed nightly interval with postponement helpers."""

    night_start_hour: int = NIGHT_START_HOUR
    morning_wake_hour: int = MORNING_WAKE_HOUR
    tz: tzinfo | None = None

    def __post_init__(self) -> None:
        for hour in (self.night_start_hour, self.morning_wake_hour):
            if not 0 <= hour <= 23:
                raise ValueError(f"hour must be within 0..23, got {hour}")
        if self.night_start_hour <= self.morning_wake_hour:
            raise ValueError("night_start_hour must be later than morning_wake_hour")

    def _local(self, moment: datetime) -> datetime:
        if self.tz is None or moment.tzinfo is None:
            return moment
        return moment.astimezone(self.tz)

    def _wake_on(self, moment: datetime) -> datetime:
        return moment.replace(hour=self.morning_wake_hour, minute=0, second=0, microsecond=0)

    def is_in_night_window(self, moment: datetime) -> bool:
        """True iff the local hour is >= night start or < morning wake."""
        hour = self._local(moment).hour
        return hour >= self.night_start_hour or hour < self.morning_wake_hour

    def next_morning_after(self, moment: datetime) -> datetime:
        """
        Earliest wake time strictly after ``moment``.

        Before the wake hour this is the same calendar day; from the wake
        hour onwards (including exactly at it) it is the following day.
        """
        local = self._local(moment)
        wake = self._wake_on(local)
        if local.hour < self.morning_wake_hour:
            return wake
        # Calendar-day step in wall-clock time, not a fixed 24h
        return self._wake_on(wake + timedelta(days=1))

    def same_day_morning(self, moment: datetime) -> datetime:
        """Wake time on ``moment``'s calendar day, whatever its hour."""
        return self._wake_on(self._local(moment))
