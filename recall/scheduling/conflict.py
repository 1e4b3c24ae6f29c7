"""
Night-window conflict resolution.

Given an item's creation time and category, the resolver builds the raw
forgetting-curve timeline, finds reminders that would fire during the night,
and proposes a postponed replacement for each. The first few reminders
(seconds to minutes after creation) are exempt: they fire almost immediately
whatever the time of day.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum

from loguru import logger

from recall.constants import CONFLICT_SKIP_LEADING, Category
from recall.scheduling.forgetting_curve import DEFAULT_CURVE, ForgettingCurve
from recall.scheduling.night_window import NightWindow, region_label


class PostponementRule(str, Enum):
    """Where a conflicting reminder is moved to."""

    NEXT_MORNING = "next_morning"  # wake time strictly after the reminder
    SAME_DAY_MORNING = "same_day_morning"  # wake time on the reminder's day


@dataclass(frozen=True)
class NightConflict:
    """
    Outcome of checking one timeline against the night window.

    Transient: built on request, then either committed through
    ``final_schedule`` or dropped.

    Attributes:
        created_at: Anchor the timeline was generated from.
        category: Category the timeline was generated for.
        all_scheduled_dates: Raw timeline, ascending.
        conflicting_indices: Positions in ``all_scheduled_dates`` that fall in the window.
        postponed_dates: One replacement per conflicting date, same order.
        region: Coarse region label for message wording only.
    """

    created_at: datetime
    category: Category
    all_scheduled_dates: tuple[datetime, ...]
    conflicting_indices: tuple[int, ...]
    postponed_dates: tuple[datetime, ...]
    region: str = field(default="your region")

    def __post_init__(self) -> None:
        if len(self.conflicting_indices) != len(self.postponed_dates):
            raise ValueError("each conflicting date needs exactly one postponed date")

    @property
    def conflicting_dates(self) -> tuple[datetime, ...]:
        return tuple(self.all_scheduled_dates[i] for i in self.conflicting_indices)

    @property
    def conflict_count(self) -> int:
        return len(self.conflicting_indices)

    @property
    def date_mapping(self) -> dict[datetime, datetime]:
        """Original conflicting date -> its postponed replacement."""
        return dict(zip(self.conflicting_dates, self.postponed_dates))

    @property
    def final_schedule(self) -> list[datetime]:
        """
        Non-conflicting dates plus postponed dates, sorted ascending.

        Duplicates (two reminders postponed to the same morning) are kept.
        """
        skipped = set(self.conflicting_indices)
        kept = [d for i, d in enumerate(self.all_scheduled_dates) if i not in skipped]
        return sorted(kept + list(self.postponed_dates))


class ConflictResolver:
    """Classifies a candidate timeline against a night window."""

    def __init__(
        self,
        night_window: NightWindow | None = None,
        curve: ForgettingCurve | None = None,
        skip_leading: int = CONFLICT_SKIP_LEADING,
        rule: PostponementRule = PostponementRule.NEXT_MORNING,
        region: str | None = None,
    ):
        if skip_leading < 0:
            raise ValueError("skip_leading must be non-negative")
        self.night_window = night_window or NightWindow()
        self.curve = curve or DEFAULT_CURVE
        self.skip_leading = skip_leading
        self.rule = PostponementRule(rule)
        self.region = region if region is not None else region_label()

    def postpone(self, moment: datetime) -> datetime:
        if self.rule is PostponementRule.SAME_DAY_MORNING:
            return self.night_window.same_day_morning(moment)
        return self.night_window.next_morning_after(moment)

    def evaluate(
        self,
        created_at: datetime,
        category: Category,
        skip_leading: int | None = None,
    ) -> NightConflict | None:
        """
        Check the raw timeline for night-time reminders.

        Args:
            created_at: Timeline anchor
            category: Content category
            skip_leading: Override of the exempt leading count

        Returns:
            NightConflict, or None when no checked reminder is at night
        """
        skip = self.skip_leading if skip_leading is None else skip_leading
        dates = self.curve.reminder_dates(created_at, category)

        conflicting = tuple(
            i for i in range(skip, len(dates)) if self.night_window.is_in_night_window(dates[i])
        )
        if not conflicting:
            return None

        postponed = tuple(self.postpone(dates[i]) for i in conflicting)

        logger.debug(
            f"{len(conflicting)} of {len(dates)} reminders fall in the night window "
            f"(category={Category(category).value}, rule={self.rule.value})"
        )

        return NightConflict(
            created_at=created_at,
            category=Category(category),
            all_scheduled_dates=tuple(dates),
            conflicting_indices=conflicting,
            postponed_dates=postponed,
            region=self.region,
        )
