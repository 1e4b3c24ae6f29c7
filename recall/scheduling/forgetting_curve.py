"""
Forgetting-curve reminder timelines.

Each category maps to an ascending table of offsets from the moment an item
was created. Offsets grow roughly geometrically, following the intervals at
which recall of freshly learned material tends to decay: short content gets a
compressed timeline, long content a spread-out one. All three tables share
the same first five steps.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from datetime import datetime, timedelta
from types import MappingProxyType

from recall.constants import Category

_SECOND = timedelta(seconds=1)
_MINUTE = timedelta(minutes=1)
_HOUR = timedelta(hours=1)
_DAY = timedelta(days=1)

_COMMON_PREFIX = (5 * _SECOND, 25 * _SECOND, 2 * _MINUTE, 10 * _MINUTE, 1 * _HOUR)

OFFSETS: Mapping[Category, tuple[timedelta, ...]] = MappingProxyType({
    Category.SHORT: _COMMON_PREFIX + (1 * _DAY,),
    Category.MEDIUM: _COMMON_PREFIX + (5 * _HOUR, 1 * _DAY, 5 * _DAY),
    Category.LONG: _COMMON_PREFIX + (5 * _HOUR, 1 * _DAY, 5 * _DAY, 25 * _DAY, 120 * _DAY),
})

_TICK = timedelta(microseconds=1)


class ForgettingCurve:
    """
    Pure timeline generator.

    Identical inputs always produce identical timestamps; nothing here reads
    the clock.
    """

    def __init__(self, offsets: Mapping[Category, Sequence[timedelta]] | None = None):
        table = {
            Category(category): tuple(steps) for category, steps in (offsets or OFFSETS).items()
        }
        for category, steps in table.items():
            if not steps or steps[0] <= timedelta(0) or any(b <= a for a, b in zip(steps, steps[1:])):
                raise ValueError(f"offsets for {category.value} must be positive and strictly ascending")
        self.offsets: Mapping[Category, tuple[timedelta, ...]] = table

    def offsets_for(self, category: Category) -> tuple[timedelta, ...]:
        return self.offsets[Category(category)]

    def reminder_dates(self, created_at: datetime, category: Category) -> list[datetime]:
        """Base timeline: ``created_at`` plus each offset of the category."""
        return [created_at + offset for offset in self.offsets_for(category)]

    def adjusted_reminder_dates(
        self,
        created_at: datetime,
        category: Category,
        multiplier: float,
    ) -> list[datetime]:
        """
        Timeline with every offset scaled by ``multiplier``.

        A multiplier of exactly 1.0 reproduces ``reminder_dates``. Scaled
        offsets that collapse onto the previous microsecond are nudged one
        microsecond later so the result stays strictly ascending.
        """
        if multiplier <= 0:
            raise ValueError(f"multiplier must be positive, got {multiplier}")
        if multiplier == 1.0:
            return self.reminder_dates(created_at, category)

        dates: list[datetime] = []
        for offset in self.offsets_for(category):
            moment = created_at + offset * multiplier
            if dates and moment <= dates[-1]:
                moment = dates[-1] + _TICK
            dates.append(moment)
        return dates


DEFAULT_CURVE = ForgettingCurve()


def reminder_dates(created_at: datetime, category: Category) -> list[datetime]:
    """Module-level shortcut over the default curve."""
    return DEFAULT_CURVE.reminder_dates(created_at, category)


def adjusted_reminder_dates(created_at: datetime, category: Category, multiplier: float) -> list[datetime]:
    return DEFAULT_CURVE.adjusted_reminder_dates(created_at, category, multiplier)
