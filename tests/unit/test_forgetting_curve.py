"""
Unit tests for forgetting-curve timelines.
"""

from datetime import datetime, timedelta

import pytest

from recall.constants import Category
from recall.scheduling.forgetting_curve import (
    OFFSETS,
    ForgettingCurve,
    adjusted_reminder_dates,
    reminder_dates,
)

CREATED = datetime(2024, 1, 1, 23, 30, 0)


def is_strictly_ascending(dates):
    return all(b > a for a, b in zip(dates, dates[1:]))


class TestOffsetTables:
    """Tests for the category offset tables."""

    def test_short_table(self):
        """Short content uses the compressed six-step curve."""
        assert OFFSETS[Category.SHORT] == (
            timedelta(seconds=5),
            timedelta(seconds=25),
            timedelta(minutes=2),
            timedelta(minutes=10),
            timedelta(hours=1),
            timedelta(days=1),
        )

    def test_longer_categories_spread_further(self):
        short, medium, long_ = (OFFSETS[c] for c in (Category.SHORT, Category.MEDIUM, Category.LONG))
        assert len(short) < len(medium) < len(long_)
        assert short[-1] < medium[-1] < long_[-1]

    def test_tables_share_prefix(self):
        """First five steps (5s .. 1h) are common to every category."""
        prefixes = {OFFSETS[c][:5] for c in Category}
        assert len(prefixes) == 1

    def test_rejects_unordered_table(self):
        with pytest.raises(ValueError):
            ForgettingCurve({Category.SHORT: (timedelta(minutes=2), timedelta(minutes=1))})

    def test_rejects_empty_table(self):
        with pytest.raises(ValueError):
            ForgettingCurve({Category.SHORT: ()})


class TestReminderDates:
    """Tests for the base timeline."""

    def test_scenario_timeline(self):
        dates = reminder_dates(CREATED, Category.SHORT)
        assert dates == [
            datetime(2024, 1, 1, 23, 30, 5),
            datetime(2024, 1, 1, 23, 30, 25),
            datetime(2024, 1, 1, 23, 32, 0),
            datetime(2024, 1, 1, 23, 40, 0),
            datetime(2024, 1, 2, 0, 30, 0),
            datetime(2024, 1, 2, 23, 30, 0),
        ]

    @pytest.mark.parametrize("category", list(Category))
    def test_strictly_ascending(self, category):
        assert is_strictly_ascending(reminder_dates(CREATED, category))

    @pytest.mark.parametrize("category", list(Category))
    def test_deterministic(self, category):
        assert reminder_dates(CREATED, category) == reminder_dates(CREATED, category)

    def test_accepts_string_category(self):
        assert reminder_dates(CREATED, "long") == reminder_dates(CREATED, Category.LONG)


class TestAdjustedReminderDates:
    """Tests for multiplier scaling."""

    @pytest.mark.parametrize("category", list(Category))
    def test_identity_multiplier(self, category):
        """Multiplier 1.0 reproduces the base timeline exactly."""
        assert adjusted_reminder_dates(CREATED, category, 1.0) == reminder_dates(CREATED, category)

    def test_scaling_doubles_offsets(self):
        dates = adjusted_reminder_dates(CREATED, Category.SHORT, 2.0)
        assert dates[0] == CREATED + timedelta(seconds=10)
        assert dates[-1] == CREATED + timedelta(days=2)

    def test_scaling_shrinks_offsets(self):
        dates = adjusted_reminder_dates(CREATED, Category.MEDIUM, 0.5)
        assert dates[3] == CREATED + timedelta(minutes=5)

    @pytest.mark.parametrize("multiplier", [1e-12, 1e-7, 0.1, 0.73, 1.3, 4.9])
    @pytest.mark.parametrize("category", list(Category))
    def test_order_preserved_for_any_positive_multiplier(self, category, multiplier):
        dates = adjusted_reminder_dates(CREATED, category, multiplier)
        assert len(dates) == len(OFFSETS[category])
        assert is_strictly_ascending(dates)

    @pytest.mark.parametrize("multiplier", [0, -1.0])
    def test_rejects_non_positive_multiplier(self, multiplier):
        with pytest.raises(ValueError):
            adjusted_reminder_dates(CREATED, Category.SHORT, multiplier)
