"""
Unit tests for night-window conflict resolution.

Includes the 23:30 reference scenario and the completeness/passthrough
guarantees of the final schedule.
"""

from datetime import datetime, timedelta

import pytest

from recall.constants import Category
from recall.scheduling.conflict import ConflictResolver, NightConflict, PostponementRule
from recall.scheduling.forgetting_curve import reminder_dates
from recall.scheduling.night_window import NightWindow


@pytest.fixture
def resolver():
    return ConflictResolver(region="Europe")


class TestScenario:
    """Item created at 23:30 with Short content."""

    def test_conflicting_dates(self, resolver, late_evening):
        conflict = resolver.evaluate(late_evening, Category.SHORT)

        assert conflict is not None
        assert conflict.conflicting_dates == (
            datetime(2024, 1, 1, 23, 40, 0),
            datetime(2024, 1, 2, 0, 30, 0),
            datetime(2024, 1, 2, 23, 30, 0),
        )

    def test_postponed_dates(self, resolver, late_evening):
        conflict = resolver.evaluate(late_evening, Category.SHORT)

        assert conflict.postponed_dates == (
            datetime(2024, 1, 2, 7, 0, 0),
            datetime(2024, 1, 2, 7, 0, 0),
            datetime(2024, 1, 3, 7, 0, 0),
        )

    def test_final_schedule_keeps_duplicates(self, resolver, late_evening):
        conflict = resolver.evaluate(late_evening, Category.SHORT)

        assert conflict.final_schedule == [
            datetime(2024, 1, 1, 23, 30, 5),
            datetime(2024, 1, 1, 23, 30, 25),
            datetime(2024, 1, 1, 23, 32, 0),
            datetime(2024, 1, 2, 7, 0, 0),
            datetime(2024, 1, 2, 7, 0, 0),
            datetime(2024, 1, 3, 7, 0, 0),
        ]

    def test_conveniences(self, resolver, late_evening):
        conflict = resolver.evaluate(late_evening, Category.SHORT)

        assert conflict.conflict_count == 3
        assert conflict.region == "Europe"
        assert conflict.date_mapping[datetime(2024, 1, 2, 0, 30)] == datetime(2024, 1, 2, 7, 0)
        assert conflict.created_at == late_evening
        assert conflict.category is Category.SHORT


class TestLeadingExemption:
    """The first reminders fire whatever the hour."""

    def test_leading_entries_never_conflict(self, resolver, late_evening):
        conflict = resolver.evaluate(late_evening, Category.LONG)
        assert min(conflict.conflicting_indices) >= 3

    def test_skip_override(self, resolver, late_evening):
        conflict = resolver.evaluate(late_evening, Category.SHORT, skip_leading=0)
        assert conflict.conflict_count == 6

    def test_skip_beyond_timeline_means_no_conflict(self, resolver, late_evening):
        assert resolver.evaluate(late_evening, Category.SHORT, skip_leading=10) is None

    def test_rejects_negative_skip(self):
        with pytest.raises(ValueError):
            ConflictResolver(skip_leading=-1)


class TestCompleteness:
    """Final schedules keep cardinality and leave no postponed entry at night."""

    @pytest.mark.parametrize("category", list(Category))
    @pytest.mark.parametrize("hour", range(24))
    def test_final_schedule_shape(self, resolver, category, hour):
        created = datetime(2024, 6, 15, hour, 17, 0)
        conflict = resolver.evaluate(created, category)
        raw = reminder_dates(created, category)
        if conflict is None:
            return

        final = conflict.final_schedule
        assert len(final) == len(raw)
        assert final == sorted(final)
        for moment in conflict.postponed_dates:
            assert not resolver.night_window.is_in_night_window(moment)
        for original, postponed in zip(conflict.conflicting_dates, conflict.postponed_dates):
            assert postponed > original

    def test_no_conflict_returns_none(self, resolver):
        """A midday Short item only reaches the next midday; nothing at night."""
        created = datetime(2024, 1, 1, 12, 0, 0)
        assert resolver.evaluate(created, Category.SHORT) is None

    def test_conflict_requires_one_postponement_per_date(self):
        with pytest.raises(ValueError):
            NightConflict(
                created_at=datetime(2024, 1, 1),
                category=Category.SHORT,
                all_scheduled_dates=(datetime(2024, 1, 1, 23),),
                conflicting_indices=(0,),
                postponed_dates=(),
            )


class TestPostponementRules:
    """Tests for the two postponement rules."""

    def test_same_day_rule(self, late_evening):
        resolver = ConflictResolver(rule=PostponementRule.SAME_DAY_MORNING, region="Europe")
        conflict = resolver.evaluate(late_evening, Category.SHORT)

        assert conflict.postponed_dates == (
            datetime(2024, 1, 1, 7, 0, 0),
            datetime(2024, 1, 2, 7, 0, 0),
            datetime(2024, 1, 2, 7, 0, 0),
        )

    def test_rules_diverge_late_evening(self, late_evening):
        strict = ConflictResolver(region="x").evaluate(late_evening, Category.SHORT)
        same_day = ConflictResolver(rule="same_day_morning", region="x").evaluate(late_evening, Category.SHORT)
        assert strict.postponed_dates[0] - same_day.postponed_dates[0] == timedelta(days=1)

    def test_custom_window(self, late_evening):
        resolver = ConflictResolver(
            night_window=NightWindow(night_start_hour=23, morning_wake_hour=9),
            region="Europe",
        )
        conflict = resolver.evaluate(late_evening, Category.SHORT)
        assert conflict.postponed_dates[0] == datetime(2024, 1, 2, 9, 0, 0)

    def test_default_region_never_raises(self, monkeypatch):
        monkeypatch.setenv("TZ", "Nowhere/Special")
        assert ConflictResolver().region == "your region"
