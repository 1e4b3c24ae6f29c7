"""
Unit tests for the night window.

Covers the hour predicate at its boundaries, morning roll-over and the
region label fallback.
"""

from datetime import datetime, timezone
from zoneinfo import ZoneInfo

import pytest

from recall.scheduling.night_window import GENERIC_REGION, NightWindow, region_label


@pytest.fixture
def window():
    return NightWindow()


class TestIsInNightWindow:
    """Tests for the night predicate."""

    @pytest.mark.parametrize("hour,minute,second,expected", [
        (22, 0, 0, True),
        (6, 59, 59, True),
        (7, 0, 0, False),
        (21, 59, 59, False),
        (0, 0, 0, True),
        (23, 59, 59, True),
        (12, 0, 0, False),
    ])
    def test_boundaries(self, window, hour, minute, second, expected):
        """Window is [22:00, 07:00) in local hours."""
        moment = datetime(2024, 3, 10, hour, minute, second)
        assert window.is_in_night_window(moment) is expected

    def test_custom_hours(self):
        """Configured hours replace the defaults."""
        window = NightWindow(night_start_hour=23, morning_wake_hour=6)
        assert window.is_in_night_window(datetime(2024, 1, 1, 22, 30)) is False
        assert window.is_in_night_window(datetime(2024, 1, 1, 5, 59)) is True
        assert window.is_in_night_window(datetime(2024, 1, 1, 6, 0)) is False

    def test_aware_time_uses_window_timezone(self):
        """An aware UTC time is judged by the window's local hour."""
        window = NightWindow(tz=ZoneInfo("Asia/Tokyo"))
        # 14:00 UTC is 23:00 in Tokyo
        assert window.is_in_night_window(datetime(2024, 1, 1, 14, 0, tzinfo=timezone.utc)) is True
        # 01:00 UTC is 10:00 in Tokyo
        assert window.is_in_night_window(datetime(2024, 1, 1, 1, 0, tzinfo=timezone.utc)) is False

    @pytest.mark.parametrize("start,wake", [(7, 22), (7, 7), (24, 7), (22, -1)])
    def test_rejects_invalid_hours(self, start, wake):
        with pytest.raises(ValueError):
            NightWindow(night_start_hour=start, morning_wake_hour=wake)


class TestNextMorningAfter:
    """Tests for the strict next-morning rule."""

    def test_small_hours_roll_to_same_day(self, window):
        """03:00 on day D -> 07:00 on day D."""
        assert window.next_morning_after(datetime(2024, 1, 2, 3, 0)) == datetime(2024, 1, 2, 7, 0)

    def test_exactly_at_wake_rolls_to_next_day(self, window):
        """07:00:00 on day D -> 07:00 on day D+1 (strictly after)."""
        assert window.next_morning_after(datetime(2024, 1, 2, 7, 0, 0)) == datetime(2024, 1, 3, 7, 0)

    def test_late_evening_rolls_to_next_day(self, window):
        """23:00 on day D -> 07:00 on day D+1."""
        assert window.next_morning_after(datetime(2024, 1, 2, 23, 0)) == datetime(2024, 1, 3, 7, 0)

    def test_month_and_year_boundary(self, window):
        assert window.next_morning_after(datetime(2023, 12, 31, 22, 15)) == datetime(2024, 1, 1, 7, 0)

    def test_result_always_after_input(self, window):
        for hour in range(24):
            moment = datetime(2024, 5, 5, hour, 30)
            result = window.next_morning_after(moment)
            assert result > moment
            assert (result.hour, result.minute, result.second) == (7, 0, 0)

    def test_dst_spring_forward_keeps_wall_clock(self):
        """Roll-over is a calendar-day step, so wake stays at 07:00 across DST."""
        tz = ZoneInfo("Europe/Berlin")
        window = NightWindow(tz=tz)
        result = window.next_morning_after(datetime(2024, 3, 30, 23, 0, tzinfo=tz))
        assert result.replace(tzinfo=None) == datetime(2024, 3, 31, 7, 0)


class TestSameDayMorning:
    """Tests for the same-day rule."""

    @pytest.mark.parametrize("hour", [0, 3, 7, 12, 23])
    def test_ignores_own_hour(self, window, hour):
        assert window.same_day_morning(datetime(2024, 1, 2, hour, 45)) == datetime(2024, 1, 2, 7, 0)

    def test_can_precede_input(self, window):
        """Late-evening input maps to an earlier time; the strict rule exists for this."""
        moment = datetime(2024, 1, 2, 23, 0)
        assert window.same_day_morning(moment) < moment


class TestRegionLabel:
    """Tests for the coarse region label."""

    @pytest.mark.parametrize("name,expected", [
        ("Europe/Berlin", "Europe"),
        ("America/New_York", "North America"),
        ("America/Los_Angeles", "North America"),
        ("America/Sao_Paulo", "South America"),
        ("America/Argentina/Buenos_Aires", "South America"),
        ("Asia/Tokyo", "Asia"),
        ("Africa/Lagos", "Africa"),
        ("Australia/Sydney", "Oceania"),
        ("Pacific/Auckland", "Oceania"),
    ])
    def test_known_zones(self, name, expected):
        assert region_label(name) == expected

    @pytest.mark.parametrize("name", ["UTC", "Etc/GMT+3", "garbage", ""])
    def test_unmapped_zones_fall_back(self, name):
        assert region_label(name) == GENERIC_REGION

    def test_missing_tz_env_falls_back(self, monkeypatch):
        monkeypatch.delenv("TZ", raising=False)
        assert region_label() == GENERIC_REGION

    def test_tz_env_is_used(self, monkeypatch):
        monkeypatch.setenv("TZ", "Europe/Paris")
        assert region_label() == "Europe"
