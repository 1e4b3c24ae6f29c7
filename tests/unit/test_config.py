"""
Unit tests for settings and engine wiring.
"""

from datetime import datetime
from zoneinfo import ZoneInfo

import pytest
from pydantic import ValidationError

from recall.config import Settings
from recall.constants import Category
from recall.factory import build_classifier, build_orchestrator, build_policy, build_resolver
from recall.scheduling import PostponementRule


@pytest.fixture
def settings(tmp_path):
    return Settings(
        _env_file=None,
        database_url=f"sqlite:///{tmp_path / 'items.db'}",
        notifications_db_path=tmp_path / "notifications.db",
    )


class TestSettings:
    """Tests for Settings validation."""

    def test_defaults(self):
        settings = Settings(_env_file=None)
        assert (settings.night_start_hour, settings.morning_wake_hour) == (22, 7)
        assert settings.conflict_skip_leading == 3
        assert settings.postponement_rule == "next_morning"
        assert settings.tzinfo is None

    def test_reads_environment(self, monkeypatch):
        monkeypatch.setenv("NIGHT_START_HOUR", "23")
        monkeypatch.setenv("TIMEZONE", "Europe/Berlin")
        settings = Settings(_env_file=None)
        assert settings.night_start_hour == 23
        assert settings.tzinfo == ZoneInfo("Europe/Berlin")

    @pytest.mark.parametrize("kwargs", [
        {"night_start_hour": 24},
        {"morning_wake_hour": -1},
        {"night_start_hour": 6, "morning_wake_hour": 7},
        {"timezone": "Mars/Olympus_Mons"},
        {"multiplier_floor": 0.0},
        {"postponement_rule": "whenever"},
    ])
    def test_rejects_invalid(self, kwargs):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, **kwargs)


class TestFactory:
    """Tests for building components from settings."""

    def test_resolver_follows_settings(self, settings):
        settings.night_start_hour = 23
        settings.postponement_rule = "same_day_morning"
        resolver = build_resolver(settings)
        assert resolver.night_window.night_start_hour == 23
        assert resolver.rule is PostponementRule.SAME_DAY_MORNING

    def test_classifier_and_policy(self, settings):
        settings.default_category = "long"
        settings.easy_factor = 2.0
        assert build_classifier(settings).classify("") is Category.LONG
        assert build_policy(settings).easy_factor == 2.0

    def test_orchestrator_persists_between_builds(self, settings):
        first = build_orchestrator(settings)
        item = first.add_item("Bonjour means hello")
        first.sink.close()
        first.store.dispose()

        second = build_orchestrator(settings)
        assert [i.id for i in second.items] == [item.id]
        assert len(second.pending_notifications()) == len(second.reminder_timeline(item))
        second.sink.close()
        second.store.dispose()

    def test_timezone_clock_is_aware(self, settings):
        settings.timezone = "Asia/Tokyo"
        orchestrator = build_orchestrator(settings, load=False)
        now = orchestrator.clock()
        assert isinstance(now, datetime)
        assert now.tzinfo == ZoneInfo("Asia/Tokyo")
        orchestrator.sink.close()
        orchestrator.store.dispose()
