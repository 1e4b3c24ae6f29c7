"""
Engine Factory
Centralizes wiring of the orchestrator and its collaborators from Settings.
"""

from __future__ import annotations

from datetime import datetime

from recall.classifier import TextComplexityAnalyzer
from recall.config import Settings, get_settings
from recall.constants import Category
from recall.notifications import SQLiteNotificationSink
from recall.scheduling import ConflictResolver, MultiplierPolicy, NightWindow, PostponementRule, region_label
from recall.scheduling.orchestrator import SchedulingOrchestrator
from recall.store import SqlContentStore


def build_night_window(settings: Settings) -> NightWindow:
    return NightWindow(
        night_start_hour=settings.night_start_hour,
        morning_wake_hour=settings.morning_wake_hour,
        tz=settings.tzinfo,
    )


def build_resolver(settings: Settings) -> ConflictResolver:
    return ConflictResolver(
        night_window=build_night_window(settings),
        skip_leading=settings.conflict_skip_leading,
        rule=PostponementRule(settings.postponement_rule),
        region=region_label(settings.timezone),
    )


def build_classifier(settings: Settings) -> TextComplexityAnalyzer:
    return TextComplexityAnalyzer(
        short_max_words=settings.short_max_words,
        long_min_words=settings.long_min_words,
        long_min_sentences=settings.long_min_sentences,
        default_category=Category(settings.default_category),
    )


def build_policy(settings: Settings) -> MultiplierPolicy:
    return MultiplierPolicy(
        easy_factor=settings.easy_factor,
        hard_factor=settings.hard_factor,
        good_pull=settings.good_pull,
        floor=settings.multiplier_floor,
        ceiling=settings.multiplier_ceiling,
    )


def build_orchestrator(settings: Settings | None = None, load: bool = True) -> SchedulingOrchestrator:
    """
    Returns an orchestrator backed by the configured SQL store and SQLite sink.

    Args:
        settings: Settings to use (cached environment settings when None)
        load: Populate the collection from the store
    """
    settings = settings or get_settings()
    tz = settings.tzinfo

    orchestrator = SchedulingOrchestrator(
        sink=SQLiteNotificationSink(settings.notifications_db_path),
        store=SqlContentStore(settings.database_url, echo=settings.log_level == "DEBUG"),
        classifier=build_classifier(settings),
        resolver=build_resolver(settings),
        policy=build_policy(settings),
        clock=(lambda: datetime.now(tz)) if tz else datetime.now,
    )
    if load:
        orchestrator.load()
    return orchestrator
