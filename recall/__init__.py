"""
Recall: forgetting-curve reminder scheduling.

Schedules reminders for memorized content at spaced-repetition intervals,
adapts flashcard intervals to review feedback, and moves reminders out of
the night window.

Quick start:
    from recall import SchedulingOrchestrator, InMemoryNotificationSink, InMemoryContentStore

    engine = SchedulingOrchestrator(InMemoryNotificationSink(), InMemoryContentStore())
    conflict = engine.evaluate_conflict("mitochondria is the powerhouse of the cell")
    item = engine.add_item("mitochondria is the powerhouse of the cell", resolved_conflict=conflict)
"""

from recall.classifier import AnalysisResult, TextComplexityAnalyzer
from recall.constants import Category, ItemKind, ReviewDifficulty
from recall.models import AutoCategory, ManualCategory, TrackableItem
from recall.notifications import InMemoryNotificationSink, NotificationSink, SQLiteNotificationSink
from recall.scheduling import (
    AdaptiveProgress,
    ConflictResolver,
    ForgettingCurve,
    NightConflict,
    NightWindow,
)
from recall.scheduling.orchestrator import SchedulingOrchestrator
from recall.store import ContentStore, InMemoryContentStore, SqlContentStore

__version__ = "1.0.0"

__all__ = [
    "AdaptiveProgress",
    "AnalysisResult",
    "AutoCategory",
    "Category",
    "ConflictResolver",
    "ContentStore",
    "ForgettingCurve",
    "InMemoryContentStore",
    "InMemoryNotificationSink",
    "ItemKind",
    "ManualCategory",
    "NightConflict",
    "NightWindow",
    "NotificationSink",
    "ReviewDifficulty",
    "SQLiteNotificationSink",
    "SchedulingOrchestrator",
    "SqlContentStore",
    "TextComplexityAnalyzer",
    "TrackableItem",
]
