"""
Scheduling engine.

Components:
- NightWindow: night-time predicate and postponement times
- ForgettingCurve: category offset tables -> reminder timelines
- AdaptiveProgress: review counters and the interval multiplier
- ConflictResolver: night-window conflicts and postponed schedules
- SchedulingOrchestrator: owns items and mirrors timelines into the sink

The orchestrator lives in ``recall.scheduling.orchestrator`` and is not
re-exported here, because the domain models import from this package.
"""

from .conflict import ConflictResolver, NightConflict, PostponementRule
from .dispatch import BackgroundDispatcher, ImmediateDispatcher
from .forgetting_curve import OFFSETS, ForgettingCurve, adjusted_reminder_dates, reminder_dates
from .night_window import NightWindow, region_label
from .progress import AdaptiveProgress, MultiplierPolicy

__all__ = [
    # Night window
    "NightWindow",
    "region_label",
    # Timelines
    "ForgettingCurve",
    "OFFSETS",
    "reminder_dates",
    "adjusted_reminder_dates",
    # Review feedback
    "AdaptiveProgress",
    "MultiplierPolicy",
    # Conflicts
    "ConflictResolver",
    "NightConflict",
    "PostponementRule",
    # Effects
    "ImmediateDispatcher",
    "BackgroundDispatcher",
]
