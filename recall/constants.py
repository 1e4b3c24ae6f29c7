"""
Scheduling Constants

Closed vocabularies and default tuning values shared by every layer.
"""

from enum import Enum


# ---- Content Categories ----

class Category(str, Enum):
    """Coarse difficulty of a piece of content; selects the offset table."""
    SHORT = "short"
    MEDIUM = "medium"
    LONG = "long"


# ---- Review Feedback ----

class ReviewDifficulty(str, Enum):
    """How hard recalling a flashcard felt."""
    EASY = "easy"
    GOOD = "good"
    HARD = "hard"


# ---- Item Kinds ----

class ItemKind(str, Enum):
    """REMINDER items are never reviewed; FLASHCARD items carry review progress."""
    REMINDER = "reminder"
    FLASHCARD = "flashcard"


# ---- Night Window ----

NIGHT_START_HOUR = 22
MORNING_WAKE_HOUR = 7

# Reminders before this index (5s, 25s, 2min) fire regardless of the clock
CONFLICT_SKIP_LEADING = 3


# ---- Interval Multiplier Policy ----

INITIAL_MULTIPLIER = 1.0
EASY_FACTOR = 1.3
HARD_FACTOR = 0.7
GOOD_PULL = 0.1
MULTIPLIER_FLOOR = 0.1
MULTIPLIER_CEILING = 5.0
