"""
Adaptive review progress.

Each flashcard carries an AdaptiveProgress: review counters plus the interval
multiplier applied to its forgetting-curve offsets. Reviews are append-only;
a mis-recorded review is corrected by recording another one.

Multiplier policy:
    EASY  m' = max(m, min(m * easy_factor, ceiling))      never shrinks
    GOOD  m' = m + (1.0 - m) * good_pull                   drifts toward 1.0
    HARD  m' = min(m, max(m * hard_factor, floor))        never grows
"""

from __future__ import annotations

from dataclasses import dataclass, replace

from recall.constants import (
    EASY_FACTOR,
    GOOD_PULL,
    HARD_FACTOR,
    INITIAL_MULTIPLIER,
    MULTIPLIER_CEILING,
    MULTIPLIER_FLOOR,
    ReviewDifficulty,
)


@dataclass(frozen=True)
class MultiplierPolicy:
    """Step sizes for the review feedback loop."""

    easy_factor: float = EASY_FACTOR
    hard_factor: float = HARD_FACTOR
    good_pull: float = GOOD_PULL
    floor: float = MULTIPLIER_FLOOR
    ceiling: float = MULTIPLIER_CEILING

    def __post_init__(self) -> None:
        if self.easy_factor < 1.0:
            raise ValueError("easy_factor must be >= 1.0")
        if not 0.0 < self.hard_factor <= 1.0:
            raise ValueError("hard_factor must be within (0, 1]")
        if not 0.0 <= self.good_pull <= 1.0:
            raise ValueError("good_pull must be within [0, 1]")
        if self.floor <= 0.0:
            raise ValueError("floor must be positive")

    def next_multiplier(self, current: float, difficulty: ReviewDifficulty) -> float:
        """Apply one review outcome to a multiplier."""
        if difficulty is ReviewDifficulty.EASY:
            return max(current, min(current * self.easy_factor, self.ceiling))
        if difficulty is ReviewDifficulty.HARD:
            return min(current, max(current * self.hard_factor, self.floor))
        return current + (1.0 - current) * self.good_pull


DEFAULT_POLICY = MultiplierPolicy()


@dataclass(frozen=True)
class AdaptiveProgress:
    """Review history and the running interval multiplier for one item."""

    total_reviews: int = 0
    easy_count: int = 0
    good_count: int = 0
    hard_count: int = 0
    current_interval_multiplier: float = INITIAL_MULTIPLIER

    def __post_init__(self) -> None:
        if min(self.total_reviews, self.easy_count, self.good_count, self.hard_count) < 0:
            raise ValueError("review counters must be non-negative")
        if self.easy_count + self.good_count + self.hard_count != self.total_reviews:
            raise ValueError("per-difficulty counters must add up to total_reviews")
        if self.current_interval_multiplier <= 0:
            raise ValueError("interval multiplier must be positive")

    @property
    def is_new(self) -> bool:
        return self.total_reviews == 0

    def record_review(
        self,
        difficulty: ReviewDifficulty,
        policy: MultiplierPolicy = DEFAULT_POLICY,
    ) -> AdaptiveProgress:
        """
        Return the progress that results from one more review.

        Args:
            difficulty: How hard the recall felt
            policy: Step sizes (defaults to the module policy)

        Returns:
            New AdaptiveProgress; self is left untouched
        """
        difficulty = ReviewDifficulty(difficulty)
        counters = {
            ReviewDifficulty.EASY: "easy_count",
            ReviewDifficulty.GOOD: "good_count",
            ReviewDifficulty.HARD: "hard_count",
        }
        field_name = counters[difficulty]

        return replace(
            self,
            total_reviews=self.total_reviews + 1,
            current_interval_multiplier=policy.next_multiplier(
                self.current_interval_multiplier, difficulty
            ),
            **{field_name: getattr(self, field_name) + 1},
        )
