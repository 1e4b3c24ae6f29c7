"""
Domain models for trackable items.

These are pure data structures with no I/O. The orchestrator replaces items
wholesale (``dataclasses.replace``) instead of mutating them, so a snapshot
handed to a collaborator never changes underneath it.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Union

from recall.constants import Category, ItemKind
from recall.scheduling.progress import AdaptiveProgress


@dataclass(frozen=True)
class AutoCategory:
    """Category produced by the classifier; may be refreshed later."""

    category: Category


@dataclass(frozen=True)
class ManualCategory:
    """Category chosen by the learner; automatic reclassification never replaces it."""

    category: Category


CategoryChoice = Union[AutoCategory, ManualCategory]


@dataclass(frozen=True)
class TrackableItem:
    """
    One memorization target.

    Attributes:
        id: Opaque identifier, unique for the lifetime of the process.
        created_at: Anchor of the reminder timeline.
        kind: REMINDER (never reviewed) or FLASHCARD (reviewable).
        content: Reminder text, or the flashcard front.
        answer: Flashcard back (None for reminders).
        category_choice: AutoCategory or ManualCategory.
        progress: Review state (stays at defaults for reminders).
    """

    id: str
    created_at: datetime
    content: str
    category_choice: CategoryChoice
    kind: ItemKind = ItemKind.REMINDER
    answer: str | None = None
    progress: AdaptiveProgress = field(default_factory=AdaptiveProgress)

    @property
    def category(self) -> Category:
        return self.category_choice.category

    @property
    def category_is_manual_override(self) -> bool:
        return isinstance(self.category_choice, ManualCategory)

    @property
    def is_reviewable(self) -> bool:
        return self.kind is ItemKind.FLASHCARD

    @property
    def classification_text(self) -> str:
        """Text the classifier sees (front and back for flashcards)."""
        if self.answer:
            return f"{self.content} {self.answer}"
        return self.content

    def with_manual_category(self, category: Category) -> TrackableItem:
        return replace(self, category_choice=ManualCategory(category))

    def with_auto_category(self, category: Category) -> TrackableItem:
        """Apply a classifier result; a manual override is returned unchanged."""
        if self.category_is_manual_override:
            return self
        return replace(self, category_choice=AutoCategory(category))

    def with_progress(self, progress: AdaptiveProgress) -> TrackableItem:
        return replace(self, progress=progress)
