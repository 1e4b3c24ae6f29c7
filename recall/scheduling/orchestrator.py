"""
Scheduling orchestrator.

Owns the item collection and keeps three things consistent: in-memory item
state, each item's reminder timeline, and the external notification sink.

Every mutating operation runs in two phases:
1. Mutate the owned collection (the source of truth)
2. Submit side effects (sink cancel/schedule, store save) to the dispatcher

Effects are fire-and-forget. A failing or hanging sink never rolls back or
blocks phase 1. Callers must serialize mutating calls against each other.
"""

from __future__ import annotations

import uuid
from collections.abc import Callable, Iterable
from datetime import datetime, time
from typing import Protocol

from loguru import logger

from recall.constants import Category, ItemKind, ReviewDifficulty
from recall.models import AutoCategory, ManualCategory, TrackableItem
from recall.notifications.base import NotificationSink, PendingNotification
from recall.scheduling.conflict import ConflictResolver, NightConflict
from recall.scheduling.dispatch import ImmediateDispatcher
from recall.scheduling.forgetting_curve import DEFAULT_CURVE, ForgettingCurve
from recall.scheduling.progress import DEFAULT_POLICY, MultiplierPolicy
from recall.store.base import ContentStore


class CategoryClassifier(Protocol):
    def classify(self, text: str) -> Category: ...


class Dispatcher(Protocol):
    def submit(self, effect: Callable, *args) -> None: ...


class SchedulingOrchestrator:
    """
    Stateful coordinator for trackable items.

    Unknown ids and empty content are routine UI races: operations on them
    are logged no-ops that return None (or an empty list).
    """

    def __init__(
        self,
        sink: NotificationSink,
        store: ContentStore,
        classifier: CategoryClassifier | None = None,
        resolver: ConflictResolver | None = None,
        curve: ForgettingCurve | None = None,
        policy: MultiplierPolicy | None = None,
        dispatcher: Dispatcher | None = None,
        clock: Callable[[], datetime] | None = None,
        id_factory: Callable[[], str] | None = None,
    ):
        """
        Initialize the orchestrator.

        Args:
            sink: Notification sink to mirror timelines into
            store: Content store saved after every collection mutation
            classifier: Text -> Category (defaults to TextComplexityAnalyzer)
            resolver: Night-window conflict resolver
            curve: Forgetting curve (defaults to the standard tables)
            policy: Review multiplier policy
            dispatcher: Effect runner (defaults to inline execution)
            clock: Current-time source
            id_factory: New-id source (defaults to uuid4)
        """
        if classifier is None:
            from recall.classifier import TextComplexityAnalyzer

            classifier = TextComplexityAnalyzer()

        self.sink = sink
        self.store = store
        self.classifier = classifier
        self.curve = curve or DEFAULT_CURVE
        self.resolver = resolver or ConflictResolver(curve=self.curve)
        self.policy = policy or DEFAULT_POLICY
        self.dispatcher = dispatcher or ImmediateDispatcher()
        self.clock = clock or datetime.now
        self.id_factory = id_factory or (lambda: str(uuid.uuid4()))

        self._items: list[TrackableItem] = []
        self._issued_ids: set[str] = set()

    # =========================================================================
    # Collection
    # =========================================================================

    @property
    def items(self) -> tuple[TrackableItem, ...]:
        """Snapshot of the collection, newest first."""
        return tuple(self._items)

    @property
    def flashcards(self) -> list[TrackableItem]:
        return [item for item in self._items if item.is_reviewable]

    @property
    def reminders(self) -> list[TrackableItem]:
        return [item for item in self._items if not item.is_reviewable]

    def get(self, item_id: str) -> TrackableItem | None:
        index = self._index_of(item_id)
        return None if index is None else self._items[index]

    def load(self) -> int:
        """
        Replace the collection with the store's contents.

        Returns:
            Number of items loaded
        """
        self._items = list(self.store.load())
        self._issued_ids.update(item.id for item in self._items)
        logger.info(f"Loaded {len(self._items)} items")
        return len(self._items)

    def _index_of(self, item_id: str) -> int | None:
        for index, item in enumerate(self._items):
            if item.id == item_id:
                return index
        return None

    def _new_id(self) -> str:
        # Ids are never reused, including ids of deleted items
        while True:
            candidate = self.id_factory()
            if candidate not in self._issued_ids:
                self._issued_ids.add(candidate)
                return candidate
            logger.warning(f"Id factory repeated {candidate}; drawing another")

    def _save(self) -> None:
        self.dispatcher.submit(self.store.save, tuple(self._items))

    def _reschedule(self, item: TrackableItem, timeline: list[datetime]) -> None:
        # Cancel before schedule so the sink never holds two timelines for one id
        self.dispatcher.submit(self.sink.cancel_notifications, item.id)
        self.dispatcher.submit(self.sink.schedule_notifications, item.id, item.content, timeline)

    # =========================================================================
    # Queries
    # =========================================================================

    def reminder_timeline(self, item: TrackableItem) -> list[datetime]:
        """
        Current timeline for an item.

        Reminders follow the base curve. Flashcards follow the curve scaled
        by their multiplier, and an unreviewed flashcard is due at creation.
        Night-window postponements accepted at add time are not reflected
        here; the sink holds the postponed times.
        """
        if not item.is_reviewable:
            return self.curve.reminder_dates(item.created_at, item.category)

        dates = self.curve.adjusted_reminder_dates(
            item.created_at,
            item.category,
            item.progress.current_interval_multiplier,
        )
        if item.progress.is_new and dates:
            dates[0] = item.created_at
        return dates

    def next_upcoming(self, item: TrackableItem, now: datetime | None = None) -> datetime | None:
        """
        First timeline entry strictly after ``now``, or None once exhausted.

        Reads the recomputed curve, so a postponed reminder still reports
        its original night-time slot.
        """
        now = now or self.clock()
        return next((d for d in self.reminder_timeline(item) if d > now), None)

    def evaluate_conflict(
        self,
        content: str,
        category: Category | None = None,
        answer: str | None = None,
    ) -> NightConflict | None:
        """
        Pre-flight night-window check for an item about to be added.

        Args:
            content: Reminder text or flashcard front
            category: Category to use (classified from the text when None)
            answer: Flashcard back, included in classification

        Returns:
            NightConflict, or None when empty or nothing falls at night
        """
        if not content or not content.strip():
            return None
        if category is None:
            text = f"{content} {answer}" if answer else content
            category = self.classifier.classify(text)
        return self.resolver.evaluate(self.clock(), Category(category))

    def study_queue(self) -> list[TrackableItem]:
        """Every flashcard; studying is allowed at any time."""
        return self.flashcards

    def due_today(self, now: datetime | None = None) -> list[TrackableItem]:
        """Flashcards whose next reminder falls on or before the end of today."""
        now = now or self.clock()
        end_of_day = datetime.combine(now.date(), time.max, tzinfo=now.tzinfo)
        due = []
        for card in self.flashcards:
            upcoming = self.next_upcoming(card, now)
            if upcoming is not None and upcoming <= end_of_day:
                due.append(card)
        return due

    def pending_notifications(self) -> list[PendingNotification]:
        return self.sink.list_pending()

    # =========================================================================
    # Mutations
    # =========================================================================

    def add_item(
        self,
        content: str,
        manual_category: Category | None = None,
        resolved_conflict: NightConflict | None = None,
    ) -> TrackableItem | None:
        """
        Add a plain reminder item.

        Args:
            content: Text to remember
            manual_category: Learner-chosen category (sets the override)
            resolved_conflict: Accepted conflict whose final schedule is installed

        Returns:
            The new item, or None for empty content
        """
        return self._add(ItemKind.REMINDER, content, None, manual_category, resolved_conflict)

    def add_flashcard(
        self,
        front: str,
        back: str,
        manual_category: Category | None = None,
        resolved_conflict: NightConflict | None = None,
    ) -> TrackableItem | None:
        """Add a reviewable flashcard; its first reminder is due immediately."""
        return self._add(ItemKind.FLASHCARD, front, back, manual_category, resolved_conflict)

    def _add(
        self,
        kind: ItemKind,
        content: str,
        answer: str | None,
        manual_category: Category | None,
        resolved_conflict: NightConflict | None,
    ) -> TrackableItem | None:
        if not content or not content.strip():
            logger.warning("Ignoring add with empty content")
            return None

        if manual_category is not None:
            choice = ManualCategory(Category(manual_category))
        else:
            text = f"{content} {answer}" if answer else content
            choice = AutoCategory(self.classifier.classify(text))

        # An accepted conflict was computed from its own anchor; reuse it
        created_at = resolved_conflict.created_at if resolved_conflict else self.clock()

        item = TrackableItem(
            id=self._new_id(),
            created_at=created_at,
            content=content,
            answer=answer,
            kind=kind,
            category_choice=choice,
        )

        # Phase 1: own state
        self._items.insert(0, item)

        if resolved_conflict is not None:
            timeline = resolved_conflict.final_schedule
        else:
            timeline = self.curve.reminder_dates(created_at, item.category)
        if item.is_reviewable and timeline:
            timeline[0] = created_at

        # Phase 2: effects
        self._save()
        self.dispatcher.submit(self.sink.schedule_notifications, item.id, item.content, timeline)

        logger.info(
            f"Added {kind.value} {item.id} ({item.category.value}"
            f"{', manual' if item.category_is_manual_override else ''}) "
            f"with {len(timeline)} reminders"
        )
        return item

    def update_category(self, item_id: str, new_category: Category) -> TrackableItem | None:
        """
        Override an item's category and reschedule it.

        The override is permanent: automatic reclassification leaves it alone.
        """
        index = self._index_of(item_id)
        if index is None:
            logger.warning(f"Ignoring category update for unknown item {item_id}")
            return None

        updated = self._items[index].with_manual_category(Category(new_category))
        self._items[index] = updated

        self._save()
        self._reschedule(updated, self.reminder_timeline(updated))

        logger.info(f"Category of {item_id} set to {updated.category.value} (manual)")
        return updated

    def reclassify(self, item_id: str) -> TrackableItem | None:
        """
        Re-run the classifier on an auto-categorised item.

        Manual overrides and unchanged verdicts cause no sink traffic.
        """
        index = self._index_of(item_id)
        if index is None:
            logger.warning(f"Ignoring reclassify for unknown item {item_id}")
            return None

        current = self._items[index]
        if current.category_is_manual_override:
            return current

        updated = current.with_auto_category(self.classifier.classify(current.classification_text))
        if updated.category is current.category:
            return current

        self._items[index] = updated
        self._save()
        self._reschedule(updated, self.reminder_timeline(updated))

        logger.info(f"Reclassified {item_id}: {current.category.value} -> {updated.category.value}")
        return updated

    def record_review(self, item_id: str, difficulty: ReviewDifficulty) -> TrackableItem | None:
        """
        Record a review outcome and reschedule with the adjusted multiplier.

        The updated item is committed to the collection before any sink call
        is submitted, so readers never see a stale multiplier.
        """
        index = self._index_of(item_id)
        if index is None:
            logger.warning(f"Ignoring review of unknown item {item_id}")
            return None

        current = self._items[index]
        if not current.is_reviewable:
            logger.warning(f"Ignoring review of non-reviewable item {item_id}")
            return None

        progress = current.progress.record_review(ReviewDifficulty(difficulty), self.policy)
        updated = current.with_progress(progress)

        # Phase 1: commit
        self._items[index] = updated

        # Phase 2: effects
        self._save()
        self._reschedule(updated, self.reminder_timeline(updated))

        logger.info(
            f"Recorded {ReviewDifficulty(difficulty).value} review for {item_id}; "
            f"multiplier {current.progress.current_interval_multiplier:.3f} -> "
            f"{progress.current_interval_multiplier:.3f}"
        )
        return updated

    def delete_items(self, item_ids: Iterable[str]) -> list[TrackableItem]:
        """
        Delete items and cancel their reminders.

        Unknown ids are skipped without touching the sink.

        Args:
            item_ids: Iterable of ids (a single id must be wrapped in a list)

        Returns:
            The items that were removed

        Raises:
            TypeError: If ``item_ids`` is a bare string
        """
        if isinstance(item_ids, str):
            raise TypeError("delete_items expects an iterable of ids, not a single str")
        wanted = set(item_ids)
        removed = [item for item in self._items if item.id in wanted]
        if not removed:
            return []

        for item in removed:
            self.dispatcher.submit(self.sink.cancel_notifications, item.id)

        self._items = [item for item in self._items if item.id not in wanted]
        self._save()

        logger.info(f"Deleted {len(removed)} items")
        return removed

    def cancel_all_pending(self) -> None:
        """Drop every pending alert; items keep their timelines."""
        self.dispatcher.submit(self.sink.cancel_all)
