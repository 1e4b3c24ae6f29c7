"""In-memory content store."""

from __future__ import annotations

from collections.abc import Sequence

from recall.models import TrackableItem

from .base import ContentStore


class InMemoryContentStore(ContentStore):
    """Holds the latest snapshot; ``save_count`` tracks how often it was written."""

    def __init__(self, items: Sequence[TrackableItem] = ()):
        self._items: list[TrackableItem] = list(items)
        self.save_count = 0

    def load(self) -> list[TrackableItem]:
        return list(self._items)

    def save(self, items: Sequence[TrackableItem]) -> None:
        self._items = list(items)
        self.save_count += 1
