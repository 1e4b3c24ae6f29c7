"""
Port (interface) for the content store.

The store is authoritative for item text; the engine loads the collection
once at startup and hands back the whole collection after every mutation.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Sequence

from recall.models import TrackableItem


class ContentStore(ABC):
    """
    Port for persisting the item collection.

    Implementations:
        - InMemoryContentStore: keeps the last snapshot in memory.
        - SqlContentStore: SQLAlchemy-backed table of items.
    """

    @abstractmethod
    def load(self) -> list[TrackableItem]:
        """Return every stored item, in collection order."""

    @abstractmethod
    def save(self, items: Sequence[TrackableItem]) -> None:
        """Replace the stored collection with ``items``."""
