"""Content stores for the item collection."""

from .base import ContentStore
from .memory import InMemoryContentStore
from .sql import RecallItemRecord, SqlContentStore

__all__ = [
    "ContentStore",
    "InMemoryContentStore",
    "RecallItemRecord",
    "SqlContentStore",
]
