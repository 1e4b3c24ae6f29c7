"""
SQLAlchemy content store.

One row per trackable item. ``save`` is a whole-collection replace performed
inside a single transaction, so a reader never sees half a collection.
"""

from __future__ import annotations

from collections.abc import Generator, Sequence
from contextlib import contextmanager
from datetime import datetime
from pathlib import Path

from loguru import logger
from sqlalchemy import Boolean, Float, Integer, String, Text, create_engine, delete, select
from sqlalchemy.engine import make_url
from sqlalchemy.orm import DeclarativeBase, Mapped, Session, mapped_column, sessionmaker

from recall.constants import Category, ItemKind
from recall.models import AutoCategory, ManualCategory, TrackableItem
from recall.scheduling.progress import AdaptiveProgress

from .base import ContentStore


class Base(DeclarativeBase):
    pass


class RecallItemRecord(Base):
    """Persistent form of a TrackableItem."""

    __tablename__ = "recall_items"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    position: Mapped[int] = mapped_column(Integer, nullable=False)
    kind: Mapped[str] = mapped_column(String(16), nullable=False)
    # ISO-8601 text keeps timezone offsets intact on every backend
    created_at: Mapped[str] = mapped_column(String(40), nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    answer: Mapped[str | None] = mapped_column(Text, nullable=True)

    category: Mapped[str] = mapped_column(String(16), nullable=False)
    category_manual: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    total_reviews: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    easy_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    good_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    hard_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    interval_multiplier: Mapped[float] = mapped_column(Float, nullable=False, default=1.0)

    def __repr__(self) -> str:
        return f"<RecallItemRecord {self.id} kind={self.kind} category={self.category}>"

    @classmethod
    def from_item(cls, item: TrackableItem, position: int) -> RecallItemRecord:
        return cls(
            id=item.id,
            position=position,
            kind=item.kind.value,
            created_at=item.created_at.isoformat(),
            content=item.content,
            answer=item.answer,
            category=item.category.value,
            category_manual=item.category_is_manual_override,
            total_reviews=item.progress.total_reviews,
            easy_count=item.progress.easy_count,
            good_count=item.progress.good_count,
            hard_count=item.progress.hard_count,
            interval_multiplier=item.progress.current_interval_multiplier,
        )

    def to_item(self) -> TrackableItem:
        category = Category(self.category)
        choice = ManualCategory(category) if self.category_manual else AutoCategory(category)
        return TrackableItem(
            id=self.id,
            created_at=datetime.fromisoformat(self.created_at),
            content=self.content,
            answer=self.answer,
            kind=ItemKind(self.kind),
            category_choice=choice,
            progress=AdaptiveProgress(
                total_reviews=self.total_reviews,
                easy_count=self.easy_count,
                good_count=self.good_count,
                hard_count=self.hard_count,
                current_interval_multiplier=self.interval_multiplier,
            ),
        )


class SqlContentStore(ContentStore):
    """Content store on any SQLAlchemy URL (SQLite by default)."""

    def __init__(self, database_url: str, echo: bool = False):
        url = make_url(database_url)
        if url.get_backend_name() == "sqlite" and url.database and url.database != ":memory:":
            Path(url.database).expanduser().parent.mkdir(parents=True, exist_ok=True)

        self.engine = create_engine(database_url, echo=echo, pool_pre_ping=True)
        self._session_factory = sessionmaker(bind=self.engine, autocommit=False, autoflush=False)
        Base.metadata.create_all(bind=self.engine)
        logger.debug(f"SqlContentStore initialized at {url.render_as_string(hide_password=True)}")

    @contextmanager
    def session_scope(self) -> Generator[Session, None, None]:
        """Provide a transactional scope around a series of operations."""
        session = self._session_factory()
        try:
            yield session
            session.commit()
        except Exception:  # Intentionally broad - rollback on any error before re-raising
            session.rollback()
            raise
        finally:
            session.close()

    def load(self) -> list[TrackableItem]:
        with self.session_scope() as session:
            records = session.scalars(select(RecallItemRecord).order_by(RecallItemRecord.position))
            items = [record.to_item() for record in records]
        logger.debug(f"Loaded {len(items)} items")
        return items

    def save(self, items: Sequence[TrackableItem]) -> None:
        with self.session_scope() as session:
            session.execute(delete(RecallItemRecord))
            session.add_all(RecallItemRecord.from_item(item, i) for i, item in enumerate(items))
        logger.debug(f"Saved {len(items)} items")

    def dispose(self) -> None:
        self.engine.dispose()
