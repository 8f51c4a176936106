"""Database connection and feedback store operations."""
from datetime import datetime
from typing import Dict, List, Optional

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from config import config
from models import Base, Feedback
from schemas import FeedbackEntry, Labels


GROUPABLE_COLUMNS = {
    "source": Feedback.source,
    "sentiment": Feedback.sentiment,
    "urgency": Feedback.urgency,
}


def create_engine(database_url: str) -> AsyncEngine:
    """Create an async engine for the given URL.

    In-memory SQLite needs StaticPool so every session sees the same
    database; file databases keep the default pool so concurrent sessions
    get their own connections.
    """
    if database_url.startswith("sqlite") and ":memory:" in database_url:
        return create_async_engine(
            database_url,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
            echo=False
        )
    return create_async_engine(database_url, echo=False)


def create_session_factory(db_engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)


# Application-wide engine and session factory
engine = create_engine(config.DATABASE_URL)
AsyncSessionLocal = create_session_factory(engine)


async def init_db(db_engine: Optional[AsyncEngine] = None):
    """Initialize database tables."""
    async with (db_engine or engine).begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


def _newest_first():
    return Feedback.created_at.desc(), Feedback.id.desc()


class FeedbackStore:
    """Typed read/write access to the feedback table.

    Every operation opens its own session, so independent reads and
    per-row writes can run concurrently without sharing a session.
    """

    def __init__(self, session_factory: Optional[async_sessionmaker[AsyncSession]] = None):
        self.session_factory = session_factory or AsyncSessionLocal

    async def insert(self, source: str, text: str, created_at: Optional[datetime] = None) -> FeedbackEntry:
        """Insert a new unanalyzed feedback row.

        Args:
            source: Channel identifier
            text: Raw feedback content
            created_at: Creation time, defaults to now

        Returns:
            The stored entry with its assigned id and created_at
        """
        async with self.session_factory() as session:
            feedback = Feedback(source=source, text=text)
            if created_at is not None:
                feedback.created_at = created_at
            session.add(feedback)
            await session.commit()
            await session.refresh(feedback)
            return FeedbackEntry.model_validate(feedback)

    async def get_by_id(self, feedback_id: int) -> Optional[FeedbackEntry]:
        async with self.session_factory() as session:
            feedback = await session.get(Feedback, feedback_id)
            return FeedbackEntry.model_validate(feedback) if feedback else None

    async def list_recent(self, limit: int = 100) -> List[FeedbackEntry]:
        """List feedback newest first."""
        stmt = select(Feedback).order_by(*_newest_first()).limit(limit)
        return await self._fetch_entries(stmt)

    async def update_labels(self, feedback_id: int, labels: Labels) -> Optional[FeedbackEntry]:
        """Write all three labels of one row in a single statement.

        Returns:
            The updated entry, or None if the id does not exist
        """
        async with self.session_factory() as session:
            result = await session.execute(
                update(Feedback)
                .where(Feedback.id == feedback_id)
                .values(
                    sentiment=labels.sentiment,
                    themes=labels.themes,
                    urgency=labels.urgency
                )
            )
            await session.commit()
            if result.rowcount == 0:
                return None
            feedback = await session.get(Feedback, feedback_id, populate_existing=True)
            return FeedbackEntry.model_validate(feedback)

    async def count_all(self) -> int:
        async with self.session_factory() as session:
            result = await session.execute(select(func.count(Feedback.id)))
            return result.scalar_one()

    async def count_grouped_by(self, column: str, exclude_null: bool = True) -> Dict[str, int]:
        """Count rows per distinct value of one column.

        Args:
            column: One of source, sentiment, urgency
            exclude_null: Skip rows where the column is NULL

        Returns:
            Mapping of column value to row count
        """
        if column not in GROUPABLE_COLUMNS:
            raise ValueError(f"Cannot group feedback by {column!r}")
        col = GROUPABLE_COLUMNS[column]

        stmt = select(col, func.count(Feedback.id)).group_by(col)
        if exclude_null:
            stmt = stmt.where(col.is_not(None))

        async with self.session_factory() as session:
            result = await session.execute(stmt)
            return {value: count for value, count in result.all()}

    async def list_by_urgency(self, urgency: str, limit: int) -> List[FeedbackEntry]:
        stmt = (
            select(Feedback)
            .where(Feedback.urgency == urgency)
            .order_by(*_newest_first())
            .limit(limit)
        )
        return await self._fetch_entries(stmt)

    async def list_unanalyzed(self, limit: int) -> List[FeedbackEntry]:
        """Rows without a sentiment label, in the store's natural order."""
        stmt = select(Feedback).where(Feedback.sentiment.is_(None)).order_by(Feedback.id).limit(limit)
        return await self._fetch_entries(stmt)

    async def list_analyzed(self) -> List[FeedbackEntry]:
        """Every row with a sentiment label, newest first."""
        stmt = select(Feedback).where(Feedback.sentiment.is_not(None)).order_by(*_newest_first())
        return await self._fetch_entries(stmt)

    async def _fetch_entries(self, stmt) -> List[FeedbackEntry]:
        async with self.session_factory() as session:
            result = await session.execute(stmt)
            return [FeedbackEntry.model_validate(row) for row in result.scalars().all()]
