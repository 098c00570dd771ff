"""
UserStats repository: one cached aggregate row per user.
"""

from __future__ import annotations
from typing import Optional
from uuid import UUID
from sqlalchemy import select, delete as sql_delete
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.exc import SQLAlchemyError
import logging

from social_tracker.models.user_stats import UserStats
from .base import BaseRepository

logger = logging.getLogger(__name__)


_UPSERT_DIALECTS = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}


class UserStatsRepository(BaseRepository[UserStats]):

    def __init__(self):
        """Initialize with UserStats model."""
        super().__init__(UserStats)

    async def get_by_user(
        self,
        db: AsyncSession,
        user_id: UUID
    ) -> Optional[UserStats]:
        """Return the user's stats row, or None if they have never logged anything."""
        try:
            stmt = select(UserStats).where(UserStats.user_id == user_id)
            result = await db.execute(stmt)
            return result.scalar_one_or_none()
        except SQLAlchemyError as e:
            logger.error(f"Error fetching stats for user {user_id}: {e}")
            raise

    async def get_or_create_for_update(
        self,
        db: AsyncSession,
        user_id: UUID
    ) -> UserStats:
        """
        Return the user's stats row locked for the rest of the transaction,
        creating it with zero defaults if it does not exist yet.

        The zero row is inserted with ON CONFLICT DO NOTHING before the
        row is locked, so two first inserts for the same user both end up
        holding the one row instead of colliding on the unique user_id.
        SQLite ignores FOR UPDATE.
        """
        try:
            insert = _UPSERT_DIALECTS[db.get_bind().dialect.name]
            await db.execute(
                insert(UserStats)
                .values(user_id=user_id)
                .on_conflict_do_nothing(index_elements=["user_id"])
            )

            stmt = (
                select(UserStats)
                .where(UserStats.user_id == user_id)
                .with_for_update()
                .execution_options(populate_existing=True)
            )
            result = await db.execute(stmt)
            return result.scalar_one()
        except SQLAlchemyError as e:
            logger.error(f"Error loading stats for update for user {user_id}: {e}")
            raise

    async def delete_for_user(
        self,
        db: AsyncSession,
        user_id: UUID
    ) -> bool:
        """Delete the user's stats row. Returns True if one existed."""
        try:
            stmt = sql_delete(UserStats).where(UserStats.user_id == user_id).execution_options(
                synchronize_session="evaluate"
            )
            result = await db.execute(stmt)
            await db.flush()
            return result.rowcount > 0
        except SQLAlchemyError as e:
            logger.error(f"Error deleting stats for user {user_id}: {e}")
            await db.rollback()
            raise
