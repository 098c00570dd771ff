"""
Interaction repository.

Every query here is scoped to a single owner: callers always pass the
authenticated user's id, and a row owned by someone else behaves exactly
like a missing row.
"""

from __future__ import annotations
from typing import Optional
from uuid import UUID
from datetime import date
from sqlalchemy import select, func, desc, delete as sql_delete
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.exc import SQLAlchemyError
import logging

from social_tracker.models.interaction import Interaction
from .base import BaseRepository

logger = logging.getLogger(__name__)


class InteractionRepository(BaseRepository[Interaction]):
    """
    Repository for Interaction model with owner-scoped queries.

    Provides methods for:
    - Counting interactions on a date or within a date range
    - Listing a user's interactions (paginated, windowed or complete)
    - Reading the distinct dates a user has logged on (for streaks)
    - Owner-scoped single and bulk deletes
    """

    def __init__(self):
        """Initialize with Interaction model."""
        super().__init__(Interaction)

    async def get_owned(
        self,
        db: AsyncSession,
        user_id: UUID,
        interaction_id: UUID
    ) -> Optional[Interaction]:
        """
        Get an interaction only if it belongs to the given user.

        Args:
            db: Active database session
            user_id: UUID of the owner
            interaction_id: UUID of the interaction

        Returns:
            Interaction if found and owned, None otherwise
        """
        try:
            stmt = select(Interaction).where(
                Interaction.id == interaction_id,
                Interaction.user_id == user_id
            )
            result = await db.execute(stmt)
            return result.scalar_one_or_none()
        except SQLAlchemyError as e:
            logger.error(f"Error fetching interaction {interaction_id} for user {user_id}: {e}")
            raise

    async def count_between(
        self,
        db: AsyncSession,
        user_id: UUID,
        start: Optional[date] = None,
        end: Optional[date] = None
    ) -> int:
        """
        Count a user's interactions with start <= date <= end.

        Either bound may be omitted to leave that side open.

        Example:
            today_count = await repo.count_between(db, user_id, today, today)
        """
        try:
            stmt = select(func.count(Interaction.id)).where(Interaction.user_id == user_id)
            if start is not None:
                stmt = stmt.where(Interaction.date >= start)
            if end is not None:
                stmt = stmt.where(Interaction.date <= end)
            result = await db.execute(stmt)
            return result.scalar_one()
        except SQLAlchemyError as e:
            logger.error(f"Error counting interactions for user {user_id} ({start}..{end}): {e}")
            raise

    async def list_between(
        self,
        db: AsyncSession,
        user_id: UUID,
        start: date,
        end: date
    ) -> list[Interaction]:
        """
        List a user's interactions with start <= date <= end, newest first.
        """
        try:
            stmt = (
                select(Interaction)
                .where(
                    Interaction.user_id == user_id,
                    Interaction.date >= start,
                    Interaction.date <= end
                )
                .order_by(desc(Interaction.date), desc(Interaction.time))
            )
            result = await db.execute(stmt)
            return list(result.scalars().all())
        except SQLAlchemyError as e:
            logger.error(f"Error listing interactions for user {user_id} ({start}..{end}): {e}")
            raise

    async def list_for_user(
        self,
        db: AsyncSession,
        user_id: UUID,
        skip: Optional[int] = None,
        limit: Optional[int] = None
    ) -> tuple[list[Interaction], int]:
        """
        List a user's interactions ordered by date then time, newest first.

        Args:
            db: Active database session
            user_id: UUID of the owner
            skip: Offset; None returns from the start
            limit: Page size; None returns everything

        Returns:
            Tuple of (interactions, total count for the user)
        """
        try:
            stmt = (
                select(Interaction)
                .where(Interaction.user_id == user_id)
                .order_by(desc(Interaction.date), desc(Interaction.time), desc(Interaction.created_at))
            )
            if skip:
                stmt = stmt.offset(skip)
            if limit is not None:
                stmt = stmt.limit(limit)
            result = await db.execute(stmt)
            items = list(result.scalars().all())

            total = await self.count_between(db, user_id)
            return items, total
        except SQLAlchemyError as e:
            logger.error(f"Error listing interactions for user {user_id}: {e}")
            raise

    async def get_dates(
        self,
        db: AsyncSession,
        user_id: UUID
    ) -> list[date]:
        """
        Return every interaction date for the user in ascending order.

        Same-day repeats are kept, so len() equals the interaction count.
        """
        try:
            stmt = (
                select(Interaction.date)
                .where(Interaction.user_id == user_id)
                .order_by(Interaction.date)
            )
            result = await db.execute(stmt)
            return list(result.scalars().all())
        except SQLAlchemyError as e:
            logger.error(f"Error fetching interaction dates for user {user_id}: {e}")
            raise

    async def delete_owned(
        self,
        db: AsyncSession,
        user_id: UUID,
        interaction_id: UUID
    ) -> bool:
        """
        Delete an interaction if it belongs to the user.

        Returns:
            True if a row was deleted, False if not found or not owned
        """
        try:
            stmt = sql_delete(Interaction).where(
                Interaction.id == interaction_id,
                Interaction.user_id == user_id
            ).execution_options(synchronize_session="evaluate")
            result = await db.execute(stmt)
            await db.flush()
            return result.rowcount > 0
        except SQLAlchemyError as e:
            logger.error(f"Error deleting interaction {interaction_id} for user {user_id}: {e}")
            await db.rollback()
            raise

    async def delete_all_for_user(
        self,
        db: AsyncSession,
        user_id: UUID
    ) -> int:
        """
        Delete every interaction owned by the user.

        Returns:
            Number of rows deleted
        """
        try:
            stmt = sql_delete(Interaction).where(Interaction.user_id == user_id).execution_options(
                synchronize_session="evaluate"
            )
            result = await db.execute(stmt)
            await db.flush()
            return result.rowcount or 0
        except SQLAlchemyError as e:
            logger.error(f"Error deleting all interactions for user {user_id}: {e}")
            await db.rollback()
            raise
