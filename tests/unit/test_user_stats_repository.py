"""
Unit tests for UserStatsRepository against the per-test SQLite session.
"""

from __future__ import annotations

from datetime import date

from sqlalchemy import func, insert, select
from sqlalchemy.ext.asyncio import AsyncSession

from social_tracker.models.user_stats import UserStats
from social_tracker.repositories.interaction_repository import InteractionRepository
from social_tracker.repositories.user_stats_repository import UserStatsRepository
from social_tracker.services.streak_service import StreakService
from tests.factories import InteractionFactory, UserFactory

D1 = date(2026, 10, 1)


async def _row_count(db: AsyncSession, user_id) -> int:
    result = await db.execute(
        select(func.count()).select_from(UserStats).where(UserStats.user_id == user_id)
    )
    return result.scalar_one()


async def _insert_row_elsewhere(db: AsyncSession, user_id, **values) -> None:
    """Write a stats row with a plain INSERT, bypassing the session's identity map."""
    await db.execute(insert(UserStats).values(user_id=user_id, **values))


class TestGetOrCreateForUpdate:
    async def test_creates_zero_row(self, db_session: AsyncSession):
        user = await UserFactory.create_async(db_session)

        stats = await UserStatsRepository().get_or_create_for_update(db_session, user.id)

        assert stats.user_id == user.id
        assert stats.current_streak == 0
        assert stats.longest_streak == 0
        assert stats.total_interactions == 0
        assert stats.last_interaction_date is None

    async def test_repeated_calls_share_one_row(self, db_session: AsyncSession):
        user = await UserFactory.create_async(db_session)
        repo = UserStatsRepository()

        first = await repo.get_or_create_for_update(db_session, user.id)
        second = await repo.get_or_create_for_update(db_session, user.id)

        assert first is second
        assert await _row_count(db_session, user.id) == 1

    async def test_row_written_by_another_request_is_reused(self, db_session: AsyncSession):
        user = await UserFactory.create_async(db_session)
        await _insert_row_elsewhere(
            db_session, user.id,
            current_streak=1, longest_streak=1, total_interactions=1, last_interaction_date=D1,
        )

        stats = await UserStatsRepository().get_or_create_for_update(db_session, user.id)

        assert stats.total_interactions == 1
        assert stats.last_interaction_date == D1
        assert await _row_count(db_session, user.id) == 1

    async def test_first_insert_after_concurrent_first_insert(self, db_session: AsyncSession):
        user = await UserFactory.create_async(db_session)
        await InteractionFactory.create_async(db_session, user_id=user.id, date=D1)
        await _insert_row_elsewhere(
            db_session, user.id,
            current_streak=1, longest_streak=1, total_interactions=1, last_interaction_date=D1,
        )
        await InteractionFactory.create_async(db_session, user_id=user.id, date=D1)

        service = StreakService(UserStatsRepository(), InteractionRepository())
        stats = await service.record_insert(db_session, user.id, D1)

        assert stats.current_streak == 1
        assert stats.total_interactions == 2
        assert await _row_count(db_session, user.id) == 1
