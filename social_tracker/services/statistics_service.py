"""
Statistics service for the home dashboard.

This module derives the "today" snapshot shown on the home view: today's
count, this week's and last week's counts and the stored current streak.
"""

from __future__ import annotations
from typing import Awaitable, Callable, List, Optional
from uuid import UUID
from datetime import date, timedelta
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.exc import SQLAlchemyError
import logging

from social_tracker.repositories.interaction_repository import InteractionRepository
from social_tracker.repositories.user_stats_repository import UserStatsRepository
from social_tracker.utils.dates import week_start as compute_week_start

logger = logging.getLogger(__name__)


class StatisticsService:
    """
    Service for generating dashboard statistics.

    Every metric is its own query. A metric whose query fails is logged,
    reported as unavailable and shown as 0 so the dashboard still renders.
    """

    def __init__(
        self,
        interaction_repo: Optional[InteractionRepository] = None,
        stats_repo: Optional[UserStatsRepository] = None
    ):
        """
        Initialize service with repositories.

        Args:
            interaction_repo: InteractionRepository instance (creates new if None)
            stats_repo: UserStatsRepository instance (creates new if None)
        """
        self.interaction_repo = interaction_repo or InteractionRepository()
        self.stats_repo = stats_repo or UserStatsRepository()

    @staticmethod
    def week_comparison(this_week_count: int, last_week_count: int) -> tuple[int, str]:
        """Difference between this week and last week, and the trend arrow."""
        comparison = this_week_count - last_week_count
        return comparison, "up" if comparison >= 0 else "down"

    async def get_dashboard_stats(
        self,
        db: AsyncSession,
        user_id: UUID,
        today: date
    ) -> dict:
        """
        Get the home dashboard snapshot for a user.

        Args:
            db: Active database session
            user_id: UUID of the user
            today: The user's current calendar date

        Returns:
            Dictionary matching DashboardStatsResponse:
            {
                "today": date(2026, 10, 21),
                "week_start": date(2026, 10, 18),
                "today_count": 2,
                "this_week_count": 5,
                "last_week_count": 7,
                "current_streak": 3,
                "week_comparison": -2,
                "week_trend": "down",
                "unavailable": []
            }
        """
        start_of_week = compute_week_start(today)
        last_week_start = start_of_week - timedelta(days=7)
        last_week_end = start_of_week - timedelta(days=1)
        unavailable: List[str] = []

        today_count = await self._metric(
            db, "today_count", unavailable,
            lambda: self.interaction_repo.count_between(db, user_id, today, today),
        )
        this_week_count = await self._metric(
            db, "this_week_count", unavailable,
            lambda: self.interaction_repo.count_between(db, user_id, start_of_week),
        )
        last_week_count = await self._metric(
            db, "last_week_count", unavailable,
            lambda: self.interaction_repo.count_between(db, user_id, last_week_start, last_week_end),
        )
        current_streak = await self._metric(
            db, "current_streak", unavailable,
            lambda: self._current_streak(db, user_id),
        )

        comparison, trend = self.week_comparison(this_week_count, last_week_count)

        return {
            "today": today,
            "week_start": start_of_week,
            "today_count": today_count,
            "this_week_count": this_week_count,
            "last_week_count": last_week_count,
            "current_streak": current_streak,
            "week_comparison": comparison,
            "week_trend": trend,
            "unavailable": unavailable,
        }

    async def get_user_stats(
        self,
        db: AsyncSession,
        user_id: UUID
    ) -> dict:
        """
        Get the stored streak/total aggregate, zeros if the user has none yet.
        """
        stats = await self.stats_repo.get_by_user(db, user_id)
        if stats is None:
            return {
                "current_streak": 0,
                "longest_streak": 0,
                "total_interactions": 0,
                "last_interaction_date": None,
            }
        return {
            "current_streak": stats.current_streak,
            "longest_streak": stats.longest_streak,
            "total_interactions": stats.total_interactions,
            "last_interaction_date": stats.last_interaction_date,
        }

    async def _current_streak(self, db: AsyncSession, user_id: UUID) -> int:
        stats = await self.stats_repo.get_by_user(db, user_id)
        return stats.current_streak if stats is not None else 0

    async def _metric(
        self,
        db: AsyncSession,
        name: str,
        unavailable: List[str],
        query: Callable[[], Awaitable[int]]
    ) -> int:
        try:
            return await query()
        except SQLAlchemyError as e:
            logger.error(f"Dashboard metric {name} failed: {e}")
            unavailable.append(name)
            # Reads only; clears an aborted transaction so later metrics can run
            await db.rollback()
            return 0


statistics_service = StatisticsService()
