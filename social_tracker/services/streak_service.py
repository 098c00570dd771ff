"""
Streak maintenance for the per-user UserStats row.

Called explicitly by the interaction service inside the same transaction as
the interaction write, so a failure here rolls the write back as well.

Inserts use the incremental rule on the last interaction date. Back-dated
inserts, date edits and deletes recompute from the full history.
"""

from __future__ import annotations
from typing import Iterable, Optional, Tuple
from uuid import UUID
from datetime import date, timedelta
from sqlalchemy.ext.asyncio import AsyncSession
import logging

from social_tracker.models.user_stats import UserStats
from social_tracker.repositories.interaction_repository import InteractionRepository
from social_tracker.repositories.user_stats_repository import UserStatsRepository

logger = logging.getLogger(__name__)


class StreakService:
    """
    Service keeping UserStats consistent with a user's interaction history.

    A streak is the number of consecutive calendar days with at least one
    interaction; several interactions on the same day count once.
    """

    def __init__(
        self,
        stats_repo: Optional[UserStatsRepository] = None,
        interaction_repo: Optional[InteractionRepository] = None
    ):
        """
        Initialize service with repositories.

        Args:
            stats_repo: UserStatsRepository instance (creates new if None)
            interaction_repo: InteractionRepository instance (creates new if None)
        """
        self.stats_repo = stats_repo or UserStatsRepository()
        self.interaction_repo = interaction_repo or InteractionRepository()

    @staticmethod
    def next_streak(current_streak: int, last_date: Optional[date], new_date: date) -> int:
        """
        Streak after logging an interaction on new_date.

        Same day keeps the streak, the next day extends it, anything later
        (or a first-ever interaction) starts a new streak of 1. new_date must
        not be earlier than last_date.

        Example:
            >>> StreakService.next_streak(3, date(2026, 1, 1), date(2026, 1, 2))
            4
        """
        if last_date is None:
            return 1

        days_since_last = (new_date - last_date).days
        if days_since_last < 0:
            raise ValueError("new_date is earlier than the last interaction date")
        if days_since_last == 0:
            return max(current_streak, 1)
        if days_since_last == 1:
            return current_streak + 1
        return 1

    @staticmethod
    def streaks_from_dates(dates: Iterable[date]) -> Tuple[int, int]:
        """
        Compute (current_streak, longest_streak) from a set of dates.

        current_streak is the run of consecutive days ending at the most
        recent date; longest_streak is the longest run anywhere.

        Example:
            >>> StreakService.streaks_from_dates([date(2026, 1, 1), date(2026, 1, 2), date(2026, 1, 4)])
            (1, 2)
        """
        days = sorted(set(dates))
        if not days:
            return 0, 0

        longest = run = 1
        for previous, current in zip(days, days[1:]):
            if current - previous == timedelta(days=1):
                run += 1
            else:
                run = 1
            longest = max(longest, run)

        return run, longest

    async def record_insert(
        self,
        db: AsyncSession,
        user_id: UUID,
        new_date: date
    ) -> UserStats:
        """
        Update the user's stats for a newly inserted interaction.

        The interaction row must already be flushed in this transaction.

        Args:
            db: Active database session (transaction owned by the caller)
            user_id: UUID of the owner
            new_date: Date of the inserted interaction

        Returns:
            Updated (flushed, uncommitted) UserStats row
        """
        stats = await self.stats_repo.get_or_create_for_update(db, user_id)
        last_date = stats.last_interaction_date

        if last_date is not None and new_date < last_date:
            # Back-dated entry: the incremental rule only looks forward
            previous_longest = stats.longest_streak or 0
            await self._apply_history(db, user_id, stats)
            stats.longest_streak = max(previous_longest, stats.longest_streak)
            logger.info(
                f"Recomputed stats for user {user_id} after back-dated interaction on {new_date}"
            )
        else:
            current = self.next_streak(stats.current_streak or 0, last_date, new_date)
            stats.current_streak = current
            stats.longest_streak = max(stats.longest_streak or 0, current)
            stats.total_interactions = (stats.total_interactions or 0) + 1
            stats.last_interaction_date = new_date

        await db.flush()
        return stats

    async def recompute(
        self,
        db: AsyncSession,
        user_id: UUID
    ) -> Optional[UserStats]:
        """
        Rebuild the user's stats from their full history.

        Used after an interaction's date is edited or an interaction is
        deleted. Returns None when the user has no history and no stats row.
        """
        stats = await self.stats_repo.get_by_user(db, user_id)
        if stats is None:
            dates = await self.interaction_repo.get_dates(db, user_id)
            if not dates:
                return None
            stats = await self.stats_repo.get_or_create_for_update(db, user_id)

        await self._apply_history(db, user_id, stats)
        await db.flush()
        return stats

    async def _apply_history(self, db: AsyncSession, user_id: UUID, stats: UserStats) -> None:
        dates = await self.interaction_repo.get_dates(db, user_id)
        current, longest = self.streaks_from_dates(dates)
        stats.current_streak = current
        stats.longest_streak = longest
        stats.total_interactions = len(dates)
        stats.last_interaction_date = dates[-1] if dates else None


streak_service = StreakService()
