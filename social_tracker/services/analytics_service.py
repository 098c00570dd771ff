"""
Analytics service: 30-day trend, quality breakdown and summary averages.
"""

from __future__ import annotations
from collections import Counter
from typing import Iterable, List, Optional
from uuid import UUID
from datetime import date
from sqlalchemy.ext.asyncio import AsyncSession
import logging
import math

from social_tracker.models.interaction import Interaction, InteractionQuality
from social_tracker.repositories.interaction_repository import InteractionRepository
from social_tracker.utils.dates import ANALYTICS_WINDOW_DAYS, window_dates

logger = logging.getLogger(__name__)

QUALITY_COLORS = {
    InteractionQuality.GOOD.value: "hsl(var(--success))",
    InteractionQuality.NEUTRAL.value: "hsl(var(--warning))",
    InteractionQuality.BAD.value: "hsl(var(--destructive))",
}
DEFAULT_QUALITY_COLOR = "hsl(var(--muted))"

_QUALITY_ORDER = [q.value for q in InteractionQuality]


class AnalyticsService:
    """Service turning a user's recent interactions into chart series."""

    def __init__(self, interaction_repo: Optional[InteractionRepository] = None):
        self.interaction_repo = interaction_repo or InteractionRepository()

    @staticmethod
    def round_one_decimal(value: float) -> float:
        """Round half up to one decimal place (2.25 -> 2.3, not banker's rounding)."""
        return math.floor(value * 10 + 0.5) / 10

    @staticmethod
    def quality_color(name: str) -> str:
        return QUALITY_COLORS.get(name, DEFAULT_QUALITY_COLOR)

    @staticmethod
    def daily_series(interactions: Iterable[Interaction], today: date) -> List[dict]:
        """One zero-filled point per day of the window, oldest first."""
        counts = Counter(i.date for i in interactions)
        return [
            {
                "date": day,
                "label": f"{day.strftime('%b')} {day.day}",
                "interactions": counts.get(day, 0),
            }
            for day in window_dates(today, ANALYTICS_WINDOW_DAYS)
        ]

    @classmethod
    def quality_breakdown(cls, interactions: Iterable[Interaction]) -> List[dict]:
        """
        Count interactions per quality.

        Interactions without a quality are skipped, so only buckets with at
        least one occurrence appear. Known qualities come first in their
        fixed order; anything unexpected follows with the default color.
        """
        counts = Counter()
        for interaction in interactions:
            quality = interaction.interaction_quality
            if quality is None:
                continue
            name = quality.value if isinstance(quality, InteractionQuality) else str(quality)
            counts[name] += 1

        ordered = [q for q in _QUALITY_ORDER if q in counts]
        ordered += sorted(name for name in counts if name not in QUALITY_COLORS)
        return [
            {"name": name, "value": counts[name], "color": cls.quality_color(name)}
            for name in ordered
        ]

    @classmethod
    def build_analytics(cls, interactions: List[Interaction], today: date) -> dict:
        """
        Build the analytics payload from interactions already limited to the window.

        Returns:
            Dictionary matching AnalyticsResponse
        """
        days = window_dates(today, ANALYTICS_WINDOW_DAYS)
        total = len(interactions)

        avg_rating = (
            sum(i.attractiveness_rating for i in interactions) / total
            if total > 0 else 0.0
        )
        avg_per_day = total / ANALYTICS_WINDOW_DAYS
        avg_per_week = avg_per_day * 7

        return {
            "start_date": days[0],
            "end_date": days[-1],
            "daily": cls.daily_series(interactions, today),
            "quality": cls.quality_breakdown(interactions),
            "avg_rating": cls.round_one_decimal(avg_rating),
            "total_interactions": total,
            "avg_per_day": cls.round_one_decimal(avg_per_day),
            "avg_per_week": cls.round_one_decimal(avg_per_week),
        }

    async def get_analytics(
        self,
        db: AsyncSession,
        user_id: UUID,
        today: date
    ) -> dict:
        """
        Fetch the user's interactions for the 30 days ending today and aggregate them.

        The fetch is bounded to the same dates as the daily series, so the
        series always sums to total_interactions.
        """
        days = window_dates(today, ANALYTICS_WINDOW_DAYS)
        interactions = await self.interaction_repo.list_between(db, user_id, days[0], days[-1])
        logger.info(f"Building analytics for user {user_id} from {len(interactions)} interactions")
        return self.build_analytics(interactions, today)


analytics_service = AnalyticsService()
