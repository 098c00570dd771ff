"""
Account data services: CSV export and irreversible delete-all.
"""

from __future__ import annotations
from typing import Iterable, Optional
from uuid import UUID
from datetime import date
from fastapi import HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.exc import SQLAlchemyError
import csv
import io
import logging

from social_tracker.models.interaction import Interaction
from social_tracker.repositories.interaction_repository import InteractionRepository
from social_tracker.repositories.user_stats_repository import UserStatsRepository

logger = logging.getLogger(__name__)

EXPORT_HEADERS = ["Date", "Time", "Location", "Age Range", "Ethnicity", "Rating", "Quality", "Notes"]


def _enum_value(value) -> str:
    if value is None:
        return ""
    return getattr(value, "value", value)


class AccountService:
    """Service for exporting and wiping a user's data."""

    def __init__(
        self,
        interaction_repo: Optional[InteractionRepository] = None,
        stats_repo: Optional[UserStatsRepository] = None
    ):
        self.interaction_repo = interaction_repo or InteractionRepository()
        self.stats_repo = stats_repo or UserStatsRepository()

    @staticmethod
    def export_filename(today: date) -> str:
        return f"social-tracker-data-{today.isoformat()}.csv"

    @staticmethod
    def interactions_to_csv(interactions: Iterable[Interaction]) -> str:
        """
        Render interactions as CSV with a header row.

        Fields containing commas, quotes or newlines are quoted and embedded
        double quotes are doubled, so any CSV reader recovers the exact text.
        """
        buffer = io.StringIO()
        writer = csv.writer(buffer, lineterminator="\n")
        writer.writerow(EXPORT_HEADERS)
        for i in interactions:
            writer.writerow([
                i.date.isoformat(),
                i.time.strftime("%H:%M:%S"),
                i.location or "",
                _enum_value(i.age_range),
                _enum_value(i.ethnicity),
                i.attractiveness_rating,
                _enum_value(i.interaction_quality),
                i.notes or "",
            ])
        return buffer.getvalue()

    async def export_csv(
        self,
        db: AsyncSession,
        user_id: UUID
    ) -> str:
        """Export every interaction the user owns, newest first."""
        interactions, total = await self.interaction_repo.list_for_user(db, user_id)
        logger.info(f"Exporting {total} interactions for user {user_id}")
        return self.interactions_to_csv(interactions)

    async def delete_all_data(
        self,
        db: AsyncSession,
        user_id: UUID
    ) -> dict:
        """
        Permanently delete all interactions and the stats row for a user.

        There is no soft delete and no undo.
        """
        try:
            interactions_deleted = await self.interaction_repo.delete_all_for_user(db, user_id)
            stats_deleted = await self.stats_repo.delete_for_user(db, user_id)
            await db.commit()
        except SQLAlchemyError as e:
            await db.rollback()
            logger.error(f"Failed to delete data for user {user_id}: {e}")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Unable to delete your data"
            )

        logger.info(
            f"Deleted all data for user {user_id}: {interactions_deleted} interactions, "
            f"stats row deleted={stats_deleted}"
        )
        return {
            "message": "All data deleted",
            "interactions_deleted": interactions_deleted,
            "stats_deleted": stats_deleted,
        }


account_service = AccountService()
