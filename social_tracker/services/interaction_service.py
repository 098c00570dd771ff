"""
Interaction service: logging, editing and removing interactions.

Every write runs the streak maintenance in the same transaction and commits
once at the end, so stats and history are committed together or not at all.
"""

from __future__ import annotations
from itertools import groupby
from typing import Optional
from uuid import UUID
from fastapi import HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
import logging

from social_tracker.models.interaction import Interaction
from social_tracker.repositories.interaction_repository import InteractionRepository
from social_tracker.schemas.interaction import InteractionCreate, InteractionUpdate
from social_tracker.services.streak_service import StreakService
from social_tracker.utils.pagination import PaginationParams, calculate_total_pages

logger = logging.getLogger(__name__)


class InteractionService:
    """
    Service for the interaction write path and history reads.

    Coordinates the InteractionRepository with the StreakService:
    - create: insert, then advance the streak
    - update: apply fields, recompute stats if the date changed
    - delete: remove, then recompute stats
    """

    def __init__(
        self,
        interaction_repo: Optional[InteractionRepository] = None,
        streak_service: Optional[StreakService] = None
    ):
        """
        Initialize service with dependencies.

        Args:
            interaction_repo: InteractionRepository instance (creates new if None)
            streak_service: StreakService instance (creates new if None)
        """
        self.interaction_repo = interaction_repo or InteractionRepository()
        self.streak_service = streak_service or StreakService(
            interaction_repo=self.interaction_repo
        )

    async def create_interaction(
        self,
        db: AsyncSession,
        user_id: UUID,
        data: InteractionCreate
    ) -> Interaction:
        """
        Log a new interaction and update the user's streak.

        Raises:
            HTTPException: 400 if the store rejects the row, 500 on other
                database failures (nothing is committed in either case)
        """
        try:
            interaction = await self.interaction_repo.create(
                db, {"user_id": user_id, **data.model_dump()}
            )
            await self.streak_service.record_insert(db, user_id, interaction.date)
            await db.commit()
            await db.refresh(interaction)
        except IntegrityError as e:
            await db.rollback()
            logger.warning(f"Rejected interaction for user {user_id}: {e}")
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Interaction violates data constraints"
            )
        except SQLAlchemyError as e:
            await db.rollback()
            logger.error(f"Failed to log interaction for user {user_id}: {e}")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Failed to save interaction"
            )

        logger.info(f"Logged interaction {interaction.id} for user {user_id} on {interaction.date}")
        return interaction

    async def get_interaction(
        self,
        db: AsyncSession,
        user_id: UUID,
        interaction_id: UUID
    ) -> Interaction:
        interaction = await self.interaction_repo.get_owned(db, user_id, interaction_id)
        if interaction is None:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Interaction not found"
            )
        return interaction

    async def update_interaction(
        self,
        db: AsyncSession,
        user_id: UUID,
        interaction_id: UUID,
        data: InteractionUpdate
    ) -> Interaction:
        """
        Apply a partial update. A changed date recomputes the user's stats.

        Raises:
            HTTPException: 404 if the interaction is missing or not owned
        """
        interaction = await self.get_interaction(db, user_id, interaction_id)
        changes = data.model_dump(exclude_unset=True)
        if not changes:
            return interaction

        date_changed = "date" in changes and changes["date"] != interaction.date
        try:
            interaction = await self.interaction_repo.update(db, interaction, changes)
            if date_changed:
                await self.streak_service.recompute(db, user_id)
            await db.commit()
            await db.refresh(interaction)
        except IntegrityError as e:
            await db.rollback()
            logger.warning(f"Rejected update of interaction {interaction_id}: {e}")
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Interaction violates data constraints"
            )
        except SQLAlchemyError as e:
            await db.rollback()
            logger.error(f"Failed to update interaction {interaction_id}: {e}")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Failed to update interaction"
            )

        return interaction

    async def delete_interaction(
        self,
        db: AsyncSession,
        user_id: UUID,
        interaction_id: UUID
    ) -> None:
        """
        Delete an owned interaction and recompute the user's stats.

        Raises:
            HTTPException: 404 if the interaction is missing or not owned
        """
        try:
            deleted = await self.interaction_repo.delete_owned(db, user_id, interaction_id)
            if not deleted:
                raise HTTPException(
                    status_code=status.HTTP_404_NOT_FOUND,
                    detail="Interaction not found"
                )
            await self.streak_service.recompute(db, user_id)
            await db.commit()
        except SQLAlchemyError as e:
            await db.rollback()
            logger.error(f"Failed to delete interaction {interaction_id}: {e}")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Failed to delete interaction"
            )

        logger.info(f"Deleted interaction {interaction_id} for user {user_id}")

    async def list_interactions(
        self,
        db: AsyncSession,
        user_id: UUID,
        params: PaginationParams
    ) -> dict:
        """Paginated history, newest first."""
        items, total = await self.interaction_repo.list_for_user(
            db, user_id, skip=params.get_offset(), limit=params.limit
        )
        return {
            "items": items,
            "total": total,
            "page": params.page,
            "limit": params.limit,
            "total_pages": calculate_total_pages(total, params.limit),
        }

    async def get_history(
        self,
        db: AsyncSession,
        user_id: UUID
    ) -> dict:
        """
        Full history grouped by calendar date, newest date first.

        Returns:
            {"days": [{"date": ..., "count": 2, "interactions": [...]}], "total": 2}
        """
        items, total = await self.interaction_repo.list_for_user(db, user_id)
        days = []
        for day, group in groupby(items, key=lambda i: i.date):
            day_items = list(group)
            days.append({"date": day, "count": len(day_items), "interactions": day_items})
        return {"days": days, "total": total}


interaction_service = InteractionService()
