from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession
from uuid import UUID
from social_tracker.core.database import get_db
from social_tracker.api.deps import get_current_user
from social_tracker.models.user import User
from social_tracker.schemas.interaction import (
    Interaction as InteractionSchema,
    InteractionCreate,
    InteractionUpdate,
    InteractionListResponse,
    InteractionHistoryResponse,
)
from social_tracker.services.interaction_service import interaction_service
from social_tracker.utils.pagination import PaginationParams

router = APIRouter()


@router.post("", response_model=InteractionSchema, status_code=status.HTTP_201_CREATED)
async def create_interaction(
    interaction_data: InteractionCreate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Log a new interaction (updates the streak in the same transaction)"""
    return await interaction_service.create_interaction(db, current_user.id, interaction_data)


@router.get("", response_model=InteractionListResponse)
async def list_interactions(
    page: int = Query(1, ge=1, description="Page number (1-indexed)"),
    limit: int = Query(50, ge=1, le=100, description="Items per page"),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """List the user's interactions, newest first"""
    params = PaginationParams(page=page, limit=limit)
    return await interaction_service.list_interactions(db, current_user.id, params)


@router.get("/history", response_model=InteractionHistoryResponse)
async def get_history(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """All interactions grouped by date, newest date first"""
    return await interaction_service.get_history(db, current_user.id)


@router.get("/{interaction_id}", response_model=InteractionSchema)
async def get_interaction(
    interaction_id: UUID,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    return await interaction_service.get_interaction(db, current_user.id, interaction_id)


@router.patch("/{interaction_id}", response_model=InteractionSchema)
async def update_interaction(
    interaction_id: UUID,
    interaction_data: InteractionUpdate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Edit an interaction; changing its date recomputes the streak"""
    return await interaction_service.update_interaction(
        db, current_user.id, interaction_id, interaction_data
    )


@router.delete("/{interaction_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_interaction(
    interaction_id: UUID,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Delete an interaction and recompute the streak"""
    await interaction_service.delete_interaction(db, current_user.id, interaction_id)
