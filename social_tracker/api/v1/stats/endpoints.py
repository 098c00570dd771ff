from datetime import date
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from social_tracker.core.database import get_db
from social_tracker.api.deps import get_current_user, get_user_today
from social_tracker.models.user import User
from social_tracker.schemas.statistics import (
    AnalyticsResponse,
    DashboardStatsResponse,
    UserStatsResponse,
)
from social_tracker.services.analytics_service import analytics_service
from social_tracker.services.statistics_service import statistics_service

router = APIRouter()


@router.get("/dashboard", response_model=DashboardStatsResponse)
async def get_dashboard(
    current_user: User = Depends(get_current_user),
    today: date = Depends(get_user_today),
    db: AsyncSession = Depends(get_db)
):
    """
    Home view snapshot: today's count, this week vs last week (weeks start
    on Sunday) and the current streak.

    A metric that fails to load is reported as 0 and listed in `unavailable`.
    """
    return await statistics_service.get_dashboard_stats(db, current_user.id, today)


@router.get("/analytics", response_model=AnalyticsResponse)
async def get_analytics(
    current_user: User = Depends(get_current_user),
    today: date = Depends(get_user_today),
    db: AsyncSession = Depends(get_db)
):
    """
    30-day trend (always 30 zero-filled points), quality breakdown and
    average rating / per-day / per-week figures.
    """
    return await analytics_service.get_analytics(db, current_user.id, today)


@router.get("/streak", response_model=UserStatsResponse)
async def get_streak(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Stored current/longest streak and running total"""
    return await statistics_service.get_user_stats(db, current_user.id)
