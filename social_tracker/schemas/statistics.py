from pydantic import BaseModel, Field
from typing import List, Optional
from datetime import date as date_type


class UserStatsResponse(BaseModel):
    """Stored streak/total aggregate for the current user"""
    current_streak: int = 0
    longest_streak: int = 0
    total_interactions: int = 0
    last_interaction_date: Optional[date_type] = None

    class Config:
        from_attributes = True


class DashboardStatsResponse(BaseModel):
    """Home view snapshot for the user's today"""
    today: date_type
    week_start: date_type
    today_count: int = 0
    this_week_count: int = 0
    last_week_count: int = 0
    current_streak: int = 0
    week_comparison: int = 0
    week_trend: str = "up"  # "up" or "down"
    unavailable: List[str] = Field(default_factory=list)  # metrics that failed to load


class DailyPoint(BaseModel):
    date: date_type
    label: str  # e.g. "Oct 18"
    interactions: int


class QualityBucket(BaseModel):
    name: str
    value: int
    color: str


class AnalyticsResponse(BaseModel):
    """30-day trend, quality breakdown and summary averages"""
    start_date: date_type
    end_date: date_type
    daily: List[DailyPoint]
    quality: List[QualityBucket]
    avg_rating: float = 0.0
    total_interactions: int = 0
    avg_per_day: float = 0.0
    avg_per_week: float = 0.0
