"""
Unit tests for the dashboard StatisticsService and the calendar helpers.

All database I/O is replaced with AsyncMock objects.
"""

from __future__ import annotations

import uuid
from datetime import date, timedelta
from unittest.mock import AsyncMock, MagicMock

from sqlalchemy.exc import OperationalError

from social_tracker.models.user_stats import UserStats
from social_tracker.services.statistics_service import StatisticsService
from social_tracker.utils.dates import user_today, week_start, window_dates

SUNDAY = date(2026, 10, 18)
WEDNESDAY = date(2026, 10, 21)
SATURDAY = date(2026, 10, 24)


# ---------------------------------------------------------------------------
# Calendar helpers
# ---------------------------------------------------------------------------
class TestWeekStart:
    def test_sunday_is_its_own_week_start(self):
        assert week_start(SUNDAY) == SUNDAY

    def test_midweek(self):
        assert week_start(WEDNESDAY) == SUNDAY

    def test_saturday_belongs_to_preceding_sunday(self):
        assert week_start(SATURDAY) == SUNDAY

    def test_monday(self):
        assert week_start(SUNDAY + timedelta(days=1)) == SUNDAY


class TestWindowDates:
    def test_thirty_days_ending_today(self):
        days = window_dates(SUNDAY)
        assert len(days) == 30
        assert days[0] == SUNDAY - timedelta(days=29)
        assert days[-1] == SUNDAY


class TestUserToday:
    def test_unknown_timezone_falls_back_to_utc(self):
        assert user_today("Not/AZone") == user_today("UTC")

    def test_missing_timezone_is_utc(self):
        assert user_today(None) == user_today("UTC")


# ---------------------------------------------------------------------------
# Builders
# ---------------------------------------------------------------------------
def _make_stats(current_streak: int = 3) -> UserStats:
    stats = UserStats()
    stats.user_id = uuid.uuid4()
    stats.current_streak = current_streak
    stats.longest_streak = 5
    stats.total_interactions = 12
    stats.last_interaction_date = SUNDAY
    return stats


def _make_service(count_side_effect, stats=None) -> tuple[StatisticsService, MagicMock, MagicMock]:
    interaction_repo = MagicMock()
    interaction_repo.count_between = AsyncMock(side_effect=count_side_effect)
    stats_repo = MagicMock()
    if isinstance(stats, Exception):
        stats_repo.get_by_user = AsyncMock(side_effect=stats)
    else:
        stats_repo.get_by_user = AsyncMock(return_value=stats)
    return StatisticsService(interaction_repo=interaction_repo, stats_repo=stats_repo), interaction_repo, stats_repo


def _db() -> MagicMock:
    db = MagicMock()
    db.rollback = AsyncMock()
    return db


# ---------------------------------------------------------------------------
# week_comparison
# ---------------------------------------------------------------------------
class TestWeekComparison:
    def test_equal_weeks_trend_up(self):
        assert StatisticsService.week_comparison(4, 4) == (0, "up")

    def test_fewer_this_week_trend_down(self):
        assert StatisticsService.week_comparison(2, 7) == (-5, "down")

    def test_more_this_week(self):
        assert StatisticsService.week_comparison(9, 3) == (6, "up")


# ---------------------------------------------------------------------------
# get_dashboard_stats
# ---------------------------------------------------------------------------
class TestDashboardStats:
    async def test_all_metrics(self):
        service, interaction_repo, _ = _make_service([2, 5, 7], stats=_make_stats(3))

        result = await service.get_dashboard_stats(_db(), uuid.uuid4(), WEDNESDAY)

        assert result["today"] == WEDNESDAY
        assert result["week_start"] == SUNDAY
        assert result["today_count"] == 2
        assert result["this_week_count"] == 5
        assert result["last_week_count"] == 7
        assert result["current_streak"] == 3
        assert result["week_comparison"] == -2
        assert result["week_trend"] == "down"
        assert result["unavailable"] == []

    async def test_query_windows(self):
        service, interaction_repo, _ = _make_service([0, 0, 0])
        user_id = uuid.uuid4()

        await service.get_dashboard_stats(_db(), user_id, WEDNESDAY)

        calls = [c.args[1:] for c in interaction_repo.count_between.await_args_list]
        assert calls[0] == (user_id, WEDNESDAY, WEDNESDAY)
        assert calls[1] == (user_id, SUNDAY)
        assert calls[2] == (user_id, SUNDAY - timedelta(days=7), SUNDAY - timedelta(days=1))

    async def test_missing_stats_row_is_zero_streak(self):
        service, _, _ = _make_service([1, 1, 0], stats=None)
        result = await service.get_dashboard_stats(_db(), uuid.uuid4(), WEDNESDAY)
        assert result["current_streak"] == 0
        assert result["unavailable"] == []

    async def test_failed_metric_falls_back_to_zero(self):
        failure = OperationalError("SELECT", {}, Exception("connection lost"))
        service, _, _ = _make_service([3, failure, 1], stats=_make_stats(4))
        db = _db()

        result = await service.get_dashboard_stats(db, uuid.uuid4(), WEDNESDAY)

        assert result["today_count"] == 3
        assert result["this_week_count"] == 0
        assert result["last_week_count"] == 1
        assert result["current_streak"] == 4
        assert result["unavailable"] == ["this_week_count"]
        db.rollback.assert_awaited_once()

    async def test_failed_streak_metric(self):
        failure = OperationalError("SELECT", {}, Exception("timeout"))
        service, _, _ = _make_service([1, 1, 1], stats=failure)

        result = await service.get_dashboard_stats(_db(), uuid.uuid4(), WEDNESDAY)

        assert result["current_streak"] == 0
        assert result["unavailable"] == ["current_streak"]


# ---------------------------------------------------------------------------
# get_user_stats
# ---------------------------------------------------------------------------
class TestUserStats:
    async def test_zeros_without_row(self):
        service, _, _ = _make_service([], stats=None)
        result = await service.get_user_stats(_db(), uuid.uuid4())
        assert result == {
            "current_streak": 0,
            "longest_streak": 0,
            "total_interactions": 0,
            "last_interaction_date": None,
        }

    async def test_stored_values(self):
        service, _, _ = _make_service([], stats=_make_stats(3))
        result = await service.get_user_stats(_db(), uuid.uuid4())
        assert result["current_streak"] == 3
        assert result["longest_streak"] == 5
        assert result["total_interactions"] == 12
        assert result["last_interaction_date"] == SUNDAY
