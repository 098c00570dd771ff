from .streak_service import StreakService
from .statistics_service import StatisticsService
from .analytics_service import AnalyticsService
from .insights_service import InsightsService
from .interaction_service import InteractionService
from .account_service import AccountService
from .auth_service import AuthService

__all__ = [
    "StreakService",
    "StatisticsService",
    "AnalyticsService",
    "InsightsService",
    "InteractionService",
    "AccountService",
    "AuthService",
]
