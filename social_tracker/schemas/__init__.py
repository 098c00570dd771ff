from .auth import Token, UserCreate, UserLogin, RefreshTokenRequest, TokenRefreshResponse, LogoutResponse
from .user import User
from .interaction import (
    Interaction,
    InteractionCreate,
    InteractionUpdate,
    InteractionListResponse,
    InteractionDayGroup,
    InteractionHistoryResponse,
)
from .statistics import (
    UserStatsResponse,
    DashboardStatsResponse,
    DailyPoint,
    QualityBucket,
    AnalyticsResponse,
)
from .insights import (
    Insight,
    InsightCategory,
    InsightsResponse,
    ChatMessage,
    ChatRequest,
    ChatCompletionResponse,
)
from .account import DeleteAllDataResponse

__all__ = [
    "Token", "UserCreate", "UserLogin", "RefreshTokenRequest", "TokenRefreshResponse", "LogoutResponse",
    "User",
    "Interaction", "InteractionCreate", "InteractionUpdate", "InteractionListResponse",
    "InteractionDayGroup", "InteractionHistoryResponse",
    "UserStatsResponse", "DashboardStatsResponse", "DailyPoint", "QualityBucket", "AnalyticsResponse",
    "Insight", "InsightCategory", "InsightsResponse", "ChatMessage", "ChatRequest", "ChatCompletionResponse",
    "DeleteAllDataResponse",
]
