# Repositories package
from .base import BaseRepository
from .interaction_repository import InteractionRepository
from .user_stats_repository import UserStatsRepository
from .user_repository import UserRepository

__all__ = [
    "BaseRepository",
    "InteractionRepository",
    "UserStatsRepository",
    "UserRepository",
]
