from .user import User
from .interaction import Interaction, AgeRange, Ethnicity, InteractionQuality
from .user_stats import UserStats

__all__ = [
    "User", "Interaction", "AgeRange", "Ethnicity", "InteractionQuality", "UserStats"
]
