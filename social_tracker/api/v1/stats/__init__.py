from social_tracker.api.v1.stats.endpoints import router

__all__ = ["router"]
