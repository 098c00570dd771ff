from social_tracker.api.v1.insights.endpoints import router

__all__ = ["router"]
