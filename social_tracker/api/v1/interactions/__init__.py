from social_tracker.api.v1.interactions.endpoints import router

__all__ = ["router"]
