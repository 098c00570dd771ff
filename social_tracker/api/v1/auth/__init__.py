from social_tracker.api.v1.auth.endpoints import router

__all__ = ["router"]
