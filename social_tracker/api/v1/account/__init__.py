from social_tracker.api.v1.account.endpoints import router

__all__ = ["router"]
