# Utilities package
from .pagination import calculate_offset, calculate_total_pages, PaginationParams
from .dates import user_today, week_start, window_dates, ANALYTICS_WINDOW_DAYS

__all__ = [
    "calculate_offset",
    "calculate_total_pages",
    "PaginationParams",
    "user_today",
    "week_start",
    "window_dates",
    "ANALYTICS_WINDOW_DAYS",
]
