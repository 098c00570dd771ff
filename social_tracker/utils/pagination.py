"""
Offset pagination helpers for list endpoints.
"""

from pydantic import BaseModel, Field
import math


def calculate_offset(page: int, limit: int) -> int:
    """
    Calculate database offset from page number and limit.

    Example:
        >>> calculate_offset(1, 20)
        0
        >>> calculate_offset(3, 10)
        20
    """
    if page < 1:
        raise ValueError("Page must be >= 1")
    if limit < 1:
        raise ValueError("Limit must be >= 1")

    return (page - 1) * limit


def calculate_total_pages(total: int, limit: int) -> int:
    """
    Calculate total number of pages given total items and page size.

    Example:
        >>> calculate_total_pages(95, 20)
        5
        >>> calculate_total_pages(0, 20)
        0
    """
    if total < 0:
        raise ValueError("Total must be >= 0")
    if limit < 1:
        raise ValueError("Limit must be >= 1")

    if total == 0:
        return 0

    return math.ceil(total / limit)


class PaginationParams(BaseModel):
    """Page/limit query parameters (page is 1-indexed, limit at most 100)."""
    page: int = Field(default=1, ge=1, description="Page number (1-indexed)")
    limit: int = Field(default=50, ge=1, le=100, description="Items per page (max 100)")

    def get_offset(self) -> int:
        return calculate_offset(self.page, self.limit)
