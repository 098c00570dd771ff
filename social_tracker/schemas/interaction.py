from pydantic import BaseModel, Field, field_validator
from typing import Optional, List
from datetime import date as date_type, datetime, time as time_type
import uuid
from social_tracker.models.interaction import (
    AgeRange, Ethnicity, InteractionQuality, RATING_MIN, RATING_MAX
)

_OPTIONAL_FIELDS = ("location", "notes", "age_range", "ethnicity", "interaction_quality")
_REQUIRED_FIELDS = ("date", "time", "attractiveness_rating")


def _blank_to_none(v):
    if isinstance(v, str) and not v.strip():
        return None
    return v


class InteractionCreate(BaseModel):
    """Payload for logging a new interaction. Rating, date and time are required."""
    date: date_type
    time: time_type
    attractiveness_rating: int = Field(..., ge=RATING_MIN, le=RATING_MAX)
    location: Optional[str] = None
    age_range: Optional[AgeRange] = None
    ethnicity: Optional[Ethnicity] = None
    interaction_quality: Optional[InteractionQuality] = None
    notes: Optional[str] = None

    @field_validator(*_OPTIONAL_FIELDS, mode="before")
    @classmethod
    def blank_optional_fields_are_unset(cls, v):
        return _blank_to_none(v)


class InteractionUpdate(BaseModel):
    """Partial update; only fields present in the payload are applied."""
    date: Optional[date_type] = None
    time: Optional[time_type] = None
    attractiveness_rating: Optional[int] = Field(default=None, ge=RATING_MIN, le=RATING_MAX)
    location: Optional[str] = None
    age_range: Optional[AgeRange] = None
    ethnicity: Optional[Ethnicity] = None
    interaction_quality: Optional[InteractionQuality] = None
    notes: Optional[str] = None

    @field_validator(*_OPTIONAL_FIELDS, mode="before")
    @classmethod
    def blank_optional_fields_are_unset(cls, v):
        return _blank_to_none(v)

    @field_validator(*_REQUIRED_FIELDS)
    @classmethod
    def required_fields_cannot_be_cleared(cls, v, info):
        if v is None:
            raise ValueError(f'{info.field_name} cannot be cleared')
        return v


class Interaction(BaseModel):
    id: uuid.UUID
    user_id: uuid.UUID
    date: date_type
    time: time_type
    location: Optional[str] = None
    age_range: Optional[AgeRange] = None
    ethnicity: Optional[Ethnicity] = None
    attractiveness_rating: int
    interaction_quality: Optional[InteractionQuality] = None
    notes: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class InteractionListResponse(BaseModel):
    """Paginated interaction history, newest first"""
    items: List[Interaction]
    total: int
    page: int
    limit: int
    total_pages: int


class InteractionDayGroup(BaseModel):
    """All interactions logged on one calendar date"""
    date: date_type
    count: int
    interactions: List[Interaction]


class InteractionHistoryResponse(BaseModel):
    days: List[InteractionDayGroup]
    total: int
