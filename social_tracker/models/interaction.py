from sqlalchemy import (
    CheckConstraint, Column, Date, DateTime, Enum, ForeignKey, Index, Integer, String, Text, Time
)
from sqlalchemy.sql import func
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship
import uuid
import enum
from social_tracker.core.database import Base


class AgeRange(str, enum.Enum):
    UNDER_18 = "Under 18"
    AGE_18_24 = "18-24"
    AGE_25_34 = "25-34"
    AGE_35_44 = "35-44"
    AGE_45_PLUS = "45+"


class Ethnicity(str, enum.Enum):
    WHITE = "White"
    BLACK = "Black"
    HISPANIC_LATINO = "Hispanic/Latino"
    ASIAN = "Asian"
    MIDDLE_EASTERN = "Middle Eastern"
    MIXED = "Mixed"
    OTHER = "Other"


class InteractionQuality(str, enum.Enum):
    GOOD = "Good"
    NEUTRAL = "Neutral"
    BAD = "Bad"


RATING_MIN = 1
RATING_MAX = 10


def _enum_column(enum_cls, name: str) -> Enum:
    # Stored as VARCHAR + CHECK so values match the human-readable labels
    return Enum(
        enum_cls,
        name=name,
        native_enum=False,
        create_constraint=True,
        length=32,
        values_callable=lambda members: [m.value for m in members],
    )


class Interaction(Base):
    __tablename__ = "interactions"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4, index=True)
    user_id = Column(
        UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )

    # Temporal anchor (local wall-clock, no timezone stored)
    date = Column(Date, nullable=False)
    time = Column(Time, nullable=False)

    location = Column(Text)
    age_range = Column(_enum_column(AgeRange, "age_range"), nullable=True)
    ethnicity = Column(_enum_column(Ethnicity, "ethnicity"), nullable=True)
    attractiveness_rating = Column(Integer, nullable=False)
    interaction_quality = Column(_enum_column(InteractionQuality, "interaction_quality"), nullable=True)
    notes = Column(Text)

    # Timestamps
    created_at = Column(DateTime(timezone=True), server_default=func.now(), index=True)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    # Relationships
    user = relationship("User", back_populates="interactions")

    __table_args__ = (
        CheckConstraint(
            f"attractiveness_rating >= {RATING_MIN} AND attractiveness_rating <= {RATING_MAX}",
            name="ck_interactions_rating_range",
        ),
        Index("ix_interactions_user_date", "user_id", "date"),
    )

    def __repr__(self):
        return f"<Interaction(user_id={self.user_id}, date={self.date}, rating={self.attractiveness_rating})>"
