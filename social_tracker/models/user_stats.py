from sqlalchemy import Column, Date, DateTime, ForeignKey, Integer
from sqlalchemy.sql import func
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship
import uuid
from social_tracker.core.database import Base


class UserStats(Base):
    """Cached per-user aggregate kept in step with the interaction history."""

    __tablename__ = "user_stats"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4, index=True)
    user_id = Column(
        UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False, unique=True, index=True
    )

    current_streak = Column(Integer, nullable=False, default=0, server_default="0")
    longest_streak = Column(Integer, nullable=False, default=0, server_default="0")
    total_interactions = Column(Integer, nullable=False, default=0, server_default="0")
    last_interaction_date = Column(Date, nullable=True)

    # Timestamps
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    # Relationships
    user = relationship("User", back_populates="stats")

    def __repr__(self):
        return (
            f"<UserStats(user_id={self.user_id}, current_streak={self.current_streak}, "
            f"longest_streak={self.longest_streak})>"
        )
