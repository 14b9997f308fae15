"""Job preferences model: what the user is looking for."""

from datetime import datetime, timezone

from sqlalchemy import DateTime, ForeignKey, Integer, JSON, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from applytrack.profile.models import DEFAULT_MIN_MATCH_SCORE

from .base import Base


class JobPreferences(Base):
    __tablename__ = "job_preferences"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(Integer, ForeignKey("users.id"), unique=True, nullable=False)

    desired_roles: Mapped[list] = mapped_column(JSON, default=list)
    desired_locations: Mapped[list] = mapped_column(JSON, default=list)
    remote_preference: Mapped[str | None] = mapped_column(String(20), nullable=True)  # remote, onsite, hybrid
    min_match_score: Mapped[int] = mapped_column(Integer, default=DEFAULT_MIN_MATCH_SCORE)

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    user: Mapped["User"] = relationship(back_populates="preferences")

    def to_dict(self) -> dict:
        return {
            "desiredRoles": list(self.desired_roles or []),
            "desiredLocations": list(self.desired_locations or []),
            "remotePreference": self.remote_preference,
            "minMatchScore": self.min_match_score,
        }
