"""User profile model: career details and skills."""

from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import DateTime, ForeignKey, Integer, JSON, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from applytrack.profile.models import CandidateProfile

from .base import Base


class UserProfile(Base):
    __tablename__ = "user_profiles"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(Integer, ForeignKey("users.id"), unique=True, nullable=False)

    headline: Mapped[str] = mapped_column(String(255), default="")
    summary: Mapped[str] = mapped_column(Text, default="")
    phone: Mapped[str] = mapped_column(String(50), default="")
    location: Mapped[str] = mapped_column(String(255), default="")
    current_title: Mapped[str] = mapped_column(String(255), default="")
    current_company: Mapped[str] = mapped_column(String(255), default="")
    years_of_experience: Mapped[int] = mapped_column(Integer, default=0)
    linkedin_url: Mapped[str] = mapped_column(String(512), default="")
    skills: Mapped[list] = mapped_column(JSON, default=list)

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    user: Mapped["User"] = relationship(back_populates="profile")

    def to_candidate_profile(self, preferences: Optional["JobPreferences"] = None) -> CandidateProfile:
        """Combine stored skills with the user's job preferences for scoring."""
        candidate = CandidateProfile(skills=list(self.skills or []))
        if preferences is not None:
            candidate.desired_roles = list(preferences.desired_roles or [])
            candidate.desired_locations = list(preferences.desired_locations or [])
            candidate.remote_preference = preferences.remote_preference or None
            candidate.min_match_score = preferences.min_match_score
        return candidate

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "userId": self.user_id,
            "headline": self.headline,
            "summary": self.summary,
            "phone": self.phone,
            "location": self.location,
            "currentTitle": self.current_title,
            "currentCompany": self.current_company,
            "yearsOfExperience": self.years_of_experience,
            "linkedInUrl": self.linkedin_url,
            "skills": list(self.skills or []),
        }
