"""Job posting model."""

from datetime import datetime, timezone

from sqlalchemy import Boolean, DateTime, Integer, JSON, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from applytrack.jobs.models import JobPosting

from .base import Base


def _iso(value: datetime | None) -> str | None:
    return value.isoformat() if value else None


class Job(Base):
    __tablename__ = "jobs"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    external_id: Mapped[str] = mapped_column(String(255), default="", index=True)
    portal: Mapped[str] = mapped_column(String(50), default="manual")

    title: Mapped[str] = mapped_column(String(500), nullable=False)
    company: Mapped[str] = mapped_column(String(255), nullable=False)
    location: Mapped[str | None] = mapped_column(String(255), nullable=True)
    remote_type: Mapped[str | None] = mapped_column(String(20), nullable=True)  # remote, onsite, hybrid
    description: Mapped[str] = mapped_column(Text, default="")
    requirements: Mapped[str] = mapped_column(Text, default="")

    salary_min: Mapped[int | None] = mapped_column(Integer, nullable=True)
    salary_max: Mapped[int | None] = mapped_column(Integer, nullable=True)
    salary_currency: Mapped[str] = mapped_column(String(10), default="USD")

    apply_url: Mapped[str] = mapped_column(String(2048), default="")
    skills_required: Mapped[list] = mapped_column(JSON, default=list)

    posted_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), index=True
    )
    is_active: Mapped[bool] = mapped_column(Boolean, default=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=lambda: datetime.now(timezone.utc)
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    applications: Mapped[list["Application"]] = relationship(back_populates="job", cascade="all, delete-orphan")

    def to_job_posting(self) -> JobPosting:
        """Convert DB row to the JobPosting the scorer works on."""
        return JobPosting(
            id=self.id,
            title=self.title or "",
            company=self.company or "",
            location=self.location,
            remote_type=self.remote_type,
            skills_required=list(self.skills_required or []),
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "externalId": self.external_id,
            "portal": self.portal,
            "title": self.title,
            "company": self.company,
            "location": self.location,
            "remoteType": self.remote_type,
            "description": self.description,
            "requirements": self.requirements,
            "salaryMin": self.salary_min,
            "salaryMax": self.salary_max,
            "salaryCurrency": self.salary_currency,
            "applyUrl": self.apply_url,
            "skillsRequired": list(self.skills_required or []),
            "postedAt": _iso(self.posted_at),
            "isActive": self.is_active,
        }
