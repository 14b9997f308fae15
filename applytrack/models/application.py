"""Application model: a user's application to a job and its match score."""

from datetime import datetime, timezone

from sqlalchemy import DateTime, ForeignKey, Integer, JSON, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base

APPLICATION_STATUSES = ("PENDING", "APPLIED", "INTERVIEW", "OFFER", "REJECTED", "WITHDRAWN")


class Application(Base):
    __tablename__ = "applications"
    __table_args__ = (
        UniqueConstraint("user_id", "job_id", name="uq_user_job_application"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    job_id: Mapped[int] = mapped_column(Integer, ForeignKey("jobs.id"), nullable=False, index=True)

    status: Mapped[str] = mapped_column(String(20), default="PENDING")
    cover_letter: Mapped[str] = mapped_column(Text, default="")
    notes: Mapped[str] = mapped_column(Text, default="")
    match_score: Mapped[int] = mapped_column(Integer, default=0)
    match_reasons: Mapped[list] = mapped_column(JSON, default=list)

    applied_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=lambda: datetime.now(timezone.utc)
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    user: Mapped["User"] = relationship(back_populates="applications")
    job: Mapped["Job"] = relationship(back_populates="applications")

    def to_dict(self, include_job: bool = False) -> dict:
        data = {
            "id": self.id,
            "jobId": self.job_id,
            "status": self.status,
            "coverLetter": self.cover_letter,
            "notes": self.notes,
            "matchScore": self.match_score,
            "matchReasons": list(self.match_reasons or []),
            "appliedAt": self.applied_at.isoformat() if self.applied_at else None,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
        }
        if include_job and self.job is not None:
            data["job"] = self.job.to_dict()
        return data
