"""Job posting data model."""

from dataclasses import dataclass, field
from typing import Optional


@dataclass
class JobPosting:
    """The fields of a job posting that matter for matching."""

    title: str
    company: str = ""
    location: Optional[str] = None
    remote_type: Optional[str] = None  # "remote", "onsite", "hybrid"
    skills_required: list[str] = field(default_factory=list)
    id: Optional[int] = None

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            "id": self.id,
            "title": self.title,
            "company": self.company,
            "location": self.location,
            "remote_type": self.remote_type,
            "skills_required": list(self.skills_required),
        }
