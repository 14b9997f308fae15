"""Candidate profile data model."""

from dataclasses import dataclass, field
from typing import Optional

REMOTE_TYPES = ("remote", "onsite", "hybrid")
DEFAULT_MIN_MATCH_SCORE = 50


@dataclass
class CandidateProfile:
    """What the scorer knows about a candidate: skills plus job preferences."""

    skills: list[str] = field(default_factory=list)
    desired_roles: list[str] = field(default_factory=list)
    desired_locations: list[str] = field(default_factory=list)
    remote_preference: Optional[str] = None  # "remote", "onsite", "hybrid"
    min_match_score: Optional[int] = None  # None falls back to the configured default

    @property
    def threshold(self) -> int:
        """Minimum score for a job to count as recommended."""
        if self.min_match_score is None:
            return DEFAULT_MIN_MATCH_SCORE
        return self.min_match_score

    def to_summary_string(self) -> str:
        """Create a concise text summary for logs and the CLI."""
        parts = []
        if self.skills:
            parts.append(f"Skills: {', '.join(self.skills)}")
        if self.desired_roles:
            parts.append(f"Roles: {', '.join(self.desired_roles)}")
        if self.desired_locations:
            parts.append(f"Locations: {', '.join(self.desired_locations)}")
        if self.remote_preference:
            parts.append(f"Work preference: {self.remote_preference}")
        return "\n".join(parts)
