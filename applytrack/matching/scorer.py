"""Weighted match scoring between a candidate profile and a job posting.

The score is the sum of four components, each worth at most its weight:

1. Skills: share of the job's required skills that the candidate has.
   A candidate skill matches a job skill when either one contains the other
   (case-insensitive), so "React.js" matches "React" and vice versa.
2. Role: any desired role appears in the job title.
3. Location: any desired location appears in the job location.
4. Remote: the candidate's work preference equals the job's classification.

The function is total: empty lists and unset fields contribute 0 to their
component instead of raising.
"""

import math
from dataclasses import dataclass, field
from typing import Iterable, Optional

from applytrack.config import ScoringWeights
from applytrack.jobs.models import JobPosting
from applytrack.profile.models import CandidateProfile

MAX_SCORE = 100

DEFAULT_WEIGHTS = ScoringWeights()


@dataclass
class MatchResult:
    score: int
    reasons: list[str] = field(default_factory=list)
    recommended: bool = False
    matching_skills: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "matchScore": self.score,
            "matchReasons": list(self.reasons),
            "matchingSkills": list(self.matching_skills),
            "recommended": self.recommended,
        }


def _clean(values: Optional[Iterable[str]]) -> list[str]:
    """Lowercase and strip, dropping blanks (a blank would match everything)."""
    if not values:
        return []
    cleaned = []
    for value in values:
        if value is None:
            continue
        text = str(value).strip().lower()
        if text:
            cleaned.append(text)
    return cleaned


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def skills_match(candidate_skill: str, job_skill: str) -> bool:
    """Symmetric substring containment on lowercased skill names."""
    a = candidate_skill.lower()
    b = job_skill.lower()
    return a in b or b in a


def find_matching_skills(candidate_skills: Iterable[str], job_skills: Iterable[str]) -> list[str]:
    """Return the job skills (lowercased, in job order) covered by any candidate skill."""
    mine = _clean(candidate_skills)
    if not mine:
        return []
    return [skill for skill in _clean(job_skills) if any(skills_match(s, skill) for s in mine)]


def _contains_any(needles: list[str], haystack: Optional[str]) -> bool:
    if not haystack:
        return False
    haystack = haystack.lower()
    return any(needle in haystack for needle in needles)


def score(
    profile: CandidateProfile,
    job: JobPosting,
    weights: Optional[ScoringWeights] = None,
) -> MatchResult:
    """Score how well a job fits a candidate.

    Returns a MatchResult with an integer score in [0, 100], the reasons in
    evaluation order, and whether the score meets the candidate's threshold.
    """
    weights = weights or DEFAULT_WEIGHTS
    total = 0.0
    reasons = []

    # 1. Skills
    job_skills = _clean(job.skills_required)
    matching = find_matching_skills(profile.skills, job_skills)
    if job_skills:
        total += max(weights.skills, 0) * len(matching) / len(job_skills)
    if matching:
        reasons.append(f"{len(matching)} skill matches")

    # 2. Role
    if _contains_any(_clean(profile.desired_roles), job.title):
        total += max(weights.role, 0)
        reasons.append("Matches desired role")

    # 3. Location
    if _contains_any(_clean(profile.desired_locations), job.location):
        total += max(weights.location, 0)
        reasons.append("Preferred location")

    # 4. Remote preference (exact match, not substring)
    if profile.remote_preference and profile.remote_preference == job.remote_type:
        total += max(weights.remote, 0)
        reasons.append("Matches work preference")

    final = min(max(_round_half_up(total), 0), MAX_SCORE)

    return MatchResult(
        score=final,
        reasons=reasons,
        recommended=final >= profile.threshold,
        matching_skills=matching,
    )
