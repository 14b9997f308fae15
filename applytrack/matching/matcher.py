"""Matcher facade: scores many jobs against one profile and ranks them."""

import logging
from typing import Optional, Sequence, TypeVar

from applytrack.config import ScoringWeights
from applytrack.jobs.models import JobPosting
from applytrack.matching.scorer import MatchResult, score
from applytrack.profile.models import CandidateProfile

logger = logging.getLogger("applytrack.matching")

JobT = TypeVar("JobT", bound=JobPosting)


def score_jobs(
    profile: CandidateProfile,
    jobs: Sequence[JobT],
    weights: Optional[ScoringWeights] = None,
) -> list[tuple[JobT, MatchResult]]:
    """Score every job, keeping input order."""
    return [(job, score(profile, job, weights)) for job in jobs]


def rank_jobs(
    profile: CandidateProfile,
    jobs: Sequence[JobT],
    weights: Optional[ScoringWeights] = None,
) -> list[tuple[JobT, MatchResult]]:
    """Score every job and sort by score descending (ties keep input order)."""
    scored = score_jobs(profile, jobs, weights)
    scored.sort(key=lambda pair: pair[1].score, reverse=True)
    return scored


def recommend_jobs(
    profile: CandidateProfile,
    jobs: Sequence[JobT],
    weights: Optional[ScoringWeights] = None,
    limit: Optional[int] = None,
) -> list[tuple[JobT, MatchResult]]:
    """Return jobs meeting the profile's threshold, best first, at most `limit`."""
    ranked = rank_jobs(profile, jobs, weights)
    matched = [pair for pair in ranked if pair[1].recommended]
    if limit is not None:
        matched = matched[:max(limit, 0)]

    logger.info(
        "Recommended %d/%d jobs at threshold %d",
        len(matched), len(jobs), profile.threshold,
    )

    return matched
