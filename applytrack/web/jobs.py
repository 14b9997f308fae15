"""Job routes: listing, detail, personalized recommendations, admin CRUD."""

import logging
import time
from datetime import datetime, timezone
from typing import Literal, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy import func, or_, select
from sqlalchemy.orm import Session

from applytrack.config import MatchingConfig
from applytrack.matching.matcher import recommend_jobs
from applytrack.matching.scorer import score
from applytrack.models import Application, Job, User
from applytrack.profile.models import CandidateProfile

from .dependencies import (
    get_db,
    get_matching_config,
    optional_user,
    rate_limited_user,
    require_admin,
)
from .errors import APIError
from .schemas import JobCreate, JobUpdate

logger = logging.getLogger("applytrack.web.jobs")

router = APIRouter(prefix="/api/jobs")

NULLABLE_JOB_FIELDS = {"location", "remote_type", "salary_min", "salary_max"}


def _candidate_for(user: Optional[User], default_min_score: int) -> Optional[CandidateProfile]:
    """Build the scorer input for a signed-in user, or None without a profile."""
    if user is None or user.profile is None:
        return None
    candidate = user.profile.to_candidate_profile(user.preferences)
    if candidate.min_match_score is None:
        candidate.min_match_score = default_min_score
    return candidate


@router.get("")
def list_jobs(
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    search: Optional[str] = None,
    location: Optional[str] = None,
    remote: Optional[Literal["remote", "onsite", "hybrid"]] = None,
    min_salary: Optional[int] = Query(None, alias="minSalary"),
    max_salary: Optional[int] = Query(None, alias="maxSalary"),
    portal: Optional[str] = None,
    sort_by_match: bool = Query(False, alias="sortByMatch"),
    db: Session = Depends(get_db),
    user: Optional[User] = Depends(optional_user),
    matching: MatchingConfig = Depends(get_matching_config),
):
    query = db.query(Job).filter(Job.is_active.is_(True))

    if search and search.strip():
        pattern = f"%{search.strip()}%"
        query = query.filter(or_(
            Job.title.ilike(pattern),
            Job.company.ilike(pattern),
            Job.description.ilike(pattern),
        ))
    if location and location.strip():
        query = query.filter(Job.location.ilike(f"%{location.strip()}%"))
    if remote:
        query = query.filter(Job.remote_type == remote)
    if min_salary is not None:
        query = query.filter(Job.salary_max >= min_salary)
    if max_salary is not None:
        query = query.filter(Job.salary_min <= max_salary)
    if portal:
        query = query.filter(Job.portal == portal)

    total = query.count()
    jobs = query.order_by(Job.posted_at.desc(), Job.id.desc()).offset((page - 1) * limit).limit(limit).all()

    items = [job.to_dict() for job in jobs]

    candidate = _candidate_for(user, matching.default_min_match_score)
    if candidate is not None:
        for item, job in zip(items, jobs):
            item.update(score(candidate, job.to_job_posting(), matching.weights).to_dict())
        if sort_by_match:
            items.sort(key=lambda item: item["matchScore"], reverse=True)

    return {
        "success": True,
        "data": {
            "jobs": items,
            "pagination": {
                "page": page,
                "limit": limit,
                "total": total,
                "pages": (total + limit - 1) // limit,
            },
        },
    }


@router.get("/recommendations/personalized")
def personalized_recommendations(
    limit: Optional[int] = Query(None, ge=1, le=100),
    db: Session = Depends(get_db),
    user: User = Depends(rate_limited_user),
    matching: MatchingConfig = Depends(get_matching_config),
):
    if user.profile is None or user.preferences is None:
        return {
            "success": True,
            "data": {
                "jobs": [],
                "message": "Complete your profile to get personalized recommendations",
            },
        }

    candidate = _candidate_for(user, matching.default_min_match_score)
    limit = limit or matching.default_recommendation_limit

    applied = select(Application.job_id).where(Application.user_id == user.id)
    pool = (
        db.query(Job)
        .filter(Job.is_active.is_(True), Job.id.notin_(applied))
        .order_by(Job.posted_at.desc(), Job.id.desc())
        .limit(matching.recommendation_pool_size)
        .all()
    )

    rows = {job.id: job for job in pool}
    recommended = recommend_jobs(
        candidate,
        [job.to_job_posting() for job in pool],
        matching.weights,
        limit=limit,
    )

    items = []
    for posting, result in recommended:
        item = rows[posting.id].to_dict()
        item.update(result.to_dict())
        items.append(item)

    logger.debug("User %d: %d recommendations from a pool of %d", user.id, len(items), len(pool))

    return {"success": True, "data": {"jobs": items, "total": len(items)}}


@router.get("/stats/trending")
def trending(db: Session = Depends(get_db)):
    recent = (
        db.query(Job)
        .filter(Job.is_active.is_(True))
        .order_by(Job.posted_at.desc(), Job.id.desc())
        .limit(10)
        .all()
    )

    company_count = func.count(Job.id).label("count")
    top_companies = (
        db.query(Job.company, company_count)
        .filter(Job.is_active.is_(True))
        .group_by(Job.company)
        .order_by(company_count.desc(), Job.company)
        .limit(10)
        .all()
    )

    location_count = func.count(Job.id).label("count")
    top_locations = (
        db.query(Job.location, location_count)
        .filter(Job.is_active.is_(True), Job.location.isnot(None))
        .group_by(Job.location)
        .order_by(location_count.desc(), Job.location)
        .limit(10)
        .all()
    )

    return {
        "success": True,
        "data": {
            "recentJobs": [
                {
                    "id": job.id,
                    "title": job.title,
                    "company": job.company,
                    "location": job.location,
                    "salaryMin": job.salary_min,
                    "salaryMax": job.salary_max,
                    "postedAt": job.posted_at.isoformat() if job.posted_at else None,
                }
                for job in recent
            ],
            "topCompanies": [{"company": name, "count": count} for name, count in top_companies],
            "topLocations": [{"location": name, "count": count} for name, count in top_locations],
        },
    }


@router.get("/{job_id}")
def get_job(
    job_id: int,
    db: Session = Depends(get_db),
    user: Optional[User] = Depends(optional_user),
    matching: MatchingConfig = Depends(get_matching_config),
):
    job = db.get(Job, job_id)
    if job is None:
        raise APIError("Job not found", 404)

    application = None
    if user is not None:
        application = db.query(Application).filter(
            Application.user_id == user.id, Application.job_id == job.id
        ).first()

    item = job.to_dict()
    item.update({"matchScore": None, "matchReasons": []})

    candidate = _candidate_for(user, matching.default_min_match_score)
    if candidate is not None:
        item.update(score(candidate, job.to_job_posting(), matching.weights).to_dict())

    return {
        "success": True,
        "data": {
            "job": item,
            "hasApplied": application is not None,
            "application": application.to_dict() if application else None,
        },
    }


@router.post("", status_code=201)
def create_job(payload: JobCreate, db: Session = Depends(get_db), admin: User = Depends(require_admin)):
    data = payload.model_dump(mode="json")
    data["external_id"] = data.get("external_id") or f"manual-{int(time.time() * 1000)}"

    job = Job(**data, posted_at=datetime.now(timezone.utc))
    db.add(job)
    db.commit()

    logger.info("Job created: %s at %s", job.title, job.company)
    return {"success": True, "message": "Job created successfully", "data": {"job": job.to_dict()}}


@router.put("/{job_id}")
def update_job(
    job_id: int,
    payload: JobUpdate,
    db: Session = Depends(get_db),
    admin: User = Depends(require_admin),
):
    job = db.get(Job, job_id)
    if job is None:
        raise APIError("Job not found", 404)

    for name, value in payload.model_dump(mode="json", exclude_unset=True).items():
        if value is None and name not in NULLABLE_JOB_FIELDS:
            continue
        setattr(job, name, value)
    db.commit()

    return {"success": True, "message": "Job updated successfully", "data": {"job": job.to_dict()}}


@router.delete("/{job_id}")
def delete_job(job_id: int, db: Session = Depends(get_db), admin: User = Depends(require_admin)):
    job = db.get(Job, job_id)
    if job is None:
        raise APIError("Job not found", 404)

    db.delete(job)
    db.commit()

    logger.info("Job deleted: %d", job_id)
    return {"success": True, "message": "Job deleted successfully"}
