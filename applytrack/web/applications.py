"""Application routes: track the jobs a user has applied to."""

import logging
import math
from datetime import datetime, timezone
from typing import Literal, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy import func
from sqlalchemy.orm import Session, joinedload

from applytrack.config import ScoringWeights
from applytrack.matching.scorer import score
from applytrack.models import Application, Job, User

from .dependencies import get_db, get_weights, require_user
from .errors import APIError
from .schemas import ApplicationCreate, ApplicationUpdate

logger = logging.getLogger("applytrack.web.applications")

router = APIRouter(prefix="/api/applications")

RESPONDED_STATUSES = ("INTERVIEW", "OFFER", "REJECTED")


def _get_owned(db: Session, user: User, application_id: int) -> Application:
    application = db.query(Application).filter(
        Application.id == application_id, Application.user_id == user.id
    ).first()
    if not application:
        raise APIError("Application not found", 404)
    return application


@router.get("")
def list_applications(
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    status: Optional[Literal["PENDING", "APPLIED", "INTERVIEW", "OFFER", "REJECTED", "WITHDRAWN"]] = None,
    user: User = Depends(require_user),
    db: Session = Depends(get_db),
):
    query = db.query(Application).filter(Application.user_id == user.id)
    if status:
        query = query.filter(Application.status == status)

    total = query.count()
    applications = (
        query.options(joinedload(Application.job))
        .order_by(Application.created_at.desc(), Application.id.desc())
        .offset((page - 1) * limit)
        .limit(limit)
        .all()
    )

    status_counts = (
        db.query(Application.status, func.count(Application.id))
        .filter(Application.user_id == user.id)
        .group_by(Application.status)
        .all()
    )

    return {
        "success": True,
        "data": {
            "applications": [a.to_dict(include_job=True) for a in applications],
            "statusCounts": {name: count for name, count in status_counts},
            "pagination": {
                "page": page,
                "limit": limit,
                "total": total,
                "pages": (total + limit - 1) // limit,
            },
        },
    }


@router.get("/stats/overview")
def stats_overview(user: User = Depends(require_user), db: Session = Depends(get_db)):
    """Totals, status breakdown, recent applications and the employer response rate."""
    breakdown = dict(
        db.query(Application.status, func.count(Application.id))
        .filter(Application.user_id == user.id)
        .group_by(Application.status)
        .all()
    )
    total = sum(breakdown.values())
    responded = sum(breakdown.get(status, 0) for status in RESPONDED_STATUSES)

    recent = (
        db.query(Application)
        .options(joinedload(Application.job))
        .filter(Application.user_id == user.id)
        .order_by(Application.created_at.desc(), Application.id.desc())
        .limit(5)
        .all()
    )

    return {
        "success": True,
        "data": {
            "totalApplications": total,
            "statusBreakdown": breakdown,
            "recentApplications": [
                {
                    "id": a.id,
                    "status": a.status,
                    "matchScore": a.match_score,
                    "createdAt": a.created_at.isoformat() if a.created_at else None,
                    "job": {"title": a.job.title, "company": a.job.company} if a.job else None,
                }
                for a in recent
            ],
            "responseRate": math.floor(responded * 100 / total + 0.5) if total else 0,
        },
    }


@router.get("/{application_id}")
def get_application(application_id: int, user: User = Depends(require_user), db: Session = Depends(get_db)):
    application = _get_owned(db, user, application_id)
    return {"success": True, "data": {"application": application.to_dict(include_job=True)}}


@router.post("", status_code=201)
def create_application(
    payload: ApplicationCreate,
    user: User = Depends(require_user),
    db: Session = Depends(get_db),
    weights: ScoringWeights = Depends(get_weights),
):
    job = db.get(Job, payload.job_id)
    if job is None:
        raise APIError("Job not found", 404)

    existing = db.query(Application).filter(
        Application.user_id == user.id, Application.job_id == job.id
    ).first()
    if existing:
        raise APIError("You have already applied to this job", 409)

    match_score, match_reasons = 0, []
    if user.profile is not None:
        result = score(user.profile.to_candidate_profile(user.preferences), job.to_job_posting(), weights)
        match_score, match_reasons = result.score, result.reasons

    application = Application(
        user_id=user.id,
        job_id=job.id,
        cover_letter=payload.cover_letter,
        notes=payload.notes,
        match_score=match_score,
        match_reasons=match_reasons,
        status="PENDING",
    )
    db.add(application)
    db.commit()

    logger.info("Application created: %d (user %d, job %d, score %d)", application.id, user.id, job.id, match_score)

    return {
        "success": True,
        "message": "Application submitted successfully",
        "data": {"application": application.to_dict(include_job=True)},
    }


@router.put("/{application_id}")
def update_application(
    application_id: int,
    payload: ApplicationUpdate,
    user: User = Depends(require_user),
    db: Session = Depends(get_db),
):
    application = _get_owned(db, user, application_id)

    updates = payload.model_dump(exclude_unset=True)
    if updates.get("status"):
        if updates["status"] == "APPLIED" and application.applied_at is None:
            application.applied_at = datetime.now(timezone.utc)
        application.status = updates["status"]
    if updates.get("notes") is not None:
        application.notes = updates["notes"]
    if updates.get("cover_letter") is not None:
        application.cover_letter = updates["cover_letter"]
    db.commit()

    return {
        "success": True,
        "message": "Application updated successfully",
        "data": {"application": application.to_dict(include_job=True)},
    }


@router.delete("/{application_id}")
def delete_application(application_id: int, user: User = Depends(require_user), db: Session = Depends(get_db)):
    application = _get_owned(db, user, application_id)
    db.delete(application)
    db.commit()
    return {"success": True, "message": "Application deleted successfully"}
