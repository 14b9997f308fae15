"""Profile management routes: details, skills, job preferences."""

import logging

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from applytrack.config import MatchingConfig
from applytrack.models import JobPreferences, User, UserProfile

from .dependencies import get_db, get_matching_config, require_user
from .errors import APIError
from .schemas import PreferencesUpdate, ProfileUpdate, SkillCreate

logger = logging.getLogger("applytrack.web.profile")

router = APIRouter(prefix="/api/profile")


def _get_profile(db: Session, user: User) -> UserProfile:
    profile = db.query(UserProfile).filter(UserProfile.user_id == user.id).first()
    if not profile:
        raise APIError("Profile not found", 404)
    return profile


@router.get("")
def get_profile(user: User = Depends(require_user), db: Session = Depends(get_db)):
    profile = _get_profile(db, user)
    return {"success": True, "data": {"profile": profile.to_dict()}}


@router.put("")
def update_profile(payload: ProfileUpdate, user: User = Depends(require_user), db: Session = Depends(get_db)):
    profile = db.query(UserProfile).filter(UserProfile.user_id == user.id).first()
    if not profile:
        profile = UserProfile(user_id=user.id)
        db.add(profile)

    for name, value in payload.model_dump(exclude_unset=True).items():
        if value is not None:
            setattr(profile, name, value)
    db.commit()

    return {"success": True, "message": "Profile updated successfully", "data": {"profile": profile.to_dict()}}


@router.post("/skills", status_code=201)
def add_skill(payload: SkillCreate, user: User = Depends(require_user), db: Session = Depends(get_db)):
    profile = _get_profile(db, user)

    current_skills = list(profile.skills or [])
    if payload.name.lower() in (s.lower() for s in current_skills):
        raise APIError(f"Skill '{payload.name}' already exists", 409)

    current_skills.append(payload.name)
    profile.skills = current_skills
    db.commit()

    logger.info("Skill added for user %d: %s", user.id, payload.name)
    return {"success": True, "message": "Skill added successfully", "data": {"skills": current_skills}}


@router.delete("/skills/{name}")
def remove_skill(name: str, user: User = Depends(require_user), db: Session = Depends(get_db)):
    profile = _get_profile(db, user)

    current_skills = list(profile.skills or [])
    remaining = [s for s in current_skills if s.lower() != name.strip().lower()]
    if len(remaining) == len(current_skills):
        raise APIError("Skill not found", 404)

    profile.skills = remaining
    db.commit()

    return {"success": True, "message": "Skill removed successfully", "data": {"skills": remaining}}


@router.get("/preferences")
def get_preferences(user: User = Depends(require_user), db: Session = Depends(get_db)):
    prefs = db.query(JobPreferences).filter(JobPreferences.user_id == user.id).first()
    if not prefs:
        raise APIError("Job preferences not found", 404)
    return {"success": True, "data": {"preferences": prefs.to_dict()}}


@router.put("/preferences")
def update_preferences(
    payload: PreferencesUpdate,
    user: User = Depends(require_user),
    db: Session = Depends(get_db),
    matching: MatchingConfig = Depends(get_matching_config),
):
    prefs = db.query(JobPreferences).filter(JobPreferences.user_id == user.id).first()
    if not prefs:
        prefs = JobPreferences(user_id=user.id, min_match_score=matching.default_min_match_score)
        db.add(prefs)

    updates = payload.model_dump(exclude_unset=True)
    if "desired_roles" in updates:
        prefs.desired_roles = updates["desired_roles"] or []
    if "desired_locations" in updates:
        prefs.desired_locations = updates["desired_locations"] or []
    if "remote_preference" in updates:
        # An explicit null clears the preference
        prefs.remote_preference = updates["remote_preference"]
    if updates.get("min_match_score") is not None:
        prefs.min_match_score = updates["min_match_score"]
    db.commit()

    return {
        "success": True,
        "message": "Preferences updated successfully",
        "data": {"preferences": prefs.to_dict()},
    }
