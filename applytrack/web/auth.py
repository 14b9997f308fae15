"""Authentication routes: register, login, logout, current user."""

import logging
from datetime import datetime, timezone

import bcrypt
from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from applytrack.config import MatchingConfig
from applytrack.models import JobPreferences, User, UserProfile

from .dependencies import get_db, get_matching_config, require_user
from .errors import APIError
from .schemas import LoginRequest, RegisterRequest

logger = logging.getLogger("applytrack.web.auth")

router = APIRouter(prefix="/api/auth")


def _hash_password(password: str) -> str:
    return bcrypt.hashpw(password.encode(), bcrypt.gensalt()).decode()


def _verify_password(password: str, hashed: str) -> bool:
    return bcrypt.checkpw(password.encode(), hashed.encode())


@router.post("/register", status_code=201)
def register(
    payload: RegisterRequest,
    request: Request,
    db: Session = Depends(get_db),
    matching: MatchingConfig = Depends(get_matching_config),
):
    existing = db.query(User).filter(User.email == payload.email).first()
    if existing:
        raise APIError("User already exists with this email", 409)

    user = User(
        email=payload.email,
        password_hash=_hash_password(payload.password),
        first_name=payload.first_name,
        last_name=payload.last_name,
    )
    db.add(user)
    db.flush()

    # Create empty profile and default preferences
    db.add(UserProfile(user_id=user.id))
    db.add(JobPreferences(user_id=user.id, min_match_score=matching.default_min_match_score))
    db.commit()

    request.session["user_id"] = user.id
    logger.info("User registered: %s", user.email)

    return {
        "success": True,
        "message": "Registration successful",
        "data": {"user": user.to_dict()},
    }


@router.post("/login")
def login(payload: LoginRequest, request: Request, db: Session = Depends(get_db)):
    user = db.query(User).filter(User.email == payload.email).first()
    if not user or not _verify_password(payload.password, user.password_hash):
        raise APIError("Invalid email or password", 401)
    if not user.is_active:
        raise APIError("Account has been deactivated.", 401)

    user.last_login_at = datetime.now(timezone.utc)
    db.commit()

    request.session["user_id"] = user.id
    logger.info("User logged in: %s", user.email)

    return {"success": True, "message": "Login successful", "data": {"user": user.to_dict()}}


@router.post("/logout")
def logout(request: Request):
    request.session.clear()
    return {"success": True, "message": "Logged out"}


@router.get("/me")
def me(user: User = Depends(require_user)):
    return {
        "success": True,
        "data": {
            "user": user.to_dict(),
            "profile": user.profile.to_dict() if user.profile else None,
            "preferences": user.preferences.to_dict() if user.preferences else None,
        },
    }
