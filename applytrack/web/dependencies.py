"""Shared FastAPI dependencies: DB session, auth context, scoring config, rate limit."""

from collections.abc import Generator

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from applytrack.config import MatchingConfig, ScoringWeights
from applytrack.models import User

from .errors import APIError


def get_db(request: Request) -> Generator[Session, None, None]:
    db = request.app.state.session_factory()
    try:
        yield db
    finally:
        db.close()


def get_current_user(request: Request, db: Session) -> User | None:
    """Return the logged-in User or None (reads session cookie)."""
    user_id = request.session.get("user_id")
    if user_id is None:
        return None
    return db.query(User).filter(User.id == user_id, User.is_active.is_(True)).first()


def optional_user(request: Request, db: Session = Depends(get_db)) -> User | None:
    return get_current_user(request, db)


def require_user(user: User | None = Depends(optional_user)) -> User:
    if user is None:
        raise APIError("Access denied. Please log in.", 401)
    return user


def require_admin(user: User = Depends(require_user)) -> User:
    if not user.is_admin:
        raise APIError("Access denied", 403)
    return user


def get_matching_config(request: Request) -> MatchingConfig:
    return request.app.state.config.matching


def get_weights(matching: MatchingConfig = Depends(get_matching_config)) -> ScoringWeights:
    return matching.weights


def rate_limited_user(request: Request, user: User = Depends(require_user)) -> User:
    """Count the request against the user's window; 429 once it is used up."""
    allowed, retry_after = request.app.state.rate_limiter.hit(user.id)
    if not allowed:
        raise APIError(
            "Too many requests. Please try again later.",
            429,
            extra={"retryAfter": retry_after},
            headers={"Retry-After": str(retry_after)},
        )
    return user


def require_super_admin(user: User = Depends(require_admin)) -> User:
    if user.role != "SUPER_ADMIN":
        raise APIError("Access denied", 403)
    return user
