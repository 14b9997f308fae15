"""User account routes: view, rename or close an account (self or admin)."""

import logging

from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from applytrack.models import User

from .dependencies import get_db, require_user
from .errors import APIError
from .schemas import UserUpdate

logger = logging.getLogger("applytrack.web.users")

router = APIRouter(prefix="/api/users")


def _get_accessible(db: Session, current: User, user_id: int) -> User:
    if current.id != user_id and not current.is_admin:
        raise APIError("Access denied", 403)
    user = db.get(User, user_id)
    if user is None:
        raise APIError("User not found", 404)
    return user


@router.get("/{user_id}")
def get_user(user_id: int, current: User = Depends(require_user), db: Session = Depends(get_db)):
    user = _get_accessible(db, current, user_id)
    data = user.to_dict()
    data["profile"] = user.profile.to_dict() if user.profile else None
    data["preferences"] = user.preferences.to_dict() if user.preferences else None
    data["applicationCount"] = len(user.applications)
    return {"success": True, "data": {"user": data}}


@router.put("/{user_id}")
def update_user(
    user_id: int,
    payload: UserUpdate,
    current: User = Depends(require_user),
    db: Session = Depends(get_db),
):
    user = _get_accessible(db, current, user_id)
    for name, value in payload.model_dump(exclude_unset=True).items():
        if value is not None:
            setattr(user, name, value)
    db.commit()

    logger.info("User updated: %s", user.email)
    return {"success": True, "message": "User updated successfully", "data": {"user": user.to_dict()}}


@router.delete("/{user_id}")
def deactivate_user(
    user_id: int,
    request: Request,
    current: User = Depends(require_user),
    db: Session = Depends(get_db),
):
    """Soft delete: the account is deactivated, its data kept."""
    user = _get_accessible(db, current, user_id)
    if user.id == current.id and current.role == "SUPER_ADMIN":
        raise APIError("Cannot delete your own super admin account", 400)

    user.is_active = False
    db.commit()

    if user.id == current.id:
        request.session.clear()

    logger.info("User deactivated: %d", user.id)
    return {"success": True, "message": "User account deactivated successfully"}
