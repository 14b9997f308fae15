"""Admin routes: user directory, roles and account status."""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy import func, or_
from sqlalchemy.orm import Session

from applytrack.models import Application, User

from .dependencies import get_db, require_admin, require_super_admin
from .errors import APIError
from .schemas import RoleUpdate, StatusUpdate, UserRole

logger = logging.getLogger("applytrack.web.admin")

router = APIRouter(prefix="/api/admin")


def _get_user(db: Session, user_id: int) -> User:
    user = db.get(User, user_id)
    if user is None:
        raise APIError("User not found", 404)
    return user


@router.get("/users")
def list_users(
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    search: Optional[str] = None,
    role: Optional[UserRole] = None,
    is_active: Optional[bool] = Query(None, alias="isActive"),
    db: Session = Depends(get_db),
    admin: User = Depends(require_admin),
):
    query = db.query(User)
    if search and search.strip():
        pattern = f"%{search.strip()}%"
        query = query.filter(or_(
            User.email.ilike(pattern),
            User.first_name.ilike(pattern),
            User.last_name.ilike(pattern),
        ))
    if role:
        query = query.filter(User.role == role)
    if is_active is not None:
        query = query.filter(User.is_active.is_(is_active))

    total = query.count()
    users = query.order_by(User.created_at.desc(), User.id.desc()).offset((page - 1) * limit).limit(limit).all()

    counts = {}
    if users:
        counts = dict(
            db.query(Application.user_id, func.count(Application.id))
            .filter(Application.user_id.in_([u.id for u in users]))
            .group_by(Application.user_id)
            .all()
        )

    items = []
    for user in users:
        item = user.to_dict()
        item["applicationCount"] = counts.get(user.id, 0)
        items.append(item)

    return {
        "success": True,
        "data": {
            "users": items,
            "pagination": {
                "page": page,
                "limit": limit,
                "total": total,
                "pages": (total + limit - 1) // limit,
            },
        },
    }


@router.put("/users/{user_id}/role")
def update_role(
    user_id: int,
    payload: RoleUpdate,
    db: Session = Depends(get_db),
    admin: User = Depends(require_super_admin),
):
    if user_id == admin.id:
        raise APIError("Cannot change your own role", 400)

    user = _get_user(db, user_id)
    user.role = payload.role
    db.commit()

    logger.info("User role updated: %s -> %s", user.email, payload.role)
    return {"success": True, "message": "User role updated successfully", "data": {"user": user.to_dict()}}


@router.put("/users/{user_id}/status")
def update_status(
    user_id: int,
    payload: StatusUpdate,
    db: Session = Depends(get_db),
    admin: User = Depends(require_admin),
):
    if user_id == admin.id:
        raise APIError("Cannot change your own status", 400)

    user = _get_user(db, user_id)
    user.is_active = payload.is_active
    db.commit()

    action = "activated" if payload.is_active else "deactivated"
    logger.info("User %s: %s", action, user.email)
    return {"success": True, "message": f"User {action} successfully", "data": {"user": user.to_dict()}}
