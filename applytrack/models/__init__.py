"""ORM models for the application tracker."""

from .base import Base, init_db, make_engine, make_session_factory
from .application import APPLICATION_STATUSES, Application
from .job import Job
from .job_preferences import JobPreferences
from .user import ADMIN_ROLES, User
from .user_profile import UserProfile

__all__ = [
    "Base",
    "init_db",
    "make_engine",
    "make_session_factory",
    "User",
    "ADMIN_ROLES",
    "UserProfile",
    "JobPreferences",
    "Job",
    "Application",
    "APPLICATION_STATUSES",
]
