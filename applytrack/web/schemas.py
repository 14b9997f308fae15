"""Request bodies for the JSON API."""

import re
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, HttpUrl, field_validator
from pydantic.alias_generators import to_camel

RemoteType = Literal["remote", "onsite", "hybrid"]
UserRole = Literal["USER", "ADMIN", "SUPER_ADMIN"]
ApplicationStatus = Literal["PENDING", "APPLIED", "INTERVIEW", "OFFER", "REJECTED", "WITHDRAWN"]


class CamelModel(BaseModel):
    """Accepts camelCase JSON keys (and snake_case field names)."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, str_strip_whitespace=True)


def _clean_list(values: Optional[list[str]]) -> Optional[list[str]]:
    if values is None:
        return None
    return [v.strip() for v in values if v and v.strip()]


class RegisterRequest(CamelModel):
    email: EmailStr
    password: str
    first_name: str = Field(min_length=1)
    last_name: str = Field(min_length=1)

    @field_validator("email")
    @classmethod
    def _lower_email(cls, value: str) -> str:
        return value.lower()

    @field_validator("password")
    @classmethod
    def _strong_password(cls, value: str) -> str:
        if len(value) < 8:
            raise ValueError("Password must be at least 8 characters")
        if not (re.search(r"[a-z]", value) and re.search(r"[A-Z]", value) and re.search(r"\d", value)):
            raise ValueError("Password must contain uppercase, lowercase, and number")
        return value


class LoginRequest(CamelModel):
    email: str
    password: str

    @field_validator("email")
    @classmethod
    def _lower(cls, value: str) -> str:
        return value.lower()


class ProfileUpdate(CamelModel):
    headline: Optional[str] = None
    summary: Optional[str] = None
    phone: Optional[str] = None
    location: Optional[str] = None
    current_title: Optional[str] = None
    current_company: Optional[str] = None
    years_of_experience: Optional[int] = Field(default=None, ge=0)
    linkedin_url: Optional[str] = Field(default=None, alias="linkedInUrl")


class SkillCreate(CamelModel):
    name: str = Field(min_length=1, max_length=100)


class PreferencesUpdate(CamelModel):
    desired_roles: Optional[list[str]] = None
    desired_locations: Optional[list[str]] = None
    remote_preference: Optional[RemoteType] = None
    min_match_score: Optional[int] = Field(default=None, ge=0, le=100)

    @field_validator("desired_roles", "desired_locations")
    @classmethod
    def _strip_lists(cls, value: Optional[list[str]]) -> Optional[list[str]]:
        return _clean_list(value)


class JobCreate(CamelModel):
    title: str = Field(min_length=1)
    company: str = Field(min_length=1)
    description: str = Field(min_length=1)
    apply_url: HttpUrl
    external_id: Optional[str] = None
    portal: str = "manual"
    location: Optional[str] = None
    remote_type: Optional[RemoteType] = None
    requirements: str = ""
    salary_min: Optional[int] = Field(default=None, ge=0)
    salary_max: Optional[int] = Field(default=None, ge=0)
    salary_currency: str = "USD"
    skills_required: list[str] = Field(default_factory=list)

    @field_validator("skills_required")
    @classmethod
    def _strip_skills(cls, value: list[str]) -> list[str]:
        return _clean_list(value)


class JobUpdate(CamelModel):
    title: Optional[str] = Field(default=None, min_length=1)
    company: Optional[str] = Field(default=None, min_length=1)
    description: Optional[str] = None
    apply_url: Optional[HttpUrl] = None
    location: Optional[str] = None
    remote_type: Optional[RemoteType] = None
    requirements: Optional[str] = None
    salary_min: Optional[int] = Field(default=None, ge=0)
    salary_max: Optional[int] = Field(default=None, ge=0)
    salary_currency: Optional[str] = None
    skills_required: Optional[list[str]] = None
    is_active: Optional[bool] = None

    @field_validator("skills_required")
    @classmethod
    def _strip_skills(cls, value: Optional[list[str]]) -> Optional[list[str]]:
        return _clean_list(value)


class ApplicationCreate(CamelModel):
    job_id: int
    cover_letter: str = ""
    notes: str = ""


class ApplicationUpdate(CamelModel):
    status: Optional[ApplicationStatus] = None
    notes: Optional[str] = None
    cover_letter: Optional[str] = None


class UserUpdate(CamelModel):
    first_name: Optional[str] = Field(default=None, min_length=1)
    last_name: Optional[str] = Field(default=None, min_length=1)


class RoleUpdate(CamelModel):
    role: UserRole


class StatusUpdate(CamelModel):
    is_active: bool
