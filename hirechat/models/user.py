"""User and profile models for HireChat."""

from typing import Optional
from pydantic import BaseModel, Field, HttpUrl, field_validator
from datetime import datetime
from enum import Enum


class UserRole(str, Enum):
    """User role enumeration."""
    CANDIDATE = "candidate"
    RECRUITER = "recruiter"


class Profile(BaseModel):
    """Profile as read from the profile store."""
    id: str
    name: str = ""
    email: str
    role: UserRole = UserRole.CANDIDATE
    role_selected: bool = False
    github: Optional[str] = None
    linkedin: Optional[str] = None
    twitter: Optional[str] = None
    resume_path: Optional[str] = None
    vector_point_id: Optional[str] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True  # For SQLAlchemy model conversion

    @property
    def has_resume(self) -> bool:
        return self.vector_point_id is not None


class ProfileResponse(BaseModel):
    """Profile response model."""
    id: str
    name: str
    email: str
    role: UserRole
    role_selected: bool
    github: Optional[str] = None
    linkedin: Optional[str] = None
    twitter: Optional[str] = None
    resume_url: Optional[str] = None
    resume_url_expires_at: Optional[datetime] = None
    created_at: Optional[datetime] = None


class ProfileUpdateRequest(BaseModel):
    """Request model for updating profile details. Resume fields are not accepted."""
    name: Optional[str] = Field(default=None, min_length=1, max_length=100)

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        v = v.strip()
        if not v:
            raise ValueError("Name cannot be empty")
        return v


class SocialLinksUpdateRequest(BaseModel):
    """Request model for updating social links."""
    github: Optional[HttpUrl] = None
    linkedin: Optional[HttpUrl] = None
    twitter: Optional[HttpUrl] = None

    @field_validator("github", "linkedin", "twitter")
    @classmethod
    def limit_length(cls, v: Optional[HttpUrl]) -> Optional[HttpUrl]:
        if v is not None and len(str(v)) > 255:
            raise ValueError("URL cannot exceed 255 characters")
        return v

    def as_strings(self) -> dict:
        """Return the links that were provided; an explicit null clears a link."""
        return {
            key: str(value) if value is not None else None
            for key, value in self.model_dump(exclude_unset=True).items()
        }


class RoleSelectionRequest(BaseModel):
    """Request model for explicitly choosing an account role."""
    role: UserRole
