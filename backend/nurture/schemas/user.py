"""
User and profile request/response schemas.
"""
from datetime import datetime
from typing import Any, Optional

from pydantic import Field

from nurture.models.user import UserRecord
from nurture.schemas.base import CamelModel


class ProfileView(CamelModel):
    """Public-safe view of a user record."""
    clerk_id: str
    email: str
    first_name: str
    last_name: str
    relationship_id: Optional[str] = None
    partner_id: Optional[str] = None
    profile_data: dict[str, Any] = Field(default_factory=dict)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def from_record(cls, record: UserRecord) -> "ProfileView":
        return cls(
            clerk_id=record.identity_id,
            email=record.email,
            first_name=record.first_name,
            last_name=record.last_name,
            relationship_id=record.relationship_id,
            partner_id=record.partner_id,
            profile_data=record.profile_data,
            created_at=record.created_at,
            updated_at=record.updated_at,
        )


class ProfileResponse(CamelModel):
    """GET /users/profile response."""
    profile: ProfileView


class ProfileUpdateRequest(CamelModel):
    """
    PATCH /users/profile body.

    ``profile_data`` is left untyped here so the service can reject bad
    input with INVALID_PROFILE_DATA instead of a generic validation error.
    """
    profile_data: Any = None


class MergedProfile(CamelModel):
    """Profile data after a merge."""
    profile_data: dict[str, Any]
    updated_at: Optional[datetime] = None


class ProfileUpdateResponse(CamelModel):
    """PATCH /users/profile response."""
    message: str = "Profile updated successfully"
    profile: MergedProfile


class CurrentUser(CamelModel):
    """Provider identity merged with the stored relationship and profile."""
    id: str
    email: str = ""
    first_name: str = ""
    last_name: str = ""
    has_relationship: bool = False
    relationship_id: Optional[str] = None
    partner_id: Optional[str] = None
    profile_data: dict[str, Any] = Field(default_factory=dict)


class CurrentUserResponse(CamelModel):
    """GET /auth/me response."""
    user: CurrentUser
