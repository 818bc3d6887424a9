"""
User record model for the users collection.
"""
from datetime import datetime
from typing import Any, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from nurture.core.errors import InvalidProfileData

# Values allowed inside profile data: JSON scalars or nested maps of the same
ProfileScalar = Union[str, int, float, bool, None]
ProfileValue = Union[ProfileScalar, dict[str, Any]]
ProfileData = dict[str, ProfileValue]

MAX_PROFILE_DEPTH = 8


def _check_key(key: Any, path: str) -> None:
    if not isinstance(key, str) or not key:
        raise InvalidProfileData(f"Invalid profileData key at {path or 'root'}")
    if key.startswith("$") or "." in key:
        raise InvalidProfileData(
            f"profileData key '{key}' may not start with '$' or contain '.'"
        )


def _check_value(value: Any, path: str, depth: int) -> None:
    if value is None or isinstance(value, (str, bool, int, float)):
        return
    if isinstance(value, dict):
        if depth >= MAX_PROFILE_DEPTH:
            raise InvalidProfileData(f"profileData is nested too deeply at {path}")
        for key, nested in value.items():
            _check_key(key, path)
            _check_value(nested, f"{path}.{key}", depth + 1)
        return
    raise InvalidProfileData(
        f"Unsupported value type '{type(value).__name__}' at profileData.{path}"
    )


def validate_profile_data(data: Any) -> ProfileData:
    """
    Validate a profile data map.

    Args:
        data: Untrusted input from the request body

    Returns:
        The same mapping, once every key and value has been checked

    Raises:
        InvalidProfileData: If data is not an object or holds unsupported values
    """
    if not isinstance(data, dict):
        raise InvalidProfileData()
    for key, value in data.items():
        _check_key(key, "")
        _check_value(value, key, 1)
    return data


class UserRecord(BaseModel):
    """
    User document model for the users collection.

    ``identity_id`` is the Clerk user id and doubles as the document ``_id``.
    """
    model_config = ConfigDict(populate_by_name=True)

    identity_id: str = Field(..., alias="_id", description="Clerk user id")
    email: str = Field(default="", description="Primary email address")
    first_name: str = Field(default="")
    last_name: str = Field(default="")
    relationship_id: Optional[str] = Field(None, description="Linked relationship")
    partner_id: Optional[str] = Field(None, description="Partner's identity id")
    profile_data: dict[str, Any] = Field(default_factory=dict)
    provider_updated_at: Optional[int] = Field(
        None, description="Clerk updated_at (ms) of the last applied identity event"
    )
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @property
    def has_relationship(self) -> bool:
        return bool(self.relationship_id)
