"""
Pydantic models for database documents and events.
"""
from nurture.models.event import (
    CLERK_EVENT_KINDS,
    EventKind,
    IdentityAttributes,
    WebhookEvent,
)
from nurture.models.user import (
    ProfileData,
    ProfileValue,
    UserRecord,
    validate_profile_data,
)

__all__ = [
    "CLERK_EVENT_KINDS",
    "EventKind",
    "IdentityAttributes",
    "WebhookEvent",
    "ProfileData",
    "ProfileValue",
    "UserRecord",
    "validate_profile_data",
]
