"""
Typed webhook events produced by the dispatcher.
"""
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class EventKind(str, Enum):
    """Identity lifecycle events handled by the sync."""
    CREATED = "created"
    UPDATED = "updated"
    DELETED = "deleted"


# Clerk event type -> kind
CLERK_EVENT_KINDS: dict[str, EventKind] = {
    "user.created": EventKind.CREATED,
    "user.updated": EventKind.UPDATED,
    "user.deleted": EventKind.DELETED,
}


class IdentityAttributes(BaseModel):
    """Provider-owned identity fields carried by an event."""
    email: str = ""
    first_name: str = ""
    last_name: str = ""
    provider_updated_at: Optional[int] = None


class WebhookEvent(BaseModel):
    """A verified, parsed identity event."""
    kind: EventKind
    subject_id: str = Field(..., min_length=1)
    attributes: IdentityAttributes = Field(default_factory=IdentityAttributes)
    delivery_id: Optional[str] = None
    raw_type: str
