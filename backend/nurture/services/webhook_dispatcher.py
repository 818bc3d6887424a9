"""
Webhook dispatcher: verify a Clerk delivery, parse it, apply it.

Verification fails closed. Nothing reaches storage unless the signature
checks out and the payload names a subject.
"""
import json
import logging
from typing import Any, Mapping, Optional

from pydantic import ValidationError

from nurture.core.errors import InvalidSignature, MissingFields, ValidationFailed
from nurture.core.webhook_signature import WebhookVerificationError, WebhookVerifier
from nurture.models.event import CLERK_EVENT_KINDS, IdentityAttributes, WebhookEvent
from nurture.schemas.webhook import WebhookResponse
from nurture.services.clerk_client import primary_email
from nurture.services.user_sync_service import UserSyncService

logger = logging.getLogger("nurture.webhook")


def parse_event(payload: bytes, delivery_id: Optional[str] = None) -> tuple[str, Optional[WebhookEvent]]:
    """
    Parse a verified Clerk event envelope.

    Args:
        payload: Raw JSON body
        delivery_id: Verified delivery id

    Returns:
        (event type, WebhookEvent) - the event is None for types not synced

    Raises:
        ValidationFailed: Body is not a JSON object or has mistyped attributes
        MissingFields: Synced event without ``data.id``
    """
    try:
        envelope = json.loads(payload)
    except (ValueError, UnicodeDecodeError) as e:
        raise ValidationFailed("Malformed webhook payload") from e
    if not isinstance(envelope, dict):
        raise ValidationFailed("Malformed webhook payload")

    event_type = envelope.get("type")
    if not isinstance(event_type, str) or not event_type:
        raise MissingFields("Webhook payload has no event type")

    kind = CLERK_EVENT_KINDS.get(event_type)
    if kind is None:
        return event_type, None

    data: Any = envelope.get("data")
    subject_id = data.get("id") if isinstance(data, dict) else None
    if not isinstance(subject_id, str) or not subject_id:
        raise MissingFields("Webhook payload has no subject id")

    try:
        attributes = IdentityAttributes(
            email=primary_email(data),
            first_name=data.get("first_name") or "",
            last_name=data.get("last_name") or "",
            provider_updated_at=data.get("updated_at") if isinstance(data.get("updated_at"), int) else None,
        )
    except ValidationError as e:
        raise ValidationFailed("Malformed webhook payload") from e
    return event_type, WebhookEvent(
        kind=kind,
        subject_id=subject_id,
        attributes=attributes,
        delivery_id=delivery_id,
        raw_type=event_type,
    )


class WebhookDispatcher:
    """Routes verified identity events to the user sync service."""

    def __init__(self, verifier: WebhookVerifier, sync: UserSyncService):
        self.verifier = verifier
        self.sync = sync

    def verify(self, payload: bytes, headers: Mapping[str, str]) -> str:
        """
        Authenticate a delivery.

        Returns:
            The delivery id

        Raises:
            InvalidSignature: On any verification failure
        """
        try:
            return self.verifier.verify(payload, headers)
        except WebhookVerificationError as e:
            logger.warning(f"Rejected webhook delivery: {e}")
            raise InvalidSignature() from e

    async def handle(self, payload: bytes, headers: Mapping[str, str]) -> WebhookResponse:
        """
        Verify, parse and apply one delivery.

        Exactly one storage write happens for a synced event type and none
        for anything else. Safe to call again for the same delivery.
        """
        delivery_id = self.verify(payload, headers)
        event_type, event = parse_event(payload, delivery_id)

        if event is None:
            logger.info(f"Webhook {delivery_id}: ignoring {event_type}")
            return WebhookResponse(event=event_type, processed=False)

        logger.info(f"Webhook {delivery_id}: {event_type} for user {event.subject_id}")
        changed = await self.sync.apply(event)
        return WebhookResponse(event=event_type, processed=changed)
