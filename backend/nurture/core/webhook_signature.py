"""
Webhook signature verification for Clerk deliveries.

Clerk signs webhooks with the Svix scheme:

- signed content is ``"{svix-id}.{svix-timestamp}.{raw body}"``
- signature is base64(HMAC-SHA256(secret, signed content))
- ``svix-signature`` holds space separated ``v1,<signature>`` entries
- the secret is the base64 part of ``whsec_<base64>``

Verification runs over the exact raw request bytes, never re-serialized JSON.
"""
import base64
import binascii
import hashlib
import hmac
import time
from typing import Mapping, Optional

SECRET_PREFIX = "whsec_"
SIGNATURE_VERSION = "v1"
DEFAULT_TOLERANCE_SECONDS = 300

ID_HEADERS = ("svix-id", "webhook-id")
TIMESTAMP_HEADERS = ("svix-timestamp", "webhook-timestamp")
SIGNATURE_HEADERS = ("svix-signature", "webhook-signature")


class WebhookVerificationError(Exception):
    """Raised when a delivery cannot be authenticated."""


def _header(headers: Mapping[str, str], names: tuple[str, ...]) -> Optional[str]:
    # Starlette headers are case-insensitive, plain dicts are not
    lowered = {k.lower(): v for k, v in headers.items()}
    for name in names:
        value = lowered.get(name)
        if value:
            return value
    return None


def decode_secret(secret: str) -> bytes:
    """Decode a ``whsec_`` secret into raw HMAC key bytes."""
    if secret.startswith(SECRET_PREFIX):
        secret = secret[len(SECRET_PREFIX):]
    try:
        return base64.b64decode(secret, validate=True)
    except (binascii.Error, ValueError) as e:
        raise ValueError("Webhook secret is not valid base64") from e


def sign(key: bytes, msg_id: str, timestamp: int | str, payload: bytes) -> str:
    """Compute the base64 v1 signature for a delivery."""
    to_sign = f"{msg_id}.{timestamp}.".encode() + payload
    digest = hmac.new(key, to_sign, hashlib.sha256).digest()
    return base64.b64encode(digest).decode()


class WebhookVerifier:
    """
    Verifies signed webhook deliveries.

    Usage:
        verifier = WebhookVerifier(settings.clerk_webhook_secret)
        verifier.verify(await request.body(), request.headers)
    """

    def __init__(self, secret: str, tolerance_seconds: int = DEFAULT_TOLERANCE_SECONDS):
        self._key = decode_secret(secret)
        self.tolerance_seconds = tolerance_seconds

    def verify(
        self,
        payload: bytes,
        headers: Mapping[str, str],
        now: Optional[float] = None,
    ) -> str:
        """
        Authenticate a delivery.

        Args:
            payload: Raw request body bytes
            headers: Request headers
            now: Current unix time, for tests

        Returns:
            The delivery id

        Raises:
            WebhookVerificationError: On any missing header, stale timestamp
                or signature mismatch
        """
        msg_id = _header(headers, ID_HEADERS)
        timestamp = _header(headers, TIMESTAMP_HEADERS)
        signature_header = _header(headers, SIGNATURE_HEADERS)

        if not msg_id or not timestamp or not signature_header:
            raise WebhookVerificationError("Missing required webhook headers")

        try:
            sent_at = int(timestamp)
        except ValueError:
            raise WebhookVerificationError("Invalid webhook timestamp")

        now = time.time() if now is None else now
        if sent_at < now - self.tolerance_seconds:
            raise WebhookVerificationError("Webhook timestamp too old")
        if sent_at > now + self.tolerance_seconds:
            raise WebhookVerificationError("Webhook timestamp too new")

        expected = sign(self._key, msg_id, timestamp, payload)

        for entry in signature_header.split(" "):
            version, _, signature = entry.partition(",")
            if version != SIGNATURE_VERSION or not signature:
                continue
            if hmac.compare_digest(expected.encode(), signature.encode()):
                return msg_id

        raise WebhookVerificationError("No matching signature found")
