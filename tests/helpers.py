"""
Shared test helpers: webhook signing and session token minting.
"""

import asyncio
import base64
import json
import time
from datetime import datetime, timedelta, timezone
from typing import Any, Optional

from jose import jwt

from nurture.core.webhook_signature import sign

WEBHOOK_KEY = b"nurture-test-webhook-signing-key"
WEBHOOK_SECRET = "whsec_" + base64.b64encode(WEBHOOK_KEY).decode()
SESSION_KEY = "nurture-test-session-key"
TEST_USER_ID = "user_2abcDEFghiJKLmnoPQR"
TEST_SESSION_ID = "sess_2xyzUVWrstOPQlmnIJK"


def run(coro):
    """Run a coroutine from a synchronous test."""
    return asyncio.run(coro)


def make_event(
    event_type: str,
    user_id: Optional[str] = TEST_USER_ID,
    email: str = "ada@example.com",
    first_name: Optional[str] = "Ada",
    last_name: Optional[str] = "Lovelace",
    updated_at: Optional[int] = 1735468800000,
) -> dict[str, Any]:
    """Build a Clerk webhook envelope."""
    data: dict[str, Any] = {"object": "user"}
    if user_id is not None:
        data["id"] = user_id
    if event_type == "user.deleted":
        data["deleted"] = True
    else:
        data.update({
            "first_name": first_name,
            "last_name": last_name,
            "primary_email_address_id": "idn_primary",
            "email_addresses": [{"id": "idn_primary", "email_address": email}],
            "updated_at": updated_at,
        })
    return {"type": event_type, "object": "event", "data": data}


def signed_delivery(
    event: dict[str, Any] | bytes,
    msg_id: str = "msg_2abc",
    timestamp: Optional[int] = None,
    key: bytes = WEBHOOK_KEY,
) -> tuple[bytes, dict[str, str]]:
    """
    Serialize and sign a delivery the way Clerk does.

    Returns:
        (raw body, headers)
    """
    body = event if isinstance(event, bytes) else json.dumps(event).encode()
    timestamp = int(time.time()) if timestamp is None else timestamp
    signature = sign(key, msg_id, timestamp, body)
    headers = {
        "svix-id": msg_id,
        "svix-timestamp": str(timestamp),
        "svix-signature": f"v1,{signature}",
        "content-type": "application/json",
    }
    return body, headers


def make_session_token(
    user_id: str = TEST_USER_ID,
    session_id: str = TEST_SESSION_ID,
    expires_in: timedelta = timedelta(minutes=5),
    key: str = SESSION_KEY,
    kid: Optional[str] = None,
    **claims: Any,
) -> str:
    """Mint a session JWT signed with the test key, optionally naming its ``kid``."""
    now = datetime.now(timezone.utc)
    payload = {
        "sub": user_id,
        "sid": session_id,
        "iat": now,
        "nbf": now - timedelta(seconds=5),
        "exp": now + expires_in,
        **claims,
    }
    headers = {"kid": kid} if kid else None
    return jwt.encode(payload, key, algorithm="HS256", headers=headers)
