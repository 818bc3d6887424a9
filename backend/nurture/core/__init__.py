"""
Core module - errors, security, webhook signatures and rate limiting.
"""
from nurture.core.errors import ErrorCode, ServiceError
from nurture.core.rate_limit import RateLimiter
from nurture.core.security import (
    SessionTokenError,
    decode_session_token,
    extract_bearer_token,
)
from nurture.core.webhook_signature import WebhookVerificationError, WebhookVerifier

__all__ = [
    "ErrorCode",
    "ServiceError",
    "RateLimiter",
    "SessionTokenError",
    "decode_session_token",
    "extract_bearer_token",
    "WebhookVerificationError",
    "WebhookVerifier",
]
