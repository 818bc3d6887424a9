"""
Dependencies for dependency injection in routes.
"""
from nurture.dependencies.auth import CurrentAuth, get_auth_context
from nurture.dependencies.rate_limit import rate_limit
from nurture.dependencies.services import (
    get_auth_gateway,
    get_container,
    get_profile_service,
    get_webhook_dispatcher,
)

__all__ = [
    "CurrentAuth",
    "get_auth_context",
    "rate_limit",
    "get_auth_gateway",
    "get_container",
    "get_profile_service",
    "get_webhook_dispatcher",
]
