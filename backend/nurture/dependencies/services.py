"""
Dependencies exposing the process-scoped services to routes.
"""
from fastapi import Depends, Request

from nurture.config import Settings
from nurture.container import ServiceContainer
from nurture.core.errors import InternalError
from nurture.core.rate_limit import RateLimiter
from nurture.services.auth_gateway import AuthGateway
from nurture.services.profile_service import ProfileService
from nurture.services.webhook_dispatcher import WebhookDispatcher


def get_container(request: Request) -> ServiceContainer:
    """Dependency to get the service container built at startup."""
    return request.app.state.container


def get_app_settings(container: ServiceContainer = Depends(get_container)) -> Settings:
    return container.settings


def get_profile_service(container: ServiceContainer = Depends(get_container)) -> ProfileService:
    """Dependency to get ProfileService instance."""
    return container.profile_service


def get_auth_gateway(container: ServiceContainer = Depends(get_container)) -> AuthGateway:
    """Dependency to get AuthGateway instance."""
    return container.auth_gateway


def get_rate_limiter(container: ServiceContainer = Depends(get_container)) -> RateLimiter:
    return container.rate_limiter


def get_webhook_dispatcher(container: ServiceContainer = Depends(get_container)) -> WebhookDispatcher:
    """
    Dependency to get the WebhookDispatcher.

    Raises:
        InternalError: If no webhook secret is configured
    """
    if container.webhook_dispatcher is None:
        raise InternalError("Webhook secret is not configured")
    return container.webhook_dispatcher
