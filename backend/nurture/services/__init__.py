"""
Service layer for business logic.
"""
from nurture.services.auth_gateway import AuthGateway
from nurture.services.clerk_client import ClerkClient, IdentityProviderError
from nurture.services.profile_service import ProfileService
from nurture.services.user_sync_service import UserSyncService
from nurture.services.webhook_dispatcher import WebhookDispatcher

__all__ = [
    "AuthGateway",
    "ClerkClient",
    "IdentityProviderError",
    "ProfileService",
    "UserSyncService",
    "WebhookDispatcher",
]
