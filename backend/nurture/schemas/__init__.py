"""
Request and response schemas for API endpoints.
"""
from nurture.schemas.auth import (
    ProviderUser,
    SessionInfo,
    SignInRequest,
    SignInResponse,
    SignOutRequest,
    SignOutResponse,
    SignUpRequest,
    SignUpResponse,
)
from nurture.schemas.user import (
    CurrentUser,
    CurrentUserResponse,
    MergedProfile,
    ProfileResponse,
    ProfileUpdateRequest,
    ProfileUpdateResponse,
    ProfileView,
)
from nurture.schemas.webhook import WebhookResponse

__all__ = [
    # Auth
    "ProviderUser",
    "SessionInfo",
    "SignInRequest",
    "SignInResponse",
    "SignOutRequest",
    "SignOutResponse",
    "SignUpRequest",
    "SignUpResponse",
    # User
    "CurrentUser",
    "CurrentUserResponse",
    "MergedProfile",
    "ProfileResponse",
    "ProfileUpdateRequest",
    "ProfileUpdateResponse",
    "ProfileView",
    # Webhook
    "WebhookResponse",
]
