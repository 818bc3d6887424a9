"""
Authentication router: signup, signin, signout, Clerk webhook, current user.
"""
import logging

from fastapi import APIRouter, Depends, Request, status

from nurture.dependencies.auth import CurrentAuth
from nurture.dependencies.rate_limit import rate_limit
from nurture.dependencies.services import (
    get_auth_gateway,
    get_profile_service,
    get_webhook_dispatcher,
)
from nurture.schemas.auth import (
    SignInRequest,
    SignInResponse,
    SignOutRequest,
    SignOutResponse,
    SignUpRequest,
    SignUpResponse,
)
from nurture.schemas.user import CurrentUser, CurrentUserResponse
from nurture.schemas.webhook import WebhookResponse
from nurture.services.auth_gateway import AuthGateway
from nurture.services.profile_service import ProfileService
from nurture.services.webhook_dispatcher import WebhookDispatcher

logger = logging.getLogger("nurture.routers.auth")

router = APIRouter(prefix="/auth", tags=["Authentication"])


@router.post(
    "/signup",
    response_model=SignUpResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a new account",
    dependencies=[Depends(rate_limit("/auth/signup", "signup_rate_limit_attempts"))],
)
async def sign_up(
    body: SignUpRequest,
    gateway: AuthGateway = Depends(get_auth_gateway),
):
    """
    Create a Clerk account and return it with a session token.

    - **email**: Email address (must be unused)
    - **password**: Password (minimum 8 characters)
    - **firstName** / **lastName**: Optional names
    """
    return await gateway.sign_up(body.email, body.password, body.first_name, body.last_name)


@router.post(
    "/signin",
    response_model=SignInResponse,
    summary="Sign in with email and password",
    dependencies=[Depends(rate_limit("/auth/signin", "signin_rate_limit_attempts"))],
)
async def sign_in(
    body: SignInRequest,
    gateway: AuthGateway = Depends(get_auth_gateway),
):
    """
    Verify credentials with Clerk and open a session.

    **Rate limited** per client IP.
    """
    return await gateway.sign_in(body.email, body.password)


@router.post(
    "/signout",
    response_model=SignOutResponse,
    summary="Revoke a session",
)
async def sign_out(
    body: SignOutRequest,
    gateway: AuthGateway = Depends(get_auth_gateway),
):
    """Revoke the session named by `sessionId`."""
    await gateway.sign_out(body.session_id)
    return SignOutResponse()


@router.post(
    "/webhook",
    response_model=WebhookResponse,
    summary="Clerk user sync webhook",
)
async def handle_webhook(
    request: Request,
    dispatcher: WebhookDispatcher = Depends(get_webhook_dispatcher),
):
    """
    Called by Clerk when users are created, updated or deleted.

    The signature is checked over the raw body before anything is parsed.
    """
    payload = await request.body()
    return await dispatcher.handle(payload, request.headers)


@router.get(
    "/me",
    response_model=CurrentUserResponse,
    summary="Get current user info",
)
async def get_current_user(
    auth: CurrentAuth,
    gateway: AuthGateway = Depends(get_auth_gateway),
    profiles: ProfileService = Depends(get_profile_service),
):
    """
    Clerk identity merged with the stored relationship and profile data.

    Requires `Authorization: Bearer <session token>`.
    """
    identity = await gateway.get_user(auth.user_id)
    record = await profiles.get_record(auth.user_id)

    if record is None:
        # Webhook not delivered yet
        logger.warning(f"User {auth.user_id} exists in Clerk but has no stored record")
        return CurrentUserResponse(
            user=CurrentUser(
                id=identity.id,
                email=identity.email,
                first_name=identity.first_name,
                last_name=identity.last_name,
            )
        )

    return CurrentUserResponse(
        user=CurrentUser(
            id=identity.id,
            email=identity.email,
            first_name=identity.first_name,
            last_name=identity.last_name,
            has_relationship=record.has_relationship,
            relationship_id=record.relationship_id,
            partner_id=record.partner_id,
            profile_data=record.profile_data,
        )
    )
