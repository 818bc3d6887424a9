"""
Auth gateway: thin pass-through to Clerk with input checks and error mapping.
"""
import logging
from typing import Any, Optional

from nurture.config import Settings
from nurture.core.errors import (
    EmailExists,
    Forbidden,
    InternalError,
    InvalidCredentials,
    MissingFields,
    ResourceNotFound,
    ServiceError,
    Unauthenticated,
    UserNotFound,
    ValidationFailed,
    WeakPassword,
)
from nurture.schemas.auth import (
    ProviderUser,
    SessionInfo,
    SignInResponse,
    SignUpResponse,
)
from nurture.services.clerk_client import ClerkClient, IdentityProviderError, primary_email

logger = logging.getLogger("nurture.auth")

MIN_PASSWORD_LENGTH = 8

WEAK_PASSWORD_CODES = {
    "form_password_pwned",
    "form_password_length_too_short",
    "form_password_size_in_bytes_exceeded",
    "form_password_validation_failed",
    "form_password_not_strong_enough",
}
BAD_CREDENTIAL_CODES = {
    "form_password_incorrect",
    "form_identifier_not_found",
}


def map_provider_error(error: IdentityProviderError, not_found: type[ServiceError] = ResourceNotFound) -> ServiceError:
    """
    Translate a Clerk error into the service error taxonomy.

    Args:
        error: Error raised by ClerkClient
        not_found: Error to use for 404s (user lookups pass UserNotFound)
    """
    code = error.code or ""
    if code == "form_identifier_exists":
        return EmailExists()
    if code in WEAK_PASSWORD_CODES:
        return WeakPassword(error.message)
    if code in BAD_CREDENTIAL_CODES:
        return InvalidCredentials()
    if code == "resource_not_found" or error.status_code == 404:
        return not_found()
    if error.status_code == 401:
        return Unauthenticated()
    if error.status_code == 403:
        return Forbidden()
    if error.status_code is not None and 400 <= error.status_code < 500 and code.startswith("form_"):
        return ValidationFailed(error.message)
    return InternalError("Identity provider request failed")


def to_provider_user(user: dict[str, Any]) -> ProviderUser:
    """Reduce a Clerk user object to its identity fields."""
    return ProviderUser(
        id=user["id"],
        email=primary_email(user),
        first_name=user.get("first_name") or "",
        last_name=user.get("last_name") or "",
        public_metadata=user.get("public_metadata") or {},
    )


def _require(**fields: Optional[str]) -> None:
    missing = [name for name, value in fields.items() if not value]
    if missing:
        raise MissingFields(f"Missing required fields: {', '.join(missing)}")


class AuthGateway:
    """Stateless request handlers over the Clerk client."""

    def __init__(self, clerk: ClerkClient, settings: Settings):
        self.clerk = clerk
        self.settings = settings

    async def sign_up(
        self,
        email: Optional[str],
        password: Optional[str],
        first_name: Optional[str] = None,
        last_name: Optional[str] = None,
    ) -> SignUpResponse:
        """
        Create an account and issue its first session token.

        Raises:
            MissingFields: Email or password absent
            WeakPassword: Password shorter than 8 characters
            EmailExists: Address already registered
        """
        _require(email=email, password=password)
        if len(password) < MIN_PASSWORD_LENGTH:
            raise WeakPassword()

        try:
            user = await self.clerk.create_user(email, password, first_name, last_name)
        except IdentityProviderError as e:
            raise map_provider_error(e) from e

        logger.info(f"Account created for user {user['id']}")
        session = await self.issue_session(user["id"])
        return SignUpResponse(user=to_provider_user(user), token=session.token)

    async def sign_in(self, email: Optional[str], password: Optional[str]) -> SignInResponse:
        """
        Verify credentials and open a session.

        Raises:
            MissingFields: Email or password absent
            InvalidCredentials: Unknown email or wrong password
        """
        _require(email=email, password=password)

        try:
            user = await self.clerk.find_user_by_email(email)
            if user is None:
                raise InvalidCredentials()
            if not await self.clerk.verify_password(user["id"], password):
                raise InvalidCredentials()
        except IdentityProviderError as e:
            raise map_provider_error(e) from e

        session = await self.issue_session(user["id"])
        return SignInResponse(user=to_provider_user(user), session=session)

    async def sign_out(self, session_id: Optional[str]) -> None:
        """Revoke a session."""
        _require(sessionId=session_id)
        try:
            await self.clerk.revoke_session(session_id)
        except IdentityProviderError as e:
            raise map_provider_error(e) from e
        logger.info(f"Session {session_id} revoked")

    async def issue_session(self, user_id: str) -> SessionInfo:
        """Create a session for a user and return its JWT."""
        expires_in = self.settings.session_expires_in_seconds
        try:
            session = await self.clerk.create_session(user_id, expires_in)
            token = await self.clerk.create_session_token(
                session["id"], self.settings.session_token_template
            )
        except IdentityProviderError as e:
            raise map_provider_error(e, not_found=UserNotFound) from e
        return SessionInfo(id=session["id"], token=token, expires_in=expires_in)

    async def get_user(self, user_id: str) -> ProviderUser:
        """Fetch the provider's view of a user."""
        try:
            user = await self.clerk.get_user(user_id)
        except IdentityProviderError as e:
            raise map_provider_error(e, not_found=UserNotFound) from e
        return to_provider_user(user)
