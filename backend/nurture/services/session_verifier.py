"""
Bearer session verification against Clerk's signing keys.
"""
import asyncio
import logging
import time
from dataclasses import dataclass
from typing import Any, Optional, Union

from jose import JWTError, jwt

from nurture.config import Settings
from nurture.core.errors import InternalError, Unauthenticated
from nurture.core.security import SessionTokenError, decode_session_token
from nurture.services.clerk_client import ClerkClient, IdentityProviderError

logger = logging.getLogger("nurture.session")


@dataclass(frozen=True)
class AuthContext:
    """The authenticated caller."""
    user_id: str
    session_id: Optional[str]
    claims: dict[str, Any]


def key_ids(jwks: dict[str, Any]) -> set[str]:
    return {key.get("kid") for key in jwks.get("keys") or [] if isinstance(key, dict)}


class SessionVerifier:
    """
    Verifies Clerk session JWTs.

    Uses ``CLERK_JWT_KEY`` when configured, otherwise the instance JWKS.
    The JWKS is fetched on first use and fetched again when a token names
    a ``kid`` it does not contain, at most once per refresh interval.
    """

    jwks_refresh_interval: float = 30.0

    def __init__(self, settings: Settings, clerk: ClerkClient):
        self.settings = settings
        self.clerk = clerk
        self._jwks: Optional[dict[str, Any]] = None
        self._fetched_at: float = 0.0
        self._lock = asyncio.Lock()

    async def _load_jwks(self, stale: Optional[dict[str, Any]] = None) -> dict[str, Any]:
        """Fetch the JWKS unless another caller already replaced ``stale``."""
        async with self._lock:
            if self._jwks is None or (
                self._jwks is stale
                and time.monotonic() - self._fetched_at >= self.jwks_refresh_interval
            ):
                try:
                    self._jwks = await self.clerk.get_jwks()
                except IdentityProviderError as e:
                    raise InternalError("Unable to load session signing keys") from e
                self._fetched_at = time.monotonic()
                logger.info(f"Loaded {len(key_ids(self._jwks))} session signing keys")
            return self._jwks

    async def _signing_key(self, token: str) -> Union[str, dict[str, Any]]:
        if self.settings.clerk_jwt_key:
            return self.settings.clerk_jwt_key

        jwks = self._jwks if self._jwks is not None else await self._load_jwks()
        try:
            kid = jwt.get_unverified_header(token).get("kid")
        except JWTError as e:
            raise Unauthenticated() from e
        if kid and kid not in key_ids(jwks):
            # Keys rotated since the last fetch
            jwks = await self._load_jwks(stale=jwks)
        return jwks

    async def verify(self, token: Optional[str]) -> AuthContext:
        """
        Authenticate a bearer token.

        Raises:
            Unauthenticated: Missing, malformed, expired or foreign token
        """
        if not token:
            raise Unauthenticated()

        key = await self._signing_key(token)
        try:
            claims = decode_session_token(
                token,
                key,
                algorithms=self.settings.session_token_algorithms,
                authorized_parties=self.settings.clerk_authorized_parties,
            )
        except SessionTokenError as e:
            logger.info(f"Rejected session token: {e}")
            raise Unauthenticated() from e

        return AuthContext(user_id=claims["sub"], session_id=claims.get("sid"), claims=claims)
