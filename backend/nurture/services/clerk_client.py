"""
Clerk backend API client.

Wraps the Clerk REST endpoints this backend needs:
- Users: create, fetch, look up by email, verify password
- Sessions: create, issue JWT, revoke
- JWKS: public keys for session token verification

All calls authenticate with the instance secret key.
"""
import logging
from typing import Any, Optional

import httpx

from nurture.config import Settings

logger = logging.getLogger("nurture.clerk")


class IdentityProviderError(Exception):
    """
    Error returned by (or while reaching) the identity provider.

    Attributes:
        status_code: HTTP status from Clerk, or None for transport failures
        code: First Clerk error code (e.g. ``form_identifier_exists``)
        message: Human readable message
    """

    def __init__(self, message: str, status_code: Optional[int] = None, code: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.code = code

    @classmethod
    def from_response(cls, response: httpx.Response) -> "IdentityProviderError":
        """Build an error from a Clerk ``{"errors": [...]}`` body."""
        code = None
        message = f"Identity provider returned {response.status_code}"
        try:
            body = response.json()
        except ValueError:
            body = None
        if isinstance(body, dict) and body.get("errors"):
            first = body["errors"][0]
            code = first.get("code")
            message = first.get("long_message") or first.get("message") or message
        return cls(message, status_code=response.status_code, code=code)


def primary_email(user: dict[str, Any]) -> str:
    """Resolve a Clerk user's primary email address."""
    addresses = user.get("email_addresses")
    if not isinstance(addresses, list):
        return ""
    addresses = [a for a in addresses if isinstance(a, dict)]
    primary_id = user.get("primary_email_address_id")
    for address in addresses:
        if primary_id and address.get("id") == primary_id:
            return address.get("email_address") or ""
    if addresses:
        return addresses[0].get("email_address") or ""
    return ""


class ClerkClient:
    """
    Async client for the Clerk backend API.
    """

    def __init__(self, settings: Settings, transport: Optional[httpx.AsyncBaseTransport] = None):
        """Initialize Clerk client."""
        self.settings = settings
        self.base_url = settings.clerk_api_url.rstrip("/")
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client with connection pooling."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                headers={
                    "Authorization": f"Bearer {self.settings.clerk_secret_key}",
                    "Content-Type": "application/json",
                },
                timeout=15.0,
                transport=self._transport,
            )
        return self._client

    async def close(self) -> None:
        """Close HTTP client."""
        if self._client and not self._client.is_closed:
            await self._client.aclose()
            self._client = None

    async def _request(
        self,
        method: str,
        path: str,
        json: Optional[dict[str, Any]] = None,
        params: Optional[dict[str, Any]] = None,
    ) -> Any:
        client = await self._get_client()
        try:
            response = await client.request(method, path, json=json, params=params)
        except httpx.HTTPError as e:
            logger.error(f"Clerk {method} {path} failed: {e}")
            raise IdentityProviderError(f"Identity provider unreachable: {e}") from e

        if response.is_error:
            error = IdentityProviderError.from_response(response)
            logger.warning(
                f"Clerk {method} {path} -> {response.status_code} ({error.code or 'no code'})"
            )
            raise error
        return response.json()

    # ==================== Users ====================

    async def create_user(
        self,
        email: str,
        password: str,
        first_name: Optional[str] = None,
        last_name: Optional[str] = None,
    ) -> dict[str, Any]:
        """
        Create a user account.

        Returns:
            Clerk user object
        """
        payload: dict[str, Any] = {
            "email_address": [email],
            "password": password,
        }
        if first_name:
            payload["first_name"] = first_name
        if last_name:
            payload["last_name"] = last_name
        return await self._request("POST", "/users", json=payload)

    async def get_user(self, user_id: str) -> dict[str, Any]:
        """Fetch a user by id."""
        return await self._request("GET", f"/users/{user_id}")

    async def find_user_by_email(self, email: str) -> Optional[dict[str, Any]]:
        """
        Look up a user by email address.

        Returns:
            Clerk user object or None if no account uses the address
        """
        users = await self._request(
            "GET", "/users", params={"email_address": email, "limit": 1}
        )
        if isinstance(users, dict):
            users = users.get("data", [])
        return users[0] if users else None

    async def verify_password(self, user_id: str, password: str) -> bool:
        """
        Check a user's password.

        Raises:
            IdentityProviderError: ``form_password_incorrect`` on mismatch
        """
        result = await self._request(
            "POST", f"/users/{user_id}/verify_password", json={"password": password}
        )
        return bool(result.get("verified"))

    # ==================== Sessions ====================

    async def create_session(self, user_id: str, expires_in_seconds: Optional[int] = None) -> dict[str, Any]:
        """Create a session for a user."""
        payload: dict[str, Any] = {"user_id": user_id}
        if expires_in_seconds:
            payload["expires_in_seconds"] = expires_in_seconds
        return await self._request("POST", "/sessions", json=payload)

    async def create_session_token(self, session_id: str, template: Optional[str] = None) -> str:
        """
        Issue a JWT for a session.

        Args:
            session_id: Clerk session id
            template: Optional JWT template name

        Returns:
            Encoded JWT
        """
        path = f"/sessions/{session_id}/tokens"
        if template:
            path = f"{path}/{template}"
        result = await self._request("POST", path, json={})
        token = result.get("jwt")
        if not token:
            raise IdentityProviderError("Identity provider returned no session token")
        return token

    async def revoke_session(self, session_id: str) -> dict[str, Any]:
        """Revoke a session."""
        return await self._request("POST", f"/sessions/{session_id}/revoke")

    # ==================== Keys ====================

    async def get_jwks(self) -> dict[str, Any]:
        """Fetch the instance's JSON Web Key Set."""
        return await self._request("GET", "/jwks")
