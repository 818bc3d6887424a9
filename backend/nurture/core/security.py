"""
Session token verification for Clerk-issued JWTs.
"""
from typing import Any, Optional, Union

from jose import JWTError, jwt


class SessionTokenError(Exception):
    """Raised when a bearer token cannot be trusted."""


def extract_bearer_token(authorization: Optional[str]) -> Optional[str]:
    """
    Pull the token out of an ``Authorization: Bearer <token>`` header.

    Returns:
        The token, or None if the header is missing or not a bearer header
    """
    if not authorization:
        return None
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


def decode_session_token(
    token: str,
    key: Union[str, dict[str, Any]],
    algorithms: list[str],
    authorized_parties: Optional[list[str]] = None,
) -> dict[str, Any]:
    """
    Decode and validate a session JWT.

    Args:
        token: Raw JWT from the Authorization header
        key: PEM public key, shared secret, or a JWKS dict (``{"keys": [...]}``)
        algorithms: Accepted signing algorithms
        authorized_parties: Allowed ``azp`` values (skipped when empty)

    Returns:
        Decoded claims; ``sub`` is the user id and ``sid`` the session id

    Raises:
        SessionTokenError: If the token is invalid, expired or not for us
    """
    try:
        claims = jwt.decode(
            token,
            key,
            algorithms=algorithms,
            options={"verify_aud": False},
        )
    except JWTError as e:
        raise SessionTokenError(str(e)) from e

    if not claims.get("sub"):
        raise SessionTokenError("Token has no subject")

    azp = claims.get("azp")
    if authorized_parties and azp and azp not in authorized_parties:
        raise SessionTokenError(f"Unauthorized party: {azp}")

    return claims
