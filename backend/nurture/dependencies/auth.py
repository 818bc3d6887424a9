"""
Authentication dependencies for route protection.
"""
from typing import Annotated, Optional

from fastapi import Depends, Header

from nurture.container import ServiceContainer
from nurture.core.security import extract_bearer_token
from nurture.dependencies.services import get_container
from nurture.services.session_verifier import AuthContext


async def get_auth_context(
    authorization: Annotated[Optional[str], Header(description="Bearer session token")] = None,
    container: ServiceContainer = Depends(get_container),
) -> AuthContext:
    """
    Dependency to get the authenticated caller from the bearer token.

    Raises:
        Unauthenticated: If the token is missing or invalid
    """
    token = extract_bearer_token(authorization)
    return await container.session_verifier.verify(token)


# Type alias for cleaner route signatures
CurrentAuth = Annotated[AuthContext, Depends(get_auth_context)]
