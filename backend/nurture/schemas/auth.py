"""
Authentication request/response schemas.
"""
from typing import Any, Optional

from pydantic import Field

from nurture.schemas.base import CamelModel


class SignUpRequest(CamelModel):
    """Signup request body. Presence and strength are checked by the gateway."""
    email: Optional[str] = Field(None, description="User email address")
    password: Optional[str] = Field(None, description="User password (min 8 characters)")
    first_name: Optional[str] = Field(None, description="First name")
    last_name: Optional[str] = Field(None, description="Last name")


class SignInRequest(CamelModel):
    """Signin request body."""
    email: Optional[str] = Field(None, description="User email address")
    password: Optional[str] = Field(None, description="User password")


class SignOutRequest(CamelModel):
    """Signout request body."""
    session_id: Optional[str] = Field(None, description="Session to revoke")


class ProviderUser(CamelModel):
    """Identity fields of a Clerk user."""
    id: str = Field(..., description="Clerk user id")
    email: str = Field(default="", description="Primary email address")
    first_name: str = Field(default="")
    last_name: str = Field(default="")
    public_metadata: dict[str, Any] = Field(default_factory=dict)


class SessionInfo(CamelModel):
    """An issued session and its JWT."""
    id: str = Field(..., description="Clerk session id")
    token: str = Field(..., description="Session JWT")
    expires_in: int = Field(..., description="Session lifetime in seconds")


class SignUpResponse(CamelModel):
    """Signup response."""
    user: ProviderUser
    token: str = Field(..., description="Session JWT for the new account")


class SignInResponse(CamelModel):
    """Signin response."""
    user: ProviderUser
    session: SessionInfo


class SignOutResponse(CamelModel):
    """Signout response."""
    success: bool = True
    message: str = "Signed out successfully"
