"""
Users router for profile read and merge.
"""
from fastapi import APIRouter, Depends

from nurture.dependencies.auth import CurrentAuth
from nurture.dependencies.services import get_profile_service
from nurture.schemas.user import (
    ProfileResponse,
    ProfileUpdateRequest,
    ProfileUpdateResponse,
)
from nurture.services.profile_service import ProfileService

router = APIRouter(prefix="/users", tags=["Users"])


@router.get(
    "/profile",
    response_model=ProfileResponse,
    summary="Get user profile",
)
async def get_profile(
    auth: CurrentAuth,
    profiles: ProfileService = Depends(get_profile_service),
):
    """Stored profile of the authenticated user."""
    return ProfileResponse(profile=await profiles.get_profile(auth.user_id))


@router.patch(
    "/profile",
    response_model=ProfileUpdateResponse,
    summary="Update profile data",
)
async def update_profile(
    body: ProfileUpdateRequest,
    auth: CurrentAuth,
    profiles: ProfileService = Depends(get_profile_service),
):
    """
    Merge `profileData` into the stored profile.

    Keys in the body are added or overwritten; other keys are kept.

    Body: `{"profileData": {"key": "value", ...}}`
    """
    merged = await profiles.update_profile(auth.user_id, body.profile_data)
    return ProfileUpdateResponse(profile=merged)
