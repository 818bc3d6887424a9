"""
Profile service: read and merge the free-form profile on a user record.
"""
import logging
from datetime import datetime, timezone
from typing import Any, Optional

from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import ReturnDocument
from pymongo.errors import PyMongoError

from nurture.core.errors import InternalError, UserNotFound
from nurture.database.databases.users_db import Collections, Fields
from nurture.models.user import UserRecord, validate_profile_data
from nurture.schemas.user import MergedProfile, ProfileView

logger = logging.getLogger("nurture.profile")


class ProfileService:
    """Service for profile operations on the users collection."""

    def __init__(self, db: AsyncIOMotorDatabase):
        """Initialize with the users database."""
        self.db = db
        self.users = db[Collections.USERS]

    async def get_record(self, identity_id: str) -> Optional[UserRecord]:
        """
        Load a user record.

        Returns:
            UserRecord or None if no document exists
        """
        try:
            doc = await self.users.find_one({Fields.ID: identity_id})
        except PyMongoError as e:
            logger.error(f"Failed to read user {identity_id}: {e}")
            raise InternalError("Failed to get profile") from e
        if doc is None:
            return None
        return UserRecord(**doc)

    async def get_profile(self, identity_id: str) -> ProfileView:
        """
        Get the public-safe profile of a user.

        Raises:
            UserNotFound: If no record exists for the identity
        """
        record = await self.get_record(identity_id)
        if record is None:
            raise UserNotFound()
        return ProfileView.from_record(record)

    async def update_profile(self, identity_id: str, partial: Any) -> MergedProfile:
        """
        Shallow-merge ``partial`` into the stored profile data.

        Keys present in ``partial`` are added or overwritten; other keys keep
        their values. The merge is one atomic update on the document.

        Raises:
            InvalidProfileData: If partial is not a valid profile map
            UserNotFound: If no record exists for the identity
        """
        partial = validate_profile_data(partial)

        update: dict[str, Any] = {
            f"{Fields.PROFILE_DATA}.{key}": value for key, value in partial.items()
        }
        update[Fields.UPDATED_AT] = datetime.now(timezone.utc)

        try:
            doc = await self.users.find_one_and_update(
                {Fields.ID: identity_id},
                {"$set": update},
                return_document=ReturnDocument.AFTER,
            )
        except PyMongoError as e:
            logger.error(f"Failed to update profile of {identity_id}: {e}")
            raise InternalError("Failed to update profile") from e

        if doc is None:
            raise UserNotFound()

        logger.info(f"Profile of {identity_id} merged ({len(partial)} keys)")
        return MergedProfile(
            profile_data=doc.get(Fields.PROFILE_DATA) or {},
            updated_at=doc.get(Fields.UPDATED_AT),
        )
