"""
User sync service: applies identity events to the users collection.

Each apply is a single write against one document and is safe to repeat:
- created: upsert that only writes when the document does not exist yet
- updated: sets provider-owned fields, never inserts, skips stale events
- deleted: delete that treats a missing document as success
"""
import logging
from datetime import datetime, timezone

from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo.errors import DuplicateKeyError, PyMongoError

from nurture.core.errors import InternalError
from nurture.database.databases.users_db import Collections, Fields
from nurture.models.event import EventKind, WebhookEvent

logger = logging.getLogger("nurture.sync")


class UserSyncService:
    """Writes identity events into the users collection."""

    def __init__(self, db: AsyncIOMotorDatabase):
        """Initialize with the users database."""
        self.db = db
        self.users = db[Collections.USERS]

    async def apply(self, event: WebhookEvent) -> bool:
        """
        Apply one event.

        Returns:
            True if the document changed (inserted, updated or deleted)

        Raises:
            InternalError: If the storage write fails
        """
        handlers = {
            EventKind.CREATED: self.apply_created,
            EventKind.UPDATED: self.apply_updated,
            EventKind.DELETED: self.apply_deleted,
        }
        try:
            return await handlers[event.kind](event)
        except PyMongoError as e:
            logger.error(f"Failed to apply {event.raw_type} for {event.subject_id}: {e}")
            raise InternalError("Failed to sync user") from e

    async def apply_created(self, event: WebhookEvent) -> bool:
        now = datetime.now(timezone.utc)
        attrs = event.attributes
        try:
            result = await self.users.update_one(
                {Fields.ID: event.subject_id},
                {
                    "$setOnInsert": {
                        Fields.EMAIL: attrs.email,
                        Fields.FIRST_NAME: attrs.first_name,
                        Fields.LAST_NAME: attrs.last_name,
                        Fields.RELATIONSHIP_ID: None,
                        Fields.PARTNER_ID: None,
                        Fields.PROFILE_DATA: {},
                        Fields.PROVIDER_UPDATED_AT: attrs.provider_updated_at,
                        Fields.CREATED_AT: now,
                        Fields.UPDATED_AT: now,
                    },
                },
                upsert=True,
            )
        except DuplicateKeyError:
            # Lost an upsert race with a concurrent delivery of the same event
            return False
        if result.upserted_id is None:
            logger.info(f"User {event.subject_id} already exists, created event ignored")
            return False
        logger.info(f"User created: {event.subject_id} <{attrs.email}>")
        return True

    async def apply_updated(self, event: WebhookEvent) -> bool:
        attrs = event.attributes
        query: dict = {Fields.ID: event.subject_id}
        if attrs.provider_updated_at is not None:
            # Last write wins on the provider's own clock
            query["$or"] = [
                {Fields.PROVIDER_UPDATED_AT: None},
                {Fields.PROVIDER_UPDATED_AT: {"$lte": attrs.provider_updated_at}},
            ]

        changes = {
            Fields.EMAIL: attrs.email,
            Fields.FIRST_NAME: attrs.first_name,
            Fields.LAST_NAME: attrs.last_name,
            Fields.UPDATED_AT: datetime.now(timezone.utc),
        }
        if attrs.provider_updated_at is not None:
            changes[Fields.PROVIDER_UPDATED_AT] = attrs.provider_updated_at

        result = await self.users.update_one(query, {"$set": changes})
        if result.matched_count == 0:
            logger.warning(
                f"Update for {event.subject_id} skipped: record missing or event is stale"
            )
            return False
        logger.info(f"User updated: {event.subject_id} <{attrs.email}>")
        return True

    async def apply_deleted(self, event: WebhookEvent) -> bool:
        result = await self.users.delete_one({Fields.ID: event.subject_id})
        if result.deleted_count == 0:
            logger.info(f"User {event.subject_id} already absent")
            return False
        logger.info(f"User deleted: {event.subject_id}")
        return True
