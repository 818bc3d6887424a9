"""
Index management for the users database.
"""
from motor.motor_asyncio import AsyncIOMotorDatabase

from nurture.database.databases.users_db import Collections, Fields


async def create_indexes(db: AsyncIOMotorDatabase) -> None:
    """Create necessary indexes on the users collection."""
    users = db[Collections.USERS]
    # Not unique: provider may briefly deliver a new account before the old one's delete
    await users.create_index(Fields.EMAIL)
    await users.create_index(Fields.RELATIONSHIP_ID, sparse=True)
