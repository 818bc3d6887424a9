"""
Connection factories for MongoDB and Redis.

Clients are created once by the application lifespan and owned by the
service container; nothing here is cached at module level.
"""
from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase
from redis.asyncio import Redis

from nurture.config import Settings


def create_mongo_client(settings: Settings) -> AsyncIOMotorClient:
    """Create a MongoDB client from settings."""
    return AsyncIOMotorClient(settings.mongo_uri)


def create_redis_client(settings: Settings) -> Redis:
    """Create a Redis client from settings."""
    return Redis(
        host=settings.redis_host,
        port=settings.redis_port,
        decode_responses=True,
    )


def get_database(client: AsyncIOMotorClient, settings: Settings) -> AsyncIOMotorDatabase:
    """Get the users database from a client."""
    return client[settings.mongo_db_name]


async def close_connections(mongo_client: AsyncIOMotorClient | None, redis: Redis | None) -> None:
    """Close database connections."""
    if mongo_client is not None:
        mongo_client.close()
    if redis is not None:
        await redis.aclose()
