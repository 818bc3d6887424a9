"""
Process-scoped service container.

Built once by the application lifespan and read by route dependencies
from ``app.state.container``.
"""
import logging
from dataclasses import dataclass
from typing import Optional

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase
from redis.asyncio import Redis

from nurture.config import Settings
from nurture.core.rate_limit import RateLimiter
from nurture.core.webhook_signature import WebhookVerifier
from nurture.database.connections import (
    close_connections,
    create_mongo_client,
    create_redis_client,
    get_database,
)
from nurture.services.auth_gateway import AuthGateway
from nurture.services.clerk_client import ClerkClient
from nurture.services.profile_service import ProfileService
from nurture.services.session_verifier import SessionVerifier
from nurture.services.user_sync_service import UserSyncService
from nurture.services.webhook_dispatcher import WebhookDispatcher

logger = logging.getLogger("nurture.container")


@dataclass
class ServiceContainer:
    """Long-lived clients and the services built on them."""
    settings: Settings
    db: AsyncIOMotorDatabase
    redis: Redis
    clerk: ClerkClient
    profile_service: ProfileService
    sync_service: UserSyncService
    auth_gateway: AuthGateway
    session_verifier: SessionVerifier
    rate_limiter: RateLimiter
    webhook_dispatcher: Optional[WebhookDispatcher]
    mongo_client: Optional[AsyncIOMotorClient] = None

    @classmethod
    def build(
        cls,
        settings: Settings,
        db: AsyncIOMotorDatabase,
        redis: Redis,
        clerk: ClerkClient,
        mongo_client: Optional[AsyncIOMotorClient] = None,
    ) -> "ServiceContainer":
        """Wire services from already-created clients."""
        sync_service = UserSyncService(db)

        dispatcher = None
        if settings.clerk_webhook_secret:
            try:
                verifier = WebhookVerifier(
                    settings.clerk_webhook_secret,
                    tolerance_seconds=settings.webhook_tolerance_seconds,
                )
            except ValueError as e:
                logger.error(f"CLERK_WEBHOOK_SECRET is unusable ({e}); webhook deliveries will be refused")
            else:
                dispatcher = WebhookDispatcher(verifier, sync_service)
        else:
            logger.warning("CLERK_WEBHOOK_SECRET is not set; webhook deliveries will be refused")

        return cls(
            settings=settings,
            db=db,
            redis=redis,
            clerk=clerk,
            profile_service=ProfileService(db),
            sync_service=sync_service,
            auth_gateway=AuthGateway(clerk, settings),
            session_verifier=SessionVerifier(settings, clerk),
            rate_limiter=RateLimiter(redis, settings.rate_limit_window_seconds),
            webhook_dispatcher=dispatcher,
            mongo_client=mongo_client,
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> "ServiceContainer":
        """Create clients from settings and wire the services."""
        mongo_client = create_mongo_client(settings)
        return cls.build(
            settings,
            db=get_database(mongo_client, settings),
            redis=create_redis_client(settings),
            clerk=ClerkClient(settings),
            mongo_client=mongo_client,
        )

    async def close(self) -> None:
        """Release every client."""
        await self.clerk.close()
        await close_connections(self.mongo_client, self.redis)
