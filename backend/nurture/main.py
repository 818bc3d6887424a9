"""
Nurture Backend - FastAPI Application

Keeps MongoDB user records in sync with Clerk and serves profile endpoints.
"""
import logging
import time
from contextlib import asynccontextmanager
from typing import Optional

import uvicorn
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from nurture import __version__
from nurture.config import Settings, get_settings
from nurture.container import ServiceContainer
from nurture.core.error_handlers import register_exception_handlers
from nurture.core.logging_config import configure_logging
from nurture.database.registry import create_indexes
from nurture.routers import auth, health, users

logger = logging.getLogger("nurture")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager.

    Startup:
    - Build the service container (unless one was injected)
    - Create indexes

    Shutdown:
    - Close the clients the lifespan created
    """
    settings: Settings = app.state.settings
    owns_container = getattr(app.state, "container", None) is None

    logger.info("Starting up Nurture backend...")
    if owns_container:
        app.state.container = ServiceContainer.from_settings(settings)
        try:
            await create_indexes(app.state.container.db)
            logger.info("✓ Database indexes created")
        except Exception as e:
            logger.warning(f"⚠ Database initialization warning: {e}")

    yield

    logger.info("Shutting down Nurture backend...")
    if owns_container:
        await app.state.container.close()
        app.state.container = None
        logger.info("✓ Connections closed")


def create_app(
    settings: Optional[Settings] = None,
    container: Optional[ServiceContainer] = None,
) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        settings: Settings to use (defaults to environment)
        container: Pre-built services, used instead of connecting at startup
    """
    settings = settings or (container.settings if container else get_settings())
    configure_logging(settings)

    app = FastAPI(
        title="Nurture API",
        description="""
## Nurture Backend API

Syncs Clerk users into MongoDB and serves profile data.

### Authentication
Protected endpoints require a Clerk session token:
```
Authorization: Bearer <token>
```

### Webhooks
Clerk delivers signed `user.created`, `user.updated` and `user.deleted`
events to `POST /auth/webhook`.
        """,
        version=__version__,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.container = container

    app.add_middleware(
        CORSMiddleware,
        allow_origins=[settings.frontend_url],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    if settings.is_development:
        @app.middleware("http")
        async def log_requests(request: Request, call_next):
            started = time.perf_counter()
            response = await call_next(request)
            elapsed_ms = (time.perf_counter() - started) * 1000
            logger.debug(
                f"{request.method} {request.url.path} -> {response.status_code} ({elapsed_ms:.1f} ms)"
            )
            return response

    register_exception_handlers(app, settings)

    # Routes are served at the root and under the API prefix
    app.include_router(health.router)
    app.include_router(auth.router)
    app.include_router(users.router)
    if settings.api_prefix:
        app.include_router(auth.router, prefix=settings.api_prefix)
        app.include_router(users.router, prefix=settings.api_prefix)

    @app.get("/", tags=["Root"])
    async def root():
        """Root endpoint with API information."""
        return {
            "name": "Nurture API",
            "version": __version__,
            "docs": "/docs",
            "health": "/health",
        }

    return app


def run() -> None:
    """Serve the API with uvicorn on the configured host and port."""
    settings = get_settings()
    logger.info(f"Nurture backend starting on port {settings.port} ({settings.environment})")
    uvicorn.run(
        "nurture.main:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


app = create_app()


if __name__ == "__main__":
    run()
