"""
Application configuration loaded from environment variables.
"""
from functools import lru_cache
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # Server
    host: str = "0.0.0.0"
    port: int = 3000
    environment: str = "development"
    log_level: str = "INFO"
    api_prefix: str = "/api"
    frontend_url: str = "*"

    # MongoDB
    mongo_uri: str = "mongodb://mongodb:27017"
    mongo_db_name: str = "nurture_db"

    # Redis
    redis_host: str = "redis"
    redis_port: int = 6379

    # Clerk backend API
    clerk_secret_key: str = ""
    clerk_api_url: str = "https://api.clerk.com/v1"
    clerk_webhook_secret: Optional[str] = None
    clerk_jwt_key: Optional[str] = Field(
        default=None,
        description="PEM public key for networkless session token verification",
    )
    clerk_authorized_parties: list[str] = Field(default_factory=list)

    # Sessions
    session_token_algorithms: list[str] = Field(default_factory=lambda: ["RS256"])
    session_expires_in_seconds: int = 3600
    session_token_template: Optional[str] = None

    # Webhooks
    webhook_tolerance_seconds: int = 300

    # Rate limiting
    signin_rate_limit_attempts: int = 5
    signup_rate_limit_attempts: int = 10
    rate_limit_window_seconds: int = 60

    @property
    def is_development(self) -> bool:
        return self.environment.lower() == "development"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
