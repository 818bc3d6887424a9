"""
API Routers module.
"""
from nurture.routers import auth, health, users

__all__ = ["auth", "health", "users"]
