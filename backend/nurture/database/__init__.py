"""
Database module - MongoDB and Redis connections and database definitions.
"""
from nurture.database.connections import (
    close_connections,
    create_mongo_client,
    create_redis_client,
    get_database,
)
from nurture.database.databases import users_db
from nurture.database.registry import create_indexes

__all__ = [
    "close_connections",
    "create_mongo_client",
    "create_redis_client",
    "get_database",
    "create_indexes",
    "users_db",
]
