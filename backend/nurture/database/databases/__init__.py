"""
Database definitions.
"""
from nurture.database.databases import users_db

__all__ = ["users_db"]
