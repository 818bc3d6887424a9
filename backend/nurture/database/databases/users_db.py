"""
Users database configuration.
Stores the identity records synced from Clerk.
"""


class Collections:
    """Collection names in the users database."""
    USERS = "users"


class Fields:
    """Field names of a user document."""
    ID = "_id"
    EMAIL = "email"
    FIRST_NAME = "first_name"
    LAST_NAME = "last_name"
    RELATIONSHIP_ID = "relationship_id"
    PARTNER_ID = "partner_id"
    PROFILE_DATA = "profile_data"
    PROVIDER_UPDATED_AT = "provider_updated_at"
    CREATED_AT = "created_at"
    UPDATED_AT = "updated_at"
