"""
Database client factory for MongoDB.

Provides a single cached client for the whole process. pymongo clients
are thread-safe and pool their connections, so every store shares it.
"""

import logging
from typing import Optional

from pymongo import MongoClient
from pymongo.database import Database

from .config import get_settings

logger = logging.getLogger(__name__)

# Module-level client cache
_client: Optional[MongoClient] = None


def get_mongo_client() -> MongoClient:
    """
    Get the shared MongoDB client.

    Credentials are only passed when a user is configured, so a local
    unauthenticated server works with just MONGO_URI.

    Returns:
        MongoClient configured from settings
    """
    global _client

    if _client is None:
        settings = get_settings()
        if not settings.mongo_uri or not settings.mongo_db_name:
            raise RuntimeError(
                "MongoDB configuration missing. "
                "Set MONGO_URI and MONGO_DB_NAME environment variables."
            )

        options = {
            "tz_aware": True,
            "serverSelectionTimeoutMS": int(settings.db_operation_timeout * 1000),
        }
        if settings.mongo_user:
            options["username"] = settings.mongo_user
            options["password"] = settings.mongo_password
            options["authSource"] = settings.mongo_auth_source or settings.mongo_db_name

        _client = MongoClient(settings.mongo_uri, **options)
        logger.info("Created MongoDB client for database %s", settings.mongo_db_name)

    return _client


def get_database() -> Database:
    """
    Get the configured catalog database.

    Returns:
        pymongo Database named by MONGO_DB_NAME
    """
    return get_mongo_client()[get_settings().mongo_db_name]


def reset_client_cache() -> None:
    """
    Close and forget the cached client.

    Useful for testing or when configuration changes.
    """
    global _client
    if _client is not None:
        _client.close()
    _client = None
