"""
Infrastructure used by every feature module: settings, the MongoDB client,
the error taxonomy and the repository base class. No catalog logic.
"""

from .config import Settings, get_settings
from .database import get_database, get_mongo_client, reset_client_cache
from .exceptions import (
    CatalogError,
    NotFoundError,
    ValidationError,
    ConflictError,
    AuthenticationError,
    AuthorizationError,
    ExternalServiceError,
)

__all__ = [
    "Settings",
    "get_settings",
    "get_database",
    "get_mongo_client",
    "reset_client_cache",
    "CatalogError",
    "NotFoundError",
    "ValidationError",
    "ConflictError",
    "AuthenticationError",
    "AuthorizationError",
    "ExternalServiceError",
]
