"""
Error taxonomy shared by every layer of the catalog backend.

Store, token and service code raise subclasses of these families; the API
maps each family to one HTTP status in a single exception handler:

    ValidationError       malformed ids, bad pagination, empty patches
    NotFoundError         direct lookups that match nothing
    ConflictError         duplicate natural keys, referenced deletes
    AuthenticationError   missing, malformed, tampered or expired tokens
    AuthorizationError    authenticated caller lacks permission
    ExternalServiceError  database unreachable or timed out
"""

from typing import Any, Optional


class CatalogError(Exception):
    """
    Root of the taxonomy.

    Attributes:
        message: Human readable reason, also the str() of the exception
        code: Stable machine readable code, defaults to the class name
        details: Structured context returned to API clients
    """

    # Set on families a caller may retry unchanged
    transient = False

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code or type(self).__name__
        self.details = dict(details) if details else {}

    def to_dict(self) -> dict[str, Any]:
        """Body of an error response."""
        return {"error": self.code, "message": self.message, "details": self.details}

    def __repr__(self) -> str:
        return f"{type(self).__name__}(code={self.code!r}, message={self.message!r})"


class ValidationError(CatalogError):
    """The request itself is malformed."""


class NotFoundError(CatalogError):
    """No record matches."""


class ConflictError(CatalogError):
    """The request contradicts stored data (uniqueness or references)."""


class AuthenticationError(CatalogError):
    """The caller could not be identified."""


class AuthorizationError(CatalogError):
    """The caller is identified but not allowed."""


class ExternalServiceError(CatalogError):
    """A backing service failed. The service name is added to details."""

    transient = True

    def __init__(
        self,
        message: str,
        service: str,
        code: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ):
        super().__init__(message, code, details)
        self.service = service
        self.details["service"] = service
