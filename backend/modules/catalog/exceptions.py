"""
Catalog module exceptions.

Raised by the store and the catalog service; the API layer maps the
shared base classes to HTTP status codes.
"""

from typing import Any, Optional

from shared.exceptions import (
    ConflictError,
    ExternalServiceError,
    NotFoundError,
    ValidationError,
)


class InvalidIdentifierError(ValidationError):
    """Raised when an identifier is not a well-formed ObjectId."""

    def __init__(self, entity: str, identifier: Any):
        super().__init__(
            f"Invalid {entity} id: {identifier}",
            code="INVALID_IDENTIFIER",
            details={"entity": entity, "id": str(identifier)},
        )


class InvalidPaginationError(ValidationError):
    """Raised when page_id or page_size is missing or out of range."""

    def __init__(self, reason: str):
        super().__init__(
            f"Invalid pagination: {reason}",
            code="INVALID_PAGINATION",
            details={"reason": reason},
        )


class EmptyPatchError(ValidationError):
    """Raised when a patch request carries no fields to change."""

    def __init__(self, entity: str):
        super().__init__(
            f"Missing {entity} patch",
            code="EMPTY_PATCH",
            details={"entity": entity},
        )


class EntityNotFoundError(NotFoundError):
    """Raised when a direct lookup matches no record."""

    def __init__(self, entity: str, key: str, value: str):
        super().__init__(
            f"Failed to find {entity} with {key} {value}",
            code="ENTITY_NOT_FOUND",
            details={"entity": entity, key: value},
        )


class DuplicateEntityError(ConflictError):
    """Raised when a natural key already exists in its collection."""

    def __init__(self, entity: str, key: str, value: Optional[str] = None):
        message = (
            f"{entity.capitalize()} with {key} {value} already exists"
            if value is not None
            else f"{entity.capitalize()} with this {key} already exists"
        )
        super().__init__(
            message,
            code="DUPLICATE_ENTITY",
            details={"entity": entity, "key": key, "value": value},
        )


class ReferencedEntityError(ConflictError):
    """Raised when a delete is blocked by records still referencing the target."""

    def __init__(self, entity: str, identifier: str, relation: str, count: int):
        super().__init__(
            f"Can't delete {entity} because it is referenced in at least one {relation}",
            code="ENTITY_REFERENCED",
            details={
                "entity": entity,
                "id": identifier,
                "relation": relation,
                "count": count,
            },
        )


class StoreUnavailableError(ExternalServiceError):
    """Raised when the database cannot be reached or an operation times out."""

    def __init__(self, operation: str, original_error: Optional[str] = None):
        super().__init__(
            f"Database operation failed: {operation}",
            service="mongodb",
            code="STORE_UNAVAILABLE",
            details={"operation": operation, "original_error": original_error},
        )
