"""
Catalog module.

Stores users, authors, recipes and login sessions in MongoDB, and exposes
the catalog operations used by the API.

Public API:
- IStore: Persistence interface (MongoStore is the MongoDB adapter)
- ICatalogService: Interface for catalog operations
- Pagination: Page selection for list operations
- Models: User, Author, Recipe, Session and their create/update inputs
- Catalog exceptions: EntityNotFoundError, DuplicateEntityError, etc.
"""

from .interfaces import ICatalogService, IStore
from .models import (
    AmountUnit,
    Author,
    AuthorCreate,
    AuthorSnapshot,
    AuthorUpdate,
    Category,
    Ingredient,
    PrepStep,
    Recipe,
    RecipeCreate,
    RecipeUpdate,
    Role,
    Session,
    SessionCreate,
    User,
    UserCreate,
    UserPatch,
    UserSnapshot,
    UserUpdate,
)
from .pagination import MAX_PAGE_SIZE, Pagination
from .exceptions import (
    InvalidIdentifierError,
    InvalidPaginationError,
    EmptyPatchError,
    EntityNotFoundError,
    DuplicateEntityError,
    ReferencedEntityError,
    StoreUnavailableError,
)

__all__ = [
    # Interfaces
    "IStore",
    "ICatalogService",
    # Pagination
    "Pagination",
    "MAX_PAGE_SIZE",
    # Models
    "AmountUnit",
    "Author",
    "AuthorCreate",
    "AuthorSnapshot",
    "AuthorUpdate",
    "Category",
    "Ingredient",
    "PrepStep",
    "Recipe",
    "RecipeCreate",
    "RecipeUpdate",
    "Role",
    "Session",
    "SessionCreate",
    "User",
    "UserCreate",
    "UserPatch",
    "UserSnapshot",
    "UserUpdate",
    # Exceptions
    "InvalidIdentifierError",
    "InvalidPaginationError",
    "EmptyPatchError",
    "EntityNotFoundError",
    "DuplicateEntityError",
    "ReferencedEntityError",
    "StoreUnavailableError",
]
