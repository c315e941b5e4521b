"""
Catalog module interface.

Other modules and the API layer depend on IStore, not on MongoStore.
Tests substitute an in-memory implementation of the same protocol.
"""

from typing import Protocol, runtime_checkable

from .models import (
    Author,
    AuthorCreate,
    AuthorUpdate,
    Recipe,
    RecipeCreate,
    RecipeUpdate,
    Session,
    SessionCreate,
    User,
    UserCreate,
    UserPatch,
    UserUpdate,
)
from .pagination import Pagination


@runtime_checkable
class IStore(Protocol):
    """
    Persistence gateway for users, authors, recipes and sessions.

    Conventions shared by every entity:

    - ``create_*`` returns the new id and raises DuplicateEntityError when
      the natural key (email or name) is taken.
    - ``get_all_*`` returns one page sorted ascending by natural key.
    - ``get_*_by_id`` raises InvalidIdentifierError for a malformed id and
      EntityNotFoundError when nothing matches.
    - ``update_*_by_id`` applies only supplied fields, refreshes
      ``modified_at`` and returns the modified count (0 when the id is
      well-formed but absent).
    - ``delete_*_by_id`` raises ReferencedEntityError while other records
      reference the target, else returns the deleted count (0 or 1).
    - Database failures raise StoreUnavailableError.
    """

    # Users

    def create_user(self, user: UserCreate) -> str:
        ...

    def get_all_users(self, pagination: Pagination) -> list[User]:
        ...

    def get_user_by_email(self, email: str) -> User:
        ...

    def get_user_by_id(self, user_id: str) -> User:
        ...

    def update_user_by_id(self, user_id: str, update: UserUpdate) -> int:
        ...

    def delete_user_by_id(self, user_id: str) -> int:
        ...

    # Authors

    def create_author(self, author: AuthorCreate) -> str:
        ...

    def get_all_authors(self, pagination: Pagination) -> list[Author]:
        ...

    def get_author_by_id(self, author_id: str) -> Author:
        ...

    def update_author_by_id(self, author_id: str, update: AuthorUpdate) -> int:
        ...

    def delete_author_by_id(self, author_id: str) -> int:
        ...

    # Recipes

    def create_recipe(self, recipe: RecipeCreate) -> str:
        ...

    def get_all_recipes(self, pagination: Pagination) -> list[Recipe]:
        ...

    def get_recipe_by_id(self, recipe_id: str) -> Recipe:
        ...

    def update_recipe_by_id(self, recipe_id: str, update: RecipeUpdate) -> int:
        ...

    def delete_recipe_by_id(self, recipe_id: str) -> int:
        ...

    # Sessions

    def create_session(self, session: SessionCreate) -> str:
        ...

    def get_session_by_id(self, session_id: str) -> Session:
        ...


@runtime_checkable
class ICatalogService(Protocol):
    """
    Interface for catalog operations exposed to the API layer.

    Updates and creates return the record as stored afterwards. Updates
    and deletes of an absent record raise EntityNotFoundError, and an
    update with no supplied fields raises EmptyPatchError. Images that
    stop being referenced are removed on a best-effort basis.
    """

    async def list_users(self, pagination: Pagination) -> list[User]:
        ...

    async def get_user(self, user_id: str) -> User:
        ...

    async def update_user(self, user_id: str, patch: UserPatch) -> User:
        """Apply a user patch. A supplied password is hashed before storing."""
        ...

    async def delete_user(self, user_id: str) -> None:
        ...

    async def list_authors(self, pagination: Pagination) -> list[Author]:
        ...

    async def get_author(self, author_id: str) -> Author:
        ...

    async def create_author(self, author: AuthorCreate) -> Author:
        ...

    async def update_author(self, author_id: str, update: AuthorUpdate) -> Author:
        ...

    async def delete_author(self, author_id: str) -> None:
        ...

    async def list_recipes(self, pagination: Pagination) -> list[Recipe]:
        ...

    async def get_recipe(self, recipe_id: str) -> Recipe:
        ...

    async def create_recipe(self, recipe: RecipeCreate) -> Recipe:
        ...

    async def update_recipe(self, recipe_id: str, update: RecipeUpdate) -> Recipe:
        ...

    async def delete_recipe(self, recipe_id: str) -> None:
        ...
