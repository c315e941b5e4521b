"""
Catalog service implementation.

Wraps the store with the request-level rules the API needs: empty patches
are rejected, missing records become NotFound, patched and created records
are read back, and images that are no longer referenced are removed after
a successful update or delete.
"""

import asyncio
import logging
from typing import Callable, Optional

from modules.auth.passwords import hash_password
from modules.images.depot import CleanupErrorHook, ImageDepot

from .exceptions import EmptyPatchError, EntityNotFoundError
from .interfaces import ICatalogService, IStore
from .models import (
    Author,
    AuthorCreate,
    AuthorUpdate,
    Recipe,
    RecipeCreate,
    RecipeUpdate,
    User,
    UserPatch,
    UserUpdate,
    supplied_fields,
)
from .pagination import Pagination

logger = logging.getLogger(__name__)


class CatalogService(ICatalogService):
    """
    Implementation of the catalog service.

    Store calls block, so each runs in a worker thread.
    """

    def __init__(
        self,
        store: IStore,
        images: Optional[ImageDepot] = None,
        on_cleanup_error: Optional[CleanupErrorHook] = None,
    ):
        self._store = store
        self._images = images
        self._on_cleanup_error = on_cleanup_error

    # -------------------------------------------------------------------------
    # Users
    # -------------------------------------------------------------------------

    async def list_users(self, pagination: Pagination) -> list[User]:
        return await asyncio.to_thread(self._store.get_all_users, pagination)

    async def get_user(self, user_id: str) -> User:
        return await asyncio.to_thread(self._store.get_user_by_id, user_id)

    async def update_user(self, user_id: str, patch: UserPatch) -> User:
        fields = supplied_fields(patch)
        if not fields:
            raise EmptyPatchError("user")

        password = fields.pop("password", None)
        if password is not None:
            fields["password_hash"] = await asyncio.to_thread(hash_password, password)

        await self._apply(self._store.update_user_by_id, "user", user_id, UserUpdate(**fields))
        return await self.get_user(user_id)

    async def delete_user(self, user_id: str) -> None:
        await self._remove(self._store.delete_user_by_id, "user", user_id)

    # -------------------------------------------------------------------------
    # Authors
    # -------------------------------------------------------------------------

    async def list_authors(self, pagination: Pagination) -> list[Author]:
        return await asyncio.to_thread(self._store.get_all_authors, pagination)

    async def get_author(self, author_id: str) -> Author:
        return await asyncio.to_thread(self._store.get_author_by_id, author_id)

    async def create_author(self, author: AuthorCreate) -> Author:
        author_id = await asyncio.to_thread(self._store.create_author, author)
        logger.info("Created author %s (%s)", author_id, author.name)
        return await self.get_author(author_id)

    async def update_author(self, author_id: str, update: AuthorUpdate) -> Author:
        fields = supplied_fields(update)
        if not fields:
            raise EmptyPatchError("author")

        existing = await self.get_author(author_id)
        await self._apply(self._store.update_author_by_id, "author", author_id, update)

        if "image_name" in fields and fields["image_name"] != existing.image_name:
            await self._discard_image(existing.image_name)
        return await self.get_author(author_id)

    async def delete_author(self, author_id: str) -> None:
        existing = await self.get_author(author_id)
        await self._remove(self._store.delete_author_by_id, "author", author_id)
        await self._discard_image(existing.image_name)

    # -------------------------------------------------------------------------
    # Recipes
    # -------------------------------------------------------------------------

    async def list_recipes(self, pagination: Pagination) -> list[Recipe]:
        return await asyncio.to_thread(self._store.get_all_recipes, pagination)

    async def get_recipe(self, recipe_id: str) -> Recipe:
        return await asyncio.to_thread(self._store.get_recipe_by_id, recipe_id)

    async def create_recipe(self, recipe: RecipeCreate) -> Recipe:
        recipe_id = await asyncio.to_thread(self._store.create_recipe, recipe)
        logger.info("Created recipe %s (%s)", recipe_id, recipe.name)
        return await self.get_recipe(recipe_id)

    async def update_recipe(self, recipe_id: str, update: RecipeUpdate) -> Recipe:
        fields = supplied_fields(update)
        if not fields:
            raise EmptyPatchError("recipe")

        existing = await self.get_recipe(recipe_id)
        await self._apply(self._store.update_recipe_by_id, "recipe", recipe_id, update)

        if "image_name" in fields and fields["image_name"] != existing.image_name:
            await self._discard_image(existing.image_name)
        return await self.get_recipe(recipe_id)

    async def delete_recipe(self, recipe_id: str) -> None:
        existing = await self.get_recipe(recipe_id)
        await self._remove(self._store.delete_recipe_by_id, "recipe", recipe_id)
        await self._discard_image(existing.image_name)

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    async def _apply(self, update_fn: Callable[..., int], entity: str, entity_id: str, update) -> None:
        # modifiedAt is always refreshed, so 0 means the record is gone.
        modified = await asyncio.to_thread(update_fn, entity_id, update)
        if modified < 1:
            raise EntityNotFoundError(entity, "id", entity_id)

    async def _remove(self, delete_fn: Callable[[str], int], entity: str, entity_id: str) -> None:
        deleted = await asyncio.to_thread(delete_fn, entity_id)
        if deleted < 1:
            raise EntityNotFoundError(entity, "id", entity_id)
        logger.info("Deleted %s %s", entity, entity_id)

    async def _discard_image(self, image_name: str) -> None:
        if self._images is None or not image_name:
            return
        await asyncio.to_thread(self._images.discard, image_name, self._on_cleanup_error)
