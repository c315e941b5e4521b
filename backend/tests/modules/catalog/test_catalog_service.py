"""Tests for the catalog service."""

from unittest.mock import MagicMock

import pytest
from bson import ObjectId

from modules.auth.passwords import check_password
from modules.catalog.exceptions import (
    EmptyPatchError,
    EntityNotFoundError,
    ReferencedEntityError,
)
from modules.catalog.interfaces import ICatalogService
from modules.catalog.models import AuthorCreate, AuthorUpdate, RecipeUpdate, Role, UserPatch
from modules.catalog.pagination import Pagination
from modules.catalog.service import CatalogService
from modules.images.depot import ImageDepot

from tests.conftest import make_recipe


@pytest.fixture
def images(tmp_path) -> ImageDepot:
    return ImageDepot(tmp_path / "images")


@pytest.fixture
def service(store, images) -> CatalogService:
    return CatalogService(store, images=images)


def test_implements_interface(service):
    assert isinstance(service, ICatalogService)


class TestUsers:
    @pytest.mark.asyncio
    async def test_list_users(self, service, user_id, admin_id):
        users = await service.list_users(Pagination(page_id=1, page_size=10))
        assert [u.email for u in users] == ["admin@example.com", "cook@example.com"]

    @pytest.mark.asyncio
    async def test_update_user_hashes_password(self, service, store, user_id):
        """A new password should be stored hashed."""
        user = await service.update_user(user_id, UserPatch(password="new-password"))

        stored = store.get_user_by_id(user_id)
        assert stored.password_hash != "new-password"
        assert check_password("new-password", stored.password_hash)
        assert user.id == user_id

    @pytest.mark.asyncio
    async def test_update_user_role(self, service, user_id):
        user = await service.update_user(user_id, UserPatch(role=Role.ADMIN))
        assert user.role == Role.ADMIN

    @pytest.mark.asyncio
    async def test_empty_user_patch(self, service, user_id):
        with pytest.raises(EmptyPatchError):
            await service.update_user(user_id, UserPatch())

    @pytest.mark.asyncio
    async def test_update_missing_user(self, service):
        with pytest.raises(EntityNotFoundError):
            await service.update_user(str(ObjectId()), UserPatch(is_active=True))

    @pytest.mark.asyncio
    async def test_delete_missing_user(self, service):
        with pytest.raises(EntityNotFoundError):
            await service.delete_user(str(ObjectId()))

    @pytest.mark.asyncio
    async def test_delete_referenced_user(self, service, user_id, author_id):
        with pytest.raises(ReferencedEntityError):
            await service.delete_user(user_id)


class TestAuthors:
    @pytest.mark.asyncio
    async def test_create_author_returns_stored_author(self, service, user_id):
        author = await service.create_author(AuthorCreate(name="Nigella", user_id=user_id))
        assert author.name == "Nigella"
        assert author.user_created.id == user_id

    @pytest.mark.asyncio
    async def test_update_author(self, service, author_id):
        author = await service.update_author(author_id, AuthorUpdate(website_url="https://ottolenghi.co.uk"))
        assert author.website_url == "https://ottolenghi.co.uk"
        assert author.first_name == "Yotam"

    @pytest.mark.asyncio
    async def test_empty_author_patch(self, service, author_id):
        with pytest.raises(EmptyPatchError) as exc_info:
            await service.update_author(author_id, AuthorUpdate())
        assert exc_info.value.message == "Missing author patch"

    @pytest.mark.asyncio
    async def test_replacing_image_discards_old(self, service, images, author_id):
        old = images.path_for("ottolenghi.png")
        old.write_bytes(b"png")

        await service.update_author(author_id, AuthorUpdate(image_name="new.png"))

        assert not old.exists()

    @pytest.mark.asyncio
    async def test_delete_author_discards_image(self, service, images, author_id):
        image = images.path_for("ottolenghi.png")
        image.write_bytes(b"png")

        await service.delete_author(author_id)

        assert not image.exists()
        with pytest.raises(EntityNotFoundError):
            await service.get_author(author_id)

    @pytest.mark.asyncio
    async def test_delete_referenced_author_keeps_image(self, service, images, author_id, recipe_id):
        image = images.path_for("ottolenghi.png")
        image.write_bytes(b"png")

        with pytest.raises(ReferencedEntityError):
            await service.delete_author(author_id)

        assert image.exists()


class TestRecipes:
    @pytest.mark.asyncio
    async def test_create_recipe(self, service, user_id, author_id):
        recipe = await service.create_recipe(make_recipe("Falafel", author_id, user_id))
        assert recipe.name == "Falafel"
        assert recipe.author.id == author_id
        assert [s.rank for s in recipe.prep_steps] == [1, 2]

    @pytest.mark.asyncio
    async def test_update_recipe_name_only(self, service, recipe_id):
        before = await service.get_recipe(recipe_id)
        after = await service.update_recipe(recipe_id, RecipeUpdate(name="Smoky hummus"))
        assert after.name == "Smoky hummus"
        assert after.ingredients == before.ingredients
        assert after.image_name == before.image_name

    @pytest.mark.asyncio
    async def test_empty_recipe_patch(self, service, recipe_id):
        with pytest.raises(EmptyPatchError):
            await service.update_recipe(recipe_id, RecipeUpdate(name=None))

    @pytest.mark.asyncio
    async def test_same_image_is_kept(self, service, images, recipe_id):
        image = images.path_for("hummus.png")
        image.write_bytes(b"png")

        await service.update_recipe(recipe_id, RecipeUpdate(image_name="hummus.png"))

        assert image.exists()

    @pytest.mark.asyncio
    async def test_update_missing_recipe(self, service):
        with pytest.raises(EntityNotFoundError):
            await service.update_recipe(str(ObjectId()), RecipeUpdate(name="x"))

    @pytest.mark.asyncio
    async def test_delete_recipe_survives_missing_image(self, store, tmp_path, recipe_id):
        """A failed image cleanup should be reported, not raised."""
        on_error = MagicMock()
        service = CatalogService(store, images=ImageDepot(tmp_path), on_cleanup_error=on_error)

        await service.delete_recipe(recipe_id)

        on_error.assert_called_once()
        name, error = on_error.call_args.args
        assert name == "hummus.png"
        assert isinstance(error, FileNotFoundError)
        with pytest.raises(EntityNotFoundError):
            await service.get_recipe(recipe_id)

    @pytest.mark.asyncio
    async def test_delete_without_depot(self, store, recipe_id):
        service = CatalogService(store)
        await service.delete_recipe(recipe_id)
        with pytest.raises(EntityNotFoundError):
            await service.get_recipe(recipe_id)
