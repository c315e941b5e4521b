"""
Author and recipe API endpoints.

All routes require a bearer token. New authors and recipes are owned by
the caller.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query

from api.dependencies import get_catalog_service
from api.middleware.auth import RequireAuth, get_current_payload
from api.models.catalog import CreateAuthorRequest, CreateRecipeRequest, PatchRecipeRequest
from modules.auth.models import TokenPayload

from .interfaces import ICatalogService
from .models import Author, AuthorUpdate, Recipe
from .pagination import MAX_PAGE_SIZE, Pagination

authors_router = APIRouter(dependencies=[RequireAuth])
recipes_router = APIRouter(dependencies=[RequireAuth])


def get_pagination(
    page_id: Optional[int] = Query(default=None, description="Page number (1-indexed)"),
    page_size: Optional[int] = Query(default=None, description=f"Items per page, at most {MAX_PAGE_SIZE}"),
) -> Pagination:
    """Dependency that parses page_id/page_size, raising InvalidPaginationError."""
    return Pagination.parse(page_id, page_size)


# -----------------------------------------------------------------------------
# Authors
# -----------------------------------------------------------------------------


@authors_router.get("", response_model=list[Author])
async def list_authors(
    pagination: Pagination = Depends(get_pagination),
    service: ICatalogService = Depends(get_catalog_service),
) -> list[Author]:
    """List authors sorted by name, each with its owner embedded."""
    return await service.list_authors(pagination)


@authors_router.post("", response_model=Author, status_code=201)
async def create_author(
    request: CreateAuthorRequest,
    payload: TokenPayload = Depends(get_current_payload),
    service: ICatalogService = Depends(get_catalog_service),
) -> Author:
    """
    Create an author owned by the caller.

    Returns 409 if an author with the same name exists.
    """
    return await service.create_author(request.for_user(payload.subject))


@authors_router.get("/{author_id}", response_model=Author)
async def get_author(
    author_id: str,
    service: ICatalogService = Depends(get_catalog_service),
) -> Author:
    return await service.get_author(author_id)


@authors_router.patch("/{author_id}", response_model=Author)
async def patch_author(
    author_id: str,
    update: AuthorUpdate,
    service: ICatalogService = Depends(get_catalog_service),
) -> Author:
    """
    Apply a partial update. Only supplied fields change.

    A replaced image is removed from the depot.
    """
    return await service.update_author(author_id, update)


@authors_router.delete("/{author_id}", status_code=204)
async def delete_author(
    author_id: str,
    service: ICatalogService = Depends(get_catalog_service),
) -> None:
    """Delete an author. Fails with 409 while recipes reference it."""
    await service.delete_author(author_id)


# -----------------------------------------------------------------------------
# Recipes
# -----------------------------------------------------------------------------


@recipes_router.get("", response_model=list[Recipe])
async def list_recipes(
    pagination: Pagination = Depends(get_pagination),
    service: ICatalogService = Depends(get_catalog_service),
) -> list[Recipe]:
    """List recipes sorted by name, each with its author and creator embedded."""
    return await service.list_recipes(pagination)


@recipes_router.post("", response_model=Recipe, status_code=201)
async def create_recipe(
    request: CreateRecipeRequest,
    payload: TokenPayload = Depends(get_current_payload),
    service: ICatalogService = Depends(get_catalog_service),
) -> Recipe:
    """
    Create a recipe credited to author_id and created by the caller.

    Prep steps are renumbered 1..n in the order given.
    """
    return await service.create_recipe(request.for_user(payload.subject))


@recipes_router.get("/{recipe_id}", response_model=Recipe)
async def get_recipe(
    recipe_id: str,
    service: ICatalogService = Depends(get_catalog_service),
) -> Recipe:
    return await service.get_recipe(recipe_id)


@recipes_router.patch("/{recipe_id}", response_model=Recipe)
async def patch_recipe(
    recipe_id: str,
    request: PatchRecipeRequest,
    service: ICatalogService = Depends(get_catalog_service),
) -> Recipe:
    """
    Apply a partial update. Only supplied fields change, and the creating
    user cannot be reassigned.

    A replaced image is removed from the depot.
    """
    return await service.update_recipe(recipe_id, request.to_update())


@recipes_router.delete("/{recipe_id}", status_code=204)
async def delete_recipe(
    recipe_id: str,
    service: ICatalogService = Depends(get_catalog_service),
) -> None:
    """Delete a recipe and remove its image."""
    await service.delete_recipe(recipe_id)
