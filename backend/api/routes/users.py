"""
User account endpoints.

Every route requires a bearer token. Changing or deleting an account is
limited to its owner and to admins, and only admins may change a role or
activate an account.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query

from modules.auth.models import TokenPayload
from modules.catalog.interfaces import ICatalogService
from modules.catalog.models import Role, User, UserPatch, supplied_fields
from modules.catalog.pagination import MAX_PAGE_SIZE, Pagination
from shared.exceptions import AuthorizationError

from ..dependencies import get_catalog_service
from ..middleware.auth import RequireAuth, get_current_payload

router = APIRouter(dependencies=[RequireAuth])

# Patch fields only an admin may set
ADMIN_FIELDS = {"role", "is_active"}


async def ensure_allowed(
    user_id: str,
    payload: TokenPayload,
    service: ICatalogService,
    patch: Optional[UserPatch] = None,
) -> None:
    """
    Check that the caller may modify user_id.

    Raises:
        AuthorizationError: If the caller is not allowed
    """
    privileged = patch is not None and bool(ADMIN_FIELDS & supplied_fields(patch).keys())
    if payload.subject == user_id and not privileged:
        return

    caller = await service.get_user(payload.subject)
    if caller.role != Role.ADMIN:
        raise AuthorizationError(
            "Only the account owner or an admin can modify this user",
            code="FORBIDDEN",
            details={"user_id": user_id},
        )


@router.get("", response_model=list[User])
async def list_users(
    page_id: Optional[int] = Query(default=None, description="Page number (1-indexed)"),
    page_size: Optional[int] = Query(default=None, description=f"Items per page, at most {MAX_PAGE_SIZE}"),
    service: ICatalogService = Depends(get_catalog_service),
) -> list[User]:
    """List users sorted by email."""
    return await service.list_users(Pagination.parse(page_id, page_size))


@router.get("/me", response_model=User)
async def get_current_user(
    payload: TokenPayload = Depends(get_current_payload),
    service: ICatalogService = Depends(get_catalog_service),
) -> User:
    """Get the account the bearer token was issued to."""
    return await service.get_user(payload.subject)


@router.get("/{user_id}", response_model=User)
async def get_user(
    user_id: str,
    service: ICatalogService = Depends(get_catalog_service),
) -> User:
    return await service.get_user(user_id)


@router.patch("/{user_id}", response_model=User)
async def patch_user(
    user_id: str,
    patch: UserPatch,
    payload: TokenPayload = Depends(get_current_payload),
    service: ICatalogService = Depends(get_catalog_service),
) -> User:
    """
    Apply a partial update. A new password is hashed before it is stored.
    """
    await ensure_allowed(user_id, payload, service, patch)
    return await service.update_user(user_id, patch)


@router.delete("/{user_id}", status_code=204)
async def delete_user(
    user_id: str,
    payload: TokenPayload = Depends(get_current_payload),
    service: ICatalogService = Depends(get_catalog_service),
) -> None:
    """
    Delete a user. Fails with 409 while authors or recipes reference it.
    """
    await ensure_allowed(user_id, payload, service)
    await service.delete_user(user_id)
