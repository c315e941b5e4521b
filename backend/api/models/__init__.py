"""API models package."""

from .catalog import CreateAuthorRequest, CreateRecipeRequest, PatchRecipeRequest
from .errors import ErrorResponse

__all__ = [
    "CreateAuthorRequest",
    "CreateRecipeRequest",
    "PatchRecipeRequest",
    "ErrorResponse",
]
