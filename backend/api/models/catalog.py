"""
Request bodies for author and recipe creation and recipe updates.

The owning user is taken from the caller's token, so these carry every
create or update field except user_id.
"""

from typing import Optional

from pydantic import BaseModel, Field

from modules.catalog.models import (
    AuthorCreate,
    Category,
    Ingredient,
    PrepStep,
    RecipeCreate,
    RecipeUpdate,
)


class CreateAuthorRequest(BaseModel):
    """Request to create an author."""

    name: str = Field(..., min_length=1)
    first_name: str = ""
    last_name: str = ""
    website_url: str = ""
    instagram_url: str = ""
    youtube_url: str = ""
    image_name: str = ""

    def for_user(self, user_id: str) -> AuthorCreate:
        return AuthorCreate(**self.model_dump(), user_id=user_id)


class CreateRecipeRequest(BaseModel):
    """Request to create a recipe."""

    name: str = Field(..., min_length=1)
    image_name: str = ""
    recipe_url: str = ""
    time_m: int = Field(default=0, ge=0)
    category: Category
    ingredients: list[Ingredient] = Field(default_factory=list)
    prep_steps: list[PrepStep] = Field(default_factory=list)
    author_id: str

    def for_user(self, user_id: str) -> RecipeCreate:
        return RecipeCreate(**self.model_dump(), user_id=user_id)


class PatchRecipeRequest(BaseModel):
    """Partial update of a recipe. A user_id in the body is ignored."""

    name: Optional[str] = Field(None, min_length=1)
    image_name: Optional[str] = None
    recipe_url: Optional[str] = None
    time_m: Optional[int] = Field(None, ge=0)
    category: Optional[Category] = None
    ingredients: Optional[list[Ingredient]] = None
    prep_steps: Optional[list[PrepStep]] = None
    author_id: Optional[str] = None

    def to_update(self) -> RecipeUpdate:
        # exclude_unset keeps explicit values, including zeros, marked as supplied
        return RecipeUpdate(**self.model_dump(exclude_unset=True))
