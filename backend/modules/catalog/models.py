"""
Catalog module data models.

Input models (``*Create`` / ``*Update``) are what callers hand to the store;
read models (``User``, ``Author``, ``Recipe``, ``Session``) are what the store
returns. Read models embed snapshots of related records instead of raw
foreign ids.

Update models carry only optional fields. A field counts as supplied when the
caller set it explicitly (pydantic's ``model_fields_set``) and it is not
None, so explicit zero values such as ``time_m=0`` or ``is_active=False``
are applied rather than ignored.
"""

from datetime import datetime
from enum import Enum
from typing import Optional
from pydantic import BaseModel, EmailStr, Field


class Role(str, Enum):
    """User role."""

    USER = "user"
    ADMIN = "admin"


class Category(str, Enum):
    """Recipe category."""

    BREAKFAST = "breakfast"
    MAIN = "main"
    DESSERT = "dessert"
    SMOOTHIE = "smoothie"
    BABY = "baby"
    DRINK = "drink"


class AmountUnit(str, Enum):
    """Unit of an ingredient amount."""

    MILLILITERS = "ml"
    LITERS = "l"
    MILLIGRAMS = "mg"
    GRAMS = "g"
    TABLESPOON = "tbsp"
    TEASPOON = "tsp"
    PIECE = "piece"


class Ingredient(BaseModel):
    """One line of a recipe's ingredient list."""

    name: str = Field(..., min_length=1)
    amount: float = Field(..., ge=0)
    unit: AmountUnit


class PrepStep(BaseModel):
    """One preparation step. Rank is 1-based."""

    rank: int = Field(default=0, ge=0, description="Position in the step list")
    description: str = Field(..., min_length=1)


# -----------------------------------------------------------------------------
# Embedded snapshots
# -----------------------------------------------------------------------------


class UserSnapshot(BaseModel):
    """Owner snapshot embedded in authors, recipes and sessions."""

    id: str
    email: str

    model_config = {"frozen": True}


class AuthorSnapshot(BaseModel):
    """Full author profile embedded in recipes."""

    id: str
    name: str
    first_name: str = ""
    last_name: str = ""
    website_url: str = ""
    instagram_url: str = ""
    youtube_url: str = ""
    image_name: str = ""

    model_config = {"frozen": True}


# -----------------------------------------------------------------------------
# Users
# -----------------------------------------------------------------------------


class UserCreate(BaseModel):
    """Data for a new user. The password must already be hashed."""

    email: EmailStr = Field(..., description="Unique login email")
    password_hash: str = Field(..., min_length=1, description="bcrypt hash")
    role: Role = Field(default=Role.USER)
    is_active: bool = Field(default=False)


class UserUpdate(BaseModel):
    """Partial patch for a user."""

    email: Optional[EmailStr] = None
    password_hash: Optional[str] = None
    role: Optional[Role] = None
    is_active: Optional[bool] = None


class UserPatch(BaseModel):
    """Partial patch for a user as submitted by a client, with a plaintext password."""

    email: Optional[EmailStr] = None
    password: Optional[str] = Field(None, min_length=6, max_length=72)
    role: Optional[Role] = None
    is_active: Optional[bool] = None


class User(BaseModel):
    """Stored user."""

    id: str
    email: str
    password_hash: str = Field(default="", exclude=True)
    role: Role = Role.USER
    is_active: bool = False
    created_at: datetime
    modified_at: datetime


# -----------------------------------------------------------------------------
# Authors
# -----------------------------------------------------------------------------


class AuthorCreate(BaseModel):
    """Data for a new author."""

    name: str = Field(..., min_length=1, description="Unique display name")
    first_name: str = ""
    last_name: str = ""
    website_url: str = ""
    instagram_url: str = ""
    youtube_url: str = ""
    image_name: str = ""
    user_id: str = Field(..., description="ID of the owning user")


class AuthorUpdate(BaseModel):
    """Partial patch for an author."""

    name: Optional[str] = Field(None, min_length=1)
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    website_url: Optional[str] = None
    instagram_url: Optional[str] = None
    youtube_url: Optional[str] = None
    image_name: Optional[str] = None


class Author(BaseModel):
    """Stored author with its owner embedded."""

    id: str
    name: str
    first_name: str = ""
    last_name: str = ""
    website_url: str = ""
    instagram_url: str = ""
    youtube_url: str = ""
    image_name: str = ""
    created_at: datetime
    modified_at: datetime
    user_created: Optional[UserSnapshot] = None


# -----------------------------------------------------------------------------
# Recipes
# -----------------------------------------------------------------------------


class RecipeCreate(BaseModel):
    """Data for a new recipe. Prep step ranks are reassigned 1..n in list order."""

    name: str = Field(..., min_length=1, description="Unique recipe name")
    image_name: str = ""
    recipe_url: str = ""
    time_m: int = Field(default=0, ge=0, description="Preparation time in minutes")
    category: Category
    ingredients: list[Ingredient] = Field(default_factory=list)
    prep_steps: list[PrepStep] = Field(default_factory=list)
    author_id: str = Field(..., description="ID of the credited author")
    user_id: str = Field(..., description="ID of the creating user")


class RecipeUpdate(BaseModel):
    """Partial patch for a recipe. Prep step ranks are stored as given."""

    name: Optional[str] = Field(None, min_length=1)
    image_name: Optional[str] = None
    recipe_url: Optional[str] = None
    time_m: Optional[int] = Field(None, ge=0)
    category: Optional[Category] = None
    ingredients: Optional[list[Ingredient]] = None
    prep_steps: Optional[list[PrepStep]] = None
    author_id: Optional[str] = None
    user_id: Optional[str] = None


class Recipe(BaseModel):
    """Stored recipe with its author and creating user embedded."""

    id: str
    name: str
    image_name: str = ""
    recipe_url: str = ""
    time_m: int = 0
    category: Category
    ingredients: list[Ingredient] = Field(default_factory=list)
    prep_steps: list[PrepStep] = Field(default_factory=list)
    created_at: datetime
    modified_at: datetime
    author: Optional[AuthorSnapshot] = None
    user_created: Optional[UserSnapshot] = None


# -----------------------------------------------------------------------------
# Sessions
# -----------------------------------------------------------------------------


class SessionCreate(BaseModel):
    """Data for a new refresh-token session."""

    user_id: str
    refresh_token: str
    user_agent: str = ""
    client_ip: str = ""
    is_blocked: bool = False
    expires_at: datetime


class Session(BaseModel):
    """Stored session with its user embedded."""

    id: str
    refresh_token: str
    user_agent: str = ""
    client_ip: str = ""
    is_blocked: bool = False
    expires_at: datetime
    created_at: Optional[datetime] = None
    user: Optional[UserSnapshot] = None


def supplied_fields(update: BaseModel) -> dict:
    """
    Return the fields of a patch model the caller actually supplied.

    Fields left at their default and fields explicitly set to None are
    treated as absent.
    """
    return {
        name: getattr(update, name)
        for name in update.model_fields_set
        if getattr(update, name) is not None
    }
