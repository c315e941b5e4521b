"""
Mapping between catalog models and MongoDB documents.

Documents use camelCase field names and ObjectId foreign keys; models use
snake_case and string ids. Joined reads arrive with the related record
already embedded under ``userCreated``, ``author`` or ``user``.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional

from bson import ObjectId
from pydantic import BaseModel

from .exceptions import InvalidIdentifierError
from .models import (
    Author,
    AuthorCreate,
    AuthorSnapshot,
    AuthorUpdate,
    Recipe,
    RecipeCreate,
    RecipeUpdate,
    Session,
    SessionCreate,
    User,
    UserCreate,
    UserSnapshot,
    UserUpdate,
    supplied_fields,
)

USER_FIELDS = {
    "email": "email",
    "password_hash": "passwordHash",
    "role": "role",
    "is_active": "isActive",
}

AUTHOR_FIELDS = {
    "name": "name",
    "first_name": "firstName",
    "last_name": "lastName",
    "website_url": "websiteUrl",
    "instagram_url": "instagramUrl",
    "youtube_url": "youtubeUrl",
    "image_name": "imageName",
}

RECIPE_FIELDS = {
    "name": "name",
    "image_name": "imageName",
    "recipe_url": "recipeUrl",
    "time_m": "timeM",
    "category": "category",
    "ingredients": "ingredients",
    "prep_steps": "prepSteps",
    "author_id": "authorId",
    "user_id": "userId",
}

# Fields holding ObjectId foreign keys, by model attribute name
_ID_FIELDS = {"author_id": "author", "user_id": "user"}


def utc_now() -> datetime:
    """Current UTC time at MongoDB's millisecond precision."""
    now = datetime.now(timezone.utc)
    return now.replace(microsecond=(now.microsecond // 1000) * 1000)


def parse_object_id(entity: str, value: Any) -> ObjectId:
    """
    Parse a string identifier.

    Raises:
        InvalidIdentifierError: If value is not a 24-character hex ObjectId
    """
    if isinstance(value, ObjectId):
        return value
    if not isinstance(value, str) or not ObjectId.is_valid(value):
        raise InvalidIdentifierError(entity, value)
    return ObjectId(value)


def _to_document_value(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json")
    if isinstance(value, list):
        return [_to_document_value(item) for item in value]
    return value


def _aware(value: Optional[datetime]) -> Optional[datetime]:
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def set_fields(update: BaseModel, field_map: dict[str, str]) -> dict[str, Any]:
    """
    Build the ``$set`` document for a partial patch.

    Only supplied fields are included; ``modifiedAt`` is added by the caller.

    Raises:
        InvalidIdentifierError: If a supplied foreign id is malformed
    """
    fields: dict[str, Any] = {}
    for name, value in supplied_fields(update).items():
        if name in _ID_FIELDS:
            value = parse_object_id(_ID_FIELDS[name], value)
        fields[field_map[name]] = _to_document_value(value)
    return fields


def user_set_fields(update: UserUpdate) -> dict[str, Any]:
    return set_fields(update, USER_FIELDS)


def author_set_fields(update: AuthorUpdate) -> dict[str, Any]:
    return set_fields(update, AUTHOR_FIELDS)


def recipe_set_fields(update: RecipeUpdate) -> dict[str, Any]:
    return set_fields(update, RECIPE_FIELDS)


# -----------------------------------------------------------------------------
# Insert documents
# -----------------------------------------------------------------------------


def user_document(user: UserCreate, now: datetime) -> dict[str, Any]:
    return {
        "email": user.email,
        "passwordHash": user.password_hash,
        "role": user.role.value,
        "isActive": user.is_active,
        "createdAt": now,
        "modifiedAt": now,
    }


def author_document(author: AuthorCreate, now: datetime) -> dict[str, Any]:
    document = {
        AUTHOR_FIELDS[name]: getattr(author, name) for name in AUTHOR_FIELDS
    }
    document.update(
        userId=parse_object_id("user", author.user_id),
        createdAt=now,
        modifiedAt=now,
    )
    return document


def recipe_document(recipe: RecipeCreate, now: datetime) -> dict[str, Any]:
    prep_steps = [
        {"rank": rank, "description": step.description}
        for rank, step in enumerate(recipe.prep_steps, start=1)
    ]
    return {
        "name": recipe.name,
        "imageName": recipe.image_name,
        "recipeUrl": recipe.recipe_url,
        "timeM": recipe.time_m,
        "category": recipe.category.value,
        "ingredients": _to_document_value(recipe.ingredients),
        "prepSteps": prep_steps,
        "authorId": parse_object_id("author", recipe.author_id),
        "userId": parse_object_id("user", recipe.user_id),
        "createdAt": now,
        "modifiedAt": now,
    }


def session_document(session: SessionCreate, now: datetime) -> dict[str, Any]:
    return {
        "userId": parse_object_id("user", session.user_id),
        "refreshToken": session.refresh_token,
        "userAgent": session.user_agent,
        "clientIp": session.client_ip,
        "isBlocked": session.is_blocked,
        "expiresAt": session.expires_at,
        "createdAt": now,
    }


# -----------------------------------------------------------------------------
# Read mapping
# -----------------------------------------------------------------------------


def map_to_user_snapshot(data: Optional[dict[str, Any]]) -> Optional[UserSnapshot]:
    """Map an embedded ``{_id, email}`` document; None when the join found nothing."""
    if not data:
        return None
    return UserSnapshot(id=str(data["_id"]), email=data.get("email", ""))


def map_to_author_snapshot(data: Optional[dict[str, Any]]) -> Optional[AuthorSnapshot]:
    if not data:
        return None
    return AuthorSnapshot(
        id=str(data["_id"]),
        **{name: data.get(field, "") for name, field in AUTHOR_FIELDS.items()},
    )


def map_to_user(data: dict[str, Any]) -> User:
    return User(
        id=str(data["_id"]),
        email=data["email"],
        password_hash=data.get("passwordHash", ""),
        role=data.get("role", "user"),
        is_active=data.get("isActive", False),
        created_at=_aware(data["createdAt"]),
        modified_at=_aware(data["modifiedAt"]),
    )


def map_to_author(data: dict[str, Any]) -> Author:
    return Author(
        id=str(data["_id"]),
        **{name: data.get(field, "") for name, field in AUTHOR_FIELDS.items()},
        created_at=_aware(data["createdAt"]),
        modified_at=_aware(data["modifiedAt"]),
        user_created=map_to_user_snapshot(data.get("userCreated")),
    )


def map_to_recipe(data: dict[str, Any]) -> Recipe:
    return Recipe(
        id=str(data["_id"]),
        name=data["name"],
        image_name=data.get("imageName", ""),
        recipe_url=data.get("recipeUrl", ""),
        time_m=data.get("timeM", 0),
        category=data["category"],
        ingredients=data.get("ingredients", []),
        prep_steps=data.get("prepSteps", []),
        created_at=_aware(data["createdAt"]),
        modified_at=_aware(data["modifiedAt"]),
        author=map_to_author_snapshot(data.get("author")),
        user_created=map_to_user_snapshot(data.get("userCreated")),
    )


def map_to_session(data: dict[str, Any]) -> Session:
    return Session(
        id=str(data["_id"]),
        refresh_token=data["refreshToken"],
        user_agent=data.get("userAgent", ""),
        client_ip=data.get("clientIp", ""),
        is_blocked=data.get("isBlocked", False),
        expires_at=_aware(data["expiresAt"]),
        created_at=_aware(data.get("createdAt")),
        user=map_to_user_snapshot(data.get("user")),
    )
