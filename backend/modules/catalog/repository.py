"""
MongoDB store for the recipe catalog.

Encapsulates all queries and data mapping for the catalog collections:
- users
- authors
- recipes
- sessions

Reads of authors, recipes and sessions are aggregation pipelines that
``$lookup`` the related user/author and project a snapshot of it in place of
the raw foreign id.

Every operation runs under ``pymongo.timeout(operation_timeout)``. Callers
that need a tighter deadline can wrap a call in their own
``pymongo.timeout(...)`` block; nested blocks keep the earlier deadline.
"""

import logging
from contextlib import contextmanager
from typing import Any, Iterator, Optional

import pymongo
from bson import ObjectId
from pydantic import BaseModel
from pymongo.collection import Collection
from pymongo.database import Database
from pymongo.errors import DuplicateKeyError, PyMongoError

from shared.config import get_settings
from shared.database import get_database
from shared.repository import BaseRepository

from .documents import (
    author_document,
    author_set_fields,
    map_to_author,
    map_to_recipe,
    map_to_session,
    map_to_user,
    parse_object_id,
    recipe_document,
    recipe_set_fields,
    session_document,
    user_document,
    user_set_fields,
    utc_now,
)
from .exceptions import (
    DuplicateEntityError,
    EntityNotFoundError,
    StoreUnavailableError,
)
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
    UserUpdate,
)
from .pagination import Pagination
from .references import (
    AUTHORS,
    RECIPES,
    REFERENCES,
    SESSIONS,
    USERS,
    Reference,
    ensure_unreferenced,
)

logger = logging.getLogger(__name__)

DEFAULT_OPERATION_TIMEOUT = 10.0

# Unique natural key of each collection
NATURAL_KEYS = {USERS: "email", AUTHORS: "name", RECIPES: "name"}


def _embed_first(source: str, alias: str, fields: dict[str, str]) -> dict[str, Any]:
    """Projection expression picking the first joined document, reduced to fields."""
    return {
        "$arrayElemAt": [
            {
                "$map": {
                    "input": f"${source}",
                    "as": alias,
                    "in": {key: f"$${alias}.{field}" for key, field in fields.items()},
                }
            },
            0,
        ]
    }


USER_SNAPSHOT_FIELDS = {"_id": "_id", "email": "email"}

AUTHOR_SNAPSHOT_FIELDS = {
    "_id": "_id",
    "name": "name",
    "firstName": "firstName",
    "lastName": "lastName",
    "websiteUrl": "websiteUrl",
    "instagramUrl": "instagramUrl",
    "youtubeUrl": "youtubeUrl",
    "imageName": "imageName",
}

USER_LOOKUP_STAGE = {
    "$lookup": {
        "from": USERS,
        "localField": "userId",
        "foreignField": "_id",
        "as": "user",
    }
}

AUTHOR_LOOKUP_STAGE = {
    "$lookup": {
        "from": AUTHORS,
        "localField": "authorId",
        "foreignField": "_id",
        "as": "recipeAuthor",
    }
}

AUTHOR_PROJECT_STAGE = {
    "$project": {
        "_id": 1,
        "name": 1,
        "firstName": 1,
        "lastName": 1,
        "websiteUrl": 1,
        "instagramUrl": 1,
        "youtubeUrl": 1,
        "imageName": 1,
        "createdAt": 1,
        "modifiedAt": 1,
        "userCreated": _embed_first("user", "userCreated", USER_SNAPSHOT_FIELDS),
    }
}

RECIPE_PROJECT_STAGE = {
    "$project": {
        "_id": 1,
        "name": 1,
        "imageName": 1,
        "recipeUrl": 1,
        "timeM": 1,
        "category": 1,
        "ingredients": 1,
        "prepSteps": 1,
        "createdAt": 1,
        "modifiedAt": 1,
        "author": _embed_first("recipeAuthor", "author", AUTHOR_SNAPSHOT_FIELDS),
        "userCreated": _embed_first("user", "userCreated", USER_SNAPSHOT_FIELDS),
    }
}

SESSION_PROJECT_STAGE = {
    "$project": {
        "_id": 1,
        "refreshToken": 1,
        "userAgent": 1,
        "clientIp": 1,
        "isBlocked": 1,
        "expiresAt": 1,
        "createdAt": 1,
        "user": _embed_first("user", "user", USER_SNAPSHOT_FIELDS),
    }
}

AUTHOR_JOIN_STAGES = [USER_LOOKUP_STAGE, AUTHOR_PROJECT_STAGE]
RECIPE_JOIN_STAGES = [USER_LOOKUP_STAGE, AUTHOR_LOOKUP_STAGE, RECIPE_PROJECT_STAGE]
SESSION_JOIN_STAGES = [USER_LOOKUP_STAGE, SESSION_PROJECT_STAGE]


class MongoStore(BaseRepository[BaseModel]):
    """
    MongoDB implementation of IStore.

    Holds only collection handles and settings, so one instance is shared
    by all concurrent requests.

    Note: This store does NOT check that foreign ids in create inputs
    resolve to existing records; only their format is validated.
    """

    def __init__(
        self,
        db: Database,
        operation_timeout: Optional[float] = DEFAULT_OPERATION_TIMEOUT,
        ensure_indexes: bool = True,
    ) -> None:
        """
        Initialize the store.

        Args:
            db: pymongo Database holding the catalog collections.
            operation_timeout: Seconds allowed per store operation.
            ensure_indexes: Create the unique natural-key indexes now.
        """
        super().__init__(db)
        self._timeout = operation_timeout
        self._users = self._collection(USERS)
        self._authors = self._collection(AUTHORS)
        self._recipes = self._collection(RECIPES)
        self._sessions = self._collection(SESSIONS)

        if ensure_indexes:
            self.ensure_indexes()

    def ensure_indexes(self) -> None:
        """Create the unique natural-key indexes. Idempotent."""
        with self._operation("ensure indexes"):
            for collection_name, key in NATURAL_KEYS.items():
                self._collection(collection_name).create_index(
                    [(key, pymongo.ASCENDING)],
                    unique=True,
                    name=f"{key}_unique",
                )
        logger.info("Ensured unique indexes on %s", ", ".join(NATURAL_KEYS))

    # -------------------------------------------------------------------------
    # Users
    # -------------------------------------------------------------------------

    def create_user(self, user: UserCreate) -> str:
        return self._insert(USERS, self._users, user_document(user, utc_now()))

    def get_all_users(self, pagination: Pagination) -> list[User]:
        with self._operation("list users"):
            with self._users.find(
                {},
                sort=pagination.sort(NATURAL_KEYS[USERS]),
                skip=pagination.skip,
                limit=pagination.limit,
            ) as cursor:
                return [map_to_user(doc) for doc in cursor]

    def get_user_by_email(self, email: str) -> User:
        with self._operation("get user by email"):
            data = self._users.find_one({"email": email})
        if data is None:
            logger.info("Failed to find user with email %s", email)
            raise EntityNotFoundError("user", "email", email)
        return map_to_user(data)

    def get_user_by_id(self, user_id: str) -> User:
        user_oid = parse_object_id("user", user_id)
        with self._operation("get user"):
            data = self._users.find_one({"_id": user_oid})
        if data is None:
            logger.info("Failed to find user with id %s", user_id)
            raise EntityNotFoundError("user", "id", user_id)
        return map_to_user(data)

    def update_user_by_id(self, user_id: str, update: UserUpdate) -> int:
        user_oid = parse_object_id("user", user_id)
        return self._update(USERS, self._users, user_oid, user_set_fields(update))

    def delete_user_by_id(self, user_id: str) -> int:
        return self._delete(USERS, self._users, parse_object_id("user", user_id))

    # -------------------------------------------------------------------------
    # Authors
    # -------------------------------------------------------------------------

    def create_author(self, author: AuthorCreate) -> str:
        return self._insert(AUTHORS, self._authors, author_document(author, utc_now()))

    def get_all_authors(self, pagination: Pagination) -> list[Author]:
        pipeline = [*pagination.stages(NATURAL_KEYS[AUTHORS]), *AUTHOR_JOIN_STAGES]
        return [map_to_author(doc) for doc in self._aggregate("list authors", self._authors, pipeline)]

    def get_author_by_id(self, author_id: str) -> Author:
        author_oid = parse_object_id("author", author_id)
        data = self._aggregate_one("author", self._authors, author_oid, AUTHOR_JOIN_STAGES)
        return map_to_author(data)

    def update_author_by_id(self, author_id: str, update: AuthorUpdate) -> int:
        author_oid = parse_object_id("author", author_id)
        return self._update(AUTHORS, self._authors, author_oid, author_set_fields(update))

    def delete_author_by_id(self, author_id: str) -> int:
        return self._delete(AUTHORS, self._authors, parse_object_id("author", author_id))

    # -------------------------------------------------------------------------
    # Recipes
    # -------------------------------------------------------------------------

    def create_recipe(self, recipe: RecipeCreate) -> str:
        return self._insert(RECIPES, self._recipes, recipe_document(recipe, utc_now()))

    def get_all_recipes(self, pagination: Pagination) -> list[Recipe]:
        pipeline = [*pagination.stages(NATURAL_KEYS[RECIPES]), *RECIPE_JOIN_STAGES]
        return [map_to_recipe(doc) for doc in self._aggregate("list recipes", self._recipes, pipeline)]

    def get_recipe_by_id(self, recipe_id: str) -> Recipe:
        recipe_oid = parse_object_id("recipe", recipe_id)
        data = self._aggregate_one("recipe", self._recipes, recipe_oid, RECIPE_JOIN_STAGES)
        return map_to_recipe(data)

    def update_recipe_by_id(self, recipe_id: str, update: RecipeUpdate) -> int:
        recipe_oid = parse_object_id("recipe", recipe_id)
        return self._update(RECIPES, self._recipes, recipe_oid, recipe_set_fields(update))

    def delete_recipe_by_id(self, recipe_id: str) -> int:
        return self._delete(RECIPES, self._recipes, parse_object_id("recipe", recipe_id))

    # -------------------------------------------------------------------------
    # Sessions
    # -------------------------------------------------------------------------

    def create_session(self, session: SessionCreate) -> str:
        return self._insert(SESSIONS, self._sessions, session_document(session, utc_now()))

    def get_session_by_id(self, session_id: str) -> Session:
        session_oid = parse_object_id("session", session_id)
        data = self._aggregate_one("session", self._sessions, session_oid, SESSION_JOIN_STAGES)
        return map_to_session(data)

    # -------------------------------------------------------------------------
    # Private helpers
    # -------------------------------------------------------------------------

    @contextmanager
    def _operation(self, name: str) -> Iterator[None]:
        """Apply the operation deadline and translate driver failures."""
        try:
            with pymongo.timeout(self._timeout):
                yield
        except PyMongoError as e:
            logger.error("Database operation '%s' failed: %s", name, e)
            raise StoreUnavailableError(name, str(e)) from e

    def _insert(self, collection_name: str, collection: Collection, document: dict[str, Any]) -> str:
        entity = _entity(collection_name)
        with self._operation(f"create {entity}"):
            try:
                result = collection.insert_one(document)
            except DuplicateKeyError as e:
                raise self._duplicate(collection_name, document, e) from e
        return str(result.inserted_id)

    def _aggregate(self, name: str, collection: Collection, pipeline: list[dict[str, Any]]) -> list[dict[str, Any]]:
        with self._operation(name):
            with collection.aggregate(pipeline) as cursor:
                return list(cursor)

    def _aggregate_one(
        self,
        entity: str,
        collection: Collection,
        oid: ObjectId,
        stages: list[dict[str, Any]],
    ) -> dict[str, Any]:
        pipeline = [{"$match": {"_id": oid}}, *stages, {"$limit": 1}]
        with self._operation(f"get {entity}"):
            with collection.aggregate(pipeline) as cursor:
                data = next(iter(cursor), None)
        if data is None:
            logger.info("Failed to find %s with id %s", entity, oid)
            raise EntityNotFoundError(entity, "id", str(oid))
        return data

    def _update(
        self,
        collection_name: str,
        collection: Collection,
        oid: ObjectId,
        fields: dict[str, Any],
    ) -> int:
        entity = _entity(collection_name)
        fields["modifiedAt"] = utc_now()
        with self._operation(f"update {entity}"):
            try:
                result = collection.update_one({"_id": oid}, {"$set": fields})
            except DuplicateKeyError as e:
                raise self._duplicate(collection_name, fields, e) from e

        if result.matched_count < 1:
            logger.info("Could not find %s with id %s", entity, oid)
        elif result.modified_count < 1:
            logger.info("Did not update %s with id %s", entity, oid)
        return result.modified_count

    def _delete(self, collection_name: str, collection: Collection, oid: ObjectId) -> int:
        entity = _entity(collection_name)
        with self._operation(f"delete {entity}"):
            ensure_unreferenced(self._count_references, oid, REFERENCES[collection_name])
            result = collection.delete_one({"_id": oid})

        if result.deleted_count < 1:
            logger.info("%s with id %s was not deleted", entity.capitalize(), oid)
        return result.deleted_count

    def _count_references(self, reference: Reference, target: ObjectId) -> int:
        return self._collection(reference.collection).count_documents({reference.field: target})

    def _duplicate(
        self,
        collection_name: str,
        document: dict[str, Any],
        error: DuplicateKeyError,
    ) -> DuplicateEntityError:
        key = NATURAL_KEYS.get(collection_name, "_id")
        value = document.get(key)
        if value is None:
            value = ((error.details or {}).get("keyValue") or {}).get(key)
        logger.warning("%s with %s %s already exists", _entity(collection_name), key, value)
        return DuplicateEntityError(_entity(collection_name), key, value)


def _entity(collection_name: str) -> str:
    return collection_name[:-1]


# Module-level instance getter
_store_instance: Optional[MongoStore] = None


def get_store() -> MongoStore:
    """Get the store singleton, connecting with the configured settings."""
    global _store_instance
    if _store_instance is None:
        _store_instance = MongoStore(
            get_database(),
            operation_timeout=get_settings().db_operation_timeout,
        )
    return _store_instance


def reset_store() -> None:
    """Reset the store singleton (for testing)."""
    global _store_instance
    _store_instance = None
