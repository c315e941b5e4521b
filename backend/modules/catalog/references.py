"""
Referential-integrity guard.

Before a user or author is deleted, every collection holding a foreign key
to it is counted. A positive count blocks the delete.

The check and the delete are two separate operations. A reference inserted
between them is not detected; the guard is best-effort under concurrent
writes.
"""

import logging
from dataclasses import dataclass
from typing import Any, Callable, Iterable

from .exceptions import ReferencedEntityError

logger = logging.getLogger(__name__)


USERS = "users"
AUTHORS = "authors"
RECIPES = "recipes"
SESSIONS = "sessions"


@dataclass(frozen=True)
class Reference:
    """A foreign-key field in a referencing collection."""

    collection: str
    field: str
    target: str
    relation: str


RECIPE_AUTHOR = Reference(collection=RECIPES, field="authorId", target=AUTHORS, relation="recipe")
RECIPE_USER = Reference(collection=RECIPES, field="userId", target=USERS, relation="recipe")
AUTHOR_USER = Reference(collection=AUTHORS, field="userId", target=USERS, relation="author")

# Target collection -> references checked before deleting from it
REFERENCES: dict[str, tuple[Reference, ...]] = {
    USERS: (RECIPE_USER, AUTHOR_USER),
    AUTHORS: (RECIPE_AUTHOR,),
    RECIPES: (),
}

# Counts documents of reference.collection whose reference.field equals the id
ReferenceCounter = Callable[[Reference, Any], int]

_ENTITY_NAMES = {USERS: "user", AUTHORS: "author", RECIPES: "recipe"}


def check_referenced(count: ReferenceCounter, target_id: Any, reference: Reference) -> None:
    """
    Raise if any document still references target_id through reference.

    Args:
        count: Adapter-specific counter
        target_id: Identifier of the record about to be deleted
        reference: The foreign-key field to check

    Raises:
        ReferencedEntityError: If the count is positive
    """
    referenced = count(reference, target_id)
    if referenced > 0:
        entity = _ENTITY_NAMES.get(reference.target, reference.target)
        logger.warning(
            "Can't delete %s %s: referenced by %d %s(s)",
            entity, target_id, referenced, reference.relation,
        )
        raise ReferencedEntityError(entity, str(target_id), reference.relation, referenced)


def ensure_unreferenced(
    count: ReferenceCounter,
    target_id: Any,
    references: Iterable[Reference],
) -> None:
    """Apply check_referenced for every reference, in order."""
    for reference in references:
        check_referenced(count, target_id, reference)
