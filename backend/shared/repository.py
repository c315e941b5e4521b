"""
Base repository class for database access.

Provides a common abstraction layer for all repositories, encapsulating
MongoDB database access and providing shared utilities for data operations.
"""

from typing import TypeVar, Generic
from pymongo.collection import Collection
from pymongo.database import Database


T = TypeVar("T")


class BaseRepository(Generic[T]):
    """
    Base class for all repositories.

    Provides common functionality for database operations:
    - pymongo database access via self._db
    - Collection lookup via self._collection(name)
    - Generic type parameter for model type hints

    Subclasses should implement domain-specific data access methods
    and handle document-to-Pydantic model mapping internally.

    Example:
        class NoteRepository(BaseRepository[Note]):
            def get_by_name(self, name: str) -> Optional[Note]:
                doc = self._collection("notes").find_one({"name": name})
                if doc is None:
                    return None
                return self._map_to_note(doc)
    """

    def __init__(self, db: Database) -> None:
        """
        Initialize the repository with a pymongo database.

        Args:
            db: pymongo Database instance for database operations.
        """
        self._db = db

    def _collection(self, name: str) -> Collection:
        """Get a collection of the repository's database by name."""
        return self._db[name]
