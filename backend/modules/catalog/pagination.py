"""
Pagination translator.

Turns a 1-based page index and a bounded page size into skip/limit values
and the aggregation stages the store appends to its list pipelines.
"""

from typing import Any, Optional

from pydantic import BaseModel, Field
from pydantic import ValidationError as PydanticValidationError

from .exceptions import InvalidPaginationError

MAX_PAGE_SIZE = 500


class Pagination(BaseModel):
    """A requested page of a list result."""

    page_id: int = Field(..., ge=1, description="Page number (1-indexed)")
    page_size: int = Field(..., ge=1, le=MAX_PAGE_SIZE, description="Items per page")

    model_config = {"frozen": True}

    @classmethod
    def parse(cls, page_id: Optional[int], page_size: Optional[int]) -> "Pagination":
        """
        Build a Pagination from raw request values.

        Raises:
            InvalidPaginationError: If a value is missing or out of range
        """
        try:
            return cls(page_id=page_id, page_size=page_size)
        except PydanticValidationError as e:
            reasons = "; ".join(
                f"{'.'.join(str(part) for part in err['loc'])}: {err['msg']}"
                for err in e.errors()
            )
            raise InvalidPaginationError(reasons) from e

    @property
    def skip(self) -> int:
        return (self.page_id - 1) * self.page_size

    @property
    def limit(self) -> int:
        return self.page_size

    def sort(self, sort_key: str) -> list[tuple[str, int]]:
        """Ascending sort on the natural key; ``_id`` breaks ties in creation order."""
        return [(sort_key, 1), ("_id", 1)]

    def stages(self, sort_key: str) -> list[dict[str, Any]]:
        """Aggregation stages selecting this page."""
        return [
            {"$sort": dict(self.sort(sort_key))},
            {"$skip": self.skip},
            {"$limit": self.limit},
        ]
