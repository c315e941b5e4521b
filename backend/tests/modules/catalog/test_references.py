"""Tests for the referential-integrity guard."""

import pytest
from unittest.mock import MagicMock

from modules.catalog.exceptions import ReferencedEntityError
from modules.catalog.references import (
    AUTHOR_USER,
    AUTHORS,
    RECIPE_AUTHOR,
    RECIPE_USER,
    RECIPES,
    REFERENCES,
    USERS,
    check_referenced,
    ensure_unreferenced,
)


class TestReferenceTable:
    def test_user_references(self):
        """Users are referenced by recipes and authors through userId."""
        assert REFERENCES[USERS] == (RECIPE_USER, AUTHOR_USER)
        assert RECIPE_USER.field == "userId"
        assert AUTHOR_USER.collection == AUTHORS

    def test_author_references(self):
        """Authors are referenced by recipes through authorId."""
        assert REFERENCES[AUTHORS] == (RECIPE_AUTHOR,)
        assert RECIPE_AUTHOR.collection == RECIPES
        assert RECIPE_AUTHOR.field == "authorId"

    def test_recipes_are_unreferenced(self):
        assert REFERENCES[RECIPES] == ()


class TestCheckReferenced:
    def test_zero_count_passes(self):
        count = MagicMock(return_value=0)
        check_referenced(count, "target", RECIPE_AUTHOR)
        count.assert_called_once_with(RECIPE_AUTHOR, "target")

    def test_positive_count_raises(self):
        """A positive count should raise naming the relation."""
        count = MagicMock(return_value=3)
        with pytest.raises(ReferencedEntityError) as exc_info:
            check_referenced(count, "abc", RECIPE_AUTHOR)

        error = exc_info.value
        assert "author" in error.message
        assert "recipe" in error.message
        assert error.details["relation"] == "recipe"
        assert error.details["count"] == 3
        assert error.details["id"] == "abc"


class TestEnsureUnreferenced:
    def test_checks_every_reference_in_order(self):
        count = MagicMock(return_value=0)
        ensure_unreferenced(count, "user-1", REFERENCES[USERS])
        assert [c.args[0] for c in count.call_args_list] == [RECIPE_USER, AUTHOR_USER]

    def test_stops_at_first_referencing_collection(self):
        """Authors should not be counted once recipes already block the delete."""
        count = MagicMock(side_effect=[1, 0])
        with pytest.raises(ReferencedEntityError) as exc_info:
            ensure_unreferenced(count, "user-1", REFERENCES[USERS])
        assert exc_info.value.details["relation"] == "recipe"
        assert count.call_count == 1

    def test_author_relation_reported(self):
        count = MagicMock(side_effect=[0, 2])
        with pytest.raises(ReferencedEntityError) as exc_info:
            ensure_unreferenced(count, "user-1", REFERENCES[USERS])
        assert exc_info.value.details["relation"] == "author"
        assert exc_info.value.details["entity"] == "user"

    def test_no_references_never_counts(self):
        count = MagicMock()
        ensure_unreferenced(count, "recipe-1", REFERENCES[RECIPES])
        count.assert_not_called()
