"""
Shared test fixtures and utilities.

This module provides common test infrastructure used across all test modules.
"""

from datetime import timedelta

import pytest
from fastapi.testclient import TestClient

from api import create_app
from api.dependencies import get_auth_service, get_catalog_service, get_token_maker, reset_container
from modules.auth.service import AuthService
from modules.auth.token import JWTMaker
from modules.catalog.models import AuthorCreate, Category, Ingredient, PrepStep, RecipeCreate, Role, UserCreate
from modules.catalog.service import CatalogService
from shared.config import get_settings

from tests.fakes import InMemoryStore


# Test symmetric key (only for testing - exactly 32 characters)
TEST_SYMMETRIC_KEY = "abcdefghijklmnopqrstuvwxyz012345"


@pytest.fixture(autouse=True)
def reset_singletons():
    """Reset the service container and cached settings around each test."""
    reset_container()
    get_settings.cache_clear()
    yield
    reset_container()
    get_settings.cache_clear()


@pytest.fixture
def token_maker() -> JWTMaker:
    """Token maker using the test key."""
    return JWTMaker(TEST_SYMMETRIC_KEY)


@pytest.fixture
def store() -> InMemoryStore:
    """Empty in-memory store."""
    return InMemoryStore()


@pytest.fixture
def user_id(store: InMemoryStore) -> str:
    """ID of a stored active user."""
    return store.create_user(
        UserCreate(email="cook@example.com", password_hash="not-a-real-hash", role=Role.USER, is_active=True)
    )


@pytest.fixture
def admin_id(store: InMemoryStore) -> str:
    """ID of a stored admin."""
    return store.create_user(
        UserCreate(email="admin@example.com", password_hash="not-a-real-hash", role=Role.ADMIN, is_active=True)
    )


@pytest.fixture
def author_id(store: InMemoryStore, user_id: str) -> str:
    """ID of a stored author owned by user_id."""
    return store.create_author(
        AuthorCreate(
            name="Ottolenghi",
            first_name="Yotam",
            last_name="Ottolenghi",
            image_name="ottolenghi.png",
            user_id=user_id,
        )
    )


def make_recipe(name: str, author_id: str, user_id: str, **overrides) -> RecipeCreate:
    """Build a recipe input with two ingredients and two steps."""
    values = dict(
        name=name,
        image_name=f"{name.lower()}.png",
        time_m=25,
        category=Category.MAIN,
        ingredients=[
            Ingredient(name="Chickpeas", amount=400, unit="g"),
            Ingredient(name="Olive oil", amount=2, unit="tbsp"),
        ],
        prep_steps=[
            PrepStep(description="Drain the chickpeas"),
            PrepStep(description="Roast for 20 minutes"),
        ],
        author_id=author_id,
        user_id=user_id,
    )
    values.update(overrides)
    return RecipeCreate(**values)


@pytest.fixture
def recipe_id(store: InMemoryStore, author_id: str, user_id: str) -> str:
    """ID of a stored recipe credited to author_id."""
    return store.create_recipe(make_recipe("Hummus", author_id, user_id))


@pytest.fixture
def auth_headers(token_maker: JWTMaker, user_id: str) -> dict[str, str]:
    """Authorization headers with a valid access token for user_id."""
    token, _ = token_maker.create_token(user_id, timedelta(minutes=15))
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def admin_headers(token_maker: JWTMaker, admin_id: str) -> dict[str, str]:
    """Authorization headers with a valid access token for admin_id."""
    token, _ = token_maker.create_token(admin_id, timedelta(minutes=15))
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def client(store: InMemoryStore, token_maker: JWTMaker) -> TestClient:
    """Test client whose services run against the in-memory store."""
    app = create_app()
    catalog = CatalogService(store)
    auth = AuthService(store, token_maker, timedelta(minutes=15), timedelta(hours=24))
    app.dependency_overrides[get_token_maker] = lambda: token_maker
    app.dependency_overrides[get_catalog_service] = lambda: catalog
    app.dependency_overrides[get_auth_service] = lambda: auth
    return TestClient(app)
