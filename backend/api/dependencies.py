"""
Dependency injection setup for FastAPI.

This module provides the "container" that wires together all module
implementations. Routes depend on interfaces (IStore, ITokenMaker,
ICatalogService, IAuthService) and this file creates the concrete
implementations from settings.
"""

from typing import TYPE_CHECKING

# Type checking imports for interfaces (avoids circular imports)
if TYPE_CHECKING:
    from modules.auth.interfaces import IAuthService, ITokenMaker
    from modules.catalog.interfaces import ICatalogService, IStore
    from modules.images.depot import ImageDepot


class ServiceContainer:
    """
    Container for all service instances.

    Services are created lazily on first access and cached as singletons
    within the container. Use reset() to clear them for testing.
    """

    def __init__(self) -> None:
        self._store: "IStore | None" = None
        self._token_maker: "ITokenMaker | None" = None
        self._images: "ImageDepot | None" = None
        self._catalog_service: "ICatalogService | None" = None
        self._auth_service: "IAuthService | None" = None

    @property
    def store(self) -> "IStore":
        """Get the MongoDB-backed store."""
        if self._store is None:
            from modules.catalog.repository import get_store
            self._store = get_store()
        return self._store

    @property
    def token_maker(self) -> "ITokenMaker":
        """Get the token maker built from the configured symmetric key."""
        if self._token_maker is None:
            from modules.auth.token import JWTMaker
            from shared.config import get_settings
            self._token_maker = JWTMaker(get_settings().token_symmetric_key)
        return self._token_maker

    @property
    def images(self) -> "ImageDepot":
        """Get the image depot."""
        if self._images is None:
            from modules.images.depot import ImageDepot
            from shared.config import get_settings
            self._images = ImageDepot(get_settings().images_depot_path)
        return self._images

    @property
    def catalog(self) -> "ICatalogService":
        """Get the catalog service instance."""
        if self._catalog_service is None:
            from modules.catalog.service import CatalogService
            self._catalog_service = CatalogService(
                store=self.store,
                images=self.images,
            )
        return self._catalog_service

    @property
    def auth(self) -> "IAuthService":
        """Get the auth service instance."""
        if self._auth_service is None:
            from modules.auth.service import AuthService
            from shared.config import get_settings
            settings = get_settings()
            self._auth_service = AuthService(
                store=self.store,
                token_maker=self.token_maker,
                access_token_duration=settings.access_token_duration,
                refresh_token_duration=settings.refresh_token_duration,
            )
        return self._auth_service

    def reset(self) -> None:
        """
        Reset all cached services.

        This is primarily for testing - allows tests to get fresh
        service instances with different mock dependencies.
        """
        self._store = None
        self._token_maker = None
        self._images = None
        self._catalog_service = None
        self._auth_service = None

        from modules.catalog.repository import reset_store
        reset_store()


# Module-level container singleton
_container: ServiceContainer | None = None


def get_container() -> ServiceContainer:
    """Get the singleton service container."""
    global _container
    if _container is None:
        _container = ServiceContainer()
    return _container


def reset_container() -> None:
    """
    Reset the service container.

    The next call to get_container() creates a fresh container with new
    service instances. Primarily used for testing.
    """
    global _container
    if _container is not None:
        _container.reset()
    _container = None


# FastAPI dependency functions
# These are the functions that should be used in route Depends() calls


def get_store() -> "IStore":
    """FastAPI dependency for the store."""
    return get_container().store


def get_token_maker() -> "ITokenMaker":
    """FastAPI dependency for the token maker."""
    return get_container().token_maker


def get_catalog_service() -> "ICatalogService":
    """FastAPI dependency for the catalog service."""
    return get_container().catalog


def get_auth_service() -> "IAuthService":
    """FastAPI dependency for the auth service."""
    return get_container().auth
