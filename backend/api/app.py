"""
FastAPI application factory.

Creates and configures the FastAPI application instance.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from shared.config import get_settings
from shared.database import reset_client_cache
from shared.exceptions import (
    AuthenticationError,
    AuthorizationError,
    CatalogError,
    ConflictError,
    ExternalServiceError,
    NotFoundError,
    ValidationError,
)

from .dependencies import get_container
from .models.errors import ErrorResponse
from .routes import heartbeat, users
from modules.auth.exceptions import InvalidKeyError
from modules.auth.routes import router as auth_router
from modules.catalog.routes import authors_router, recipes_router

logger = logging.getLogger(__name__)

# Checked in order, so subclasses must precede their bases
ERROR_STATUS_CODES: list[tuple[type[CatalogError], int]] = [
    (ValidationError, status.HTTP_400_BAD_REQUEST),
    (NotFoundError, status.HTTP_404_NOT_FOUND),
    (ConflictError, status.HTTP_409_CONFLICT),
    (AuthenticationError, status.HTTP_401_UNAUTHORIZED),
    (AuthorizationError, status.HTTP_403_FORBIDDEN),
    (ExternalServiceError, status.HTTP_503_SERVICE_UNAVAILABLE),
]


def status_code_for(error: CatalogError) -> int:
    """Map an exception from the catalog hierarchy to an HTTP status code."""
    for error_type, status_code in ERROR_STATUS_CODES:
        if isinstance(error, error_type):
            return status_code
    return status.HTTP_500_INTERNAL_SERVER_ERROR


async def catalog_error_handler(request: Request, exc: CatalogError) -> JSONResponse:
    status_code = status_code_for(exc)
    if status_code >= 500:
        log = logger.warning if exc.transient else logger.error
        log("%s %s failed: %s", request.method, request.url.path, exc.message)

    headers = {"WWW-Authenticate": "Bearer"} if status_code == status.HTTP_401_UNAUTHORIZED else None
    body = ErrorResponse(**exc.to_dict())
    return JSONResponse(status_code=status_code, content=body.model_dump(mode="json"), headers=headers)


async def request_validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    body = ErrorResponse(
        error="VALIDATION_ERROR",
        message="Request validation failed",
        details={"errors": jsonable_encoder(exc.errors())},
    )
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=body.model_dump(mode="json"),
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.

    Configures logging and builds the token maker on startup, so a
    misconfigured key stops the server before it serves requests. Closes
    the database client on shutdown.
    """
    # Startup
    settings = get_settings()
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logger.info("Starting %s on %s:%s", settings.app_name, settings.host, settings.port)
    try:
        get_container().token_maker
    except InvalidKeyError as e:
        logger.error("Refusing to start: TOKEN_SYMMETRIC_KEY is invalid: %s", e.message)
        raise
    yield
    # Shutdown
    logger.info("Shutting down %s", settings.app_name)
    reset_client_cache()


def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application.

    Returns:
        Configured FastAPI instance
    """
    settings = get_settings()
    base_path = settings.base_path.rstrip("/")

    app = FastAPI(
        title=settings.app_name,
        description="Recipe catalog with authors, users and token authentication",
        version=settings.app_version,
        lifespan=lifespan,
        docs_url=f"{base_path}/docs" if settings.debug else None,
        redoc_url=f"{base_path}/redoc" if settings.debug else None,
    )

    # Configure CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=settings.cors_allow_credentials,
        allow_methods=settings.cors_allow_methods,
        allow_headers=settings.cors_allow_headers,
    )

    app.add_exception_handler(CatalogError, catalog_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_error_handler)

    # Register routes
    app.include_router(heartbeat.router, prefix=base_path, tags=["heartbeat"])
    app.include_router(auth_router, prefix=f"{base_path}/auth", tags=["auth"])
    app.include_router(users.router, prefix=f"{base_path}/users", tags=["users"])
    app.include_router(authors_router, prefix=f"{base_path}/authors", tags=["authors"])
    app.include_router(recipes_router, prefix=f"{base_path}/recipes", tags=["recipes"])

    return app


# Application instance for uvicorn
app = create_app()
