"""
Bearer token authentication.

Extracts the bearer token from the Authorization header, verifies it with
the token maker, and exposes the payload to route handlers.
"""

import logging
from typing import Optional

from fastapi import Depends, HTTPException, Request, status

from modules.auth.exceptions import (
    InvalidAuthorizationHeaderError,
    MissingTokenError,
)
from modules.auth.interfaces import ITokenMaker
from modules.auth.models import TokenPayload
from shared.exceptions import AuthenticationError

from ..dependencies import get_token_maker

logger = logging.getLogger(__name__)

AUTHORIZATION_HEADER_KEY = "authorization"
AUTHORIZATION_TYPE_BEARER = "bearer"
AUTHORIZATION_PAYLOAD_KEY = "authorization_payload"


class AuthError(HTTPException):
    """Authentication error with consistent format."""
    def __init__(self, detail: str):
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=detail,
            headers={"WWW-Authenticate": "Bearer"},
        )


def extract_bearer_token(header: Optional[str]) -> str:
    """
    Split an Authorization header value into scheme and token.

    Args:
        header: Raw header value, e.g. "Bearer <token>"

    Returns:
        The token part

    Raises:
        MissingTokenError: If the header is absent or blank
        InvalidAuthorizationHeaderError: If the value has fewer than two
            fields or the scheme is not bearer
    """
    if not header or not header.strip():
        raise MissingTokenError()

    fields = header.split()
    if len(fields) < 2:
        raise InvalidAuthorizationHeaderError()

    scheme = fields[0].lower()
    if scheme != AUTHORIZATION_TYPE_BEARER:
        raise InvalidAuthorizationHeaderError(f"Unsupported authorization type {scheme}")

    return fields[1]


def authorize(header: Optional[str], token_maker: ITokenMaker) -> TokenPayload:
    """
    Authenticate a request from its Authorization header.

    Raises:
        AuthenticationError: Any of the header or token errors
    """
    token = extract_bearer_token(header)
    return token_maker.verify_token(token)


async def get_current_payload(
    request: Request,
    token_maker: ITokenMaker = Depends(get_token_maker),
) -> TokenPayload:
    """
    Dependency that requires a valid bearer token.

    On success the payload is also stored on request.state so later
    handlers can read it without depending on this function.

    Usage:
        @router.get("/protected")
        async def protected_route(payload: TokenPayload = Depends(get_current_payload)):
            return {"user_id": payload.subject}
    """
    try:
        payload = authorize(request.headers.get(AUTHORIZATION_HEADER_KEY), token_maker)
    except AuthenticationError as e:
        logger.info("Rejected request to %s: %s", request.url.path, e.message)
        raise AuthError(e.message)

    setattr(request.state, AUTHORIZATION_PAYLOAD_KEY, payload)
    return payload


# Type alias for cleaner route definitions
RequireAuth = Depends(get_current_payload)
