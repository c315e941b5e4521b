"""
Authentication module.

Issues and verifies tokens, hashes passwords, and manages login sessions.

Public API:
- ITokenMaker: Interface for issuing and verifying tokens
- IAuthService: Interface for register/login/renew operations
- JWTMaker: HS256 token maker with a 32 character key
- TokenPayload: Claims carried by a token
- Auth exceptions: InvalidTokenError, ExpiredTokenError, etc.
"""

from .interfaces import IAuthService, ITokenMaker
from .models import (
    Credentials,
    LoginResponse,
    RenewAccessTokenRequest,
    RenewAccessTokenResponse,
    TokenPayload,
)
from .token import JWTMaker, SYMMETRIC_KEY_SIZE
from .exceptions import (
    InvalidTokenError,
    ExpiredTokenError,
    MissingTokenError,
    InvalidAuthorizationHeaderError,
    InvalidCredentialsError,
    SessionRevokedError,
    InvalidKeyError,
)

__all__ = [
    # Interfaces
    "IAuthService",
    "ITokenMaker",
    # Token maker
    "JWTMaker",
    "SYMMETRIC_KEY_SIZE",
    # Models
    "Credentials",
    "LoginResponse",
    "RenewAccessTokenRequest",
    "RenewAccessTokenResponse",
    "TokenPayload",
    # Exceptions
    "InvalidTokenError",
    "ExpiredTokenError",
    "MissingTokenError",
    "InvalidAuthorizationHeaderError",
    "InvalidCredentialsError",
    "SessionRevokedError",
    "InvalidKeyError",
]
