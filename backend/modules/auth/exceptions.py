"""
Authentication module exceptions.

These exceptions are raised by the token maker, the auth gate and the
auth service, and are caught by API error handlers to return appropriate
HTTP responses.
"""

from shared.exceptions import AuthenticationError, CatalogError


class InvalidTokenError(AuthenticationError):
    """Raised when a token is malformed, tampered with or signed with another key."""

    def __init__(self, message: str = "Token is invalid"):
        super().__init__(message, code="INVALID_TOKEN")


class ExpiredTokenError(AuthenticationError):
    """Raised when a token's expiry is in the past."""

    def __init__(self, message: str = "Token has expired"):
        super().__init__(message, code="TOKEN_EXPIRED")


class MissingTokenError(AuthenticationError):
    """Raised when no authorization header is provided."""

    def __init__(self, message: str = "Authorization header is not provided"):
        super().__init__(message, code="MISSING_TOKEN")


class InvalidAuthorizationHeaderError(AuthenticationError):
    """Raised when the authorization header is not '<scheme> <token>' with a supported scheme."""

    def __init__(self, message: str = "Invalid authorization header format"):
        super().__init__(message, code="INVALID_AUTHORIZATION_HEADER")


class InvalidCredentialsError(AuthenticationError):
    """Raised when an email/password pair does not match."""

    def __init__(self, message: str = "Invalid email or password"):
        super().__init__(message, code="INVALID_CREDENTIALS")


class SessionRevokedError(AuthenticationError):
    """Raised when a refresh token's session is blocked, expired or does not match."""

    def __init__(self, session_id: str, reason: str):
        super().__init__(
            f"Session {session_id} cannot be used: {reason}",
            code="SESSION_REVOKED",
            details={"session_id": session_id, "reason": reason},
        )


class InvalidKeyError(CatalogError):
    """Raised when the token maker is constructed with a key of the wrong size."""

    def __init__(self, expected: int, actual: int):
        super().__init__(
            f"Invalid key size: must be exactly {expected} characters, got {actual}",
            code="INVALID_TOKEN_KEY",
            details={"expected": expected, "actual": actual},
        )
