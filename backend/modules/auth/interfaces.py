"""
Authentication module interfaces.

Other modules should depend on ITokenMaker and IAuthService, not the
concrete implementations. This enables testing with mocks.
"""

from datetime import datetime, timedelta
from typing import TYPE_CHECKING, Optional, Protocol, runtime_checkable

from .models import TokenPayload

if TYPE_CHECKING:
    from modules.catalog.models import User
    from .models import Credentials, LoginResponse, RenewAccessTokenResponse


@runtime_checkable
class ITokenMaker(Protocol):
    """
    Interface for issuing and verifying authenticated tokens.

    Implementations are pure and hold no per-request state.
    """

    def create_token(
        self,
        subject: str,
        ttl: timedelta,
        now: Optional[datetime] = None,
    ) -> tuple[str, TokenPayload]:
        """
        Issue a token for subject valid for at least ttl.

        Args:
            subject: Identity the token is bound to
            ttl: Time to live from now
            now: Clock override, defaults to the current UTC time

        Returns:
            The encoded token and its payload
        """
        ...

    def verify_token(self, token: str, now: Optional[datetime] = None) -> TokenPayload:
        """
        Authenticate a token and return its payload.

        Args:
            token: Encoded token
            now: Clock override, defaults to the current UTC time

        Raises:
            InvalidTokenError: If the token is malformed or fails authentication
            ExpiredTokenError: If now is past the token's expiry
        """
        ...


@runtime_checkable
class IAuthService(Protocol):
    """
    Interface for account and session operations.
    """

    async def register(self, credentials: "Credentials") -> str:
        """
        Create an inactive user account.

        Returns:
            The new user's ID

        Raises:
            DuplicateEntityError: If the email is already registered
        """
        ...

    async def login(
        self,
        credentials: "Credentials",
        user_agent: str = "",
        client_ip: str = "",
    ) -> "LoginResponse":
        """
        Check credentials, issue access and refresh tokens, and record a session.

        Raises:
            InvalidCredentialsError: If the email is unknown or the password is wrong
        """
        ...

    async def renew_access_token(self, session_id: str, refresh_token: str) -> "RenewAccessTokenResponse":
        """
        Issue a new access token from a refresh token and its session.

        Raises:
            InvalidTokenError, ExpiredTokenError: If the refresh token fails verification
            SessionRevokedError: If the session is blocked, expired or does not match
        """
        ...

    async def get_user(self, user_id: str) -> "User":
        """Get the user a token subject refers to."""
        ...
