"""
Authentication module data models.

These models define the data structures used by the auth module
and exposed to other modules through the interface.
"""

from datetime import datetime, timezone
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, EmailStr, Field

from modules.catalog.models import User


class TokenPayload(BaseModel):
    """
    Claims carried by an access or refresh token.

    Maps onto the JWT registered claims jti, sub, iat and exp.
    """

    id: UUID = Field(..., description="Random token instance ID")
    subject: str = Field(..., description="Authenticated identity (user ID)")
    issued_at: datetime = Field(..., description="When the token was issued")
    expires_at: datetime = Field(..., description="Absolute expiry")

    model_config = {"frozen": True}

    def is_expired(self, now: Optional[datetime] = None) -> bool:
        """A token is expired strictly after expires_at."""
        now = now or datetime.now(timezone.utc)
        return now > self.expires_at


class Credentials(BaseModel):
    """Email/password pair for registration and login."""

    email: EmailStr
    password: str = Field(..., min_length=6, max_length=72)


class LoginResponse(BaseModel):
    """Tokens and session issued by a successful login."""

    session_id: str
    access_token: str
    access_token_expires_at: datetime
    refresh_token: str
    refresh_token_expires_at: datetime
    user: User


class RenewAccessTokenRequest(BaseModel):
    """Request to exchange a refresh token for a new access token."""

    session_id: str
    refresh_token: str


class RenewAccessTokenResponse(BaseModel):
    """New access token issued from a refresh token."""

    access_token: str
    access_token_expires_at: datetime
