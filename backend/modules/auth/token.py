"""
Token maker.

Issues and verifies compact HS256-signed JWTs bound to a subject and an
absolute expiry. Verification needs only the token, the shared key and the
clock; revocation is layered on top by the auth service through sessions.
"""

import uuid
from datetime import datetime, timedelta, timezone
from typing import Optional

import jwt

from .exceptions import ExpiredTokenError, InvalidKeyError, InvalidTokenError
from .interfaces import ITokenMaker
from .models import TokenPayload

SYMMETRIC_KEY_SIZE = 32
ALGORITHM = "HS256"
REQUIRED_CLAIMS = ["jti", "sub", "iat", "exp"]


class JWTMaker(ITokenMaker):
    """ITokenMaker backed by PyJWT with a pre-shared symmetric key."""

    def __init__(self, symmetric_key: str):
        """
        Args:
            symmetric_key: Shared secret, exactly 32 characters

        Raises:
            InvalidKeyError: If the key has any other length
        """
        if len(symmetric_key) != SYMMETRIC_KEY_SIZE:
            raise InvalidKeyError(SYMMETRIC_KEY_SIZE, len(symmetric_key))
        self._key = symmetric_key

    def create_token(
        self,
        subject: str,
        ttl: timedelta,
        now: Optional[datetime] = None,
    ) -> tuple[str, TokenPayload]:
        now = now or datetime.now(timezone.utc)
        # Claims hold whole seconds: iat rounds down and exp rounds up, so the
        # token is never valid for less than ttl.
        payload = TokenPayload(
            id=uuid.uuid4(),
            subject=subject,
            issued_at=now.replace(microsecond=0),
            expires_at=_ceil_to_second(now + ttl),
        )
        claims = {
            "jti": str(payload.id),
            "sub": payload.subject,
            "iat": int(payload.issued_at.timestamp()),
            "exp": int(payload.expires_at.timestamp()),
        }
        token = jwt.encode(claims, self._key, algorithm=ALGORITHM)
        return token, payload

    def verify_token(self, token: str, now: Optional[datetime] = None) -> TokenPayload:
        try:
            claims = jwt.decode(
                token,
                self._key,
                algorithms=[ALGORITHM],
                # Expiry is checked below against the caller's clock.
                options={"require": REQUIRED_CLAIMS, "verify_exp": False, "verify_iat": False},
            )
            payload = TokenPayload(
                id=claims["jti"],
                subject=claims["sub"],
                issued_at=datetime.fromtimestamp(claims["iat"], tz=timezone.utc),
                expires_at=datetime.fromtimestamp(claims["exp"], tz=timezone.utc),
            )
        except jwt.InvalidTokenError as e:
            raise InvalidTokenError(f"Token is invalid: {e}") from e
        except (TypeError, ValueError) as e:
            raise InvalidTokenError(f"Token is invalid: {e}") from e

        if payload.is_expired(now):
            raise ExpiredTokenError()
        return payload


def _ceil_to_second(moment: datetime) -> datetime:
    truncated = moment.replace(microsecond=0)
    if truncated == moment:
        return truncated
    return truncated + timedelta(seconds=1)
