"""
Authentication service implementation.

Registers accounts, logs users in with short-lived access tokens plus a
refresh token recorded as a session, and renews access tokens from
unblocked sessions.
"""

import asyncio
import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

from modules.catalog.exceptions import EntityNotFoundError
from modules.catalog.interfaces import IStore
from modules.catalog.models import Role, SessionCreate, User, UserCreate

from .exceptions import InvalidCredentialsError, SessionRevokedError
from .interfaces import IAuthService, ITokenMaker
from .models import (
    Credentials,
    LoginResponse,
    RenewAccessTokenResponse,
)
from .passwords import check_password, hash_password

logger = logging.getLogger(__name__)


class AuthService(IAuthService):
    """
    Implementation of the authentication service.

    Token subjects are user IDs. Store calls block, so they run in a
    worker thread.
    """

    def __init__(
        self,
        store: IStore,
        token_maker: ITokenMaker,
        access_token_duration: timedelta,
        refresh_token_duration: timedelta,
    ):
        self._store = store
        self._tokens = token_maker
        self._access_ttl = access_token_duration
        self._refresh_ttl = refresh_token_duration

    async def register(self, credentials: Credentials) -> str:
        password_hash = await asyncio.to_thread(hash_password, credentials.password)
        user_id = await asyncio.to_thread(
            self._store.create_user,
            UserCreate(
                email=credentials.email,
                password_hash=password_hash,
                role=Role.USER,
                is_active=False,
            ),
        )
        logger.info("Registered user %s", user_id)
        return user_id

    async def login(
        self,
        credentials: Credentials,
        user_agent: str = "",
        client_ip: str = "",
    ) -> LoginResponse:
        try:
            user = await asyncio.to_thread(self._store.get_user_by_email, credentials.email)
        except EntityNotFoundError:
            raise InvalidCredentialsError()

        matches = await asyncio.to_thread(check_password, credentials.password, user.password_hash)
        if not matches:
            raise InvalidCredentialsError()

        access_token, access_payload = self._tokens.create_token(user.id, self._access_ttl)
        refresh_token, refresh_payload = self._tokens.create_token(user.id, self._refresh_ttl)

        session_id = await asyncio.to_thread(
            self._store.create_session,
            SessionCreate(
                user_id=user.id,
                refresh_token=refresh_token,
                user_agent=user_agent,
                client_ip=client_ip,
                is_blocked=False,
                expires_at=refresh_payload.expires_at,
            ),
        )
        logger.info("User %s logged in with session %s", user.id, session_id)

        return LoginResponse(
            session_id=session_id,
            access_token=access_token,
            access_token_expires_at=access_payload.expires_at,
            refresh_token=refresh_token,
            refresh_token_expires_at=refresh_payload.expires_at,
            user=user,
        )

    async def renew_access_token(self, session_id: str, refresh_token: str) -> RenewAccessTokenResponse:
        refresh_payload = self._tokens.verify_token(refresh_token)
        session = await asyncio.to_thread(self._store.get_session_by_id, session_id)

        reason: Optional[str] = None
        if session.is_blocked:
            reason = "session is blocked"
        elif session.user is None or session.user.id != refresh_payload.subject:
            reason = "session belongs to another user"
        elif session.refresh_token != refresh_token:
            reason = "refresh token does not match"
        elif datetime.now(timezone.utc) > session.expires_at:
            reason = "session has expired"

        if reason is not None:
            logger.warning("Refused to renew access token for session %s: %s", session_id, reason)
            raise SessionRevokedError(session_id, reason)

        access_token, access_payload = self._tokens.create_token(refresh_payload.subject, self._access_ttl)
        return RenewAccessTokenResponse(
            access_token=access_token,
            access_token_expires_at=access_payload.expires_at,
        )

    async def get_user(self, user_id: str) -> User:
        return await asyncio.to_thread(self._store.get_user_by_id, user_id)
