"""
Authentication API endpoints.

Registration, login and access token renewal. These routes are public.
"""

from fastapi import APIRouter, Depends, Request

from api.dependencies import get_auth_service

from .interfaces import IAuthService
from .models import (
    Credentials,
    LoginResponse,
    RenewAccessTokenRequest,
    RenewAccessTokenResponse,
)

router = APIRouter()


@router.post("/register", response_model=str, status_code=201)
async def register_user(
    credentials: Credentials,
    service: IAuthService = Depends(get_auth_service),
) -> str:
    """
    Register a new account and return its ID.

    The account is created inactive with the user role. Returns 409 if the
    email is already registered.
    """
    return await service.register(credentials)


@router.post("/login", response_model=LoginResponse)
async def login_user(
    credentials: Credentials,
    request: Request,
    service: IAuthService = Depends(get_auth_service),
) -> LoginResponse:
    """
    Log in with email and password.

    Returns an access token, a refresh token and the session that tracks
    the refresh token.
    """
    client_ip = request.client.host if request.client else ""
    return await service.login(
        credentials,
        user_agent=request.headers.get("user-agent", ""),
        client_ip=client_ip,
    )


@router.post("/renew", response_model=RenewAccessTokenResponse)
async def renew_access_token(
    request: RenewAccessTokenRequest,
    service: IAuthService = Depends(get_auth_service),
) -> RenewAccessTokenResponse:
    """Exchange a refresh token and its session for a new access token."""
    return await service.renew_access_token(request.session_id, request.refresh_token)
