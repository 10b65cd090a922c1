"""
Authentication API Endpoints.

Signup, login, refresh-token rotation and logout. Payloads use camelCase
keys (``fullName``, ``accessToken``...).
"""

from __future__ import annotations

from fastapi import APIRouter, Request, status

from athlinked.core.logging_config import get_logger
from athlinked.core.models.io.auth import AuthResponse, LoginRequest, RefreshRequest, SignupRequest, UserPublic
from athlinked.core.models.io.network import ActionResult
from athlinked.server.services.auth import IssuedTokens
from athlinked.server.services.deps import AuthServiceDep, CurrentUserDep

logger = get_logger(__name__)

router = APIRouter()


def _client(request: Request):
    return request.headers.get("user-agent"), request.client.host if request.client else None


def _auth_response(tokens: IssuedTokens, message: str) -> AuthResponse:
    return AuthResponse(
        message=message,
        access_token=tokens.access_token,
        refresh_token=tokens.refresh_token,
        user=UserPublic.model_validate(tokens.user),
    )


@router.post(
    "/signup",
    response_model=AuthResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Sign Up",
    description="Create an account and receive a token pair.",
    response_description="Token pair and the new user.",
    responses={
        201: {"description": "Account created"},
        400: {"description": "Invalid signup data"},
        409: {"description": "Email or username already registered"},
    },
)
async def signup(payload: SignupRequest, request: Request, service: AuthServiceDep) -> AuthResponse:
    """
    Create a new account.

    - **email**: Login email; stored lower-cased.
    - **password**: At least 6 characters.
    - **fullName**: Display name.
    - **userType**: athlete, coach, parent or organization.
    - **username**: Optional handle usable instead of the email at login.
    - **parentEmail**: Guardian email for minors.
    """
    device_info, ip_address = _client(request)
    tokens = await service.signup(payload, device_info=device_info, ip_address=ip_address)
    return _auth_response(tokens, "User created successfully")


@router.post(
    "/login",
    response_model=AuthResponse,
    summary="Log In",
    description="Authenticate with an email address or a username.",
    response_description="Token pair and the user.",
    responses={
        200: {"description": "Authenticated"},
        401: {"description": "Invalid email/username or password"},
    },
)
async def login(payload: LoginRequest, request: Request, service: AuthServiceDep) -> AuthResponse:
    """
    Log in.

    - **email**: Email address, or username when it contains no ``@``.
    - **password**: Account password.
    """
    device_info, ip_address = _client(request)
    tokens = await service.login(payload.email, payload.password, device_info=device_info, ip_address=ip_address)
    return _auth_response(tokens, "Login successful")


@router.post(
    "/auth/refresh",
    response_model=AuthResponse,
    summary="Refresh Tokens",
    description="Exchange a refresh token for a new token pair. The used refresh token is revoked.",
    responses={
        200: {"description": "New token pair issued"},
        401: {"description": "Refresh token unknown, revoked or expired"},
    },
)
async def refresh(payload: RefreshRequest, request: Request, service: AuthServiceDep) -> AuthResponse:
    device_info, ip_address = _client(request)
    tokens = await service.refresh(payload.refresh_token, device_info=device_info, ip_address=ip_address)
    return _auth_response(tokens, "Token refreshed successfully")


@router.post(
    "/auth/logout",
    response_model=ActionResult,
    summary="Log Out",
    description="Revoke one refresh token.",
)
async def logout(payload: RefreshRequest, service: AuthServiceDep) -> ActionResult:
    """Revoking an unknown or already revoked token still succeeds."""
    await service.logout(payload.refresh_token)
    return ActionResult(success=True, message="Logged out successfully")


@router.post(
    "/auth/logout-all",
    response_model=ActionResult,
    summary="Log Out Everywhere",
    description="Revoke every refresh token of the current user.",
    responses={401: {"description": "Access token missing or invalid"}},
)
async def logout_all(current_user: CurrentUserDep, service: AuthServiceDep) -> ActionResult:
    count = await service.logout_all(current_user)
    return ActionResult(success=True, message=f"Logged out from {count} sessions")
