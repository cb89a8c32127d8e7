"""Authentication endpoints for the Farmer Social API."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Request, Response, status
from fastapi.responses import JSONResponse

from farmer_social.api.errors import error_response
from farmer_social.api.v1.dependencies import (
    CurrentUserDep,
    SettingsDep,
    TokenServiceDep,
    UserServiceDep,
)
from farmer_social.core.errors import AuthenticationError, RefreshTokenExpiredError
from farmer_social.core.settings import Settings
from farmer_social.schemas.common import MessageResponse
from farmer_social.schemas.user import (
    LoginRequest,
    LoginResponse,
    RefreshResponse,
    RegisterRequest,
    UserEnvelope,
    UserResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["authentication"])


def _set_refresh_cookie(response: Response, token: str, app_settings: Settings) -> None:
    response.set_cookie(
        key=app_settings.refresh_cookie_name,
        value=token,
        max_age=app_settings.refresh_cookie_max_age,
        httponly=True,
        secure=app_settings.refresh_cookie_secure,
        samesite=app_settings.refresh_cookie_samesite,  # type: ignore[arg-type]
    )


def _clear_refresh_cookie(response: Response, app_settings: Settings) -> None:
    response.delete_cookie(
        key=app_settings.refresh_cookie_name,
        httponly=True,
        secure=app_settings.refresh_cookie_secure,
        samesite=app_settings.refresh_cookie_samesite,  # type: ignore[arg-type]
    )


@router.post(
    "/register",
    summary="Register a new account",
    status_code=status.HTTP_201_CREATED,
    response_model=UserEnvelope,
)
async def register_user(payload: RegisterRequest, users: UserServiceDep) -> UserEnvelope:
    """Create a ``registered`` account. The client logs in separately."""
    user = users.register(payload)
    return UserEnvelope(
        message="User registered successfully",
        user=UserResponse.model_validate(user),
    )


@router.post("/login", summary="Log in with email and password", response_model=LoginResponse)
async def login_user(
    payload: LoginRequest,
    response: Response,
    users: UserServiceDep,
    tokens: TokenServiceDep,
    app_settings: SettingsDep,
) -> LoginResponse:
    """Return an access token and set the refresh token cookie."""
    try:
        user = users.authenticate_credentials(payload.email, payload.password)
    except AuthenticationError as err:
        logger.info("Failed login for %s: %s", payload.email, err.message)
        raise

    access_token = tokens.issue_access_token(user.id)
    refresh_token = tokens.issue_refresh_token(user.id)
    _set_refresh_cookie(response, refresh_token, app_settings)
    logger.info("User %s logged in", user.id)
    return LoginResponse(token=access_token, user=UserResponse.model_validate(user))


@router.post(
    "/refresh",
    summary="Exchange the refresh token cookie for a new access token",
    response_model=RefreshResponse,
)
async def refresh_access_token(
    request: Request,
    tokens: TokenServiceDep,
    app_settings: SettingsDep,
) -> RefreshResponse | JSONResponse:
    """Mint a new access token. The refresh token itself is not rotated."""
    refresh_token = request.cookies.get(app_settings.refresh_cookie_name)
    if not refresh_token:
        raise AuthenticationError("No refresh token provided")

    try:
        access_token = tokens.redeem_refresh_token(refresh_token)
    except RefreshTokenExpiredError as err:
        failure = error_response(err)
        _clear_refresh_cookie(failure, app_settings)
        return failure
    except AuthenticationError as err:
        logger.info("Refresh rejected: %s", err.message)
        raise
    return RefreshResponse(token=access_token)


@router.post("/logout", summary="Revoke the refresh token", response_model=MessageResponse)
async def logout_user(
    request: Request,
    response: Response,
    tokens: TokenServiceDep,
    app_settings: SettingsDep,
) -> MessageResponse:
    """Delete the stored refresh token, if any, and clear the cookie."""
    refresh_token = request.cookies.get(app_settings.refresh_cookie_name)
    if refresh_token:
        tokens.revoke_refresh_token(refresh_token)
    _clear_refresh_cookie(response, app_settings)
    return MessageResponse(message="Logout successful")


@router.get("/me", summary="Current user", response_model=UserEnvelope)
async def read_current_user(identity: CurrentUserDep, users: UserServiceDep) -> UserEnvelope:
    user = users.get_user(identity.id)
    return UserEnvelope(user=UserResponse.model_validate(user))
