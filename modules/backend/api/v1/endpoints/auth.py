"""
Auth API Endpoints.

Registration, login, token refresh and the caller's own profile.
"""

from fastapi import APIRouter

from modules.backend.core.dependencies import CurrentUser, DbSession, RequestId
from modules.backend.schemas.base import ApiResponse
from modules.backend.schemas.user import (
    AccessTokenResponse,
    TokenRefresh,
    TokenResponse,
    UserLogin,
    UserRegister,
    UserResponse,
)
from modules.backend.services.auth import AuthService

router = APIRouter()


@router.post(
    "/register",
    response_model=ApiResponse[UserResponse],
    status_code=201,
    summary="Create an account",
)
async def register(
    data: UserRegister,
    db: DbSession,
    request_id: RequestId,
) -> ApiResponse[UserResponse]:
    user = await AuthService(db).register(data)
    return ApiResponse(data=UserResponse.model_validate(user))


@router.post(
    "/login",
    response_model=ApiResponse[TokenResponse],
    summary="Log in with email and password",
)
async def login(
    data: UserLogin,
    db: DbSession,
    request_id: RequestId,
) -> ApiResponse[TokenResponse]:
    access_token, refresh_token = await AuthService(db).login(data.email, data.password)
    return ApiResponse(
        data=TokenResponse(access_token=access_token, refresh_token=refresh_token)
    )


@router.post(
    "/refresh",
    response_model=ApiResponse[AccessTokenResponse],
    summary="Exchange a refresh token for an access token",
)
async def refresh(
    data: TokenRefresh,
    db: DbSession,
    request_id: RequestId,
) -> ApiResponse[AccessTokenResponse]:
    access_token = await AuthService(db).refresh(data.refresh_token)
    return ApiResponse(data=AccessTokenResponse(access_token=access_token))


@router.get(
    "/user",
    response_model=ApiResponse[UserResponse],
    summary="Get the current user",
)
async def current_user(user: CurrentUser) -> ApiResponse[UserResponse]:
    return ApiResponse(data=UserResponse.model_validate(user))
