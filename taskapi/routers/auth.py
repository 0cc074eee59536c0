from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Body, Depends, Request, Response, status
from sqlmodel import Session

from taskapi.core.config import get_settings
from taskapi.core.tokens import (
    clear_access_cookie,
    clear_refresh_cookie,
    set_access_cookie,
    set_refresh_cookie,
)
from taskapi.db.session import get_session
from taskapi.dependencies.auth import get_current_user
from taskapi.models.user import User
from taskapi.schemas.auth import (
    LoginData,
    LoginRequest,
    RefreshRequest,
    RegisterRequest,
    TokenData,
    UserData,
    UserOut,
)
from taskapi.schemas.common import ApiResponse
from taskapi.services.auth_service import AuthService, IssuedTokens

auth_router = APIRouter(prefix="/auth", tags=["auth"])


# ──────────────────────────────────────────────────────────────────────────────
# 내부 헬퍼
# ──────────────────────────────────────────────────────────────────────────────
def _client_meta(request: Request) -> dict:
    return {
        "ip": request.client.host if request.client else None,
        "user_agent": request.headers.get("user-agent"),
    }


def _presented_refresh_token(request: Request, body: Optional[RefreshRequest]) -> Optional[str]:
    """JSON body first, then the HttpOnly cookie."""
    if body is not None and body.refresh_token:
        return body.refresh_token
    return request.cookies.get(get_settings().refresh_cookie_name) or None


def _set_cookies(response: Response, tokens: IssuedTokens) -> None:
    set_refresh_cookie(response, tokens.refresh_token)
    if get_settings().auth_set_access_cookie:
        set_access_cookie(response, tokens.access_token)


def _token_fields(tokens: IssuedTokens) -> dict:
    return {
        "access_token": tokens.access_token,
        "refresh_token": tokens.refresh_token,
        "token_type": tokens.token_type,
        "expires_in": tokens.expires_in,
    }


# ──────────────────────────────────────────────────────────────────────────────
# 엔드포인트
# ──────────────────────────────────────────────────────────────────────────────
@auth_router.post(
    "/register",
    status_code=status.HTTP_201_CREATED,
    response_model=ApiResponse[UserData],
    response_model_exclude_unset=True,
)
def register(body: RegisterRequest, db: Session = Depends(get_session)):
    user = AuthService(db).register(body.email, body.password, body.name)
    return ApiResponse[UserData](
        success=True,
        message="User registered successfully",
        data=UserData(user=UserOut.model_validate(user)),
    )


@auth_router.post(
    "/login",
    response_model=ApiResponse[LoginData],
    response_model_exclude_unset=True,
)
def login(
    body: LoginRequest,
    request: Request,
    response: Response,
    db: Session = Depends(get_session),
):
    tokens = AuthService(db).login(body.email, body.password, **_client_meta(request))
    _set_cookies(response, tokens)
    return ApiResponse[LoginData](
        success=True,
        message="Login successful",
        data=LoginData(user=UserOut.model_validate(tokens.user), **_token_fields(tokens)),
    )


@auth_router.post(
    "/refresh",
    response_model=ApiResponse[TokenData],
    response_model_exclude_unset=True,
)
def refresh(
    request: Request,
    response: Response,
    body: Optional[RefreshRequest] = Body(default=None),
    db: Session = Depends(get_session),
):
    """Exchange a refresh token for a new access token. The refresh token is rotated."""
    presented = _presented_refresh_token(request, body)
    tokens = AuthService(db).refresh(presented, **_client_meta(request))
    _set_cookies(response, tokens)
    return ApiResponse[TokenData](
        success=True,
        message="Token refreshed successfully",
        data=TokenData(**_token_fields(tokens)),
    )


@auth_router.post(
    "/logout",
    response_model=ApiResponse[None],
    response_model_exclude_unset=True,
)
def logout(
    request: Request,
    response: Response,
    body: Optional[RefreshRequest] = Body(default=None),
    db: Session = Depends(get_session),
):
    AuthService(db).logout(_presented_refresh_token(request, body))
    clear_refresh_cookie(response)
    clear_access_cookie(response)
    return ApiResponse[None](success=True, message="Logout successful")


@auth_router.get(
    "/me",
    response_model=ApiResponse[UserData],
    response_model_exclude_unset=True,
)
def me(user: User = Depends(get_current_user)):
    return ApiResponse[UserData](success=True, data=UserData(user=UserOut.model_validate(user)))
