from __future__ import annotations

import hashlib
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional, Tuple
from uuid import UUID, uuid4

from jose import JWTError, jwt

from taskapi.core.config import Settings, get_settings

ACCESS_COOKIE_NAME = "access_token"


# ---- 공통 ----
def _utcnow() -> datetime:
    return datetime.now(tz=timezone.utc)


def _exp_in(minutes: int = 0, days: int = 0) -> datetime:
    return _utcnow() + timedelta(minutes=minutes, days=days)


def _make_jwt(payload: Dict[str, Any], secret: str, exp: datetime, alg: str) -> str:
    to_encode = payload.copy()
    to_encode["iat"] = int(_utcnow().timestamp())
    to_encode["exp"] = int(exp.timestamp())
    return jwt.encode(to_encode, secret, algorithm=alg)


def _decode(token: str, secret: str, alg: str) -> Dict[str, Any]:
    # jose.jwt.decode는 서명 불일치/만료 시 JWTError(ExpiredSignatureError 포함)를 던짐
    return jwt.decode(token, secret, algorithms=[alg])


def sha256_hex(s: str) -> str:
    return hashlib.sha256(s.encode("utf-8")).hexdigest()


# ---- Access Token ----
def create_access_token(sub: UUID, settings: Optional[Settings] = None) -> str:
    settings = settings or get_settings()
    payload = {"sub": str(sub), "typ": "access"}
    exp = _exp_in(minutes=settings.access_token_expire_minutes)
    return _make_jwt(payload, settings.jwt_secret_key, exp, settings.jwt_algorithm)


def verify_access_token(token: str, settings: Optional[Settings] = None) -> Dict[str, Any]:
    """
    Return the payload of a valid access token.
    Raises JWTError on bad signature, expiry or a non-access token type.
    """
    settings = settings or get_settings()
    payload = _decode(token, settings.jwt_secret_key, settings.jwt_algorithm)
    if payload.get("typ") != "access":
        raise JWTError("Invalid token type")
    if "sub" not in payload:
        raise JWTError("Missing sub")
    return payload


def decode_access_token(token: str) -> Optional[Dict[str, Any]]:
    """verify_access_token, but None instead of raising."""
    try:
        return verify_access_token(token)
    except JWTError:
        return None


# ---- Refresh Token (회전 전제) ----
def new_refresh_jti() -> str:
    return str(uuid4())


def create_refresh_token(
    sub: UUID, jti: str, settings: Optional[Settings] = None
) -> Tuple[str, datetime]:
    """Return (token, expiry). The expiry is aware UTC."""
    settings = settings or get_settings()
    exp = _exp_in(days=settings.refresh_token_expire_days)
    payload = {"sub": str(sub), "jti": jti, "typ": "refresh"}
    token = _make_jwt(payload, settings.jwt_refresh_secret, exp, settings.jwt_algorithm)
    return token, exp


def verify_refresh_token(token: str, settings: Optional[Settings] = None) -> Dict[str, Any]:
    settings = settings or get_settings()
    payload = _decode(token, settings.jwt_refresh_secret, settings.jwt_algorithm)
    if payload.get("typ") != "refresh":
        raise JWTError("Invalid token type")
    for k in ("sub", "jti", "exp"):
        if k not in payload:
            raise JWTError(f"Missing {k}")
    return payload


# ---- 쿠키 ----
def set_refresh_cookie(response, token: str) -> None:
    # 개발에서 http라면 .env에서 SECURE_COOKIE=false 유지
    settings = get_settings()
    response.set_cookie(
        key=settings.refresh_cookie_name,
        value=token,
        httponly=True,
        secure=settings.secure_cookie,
        samesite="lax",
        max_age=settings.refresh_token_expire_days * 24 * 60 * 60,
        path="/",
    )


def clear_refresh_cookie(response) -> None:
    response.delete_cookie(
        key=get_settings().refresh_cookie_name,
        path="/",
    )


def set_access_cookie(response, token: str) -> None:
    settings = get_settings()
    response.set_cookie(
        key=ACCESS_COOKIE_NAME,
        value=token,
        httponly=True,
        secure=settings.secure_cookie,
        samesite="lax",
        max_age=settings.access_token_ttl_seconds,
        path="/",
    )


def clear_access_cookie(response) -> None:
    response.delete_cookie(ACCESS_COOKIE_NAME, path="/")
