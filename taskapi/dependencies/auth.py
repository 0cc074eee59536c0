from typing import Optional
from uuid import UUID

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlmodel import Session

from taskapi.core.errors import Unauthorized
from taskapi.core.tokens import ACCESS_COOKIE_NAME, decode_access_token
from taskapi.db.session import get_session
from taskapi.models.user import User

bearer_scheme = HTTPBearer(auto_error=False)


def _extract_jwt(
    request: Request, credentials: Optional[HTTPAuthorizationCredentials]
) -> Optional[str]:
    if credentials is not None and credentials.credentials:
        return credentials.credentials
    return request.cookies.get(ACCESS_COOKIE_NAME)


def get_current_user(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: Session = Depends(get_session),
) -> User:
    """Strict auth dependency; raises 401 when the token is missing or invalid."""
    jwt_token = _extract_jwt(request, credentials)
    if not jwt_token:
        raise Unauthorized("Authentication required")

    payload = decode_access_token(jwt_token)
    if payload is None:
        raise Unauthorized("Invalid or expired token")

    try:
        user_id = UUID(str(payload["sub"]))
    except ValueError:
        raise Unauthorized("Invalid or expired token")

    user = db.get(User, user_id)
    if user is None:
        raise Unauthorized("Invalid or expired token")
    return user
