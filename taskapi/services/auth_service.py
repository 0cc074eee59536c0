from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional
from uuid import UUID

from jose import JWTError
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select

from taskapi.core.config import get_settings
from taskapi.core.errors import Conflict, Unauthorized
from taskapi.core.security import get_password_hash, verify_password
from taskapi.core.tokens import (
    create_access_token,
    create_refresh_token,
    new_refresh_jti,
    sha256_hex,
    verify_refresh_token,
)
from taskapi.db.types import as_utc, utcnow
from taskapi.models.refresh_token import RefreshToken
from taskapi.models.user import User

log = logging.getLogger(__name__)


@dataclass
class IssuedTokens:
    user: User
    access_token: str
    refresh_token: str
    expires_in: int
    token_type: str = "bearer"


def normalize_email(email: str) -> str:
    return email.strip().lower()


class AuthService:
    """
    Registration, credential checks and the refresh-token lifecycle.
    Refresh tokens are rotated on every use; presenting a rotated or revoked
    token revokes every live token of that user.
    """

    def __init__(self, db: Session):
        self.db = db

    # ---- users ----
    def get_user(self, user_id: UUID) -> Optional[User]:
        return self.db.get(User, user_id)

    def get_user_by_email(self, email: str) -> Optional[User]:
        stmt = select(User).where(User.email == normalize_email(email))
        return self.db.exec(stmt).first()

    def register(self, email: str, password: str, name: Optional[str] = None) -> User:
        email = normalize_email(email)
        if self.get_user_by_email(email) is not None:
            raise Conflict("User with this email already exists")

        user = User(email=email, password_hash=get_password_hash(password), name=name)
        self.db.add(user)
        try:
            self.db.commit()
        except IntegrityError:
            # 동시 가입 경합: unique index가 최종 판정
            self.db.rollback()
            raise Conflict("User with this email already exists")
        self.db.refresh(user)
        log.info("Registered user %s", user.id)
        return user

    def authenticate(self, email: str, password: str) -> User:
        user = self.get_user_by_email(email)
        if user is None or not verify_password(password, user.password_hash):
            log.info("Failed login attempt")
            raise Unauthorized("Invalid credentials")
        return user

    # ---- sessions ----
    def login(
        self,
        email: str,
        password: str,
        *,
        ip: Optional[str] = None,
        user_agent: Optional[str] = None,
    ) -> IssuedTokens:
        user = self.authenticate(email, password)
        tokens = self._issue_tokens(user, ip=ip, user_agent=user_agent)
        self.db.commit()
        log.info("User %s logged in", user.id)
        return tokens

    def refresh(
        self,
        refresh_token: Optional[str],
        *,
        ip: Optional[str] = None,
        user_agent: Optional[str] = None,
    ) -> IssuedTokens:
        if not refresh_token:
            raise Unauthorized("Refresh token missing")

        try:
            payload = verify_refresh_token(refresh_token)
        except JWTError:
            raise Unauthorized("Invalid or expired refresh token")

        # 동시 refresh 경합: 행 잠금으로 한 요청만 회전
        stmt = (
            select(RefreshToken)
            .where(RefreshToken.jti == payload["jti"])
            .with_for_update()
            .execution_options(populate_existing=True)
        )
        rt_row = self.db.exec(stmt).first()
        if rt_row is None or rt_row.token_hash != sha256_hex(refresh_token):
            raise Unauthorized("Refresh token not recognized")

        if not rt_row.is_active:
            self._revoke_all(rt_row.user_id)
            self.db.commit()
            log.warning("Refresh token reuse detected for user %s", rt_row.user_id)
            raise Unauthorized("Refresh token has been revoked")

        if as_utc(rt_row.expires_at) <= utcnow():
            raise Unauthorized("Refresh token expired")

        user = self.get_user(rt_row.user_id)
        if user is None or str(user.id) != payload["sub"]:
            raise Unauthorized("Refresh token not recognized")

        tokens = self._issue_tokens(user, ip=ip, user_agent=user_agent, replaces=rt_row)
        self.db.commit()
        log.info("Rotated refresh token for user %s", user.id)
        return tokens

    def logout(self, refresh_token: Optional[str]) -> bool:
        """Revoke the presented refresh token. Returns whether anything changed."""
        if not refresh_token:
            return False
        try:
            payload = verify_refresh_token(refresh_token)
        except JWTError:
            return False

        rt_row = self.db.get(RefreshToken, payload["jti"])
        if rt_row is None or rt_row.token_hash != sha256_hex(refresh_token):
            return False
        if rt_row.revoked_at is not None:
            return False

        rt_row.revoked_at = utcnow()
        self.db.add(rt_row)
        self.db.commit()
        log.info("User %s logged out", rt_row.user_id)
        return True

    # ---- internals ----
    def _issue_tokens(
        self,
        user: User,
        *,
        ip: Optional[str],
        user_agent: Optional[str],
        replaces: Optional[RefreshToken] = None,
    ) -> IssuedTokens:
        access_token = create_access_token(user.id)
        jti = new_refresh_jti()
        refresh_token, exp = create_refresh_token(user.id, jti)

        if replaces is not None:
            replaces.revoked_at = utcnow()
            replaces.replaced_by = jti
            self.db.add(replaces)

        self.db.add(
            RefreshToken(
                jti=jti,
                user_id=user.id,
                token_hash=sha256_hex(refresh_token),
                expires_at=exp,
                ip=ip,
                user_agent=user_agent,
            )
        )
        return IssuedTokens(
            user=user,
            access_token=access_token,
            refresh_token=refresh_token,
            expires_in=get_settings().access_token_ttl_seconds,
        )

    def _revoke_all(self, user_id: UUID) -> None:
        stmt = select(RefreshToken).where(
            RefreshToken.user_id == user_id,
            RefreshToken.revoked_at.is_(None),
        )
        now = utcnow()
        for row in self.db.exec(stmt):
            row.revoked_at = now
            self.db.add(row)
