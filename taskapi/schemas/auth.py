from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import EmailStr, Field, field_validator

from taskapi.schemas.common import CamelModel

BCRYPT_MAX_BYTES = 72


class RegisterRequest(CamelModel):
    email: EmailStr
    password: str = Field(min_length=6)
    name: Optional[str] = Field(default=None, max_length=100)

    @field_validator("password")
    @classmethod
    def _fits_bcrypt(cls, v: str) -> str:
        # bcrypt는 72바이트 이후를 잘라버림
        if len(v.encode("utf-8")) > BCRYPT_MAX_BYTES:
            raise ValueError(f"Password must be at most {BCRYPT_MAX_BYTES} bytes")
        return v

    @field_validator("name")
    @classmethod
    def _strip_name(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return None
        return v.strip() or None


class LoginRequest(CamelModel):
    email: EmailStr
    password: str = Field(min_length=1)


class RefreshRequest(CamelModel):
    refresh_token: Optional[str] = None


class UserOut(CamelModel):
    id: UUID
    email: str
    name: Optional[str] = None
    created_at: datetime


class UserData(CamelModel):
    user: UserOut


class TokenData(CamelModel):
    access_token: str
    refresh_token: str
    token_type: str
    expires_in: int


class LoginData(TokenData):
    user: UserOut
