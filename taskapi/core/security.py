from functools import lru_cache

from passlib.context import CryptContext

from taskapi.core.config import get_settings


@lru_cache
def _pwd_context() -> CryptContext:
    return CryptContext(
        schemes=["bcrypt"],
        deprecated="auto",
        bcrypt__rounds=get_settings().bcrypt_rounds,
    )


def get_password_hash(password: str) -> str:
    return _pwd_context().hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return _pwd_context().verify(plain_password, hashed_password)
