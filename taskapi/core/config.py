# taskapi/core/config.py
from functools import lru_cache
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

_ALLOWED_ENVS = {"dev", "prod", "test"}


class Settings(BaseSettings):
    # 기본 앱 설정
    env: str = Field("dev", alias="ENV")
    app_version: str = Field("0.1.0", alias="APP_VERSION")
    log_level: str = Field("INFO", alias="LOG_LEVEL")

    # DB
    database_url: str = Field("", alias="DATABASE_URL")
    database_driver: str = Field("psycopg2", alias="DATABASE_DRIVER")
    db_sslmode: Optional[str] = Field(None, alias="DB_SSLMODE")

    # JWT
    jwt_secret_key: str = Field("taskapi-access-secret-change-me", alias="JWT_SECRET_KEY")
    jwt_refresh_secret: str = Field("taskapi-refresh-secret-change-me", alias="JWT_REFRESH_SECRET")
    jwt_algorithm: str = Field("HS256", alias="JWT_ALGORITHM")
    access_token_expire_minutes: int = Field(15, alias="ACCESS_TOKEN_EXPIRE_MINUTES")
    refresh_token_expire_days: int = Field(7, alias="REFRESH_TOKEN_EXPIRE_DAYS")

    # 쿠키
    refresh_cookie_name: str = Field("refreshToken", alias="REFRESH_COOKIE_NAME")
    secure_cookie: bool = Field(False, alias="SECURE_COOKIE")
    auth_set_access_cookie: bool = Field(False, alias="AUTH_SET_ACCESS_COOKIE")

    cors_allow_origins: str = Field("http://localhost:3001", alias="CORS_ALLOW_ORIGINS")
    bcrypt_rounds: int = Field(12, alias="BCRYPT_ROUNDS")

    model_config = SettingsConfigDict(
        env_file=".env",
        extra="ignore",
        populate_by_name=True,
    )

    @field_validator("env")
    @classmethod
    def _check_env(cls, v: str) -> str:
        env = v.strip().lower()
        if env not in _ALLOWED_ENVS:
            allowed = "|".join(sorted(_ALLOWED_ENVS))
            raise ValueError(f"ENV must be one of {allowed}")
        return env

    @property
    def cors_origins(self) -> list[str]:
        return [o.strip() for o in self.cors_allow_origins.split(",") if o.strip()]

    @property
    def access_token_ttl_seconds(self) -> int:
        return 60 * self.access_token_expire_minutes


@lru_cache
def get_settings() -> Settings:
    return Settings()
