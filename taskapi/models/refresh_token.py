from __future__ import annotations

from datetime import datetime
from typing import Optional
from uuid import UUID

from sqlmodel import SQLModel, Field

from taskapi.db.types import UTCDateTime, utcnow


class RefreshToken(SQLModel, table=True):
    """
    Refresh token record for rotation and reuse detection.
    - jti: unique id carried in the JWT 'jti' claim
    - token_hash: sha256 of the raw token; the token itself is never stored
    - replaced_by: jti of the token issued when this one was rotated
    """
    __tablename__ = "refreshtoken"

    jti: str = Field(primary_key=True, index=True)
    user_id: UUID = Field(index=True, foreign_key="user.id")
    token_hash: str = Field(nullable=False)

    created_at: datetime = Field(default_factory=utcnow, sa_type=UTCDateTime)
    expires_at: datetime = Field(sa_type=UTCDateTime)
    revoked_at: Optional[datetime] = Field(default=None, sa_type=UTCDateTime)
    replaced_by: Optional[str] = None

    ip: Optional[str] = None
    user_agent: Optional[str] = None

    @property
    def is_active(self) -> bool:
        return self.revoked_at is None and self.replaced_by is None
