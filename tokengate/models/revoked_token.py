"""RevokedToken model — denylist of session and refresh token IDs."""

from datetime import datetime
from sqlmodel import SQLModel, Field


class RevokedToken(SQLModel, table=True):
    __tablename__ = "revoked_token"

    id: int | None = Field(default=None, primary_key=True)
    token_id: str = Field(unique=True, index=True)  # jti or sid claim
    expires_at: datetime  # natural expiry of the revoked token; row is useless afterwards
