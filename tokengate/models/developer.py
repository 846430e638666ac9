"""Developer model — an application allowed to call the API."""

from datetime import datetime, timezone
from typing import Any

from sqlalchemy import JSON
from sqlmodel import SQLModel, Field, Column


class Developer(SQLModel, table=True):
    __tablename__ = "developer"

    id: int | None = Field(default=None, primary_key=True)
    email: str = ""
    app_name: str = ""
    api_key: str = Field(unique=True, index=True)
    api_secret_encrypted: str = ""  # Fernet-encrypted; HMAC needs the plaintext back
    # Ordered lowest to highest privilege, serialized AccessLevel schemas
    access_levels: list[dict[str, Any]] = Field(default_factory=list, sa_column=Column(JSON))
    is_active: bool = True
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
