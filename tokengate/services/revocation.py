"""Denylists for revoked token and session identifiers.

Session tokens are self-contained JWTs, so revocation only binds if every
refresh and verification consults a denylist. Entries carry the natural
expiry of the revoked token and are meaningless after it.
"""

import logging
import time
from datetime import datetime, timezone
from typing import Protocol

from sqlalchemy import delete
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select

from tokengate.models.revoked_token import RevokedToken

logger = logging.getLogger(__name__)


class RevocationList(Protocol):
    def revoke(self, token_id: str, expires_at: datetime) -> bool:
        """Denylist ``token_id``. Returns False if it was already denylisted."""
        ...

    def is_revoked(self, token_id: str) -> bool: ...


def _as_utc(value: datetime) -> datetime:
    # SQLite hands datetimes back without tzinfo; everything is stored as UTC.
    return value if value.tzinfo is not None else value.replace(tzinfo=timezone.utc)


class MemoryRevocationList:
    """Process-local denylist. Lost on restart; use the database list in production."""

    def __init__(self):
        self._entries: dict[str, float] = {}  # token_id -> expiry epoch seconds

    def revoke(self, token_id: str, expires_at: datetime) -> bool:
        if self.is_revoked(token_id):
            return False
        self._entries[token_id] = _as_utc(expires_at).timestamp()
        self._purge()
        return True

    def is_revoked(self, token_id: str) -> bool:
        expiry = self._entries.get(token_id)
        if expiry is None:
            return False
        if expiry <= time.time():
            del self._entries[token_id]
            return False
        return True

    def _purge(self) -> None:
        now = time.time()
        for token_id in [t for t, expiry in self._entries.items() if expiry <= now]:
            del self._entries[token_id]

    def __len__(self) -> int:
        return len(self._entries)


class DatabaseRevocationList:
    """Denylist stored in the ``revoked_token`` table, shared by all workers."""

    def __init__(self, engine: Engine):
        self.engine = engine

    def revoke(self, token_id: str, expires_at: datetime) -> bool:
        # The unique index on token_id decides between concurrent workers.
        with Session(self.engine) as session:
            session.add(RevokedToken(token_id=token_id, expires_at=_as_utc(expires_at)))
            try:
                session.commit()
            except IntegrityError:
                session.rollback()
                logger.debug(f"Token {token_id} already revoked")
                return False
        return True

    def is_revoked(self, token_id: str) -> bool:
        with Session(self.engine) as session:
            row = session.exec(select(RevokedToken).where(RevokedToken.token_id == token_id)).first()
        if row is None:
            return False
        return _as_utc(row.expires_at) > datetime.now(timezone.utc)

    def purge_expired(self) -> int:
        """Delete entries whose tokens have expired anyway. Returns rows removed."""
        now = datetime.now(timezone.utc)
        with Session(self.engine) as session:
            result = session.execute(delete(RevokedToken).where(RevokedToken.expires_at <= now))
            session.commit()
            removed = result.rowcount or 0
        if removed:
            logger.info(f"Purged {removed} expired revocation entries")
        return removed
