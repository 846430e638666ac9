"""Developer (API consumer) lookup and registration.

The core only needs ``find_developer_by_api_key``. Records live in the
``developer`` table with the API secret Fernet-encrypted, because HMAC
verification needs the plaintext secret back.
"""

import logging
import secrets
from dataclasses import dataclass, field
from typing import Protocol

from pydantic import ValidationError
from sqlalchemy.engine import Engine
from sqlmodel import Session, select

from tokengate.models.developer import Developer
from tokengate.schemas.access_level import AccessLevel
from tokengate.services.encryption import decrypt_secret, encrypt_secret

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DeveloperRecord:
    api_key: str
    api_secret: str
    access_levels: list[AccessLevel] = field(default_factory=list)
    app_name: str = ""


class DeveloperDirectory(Protocol):
    def find_developer_by_api_key(self, api_key: str) -> DeveloperRecord | None: ...


class MemoryDeveloperDirectory:
    """Dict-backed directory for tests and local demos."""

    def __init__(self, records: list[DeveloperRecord] | None = None):
        self._records = {r.api_key: r for r in records or []}

    def add(self, record: DeveloperRecord) -> None:
        self._records[record.api_key] = record

    def find_developer_by_api_key(self, api_key: str) -> DeveloperRecord | None:
        return self._records.get(api_key)


class SQLDeveloperDirectory:
    """Directory reading active developers from the database."""

    def __init__(self, engine: Engine):
        self.engine = engine

    def find_developer_by_api_key(self, api_key: str) -> DeveloperRecord | None:
        with Session(self.engine) as session:
            developer = session.exec(
                select(Developer).where(Developer.api_key == api_key, Developer.is_active == True)  # noqa: E712
            ).first()
        if developer is None:
            return None
        return _to_record(developer)


def _to_record(developer: Developer) -> DeveloperRecord:
    levels = []
    for raw in developer.access_levels or []:
        try:
            levels.append(AccessLevel.model_validate(raw))
        except ValidationError as e:
            # A broken stored level is dropped rather than failing every request.
            logger.error(f"Developer {developer.id} has an invalid access level, skipping: {e}")
    return DeveloperRecord(
        api_key=developer.api_key,
        api_secret=decrypt_secret(developer.api_secret_encrypted),
        access_levels=levels,
        app_name=developer.app_name,
    )


def generate_api_credentials() -> tuple[str, str]:
    """Return a fresh (api_key, api_secret) pair."""
    return secrets.token_hex(16), secrets.token_hex(32)


def register_developer(
    session: Session,
    email: str,
    app_name: str,
    access_levels: list[AccessLevel],
) -> tuple[Developer, str]:
    """Create a developer and return it with the plaintext API secret.

    The secret is only available here; afterwards it exists encrypted.
    """
    api_key, api_secret = generate_api_credentials()
    developer = Developer(
        email=email,
        app_name=app_name,
        api_key=api_key,
        api_secret_encrypted=encrypt_secret(api_secret),
        access_levels=[level.model_dump(by_alias=True, mode="json") for level in access_levels],
    )
    session.add(developer)
    session.commit()
    session.refresh(developer)
    logger.info(f"Registered developer {developer.id} ({app_name}) with {len(access_levels)} access levels")
    return developer, api_secret
