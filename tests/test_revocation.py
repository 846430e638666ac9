"""Tests for the in-memory and database revocation lists."""

from datetime import datetime, timedelta, timezone

import pytest

from tokengate.services.revocation import DatabaseRevocationList, MemoryRevocationList
from tokengate.services.sessions import SessionIssuer

from conftest import API_KEY


def _in(seconds: int) -> datetime:
    return datetime.now(timezone.utc) + timedelta(seconds=seconds)


@pytest.fixture(params=["memory", "database"])
def revocations(request, engine):
    if request.param == "memory":
        return MemoryRevocationList()
    return DatabaseRevocationList(engine)


def test_unknown_id_not_revoked(revocations):
    assert not revocations.is_revoked("abc")


def test_revoked_until_expiry(revocations):
    revocations.revoke("abc", _in(3600))
    assert revocations.is_revoked("abc")
    assert not revocations.is_revoked("abd")


def test_expired_entry_no_longer_counts(revocations):
    revocations.revoke("old", _in(-5))
    assert not revocations.is_revoked("old")


def test_second_revoke_reports_existing_entry(revocations):
    assert revocations.revoke("abc", _in(3600)) is True
    assert revocations.revoke("abc", _in(3600)) is False
    assert revocations.is_revoked("abc")


def test_memory_list_purges_expired_entries():
    revocations = MemoryRevocationList()
    revocations.revoke("old", _in(-5))
    revocations.revoke("new", _in(3600))
    assert len(revocations) == 1


def test_database_purge_expired(engine):
    revocations = DatabaseRevocationList(engine)
    revocations.revoke("old", _in(-5))
    revocations.revoke("new", _in(3600))

    assert revocations.purge_expired() == 1
    assert revocations.is_revoked("new")


def test_database_list_shared_between_issuers(engine):
    """Revocation through one worker's issuer is seen by another's."""
    first = SessionIssuer(secret="shared", revocations=DatabaseRevocationList(engine))
    second = SessionIssuer(secret="shared", revocations=DatabaseRevocationList(engine))
    tokens = first.issue("owner", "basic", {}, API_KEY)

    first.revoke(tokens.refresh_token, API_KEY)

    assert not second.verify(tokens.access_token).valid
