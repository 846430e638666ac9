"""Tests for developer registration and the database-backed directory."""

from decimal import Decimal

from sqlmodel import Session

from tokengate.models.developer import Developer
from tokengate.services.developers import (
    MemoryDeveloperDirectory,
    SQLDeveloperDirectory,
    generate_api_credentials,
    register_developer,
)
from tokengate.services.encryption import decrypt_secret, encrypt_secret

from conftest import JUPSOL, level


def test_generated_credentials_are_hex_and_unique():
    key, secret = generate_api_credentials()
    other_key, _ = generate_api_credentials()
    assert len(key) == 32 and len(secret) == 64
    assert all(c in "0123456789abcdef" for c in key + secret)
    assert key != other_key


def test_register_and_find(engine, encryption_key):
    levels = [level("basic"), level("premium", (JUPSOL, Decimal("0.5")))]
    with Session(engine) as session:
        developer, secret = register_developer(session, "dev@example.com", "Demo", levels)
        api_key = developer.api_key
        assert developer.api_secret_encrypted != secret
        assert decrypt_secret(developer.api_secret_encrypted) == secret

    record = SQLDeveloperDirectory(engine).find_developer_by_api_key(api_key)

    assert record is not None
    assert record.api_secret == secret
    assert record.app_name == "Demo"
    assert [lvl.level_name for lvl in record.access_levels] == ["basic", "premium"]
    assert record.access_levels[1].token_requirements[0].min_amount == Decimal("0.5")


def test_unknown_key_not_found(engine, encryption_key):
    assert SQLDeveloperDirectory(engine).find_developer_by_api_key("nope") is None


def test_inactive_developer_not_found(engine, encryption_key):
    with Session(engine) as session:
        session.add(Developer(api_key="k1", api_secret_encrypted=encrypt_secret("s1"), is_active=False))
        session.commit()

    assert SQLDeveloperDirectory(engine).find_developer_by_api_key("k1") is None


def test_invalid_stored_level_is_skipped(engine, encryption_key):
    stored = [
        {"levelName": "basic", "network": "mainnet", "tokenRequirements": []},
        {"levelName": "broken", "tokenRequirements": [{"tokenMintAddress": "nope", "minAmount": 1}]},
    ]
    with Session(engine) as session:
        session.add(Developer(api_key="k2", api_secret_encrypted=encrypt_secret("s2"), access_levels=stored))
        session.commit()

    record = SQLDeveloperDirectory(engine).find_developer_by_api_key("k2")

    assert [lvl.level_name for lvl in record.access_levels] == ["basic"]


def test_memory_directory(directory):
    assert directory.find_developer_by_api_key("test-api-key-123").app_name == "Test App"
    assert directory.find_developer_by_api_key("other") is None
    assert MemoryDeveloperDirectory().find_developer_by_api_key("test-api-key-123") is None


def test_stored_level_without_network_is_skipped(engine, encryption_key):
    stored = [
        {"levelName": "legacy", "tokenRequirements": []},
        {"levelName": "basic", "network": "testnet", "tokenRequirements": []},
    ]
    with Session(engine) as session:
        session.add(Developer(api_key="k3", api_secret_encrypted=encrypt_secret("s3"), access_levels=stored))
        session.commit()

    record = SQLDeveloperDirectory(engine).find_developer_by_api_key("k3")

    assert [(lvl.level_name, lvl.network) for lvl in record.access_levels] == [("basic", "testnet")]
