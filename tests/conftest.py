"""Shared fixtures: a scriptable ledger, wallets, developers and a wired-up app."""

import base58
import pytest
from cryptography.fernet import Fernet
from fastapi.testclient import TestClient
from nacl.signing import SigningKey
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel, create_engine

from tokengate.config import settings
from tokengate.exceptions import LedgerError
from tokengate.schemas.access_level import AccessLevel, TokenRequirement
from tokengate.services.access_levels import AccessLevelResolver
from tokengate.services.balance_cache import BalanceCache
from tokengate.services.developers import DeveloperRecord, MemoryDeveloperDirectory
from tokengate.services.sessions import SessionIssuer

USDC = "EPjFWdd5AufqSSqeM2qN1xzybapC8G4wEGGkZwyTDt1v"
JUPSOL = "jupSoLaHXQiZZTSfEWMTRRgpnyFm8f6sZdosWBjx93v"
BONK = "DezXAZ8z7PnrnRJjz3wXBoRgixCa6xjnB7YaB1pPB263"

API_KEY = "test-api-key-123"
API_SECRET = "test-api-secret-456"


class FakeLedger:
    """In-memory ledger: raw balances per (network, mint, owner), decimals per (network, mint)."""

    def __init__(self, networks=("testnet", "mainnet")):
        self.networks = set(networks)
        self.balances: dict[tuple[str, str, str], int] = {}
        self.decimals: dict[tuple[str, str], int] = {}
        self.balance_calls = 0
        self.decimals_calls = 0

    def set_balance(self, network: str, mint: str, owner: str, raw_amount: int, decimals: int = 6):
        self.balances[(network, mint, owner)] = raw_amount
        self.decimals[(network, mint)] = decimals

    def has_network(self, network: str) -> bool:
        return network in self.networks

    async def get_token_account_balance(self, network: str, mint: str, owner: str) -> int:
        self.balance_calls += 1
        try:
            return self.balances[(network, mint, owner)]
        except KeyError:
            raise LedgerError(f"could not find token account for {owner}")

    async def get_token_decimals(self, network: str, mint: str) -> int:
        self.decimals_calls += 1
        try:
            return self.decimals[(network, mint)]
        except KeyError:
            raise LedgerError(f"could not find mint {mint}")


class FakeClock:
    def __init__(self, now: float = 1000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float):
        self.now += seconds


def level(name: str, *requirements: tuple[str, float], network: str = "mainnet", priority: int | None = None) -> AccessLevel:
    return AccessLevel(
        levelName=name,
        network=network,
        tokenRequirements=[TokenRequirement(tokenMintAddress=mint, minAmount=amount) for mint, amount in requirements],
        priority=priority,
    )


@pytest.fixture
def wallet():
    """(signing key, base58 public key) of a fresh Ed25519 wallet."""
    key = SigningKey.generate()
    return key, base58.b58encode(bytes(key.verify_key)).decode()


@pytest.fixture
def ledger():
    return FakeLedger()


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def cache(clock):
    return BalanceCache(ttl_seconds=60, clock=clock)


@pytest.fixture
def resolver(ledger, cache):
    return AccessLevelResolver(ledger, cache)


@pytest.fixture
def issuer():
    return SessionIssuer(secret="test-jwt-secret")


@pytest.fixture
def access_levels():
    return [
        level("basic"),
        level("premium", (JUPSOL, 0.5)),
    ]


@pytest.fixture
def directory(access_levels):
    return MemoryDeveloperDirectory(
        [DeveloperRecord(api_key=API_KEY, api_secret=API_SECRET, access_levels=access_levels, app_name="Test App")]
    )


@pytest.fixture
def client(directory, resolver, issuer):
    from tokengate.main import app
    from tokengate.api.deps import get_developer_directory, get_resolver, get_session_issuer

    app.dependency_overrides[get_developer_directory] = lambda: directory
    app.dependency_overrides[get_resolver] = lambda: resolver
    app.dependency_overrides[get_session_issuer] = lambda: issuer
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def encryption_key(monkeypatch):
    key = Fernet.generate_key().decode()
    monkeypatch.setattr(settings, "encryption_key", key)
    return key


@pytest.fixture
def engine():
    import tokengate.models  # noqa: F401

    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    yield engine
    engine.dispose()
