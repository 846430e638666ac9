"""Shared API dependencies.

Long-lived collaborators (developer directory, resolver with its balance
cache, session issuer) are built once per process on first use. Tests
replace them through ``app.dependency_overrides``.
"""

from fastapi import Depends, Header, Request
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from starlette.concurrency import run_in_threadpool

from tokengate.config import settings
from tokengate.database import engine
from tokengate.exceptions import TokenError
from tokengate.services.access_levels import AccessLevelResolver
from tokengate.services.balance_cache import BalanceCache
from tokengate.services.developers import DeveloperDirectory, DeveloperRecord, SQLDeveloperDirectory
from tokengate.services.ledger import SolanaLedgerClient
from tokengate.services.revocation import DatabaseRevocationList
from tokengate.services.sessions import SessionIssuer
from tokengate.services.transport_auth import authenticate_transport
from tokengate.utils.constants import API_KEY_HEADER, NONCE_HEADER, SIGNATURE_HEADER

bearer_scheme = HTTPBearer(auto_error=False)

_directory: DeveloperDirectory | None = None
_ledger: SolanaLedgerClient | None = None
_resolver: AccessLevelResolver | None = None
_issuer: SessionIssuer | None = None


def get_developer_directory() -> DeveloperDirectory:
    global _directory
    if _directory is None:
        _directory = SQLDeveloperDirectory(engine)
    return _directory


def get_resolver() -> AccessLevelResolver:
    global _ledger, _resolver
    if _resolver is None:
        _ledger = SolanaLedgerClient(settings.rpc_endpoints, timeout=settings.rpc_timeout_seconds)
        cache = BalanceCache(
            ttl_seconds=settings.balance_cache_ttl_seconds,
            max_entries=settings.balance_cache_max_entries,
        )
        _resolver = AccessLevelResolver(_ledger, cache)
    return _resolver


def get_session_issuer() -> SessionIssuer:
    global _issuer
    if _issuer is None:
        _issuer = SessionIssuer(
            secret=settings.jwt_secret,
            algorithm=settings.jwt_algorithm,
            access_token_ttl=settings.access_token_expire_seconds,
            refresh_token_ttl=settings.refresh_token_expire_seconds,
            revocations=DatabaseRevocationList(engine),
        )
    return _issuer


async def close_ledger():
    """Close RPC connections opened by the resolver's ledger client."""
    if _ledger is not None:
        await _ledger.close()


async def authenticate_request(
    request: Request,
    x_api_key: str | None = Header(default=None, alias=API_KEY_HEADER),
    x_nonce: str | None = Header(default=None, alias=NONCE_HEADER),
    x_signature: str | None = Header(default=None, alias=SIGNATURE_HEADER),
    directory: DeveloperDirectory = Depends(get_developer_directory),
) -> DeveloperRecord:
    """Verify HMAC transport headers against the raw request body."""
    body = await request.body()
    # The directory may hit the database; keep it off the event loop.
    return await run_in_threadpool(
        authenticate_transport, x_api_key, x_nonce, x_signature, body, directory
    )


def get_bearer_token(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> str:
    if credentials is None or not credentials.credentials:
        raise TokenError("Missing bearer token")
    return credentials.credentials
