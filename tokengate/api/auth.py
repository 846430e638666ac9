"""Authentication API — wallet login, token refresh, revocation and verification."""

import logging

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from tokengate.api.deps import authenticate_request, get_bearer_token, get_resolver, get_session_issuer
from tokengate.exceptions import AuthorizationError, WalletDataError
from tokengate.schemas.access_level import AccessLevel
from tokengate.schemas.auth import (
    AuthenticateRequest,
    AuthenticateResponse,
    RefreshRequest,
    RefreshResponse,
    RevokeRequest,
    RevokeResponse,
    VerifyTokenResponse,
)
from tokengate.services.access_levels import AccessLevelResolver
from tokengate.services.developers import DeveloperRecord
from tokengate.services.sessions import SessionIssuer, serialize_balances
from tokengate.services.wallet_signature import verify_wallet_signature

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["auth"])


def _levels_for(override: list[AccessLevel] | None, developer: DeveloperRecord) -> list[AccessLevel]:
    """Caller-supplied levels replace the registered ones for this request only."""
    if override is not None:
        logger.info(f"App {developer.app_name or developer.api_key[:6]} supplied {len(override)} access levels")
        return override
    return developer.access_levels


@router.post("/authenticate", response_model=AuthenticateResponse)
async def authenticate(
    body: AuthenticateRequest,
    developer: DeveloperRecord = Depends(authenticate_request),
    resolver: AccessLevelResolver = Depends(get_resolver),
    issuer: SessionIssuer = Depends(get_session_issuer),
):
    if not body.public_key or not body.signature or not body.message:
        raise WalletDataError()

    verify_wallet_signature(body.message, body.public_key, body.signature)

    resolution = await resolver.resolve(body.public_key, _levels_for(body.access_levels, developer))
    if not resolution.has_level:
        raise AuthorizationError(resolution.token_balances)

    tokens = issuer.issue(body.public_key, resolution.level_name, resolution.token_balances, developer.api_key)
    return AuthenticateResponse(
        access_token=tokens.access_token,
        refresh_token=tokens.refresh_token,
        level=tokens.level,
        token_balances=serialize_balances(tokens.token_balances),
        expires_in=tokens.expires_in,
    )


@router.post("/refresh", response_model=RefreshResponse)
async def refresh(
    body: RefreshRequest,
    developer: DeveloperRecord = Depends(authenticate_request),
    resolver: AccessLevelResolver = Depends(get_resolver),
    issuer: SessionIssuer = Depends(get_session_issuer),
):
    if not body.refresh_token:
        raise WalletDataError("Missing refresh token")

    tokens = await issuer.refresh(
        body.refresh_token,
        _levels_for(body.access_levels, developer),
        resolver,
        developer.api_key,
    )
    return RefreshResponse(
        access_token=tokens.access_token,
        refresh_token=tokens.refresh_token,
        level=tokens.level,
        token_balances=serialize_balances(tokens.token_balances),
        expires_in=tokens.expires_in,
        refresh_token_expires_in=tokens.refresh_token_expires_in,
    )


@router.post("/revoke", response_model=RevokeResponse)
def revoke(
    body: RevokeRequest,
    developer: DeveloperRecord = Depends(authenticate_request),
    issuer: SessionIssuer = Depends(get_session_issuer),
):
    if not body.refresh_token:
        raise WalletDataError("Missing refresh token")
    issuer.revoke(body.refresh_token, developer.api_key)
    return RevokeResponse(message="Refresh token revoked")


@router.get("/verify-token", response_model=VerifyTokenResponse)
def verify_token(
    token: str = Depends(get_bearer_token),
    issuer: SessionIssuer = Depends(get_session_issuer),
):
    result = issuer.verify(token)
    if not result.valid:
        return JSONResponse(status_code=401, content={"valid": False, "error": result.error})
    return VerifyTokenResponse(valid=True, decoded=result.claims)
