"""Session tokens: issue, refresh, revoke and verify signed JWTs.

Access tokens carry the resolved level and the balances it was derived
from; refresh tokens carry only the level, because refreshing re-resolves
the level from current balances instead of trusting the embedded one.

Every token pair belongs to a session (``sid``). Refreshing rotates the
refresh token within the same session and denylists the old one; revoking
denylists the whole session, which also invalidates its access tokens.
"""

import logging
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from typing import Any

from jose import JWTError, jwt
from jose.exceptions import ExpiredSignatureError

from tokengate.exceptions import AuthorizationError, InvalidRefreshToken, RefreshTokenNotFound, TokenError
from tokengate.schemas.access_level import AccessLevel
from tokengate.services.access_levels import AccessLevelResolver
from tokengate.services.revocation import MemoryRevocationList, RevocationList

logger = logging.getLogger(__name__)

ACCESS = "access"
REFRESH = "refresh"


@dataclass
class SessionTokens:
    access_token: str
    refresh_token: str
    level: str
    token_balances: dict[str, Decimal] = field(default_factory=dict)
    expires_in: int = 3600
    refresh_token_expires_in: int = 7 * 24 * 3600


@dataclass
class TokenVerification:
    valid: bool
    claims: dict[str, Any] | None = None
    error: str | None = None


def serialize_balances(token_balances: dict[str, Decimal]) -> dict[str, float]:
    return {key: float(value) for key, value in token_balances.items()}


class SessionIssuer:
    """Mints and validates session JWTs for one signing secret."""

    def __init__(
        self,
        secret: str,
        algorithm: str = "HS256",
        access_token_ttl: int = 3600,
        refresh_token_ttl: int = 7 * 24 * 3600,
        revocations: RevocationList | None = None,
    ):
        self.secret = secret
        self.algorithm = algorithm
        self.access_token_ttl = access_token_ttl
        self.refresh_token_ttl = refresh_token_ttl
        self.revocations = revocations if revocations is not None else MemoryRevocationList()

    def _encode(self, claims: dict[str, Any], token_type: str, ttl: int) -> str:
        now = datetime.now(timezone.utc)
        payload = {
            **claims,
            "type": token_type,
            "jti": uuid.uuid4().hex,
            "iat": now,
            "exp": now + timedelta(seconds=ttl),
        }
        return jwt.encode(payload, self.secret, algorithm=self.algorithm)

    def _decode(self, token: str, token_type: str) -> dict[str, Any]:
        if not isinstance(token, str) or not token:
            raise TokenError("Malformed token")
        try:
            claims = jwt.decode(token, self.secret, algorithms=[self.algorithm])
        except ExpiredSignatureError as e:
            raise TokenError("Token expired") from e
        except JWTError as e:
            raise TokenError("Invalid token") from e
        if claims.get("type") != token_type:
            raise TokenError("Wrong token type")
        return claims

    def _is_revoked(self, claims: dict[str, Any]) -> bool:
        return any(
            token_id and self.revocations.is_revoked(token_id)
            for token_id in (claims.get("jti"), claims.get("sid"))
        )

    def issue(
        self,
        public_key: str,
        level: str,
        token_balances: dict[str, Decimal],
        api_key: str,
        session_id: str | None = None,
    ) -> SessionTokens:
        """Mint an access/refresh pair for a wallet at ``level``."""
        sid = session_id or uuid.uuid4().hex
        common = {"sub": public_key, "publicKey": public_key, "level": level, "app": api_key, "sid": sid}
        access_token = self._encode(
            {**common, "tokenBalances": serialize_balances(token_balances)},
            ACCESS,
            self.access_token_ttl,
        )
        refresh_token = self._encode(common, REFRESH, self.refresh_token_ttl)
        return SessionTokens(
            access_token=access_token,
            refresh_token=refresh_token,
            level=level,
            token_balances=token_balances,
            expires_in=self.access_token_ttl,
            refresh_token_expires_in=self.refresh_token_ttl,
        )

    async def refresh(
        self,
        refresh_token: str,
        access_levels: list[AccessLevel],
        resolver: AccessLevelResolver,
        api_key: str,
    ) -> SessionTokens:
        """Rotate a refresh token, re-resolving the level from current balances.

        Raises:
            InvalidRefreshToken: expired, malformed, foreign or revoked token.
            AuthorizationError: the wallet no longer qualifies for any level.
        """
        try:
            claims = self._decode(refresh_token, REFRESH)
        except TokenError as e:
            logger.info(f"Refresh rejected: {e.message}")
            raise InvalidRefreshToken() from e
        if claims.get("app") != api_key or self._is_revoked(claims):
            logger.info(f"Refresh rejected for session {claims.get('sid')}: foreign or revoked token")
            raise InvalidRefreshToken()

        # Claim the token before any await so a concurrent refresh of it loses.
        if not self.revocations.revoke(claims["jti"], datetime.fromtimestamp(claims["exp"], tz=timezone.utc)):
            logger.info(f"Refresh rejected for session {claims['sid']}: token already used")
            raise InvalidRefreshToken()

        public_key = claims["publicKey"]
        resolution = await resolver.resolve(public_key, access_levels)
        if not resolution.has_level:
            raise AuthorizationError(resolution.token_balances)

        tokens = self.issue(public_key, resolution.level_name, resolution.token_balances, api_key, session_id=claims["sid"])
        if resolution.level_name != claims.get("level"):
            logger.info(f"Session {claims['sid']} level changed: {claims.get('level')} -> {resolution.level_name}")
        return tokens

    def revoke(self, refresh_token: str, api_key: str) -> None:
        """Revoke the session a refresh token belongs to.

        Raises:
            RefreshTokenNotFound: the token is not a live refresh token of this application.
        """
        try:
            claims = self._decode(refresh_token, REFRESH)
        except TokenError as e:
            raise RefreshTokenNotFound() from e
        if claims.get("app") != api_key or self._is_revoked(claims):
            raise RefreshTokenNotFound()

        expires_at = datetime.fromtimestamp(claims["exp"], tz=timezone.utc)
        if not self.revocations.revoke(claims["sid"], expires_at):
            raise RefreshTokenNotFound()
        self.revocations.revoke(claims["jti"], expires_at)
        logger.info(f"Session {claims['sid']} revoked")

    def verify(self, access_token: str) -> TokenVerification:
        """Check an access token. Never raises; invalid tokens come back with ``valid=False``."""
        try:
            claims = self._decode(access_token, ACCESS)
        except TokenError as e:
            return TokenVerification(valid=False, error=e.message)
        if self._is_revoked(claims):
            return TokenVerification(valid=False, error="Session revoked")
        return TokenVerification(valid=True, claims=claims)
