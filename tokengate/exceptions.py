"""Error taxonomy for authentication, authorization and session handling.

Each family maps to one HTTP status in ``tokengate.api.errors``. Messages
are returned to API callers verbatim and stay generic.
"""

from decimal import Decimal


class TokengateError(Exception):
    message = "Request failed"

    def __init__(self, message: str | None = None):
        super().__init__(message or self.message)
        self.message = message or self.message


# --- 401: caller or wallet could not be authenticated ---

class CredentialError(TokengateError):
    message = "Invalid credentials"


class MissingCredentials(CredentialError):
    message = "Missing apiKey, nonce or signature"


class UnknownApplication(CredentialError):
    message = "Invalid API key"


class InvalidSignature(CredentialError):
    message = "Invalid signature"


class MalformedPublicKey(CredentialError):
    message = "Invalid wallet signature"


class InvalidWalletSignature(CredentialError):
    message = "Invalid wallet signature"


# --- 400: request is missing wallet data or is malformed ---

class WalletDataError(TokengateError):
    message = "Missing wallet data"


# --- 403: wallet is authenticated but holds no qualifying tokens ---

class AuthorizationError(TokengateError):
    message = "No qualifying access level"

    def __init__(self, token_balances: dict[str, Decimal], message: str | None = None):
        super().__init__(message)
        self.token_balances = token_balances


# --- ledger failures never reach the caller ---

class LedgerError(TokengateError):
    message = "Ledger query failed"


# --- session tokens ---

class TokenError(TokengateError):
    message = "Invalid token"


class InvalidRefreshToken(TokenError):
    message = "Invalid or expired refresh token"


class RefreshTokenNotFound(TokenError):
    message = "Refresh token not found"
