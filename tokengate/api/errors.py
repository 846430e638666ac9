"""Exception handlers mapping the error taxonomy to HTTP responses."""

import logging

from fastapi import Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from tokengate.exceptions import (
    AuthorizationError,
    CredentialError,
    RefreshTokenNotFound,
    TokenError,
    TokengateError,
    WalletDataError,
)
from tokengate.services.sessions import serialize_balances
from tokengate.utils.constants import NO_LEVEL

logger = logging.getLogger(__name__)

# Checked in order; subclasses before their parents.
_STATUS_BY_ERROR: list[tuple[type[TokengateError], int]] = [
    (CredentialError, status.HTTP_401_UNAUTHORIZED),
    (WalletDataError, status.HTTP_400_BAD_REQUEST),
    (AuthorizationError, status.HTTP_403_FORBIDDEN),
    (RefreshTokenNotFound, status.HTTP_404_NOT_FOUND),
    (TokenError, status.HTTP_401_UNAUTHORIZED),
]


def status_for(exc: TokengateError) -> int:
    for error_type, status_code in _STATUS_BY_ERROR:
        if isinstance(exc, error_type):
            return status_code
    return status.HTTP_500_INTERNAL_SERVER_ERROR


async def tokengate_error_handler(request: Request, exc: TokengateError) -> JSONResponse:
    status_code = status_for(exc)
    content = {"error": exc.message}
    if isinstance(exc, AuthorizationError):
        # Partial balances are disclosed so clients can show what is missing.
        content["level"] = NO_LEVEL
        content["tokenBalances"] = serialize_balances(exc.token_balances)
    if status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc!r}")
    return JSONResponse(status_code=status_code, content=content)


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"error": "Invalid request body", "details": jsonable_encoder(exc.errors())},
    )
