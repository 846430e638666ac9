"""Pydantic schemas for the authentication API.

Wallet and token fields are optional at the schema level so that a missing
field is reported as the API's own 400 error instead of a generic
validation failure.
"""

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from tokengate.schemas.access_level import AccessLevel, validate_access_levels

_camel = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class AuthenticateRequest(BaseModel):
    model_config = _camel

    public_key: str | None = None
    signature: str | list[int] | None = None  # base64/base58 string or raw byte array
    message: str | None = Field(default=None, max_length=2048)
    access_levels: list[AccessLevel] | None = None

    @field_validator("access_levels")
    @classmethod
    def _limit_levels(cls, value: list[AccessLevel] | None) -> list[AccessLevel] | None:
        return validate_access_levels(value)


class RefreshRequest(BaseModel):
    model_config = _camel

    refresh_token: str | None = None
    access_levels: list[AccessLevel] | None = None

    @field_validator("access_levels")
    @classmethod
    def _limit_levels(cls, value: list[AccessLevel] | None) -> list[AccessLevel] | None:
        return validate_access_levels(value)


class RevokeRequest(BaseModel):
    model_config = _camel

    refresh_token: str | None = None


class AuthenticateResponse(BaseModel):
    model_config = _camel

    success: bool = True
    access_token: str
    refresh_token: str
    level: str
    token_balances: dict[str, float]
    expires_in: int


class RefreshResponse(BaseModel):
    model_config = _camel

    access_token: str
    refresh_token: str
    level: str
    token_balances: dict[str, float]
    expires_in: int
    refresh_token_expires_in: int


class RevokeResponse(BaseModel):
    success: bool = True
    message: str


class VerifyTokenResponse(BaseModel):
    valid: bool
    decoded: dict
