"""Pydantic schemas for access-level definitions.

Access levels come from two places: the developer record stored at
registration, and the optional ``accessLevels`` override a caller may send
with a request. Both go through these schemas, so the override is held to
the same rules as stored configuration.
"""

import re
from decimal import Decimal

from pydantic import BaseModel, Field, field_validator

from tokengate.config import settings
from tokengate.utils.constants import SUPPORTED_NETWORKS

_BASE58_ADDRESS_RE = re.compile(r"^[1-9A-HJ-NP-Za-km-z]{32,44}$")


class TokenRequirement(BaseModel):
    token_mint_address: str = Field(alias="tokenMintAddress")
    min_amount: Decimal = Field(default=Decimal(0), alias="minAmount", ge=0)

    model_config = {"populate_by_name": True, "frozen": True}

    @field_validator("token_mint_address")
    @classmethod
    def _validate_mint(cls, value: str) -> str:
        address = value.strip()
        if not _BASE58_ADDRESS_RE.fullmatch(address):
            raise ValueError("must be a base58 mint address")
        return address


class AccessLevel(BaseModel):
    level_name: str = Field(alias="levelName", min_length=1, max_length=64)
    # Unknown networks are accepted here and disqualified during resolution.
    network: str = Field(min_length=1, max_length=32)
    token_requirements: list[TokenRequirement] = Field(default_factory=list, alias="tokenRequirements")
    priority: int | None = None  # Overrides list position when set

    model_config = {"populate_by_name": True, "frozen": True}

    @field_validator("level_name", "network")
    @classmethod
    def _trim_text(cls, value: str) -> str:
        text = value.strip()
        if not text:
            raise ValueError("must not be empty")
        return text

    @field_validator("token_requirements")
    @classmethod
    def _limit_requirements(cls, value: list[TokenRequirement]) -> list[TokenRequirement]:
        if len(value) > settings.max_token_requirements:
            raise ValueError(f"at most {settings.max_token_requirements} token requirements per level")
        return value

    @property
    def is_supported_network(self) -> bool:
        return self.network in SUPPORTED_NETWORKS


def validate_access_levels(levels: list[AccessLevel] | None) -> list[AccessLevel] | None:
    """Shared list-level check for request schemas."""
    if levels is None:
        return None
    if len(levels) > settings.max_access_levels:
        raise ValueError(f"at most {settings.max_access_levels} access levels")
    return levels
