"""Tests for access-level and request schema validation."""

from decimal import Decimal

import pytest
from pydantic import ValidationError

from tokengate.config import settings
from tokengate.schemas.access_level import AccessLevel, TokenRequirement
from tokengate.schemas.auth import AuthenticateRequest

from conftest import USDC


def _level_payload(name="basic", requirements=()):
    return {
        "levelName": name,
        "network": "mainnet",
        "tokenRequirements": [{"tokenMintAddress": m, "minAmount": a} for m, a in requirements],
    }


def test_camel_case_payload_parses():
    level = AccessLevel.model_validate(_level_payload("premium", [(USDC, "0.5")]))
    assert level.level_name == "premium"
    assert level.token_requirements[0].min_amount == Decimal("0.5")
    assert level.priority is None
    assert level.is_supported_network


def test_network_is_required_and_unknown_is_kept():
    with pytest.raises(ValidationError):
        AccessLevel(levelName="a")
    devnet = AccessLevel(levelName="a", network="devnet")
    assert not devnet.is_supported_network


def test_negative_min_amount_rejected():
    with pytest.raises(ValidationError):
        TokenRequirement(tokenMintAddress=USDC, minAmount=-1)


@pytest.mark.parametrize("mint", ["", "0xdeadbeef", "not a mint", "O" * 44])
def test_non_base58_mint_rejected(mint):
    with pytest.raises(ValidationError):
        TokenRequirement(tokenMintAddress=mint, minAmount=1)


@pytest.mark.parametrize("name", ["", "   ", "x" * 65])
def test_bad_level_name_rejected(name):
    with pytest.raises(ValidationError):
        AccessLevel(levelName=name, network="mainnet")


def test_too_many_requirements_rejected():
    requirements = [(USDC, 1)] * (settings.max_token_requirements + 1)
    with pytest.raises(ValidationError):
        AccessLevel.model_validate(_level_payload(requirements=requirements))


def test_request_level_count_limited():
    payload = {
        "publicKey": "k",
        "signature": "s",
        "message": "m",
        "accessLevels": [_level_payload(f"l{i}") for i in range(settings.max_access_levels + 1)],
    }
    with pytest.raises(ValidationError):
        AuthenticateRequest.model_validate(payload)


def test_authenticate_request_accepts_list_signature_and_no_levels():
    request = AuthenticateRequest.model_validate({"publicKey": "k", "signature": [1, 2, 3], "message": "m"})
    assert request.signature == [1, 2, 3]
    assert request.access_levels is None


def test_authenticate_request_fields_optional():
    request = AuthenticateRequest.model_validate({})
    assert request.public_key is None
    assert request.signature is None
