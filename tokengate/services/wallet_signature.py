"""Ed25519 wallet signature verification.

Proves that the caller controls a Solana public key by checking a detached
signature over the challenge message. Verification grants nothing by
itself; authorization is decided by the access-level resolver.
"""

import base64
import binascii

import base58
from nacl.exceptions import BadSignatureError
from nacl.signing import VerifyKey

from tokengate.exceptions import InvalidWalletSignature, MalformedPublicKey

PUBLIC_KEY_LENGTH = 32
SIGNATURE_LENGTH = 64


def _decode(value: str, length: int) -> bytes | None:
    """Decode a base58 or base64 string to exactly ``length`` bytes."""
    try:
        raw = base58.b58decode(value)
        if len(raw) == length:
            return raw
    except ValueError:
        pass
    try:
        raw = base64.b64decode(value, validate=True)
        if len(raw) == length:
            return raw
    except (binascii.Error, ValueError):
        pass
    return None


def decode_public_key(public_key: str) -> bytes:
    raw = _decode(public_key.strip(), PUBLIC_KEY_LENGTH) if public_key else None
    if raw is None:
        raise MalformedPublicKey()
    return raw


def decode_signature(signature: bytes | list[int] | str) -> bytes:
    """Accept raw bytes, a JSON array of byte values, or a base64/base58 string."""
    if isinstance(signature, str):
        raw = _decode(signature.strip(), SIGNATURE_LENGTH)
    elif isinstance(signature, (bytes, bytearray)):
        raw = bytes(signature)
    else:
        try:
            raw = bytes(signature)
        except (TypeError, ValueError):
            raw = None
    if raw is None or len(raw) != SIGNATURE_LENGTH:
        raise InvalidWalletSignature()
    return raw


def verify_wallet_signature(message: str, public_key: str, signature: bytes | list[int] | str) -> None:
    """Raise unless ``signature`` is a valid Ed25519 signature of ``message`` by ``public_key``."""
    key_bytes = decode_public_key(public_key)
    signature_bytes = decode_signature(signature)
    try:
        VerifyKey(key_bytes).verify(message.encode("utf-8"), signature_bytes)
    except (BadSignatureError, ValueError) as e:
        raise InvalidWalletSignature() from e
