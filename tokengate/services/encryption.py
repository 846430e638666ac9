"""Fernet encryption of developer API secrets at rest.

HMAC verification needs the plaintext secret back, so secrets are stored
encrypted with ``TG_ENCRYPTION_KEY`` rather than hashed.
"""

from functools import lru_cache

from cryptography.fernet import Fernet, InvalidToken

from tokengate.config import settings


@lru_cache(maxsize=4)
def _fernet_for(key: str) -> Fernet:
    return Fernet(key.encode())


def _fernet() -> Fernet:
    if not settings.encryption_key:
        raise RuntimeError(
            "TG_ENCRYPTION_KEY not set. Generate one with: "
            "python -c \"from cryptography.fernet import Fernet; print(Fernet.generate_key().decode())\""
        )
    return _fernet_for(settings.encryption_key)


def encrypt_secret(secret: str) -> str:
    return _fernet().encrypt(secret.encode()).decode()


def decrypt_secret(ciphertext: str) -> str:
    """Recover a stored API secret; fails loudly if the key was rotated."""
    try:
        return _fernet().decrypt(ciphertext.encode()).decode()
    except InvalidToken as e:
        raise RuntimeError("Stored API secret cannot be decrypted with the configured TG_ENCRYPTION_KEY") from e
