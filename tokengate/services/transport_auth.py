"""HMAC transport authentication for server-to-server requests.

The caller signs ``body + nonce`` with its API secret and sends the base64
digest in ``X-Signature``. The body is the exact byte sequence sent over
the wire; re-serializing JSON on either side would break legitimate
signatures. Nonces are not stored, so a captured request can be replayed.
"""

import base64
import hashlib
import hmac
import logging

from tokengate.exceptions import InvalidSignature, MissingCredentials, UnknownApplication
from tokengate.services.developers import DeveloperDirectory, DeveloperRecord

logger = logging.getLogger(__name__)


def _to_bytes(value: bytes | str) -> bytes:
    return value.encode("utf-8") if isinstance(value, str) else value


def compute_signature(secret: str, body: bytes | str, nonce: str) -> str:
    """base64(HMAC-SHA256(secret, body + nonce))."""
    digest = hmac.new(_to_bytes(secret), _to_bytes(body) + _to_bytes(nonce), hashlib.sha256).digest()
    return base64.b64encode(digest).decode("ascii")


def authenticate_transport(
    api_key: str | None,
    nonce: str | None,
    signature: str | None,
    body: bytes,
    directory: DeveloperDirectory,
) -> DeveloperRecord:
    """Verify the HMAC headers of a request and return the calling developer."""
    if not api_key or not nonce or not signature:
        raise MissingCredentials()

    developer = directory.find_developer_by_api_key(api_key)
    if developer is None:
        logger.info("Rejected request with unknown API key")
        raise UnknownApplication()

    expected = compute_signature(developer.api_secret, body, nonce)
    if not hmac.compare_digest(_to_bytes(signature), expected.encode("ascii")):
        logger.info(f"Rejected request with bad HMAC for app {developer.app_name or developer.api_key[:6]}")
        raise InvalidSignature()

    return developer
