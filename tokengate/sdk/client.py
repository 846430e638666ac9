"""Python client for applications calling the Tokengate API.

Signs every request the way the server verifies it: the compact JSON body
that is actually sent, followed by the nonce, HMAC-SHA256'd with the API
secret. Keeps the current token pair between calls.
"""

import base64
import json
import time
from datetime import datetime, timezone
from typing import Any

import httpx

from tokengate.services.transport_auth import compute_signature
from tokengate.utils.constants import API_KEY_HEADER, NONCE_HEADER, SIGNATURE_HEADER


class TokengateAPIError(Exception):
    def __init__(self, status_code: int, error: str, payload: dict[str, Any] | None = None):
        super().__init__(f"{status_code}: {error}")
        self.status_code = status_code
        self.error = error
        self.payload = payload or {}


def encode_body(payload: dict[str, Any]) -> bytes:
    """Compact JSON, byte-compatible with JavaScript's JSON.stringify."""
    return json.dumps(payload, separators=(",", ":"), ensure_ascii=False).encode("utf-8")


def challenge_message(api_key: str) -> str:
    """Message a wallet signs to prove key ownership."""
    return f"Authentication for {api_key} at {datetime.now(timezone.utc).isoformat()}"


class TokengateClient:
    """Client for the HMAC-protected authentication endpoints."""

    def __init__(
        self,
        api_key: str,
        api_secret: str,
        base_url: str = "http://localhost:8000",
        timeout: float = 10.0,
        http_client: httpx.Client | None = None,
    ):
        self.api_key = api_key
        self.api_secret = api_secret
        self._http = http_client or httpx.Client(base_url=base_url, timeout=timeout)
        self._owns_http = http_client is None
        self.access_token: str | None = None
        self.refresh_token: str | None = None

    def signed_headers(self, body: bytes, nonce: str | None = None) -> dict[str, str]:
        nonce = nonce or str(time.time_ns() // 1_000_000)
        return {
            "Content-Type": "application/json",
            API_KEY_HEADER: self.api_key,
            NONCE_HEADER: nonce,
            SIGNATURE_HEADER: compute_signature(self.api_secret, body, nonce),
        }

    def _signed_post(self, path: str, payload: dict[str, Any]) -> dict[str, Any]:
        body = encode_body(payload)
        response = self._http.post(path, content=body, headers=self.signed_headers(body))
        return self._handle(response)

    @staticmethod
    def _handle(response: httpx.Response) -> dict[str, Any]:
        try:
            data = response.json()
        except ValueError:
            data = {}
        if response.is_error:
            raise TokengateAPIError(response.status_code, data.get("error", response.reason_phrase), data)
        return data

    def authenticate(
        self,
        public_key: str,
        signature: bytes,
        message: str,
        access_levels: list[dict[str, Any]] | None = None,
    ) -> dict[str, Any]:
        """Exchange a wallet signature for a session."""
        payload: dict[str, Any] = {
            "publicKey": public_key,
            "signature": base64.b64encode(signature).decode("ascii"),
            "message": message,
        }
        if access_levels is not None:
            payload["accessLevels"] = access_levels
        data = self._signed_post("/api/authenticate", payload)
        self.access_token = data["accessToken"]
        self.refresh_token = data["refreshToken"]
        return data

    def refresh(self, access_levels: list[dict[str, Any]] | None = None) -> dict[str, Any]:
        if not self.refresh_token:
            raise RuntimeError("No refresh token available")
        payload: dict[str, Any] = {"refreshToken": self.refresh_token}
        if access_levels is not None:
            payload["accessLevels"] = access_levels
        data = self._signed_post("/api/refresh", payload)
        self.access_token = data["accessToken"]
        self.refresh_token = data["refreshToken"]
        return data

    def revoke(self) -> dict[str, Any]:
        if not self.refresh_token:
            raise RuntimeError("No refresh token available")
        data = self._signed_post("/api/revoke", {"refreshToken": self.refresh_token})
        self.access_token = None
        self.refresh_token = None
        return data

    def verify_token(self) -> dict[str, Any]:
        if not self.access_token:
            raise RuntimeError("No access token available")
        response = self._http.get(
            "/api/verify-token", headers={"Authorization": f"Bearer {self.access_token}"}
        )
        return self._handle(response)

    def close(self):
        if self._owns_http:
            self._http.close()

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.close()
