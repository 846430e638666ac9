"""Client SDK for applications integrating Tokengate."""

from tokengate.sdk.client import TokengateAPIError, TokengateClient, challenge_message, encode_body

__all__ = [
    "TokengateAPIError",
    "TokengateClient",
    "challenge_message",
    "encode_body",
]
