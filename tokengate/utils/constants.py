"""Shared constants for Solana networks and token programs."""

SUPPORTED_NETWORKS = ("testnet", "mainnet")

# SPL Token and Associated Token Account program IDs
TOKEN_PROGRAM_ID = "TokenkegQfeZyiNwAJbNbGKPFXCWuBvf9Ss623VQ5DA"
ASSOCIATED_TOKEN_PROGRAM_ID = "ATokenGPvbdgVxr1b2hvZbsiqW7ZqZPMVsxGMZTZuhFM"

NO_LEVEL = "none"

# HMAC transport headers
API_KEY_HEADER = "X-API-Key"
NONCE_HEADER = "X-Nonce"
SIGNATURE_HEADER = "X-Signature"
