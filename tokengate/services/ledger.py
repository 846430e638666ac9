"""Solana ledger client for SPL token balances and mint decimals.

Wraps the solana-py async RPC client with one connection per configured
network. Every failure is raised as ``LedgerError``; callers decide how to
degrade.
"""

import logging
from typing import Protocol

from solana.rpc.async_api import AsyncClient
from solana.rpc.commitment import Confirmed
from solders.pubkey import Pubkey

from tokengate.exceptions import LedgerError
from tokengate.utils.constants import ASSOCIATED_TOKEN_PROGRAM_ID, TOKEN_PROGRAM_ID

logger = logging.getLogger(__name__)

_TOKEN_PROGRAM = Pubkey.from_string(TOKEN_PROGRAM_ID)
_ASSOCIATED_TOKEN_PROGRAM = Pubkey.from_string(ASSOCIATED_TOKEN_PROGRAM_ID)


class LedgerClient(Protocol):
    """What the access-level resolver needs from a chain."""

    def has_network(self, network: str) -> bool: ...

    async def get_token_account_balance(self, network: str, mint: str, owner: str) -> int:
        """Raw (base-unit) amount held in the owner's associated token account."""
        ...

    async def get_token_decimals(self, network: str, mint: str) -> int: ...


def associated_token_address(owner: str, mint: str) -> Pubkey:
    """Derive the canonical SPL associated token account for owner/mint."""
    owner_key = Pubkey.from_string(owner)
    mint_key = Pubkey.from_string(mint)
    seeds = [bytes(owner_key), bytes(_TOKEN_PROGRAM), bytes(mint_key)]
    address, _bump = Pubkey.find_program_address(seeds, _ASSOCIATED_TOKEN_PROGRAM)
    return address


class SolanaLedgerClient:
    """Ledger client backed by Solana JSON-RPC endpoints, keyed by network name."""

    def __init__(self, endpoints: dict[str, str], timeout: float = 10.0):
        self.endpoints = dict(endpoints)
        self.timeout = timeout
        self._clients: dict[str, AsyncClient] = {}

    def has_network(self, network: str) -> bool:
        return network in self.endpoints

    def _get_client(self, network: str) -> AsyncClient:
        """Lazily open one RPC connection per network."""
        if network not in self.endpoints:
            raise LedgerError(f"No RPC endpoint configured for network '{network}'")
        client = self._clients.get(network)
        if client is None:
            client = AsyncClient(self.endpoints[network], commitment=Confirmed, timeout=self.timeout)
            self._clients[network] = client
            logger.info(f"Solana RPC client initialized for {network}")
        return client

    async def get_token_account_balance(self, network: str, mint: str, owner: str) -> int:
        client = self._get_client(network)
        try:
            account = associated_token_address(owner, mint)
            resp = await client.get_token_account_balance(account)
            return int(resp.value.amount)
        except Exception as e:
            raise LedgerError(f"Balance lookup failed for mint {mint} on {network}: {e}") from e

    async def get_token_decimals(self, network: str, mint: str) -> int:
        client = self._get_client(network)
        try:
            resp = await client.get_token_supply(Pubkey.from_string(mint))
            return int(resp.value.decimals)
        except Exception as e:
            raise LedgerError(f"Decimals lookup failed for mint {mint} on {network}: {e}") from e

    async def close(self):
        for network, client in self._clients.items():
            await client.close()
            logger.debug(f"Solana RPC client closed for {network}")
        self._clients.clear()
