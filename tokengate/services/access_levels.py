"""Access-level resolution: map a wallet's token balances to its highest tier.

Levels are evaluated in list order and requirements in the order given. A
level is satisfied when every one of its token requirements is met; a level
without requirements is always satisfied. Among satisfied levels the one
with the highest rank wins, where rank is the explicit ``priority`` when
set and the list position otherwise, so callers must order levels from
lowest to highest privilege. Position breaks ties between equal priorities.

Ledger failures never abort resolution: a balance that cannot be read is
treated as zero, which still satisfies a requirement with ``min_amount`` 0.
"""

import logging
from dataclasses import dataclass, field
from decimal import Decimal

from tokengate.schemas.access_level import AccessLevel, TokenRequirement
from tokengate.services.balance_cache import BalanceCache
from tokengate.services.ledger import LedgerClient
from tokengate.utils.constants import NO_LEVEL

logger = logging.getLogger(__name__)


@dataclass
class Resolution:
    level_name: str
    token_balances: dict[str, Decimal] = field(default_factory=dict)

    @property
    def has_level(self) -> bool:
        return self.level_name != NO_LEVEL


def balance_key(mint: str, network: str) -> str:
    return f"{mint}:{network}"


class AccessLevelResolver:
    """Resolves access levels against a ledger through an owned balance cache."""

    def __init__(self, ledger: LedgerClient, cache: BalanceCache | None = None):
        self.ledger = ledger
        self.cache = cache if cache is not None else BalanceCache()

    async def resolve(self, public_key: str, access_levels: list[AccessLevel]) -> Resolution:
        highest: tuple[int, int] | None = None  # rank of the current winner
        highest_level: AccessLevel | None = None
        token_balances: dict[str, Decimal] = {}

        for index, level in enumerate(access_levels):
            if not level.is_supported_network or not self.ledger.has_network(level.network):
                logger.debug(f"Skipping level '{level.level_name}': network '{level.network}' unavailable")
                continue

            satisfied = True
            for requirement in level.token_requirements:
                balance = await self._balance(public_key, level.network, requirement)
                token_balances[balance_key(requirement.token_mint_address, level.network)] = balance
                if balance < requirement.min_amount:
                    satisfied = False

            if not satisfied:
                continue
            rank = (level.priority if level.priority is not None else index, index)
            if highest is None or rank > highest:
                highest = rank
                highest_level = level

        level_name = highest_level.level_name if highest_level is not None else NO_LEVEL
        logger.info(f"Resolved wallet {public_key[:8]}... to level '{level_name}'")
        return Resolution(level_name=level_name, token_balances=token_balances)

    async def _decimals(self, network: str, mint: str) -> int:
        """Mint decimals, cached forever once read. Raises on ledger failure."""
        decimals = self.cache.get_decimals(network, mint)
        if decimals is None:
            decimals = await self.ledger.get_token_decimals(network, mint)
            self.cache.put_decimals(network, mint, decimals)
        return decimals

    async def _balance(self, owner: str, network: str, requirement: TokenRequirement) -> Decimal:
        """Human-unit balance of one requirement's mint, cache first."""
        mint = requirement.token_mint_address
        cached = self.cache.get(network, mint, owner)
        if cached is not None:
            return cached

        try:
            decimals = await self._decimals(network, mint)
        except Exception as e:
            # Without decimals the raw amount cannot be scaled. Not cached; the next request retries.
            logger.warning(f"Could not read decimals for mint {mint} on {network}, using balance 0: {e}")
            return Decimal(0)

        try:
            raw_amount = await self.ledger.get_token_account_balance(network, mint, owner)
            balance = Decimal(raw_amount) / (Decimal(10) ** decimals)
        except Exception as e:
            # Typically the owner has no token account for this mint.
            logger.warning(f"Balance lookup for mint {mint} on {network} failed, using 0: {e}")
            balance = Decimal(0)

        self.cache.put(network, mint, owner, balance)
        return balance
