"""
Port interfaces (ABCs) for the trading bounded context.

Ports define the contracts that the domain requires from the outside world.
Infrastructure adapters implement these interfaces.
The domain layer never depends on concrete implementations.
"""

from abc import ABC, abstractmethod
from typing import Optional

from trade_assistant.domain.trading.entities import (
    Delegation,
    Market,
    MarketPrice,
    Subaccount,
    TradeRecord,
    TransactionPayload,
    TransactionReceipt,
)


class MarketDataPort(ABC):
    """Port for read-only exchange market data."""

    @abstractmethod
    async def get_markets(self) -> list[Market]:
        """Return every market listed by the exchange."""
        raise NotImplementedError

    @abstractmethod
    async def get_market_by_name(self, name: str) -> Market:
        """Return the market whose name matches exactly (case-sensitive).

        Raises:
            MarketNotFoundError: If no market has that name.
        """
        raise NotImplementedError

    @abstractmethod
    async def get_market_price(self, market: Market) -> Optional[MarketPrice]:
        """Return the live price entry for a market, or None if absent."""
        raise NotImplementedError


class AccountDataPort(ABC):
    """Port for account-scoped exchange data (requires the API key)."""

    @abstractmethod
    async def get_subaccounts(self, owner_address: str) -> list[Subaccount]:
        """Return the subaccounts owned by a wallet (empty if none)."""
        raise NotImplementedError

    @abstractmethod
    async def get_delegations(self, subaccount_address: str) -> list[Delegation]:
        """Return active trading delegations for a subaccount (empty if none)."""
        raise NotImplementedError


class TransactionSigner(ABC):
    """Port for a custody key that signs, submits and confirms transactions.

    One instance holds exactly one key; it is read-only after construction.
    """

    @property
    @abstractmethod
    def address(self) -> str:
        """Return the on-chain address of the custody account."""
        raise NotImplementedError

    @abstractmethod
    async def submit(self, payload: TransactionPayload) -> TransactionReceipt:
        """Sign, submit and wait for confirmation of an entry-function call.

        The payload must use ``ArgumentEncoding.CHAIN_CLIENT``.

        Raises:
            TransactionFailedError: If any phase fails.
        """
        raise NotImplementedError


class ModuleInspector(ABC):
    """Optional diagnostic hook that looks up an on-chain module interface.

    Implementations must never raise; they only log what they find.
    """

    @abstractmethod
    async def inspect_function(self, module: str, function_name: str) -> None:
        """Log the declared interface of ``module::function_name``."""
        raise NotImplementedError


class TradeRepository(ABC):
    """Port for persisting executed trades."""

    @abstractmethod
    def save(self, trade: TradeRecord) -> None:
        """Persist a single trade record."""
        raise NotImplementedError

    @abstractmethod
    def get_recent(self, owner_address: str, limit: int = 20) -> list[TradeRecord]:
        """Return an owner's most recent trades, newest first."""
        raise NotImplementedError
