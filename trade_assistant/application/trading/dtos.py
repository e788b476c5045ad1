"""
Data Transfer Objects for the trading application layer.

DTOs carry data between the interface and application layers.
They are plain dataclasses with no behavior.

Results that can fail are discriminated: exactly one of the payload
fields or ``error`` is set. ``error`` holds the domain error so the
interface layer can map it without parsing messages.
"""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Any, Optional

from trade_assistant.domain.trading.entities import OrderType
from trade_assistant.domain.trading.errors import TradingDomainError


@dataclass(frozen=True)
class OrderCommand:
    """Input DTO for building or placing an order.

    Attributes:
        owner_address: Wallet address of the caller.
        market_name: Exchange market name, e.g. "BTC/USD".
        size: Order size in base units.
        is_buy: True for buy, False for sell.
        order_type: Market or limit.
        price: Limit price; ignored for market orders.
        stop_loss_price: Optional stop-loss trigger/limit price.
        take_profit_price: Optional take-profit trigger/limit price.
        client_order_id: Caller idempotency token, passed through unchanged.
        subaccount_address: Explicit subaccount; resolved from the owner
            when absent.
    """

    owner_address: str
    market_name: str
    size: Decimal
    is_buy: bool
    order_type: OrderType = OrderType.LIMIT
    price: Optional[Decimal] = None
    stop_loss_price: Optional[Decimal] = None
    take_profit_price: Optional[Decimal] = None
    client_order_id: Optional[str] = None
    subaccount_address: Optional[str] = None


@dataclass(frozen=True)
class MarketInfo:
    """Summary of the order a payload was built for."""

    market_name: str
    market_address: str
    price: Decimal
    size: Decimal
    side: str
    order_type: str


@dataclass(frozen=True)
class OrderTransactionResult:
    """Output DTO for a client-signed order payload."""

    transaction: Optional[dict[str, Any]] = None
    market_info: Optional[MarketInfo] = None
    error: Optional[TradingDomainError] = None

    @property
    def success(self) -> bool:
        return self.error is None


@dataclass(frozen=True)
class ExecutionResult:
    """Output DTO for an order placed with the custody key."""

    success: bool
    transaction_hash: Optional[str] = None
    order_id: Optional[str] = None
    error: Optional[TradingDomainError] = None


@dataclass(frozen=True)
class BuildDelegationCommand:
    """Input DTO for building a delegation payload.

    Attributes:
        owner_address: Wallet address that will sign the delegation.
        subaccount_address: Subaccount granting the delegation.
        expiration_secs: Optional unix expiration; None means no expiry.
    """

    owner_address: str
    subaccount_address: str
    expiration_secs: Optional[int] = None


@dataclass(frozen=True)
class DelegationTransactionResult:
    """Output DTO for a client-signed delegation payload."""

    transaction: Optional[dict[str, Any]] = None
    delegate_address: Optional[str] = None
    error: Optional[TradingDomainError] = None

    @property
    def success(self) -> bool:
        return self.error is None


@dataclass(frozen=True)
class DelegationItem:
    """One delegation grant as reported by the exchange."""

    delegated_account: str
    expiration_time_s: Optional[int]
    permission_type: Optional[str]


@dataclass(frozen=True)
class DelegationStatusResult:
    """Output DTO describing whether trading is delegated to the backend."""

    is_delegated: bool
    has_subaccount: bool
    subaccount_address: Optional[str] = None
    delegate_address: Optional[str] = None
    delegations: list[DelegationItem] = field(default_factory=list)
    error: Optional[TradingDomainError] = None


@dataclass(frozen=True)
class MarketResult:
    """Output DTO for one listed market."""

    name: str
    address: str
    price_decimals: int
    size_decimals: int
    tick_size: int
    min_size: int
    max_leverage: int


@dataclass(frozen=True)
class TradeResult:
    """Output DTO for one recorded trade."""

    market_name: str
    side: str
    size: Decimal
    price: Decimal
    notional: Decimal
    order_type: str
    status: str
    transaction_hash: str
    client_order_id: Optional[str]
    created_at: datetime
