"""
Domain entities for the trading bounded context.

Entities represent core business objects with identity and lifecycle.
They contain no framework imports and no IO operations.

Decimal quantities (prices, sizes) stay ``Decimal`` until the payload
builder turns them into raw on-chain integers.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import Any, Optional


class OrderType(Enum):
    """How an order is priced."""

    MARKET = "market"
    LIMIT = "limit"


class TimeInForce(Enum):
    """On-chain time-in-force codes (u8)."""

    GOOD_TILL_CANCELED = 0
    POST_ONLY = 1
    IMMEDIATE_OR_CANCEL = 2


class TransactionState(Enum):
    """Lifecycle of a server-signed transaction."""

    UNSIGNED = "unsigned"
    SIGNED = "signed"
    SUBMITTED = "submitted"
    CONFIRMED = "confirmed"
    FAILED = "failed"


@dataclass(frozen=True)
class Market:
    """A tradable perpetual market as listed by the exchange.

    ``tick_size`` and ``min_size`` are expressed in raw units, i.e. already
    scaled by ``10 ** price_decimals`` and ``10 ** size_decimals``.
    """

    address: str
    name: str
    price_decimals: int
    size_decimals: int
    tick_size: int
    min_size: int
    lot_size: int = 1
    max_leverage: int = 1
    max_open_interest: Optional[Decimal] = None


@dataclass(frozen=True)
class MarketPrice:
    """Live price entry for one market."""

    market_address: str
    mark_price: Decimal
    mid_price: Optional[Decimal] = None
    oracle_price: Optional[Decimal] = None


@dataclass(frozen=True)
class Subaccount:
    """A trading subaccount owned by a wallet."""

    address: str
    owner_address: str
    is_primary: bool
    is_active: bool = True
    label: Optional[str] = None


@dataclass(frozen=True)
class Delegation:
    """An on-chain grant letting ``delegated_account`` trade for a subaccount."""

    delegated_account: str
    expiration_time_s: Optional[int] = None
    permission_type: Optional[str] = None


@dataclass(frozen=True)
class OrderRequest:
    """Caller intent, before conversion to raw units."""

    subaccount_address: str
    market_name: str
    size: Decimal
    is_buy: bool
    order_type: OrderType = OrderType.LIMIT
    price: Optional[Decimal] = None
    stop_loss_price: Optional[Decimal] = None
    take_profit_price: Optional[Decimal] = None
    client_order_id: Optional[str] = None


@dataclass(frozen=True)
class NormalizedOrder:
    """An order with every numeric field in raw on-chain units.

    Invariants: ``raw_size >= market.min_size`` and ``raw_price`` is a
    multiple of ``market.tick_size``.
    """

    subaccount_address: str
    market: Market
    raw_price: int
    raw_size: int
    is_buy: bool
    time_in_force: TimeInForce
    execution_price: Decimal
    is_reduce_only: bool = False
    client_order_id: Optional[str] = None
    raw_stop_price: Optional[int] = None
    raw_tp_trigger_price: Optional[int] = None
    raw_tp_limit_price: Optional[int] = None
    raw_sl_trigger_price: Optional[int] = None
    raw_sl_limit_price: Optional[int] = None
    builder_address: Optional[str] = None
    builder_fee: Optional[int] = None


@dataclass(frozen=True)
class TransactionPayload:
    """Wire-level description of one entry-function call."""

    function: str
    type_arguments: list[str] = field(default_factory=list)
    function_arguments: list[Any] = field(default_factory=list)

    def to_wallet_dict(self) -> dict[str, Any]:
        """Return the ``{function, typeArguments, functionArguments}`` form."""
        return {
            "function": self.function,
            "typeArguments": list(self.type_arguments),
            "functionArguments": list(self.function_arguments),
        }


@dataclass(frozen=True)
class TransactionReceipt:
    """Outcome of a server-signed transaction."""

    transaction_hash: str
    state: TransactionState
    order_id: Optional[str] = None
    vm_status: Optional[str] = None


@dataclass(frozen=True)
class TradeRecord:
    """An executed trade kept for the user's history."""

    owner_address: str
    market_name: str
    side: str
    size: Decimal
    price: Decimal
    order_type: OrderType
    transaction_hash: str
    status: str = "submitted"
    client_order_id: Optional[str] = None
    created_at: datetime = field(
        default_factory=lambda: datetime.now(timezone.utc)
    )

    @property
    def notional(self) -> Decimal:
        """Size times price, in quote currency."""
        return self.size * self.price
