"""
Pydantic schemas for trading API request/response validation.

These schemas enforce input validation and define the API contract.
All fields use strict typing with constraints.
No business logic belongs here.
"""

from datetime import datetime
from decimal import Decimal
from typing import Any, Literal, Optional

from pydantic import BaseModel, Field

MARKET_DESCRIPTION = "Exchange market name, e.g. BTC/USD"
MARKET_MAX_LEN = 32
ADDRESS_PATTERN = r"^0x[0-9a-fA-F]{1,64}$"


class OrderRequest(BaseModel):
    """Request schema for building or executing an order.

    Attributes:
        market_name: Exchange market name.
        size: Order size in base units (> 0).
        side: "buy" or "sell".
        order_type: "market" or "limit".
        price: Limit price. Required for limit orders.
        sl_price: Optional stop-loss price.
        tp_price: Optional take-profit price.
        client_order_id: Optional caller idempotency token.
        subaccount_address: Explicit subaccount; defaults to the primary one.
    """

    market_name: str = Field(
        ..., min_length=1, max_length=MARKET_MAX_LEN, description=MARKET_DESCRIPTION
    )
    size: Decimal = Field(..., gt=0, description="Order size in base units")
    side: Literal["buy", "sell"]
    order_type: Literal["market", "limit"] = "limit"
    price: Optional[Decimal] = Field(None, gt=0, description="Limit price")
    sl_price: Optional[Decimal] = Field(None, gt=0, description="Stop-loss price")
    tp_price: Optional[Decimal] = Field(None, gt=0, description="Take-profit price")
    client_order_id: Optional[str] = Field(None, max_length=64)
    subaccount_address: Optional[str] = Field(None, pattern=ADDRESS_PATTERN)


class MarketInfoItem(BaseModel):
    """Summary of the order a transaction was built for."""

    market_name: str
    market_address: str
    price: Decimal
    size: Decimal
    side: str
    order_type: str


class WalletTransaction(BaseModel):
    """Entry-function payload in the shape browser wallets accept."""

    function: str
    typeArguments: list[str]
    functionArguments: list[Any]


class BuildOrderResponse(BaseModel):
    """Response schema for the order build endpoint."""

    transaction: WalletTransaction
    market_info: MarketInfoItem


class ExecuteOrderResponse(BaseModel):
    """Response schema for the custody execution endpoint."""

    success: bool
    transaction_hash: str
    order_id: Optional[str] = None


class BuildDelegationRequest(BaseModel):
    """Request schema for building a delegation transaction.

    Attributes:
        subaccount_address: Subaccount granting trading rights.
        expiration_secs: Optional unix expiration; omitted means no expiry.
    """

    subaccount_address: str = Field(..., pattern=ADDRESS_PATTERN)
    expiration_secs: Optional[int] = Field(None, gt=0)


class BuildDelegationResponse(BaseModel):
    """Response schema for the delegation build endpoint."""

    transaction: WalletTransaction
    delegate_address: str


class BackendAddressResponse(BaseModel):
    """Response schema for the custody address endpoint."""

    address: Optional[str]
    configured: bool


class DelegationItem(BaseModel):
    """A single delegation grant."""

    delegated_account: str
    expiration_time_s: Optional[int] = None
    permission_type: Optional[str] = None


class DelegationStatusResponse(BaseModel):
    """Response schema for the delegation status endpoint."""

    is_delegated: bool
    has_subaccount: bool
    subaccount_address: Optional[str] = None
    delegate_address: Optional[str] = None
    delegations: list[DelegationItem]


class MarketItem(BaseModel):
    """A single listed market."""

    name: str
    address: str
    price_decimals: int
    size_decimals: int
    tick_size: int
    min_size: int
    max_leverage: int


class MarketsResponse(BaseModel):
    """Response schema for the markets endpoint."""

    markets: list[MarketItem]


class TradeItem(BaseModel):
    """A single recorded trade."""

    market_name: str
    side: str
    size: Decimal
    price: Decimal
    notional: Decimal
    order_type: str
    status: str
    transaction_hash: str
    client_order_id: Optional[str] = None
    created_at: datetime


class RecentTradesResponse(BaseModel):
    """Response schema for the recent trades endpoint."""

    trades: list[TradeItem]


class HealthResponse(BaseModel):
    """Response schema for the health check endpoint."""

    status: str
    version: str
    custody_signing: bool


class ErrorResponse(BaseModel):
    """Standard error response returned by all error handlers."""

    error: str
    detail: str | None = None
