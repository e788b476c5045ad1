"""
Shared order preparation: subaccount, market and price resolution.

Both the client-signed and the custody-signed order paths run the same
strictly sequential steps: resolve subaccount -> resolve market ->
resolve live price (market orders) -> normalize.
"""

import logging
from typing import Optional

from trade_assistant.application.trading.dtos import MarketInfo, OrderCommand
from trade_assistant.domain.trading.entities import (
    NormalizedOrder,
    OrderRequest,
    OrderType,
    Subaccount,
)
from trade_assistant.domain.trading.errors import SubaccountNotFoundError
from trade_assistant.domain.trading.order_builder import normalize_order
from trade_assistant.domain.trading.ports import AccountDataPort, MarketDataPort

logger = logging.getLogger(__name__)


def pick_primary_subaccount(subaccounts: list[Subaccount]) -> Optional[Subaccount]:
    """Return the primary subaccount, else the first one, else None."""
    for sub in subaccounts:
        if sub.is_primary:
            return sub
    return subaccounts[0] if subaccounts else None


async def resolve_subaccount(account_port: AccountDataPort, owner_address: str) -> str:
    """Return the trading subaccount address for an owner.

    Raises:
        SubaccountNotFoundError: If the owner has no subaccount.
    """
    subaccount = pick_primary_subaccount(
        await account_port.get_subaccounts(owner_address)
    )
    if subaccount is None:
        raise SubaccountNotFoundError(owner_address)
    logger.debug("Resolved subaccount=%s for owner=%s", subaccount.address, owner_address)
    return subaccount.address


async def prepare_order(
    command: OrderCommand,
    market_port: MarketDataPort,
    account_port: AccountDataPort,
) -> NormalizedOrder:
    """Resolve everything an order needs and convert it to raw units."""
    subaccount_address = command.subaccount_address or await resolve_subaccount(
        account_port, command.owner_address
    )

    market = await market_port.get_market_by_name(command.market_name)

    live_price = None
    if command.order_type is OrderType.MARKET:
        live_price = await market_port.get_market_price(market)

    request = OrderRequest(
        subaccount_address=subaccount_address,
        market_name=command.market_name,
        size=command.size,
        is_buy=command.is_buy,
        order_type=command.order_type,
        price=command.price,
        stop_loss_price=command.stop_loss_price,
        take_profit_price=command.take_profit_price,
        client_order_id=command.client_order_id,
    )
    return normalize_order(request, market, live_price)


def describe_order(command: OrderCommand, order: NormalizedOrder) -> MarketInfo:
    """Summarize a normalized order for the caller."""
    return MarketInfo(
        market_name=order.market.name,
        market_address=order.market.address,
        price=order.execution_price,
        size=command.size,
        side="buy" if command.is_buy else "sell",
        order_type=command.order_type.value,
    )
