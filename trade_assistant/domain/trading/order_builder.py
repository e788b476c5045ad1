"""
Order normalization and ``place_order_to_subaccount`` payload assembly.

Pure domain logic: takes an already-resolved market (and live price, for
market orders) and produces raw on-chain values, then the 15 positional
entry-function arguments. No IO.
"""

import logging
from decimal import Decimal
from typing import Optional

from trade_assistant.domain.trading.encoding import ArgumentEncoding, encode_optional
from trade_assistant.domain.trading.entities import (
    Market,
    MarketPrice,
    NormalizedOrder,
    OrderRequest,
    OrderType,
    TimeInForce,
    TransactionPayload,
)
from trade_assistant.domain.trading.errors import (
    InvalidOrderError,
    MissingPriceError,
    PriceUnavailableError,
    SizeTooSmallError,
)
from trade_assistant.domain.trading.fixed_point import (
    from_raw,
    round_to_tick,
    to_raw_price,
    to_raw_size,
)
from trade_assistant.domain.trading.move_functions import PLACE_ORDER_TO_SUBACCOUNT

logger = logging.getLogger(__name__)


def _time_in_force(order_type: OrderType) -> TimeInForce:
    if order_type is OrderType.MARKET:
        return TimeInForce.IMMEDIATE_OR_CANCEL
    return TimeInForce.GOOD_TILL_CANCELED


def _raw_or_none(price: Optional[Decimal], price_decimals: int) -> Optional[int]:
    if not price:
        return None
    return to_raw_price(price, price_decimals)


def resolve_execution_price(
    request: OrderRequest, live_price: Optional[MarketPrice]
) -> Decimal:
    """Pick the price an order executes at.

    Market orders use the live mark price; limit orders use the caller's.

    Raises:
        PriceUnavailableError: Market order and no live price.
        MissingPriceError: Limit order without a price.
    """
    if request.order_type is OrderType.MARKET:
        if live_price is None:
            raise PriceUnavailableError(request.market_name)
        return live_price.mark_price
    if not request.price:
        raise MissingPriceError()
    return request.price


def normalize_order(
    request: OrderRequest,
    market: Market,
    live_price: Optional[MarketPrice] = None,
    reduce_only: bool = False,
) -> NormalizedOrder:
    """Convert an order request into raw on-chain units.

    Args:
        request: Caller intent.
        market: Resolved market metadata.
        live_price: Current price entry; required for market orders.
        reduce_only: Value of the reduce-only flag.

    Returns:
        A NormalizedOrder whose price sits on the market tick grid.

    Raises:
        InvalidOrderError: If size is not positive.
        PriceUnavailableError: Market order without a live price.
        MissingPriceError: Limit order without a price.
        SizeTooSmallError: Size below ``market.min_size``.
    """
    if request.size <= 0:
        raise InvalidOrderError("Order size must be greater than zero")

    execution_price = resolve_execution_price(request, live_price)

    rounded = round_to_tick(execution_price, market.tick_size, market.price_decimals)
    raw_price = to_raw_price(rounded, market.price_decimals)
    raw_size = to_raw_size(request.size, market.size_decimals)

    if raw_size < market.min_size:
        raise SizeTooSmallError(
            size=str(request.size),
            minimum=format(from_raw(market.min_size, market.size_decimals).normalize(), "f"),
        )

    tp = _raw_or_none(request.take_profit_price, market.price_decimals)
    sl = _raw_or_none(request.stop_loss_price, market.price_decimals)

    return NormalizedOrder(
        subaccount_address=request.subaccount_address,
        market=market,
        raw_price=raw_price,
        raw_size=raw_size,
        is_buy=request.is_buy,
        time_in_force=_time_in_force(request.order_type),
        execution_price=execution_price,
        is_reduce_only=reduce_only,
        client_order_id=request.client_order_id or None,
        raw_tp_trigger_price=tp,
        raw_tp_limit_price=tp,
        raw_sl_trigger_price=sl,
        raw_sl_limit_price=sl,
    )


def build_order_payload(
    order: NormalizedOrder,
    package_address: str,
    encoding: ArgumentEncoding,
) -> TransactionPayload:
    """Assemble the ``place_order_to_subaccount`` call.

    The argument list always has exactly 15 entries regardless of which
    optional fields are set.
    """
    required = [
        order.subaccount_address,
        order.market.address,
        order.raw_price,
        order.raw_size,
        order.is_buy,
        order.time_in_force.value,
        order.is_reduce_only,
    ]
    optional = [
        order.client_order_id,
        order.raw_stop_price,
        order.raw_tp_trigger_price,
        order.raw_tp_limit_price,
        order.raw_sl_trigger_price,
        order.raw_sl_limit_price,
        order.builder_address,
        order.builder_fee,
    ]
    arguments = required + [encode_optional(v, encoding) for v in optional]

    logger.debug(
        "Built order payload market=%s side=%s raw_price=%d raw_size=%d encoding=%s",
        order.market.name,
        "buy" if order.is_buy else "sell",
        order.raw_price,
        order.raw_size,
        encoding.value,
    )

    return TransactionPayload(
        function=PLACE_ORDER_TO_SUBACCOUNT.function_id(package_address),
        type_arguments=[],
        function_arguments=arguments,
    )
