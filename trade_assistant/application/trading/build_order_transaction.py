"""
Use case: Build an order transaction for the caller's wallet to sign.

Input: OrderCommand
Output: OrderTransactionResult (wallet payload XOR error)
Side effects: None (read-only exchange lookups).
Failure cases: SubaccountNotFoundError, MarketNotFoundError,
    PriceUnavailableError, MissingPriceError, SizeTooSmallError,
    ExchangeRequestError.
"""

import logging

from trade_assistant.application.trading.dtos import OrderCommand, OrderTransactionResult
from trade_assistant.application.trading.order_preparation import (
    describe_order,
    prepare_order,
)
from trade_assistant.domain.trading.encoding import ArgumentEncoding
from trade_assistant.domain.trading.errors import TradingDomainError
from trade_assistant.domain.trading.order_builder import build_order_payload
from trade_assistant.domain.trading.ports import AccountDataPort, MarketDataPort

logger = logging.getLogger(__name__)


class BuildOrderTransactionUseCase:
    """Builds an unsigned ``place_order_to_subaccount`` payload.

    Signing, submission and confirmation happen in the caller's wallet;
    this use case never sees their outcome.
    """

    def __init__(
        self,
        market_port: MarketDataPort,
        account_port: AccountDataPort,
        package_address: str,
    ) -> None:
        self._market_port = market_port
        self._account_port = account_port
        self._package_address = package_address

    async def execute(self, command: OrderCommand) -> OrderTransactionResult:
        """Run the build-order use case.

        Args:
            command: The order request.

        Returns:
            The wallet payload and order summary, or the domain error.
        """
        logger.info(
            "Building order transaction market=%s side=%s type=%s owner=%s",
            command.market_name,
            "buy" if command.is_buy else "sell",
            command.order_type.value,
            command.owner_address,
        )

        try:
            order = await prepare_order(command, self._market_port, self._account_port)
        except TradingDomainError as exc:
            logger.warning("Order build rejected: %s", exc.message)
            return OrderTransactionResult(error=exc)

        payload = build_order_payload(
            order, self._package_address, ArgumentEncoding.WALLET
        )
        return OrderTransactionResult(
            transaction=payload.to_wallet_dict(),
            market_info=describe_order(command, order),
        )
