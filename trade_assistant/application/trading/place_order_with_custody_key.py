"""
Use case: Place an order by signing with the server's custody key.

Input: OrderCommand
Output: ExecutionResult
Side effects: Submits a transaction on chain; records the trade.
Failure cases: BackendWalletNotConfiguredError, SubaccountNotFoundError,
    MarketNotFoundError, PriceUnavailableError, MissingPriceError,
    SizeTooSmallError, ExchangeRequestError, TransactionFailedError.

This is the delegated flow: the custody account must have been granted
trading rights on the subaccount beforehand.
"""

import asyncio
import dataclasses
import logging
import time
from typing import Optional

from trade_assistant.application.trading.dtos import ExecutionResult, OrderCommand
from trade_assistant.application.trading.order_preparation import prepare_order
from trade_assistant.domain.trading.encoding import ArgumentEncoding
from trade_assistant.domain.trading.entities import (
    NormalizedOrder,
    TradeRecord,
    TransactionReceipt,
)
from trade_assistant.domain.trading.errors import (
    BackendWalletNotConfiguredError,
    TradingDomainError,
)
from trade_assistant.domain.trading.order_builder import build_order_payload
from trade_assistant.domain.trading.ports import (
    AccountDataPort,
    MarketDataPort,
    TradeRepository,
    TransactionSigner,
)

logger = logging.getLogger(__name__)


def default_client_order_id() -> str:
    """Return ``ai-<unix millis>``, used when the caller supplies none."""
    return f"ai-{int(time.time() * 1000)}"


class PlaceOrderWithCustodyKeyUseCase:
    """Builds, signs, submits and confirms an order with the custody key.

    Fails immediately, before any network call, when no signer is
    configured. Recording the trade is best effort and never turns a
    confirmed placement into a failure.
    """

    def __init__(
        self,
        market_port: MarketDataPort,
        account_port: AccountDataPort,
        signer: Optional[TransactionSigner],
        package_address: str,
        trade_repo: Optional[TradeRepository] = None,
    ) -> None:
        self._market_port = market_port
        self._account_port = account_port
        self._signer = signer
        self._package_address = package_address
        self._trade_repo = trade_repo

    async def execute(self, command: OrderCommand) -> ExecutionResult:
        """Run the custody placement use case.

        Args:
            command: The order request.

        Returns:
            ExecutionResult with the transaction hash, or the domain error.
        """
        if self._signer is None:
            logger.error("Custody order requested but no backend wallet is configured")
            return ExecutionResult(success=False, error=BackendWalletNotConfiguredError())

        if not command.client_order_id:
            command = dataclasses.replace(
                command, client_order_id=default_client_order_id()
            )

        try:
            order = await prepare_order(command, self._market_port, self._account_port)
            payload = build_order_payload(
                order, self._package_address, ArgumentEncoding.CHAIN_CLIENT
            )
            receipt = await self._signer.submit(payload)
        except TradingDomainError as exc:
            logger.warning(
                "Custody order failed market=%s: %s", command.market_name, exc.message
            )
            return ExecutionResult(success=False, error=exc)

        logger.info(
            "Order placed tx=%s market=%s price=%s size=%s side=%s",
            receipt.transaction_hash,
            command.market_name,
            order.execution_price,
            command.size,
            "buy" if command.is_buy else "sell",
        )

        await self._record_trade(command, order, receipt)

        return ExecutionResult(
            success=True,
            transaction_hash=receipt.transaction_hash,
            order_id=receipt.order_id,
        )

    async def _record_trade(
        self,
        command: OrderCommand,
        order: NormalizedOrder,
        receipt: TransactionReceipt,
    ) -> None:
        if self._trade_repo is None:
            return
        trade = TradeRecord(
            owner_address=command.owner_address,
            market_name=command.market_name,
            side="buy" if command.is_buy else "sell",
            size=command.size,
            price=order.execution_price,
            order_type=command.order_type,
            transaction_hash=receipt.transaction_hash,
            client_order_id=command.client_order_id,
        )
        try:
            await asyncio.to_thread(self._trade_repo.save, trade)
        except Exception:
            logger.exception(
                "Failed to record trade tx=%s", receipt.transaction_hash
            )
