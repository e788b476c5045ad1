"""
Use case: Get an owner's recently executed trades.

Input: owner wallet address, limit
Output: list[TradeResult]
Side effects: None.
"""

import asyncio
import logging

from trade_assistant.application.trading.dtos import TradeResult
from trade_assistant.domain.trading.ports import TradeRepository

logger = logging.getLogger(__name__)

MAX_LIMIT = 100


class GetRecentTradesUseCase:
    """Reads trade history recorded by the custody placement path."""

    def __init__(self, trade_repo: TradeRepository) -> None:
        self._trade_repo = trade_repo

    async def execute(self, owner_address: str, limit: int = 20) -> list[TradeResult]:
        """Return up to ``limit`` trades, newest first (capped at 100)."""
        limit = max(1, min(limit, MAX_LIMIT))
        logger.info("Fetching recent trades owner=%s limit=%d", owner_address, limit)

        trades = await asyncio.to_thread(self._trade_repo.get_recent, owner_address, limit)
        return [
            TradeResult(
                market_name=t.market_name,
                side=t.side,
                size=t.size,
                price=t.price,
                notional=t.notional,
                order_type=t.order_type.value,
                status=t.status,
                transaction_hash=t.transaction_hash,
                client_order_id=t.client_order_id,
                created_at=t.created_at,
            )
            for t in trades
        ]
