"""
Use case: List tradable markets.

Input: none
Output: list[MarketResult]
Side effects: None.
Failure cases: ExchangeRequestError (propagated to the error handlers).
"""

from trade_assistant.application.trading.dtos import MarketResult
from trade_assistant.domain.trading.ports import MarketDataPort


class ListMarketsUseCase:
    """Returns the exchange market list in a caller-friendly shape."""

    def __init__(self, market_port: MarketDataPort) -> None:
        self._market_port = market_port

    async def execute(self) -> list[MarketResult]:
        markets = await self._market_port.get_markets()
        return [
            MarketResult(
                name=m.name,
                address=m.address,
                price_decimals=m.price_decimals,
                size_decimals=m.size_decimals,
                tick_size=m.tick_size,
                min_size=m.min_size,
                max_leverage=m.max_leverage,
            )
            for m in markets
        ]
