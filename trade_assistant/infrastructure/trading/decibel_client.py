"""
Adapter: Decibel exchange REST API.

Implements MarketDataPort and AccountDataPort over a single shared
``httpx.AsyncClient`` (connection pooling). Every request carries the
``Origin`` header the API requires; account-scoped requests also carry the
bearer API key.

The market list is small and rarely changes, so it is cached in-process
for a short TTL. Prices, subaccounts and delegations are always fetched
fresh. Upstream failures surface as ExchangeRequestError; nothing here
retries.
"""

import logging
import time
from decimal import Decimal, InvalidOperation
from typing import Any, Callable, Optional

import httpx

from trade_assistant.domain.trading.entities import (
    Delegation,
    Market,
    MarketPrice,
    Subaccount,
)
from trade_assistant.domain.trading.errors import (
    ExchangeRequestError,
    MarketNotFoundError,
)
from trade_assistant.domain.trading.ports import AccountDataPort, MarketDataPort

logger = logging.getLogger(__name__)

DEFAULT_ORIGIN = "https://app.decibel.trade"

MARKETS_PATH = "/api/v1/markets"
PRICES_PATH = "/api/v1/prices"
SUBACCOUNTS_PATH = "/api/v1/subaccounts"
DELEGATIONS_PATH = "/api/v1/delegations"

# Statuses the exchange uses for "this account has nothing set up yet".
NO_SUBACCOUNT_STATUSES = (400, 401, 404)
NO_DELEGATION_STATUSES = (404,)

MALFORMED_ERRORS = (KeyError, TypeError, ValueError, AttributeError, InvalidOperation)


def _decimal(value: Any) -> Optional[Decimal]:
    if value is None:
        return None
    return Decimal(str(value))


def _malformed(path: str, exc: Exception) -> ExchangeRequestError:
    logger.error("GET %s returned a malformed entry: %r", path, exc)
    return ExchangeRequestError(f"Exchange returned a malformed response for {path}")


def parse_market(raw: dict[str, Any]) -> Market:
    """Map a ``/markets`` JSON entry to a Market entity."""
    return Market(
        address=raw["market_addr"],
        name=raw["market_name"],
        price_decimals=int(raw["px_decimals"]),
        size_decimals=int(raw["sz_decimals"]),
        tick_size=int(raw["tick_size"]),
        min_size=int(raw["min_size"]),
        lot_size=int(raw.get("lot_size") or 1),
        max_leverage=int(raw.get("max_leverage") or 1),
        max_open_interest=_decimal(raw.get("max_open_interest")),
    )


def parse_price(raw: dict[str, Any]) -> MarketPrice:
    """Map a ``/prices`` JSON entry to a MarketPrice entity."""
    return MarketPrice(
        market_address=raw["market"],
        mark_price=Decimal(str(raw["mark_px"])),
        mid_price=_decimal(raw.get("mid_px")),
        oracle_price=_decimal(raw.get("oracle_px")),
    )


class DecibelRestAdapter(MarketDataPort, AccountDataPort):
    """Read-only client for the Decibel REST API.

    Args:
        client: Shared async HTTP client whose ``base_url`` is the API root.
        api_key: Bearer key for account-scoped endpoints.
        origin: Value of the ``Origin`` header.
        market_cache_ttl: Seconds to keep the market list; 0 disables.
        clock: Monotonic clock, injectable for tests.
    """

    def __init__(
        self,
        client: httpx.AsyncClient,
        api_key: Optional[str] = None,
        origin: str = DEFAULT_ORIGIN,
        market_cache_ttl: float = 30.0,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._client = client
        self._api_key = api_key
        self._origin = origin
        self._market_cache_ttl = market_cache_ttl
        self._clock = clock
        self._markets: Optional[list[Market]] = None
        self._markets_fetched_at = 0.0

        if not api_key:
            logger.warning("DECIBEL_API_KEY is not set; account endpoints will fail")

    async def aclose(self) -> None:
        """Close the underlying HTTP client."""
        await self._client.aclose()

    # ------------------------------------------------------------------
    # HTTP plumbing
    # ------------------------------------------------------------------

    def _headers(self, auth: bool) -> dict[str, str]:
        headers = {"Origin": self._origin}
        if auth and self._api_key:
            headers["Authorization"] = f"Bearer {self._api_key}"
        return headers

    async def _get(
        self,
        path: str,
        params: Optional[dict[str, Any]] = None,
        auth: bool = False,
        empty_on: tuple[int, ...] = (),
    ) -> Any:
        """GET a JSON resource.

        Returns None when the response status is listed in ``empty_on``.
        """
        try:
            response = await self._client.get(
                path, params=params, headers=self._headers(auth)
            )
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            status = exc.response.status_code
            if status in empty_on:
                logger.debug("GET %s returned %d; treating as empty", path, status)
                return None
            logger.error("GET %s failed: %d %s", path, status, exc.response.text[:200])
            raise ExchangeRequestError(
                f"Exchange request failed with status {status}: "
                f"{exc.response.text[:200]}",
                status_code=status,
            ) from exc
        except httpx.HTTPError as exc:
            logger.error("GET %s failed: %s", path, exc)
            raise ExchangeRequestError(f"Exchange unreachable: {exc}") from exc

        try:
            return response.json()
        except ValueError as exc:
            logger.error("GET %s returned a non-JSON body: %s", path, response.text[:200])
            raise ExchangeRequestError(
                "Exchange returned a non-JSON response",
                status_code=response.status_code,
            ) from exc

    # ------------------------------------------------------------------
    # MarketDataPort
    # ------------------------------------------------------------------

    async def get_markets(self) -> list[Market]:
        """Return all markets, served from cache while fresh."""
        now = self._clock()
        if (
            self._markets is not None
            and self._market_cache_ttl > 0
            and now - self._markets_fetched_at < self._market_cache_ttl
        ):
            return self._markets

        data = await self._get(MARKETS_PATH)
        try:
            markets = [parse_market(raw) for raw in data or []]
        except MALFORMED_ERRORS as exc:
            raise _malformed(MARKETS_PATH, exc) from exc
        self._markets = markets
        self._markets_fetched_at = now
        logger.info("Fetched %d markets", len(markets))
        return markets

    async def get_market_by_name(self, name: str) -> Market:
        """Return the market with exactly this name.

        Raises:
            MarketNotFoundError: If no listed market matches.
        """
        for market in await self.get_markets():
            if market.name == name:
                return market
        raise MarketNotFoundError(name)

    async def get_market_price(self, market: Market) -> Optional[MarketPrice]:
        """Return the live price entry for a market, or None."""
        data = await self._get(PRICES_PATH, params={"market": market.address})
        if isinstance(data, dict):
            data = [data]
        try:
            for raw in data or []:
                if raw.get("market") == market.address and raw.get("mark_px") is not None:
                    return parse_price(raw)
        except MALFORMED_ERRORS as exc:
            raise _malformed(PRICES_PATH, exc) from exc
        logger.warning("No live price for market=%s", market.name)
        return None

    # ------------------------------------------------------------------
    # AccountDataPort
    # ------------------------------------------------------------------

    async def get_subaccounts(self, owner_address: str) -> list[Subaccount]:
        """Return the owner's subaccounts; empty when none are set up."""
        data = await self._get(
            SUBACCOUNTS_PATH,
            params={"owner": owner_address},
            auth=True,
            empty_on=NO_SUBACCOUNT_STATUSES,
        )
        try:
            return [
                Subaccount(
                    address=raw["subaccount_address"],
                    owner_address=raw.get("primary_account_address", owner_address),
                    is_primary=bool(raw.get("is_primary")),
                    is_active=bool(raw.get("is_active", True)),
                    label=raw.get("custom_label"),
                )
                for raw in data or []
            ]
        except MALFORMED_ERRORS as exc:
            raise _malformed(SUBACCOUNTS_PATH, exc) from exc

    async def get_delegations(self, subaccount_address: str) -> list[Delegation]:
        """Return delegations granted by a subaccount; empty when none."""
        data = await self._get(
            DELEGATIONS_PATH,
            params={"subaccount": subaccount_address},
            auth=True,
            empty_on=NO_DELEGATION_STATUSES,
        )
        try:
            return [
                Delegation(
                    delegated_account=raw["delegated_account"],
                    expiration_time_s=raw.get("expiration_time_s"),
                    permission_type=raw.get("permission_type"),
                )
                for raw in data or []
                if raw.get("delegated_account")
            ]
        except MALFORMED_ERRORS as exc:
            raise _malformed(DELEGATIONS_PATH, exc) from exc
