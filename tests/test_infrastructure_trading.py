"""
Tests for the trading infrastructure adapters.

HTTP adapters run against ``httpx.MockTransport``; the trade repository
runs against in-memory SQLite; the custody signer runs against a mocked
aptos-sdk REST client. No network access.
"""

from datetime import datetime, timedelta, timezone
from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest
from aptos_sdk.account import Account
from aptos_sdk.async_client import ApiError
from sqlalchemy import create_engine
from sqlalchemy.pool import StaticPool

from trade_assistant.application.trading.build_order_transaction import (
    BuildOrderTransactionUseCase,
)
from trade_assistant.application.trading.dtos import OrderCommand
from trade_assistant.domain.trading.encoding import ArgumentEncoding
from trade_assistant.domain.trading.entities import (
    OrderType,
    TradeRecord,
    TransactionPayload,
    TransactionState,
)
from trade_assistant.domain.trading.errors import (
    ExchangeRequestError,
    MarketNotFoundError,
    TransactionFailedError,
)
from trade_assistant.domain.trading.delegation_builder import build_delegation_payload
from trade_assistant.infrastructure.trading.aptos_signer import (
    AptosCustodySigner,
    _extract_order_id,
    load_account,
    to_bcs_payload,
)
from trade_assistant.infrastructure.trading.decibel_client import (
    DecibelRestAdapter,
    parse_market,
)
from trade_assistant.infrastructure.trading.module_abi_probe import ModuleAbiProbe
from trade_assistant.infrastructure.trading.trade_repository import (
    TradeRepositoryAdapter,
)

BASE_URL = "https://api.test/decibel"
PACKAGE = "0x1f513904b7568445e3c291a6c58cb272db017d8a72aea563d5664666221d5f75"
SUBACCOUNT = "0x" + "a" * 64
BACKEND = "0x" + "b" * 64

MARKETS_JSON = [
    {
        "market_addr": "0xbtc",
        "market_name": "BTC/USD",
        "px_decimals": 2,
        "sz_decimals": 4,
        "tick_size": 50,
        "min_size": 10,
        "lot_size": 10,
        "max_leverage": 40,
        "max_open_interest": 1000000,
    },
    {
        "market_addr": "0xeth",
        "market_name": "ETH/USD",
        "px_decimals": 3,
        "sz_decimals": 3,
        "tick_size": 100,
        "min_size": 5,
    },
]


class _Clock:
    def __init__(self) -> None:
        self.now = 1000.0

    def __call__(self) -> float:
        return self.now


def _adapter(handler, clock=None, api_key: str | None = "key") -> DecibelRestAdapter:
    client = httpx.AsyncClient(
        base_url=BASE_URL, transport=httpx.MockTransport(handler)
    )
    kwargs = {"clock": clock} if clock is not None else {}
    return DecibelRestAdapter(client, api_key=api_key, **kwargs)


# ══════════════════════════════════════════════════════════════════════
# Decibel REST adapter
# ══════════════════════════════════════════════════════════════════════


class TestParseMarket:
    """Tests for mapping exchange JSON onto Market."""

    def test_full_entry(self) -> None:
        market = parse_market(MARKETS_JSON[0])
        assert market.address == "0xbtc"
        assert market.tick_size == 50
        assert market.max_open_interest == Decimal("1000000")

    def test_optional_fields_default(self) -> None:
        market = parse_market(MARKETS_JSON[1])
        assert market.lot_size == 1
        assert market.max_leverage == 1
        assert market.max_open_interest is None


class TestDecibelRestAdapter:
    """Tests for DecibelRestAdapter over a mock transport."""

    @pytest.mark.asyncio
    async def test_market_list_is_cached(self) -> None:
        """A second call inside the TTL does not hit the network."""
        calls = []

        def handler(request: httpx.Request) -> httpx.Response:
            calls.append(request.url.path)
            assert request.headers["Origin"] == "https://app.decibel.trade"
            return httpx.Response(200, json=MARKETS_JSON)

        clock = _Clock()
        adapter = _adapter(handler, clock)

        first = await adapter.get_markets()
        second = await adapter.get_markets()
        assert [m.name for m in first] == ["BTC/USD", "ETH/USD"]
        assert second == first
        assert calls == ["/decibel/api/v1/markets"]

        clock.now += 31
        await adapter.get_markets()
        assert len(calls) == 2

    @pytest.mark.asyncio
    async def test_market_by_name_is_exact(self) -> None:
        adapter = _adapter(lambda r: httpx.Response(200, json=MARKETS_JSON))

        assert (await adapter.get_market_by_name("ETH/USD")).address == "0xeth"
        with pytest.raises(MarketNotFoundError, match="Market btc/usd not found"):
            await adapter.get_market_by_name("btc/usd")

    @pytest.mark.asyncio
    async def test_market_price(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            assert request.url.params["market"] == "0xbtc"
            return httpx.Response(
                200,
                json=[{"market": "0xbtc", "mark_px": 64000.5, "mid_px": 64000.25}],
            )

        adapter = _adapter(handler)
        price = await adapter.get_market_price(parse_market(MARKETS_JSON[0]))

        assert price.mark_price == Decimal("64000.5")
        assert price.mid_price == Decimal("64000.25")
        assert price.oracle_price is None

    @pytest.mark.asyncio
    async def test_market_price_missing(self) -> None:
        adapter = _adapter(
            lambda r: httpx.Response(200, json=[{"market": "0xeth", "mark_px": 1}])
        )
        assert await adapter.get_market_price(parse_market(MARKETS_JSON[0])) is None

    @pytest.mark.asyncio
    async def test_subaccounts_send_bearer_key(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            assert request.headers["Authorization"] == "Bearer key"
            assert request.url.params["owner"] == "0xowner"
            return httpx.Response(
                200,
                json=[
                    {
                        "subaccount_address": "0xsub1",
                        "primary_account_address": "0xowner",
                        "is_primary": True,
                        "custom_label": "main",
                    }
                ],
            )

        (sub,) = await _adapter(handler).get_subaccounts("0xowner")
        assert sub.address == "0xsub1"
        assert sub.is_primary is True
        assert sub.label == "main"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("status", [400, 401, 404])
    async def test_subaccounts_missing_means_empty(self, status: int) -> None:
        adapter = _adapter(lambda r: httpx.Response(status, text="nope"))
        assert await adapter.get_subaccounts("0xowner") == []

    @pytest.mark.asyncio
    async def test_delegations(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            assert request.url.params["subaccount"] == "0xsub1"
            return httpx.Response(
                200,
                json=[
                    {"delegated_account": "0xbackend", "expiration_time_s": None},
                    {"permission_type": "orphan"},
                ],
            )

        (delegation,) = await _adapter(handler).get_delegations("0xsub1")
        assert delegation.delegated_account == "0xbackend"

    @pytest.mark.asyncio
    async def test_delegations_404_means_empty(self) -> None:
        adapter = _adapter(lambda r: httpx.Response(404))
        assert await adapter.get_delegations("0xsub1") == []

    @pytest.mark.asyncio
    async def test_upstream_error(self) -> None:
        adapter = _adapter(lambda r: httpx.Response(503, text="maintenance"))
        with pytest.raises(ExchangeRequestError) as exc_info:
            await adapter.get_markets()
        assert exc_info.value.status_code == 503

    @pytest.mark.asyncio
    async def test_transport_error(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("refused", request=request)

        with pytest.raises(ExchangeRequestError, match="Exchange unreachable"):
            await _adapter(handler).get_markets()

    @pytest.mark.asyncio
    async def test_non_json_body_is_exchange_error(self) -> None:
        adapter = _adapter(
            lambda r: httpx.Response(200, text="<html>gateway</html>")
        )
        with pytest.raises(ExchangeRequestError, match="non-JSON") as info:
            await adapter.get_markets()
        assert info.value.status_code == 200

    @pytest.mark.asyncio
    async def test_malformed_market_entry_is_exchange_error(self) -> None:
        adapter = _adapter(
            lambda r: httpx.Response(200, json=[{"market_name": "BTC/USD"}])
        )
        with pytest.raises(ExchangeRequestError, match="malformed"):
            await adapter.get_markets()

    @pytest.mark.asyncio
    async def test_malformed_subaccount_entry_is_exchange_error(self) -> None:
        adapter = _adapter(lambda r: httpx.Response(200, json=["0xsub"]))
        with pytest.raises(ExchangeRequestError, match="malformed"):
            await adapter.get_subaccounts("0xowner")

    @pytest.mark.asyncio
    async def test_gateway_page_surfaces_as_build_result(self) -> None:
        adapter = _adapter(
            lambda r: httpx.Response(200, text="<html>gateway</html>")
        )
        use_case = BuildOrderTransactionUseCase(adapter, adapter, PACKAGE)

        result = await use_case.execute(
            OrderCommand(
                owner_address="0xowner",
                market_name="BTC/USD",
                size=Decimal("0.5"),
                is_buy=True,
                price=Decimal("60000"),
            )
        )

        assert isinstance(result.error, ExchangeRequestError)
        assert result.transaction is None


# ══════════════════════════════════════════════════════════════════════
# Module ABI probe
# ══════════════════════════════════════════════════════════════════════


class TestModuleAbiProbe:
    """The probe logs and never raises."""

    def _probe(self, handler) -> ModuleAbiProbe:
        client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        return ModuleAbiProbe(client, "https://fullnode.test/v1/", PACKAGE)

    @pytest.mark.asyncio
    async def test_logs_function_params(self, caplog: pytest.LogCaptureFixture) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            assert request.url.path == f"/v1/accounts/{PACKAGE}/module/dex_accounts"
            return httpx.Response(
                200,
                json={
                    "abi": {
                        "name": "dex_accounts",
                        "exposed_functions": [
                            {
                                "name": "delegate_trading_to_for_subaccount",
                                "params": ["&signer", "address", "address"],
                            }
                        ],
                    }
                },
            )

        with caplog.at_level("INFO"):
            await self._probe(handler).inspect_function(
                "dex_accounts", "delegate_trading_to_for_subaccount"
            )
        assert "exposed_functions=1" in caplog.text
        assert "&signer" in caplog.text

    @pytest.mark.asyncio
    async def test_http_failure_is_swallowed(self) -> None:
        result = await self._probe(lambda r: httpx.Response(500)).inspect_function(
            "dex_accounts", "delegate_trading_to_for_subaccount"
        )
        assert result is None

    @pytest.mark.asyncio
    async def test_bad_json_is_swallowed(self) -> None:
        probe = self._probe(lambda r: httpx.Response(200, content=b"not json"))
        await probe.inspect_function("dex_accounts", "anything")

    @pytest.mark.asyncio
    async def test_timeout_is_swallowed(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("slow", request=request)

        await self._probe(handler).inspect_function("dex_accounts", "anything")

    @pytest.mark.asyncio
    async def test_malformed_abi_entries_are_swallowed(
        self, caplog: pytest.LogCaptureFixture
    ) -> None:
        probe = self._probe(
            lambda r: httpx.Response(200, json={"abi": {"exposed_functions": ["oops"]}})
        )
        with caplog.at_level("WARNING"):
            await probe.inspect_function(
                "dex_accounts", "delegate_trading_to_for_subaccount"
            )
        assert "Could not inspect ABI" in caplog.text

    @pytest.mark.asyncio
    async def test_missing_function_is_logged(self, caplog: pytest.LogCaptureFixture) -> None:
        probe = self._probe(
            lambda r: httpx.Response(
                200, json={"abi": {"name": "dex_accounts", "exposed_functions": []}}
            )
        )
        with caplog.at_level("WARNING"):
            await probe.inspect_function("dex_accounts", "missing_fn")
        assert "Function missing_fn not found" in caplog.text


# ══════════════════════════════════════════════════════════════════════
# Aptos custody signer
# ══════════════════════════════════════════════════════════════════════


def _order_payload(arguments: list) -> TransactionPayload:
    return TransactionPayload(
        function=f"{PACKAGE}::dex_accounts::place_order_to_subaccount",
        function_arguments=arguments,
    )


def _chain_order_arguments() -> list:
    return [
        SUBACCOUNT,
        BACKEND,
        5000050,
        5000,
        True,
        2,
        False,
        ["ai-1"],
        [],
        [6000000],
        [6000000],
        [],
        [],
        [],
        [],
    ]


class TestBcsPayload:
    """Tests for turning a CHAIN_CLIENT payload into BCS arguments."""

    def test_order_arguments_encoded_by_declared_type(self) -> None:
        bcs = to_bcs_payload(_order_payload(_chain_order_arguments()))
        entry = bcs.value

        assert entry.function == "place_order_to_subaccount"
        assert len(entry.args) == 15
        assert entry.args[0] == bytes.fromhex("a" * 64)
        assert entry.args[2] == (5000050).to_bytes(8, "little")
        assert entry.args[4] == b"\x01"
        assert entry.args[5] == b"\x02"
        assert entry.args[7] == b"\x01\x04ai-1"
        assert entry.args[8] == b"\x00"
        assert entry.args[9] == b"\x01" + (6000000).to_bytes(8, "little")

    def test_delegation_payload(self) -> None:
        payload = build_delegation_payload(
            SUBACCOUNT, BACKEND, PACKAGE, encoding=ArgumentEncoding.CHAIN_CLIENT
        )
        entry = to_bcs_payload(payload).value
        assert entry.function == "delegate_trading_to_for_subaccount"
        assert entry.args[2] == b"\x00"

    def test_arity_mismatch(self) -> None:
        with pytest.raises(TransactionFailedError, match="expects 15 arguments"):
            to_bcs_payload(_order_payload(_chain_order_arguments()[:14]))

    def test_unknown_function(self) -> None:
        payload = TransactionPayload(function=f"{PACKAGE}::dex_accounts::withdraw")
        with pytest.raises(TransactionFailedError, match="unknown entry function"):
            to_bcs_payload(payload)


class TestAptosCustodySigner:
    """Tests for the custody signer's state walk."""

    def _signer(self, rest_client: AsyncMock) -> AptosCustodySigner:
        account = MagicMock()
        account.address.return_value = BACKEND
        return AptosCustodySigner(rest_client, account)

    def test_load_account_accepts_prefixed_key(self) -> None:
        account = Account.generate()
        key = account.private_key.hex()
        assert load_account(key).address() == account.address()
        assert load_account(f"ed25519-priv-{key}").address() == account.address()

    def test_address(self) -> None:
        assert self._signer(AsyncMock()).address == BACKEND

    @pytest.mark.asyncio
    async def test_confirmed_receipt(self) -> None:
        rest_client = AsyncMock()
        rest_client.submit_bcs_transaction.return_value = "0xhash"
        rest_client.transaction_by_hash.return_value = {
            "vm_status": "Executed successfully",
            "events": [
                {"type": "0x1::coin::Deposit", "data": {}},
                {"type": f"{PACKAGE}::market::OrderEvent", "data": {"order_id": 99}},
            ],
        }

        receipt = await self._signer(rest_client).submit(
            _order_payload(_chain_order_arguments())
        )

        assert receipt.state is TransactionState.CONFIRMED
        assert receipt.transaction_hash == "0xhash"
        assert receipt.order_id == "99"
        rest_client.wait_for_transaction.assert_awaited_once_with("0xhash")

    @pytest.mark.asyncio
    async def test_chain_failure_raises(self) -> None:
        rest_client = AsyncMock()
        rest_client.submit_bcs_transaction.return_value = "0xhash"
        rest_client.wait_for_transaction.side_effect = ApiError("Move abort", 400)

        with pytest.raises(TransactionFailedError) as exc_info:
            await self._signer(rest_client).submit(
                _order_payload(_chain_order_arguments())
            )
        assert exc_info.value.transaction_hash == "0xhash"

    def test_extract_order_id_absent(self) -> None:
        assert _extract_order_id({"events": []}) is None
        assert _extract_order_id({}) is None


# ══════════════════════════════════════════════════════════════════════
# Trade repository
# ══════════════════════════════════════════════════════════════════════


@pytest.fixture
def trade_repo() -> TradeRepositoryAdapter:
    engine = create_engine(
        "sqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    return TradeRepositoryAdapter(engine)


def _trade(owner: str, tx: str, minutes_ago: int) -> TradeRecord:
    return TradeRecord(
        owner_address=owner,
        market_name="BTC/USD",
        side="buy",
        size=Decimal("0.5"),
        price=Decimal("60000.5"),
        order_type=OrderType.LIMIT,
        transaction_hash=tx,
        client_order_id=f"ai-{minutes_ago}",
        created_at=datetime(2026, 1, 1, 12, 0, tzinfo=timezone.utc)
        - timedelta(minutes=minutes_ago),
    )


class TestTradeRepositoryAdapter:
    """Tests for the SQLAlchemy trade repository on SQLite."""

    def test_newest_first_and_scoped_to_owner(
        self, trade_repo: TradeRepositoryAdapter
    ) -> None:
        trade_repo.save(_trade("0xOwner", "0x1", minutes_ago=10))
        trade_repo.save(_trade("0xowner", "0x2", minutes_ago=1))
        trade_repo.save(_trade("0xother", "0x3", minutes_ago=0))

        trades = trade_repo.get_recent("0xOWNER")

        assert [t.transaction_hash for t in trades] == ["0x2", "0x1"]
        assert trades[0].price == Decimal("60000.5")
        assert trades[0].order_type is OrderType.LIMIT
        assert trades[0].status == "submitted"

    def test_limit(self, trade_repo: TradeRepositoryAdapter) -> None:
        for i in range(5):
            trade_repo.save(_trade("0xowner", f"0x{i}", minutes_ago=i))
        assert len(trade_repo.get_recent("0xowner", limit=2)) == 2

    def test_empty(self, trade_repo: TradeRepositoryAdapter) -> None:
        assert trade_repo.get_recent("0xnobody") == []
