"""
Dependency injection for the trading bounded context.

Provides FastAPI dependency functions that wire infrastructure
adapters into use cases via constructor injection.
These are the composition root for the trading context.

Adapters holding network or database pools are process-wide singletons
(``lru_cache``); ``close_shared_clients`` releases them at shutdown.
"""

import logging
from functools import lru_cache
from typing import Optional

import httpx
from fastapi import Header
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine

from trade_assistant.application.trading.build_delegation_transaction import (
    BuildDelegationTransactionUseCase,
)
from trade_assistant.application.trading.build_order_transaction import (
    BuildOrderTransactionUseCase,
)
from trade_assistant.application.trading.get_delegation_status import (
    GetDelegateAddressUseCase,
    GetDelegationStatusUseCase,
)
from trade_assistant.application.trading.get_recent_trades import GetRecentTradesUseCase
from trade_assistant.application.trading.list_markets import ListMarketsUseCase
from trade_assistant.application.trading.place_order_with_custody_key import (
    PlaceOrderWithCustodyKeyUseCase,
)
from trade_assistant.core.config import settings
from trade_assistant.domain.trading.errors import MissingFieldError
from trade_assistant.domain.trading.ports import TransactionSigner
from trade_assistant.infrastructure.trading.aptos_signer import AptosCustodySigner
from trade_assistant.infrastructure.trading.decibel_client import DecibelRestAdapter
from trade_assistant.infrastructure.trading.module_abi_probe import ModuleAbiProbe
from trade_assistant.infrastructure.trading.trade_repository import (
    TradeRepositoryAdapter,
)

logger = logging.getLogger(__name__)


@lru_cache
def get_http_client() -> httpx.AsyncClient:
    """Shared HTTP client for the exchange API."""
    return httpx.AsyncClient(
        base_url=settings.decibel_base_url,
        timeout=settings.http_timeout_seconds,
    )


@lru_cache
def get_decibel_adapter() -> DecibelRestAdapter:
    """Build the exchange adapter (market and account data)."""
    return DecibelRestAdapter(
        client=get_http_client(),
        api_key=settings.decibel_api_key,
        origin=settings.decibel_origin,
        market_cache_ttl=settings.market_cache_ttl_seconds,
    )


@lru_cache
def get_signer() -> Optional[TransactionSigner]:
    """Build the custody signer, or None when no key is configured."""
    if not settings.backend_wallet_private_key:
        logger.warning("BACKEND_WALLET_PRIVATE_KEY not set; custody signing disabled")
        return None
    return AptosCustodySigner.from_private_key(
        settings.backend_wallet_private_key,
        settings.aptos_fullnode_url,
        node_api_key=settings.aptos_node_api_key,
    )


@lru_cache
def get_module_inspector() -> ModuleAbiProbe:
    """Build the diagnostic ABI probe on the shared HTTP client."""
    return ModuleAbiProbe(
        client=get_http_client(),
        fullnode_url=settings.aptos_fullnode_url,
        package_address=settings.decibel_package_address,
        api_key=settings.aptos_node_api_key,
        origin=settings.decibel_origin,
        timeout=settings.abi_probe_timeout_seconds,
    )


@lru_cache
def _get_db_engine() -> Engine:
    """Build a SQLAlchemy engine from application settings."""
    return create_engine(settings.get_database_url(), pool_pre_ping=True)


@lru_cache
def get_trade_repository() -> TradeRepositoryAdapter:
    """Build the trade history repository."""
    return TradeRepositoryAdapter(engine=_get_db_engine())


async def close_shared_clients() -> None:
    """Close pooled clients that were created during the app's lifetime."""
    if get_decibel_adapter.cache_info().currsize:
        await get_decibel_adapter().aclose()
    elif get_http_client.cache_info().currsize:
        await get_http_client().aclose()

    if get_signer.cache_info().currsize:
        signer = get_signer()
        if isinstance(signer, AptosCustodySigner):
            await signer.close()

    if _get_db_engine.cache_info().currsize:
        _get_db_engine().dispose()


def get_wallet_address(
    x_wallet_address: Optional[str] = Header(default=None),
) -> str:
    """Return the authenticated caller's wallet address.

    The gateway in front of the API verifies the user's token and forwards
    the wallet address in ``X-Wallet-Address``.

    Raises:
        MissingFieldError: If the header is absent or blank.
    """
    if not x_wallet_address or not x_wallet_address.strip():
        raise MissingFieldError("X-Wallet-Address")
    return x_wallet_address.strip()


def get_list_markets_use_case() -> ListMarketsUseCase:
    """Build ListMarketsUseCase with its infrastructure dependencies."""
    return ListMarketsUseCase(market_port=get_decibel_adapter())


def get_build_order_use_case() -> BuildOrderTransactionUseCase:
    """Build BuildOrderTransactionUseCase with its infrastructure dependencies."""
    adapter = get_decibel_adapter()
    return BuildOrderTransactionUseCase(
        market_port=adapter,
        account_port=adapter,
        package_address=settings.decibel_package_address,
    )


def get_place_order_use_case() -> PlaceOrderWithCustodyKeyUseCase:
    """Build PlaceOrderWithCustodyKeyUseCase with its infrastructure dependencies."""
    adapter = get_decibel_adapter()
    return PlaceOrderWithCustodyKeyUseCase(
        market_port=adapter,
        account_port=adapter,
        signer=get_signer(),
        package_address=settings.decibel_package_address,
        trade_repo=get_trade_repository(),
    )


def get_build_delegation_use_case() -> BuildDelegationTransactionUseCase:
    """Build BuildDelegationTransactionUseCase with its infrastructure dependencies."""
    return BuildDelegationTransactionUseCase(
        signer=get_signer(),
        package_address=settings.decibel_package_address,
        inspector=get_module_inspector(),
    )


def get_delegate_address_use_case() -> GetDelegateAddressUseCase:
    """Build GetDelegateAddressUseCase with its infrastructure dependencies."""
    return GetDelegateAddressUseCase(signer=get_signer())


def get_delegation_status_use_case() -> GetDelegationStatusUseCase:
    """Build GetDelegationStatusUseCase with its infrastructure dependencies."""
    return GetDelegationStatusUseCase(
        account_port=get_decibel_adapter(),
        signer=get_signer(),
    )


def get_recent_trades_use_case() -> GetRecentTradesUseCase:
    """Build GetRecentTradesUseCase with its infrastructure dependencies."""
    return GetRecentTradesUseCase(trade_repo=get_trade_repository())
