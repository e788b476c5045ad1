"""
FastAPI router for the trading bounded context.

All routes delegate to use cases. No business logic here.
Input validation is handled by Pydantic schemas.
Use cases return discriminated results; a failed result's domain error
is re-raised here so the centralized error handlers map it to HTTP.
"""

from fastapi import APIRouter, Depends, Query, Request

from trade_assistant.application.trading.build_delegation_transaction import (
    BuildDelegationTransactionUseCase,
)
from trade_assistant.application.trading.build_order_transaction import (
    BuildOrderTransactionUseCase,
)
from trade_assistant.application.trading.dtos import (
    BuildDelegationCommand,
    OrderCommand,
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
from trade_assistant.domain.trading.entities import OrderType
from trade_assistant.interfaces.trading.dependencies import (
    get_build_delegation_use_case,
    get_build_order_use_case,
    get_delegate_address_use_case,
    get_delegation_status_use_case,
    get_list_markets_use_case,
    get_place_order_use_case,
    get_recent_trades_use_case,
    get_wallet_address,
)
from trade_assistant.interfaces.trading.schemas import (
    BackendAddressResponse,
    BuildDelegationRequest,
    BuildDelegationResponse,
    BuildOrderResponse,
    DelegationItem,
    DelegationStatusResponse,
    ErrorResponse,
    ExecuteOrderResponse,
    MarketInfoItem,
    MarketItem,
    MarketsResponse,
    OrderRequest,
    RecentTradesResponse,
    TradeItem,
    WalletTransaction,
)
from trade_assistant.shared.security.rate_limiting import HEAVY_RATE_LIMIT, limiter

router = APIRouter(prefix="/trading", tags=["trading"])

ERROR_RESPONSES = {
    400: {"model": ErrorResponse},
    404: {"model": ErrorResponse},
    422: {"model": ErrorResponse},
    502: {"model": ErrorResponse},
}


def _to_command(owner_address: str, request: OrderRequest) -> OrderCommand:
    return OrderCommand(
        owner_address=owner_address,
        market_name=request.market_name,
        size=request.size,
        is_buy=request.side == "buy",
        order_type=OrderType(request.order_type),
        price=request.price,
        stop_loss_price=request.sl_price,
        take_profit_price=request.tp_price,
        client_order_id=request.client_order_id,
        subaccount_address=request.subaccount_address,
    )


@router.get(
    "/markets",
    response_model=MarketsResponse,
    responses={502: {"model": ErrorResponse}},
    summary="List markets",
    description="List tradable markets with their precision and size limits.",
)
async def list_markets(
    use_case: ListMarketsUseCase = Depends(get_list_markets_use_case),
) -> MarketsResponse:
    """List tradable markets."""
    markets = await use_case.execute()
    return MarketsResponse(
        markets=[
            MarketItem(
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
    )


@router.get(
    "/backend-address",
    response_model=BackendAddressResponse,
    summary="Custody address",
    description="Address that delegated orders are signed by, if configured.",
)
def get_backend_address(
    use_case: GetDelegateAddressUseCase = Depends(get_delegate_address_use_case),
) -> BackendAddressResponse:
    """Return the custody signer address."""
    address = use_case.execute()
    return BackendAddressResponse(address=address, configured=address is not None)


@router.get(
    "/delegation/status",
    response_model=DelegationStatusResponse,
    responses={400: {"model": ErrorResponse}, 503: {"model": ErrorResponse}},
    summary="Delegation status",
    description="Whether the caller's primary subaccount delegates trading to the backend.",
)
async def get_delegation_status(
    owner_address: str = Depends(get_wallet_address),
    use_case: GetDelegationStatusUseCase = Depends(get_delegation_status_use_case),
) -> DelegationStatusResponse:
    """Report the caller's delegation status."""
    result = await use_case.execute(owner_address)
    if result.error is not None:
        raise result.error
    return DelegationStatusResponse(
        is_delegated=result.is_delegated,
        has_subaccount=result.has_subaccount,
        subaccount_address=result.subaccount_address,
        delegate_address=result.delegate_address,
        delegations=[
            DelegationItem(
                delegated_account=d.delegated_account,
                expiration_time_s=d.expiration_time_s,
                permission_type=d.permission_type,
            )
            for d in result.delegations
        ],
    )


@router.post(
    "/delegation/build",
    response_model=BuildDelegationResponse,
    responses={400: {"model": ErrorResponse}, 503: {"model": ErrorResponse}},
    summary="Build delegation transaction",
    description="Build an unsigned transaction delegating trading to the backend.",
)
async def build_delegation(
    request: BuildDelegationRequest,
    owner_address: str = Depends(get_wallet_address),
    use_case: BuildDelegationTransactionUseCase = Depends(get_build_delegation_use_case),
) -> BuildDelegationResponse:
    """Build a delegation transaction for the caller's wallet to sign."""
    command = BuildDelegationCommand(
        owner_address=owner_address,
        subaccount_address=request.subaccount_address,
        expiration_secs=request.expiration_secs,
    )
    result = await use_case.execute(command)
    if result.error is not None:
        raise result.error
    return BuildDelegationResponse(
        transaction=WalletTransaction(**result.transaction),
        delegate_address=result.delegate_address,
    )


@router.post(
    "/order/build",
    response_model=BuildOrderResponse,
    responses=ERROR_RESPONSES,
    summary="Build order transaction",
    description="Build an unsigned order transaction for the caller's wallet to sign.",
)
async def build_order(
    request: OrderRequest,
    owner_address: str = Depends(get_wallet_address),
    use_case: BuildOrderTransactionUseCase = Depends(get_build_order_use_case),
) -> BuildOrderResponse:
    """Build an order transaction."""
    result = await use_case.execute(_to_command(owner_address, request))
    if result.error is not None:
        raise result.error
    info = result.market_info
    return BuildOrderResponse(
        transaction=WalletTransaction(**result.transaction),
        market_info=MarketInfoItem(
            market_name=info.market_name,
            market_address=info.market_address,
            price=info.price,
            size=info.size,
            side=info.side,
            order_type=info.order_type,
        ),
    )


@router.post(
    "/execute",
    response_model=ExecuteOrderResponse,
    responses={**ERROR_RESPONSES, 503: {"model": ErrorResponse}},
    summary="Execute order",
    description="Sign and submit an order with the backend custody key.",
)
@limiter.limit(HEAVY_RATE_LIMIT)
async def execute_order(
    request: Request,
    order: OrderRequest,
    owner_address: str = Depends(get_wallet_address),
    use_case: PlaceOrderWithCustodyKeyUseCase = Depends(get_place_order_use_case),
) -> ExecuteOrderResponse:
    """Place an order signed by the custody key."""
    result = await use_case.execute(_to_command(owner_address, order))
    if result.error is not None:
        raise result.error
    return ExecuteOrderResponse(
        success=result.success,
        transaction_hash=result.transaction_hash,
        order_id=result.order_id,
    )


@router.get(
    "/trades",
    response_model=RecentTradesResponse,
    responses={400: {"model": ErrorResponse}},
    summary="Recent trades",
    description="Trades the backend placed for the caller, newest first.",
)
async def get_recent_trades(
    limit: int = Query(20, ge=1, le=100),
    owner_address: str = Depends(get_wallet_address),
    use_case: GetRecentTradesUseCase = Depends(get_recent_trades_use_case),
) -> RecentTradesResponse:
    """List the caller's recent trades."""
    trades = await use_case.execute(owner_address, limit=limit)
    return RecentTradesResponse(
        trades=[
            TradeItem(
                market_name=t.market_name,
                side=t.side,
                size=t.size,
                price=t.price,
                notional=t.notional,
                order_type=t.order_type,
                status=t.status,
                transaction_hash=t.transaction_hash,
                client_order_id=t.client_order_id,
                created_at=t.created_at,
            )
            for t in trades
        ]
    )
