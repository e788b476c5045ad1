"""
Centralized error handlers for FastAPI.

Maps domain-specific errors to HTTP responses.
No stack traces or internal details are exposed to clients.
All error responses use the ErrorResponse schema.
"""

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from trade_assistant.domain.trading.errors import (
    BackendWalletNotConfiguredError,
    ExchangeRequestError,
    InvalidOrderError,
    MarketNotFoundError,
    MissingFieldError,
    MissingPriceError,
    PriceUnavailableError,
    SizeTooSmallError,
    SubaccountNotFoundError,
    TradingDomainError,
    TransactionFailedError,
)

logger = logging.getLogger(__name__)

HTTP_400 = 400
HTTP_404 = 404
HTTP_422 = 422
HTTP_500 = 500
HTTP_502 = 502
HTTP_503 = 503


def _error_response(status_code: int, error: str, detail: str | None = None) -> JSONResponse:
    """Build a consistent JSON error response."""
    body: dict[str, str | None] = {"error": error}
    if detail:
        body["detail"] = detail
    return JSONResponse(status_code=status_code, content=body)


def register_error_handlers(app: FastAPI) -> None:
    """Register all domain error handlers on the FastAPI application.

    Args:
        app: The FastAPI application instance.
    """

    @app.exception_handler(MarketNotFoundError)
    async def handle_market_not_found(
        _request: Request, exc: MarketNotFoundError
    ) -> JSONResponse:
        """Handle unknown market names."""
        logger.warning("Market not found: %s", exc.market_name)
        return _error_response(HTTP_404, exc.message)

    @app.exception_handler(SubaccountNotFoundError)
    async def handle_subaccount_not_found(
        _request: Request, exc: SubaccountNotFoundError
    ) -> JSONResponse:
        """Handle owners without a trading subaccount."""
        logger.warning("No subaccount for owner=%s", exc.owner_address)
        return _error_response(HTTP_404, exc.message)

    @app.exception_handler(SizeTooSmallError)
    async def handle_size_too_small(
        _request: Request, exc: SizeTooSmallError
    ) -> JSONResponse:
        """Handle orders below the market minimum size."""
        logger.warning("Order size %s below minimum %s", exc.size, exc.minimum)
        return _error_response(HTTP_422, exc.message)

    @app.exception_handler(MissingPriceError)
    @app.exception_handler(MissingFieldError)
    @app.exception_handler(InvalidOrderError)
    async def handle_invalid_input(
        _request: Request, exc: TradingDomainError
    ) -> JSONResponse:
        """Handle malformed order or delegation requests."""
        logger.warning("Invalid request: %s", exc.message)
        return _error_response(HTTP_400, exc.message)

    @app.exception_handler(PriceUnavailableError)
    async def handle_price_unavailable(
        _request: Request, exc: PriceUnavailableError
    ) -> JSONResponse:
        """Handle a missing live price for a market order."""
        logger.warning("No live price for market=%s", exc.market_name)
        return _error_response(HTTP_400, exc.message)

    @app.exception_handler(BackendWalletNotConfiguredError)
    async def handle_wallet_not_configured(
        _request: Request, exc: BackendWalletNotConfiguredError
    ) -> JSONResponse:
        """Handle custody routes called on a deployment without a key."""
        logger.warning("Custody route called without a backend wallet")
        return _error_response(HTTP_503, exc.message)

    @app.exception_handler(ExchangeRequestError)
    async def handle_exchange_request(
        _request: Request, exc: ExchangeRequestError
    ) -> JSONResponse:
        """Handle exchange REST failures."""
        logger.error("Exchange request failed: status=%s", exc.status_code)
        return _error_response(HTTP_502, "Exchange request failed", exc.message)

    @app.exception_handler(TransactionFailedError)
    async def handle_transaction_failed(
        _request: Request, exc: TransactionFailedError
    ) -> JSONResponse:
        """Handle signing, submission or confirmation failures."""
        logger.error("Transaction failed tx=%s", exc.transaction_hash)
        return _error_response(HTTP_502, "Transaction failed", exc.reason)

    @app.exception_handler(TradingDomainError)
    async def handle_trading_domain(
        _request: Request, exc: TradingDomainError
    ) -> JSONResponse:
        """Catch-all for unhandled trading domain errors."""
        logger.error("Unhandled trading domain error: %s", exc.message)
        return _error_response(HTTP_500, "Internal server error")

    @app.exception_handler(Exception)
    async def handle_unexpected(
        _request: Request, exc: Exception
    ) -> JSONResponse:
        """Catch-all for unexpected errors. Never exposes internals."""
        logger.exception("Unexpected error: %s", type(exc).__name__)
        return _error_response(HTTP_500, "Internal server error")
