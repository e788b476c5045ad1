"""
Domain-specific errors for the trading bounded context.

All errors raised from the domain layer must be defined here.
These are mapped to HTTP responses at the interface layer.
No framework imports allowed.

Errors fall into four groups:
    - input errors: caller-correctable, never retried
    - configuration errors: a deployment is missing a secret
    - upstream errors: the exchange or the chain failed
    - diagnostic errors: never raised, only logged (see ModuleInspector)
"""


class TradingDomainError(Exception):
    """Base error for all trading domain errors."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(self.message)


# ── Input errors ─────────────────────────────────────────────────


class MarketNotFoundError(TradingDomainError):
    """Raised when a market name is not in the exchange market list."""

    def __init__(self, market_name: str) -> None:
        super().__init__(f"Market {market_name} not found")
        self.market_name = market_name


class PriceUnavailableError(TradingDomainError):
    """Raised when the live price feed has no entry for a market."""

    def __init__(self, market_name: str) -> None:
        super().__init__("Could not fetch market price")
        self.market_name = market_name


class MissingPriceError(TradingDomainError):
    """Raised when a limit order is requested without a price."""

    def __init__(self) -> None:
        super().__init__("Price is required for limit orders")


class SizeTooSmallError(TradingDomainError):
    """Raised when the converted order size is below the market minimum.

    Both sizes are kept in decimal units so the message is readable
    without knowing the market's size precision.
    """

    def __init__(self, size: str, minimum: str) -> None:
        super().__init__(f"Order size {size} is below minimum size {minimum}")
        self.size = size
        self.minimum = minimum


class InvalidOrderError(TradingDomainError):
    """Raised when an order request is malformed (e.g. non-positive size)."""


class MissingFieldError(TradingDomainError):
    """Raised when a required field is absent or blank."""

    def __init__(self, field_name: str) -> None:
        super().__init__(f"Missing required field: {field_name}")
        self.field_name = field_name


class SubaccountNotFoundError(TradingDomainError):
    """Raised when the owner has no trading subaccount on the exchange."""

    def __init__(self, owner_address: str) -> None:
        super().__init__("No subaccount found. Please create a subaccount first.")
        self.owner_address = owner_address


# ── Configuration errors ─────────────────────────────────────────


class BackendWalletNotConfiguredError(TradingDomainError):
    """Raised when a custody-signing path is used without a custody key."""

    def __init__(self) -> None:
        super().__init__("Backend wallet not configured")


# ── Upstream errors ──────────────────────────────────────────────


class ExchangeRequestError(TradingDomainError):
    """Raised when the exchange REST API fails or is unreachable."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class TransactionFailedError(TradingDomainError):
    """Raised when signing, submitting or confirming a transaction fails."""

    def __init__(self, reason: str, transaction_hash: str | None = None) -> None:
        super().__init__(f"Transaction failed: {reason}")
        self.reason = reason
        self.transaction_hash = transaction_hash
