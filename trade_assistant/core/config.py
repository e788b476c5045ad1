"""
Application configuration.

Loads settings from environment variables and .env file.
Exchange endpoints, chain endpoints and the custody key all live here.
"""

from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Optional


class Settings(BaseSettings):
    """Application settings loaded from environment.

    Attributes:
        project_name: Display name for the API.
        version: Current API version string.
        debug: Enable debug mode. Must be False in production.
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR).
        rate_limit_default: Default rate limit for all endpoints.
        rate_limit_heavy: Rate limit for routes that sign with the custody key.
        decibel_base_url: Root of the Decibel exchange REST API.
        decibel_api_key: Bearer key for account-scoped exchange endpoints.
        decibel_origin: ``Origin`` header the exchange API expects.
        decibel_package_address: Address the DEX Move package is published at.
        aptos_fullnode_url: Aptos fullnode REST root.
        aptos_node_api_key: Optional key for the fullnode.
        backend_wallet_private_key: Custody key. Leave unset to disable the
            server-signing path.
        http_timeout_seconds: Timeout for exchange REST calls.
        abi_probe_timeout_seconds: Timeout for the diagnostic ABI fetch.
        market_cache_ttl_seconds: How long the market list is reused; 0 disables.

    The trade history database defaults to a DSN assembled from the
    postgres_* values unless ``DATABASE_URL`` is set.
    """

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

    project_name: str = "TradeAssistant"
    version: str = "0.1.0"
    debug: bool = False
    log_level: str = "INFO"
    rate_limit_default: str = "60/minute"
    rate_limit_heavy: str = "10/minute"

    # Decibel exchange
    decibel_base_url: str = "https://api.testnet.aptoslabs.com/decibel"
    decibel_api_key: Optional[str] = None
    decibel_origin: str = "https://app.decibel.trade"
    decibel_package_address: str = (
        "0x1f513904b7568445e3c291a6c58cb272db017d8a72aea563d5664666221d5f75"
    )

    # Aptos chain
    aptos_fullnode_url: str = "https://api.testnet.aptoslabs.com/v1"
    aptos_node_api_key: Optional[str] = None
    backend_wallet_private_key: Optional[str] = None

    http_timeout_seconds: float = 10.0
    abi_probe_timeout_seconds: float = 3.0
    market_cache_ttl_seconds: float = 30.0

    # Trade history
    database_url: Optional[str] = None
    postgres_user: str = "postgres"
    postgres_password: str = "postgres"
    postgres_host: str = "localhost"
    postgres_port: int = 5432
    postgres_db: str = "trade_assistant"

    def get_database_url(self) -> str:
        """Return the effective SQLAlchemy URL for trade history.

        Priority:
        1. Explicit ``DATABASE_URL``
        2. Build DSN from postgres_* values (useful for Docker Compose or local setups)
        """
        if self.database_url:
            return self.database_url
        return (
            f"postgresql+psycopg2://{self.postgres_user}:{self.postgres_password}@"
            f"{self.postgres_host}:{self.postgres_port}/{self.postgres_db}"
        )


settings = Settings()
