"""Shared fixtures for the trading tests."""

import os
from decimal import Decimal

# Settings are read at import time; keep tests off any real custody key.
os.environ["BACKEND_WALLET_PRIVATE_KEY"] = ""
os.environ.setdefault("DATABASE_URL", "sqlite://")

import pytest

from trade_assistant.domain.trading.entities import (
    Market,
    MarketPrice,
    Subaccount,
)

PACKAGE = "0x1f513904b7568445e3c291a6c58cb272db017d8a72aea563d5664666221d5f75"
OWNER = "0xowner"
SUBACCOUNT = "0xsub1"
BACKEND = "0xbackend"
BTC_ADDRESS = "0xbtcmarket"


@pytest.fixture
def btc_market() -> Market:
    """BTC/USD with 2 price decimals, tick 0.50, min size 0.001."""
    return Market(
        address=BTC_ADDRESS,
        name="BTC/USD",
        price_decimals=2,
        size_decimals=4,
        tick_size=50,
        min_size=10,
        max_leverage=40,
    )


@pytest.fixture
def btc_price() -> MarketPrice:
    return MarketPrice(market_address=BTC_ADDRESS, mark_price=Decimal("64000.12"))


@pytest.fixture
def primary_subaccount() -> Subaccount:
    return Subaccount(address=SUBACCOUNT, owner_address=OWNER, is_primary=True)
