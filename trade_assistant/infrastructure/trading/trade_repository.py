"""
Adapter: Trade history repository.

Implements TradeRepository port with SQLAlchemy Core.
Works against PostgreSQL in deployment and SQLite in tests; the
``trades`` table is created on first use, so constructing the adapter
never touches the database.
"""

import logging

from sqlalchemy import (
    Column,
    DateTime,
    Integer,
    MetaData,
    Numeric,
    String,
    Table,
    select,
)
from sqlalchemy.engine import Engine

from trade_assistant.domain.trading.entities import OrderType, TradeRecord
from trade_assistant.domain.trading.ports import TradeRepository

logger = logging.getLogger(__name__)

metadata = MetaData()

trades = Table(
    "trades",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("owner_address", String(66), nullable=False, index=True),
    Column("market_name", String(64), nullable=False),
    Column("side", String(4), nullable=False),
    Column("size", Numeric(38, 18), nullable=False),
    Column("price", Numeric(38, 18), nullable=False),
    Column("order_type", String(16), nullable=False),
    Column("status", String(16), nullable=False),
    Column("transaction_hash", String(66), nullable=False),
    Column("client_order_id", String(64)),
    Column("created_at", DateTime(timezone=True), nullable=False, index=True),
)


class TradeRepositoryAdapter(TradeRepository):
    """SQL implementation of the trade history repository.

    Args:
        engine: SQLAlchemy engine bound to the trades database.
    """

    def __init__(self, engine: Engine) -> None:
        self._engine = engine
        self._schema_ready = False

    def _ensure_schema(self) -> None:
        if self._schema_ready:
            return
        metadata.create_all(self._engine)
        self._schema_ready = True
        logger.info("Trade table ready on %s", self._engine.url.get_backend_name())

    def save(self, trade: TradeRecord) -> None:
        """Persist a single trade record.

        Args:
            trade: The executed trade to save.
        """
        self._ensure_schema()
        with self._engine.begin() as conn:
            conn.execute(
                trades.insert().values(
                    owner_address=trade.owner_address.lower(),
                    market_name=trade.market_name,
                    side=trade.side,
                    size=trade.size,
                    price=trade.price,
                    order_type=trade.order_type.value,
                    status=trade.status,
                    transaction_hash=trade.transaction_hash,
                    client_order_id=trade.client_order_id,
                    created_at=trade.created_at,
                )
            )

    def get_recent(self, owner_address: str, limit: int = 20) -> list[TradeRecord]:
        """Return an owner's most recent trades, newest first.

        Args:
            owner_address: Wallet address that placed the trades.
            limit: Maximum number of rows to return.
        """
        self._ensure_schema()
        query = (
            select(trades)
            .where(trades.c.owner_address == owner_address.lower())
            .order_by(trades.c.created_at.desc(), trades.c.id.desc())
            .limit(limit)
        )
        with self._engine.connect() as conn:
            rows = conn.execute(query).mappings().all()

        return [
            TradeRecord(
                owner_address=row["owner_address"],
                market_name=row["market_name"],
                side=row["side"],
                size=row["size"],
                price=row["price"],
                order_type=OrderType(row["order_type"]),
                transaction_hash=row["transaction_hash"],
                status=row["status"],
                client_order_id=row["client_order_id"],
                created_at=row["created_at"],
            )
            for row in rows
        ]
