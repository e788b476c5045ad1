"""
Trading bounded context: domain layer.

This module contains all domain logic for the trading context:
- Decimal to raw on-chain unit conversion
- Order normalization and payload assembly
- Trading delegation payload assembly
- Ports for market data, accounts, custody signing and trade history
"""
