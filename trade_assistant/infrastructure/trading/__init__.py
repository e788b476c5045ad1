"""
Infrastructure adapters for the trading bounded context.

Each adapter implements a domain port (ABC) and connects
to one external system: Decibel REST, an Aptos fullnode, or SQL.
"""
