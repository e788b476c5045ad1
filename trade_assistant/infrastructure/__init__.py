"""
Infrastructure layer package.

Contains concrete implementations (adapters) of the ports
defined in the domain layer: the exchange REST API, the Aptos
chain, and the trade history database.
"""
