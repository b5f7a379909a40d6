"""
Infrastructure layer package.

Contains concrete implementations (adapters) of the ports
defined in the domain layer: the SQL and in-memory ledgers,
the market-rate client, rate caches and token verification.
"""
