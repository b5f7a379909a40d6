"""
Application layer for the trading bounded context.

One use case per operation: buy, sell, deposit, balance,
rates, trade history and ledger entries.
"""
