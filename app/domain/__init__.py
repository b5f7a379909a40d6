"""
Domain layer package.

Wallets, holdings, trades and ledger entries, the money rules
that govern them, and the ports the domain needs.
No framework imports, no IO.
"""
