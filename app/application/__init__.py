"""
Application layer package.

Use cases that turn API commands and queries into calls on the
settlement engine and the ledger store. Depends on domain ports,
never on infrastructure.
"""
