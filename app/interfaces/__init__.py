"""
Interfaces layer package.

HTTP surface of the ledger: FastAPI routers for trades, wallets
and health, plus the Pydantic request/response schemas.
Routes call use cases and return responses.
"""
