"""
Test doubles and seeding helpers shared across test modules.
"""

from decimal import Decimal
from typing import Optional

from app.domain.trading.ports import LedgerStore, RateProvider


class StubRateProvider(RateProvider):
    """Serves rates from a dict and records every lookup."""

    def __init__(
        self,
        rates: Optional[dict[str, Decimal]] = None,
        error: Optional[Exception] = None,
    ) -> None:
        self.rates = dict(rates or {})
        self.error = error
        self.calls: list[str] = []

    def get_rate(self, symbol: str) -> Optional[Decimal]:
        self.calls.append(symbol)
        if self.error is not None:
            raise self.error
        return self.rates.get(symbol)


def seed_holding(
    ledger: LedgerStore, owner_id: str, symbol: str, amount: Decimal
) -> None:
    """Give ``owner_id`` a holding without going through a trade."""
    ledger.open_wallet(owner_id)

    def work(session):
        wallet = session.lock_wallet(owner_id)
        holding = session.lock_or_create_holding(wallet, symbol)
        session.update_holding_amount(holding, amount)

    ledger.atomic(work)
