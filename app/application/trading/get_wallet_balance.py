"""
Use case: Show a wallet's fiat balance and crypto holdings.

Input: owner_id
Output: WalletBalanceResult
Side effects: None (read-only query).
Failure cases: WalletNotFoundError.
"""

from app.application.trading.dtos import HoldingResult, WalletBalanceResult
from app.domain.trading.errors import WalletNotFoundError
from app.domain.trading.ports import LedgerStore


class GetWalletBalanceUseCase:
    """Reads the caller's balances without locking."""

    def __init__(self, ledger: LedgerStore) -> None:
        self._ledger = ledger

    def execute(self, owner_id: str) -> WalletBalanceResult:
        """Return the fiat balance and holdings ordered by symbol.

        Raises:
            WalletNotFoundError: If the owner has no wallet.
        """
        wallet = self._ledger.get_wallet(owner_id)
        if wallet is None:
            raise WalletNotFoundError(owner_id)
        holdings = self._ledger.list_holdings(wallet.id)
        return WalletBalanceResult(
            fiat_balance=wallet.fiat_balance,
            holdings=[HoldingResult(symbol=h.symbol, amount=h.amount) for h in holdings],
        )
