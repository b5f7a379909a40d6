"""
Use case: Top up a wallet's fiat balance.

Input: DepositFundsCommand (owner_id, amount)
Output: DepositResult
Side effects: Credits the fiat balance and appends a deposit entry.
Failure cases: BelowMinimumDepositError, WalletNotFoundError, LedgerError.
"""

from app.application.trading.dtos import DepositFundsCommand, DepositResult
from app.domain.trading.settlement import SettlementEngine


class DepositFundsUseCase:
    """Credits fiat funds using the settlement engine's locking discipline."""

    def __init__(self, engine: SettlementEngine) -> None:
        self._engine = engine

    def execute(self, command: DepositFundsCommand) -> DepositResult:
        receipt = self._engine.deposit(
            owner_id=command.owner_id, amount=command.amount
        )
        return DepositResult(
            transaction_id=receipt.transaction_id,
            amount=receipt.amount,
            previous_balance=receipt.previous_balance,
            new_balance=receipt.new_balance,
            timestamp=receipt.timestamp,
        )
