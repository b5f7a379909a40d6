"""
Use case: Buy a crypto asset with fiat.

Input: PlaceOrderCommand (owner_id, symbol, amount)
Output: TradeReceiptResult
Side effects: Debits the fiat balance, credits the holding, appends a
    trade and a ledger entry, all in one unit of work.
Failure cases: UnsupportedAssetError, BelowMinimumAmountError,
    RateUnavailableError, BelowMinimumTransactionError,
    InsufficientFundsError, WalletNotFoundError, LedgerError.
"""

import logging

from app.application.trading.dtos import PlaceOrderCommand, TradeReceiptResult
from app.application.trading.mappers import to_receipt_result
from app.domain.trading.settlement import SettlementEngine

logger = logging.getLogger(__name__)


class BuyCryptoUseCase:
    """Orchestrates a crypto purchase through the settlement engine."""

    def __init__(self, engine: SettlementEngine) -> None:
        self._engine = engine

    def execute(self, command: PlaceOrderCommand) -> TradeReceiptResult:
        """Run the buy use case.

        Args:
            command: The order to place.

        Returns:
            The settlement receipt, including the post-trade balance.
        """
        logger.info(
            "Buy requested: owner=%s symbol=%s amount=%s",
            command.owner_id,
            command.symbol,
            command.amount,
        )
        receipt = self._engine.buy(
            owner_id=command.owner_id,
            symbol=command.symbol,
            amount=command.amount,
        )
        return to_receipt_result(receipt)
