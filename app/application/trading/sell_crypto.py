"""
Use case: Sell a crypto asset for fiat.

Input: PlaceOrderCommand (owner_id, symbol, amount)
Output: TradeReceiptResult
Side effects: Debits the holding, credits the fiat balance, appends a
    trade and a ledger entry, all in one unit of work.
Failure cases: UnsupportedAssetError, BelowMinimumAmountError,
    RateUnavailableError, BelowMinimumTransactionError,
    InsufficientHoldingsError, WalletNotFoundError, LedgerError.
"""

import logging

from app.application.trading.dtos import PlaceOrderCommand, TradeReceiptResult
from app.application.trading.mappers import to_receipt_result
from app.domain.trading.settlement import SettlementEngine

logger = logging.getLogger(__name__)


class SellCryptoUseCase:
    """Orchestrates a crypto sale through the settlement engine."""

    def __init__(self, engine: SettlementEngine) -> None:
        self._engine = engine

    def execute(self, command: PlaceOrderCommand) -> TradeReceiptResult:
        """Run the sell use case."""
        logger.info(
            "Sell requested: owner=%s symbol=%s amount=%s",
            command.owner_id,
            command.symbol,
            command.amount,
        )
        receipt = self._engine.sell(
            owner_id=command.owner_id,
            symbol=command.symbol,
            amount=command.amount,
        )
        return to_receipt_result(receipt)
