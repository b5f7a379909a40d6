"""
Mapping from domain objects to application DTOs.
"""

from app.application.trading.dtos import (
    TradeReceiptResult,
    TradeResult,
    TransactionResult,
)
from app.domain.trading.entities import Trade, Transaction
from app.domain.trading.settlement import SettlementReceipt


def to_receipt_result(receipt: SettlementReceipt) -> TradeReceiptResult:
    return TradeReceiptResult(
        trade_id=receipt.trade_id,
        side=receipt.side.value,
        symbol=receipt.symbol,
        crypto_amount=receipt.crypto_amount,
        rate=receipt.rate,
        gross=receipt.gross,
        fee=receipt.fee,
        fee_percent=receipt.fee_percent,
        total=receipt.total,
        timestamp=receipt.timestamp,
        new_balance=receipt.new_balance,
    )


def to_trade_result(trade: Trade) -> TradeResult:
    return TradeResult(
        id=trade.id,
        side=trade.side.value,
        symbol=trade.symbol,
        crypto_amount=trade.crypto_amount,
        fiat_amount=trade.fiat_amount,
        rate=trade.rate,
        fee=trade.fee,
        status=trade.status.value,
        created_at=trade.created_at,
    )


def to_transaction_result(entry: Transaction) -> TransactionResult:
    return TransactionResult(
        id=entry.id,
        kind=entry.kind.value,
        amount=entry.amount,
        previous_balance=entry.previous_balance,
        new_balance=entry.new_balance,
        description=entry.description,
        created_at=entry.created_at,
    )
