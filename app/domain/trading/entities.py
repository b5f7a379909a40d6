"""
Domain entities for the trading bounded context.

Entities represent core business objects with identity and lifecycle.
They contain no framework imports and no IO operations.
"""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from enum import Enum


class TradeSide(Enum):
    """Direction of an executed order."""

    BUY = "buy"
    SELL = "sell"


class TradeStatus(Enum):
    """Lifecycle state of a trade record."""

    PENDING = "pending"
    COMPLETED = "completed"
    FAILED = "failed"


class TransactionKind(Enum):
    """Kind of fiat balance change recorded in the ledger."""

    DEPOSIT = "deposit"
    WITHDRAWAL = "withdrawal"
    BUY_CRYPTO = "buy_crypto"
    SELL_CRYPTO = "sell_crypto"


@dataclass
class Wallet:
    """A user's custodial wallet holding their fiat balance.

    One wallet exists per owner. The balance is never negative.
    """

    id: int
    owner_id: str
    fiat_balance: Decimal
    created_at: datetime | None = None


@dataclass
class Holding:
    """Quantity of one crypto asset held by a wallet.

    Unique per (wallet_id, symbol). The amount is never negative.
    """

    id: int
    wallet_id: int
    symbol: str
    amount: Decimal


@dataclass(frozen=True)
class Trade:
    """Immutable record of one executed buy or sell order.

    Attributes:
        fiat_amount: Fee-adjusted fiat value. Total cost for a buy,
            net proceeds for a sell.
    """

    id: int
    owner_id: str
    side: TradeSide
    symbol: str
    crypto_amount: Decimal
    fiat_amount: Decimal
    rate: Decimal
    fee: Decimal
    status: TradeStatus
    created_at: datetime


@dataclass(frozen=True)
class Transaction:
    """Immutable ledger entry for a single fiat balance change."""

    id: int
    owner_id: str
    kind: TransactionKind
    amount: Decimal
    previous_balance: Decimal
    new_balance: Decimal
    description: str | None
    created_at: datetime
