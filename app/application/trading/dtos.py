"""
Data Transfer Objects for the trading application layer.

DTOs carry data between the interface and application layers.
They are plain dataclasses with no behavior.
"""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Optional, Union


@dataclass(frozen=True)
class PlaceOrderCommand:
    """Input DTO for a buy or sell order.

    Attributes:
        owner_id: Authenticated user placing the order.
        symbol: Crypto symbol, case-insensitive.
        amount: Requested crypto amount, as received; parsed by the engine.
    """

    owner_id: str
    symbol: str
    amount: Union[Decimal, str]


@dataclass(frozen=True)
class TradeReceiptResult:
    """Output DTO for a settled buy or sell order.

    Attributes:
        gross: Subtotal (buy) or gross proceeds (sell), before fees.
        total: Total cost (buy) or net proceeds (sell), after fees.
        new_balance: Fiat balance after settlement.
    """

    trade_id: int
    side: str
    symbol: str
    crypto_amount: Decimal
    rate: Decimal
    gross: Decimal
    fee: Decimal
    fee_percent: Decimal
    total: Decimal
    timestamp: datetime
    new_balance: Decimal


@dataclass(frozen=True)
class DepositFundsCommand:
    """Input DTO for a fiat top-up."""

    owner_id: str
    amount: Decimal


@dataclass(frozen=True)
class DepositResult:
    """Output DTO for a fiat top-up."""

    transaction_id: int
    amount: Decimal
    previous_balance: Decimal
    new_balance: Decimal
    timestamp: datetime


@dataclass(frozen=True)
class GetTradeHistoryQuery:
    """Input DTO for paginated trade history.

    Attributes:
        owner_id: Only this user's trades are returned.
        page: 1-based page number.
        per_page: Requested page size, clamped to the configured maximum.
        symbol: Optional crypto symbol filter.
        side: Optional "buy"/"sell" filter.
    """

    owner_id: str
    page: int = 1
    per_page: int = 20
    symbol: Optional[str] = None
    side: Optional[str] = None


@dataclass(frozen=True)
class GetTransactionHistoryQuery:
    """Input DTO for paginated ledger entries."""

    owner_id: str
    page: int = 1
    per_page: int = 20


@dataclass(frozen=True)
class PaginationResult:
    """Page metadata for list queries."""

    total: int
    per_page: int
    current_page: int
    last_page: int


@dataclass(frozen=True)
class TradeResult:
    """Output DTO for one trade in a history listing."""

    id: int
    side: str
    symbol: str
    crypto_amount: Decimal
    fiat_amount: Decimal
    rate: Decimal
    fee: Decimal
    status: str
    created_at: datetime


@dataclass(frozen=True)
class TradeHistoryResult:
    """Output DTO for one page of trade history."""

    trades: list[TradeResult]
    pagination: PaginationResult


@dataclass(frozen=True)
class TransactionResult:
    """Output DTO for one ledger entry."""

    id: int
    kind: str
    amount: Decimal
    previous_balance: Decimal
    new_balance: Decimal
    description: Optional[str]
    created_at: datetime


@dataclass(frozen=True)
class TransactionHistoryResult:
    """Output DTO for one page of ledger entries."""

    transactions: list[TransactionResult]
    pagination: PaginationResult


@dataclass(frozen=True)
class HoldingResult:
    """Output DTO for one crypto holding."""

    symbol: str
    amount: Decimal


@dataclass(frozen=True)
class WalletBalanceResult:
    """Output DTO for a wallet's balances."""

    fiat_balance: Decimal
    holdings: list[HoldingResult]


@dataclass(frozen=True)
class RateResult:
    """Output DTO for one asset's current rate.

    Attributes:
        rate_ngn: NGN price per unit, or None if unavailable.
        rate_usd: USD price derived from rate_ngn, or None.
    """

    symbol: str
    rate_ngn: Optional[Decimal]
    rate_usd: Optional[Decimal]


@dataclass(frozen=True)
class RatesResult:
    """Output DTO for the rates listing."""

    rates: list[RateResult]
    timestamp: datetime
