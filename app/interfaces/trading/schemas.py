"""
Pydantic schemas for trading API request/response validation.

These schemas enforce input validation and define the API contract.
All fields use strict typing with constraints.
No business logic belongs here.
"""

from datetime import datetime
from decimal import Decimal
from typing import Optional, Union

from pydantic import BaseModel, Field

SYMBOL_DESCRIPTION = "Crypto symbol (BTC, ETH or USDT), case-insensitive"
SYMBOL_MIN_LEN = 2
SYMBOL_MAX_LEN = 10
FIAT_DECIMAL_PLACES = 2


class HealthResponse(BaseModel):
    """Response schema for the health endpoint."""

    status: str
    service: str
    version: str
    timestamp: datetime


class ErrorResponse(BaseModel):
    """Error payload returned by the centralized error handlers."""

    success: bool = False
    error: str
    detail: Optional[str] = None


class OrderRequest(BaseModel):
    """Request schema for buy and sell endpoints.

    Attributes:
        crypto_symbol: Asset to trade.
        amount: Crypto amount; extra places beyond 8 are truncated.
    """

    crypto_symbol: str = Field(
        ...,
        min_length=SYMBOL_MIN_LEN,
        max_length=SYMBOL_MAX_LEN,
        description=SYMBOL_DESCRIPTION,
    )
    # Checked by the settlement engine after the symbol, not here.
    amount: Union[Decimal, str] = Field(..., description="Crypto amount to trade")


class BuyReceipt(BaseModel):
    """Settled purchase details."""

    trade_id: int
    type: str
    crypto: str
    crypto_amount: Decimal
    rate: Decimal
    subtotal: Decimal
    fee: Decimal
    total_cost: Decimal
    fee_percent: Decimal
    timestamp: datetime
    new_balance: Decimal


class BuyResponse(BaseModel):
    """Response schema for the buy endpoint."""

    success: bool = True
    message: str = "Purchase successful"
    data: BuyReceipt


class SellReceipt(BaseModel):
    """Settled sale details."""

    trade_id: int
    type: str
    crypto: str
    crypto_amount: Decimal
    rate: Decimal
    gross_proceeds: Decimal
    fee: Decimal
    net_proceeds: Decimal
    fee_percent: Decimal
    timestamp: datetime
    new_balance: Decimal


class SellResponse(BaseModel):
    """Response schema for the sell endpoint."""

    success: bool = True
    message: str = "Sale successful"
    data: SellReceipt


class RateItem(BaseModel):
    """Current price of one asset."""

    symbol: str
    rate_ngn: Optional[Decimal]
    rate_usd: Optional[Decimal]


class RatesResponse(BaseModel):
    """Response schema for the rates endpoint."""

    success: bool = True
    data: list[RateItem]
    timestamp: datetime


class PaginationSchema(BaseModel):
    """Page metadata."""

    total: int
    per_page: int
    current_page: int
    last_page: int


class TradeItem(BaseModel):
    """A single trade in the history listing."""

    id: int
    type: str
    crypto_symbol: str
    amount: Decimal
    fiat_amount: Decimal
    rate: Decimal
    fee: Decimal
    status: str
    created_at: datetime


class TradeHistoryResponse(BaseModel):
    """Response schema for the trade history endpoint."""

    success: bool = True
    data: list[TradeItem]
    pagination: PaginationSchema


class DepositRequest(BaseModel):
    """Request schema for the add-funds endpoint."""

    amount: Decimal = Field(
        ...,
        gt=0,
        decimal_places=FIAT_DECIMAL_PLACES,
        description="Fiat amount to deposit",
    )


class DepositResponse(BaseModel):
    """Response schema for the add-funds endpoint."""

    success: bool = True
    message: str = "Funds added successfully"
    balance: Decimal


class HoldingItem(BaseModel):
    """A single crypto holding."""

    symbol: str
    amount: Decimal


class WalletBalanceResponse(BaseModel):
    """Response schema for the balance endpoint."""

    success: bool = True
    fiat_balance: Decimal
    holdings: list[HoldingItem]


class TransactionItem(BaseModel):
    """A single ledger entry."""

    id: int
    type: str
    amount: Decimal
    previous_balance: Decimal
    new_balance: Decimal
    description: Optional[str]
    created_at: datetime


class TransactionHistoryResponse(BaseModel):
    """Response schema for the ledger entries endpoint."""

    success: bool = True
    data: list[TransactionItem]
    pagination: PaginationSchema
