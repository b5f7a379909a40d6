"""
Domain service: Trade pricing.

Turns a validated order and a market rate into a fee-adjusted quote.
Holds the trading policy (supported assets, minimums, fee percents).

No framework imports. No IO. No side effects.
"""

from dataclasses import dataclass, field
from decimal import Decimal

from app.domain.trading.entities import TradeSide
from app.domain.trading.money import to_fiat

HUNDRED = Decimal("100")

DEFAULT_SUPPORTED_ASSETS = ("BTC", "ETH", "USDT")


def _default_minimums() -> dict[str, Decimal]:
    return {
        "BTC": Decimal("0.0001"),
        "ETH": Decimal("0.001"),
        "USDT": Decimal("1"),
    }


@dataclass(frozen=True)
class TradingPolicy:
    """Economic parameters the settlement engine enforces.

    Attributes:
        supported_assets: Upper-case symbols that may be traded.
        minimum_crypto_amounts: Smallest tradable amount per symbol.
        buy_fee_percent: Fee added on top of the gross value of a buy.
        sell_fee_percent: Fee subtracted from the gross value of a sell.
        minimum_transaction_amount: Smallest fee-adjusted fiat value per order.
        minimum_deposit_amount: Smallest fiat top-up.
    """

    supported_assets: tuple[str, ...] = DEFAULT_SUPPORTED_ASSETS
    minimum_crypto_amounts: dict[str, Decimal] = field(
        default_factory=_default_minimums
    )
    buy_fee_percent: Decimal = Decimal("2.0")
    sell_fee_percent: Decimal = Decimal("2.0")
    minimum_transaction_amount: Decimal = Decimal("5000")
    minimum_deposit_amount: Decimal = Decimal("100")

    def is_supported(self, symbol: str) -> bool:
        return symbol in self.supported_assets

    def minimum_amount_for(self, symbol: str) -> Decimal:
        """Return the minimum crypto amount for a supported symbol."""
        return self.minimum_crypto_amounts.get(symbol, Decimal("0"))

    def fee_percent_for(self, side: TradeSide) -> Decimal:
        if side is TradeSide.BUY:
            return self.buy_fee_percent
        return self.sell_fee_percent


@dataclass(frozen=True)
class TradeQuote:
    """Fee-adjusted price of an order at a given rate.

    Attributes:
        gross: amount x rate, before fees.
        fee: gross x fee_percent / 100.
        total: gross + fee for a buy (cost), gross - fee for a sell (proceeds).
    """

    side: TradeSide
    symbol: str
    crypto_amount: Decimal
    rate: Decimal
    gross: Decimal
    fee: Decimal
    fee_percent: Decimal
    total: Decimal


def quote_trade(
    side: TradeSide,
    symbol: str,
    crypto_amount: Decimal,
    rate: Decimal,
    fee_percent: Decimal,
) -> TradeQuote:
    """Price an order.

    Gross value and fee are each rounded half up to the fiat scale
    before the total is formed, so gross +/- fee == total exactly.
    """
    gross = to_fiat(crypto_amount * rate)
    fee = to_fiat(gross * fee_percent / HUNDRED)
    if side is TradeSide.BUY:
        total = gross + fee
    else:
        total = gross - fee
    return TradeQuote(
        side=side,
        symbol=symbol,
        crypto_amount=crypto_amount,
        rate=rate,
        gross=gross,
        fee=fee,
        fee_percent=fee_percent,
        total=total,
    )
