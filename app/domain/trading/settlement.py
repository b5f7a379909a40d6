"""
Domain service: Trade settlement.

Validates buy/sell orders and applies them to the ledger as a single
all-or-nothing unit of work. Deposits share the same discipline.

Validation order (first failure wins):
    1. symbol is supported
    2. amount is a number >= the per-symbol minimum
    3. a current rate is available
    4. fee-adjusted fiat value >= the minimum transaction amount
    5. buy: wallet balance covers the total cost
       sell: holding covers the requested amount

Steps 1-4 run before the ledger is touched. Step 5 runs inside the
unit of work, once the wallet (then holding) row locks are held.
The rate lookup never happens while a lock is held.
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal

from app.domain.trading.entities import (
    Trade,
    TradeSide,
    TransactionKind,
    Wallet,
)
from app.domain.trading.errors import (
    BelowMinimumAmountError,
    BelowMinimumDepositError,
    BelowMinimumTransactionError,
    InsufficientFundsError,
    InsufficientHoldingsError,
    RateUnavailableError,
    UnsupportedAssetError,
    WalletNotFoundError,
)
from app.domain.trading.money import to_crypto, to_decimal, to_fiat, to_rate
from app.domain.trading.ports import LedgerSession, LedgerStore, RateProvider
from app.domain.trading.pricing import TradeQuote, TradingPolicy, quote_trade

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SettlementReceipt:
    """Outcome of a settled order, with the post-trade fiat balance."""

    trade_id: int
    side: TradeSide
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
class DepositReceipt:
    """Outcome of a fiat top-up."""

    transaction_id: int
    amount: Decimal
    previous_balance: Decimal
    new_balance: Decimal
    timestamp: datetime


class SettlementEngine:
    """Executes buy, sell and deposit operations against the ledger.

    Depends only on ports. Per-wallet serialization is delegated to the
    ledger store's unit of work.
    """

    def __init__(
        self,
        ledger: LedgerStore,
        rate_provider: RateProvider,
        policy: TradingPolicy | None = None,
    ) -> None:
        """Initialize the engine.

        Args:
            ledger: Store providing atomic, row-locked units of work.
            rate_provider: Source of current fiat prices.
            policy: Fees and minimums. Defaults to the platform defaults.
        """
        self._ledger = ledger
        self._rates = rate_provider
        self._policy = policy or TradingPolicy()

    @property
    def policy(self) -> TradingPolicy:
        return self._policy

    # ------------------------------------------------------------------
    # Orders
    # ------------------------------------------------------------------

    def buy(self, owner_id: str, symbol: str, amount: object) -> SettlementReceipt:
        """Buy crypto with fiat.

        Raises:
            UnsupportedAssetError, BelowMinimumAmountError,
            RateUnavailableError, BelowMinimumTransactionError,
            InsufficientFundsError, WalletNotFoundError, LedgerError.
        """
        quote = self._prepare(owner_id, TradeSide.BUY, symbol, amount)

        def settle(session: LedgerSession) -> Trade:
            wallet = self._lock_wallet(session, owner_id)
            if wallet.fiat_balance < quote.total:
                raise InsufficientFundsError(
                    required=quote.total, available=wallet.fiat_balance
                )
            previous_balance = wallet.fiat_balance
            new_balance = to_fiat(previous_balance - quote.total)
            session.update_fiat_balance(wallet, new_balance)

            holding = session.lock_or_create_holding(wallet, quote.symbol)
            session.update_holding_amount(
                holding, to_crypto(holding.amount + quote.crypto_amount)
            )

            trade = session.add_trade(
                owner_id=owner_id,
                side=TradeSide.BUY,
                symbol=quote.symbol,
                crypto_amount=quote.crypto_amount,
                fiat_amount=quote.total,
                rate=quote.rate,
                fee=quote.fee,
            )
            session.add_transaction(
                owner_id=owner_id,
                kind=TransactionKind.BUY_CRYPTO,
                amount=quote.total,
                previous_balance=previous_balance,
                new_balance=new_balance,
                description=f"Bought {quote.crypto_amount} {quote.symbol}",
            )
            return trade

        trade = self._ledger.atomic(settle)
        logger.info(
            "Settled buy: trade_id=%d owner=%s symbol=%s amount=%s total=%s",
            trade.id,
            owner_id,
            quote.symbol,
            quote.crypto_amount,
            quote.total,
        )
        return self._receipt(owner_id, trade, quote)

    def sell(self, owner_id: str, symbol: str, amount: object) -> SettlementReceipt:
        """Sell crypto for fiat.

        Raises:
            UnsupportedAssetError, BelowMinimumAmountError,
            RateUnavailableError, BelowMinimumTransactionError,
            InsufficientHoldingsError, WalletNotFoundError, LedgerError.
        """
        quote = self._prepare(owner_id, TradeSide.SELL, symbol, amount)

        def settle(session: LedgerSession) -> Trade:
            wallet = self._lock_wallet(session, owner_id)
            holding = session.lock_holding(wallet, quote.symbol)
            available = holding.amount if holding is not None else Decimal("0")
            if holding is None or holding.amount < quote.crypto_amount:
                raise InsufficientHoldingsError(
                    symbol=quote.symbol,
                    required=quote.crypto_amount,
                    available=available,
                )
            session.update_holding_amount(
                holding, to_crypto(holding.amount - quote.crypto_amount)
            )

            previous_balance = wallet.fiat_balance
            new_balance = to_fiat(previous_balance + quote.total)
            session.update_fiat_balance(wallet, new_balance)

            trade = session.add_trade(
                owner_id=owner_id,
                side=TradeSide.SELL,
                symbol=quote.symbol,
                crypto_amount=quote.crypto_amount,
                fiat_amount=quote.total,
                rate=quote.rate,
                fee=quote.fee,
            )
            session.add_transaction(
                owner_id=owner_id,
                kind=TransactionKind.SELL_CRYPTO,
                amount=quote.total,
                previous_balance=previous_balance,
                new_balance=new_balance,
                description=f"Sold {quote.crypto_amount} {quote.symbol}",
            )
            return trade

        trade = self._ledger.atomic(settle)
        logger.info(
            "Settled sell: trade_id=%d owner=%s symbol=%s amount=%s total=%s",
            trade.id,
            owner_id,
            quote.symbol,
            quote.crypto_amount,
            quote.total,
        )
        return self._receipt(owner_id, trade, quote)

    # ------------------------------------------------------------------
    # Deposits
    # ------------------------------------------------------------------

    def deposit(self, owner_id: str, amount: object) -> DepositReceipt:
        """Credit the owner's fiat balance.

        Raises:
            BelowMinimumDepositError, WalletNotFoundError, LedgerError.
        """
        minimum = self._policy.minimum_deposit_amount
        parsed = to_decimal(amount)
        if parsed is None or parsed < minimum:
            raise BelowMinimumDepositError(minimum)
        credit = to_fiat(parsed)

        def settle(session: LedgerSession) -> DepositReceipt:
            wallet = self._lock_wallet(session, owner_id)
            previous_balance = wallet.fiat_balance
            new_balance = to_fiat(previous_balance + credit)
            session.update_fiat_balance(wallet, new_balance)
            entry = session.add_transaction(
                owner_id=owner_id,
                kind=TransactionKind.DEPOSIT,
                amount=credit,
                previous_balance=previous_balance,
                new_balance=new_balance,
                description="Deposit",
            )
            return DepositReceipt(
                transaction_id=entry.id,
                amount=credit,
                previous_balance=previous_balance,
                new_balance=new_balance,
                timestamp=entry.created_at,
            )

        receipt = self._ledger.atomic(settle)
        logger.info("Deposited %s for owner=%s", credit, owner_id)
        return receipt

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _prepare(
        self, owner_id: str, side: TradeSide, symbol: str, amount: object
    ) -> TradeQuote:
        """Run validation steps 1-4 and return the priced order."""
        normalized = (symbol or "").strip().upper()
        if not self._policy.is_supported(normalized):
            raise UnsupportedAssetError(normalized, self._policy.supported_assets)

        minimum = self._policy.minimum_amount_for(normalized)
        parsed = to_decimal(amount)
        if parsed is None or parsed <= 0 or parsed < minimum:
            raise BelowMinimumAmountError(normalized, minimum)
        crypto_amount = to_crypto(parsed)

        rate = self._fetch_rate(normalized)

        quote = quote_trade(
            side=side,
            symbol=normalized,
            crypto_amount=crypto_amount,
            rate=rate,
            fee_percent=self._policy.fee_percent_for(side),
        )
        if quote.total < self._policy.minimum_transaction_amount:
            raise BelowMinimumTransactionError(
                quote.total, self._policy.minimum_transaction_amount
            )

        logger.debug(
            "Prepared %s order for owner=%s: %s %s at %s",
            side.value,
            owner_id,
            crypto_amount,
            normalized,
            rate,
        )
        return quote

    def _fetch_rate(self, symbol: str) -> Decimal:
        try:
            rate = self._rates.get_rate(symbol)
        except Exception as exc:
            logger.exception("Rate provider failed for %s", symbol)
            raise RateUnavailableError(symbol) from exc
        if rate is None or rate <= 0:
            logger.warning("No rate available for %s", symbol)
            raise RateUnavailableError(symbol)
        return to_rate(rate)

    @staticmethod
    def _lock_wallet(session: LedgerSession, owner_id: str) -> Wallet:
        wallet = session.lock_wallet(owner_id)
        if wallet is None:
            raise WalletNotFoundError(owner_id)
        return wallet

    def _receipt(
        self, owner_id: str, trade: Trade, quote: TradeQuote
    ) -> SettlementReceipt:
        # Re-read after commit; other operations may have landed since.
        wallet = self._ledger.get_wallet(owner_id)
        if wallet is None:
            raise WalletNotFoundError(owner_id)
        return SettlementReceipt(
            trade_id=trade.id,
            side=trade.side,
            symbol=trade.symbol,
            crypto_amount=trade.crypto_amount,
            rate=trade.rate,
            gross=quote.gross,
            fee=quote.fee,
            fee_percent=quote.fee_percent,
            total=quote.total,
            timestamp=trade.created_at,
            new_balance=wallet.fiat_balance,
        )
