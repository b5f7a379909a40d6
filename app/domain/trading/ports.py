"""
Port interfaces (ABCs) for the trading bounded context.

Ports define the contracts that the domain requires from the outside world.
Infrastructure adapters implement these interfaces.
The domain layer never depends on concrete implementations.
"""

from abc import ABC, abstractmethod
from decimal import Decimal
from typing import Callable, Optional, TypeVar

from app.domain.trading.entities import (
    Holding,
    Trade,
    TradeSide,
    TradeStatus,
    Transaction,
    TransactionKind,
    Wallet,
)

T = TypeVar("T")


class LedgerSession(ABC):
    """Transactional handle passed to a unit of work.

    Every read through this handle takes a row lock that is held until
    the unit of work commits or rolls back. Callers lock the wallet
    before any holding of that wallet.
    """

    @abstractmethod
    def lock_wallet(self, owner_id: str) -> Optional[Wallet]:
        """Lock and return the owner's wallet, or None if it does not exist."""
        raise NotImplementedError

    @abstractmethod
    def lock_holding(self, wallet: Wallet, symbol: str) -> Optional[Holding]:
        """Lock and return the wallet's holding of a symbol, or None."""
        raise NotImplementedError

    @abstractmethod
    def lock_or_create_holding(self, wallet: Wallet, symbol: str) -> Holding:
        """Lock the wallet's holding of a symbol, creating it at zero if absent."""
        raise NotImplementedError

    @abstractmethod
    def update_fiat_balance(self, wallet: Wallet, new_balance: Decimal) -> None:
        """Set the wallet's fiat balance."""
        raise NotImplementedError

    @abstractmethod
    def update_holding_amount(self, holding: Holding, new_amount: Decimal) -> None:
        """Set the holding's crypto amount."""
        raise NotImplementedError

    @abstractmethod
    def add_trade(
        self,
        owner_id: str,
        side: TradeSide,
        symbol: str,
        crypto_amount: Decimal,
        fiat_amount: Decimal,
        rate: Decimal,
        fee: Decimal,
        status: TradeStatus = TradeStatus.COMPLETED,
    ) -> Trade:
        """Append a trade record and return it with its assigned id."""
        raise NotImplementedError

    @abstractmethod
    def add_transaction(
        self,
        owner_id: str,
        kind: TransactionKind,
        amount: Decimal,
        previous_balance: Decimal,
        new_balance: Decimal,
        description: Optional[str] = None,
    ) -> Transaction:
        """Append a ledger entry and return it with its assigned id."""
        raise NotImplementedError


class LedgerStore(ABC):
    """Port for durable wallet, holding, trade and transaction state."""

    @abstractmethod
    def atomic(self, work: Callable[[LedgerSession], T]) -> T:
        """Run a unit of work as a single all-or-nothing transaction.

        Args:
            work: Callable receiving the transactional handle.

        Returns:
            Whatever ``work`` returns, after the commit succeeded.

        Raises:
            LedgerError: If the store fails. Nothing is persisted.
            Any exception raised by ``work`` is re-raised after rollback.
        """
        raise NotImplementedError

    @abstractmethod
    def open_wallet(self, owner_id: str) -> Wallet:
        """Return the owner's wallet, creating an empty one if needed."""
        raise NotImplementedError

    @abstractmethod
    def get_wallet(self, owner_id: str) -> Optional[Wallet]:
        """Return the owner's wallet without locking, or None."""
        raise NotImplementedError

    @abstractmethod
    def list_holdings(self, wallet_id: int) -> list[Holding]:
        """Return the wallet's holdings ordered by symbol."""
        raise NotImplementedError

    @abstractmethod
    def list_trades(
        self,
        owner_id: str,
        symbol: Optional[str] = None,
        side: Optional[TradeSide] = None,
        offset: int = 0,
        limit: int = 20,
    ) -> tuple[list[Trade], int]:
        """Return one page of the owner's trades, newest first.

        Args:
            owner_id: Only trades of this owner are considered.
            symbol: Optional filter by crypto symbol.
            side: Optional filter by buy/sell.
            offset: Number of matching trades to skip.
            limit: Maximum number of trades to return.

        Returns:
            Tuple of (page of trades, total number of matching trades).
        """
        raise NotImplementedError

    @abstractmethod
    def list_transactions(
        self, owner_id: str, offset: int = 0, limit: int = 20
    ) -> tuple[list[Transaction], int]:
        """Return one page of the owner's ledger entries, newest first."""
        raise NotImplementedError


class RateProvider(ABC):
    """Port for obtaining the current fiat price of a crypto asset."""

    @abstractmethod
    def get_rate(self, symbol: str) -> Optional[Decimal]:
        """Return the fiat price per unit of ``symbol``.

        The value may be served from a cache and be slightly stale.

        Returns:
            The rate, or None when no price is currently available.
        """
        raise NotImplementedError


class RateCache(ABC):
    """Port for a key-value store with per-entry expiry."""

    @abstractmethod
    def get(self, key: str) -> Optional[Decimal]:
        """Return the cached value, or None if missing or expired."""
        raise NotImplementedError

    @abstractmethod
    def set(self, key: str, value: Decimal, ttl_seconds: int) -> None:
        """Store a value that expires after ``ttl_seconds``."""
        raise NotImplementedError


class Authenticator(ABC):
    """Port resolving a bearer credential to a user id."""

    @abstractmethod
    def authenticate(self, token: str) -> str:
        """Return the user id the token belongs to.

        Raises:
            AuthenticationError: If the token is malformed or not genuine.
        """
        raise NotImplementedError
