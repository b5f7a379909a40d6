"""
Adapter: In-memory ledger store.

Implements the LedgerStore and LedgerSession ports without a database.
Selected with DATABASE_URL=memory:// for single-process development,
and used by the tests.

Each wallet has its own lock, held for the whole unit of work. Changes
are staged on the session and published only after ``work`` returns, so
a failing unit of work leaves no trace.
"""

import itertools
import logging
import threading
from dataclasses import replace
from datetime import datetime, timezone
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
from app.domain.trading.ports import LedgerSession, LedgerStore

logger = logging.getLogger(__name__)

T = TypeVar("T")


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class _MemorySession(LedgerSession):
    """Staging area for one unit of work."""

    def __init__(self, store: "InMemoryLedgerStore") -> None:
        self._store = store
        self._held_locks: list[threading.Lock] = []
        self.wallets: dict[int, Wallet] = {}
        self.holdings: dict[tuple[int, str], Holding] = {}
        self.trades: list[Trade] = []
        self.transactions: list[Transaction] = []

    def release(self) -> None:
        for lock in reversed(self._held_locks):
            lock.release()
        self._held_locks.clear()

    def lock_wallet(self, owner_id: str) -> Optional[Wallet]:
        wallet_id = self._store._wallet_ids.get(owner_id)
        if wallet_id is None:
            return None
        if wallet_id not in self.wallets:
            lock = self._store._lock_for(wallet_id)
            lock.acquire()
            self._held_locks.append(lock)
            self.wallets[wallet_id] = replace(self._store._wallets[wallet_id])
        return self.wallets[wallet_id]

    def _require_locked(self, wallet: Wallet) -> None:
        if wallet.id not in self.wallets:
            raise RuntimeError("wallet must be locked before its holdings")

    def lock_holding(self, wallet: Wallet, symbol: str) -> Optional[Holding]:
        self._require_locked(wallet)
        key = (wallet.id, symbol)
        if key not in self.holdings:
            current = self._store._holdings.get(key)
            if current is None:
                return None
            self.holdings[key] = replace(current)
        return self.holdings[key]

    def lock_or_create_holding(self, wallet: Wallet, symbol: str) -> Holding:
        holding = self.lock_holding(wallet, symbol)
        if holding is None:
            holding = Holding(
                id=self._store._next_id("holding"),
                wallet_id=wallet.id,
                symbol=symbol,
                amount=Decimal("0"),
            )
            self.holdings[(wallet.id, symbol)] = holding
        return holding

    def update_fiat_balance(self, wallet: Wallet, new_balance: Decimal) -> None:
        self._require_locked(wallet)
        self.wallets[wallet.id].fiat_balance = new_balance
        wallet.fiat_balance = new_balance

    def update_holding_amount(self, holding: Holding, new_amount: Decimal) -> None:
        staged = self.holdings[(holding.wallet_id, holding.symbol)]
        staged.amount = new_amount
        holding.amount = new_amount

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
        trade = Trade(
            id=self._store._next_id("trade"),
            owner_id=owner_id,
            side=side,
            symbol=symbol,
            crypto_amount=crypto_amount,
            fiat_amount=fiat_amount,
            rate=rate,
            fee=fee,
            status=status,
            created_at=utcnow(),
        )
        self.trades.append(trade)
        return trade

    def add_transaction(
        self,
        owner_id: str,
        kind: TransactionKind,
        amount: Decimal,
        previous_balance: Decimal,
        new_balance: Decimal,
        description: Optional[str] = None,
    ) -> Transaction:
        entry = Transaction(
            id=self._store._next_id("transaction"),
            owner_id=owner_id,
            kind=kind,
            amount=amount,
            previous_balance=previous_balance,
            new_balance=new_balance,
            description=description,
            created_at=utcnow(),
        )
        self.transactions.append(entry)
        return entry


class InMemoryLedgerStore(LedgerStore):
    """Thread-safe, process-local ledger store."""

    def __init__(self) -> None:
        self._wallets: dict[int, Wallet] = {}
        self._wallet_ids: dict[str, int] = {}
        self._holdings: dict[tuple[int, str], Holding] = {}
        self._trades: list[Trade] = []
        self._transactions: list[Transaction] = []
        self._wallet_locks: dict[int, threading.Lock] = {}
        # Guards the id counters, the lock registry and the append-only logs.
        self._registry_lock = threading.Lock()
        self._counters = {
            name: itertools.count(1)
            for name in ("wallet", "holding", "trade", "transaction")
        }

    def _next_id(self, name: str) -> int:
        with self._registry_lock:
            return next(self._counters[name])

    def _lock_for(self, wallet_id: int) -> threading.Lock:
        with self._registry_lock:
            return self._wallet_locks.setdefault(wallet_id, threading.Lock())

    def atomic(self, work: Callable[[LedgerSession], T]) -> T:
        session = _MemorySession(self)
        try:
            result = work(session)
            self._publish(session)
            return result
        finally:
            session.release()

    def _publish(self, session: _MemorySession) -> None:
        with self._registry_lock:
            for wallet_id, wallet in session.wallets.items():
                self._wallets[wallet_id] = replace(wallet)
            for key, holding in session.holdings.items():
                self._holdings[key] = replace(holding)
            self._trades.extend(session.trades)
            self._transactions.extend(session.transactions)

    def open_wallet(self, owner_id: str) -> Wallet:
        with self._registry_lock:
            wallet_id = self._wallet_ids.get(owner_id)
            if wallet_id is None:
                wallet_id = next(self._counters["wallet"])
                self._wallets[wallet_id] = Wallet(
                    id=wallet_id,
                    owner_id=owner_id,
                    fiat_balance=Decimal("0.00"),
                    created_at=utcnow(),
                )
                self._wallet_ids[owner_id] = wallet_id
                logger.info("Opened wallet id=%d for owner=%s", wallet_id, owner_id)
            return replace(self._wallets[wallet_id])

    def get_wallet(self, owner_id: str) -> Optional[Wallet]:
        with self._registry_lock:
            wallet_id = self._wallet_ids.get(owner_id)
            if wallet_id is None:
                return None
            return replace(self._wallets[wallet_id])

    def list_holdings(self, wallet_id: int) -> list[Holding]:
        with self._registry_lock:
            holdings = [
                replace(h) for (w_id, _), h in self._holdings.items() if w_id == wallet_id
            ]
        return sorted(holdings, key=lambda h: h.symbol)

    def list_trades(
        self,
        owner_id: str,
        symbol: Optional[str] = None,
        side: Optional[TradeSide] = None,
        offset: int = 0,
        limit: int = 20,
    ) -> tuple[list[Trade], int]:
        with self._registry_lock:
            matching = [
                t
                for t in self._trades
                if t.owner_id == owner_id
                and (not symbol or t.symbol == symbol)
                and (side is None or t.side is side)
            ]
        matching.sort(key=lambda t: (t.created_at, t.id), reverse=True)
        return matching[offset:offset + limit], len(matching)

    def list_transactions(
        self, owner_id: str, offset: int = 0, limit: int = 20
    ) -> tuple[list[Transaction], int]:
        with self._registry_lock:
            matching = [t for t in self._transactions if t.owner_id == owner_id]
        matching.sort(key=lambda t: (t.created_at, t.id), reverse=True)
        return matching[offset:offset + limit], len(matching)
