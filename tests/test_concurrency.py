"""
Concurrency tests for the in-memory ledger store.

Many threads hit the same wallet at once. Whatever the interleaving,
balances never go negative and every committed change is accounted for.
"""

import threading
from concurrent.futures import ThreadPoolExecutor
from decimal import Decimal

import pytest

from app.domain.trading.errors import (
    InsufficientFundsError,
    InsufficientHoldingsError,
)

from tests.support import seed_holding

WORKERS = 16


class TestSameWalletContention:
    """Operations on one wallet are serialized."""

    def test_parallel_buys_spend_exactly_the_balance(self, ledger, engine, fund) -> None:
        """Parallel buys stop once the balance runs out."""
        fund("alice", "500000")

        def attempt(_):
            try:
                return engine.buy("alice", "BTC", Decimal("0.001"))
            except InsufficientFundsError:
                return None

        with ThreadPoolExecutor(max_workers=WORKERS) as pool:
            receipts = [r for r in pool.map(attempt, range(WORKERS)) if r]

        # 500000 covers five purchases of 96900.00.
        assert len(receipts) == 5
        wallet = ledger.get_wallet("alice")
        assert wallet.fiat_balance == Decimal("15500.00")
        (holding,) = ledger.list_holdings(wallet.id)
        assert holding.amount == Decimal("0.005")

    def test_parallel_sells_never_oversell(self, ledger, engine) -> None:
        """Parallel sells stop once the holding runs out."""
        seed_holding(ledger, "bob", "BTC", Decimal("0.3"))

        def attempt(_):
            try:
                engine.sell("bob", "BTC", Decimal("0.1"))
                return True
            except InsufficientHoldingsError:
                return False

        with ThreadPoolExecutor(max_workers=WORKERS) as pool:
            outcomes = list(pool.map(attempt, range(WORKERS)))

        assert outcomes.count(True) == 3
        wallet = ledger.get_wallet("bob")
        (holding,) = ledger.list_holdings(wallet.id)
        assert holding.amount == Decimal("0")
        assert wallet.fiat_balance == Decimal("27930000.00")

    def test_mixed_operations_conserve_value(self, ledger, engine, fund) -> None:
        """Final balance equals deposits minus committed buy costs."""
        fund("carol", "200000")
        deposits = []
        costs = []
        record = threading.Lock()

        def deposit(_):
            engine.deposit("carol", Decimal("1000"))
            with record:
                deposits.append(Decimal("1000.00"))

        def buy(_):
            try:
                receipt = engine.buy("carol", "ETH", Decimal("0.01"))
            except InsufficientFundsError:
                return
            with record:
                costs.append(receipt.total)

        with ThreadPoolExecutor(max_workers=WORKERS) as pool:
            futures = [pool.submit(deposit, i) for i in range(20)]
            futures += [pool.submit(buy, i) for i in range(20)]
            for future in futures:
                future.result()

        wallet = ledger.get_wallet("carol")
        expected = Decimal("200000.00") + sum(deposits) - sum(costs)
        assert wallet.fiat_balance == expected
        assert wallet.fiat_balance >= 0

        entries, total = ledger.list_transactions("carol")
        assert total == 1 + len(deposits) + len(costs)


class TestUnitOfWork:
    """Tests for InMemoryLedgerStore.atomic."""

    def test_failed_work_is_discarded_and_lock_released(self, ledger, fund) -> None:
        """A failing unit of work leaves no changes and frees the lock."""
        fund("alice", "1000")

        def work(session):
            wallet = session.lock_wallet("alice")
            session.update_fiat_balance(wallet, Decimal("1.00"))
            raise RuntimeError("abort")

        with pytest.raises(RuntimeError):
            ledger.atomic(work)

        assert ledger.get_wallet("alice").fiat_balance == Decimal("1000.00")
        # The wallet lock was released; a second unit of work proceeds.
        assert ledger.atomic(lambda s: s.lock_wallet("alice").fiat_balance) == Decimal(
            "1000.00"
        )

    def test_holding_requires_wallet_lock(self, ledger) -> None:
        """Locking a holding without its wallet lock is refused."""
        wallet = ledger.open_wallet("alice")

        with pytest.raises(RuntimeError):
            ledger.atomic(lambda s: s.lock_holding(wallet, "BTC"))

    def test_different_wallets_do_not_block(self, ledger, fund) -> None:
        """Work on one wallet does not wait for another."""
        fund("alice", "1000")
        fund("bob", "1000")
        inside = threading.Event()
        release = threading.Event()

        def slow(session):
            session.lock_wallet("alice")
            inside.set()
            release.wait(timeout=5)

        worker = threading.Thread(target=ledger.atomic, args=(slow,))
        worker.start()
        try:
            assert inside.wait(timeout=5)
            balance = ledger.atomic(lambda s: s.lock_wallet("bob").fiat_balance)
            assert balance == Decimal("1000.00")
        finally:
            release.set()
            worker.join(timeout=5)
