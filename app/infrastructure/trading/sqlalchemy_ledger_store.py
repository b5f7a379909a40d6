"""
Adapter: SQLAlchemy ledger store.

Implements the LedgerStore and LedgerSession ports.
Each unit of work is one database transaction. Wallet and holding rows
are read with SELECT ... FOR UPDATE, wallet first, so concurrent
operations on the same wallet are serialized while different wallets
never contend.
"""

import logging
from decimal import Decimal
from typing import Callable, Optional, TypeVar

from sqlalchemy import func, select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from app.domain.trading.entities import (
    Holding,
    Trade,
    TradeSide,
    TradeStatus,
    Transaction,
    TransactionKind,
    Wallet,
)
from app.domain.trading.errors import LedgerError
from app.domain.trading.ports import LedgerSession, LedgerStore
from app.infrastructure.trading.orm import (
    HoldingRow,
    TradeRow,
    TransactionRow,
    WalletRow,
    utcnow,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")


def _to_wallet(row: WalletRow) -> Wallet:
    return Wallet(
        id=row.id,
        owner_id=row.owner_id,
        fiat_balance=row.fiat_balance,
        created_at=row.created_at,
    )


def _to_holding(row: HoldingRow) -> Holding:
    return Holding(
        id=row.id,
        wallet_id=row.wallet_id,
        symbol=row.symbol,
        amount=row.amount,
    )


def _to_trade(row: TradeRow) -> Trade:
    return Trade(
        id=row.id,
        owner_id=row.owner_id,
        side=TradeSide(row.side),
        symbol=row.symbol,
        crypto_amount=row.crypto_amount,
        fiat_amount=row.fiat_amount,
        rate=row.rate,
        fee=row.fee,
        status=TradeStatus(row.status),
        created_at=row.created_at,
    )


def _to_transaction(row: TransactionRow) -> Transaction:
    return Transaction(
        id=row.id,
        owner_id=row.owner_id,
        kind=TransactionKind(row.kind),
        amount=row.amount,
        previous_balance=row.previous_balance,
        new_balance=row.new_balance,
        description=row.description,
        created_at=row.created_at,
    )


class SqlAlchemyLedgerSession(LedgerSession):
    """Transactional handle over an open SQLAlchemy session."""

    def __init__(self, session: Session) -> None:
        self._session = session

    def lock_wallet(self, owner_id: str) -> Optional[Wallet]:
        row = self._session.scalars(
            select(WalletRow).where(WalletRow.owner_id == owner_id).with_for_update()
        ).one_or_none()
        return _to_wallet(row) if row is not None else None

    def lock_holding(self, wallet: Wallet, symbol: str) -> Optional[Holding]:
        row = self._session.scalars(
            select(HoldingRow)
            .where(HoldingRow.wallet_id == wallet.id, HoldingRow.symbol == symbol)
            .with_for_update()
        ).one_or_none()
        return _to_holding(row) if row is not None else None

    def lock_or_create_holding(self, wallet: Wallet, symbol: str) -> Holding:
        holding = self.lock_holding(wallet, symbol)
        if holding is not None:
            return holding
        # The wallet row lock is held, so no concurrent insert can race us.
        row = HoldingRow(wallet_id=wallet.id, symbol=symbol, amount=Decimal("0"))
        self._session.add(row)
        self._session.flush()
        return _to_holding(row)

    def update_fiat_balance(self, wallet: Wallet, new_balance: Decimal) -> None:
        self._session.execute(
            update(WalletRow)
            .where(WalletRow.id == wallet.id)
            .values(fiat_balance=new_balance, updated_at=utcnow())
        )
        wallet.fiat_balance = new_balance

    def update_holding_amount(self, holding: Holding, new_amount: Decimal) -> None:
        self._session.execute(
            update(HoldingRow)
            .where(HoldingRow.id == holding.id)
            .values(amount=new_amount, updated_at=utcnow())
        )
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
        row = TradeRow(
            owner_id=owner_id,
            side=side.value,
            symbol=symbol,
            crypto_amount=crypto_amount,
            fiat_amount=fiat_amount,
            rate=rate,
            fee=fee,
            status=status.value,
            created_at=utcnow(),
        )
        self._session.add(row)
        self._session.flush()
        return _to_trade(row)

    def add_transaction(
        self,
        owner_id: str,
        kind: TransactionKind,
        amount: Decimal,
        previous_balance: Decimal,
        new_balance: Decimal,
        description: Optional[str] = None,
    ) -> Transaction:
        row = TransactionRow(
            owner_id=owner_id,
            kind=kind.value,
            amount=amount,
            previous_balance=previous_balance,
            new_balance=new_balance,
            description=description,
            created_at=utcnow(),
        )
        self._session.add(row)
        self._session.flush()
        return _to_transaction(row)


class SqlAlchemyLedgerStore(LedgerStore):
    """PostgreSQL/SQLite implementation of the ledger store.

    Implements the LedgerStore port defined in the domain layer.
    """

    def __init__(self, session_factory: sessionmaker[Session]) -> None:
        self._session_factory = session_factory

    def atomic(self, work: Callable[[LedgerSession], T]) -> T:
        """Run ``work`` in one transaction; commit on success, roll back on error.

        Storage failures are logged and re-raised as LedgerError. Errors
        raised by ``work`` itself propagate unchanged after the rollback.
        """
        with self._session_factory() as session:
            try:
                with session.begin():
                    return work(SqlAlchemyLedgerSession(session))
            except SQLAlchemyError as exc:
                logger.exception("Ledger unit of work rolled back")
                raise LedgerError(type(exc).__name__) from exc

    def open_wallet(self, owner_id: str) -> Wallet:
        """Return the owner's wallet, inserting an empty one on first use."""
        wallet = self.get_wallet(owner_id)
        if wallet is not None:
            return wallet
        try:
            with self._session_factory() as session, session.begin():
                row = WalletRow(owner_id=owner_id, fiat_balance=Decimal("0.00"))
                session.add(row)
                session.flush()
                wallet = _to_wallet(row)
        except IntegrityError:
            # Opened concurrently by another request.
            wallet = self.get_wallet(owner_id)
            if wallet is None:
                raise LedgerError("wallet could not be opened")
            return wallet
        except SQLAlchemyError as exc:
            logger.exception("Failed to open wallet for owner=%s", owner_id)
            raise LedgerError(type(exc).__name__) from exc
        logger.info("Opened wallet id=%d for owner=%s", wallet.id, owner_id)
        return wallet

    def get_wallet(self, owner_id: str) -> Optional[Wallet]:
        with self._session_factory() as session:
            row = session.scalars(
                select(WalletRow).where(WalletRow.owner_id == owner_id)
            ).one_or_none()
            return _to_wallet(row) if row is not None else None

    def list_holdings(self, wallet_id: int) -> list[Holding]:
        with self._session_factory() as session:
            rows = session.scalars(
                select(HoldingRow)
                .where(HoldingRow.wallet_id == wallet_id)
                .order_by(HoldingRow.symbol)
            ).all()
            return [_to_holding(row) for row in rows]

    def list_trades(
        self,
        owner_id: str,
        symbol: Optional[str] = None,
        side: Optional[TradeSide] = None,
        offset: int = 0,
        limit: int = 20,
    ) -> tuple[list[Trade], int]:
        conditions = [TradeRow.owner_id == owner_id]
        if symbol:
            conditions.append(TradeRow.symbol == symbol)
        if side is not None:
            conditions.append(TradeRow.side == side.value)

        with self._session_factory() as session:
            total = session.scalar(
                select(func.count()).select_from(TradeRow).where(*conditions)
            )
            rows = session.scalars(
                select(TradeRow)
                .where(*conditions)
                .order_by(TradeRow.created_at.desc(), TradeRow.id.desc())
                .offset(offset)
                .limit(limit)
            ).all()
            return [_to_trade(row) for row in rows], int(total or 0)

    def list_transactions(
        self, owner_id: str, offset: int = 0, limit: int = 20
    ) -> tuple[list[Transaction], int]:
        with self._session_factory() as session:
            total = session.scalar(
                select(func.count())
                .select_from(TransactionRow)
                .where(TransactionRow.owner_id == owner_id)
            )
            rows = session.scalars(
                select(TransactionRow)
                .where(TransactionRow.owner_id == owner_id)
                .order_by(TransactionRow.created_at.desc(), TransactionRow.id.desc())
                .offset(offset)
                .limit(limit)
            ).all()
            return [_to_transaction(row) for row in rows], int(total or 0)
