"""
Database engine and session factory for the ledger.

PostgreSQL is the production backend; SQLite is supported for local
development and tests.
"""

import logging

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from app.infrastructure.trading.orm import Base

logger = logging.getLogger(__name__)

SQLITE_BUSY_TIMEOUT_SECONDS = 30


def build_engine(database_url: str, echo: bool = False) -> Engine:
    """Build a SQLAlchemy engine for the ledger.

    SQLite ignores SELECT ... FOR UPDATE, so every SQLite transaction is
    opened with BEGIN IMMEDIATE. That takes the database write lock up
    front and serializes concurrent units of work.

    Args:
        database_url: SQLAlchemy database URL.
        echo: Log emitted SQL.

    Returns:
        A configured Engine.
    """
    if not database_url.startswith("sqlite"):
        logger.info("Creating ledger engine for %s", database_url.split("@")[-1])
        return create_engine(database_url, pool_pre_ping=True, echo=echo)

    kwargs = {
        "connect_args": {
            "check_same_thread": False,
            "timeout": SQLITE_BUSY_TIMEOUT_SECONDS,
        },
        "echo": echo,
    }
    if database_url in ("sqlite://", "sqlite:///:memory:"):
        kwargs["poolclass"] = StaticPool
    engine = create_engine(database_url, **kwargs)

    @event.listens_for(engine, "connect")
    def _disable_pysqlite_transactions(dbapi_connection, _connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(engine, "begin")
    def _begin_immediate(conn):
        conn.exec_driver_sql("BEGIN IMMEDIATE")

    logger.info("Creating SQLite ledger engine for %s", database_url)
    return engine


def build_session_factory(engine: Engine) -> sessionmaker[Session]:
    """Return a session factory bound to ``engine``."""
    return sessionmaker(
        bind=engine,
        autoflush=False,
        expire_on_commit=False,
    )


def create_schema(engine: Engine) -> None:
    """Create ledger tables that do not exist yet."""
    Base.metadata.create_all(engine)
