"""
Dependency injection for the trading bounded context.

Provides FastAPI dependency functions that wire infrastructure
adapters into use cases via constructor injection.
These are the composition root for the trading context.
"""

from functools import lru_cache
from typing import Optional

import httpx
import redis
from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.engine import Engine

from app.application.trading.buy_crypto import BuyCryptoUseCase
from app.application.trading.deposit_funds import DepositFundsUseCase
from app.application.trading.get_rates import GetRatesUseCase
from app.application.trading.get_trade_history import GetTradeHistoryUseCase
from app.application.trading.get_transaction_history import (
    GetTransactionHistoryUseCase,
)
from app.application.trading.get_wallet_balance import GetWalletBalanceUseCase
from app.application.trading.sell_crypto import SellCryptoUseCase
from app.core.config import MEMORY_DATABASE_URL, settings
from app.domain.trading.errors import AuthenticationError
from app.domain.trading.ports import Authenticator, LedgerStore, RateCache, RateProvider
from app.domain.trading.settlement import SettlementEngine
from app.infrastructure.trading.coingecko_rate_provider import CoinGeckoRateProvider
from app.infrastructure.trading.database import (
    build_engine,
    build_session_factory,
    create_schema,
)
from app.infrastructure.trading.memory_ledger_store import InMemoryLedgerStore
from app.infrastructure.trading.rate_cache import MemoryRateCache, RedisRateCache
from app.infrastructure.trading.sqlalchemy_ledger_store import SqlAlchemyLedgerStore
from app.infrastructure.trading.token_authenticator import HmacTokenAuthenticator

_bearer_scheme = HTTPBearer(auto_error=False)


@lru_cache
def get_database_engine() -> Engine:
    """Build the process-wide database engine and create missing tables."""
    engine = build_engine(settings.database_url, echo=settings.debug)
    create_schema(engine)
    return engine


@lru_cache
def get_ledger_store() -> LedgerStore:
    """Build the process-wide ledger store from application settings."""
    if settings.database_url == MEMORY_DATABASE_URL:
        return InMemoryLedgerStore()
    return SqlAlchemyLedgerStore(build_session_factory(get_database_engine()))


def _build_rate_cache() -> RateCache:
    if settings.redis_url:
        return RedisRateCache(redis.from_url(settings.redis_url, socket_timeout=1))
    return MemoryRateCache()


@lru_cache
def get_rate_provider() -> CoinGeckoRateProvider:
    """Build the process-wide rate provider from application settings."""
    return CoinGeckoRateProvider(
        client=httpx.Client(timeout=settings.rate_request_timeout_seconds),
        cache=_build_rate_cache(),
        base_url=settings.coingecko_base_url,
        timeout_seconds=settings.rate_request_timeout_seconds,
        cache_ttl_seconds=settings.rate_cache_ttl_seconds,
        usd_to_ngn_rate=settings.usd_to_ngn_rate,
    )


@lru_cache
def get_authenticator() -> Authenticator:
    """Build the bearer-token authenticator."""
    settings.check_secrets()
    return HmacTokenAuthenticator(settings.auth_secret)


def get_current_user_id(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(_bearer_scheme),
    authenticator: Authenticator = Depends(get_authenticator),
    ledger: LedgerStore = Depends(get_ledger_store),
) -> str:
    """Resolve the caller and make sure their wallet exists.

    Raises:
        AuthenticationError: If no valid bearer token is supplied.
    """
    if credentials is None:
        raise AuthenticationError("Missing bearer token")
    user_id = authenticator.authenticate(credentials.credentials)
    ledger.open_wallet(user_id)
    return user_id


def get_settlement_engine(
    ledger: LedgerStore = Depends(get_ledger_store),
    rate_provider: RateProvider = Depends(get_rate_provider),
) -> SettlementEngine:
    """Build the SettlementEngine with its ports."""
    return SettlementEngine(
        ledger=ledger,
        rate_provider=rate_provider,
        policy=settings.trading_policy(),
    )


def get_buy_crypto_use_case(
    engine: SettlementEngine = Depends(get_settlement_engine),
) -> BuyCryptoUseCase:
    """Build BuyCryptoUseCase with its dependencies."""
    return BuyCryptoUseCase(engine=engine)


def get_sell_crypto_use_case(
    engine: SettlementEngine = Depends(get_settlement_engine),
) -> SellCryptoUseCase:
    """Build SellCryptoUseCase with its dependencies."""
    return SellCryptoUseCase(engine=engine)


def get_deposit_funds_use_case(
    engine: SettlementEngine = Depends(get_settlement_engine),
) -> DepositFundsUseCase:
    """Build DepositFundsUseCase with its dependencies."""
    return DepositFundsUseCase(engine=engine)


def get_trade_history_use_case(
    ledger: LedgerStore = Depends(get_ledger_store),
) -> GetTradeHistoryUseCase:
    """Build GetTradeHistoryUseCase with its dependencies."""
    return GetTradeHistoryUseCase(
        ledger=ledger, max_per_page=settings.history_max_per_page
    )


def get_transaction_history_use_case(
    ledger: LedgerStore = Depends(get_ledger_store),
) -> GetTransactionHistoryUseCase:
    """Build GetTransactionHistoryUseCase with its dependencies."""
    return GetTransactionHistoryUseCase(
        ledger=ledger, max_per_page=settings.history_max_per_page
    )


def get_wallet_balance_use_case(
    ledger: LedgerStore = Depends(get_ledger_store),
) -> GetWalletBalanceUseCase:
    """Build GetWalletBalanceUseCase with its dependencies."""
    return GetWalletBalanceUseCase(ledger=ledger)


def get_rates_use_case(
    rate_provider: RateProvider = Depends(get_rate_provider),
) -> GetRatesUseCase:
    """Build GetRatesUseCase with its dependencies."""
    policy = settings.trading_policy()
    return GetRatesUseCase(
        rate_provider=rate_provider,
        supported_assets=policy.supported_assets,
        usd_to_ngn_rate=settings.usd_to_ngn_rate,
    )


def release_resources() -> None:
    """Close the rate client and the database pool, if they were built."""
    if get_rate_provider.cache_info().currsize:
        get_rate_provider().close()
        get_rate_provider.cache_clear()
    if get_database_engine.cache_info().currsize:
        get_database_engine().dispose()
        get_database_engine.cache_clear()
    get_ledger_store.cache_clear()
