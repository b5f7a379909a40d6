"""
Shared fixtures for the trading tests.

Provides an in-memory ledger, a scripted rate provider, and a
TestClient wired to both through FastAPI dependency overrides.
"""

from decimal import Decimal

import pytest
from fastapi.testclient import TestClient

from app.domain.trading.settlement import SettlementEngine
from app.infrastructure.trading.memory_ledger_store import InMemoryLedgerStore
from app.infrastructure.trading.token_authenticator import HmacTokenAuthenticator
from app.interfaces.trading.dependencies import (
    get_authenticator,
    get_ledger_store,
    get_rate_provider,
)
from app.main import app
from app.shared.security.rate_limiting import limiter
from tests.support import StubRateProvider

BTC_RATE = Decimal("95000000")
ETH_RATE = Decimal("5000000")
USDT_RATE = Decimal("1550")

TEST_SECRET = "test-secret"


@pytest.fixture
def ledger() -> InMemoryLedgerStore:
    return InMemoryLedgerStore()


@pytest.fixture
def rates() -> StubRateProvider:
    return StubRateProvider(
        {"BTC": BTC_RATE, "ETH": ETH_RATE, "USDT": USDT_RATE}
    )


@pytest.fixture
def engine(ledger, rates) -> SettlementEngine:
    return SettlementEngine(ledger=ledger, rate_provider=rates)


@pytest.fixture
def fund(ledger, engine):
    """Open a wallet and deposit ``amount`` into it."""

    def _fund(owner_id: str, amount: str) -> None:
        ledger.open_wallet(owner_id)
        engine.deposit(owner_id, Decimal(amount))

    return _fund


@pytest.fixture
def authenticator() -> HmacTokenAuthenticator:
    return HmacTokenAuthenticator(TEST_SECRET)


@pytest.fixture
def auth_headers(authenticator):
    """Build an Authorization header for a user id."""

    def _headers(user_id: str) -> dict[str, str]:
        return {"Authorization": f"Bearer {authenticator.issue(user_id)}"}

    return _headers


@pytest.fixture
def client(ledger, rates, authenticator):
    app.dependency_overrides[get_ledger_store] = lambda: ledger
    app.dependency_overrides[get_rate_provider] = lambda: rates
    app.dependency_overrides[get_authenticator] = lambda: authenticator
    was_enabled = limiter.enabled
    limiter.enabled = False
    try:
        yield TestClient(app)
    finally:
        limiter.enabled = was_enabled
        app.dependency_overrides.clear()
