"""
Tests for the trading and wallet API endpoints.

Routes run against the in-memory ledger and a stub rate provider
via FastAPI dependency overrides (see conftest.py).
Validates authentication, response schemas, and error mapping.
"""

from decimal import Decimal

from app.shared.security.headers import SECURE_HEADERS
from app.shared.security.rate_limiting import limiter

from tests.support import seed_holding

BUY_URL = "/api/v1/trades/buy"
SELL_URL = "/api/v1/trades/sell"
HISTORY_URL = "/api/v1/trades/history"
RATES_URL = "/api/v1/trades/rates"
ADD_FUNDS_URL = "/api/v1/wallet/add-funds"
BALANCE_URL = "/api/v1/wallet/balance"
TRANSACTIONS_URL = "/api/v1/wallet/transactions"


def _deposit(client, headers, amount: str) -> None:
    response = client.post(ADD_FUNDS_URL, json={"amount": amount}, headers=headers)
    assert response.status_code == 200, response.text


class TestHealthAndHeaders:
    """Tests for the health endpoint and security headers."""

    def test_health(self, client) -> None:
        """Health endpoint reports the service as up."""
        response = client.get("/api/v1/health")

        assert response.status_code == 200
        assert response.json()["status"] == "ok"

    def test_security_headers_present(self, client) -> None:
        """All security headers must be present on every response."""
        response = client.get(RATES_URL)

        for name, value in SECURE_HEADERS.items():
            assert response.headers[name] == value


class TestAuthentication:
    """Every wallet and order route requires a bearer token."""

    def test_missing_token(self, client) -> None:
        """Requests without a bearer token get 401."""
        response = client.post(BUY_URL, json={"crypto_symbol": "BTC", "amount": "0.001"})

        assert response.status_code == 401
        assert response.json() == {"success": False, "error": "Unauthenticated"}

    def test_invalid_token(self, client) -> None:
        """A token with a bad signature gets 401."""
        response = client.get(
            BALANCE_URL, headers={"Authorization": "Bearer alice.deadbeef"}
        )

        assert response.status_code == 401

    def test_first_request_opens_wallet(self, client, auth_headers) -> None:
        """The first authenticated request opens an empty wallet."""
        response = client.get(BALANCE_URL, headers=auth_headers("newcomer"))

        assert response.status_code == 200
        assert response.json()["fiat_balance"] == "0.00"
        assert response.json()["holdings"] == []


class TestRatesEndpoint:
    """Tests for GET /api/v1/trades/rates."""

    def test_rates_are_public(self, client) -> None:
        """Rates need no token and include the USD conversion."""
        response = client.get(RATES_URL)

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        by_symbol = {item["symbol"]: item for item in body["data"]}
        assert set(by_symbol) == {"BTC", "ETH", "USDT"}
        assert by_symbol["BTC"]["rate_usd"] == "61290.32258065"

    def test_unavailable_rate_is_null(self, client, rates) -> None:
        """A missing price is reported as null, not an error."""
        del rates.rates["ETH"]

        response = client.get(RATES_URL)

        eth = next(i for i in response.json()["data"] if i["symbol"] == "ETH")
        assert eth["rate_ngn"] is None
        assert eth["rate_usd"] is None


class TestBuyEndpoint:
    """Tests for POST /api/v1/trades/buy."""

    def test_buy_scenario(self, client, auth_headers) -> None:
        """Buying 0.001 BTC debits subtotal plus the 2% fee."""
        headers = auth_headers("alice")
        _deposit(client, headers, "1000000")

        response = client.post(
            BUY_URL, json={"crypto_symbol": "BTC", "amount": "0.001"}, headers=headers
        )

        assert response.status_code == 201
        body = response.json()
        assert body["success"] is True
        assert body["message"] == "Purchase successful"
        data = body["data"]
        assert data["type"] == "buy"
        assert data["crypto"] == "BTC"
        assert Decimal(data["crypto_amount"]) == Decimal("0.001")
        assert data["subtotal"] == "95000.00"
        assert data["fee"] == "1900.00"
        assert data["total_cost"] == "96900.00"
        assert data["new_balance"] == "903100.00"

    def test_lowercase_symbol_accepted(self, client, auth_headers) -> None:
        """Symbols are matched case-insensitively."""
        headers = auth_headers("alice")
        _deposit(client, headers, "1000000")

        response = client.post(
            BUY_URL, json={"crypto_symbol": "btc", "amount": "0.001"}, headers=headers
        )

        assert response.status_code == 201
        assert response.json()["data"]["crypto"] == "BTC"

    def test_unsupported_symbol(self, client, auth_headers) -> None:
        """An unknown symbol is a field error on crypto_symbol."""
        response = client.post(
            BUY_URL,
            json={"crypto_symbol": "DOGE", "amount": "10"},
            headers=auth_headers("alice"),
        )

        assert response.status_code == 422
        body = response.json()
        assert body["success"] is False
        assert "crypto_symbol" in body["errors"]

    def test_unsupported_symbol_reported_before_bad_amount(
        self, client, auth_headers
    ) -> None:
        """The symbol is checked first, whatever the amount."""
        for amount in ("0", "-1", "1.000000001", "abc"):
            response = client.post(
                BUY_URL,
                json={"crypto_symbol": "DOGE", "amount": amount},
                headers=auth_headers("alice"),
            )

            assert response.status_code == 422
            assert set(response.json()["errors"]) == {"crypto_symbol"}

    def test_non_numeric_amount_is_an_amount_error(self, client, auth_headers) -> None:
        """A supported symbol with a non-numeric amount fails on amount."""
        response = client.post(
            BUY_URL,
            json={"crypto_symbol": "BTC", "amount": "abc"},
            headers=auth_headers("alice"),
        )

        assert response.status_code == 422
        assert response.json()["errors"]["amount"] == [
            "Minimum amount for BTC is 0.0001"
        ]

    def test_extra_decimal_places_are_truncated(self, client, auth_headers) -> None:
        """Amounts beyond 8 places are truncated, not rejected."""
        headers = auth_headers("alice")
        _deposit(client, headers, "1000000")

        response = client.post(
            BUY_URL,
            json={"crypto_symbol": "BTC", "amount": "0.0010000009"},
            headers=headers,
        )

        assert response.status_code == 201
        assert Decimal(response.json()["data"]["crypto_amount"]) == Decimal("0.001")
        assert response.json()["data"]["total_cost"] == "96900.00"

    def test_amount_below_asset_minimum(self, client, auth_headers) -> None:
        """Amounts under the per-asset minimum are rejected."""
        response = client.post(
            BUY_URL,
            json={"crypto_symbol": "BTC", "amount": "0.00001"},
            headers=auth_headers("alice"),
        )

        assert response.status_code == 422
        assert response.json()["errors"]["amount"] == [
            "Minimum amount for BTC is 0.0001"
        ]

    def test_zero_amount_is_an_amount_error(self, client, auth_headers) -> None:
        """A zero amount is reported on the amount field."""
        response = client.post(
            BUY_URL,
            json={"crypto_symbol": "BTC", "amount": "0"},
            headers=auth_headers("alice"),
        )

        assert response.status_code == 422
        body = response.json()
        assert body["success"] is False
        assert "amount" in body["errors"]

    def test_transaction_too_small(self, client, auth_headers) -> None:
        """Orders under the fiat minimum are rejected."""
        response = client.post(
            BUY_URL,
            json={"crypto_symbol": "USDT", "amount": "1"},
            headers=auth_headers("alice"),
        )

        assert response.status_code == 422
        assert response.json()["error"] == (
            "Transaction amount too small. Minimum is 5,000"
        )

    def test_insufficient_funds(self, client, auth_headers, ledger) -> None:
        """A buy beyond the balance reports required and available."""
        headers = auth_headers("alice")

        response = client.post(
            BUY_URL, json={"crypto_symbol": "BTC", "amount": "0.001"}, headers=headers
        )

        assert response.status_code == 422
        body = response.json()
        assert body["required"] == "96900.00"
        assert body["available"] == "0.00"
        assert ledger.list_trades("alice")[1] == 0

    def test_rate_unavailable(self, client, auth_headers, rates) -> None:
        """A missing price for an order returns 503."""
        rates.rates.clear()

        response = client.post(
            BUY_URL,
            json={"crypto_symbol": "BTC", "amount": "0.001"},
            headers=auth_headers("alice"),
        )

        assert response.status_code == 503
        assert response.json()["success"] is False


class TestSellEndpoint:
    """Tests for POST /api/v1/trades/sell."""

    def test_sell_scenario(self, client, auth_headers, ledger) -> None:
        """Selling 0.1 BTC credits net proceeds after the fee."""
        seed_holding(ledger, "bob", "BTC", Decimal("0.5"))

        response = client.post(
            SELL_URL,
            json={"crypto_symbol": "BTC", "amount": "0.1"},
            headers=auth_headers("bob"),
        )

        assert response.status_code == 201
        body = response.json()
        assert body["message"] == "Sale successful"
        assert body["data"]["gross_proceeds"] == "9500000.00"
        assert body["data"]["fee"] == "190000.00"
        assert body["data"]["net_proceeds"] == "9310000.00"
        assert body["data"]["new_balance"] == "9310000.00"

        balance = client.get(BALANCE_URL, headers=auth_headers("bob")).json()
        assert Decimal(balance["holdings"][0]["amount"]) == Decimal("0.4")

    def test_oversell(self, client, auth_headers) -> None:
        """Selling more than held is rejected."""
        response = client.post(
            SELL_URL,
            json={"crypto_symbol": "ETH", "amount": "1"},
            headers=auth_headers("bob"),
        )

        assert response.status_code == 422
        assert response.json()["error"] == "Insufficient ETH holdings"


class TestHistoryEndpoint:
    """Tests for GET /api/v1/trades/history."""

    def _trade(self, client, headers, url, symbol, amount) -> None:
        response = client.post(
            url, json={"crypto_symbol": symbol, "amount": amount}, headers=headers
        )
        assert response.status_code == 201, response.text

    def test_history_is_scoped_filtered_and_paged(self, client, auth_headers) -> None:
        """History pages newest first and filters by symbol and type."""
        alice = auth_headers("alice")
        mallory = auth_headers("mallory")
        _deposit(client, alice, "10000000")
        _deposit(client, mallory, "10000000")
        self._trade(client, alice, BUY_URL, "BTC", "0.001")
        self._trade(client, alice, BUY_URL, "ETH", "0.01")
        self._trade(client, alice, SELL_URL, "BTC", "0.0005")
        self._trade(client, mallory, BUY_URL, "BTC", "0.001")

        page = client.get(HISTORY_URL, params={"per_page": 2}, headers=alice).json()
        assert page["pagination"] == {
            "total": 3,
            "per_page": 2,
            "current_page": 1,
            "last_page": 2,
        }
        assert [t["type"] for t in page["data"]] == ["sell", "buy"]

        btc = client.get(HISTORY_URL, params={"symbol": "btc"}, headers=alice).json()
        assert {t["crypto_symbol"] for t in btc["data"]} == {"BTC"}
        assert btc["pagination"]["total"] == 2

        sells = client.get(HISTORY_URL, params={"type": "sell"}, headers=alice).json()
        assert sells["pagination"]["total"] == 1

        ignored = client.get(HISTORY_URL, params={"type": "hold"}, headers=alice).json()
        assert ignored["pagination"]["total"] == 3

        theirs = client.get(HISTORY_URL, headers=mallory).json()
        assert theirs["pagination"]["total"] == 1

    def test_page_size_is_capped(self, client, auth_headers) -> None:
        """per_page above the maximum is clamped."""
        response = client.get(
            HISTORY_URL, params={"per_page": 500}, headers=auth_headers("alice")
        )

        assert response.status_code == 200
        assert response.json()["pagination"]["per_page"] == 100
        assert response.json()["pagination"]["last_page"] == 1

    def test_huge_page_number(self, client, auth_headers) -> None:
        """Out-of-range page numbers return an empty page, not a server error."""
        headers = auth_headers("alice")

        for url in (HISTORY_URL, TRANSACTIONS_URL):
            response = client.get(url, params={"page": 10**20}, headers=headers)

            assert response.status_code == 200
            assert response.json()["data"] == []


class TestWalletEndpoints:
    """Tests for the /api/v1/wallet routes."""

    def test_add_funds(self, client, auth_headers) -> None:
        """A deposit returns the new balance."""
        response = client.post(
            ADD_FUNDS_URL, json={"amount": "5000"}, headers=auth_headers("carol")
        )

        assert response.status_code == 200
        assert response.json() == {
            "success": True,
            "message": "Funds added successfully",
            "balance": "5000.00",
        }

    def test_add_funds_below_minimum(self, client, auth_headers) -> None:
        """Deposits under the minimum are rejected."""
        response = client.post(
            ADD_FUNDS_URL, json={"amount": "50"}, headers=auth_headers("carol")
        )

        assert response.status_code == 422
        assert response.json()["errors"]["amount"] == ["Minimum deposit is 100"]

    def test_add_funds_rejects_sub_cent_amounts(self, client, auth_headers) -> None:
        """Deposits are limited to two decimal places."""
        response = client.post(
            ADD_FUNDS_URL, json={"amount": "100.005"}, headers=auth_headers("carol")
        )

        assert response.status_code == 422

    def test_transactions_listing(self, client, auth_headers) -> None:
        """Every balance change appears in the transaction log."""
        headers = auth_headers("carol")
        _deposit(client, headers, "1000000")
        client.post(
            BUY_URL, json={"crypto_symbol": "BTC", "amount": "0.001"}, headers=headers
        )

        body = client.get(TRANSACTIONS_URL, headers=headers).json()

        assert [t["type"] for t in body["data"]] == ["buy_crypto", "deposit"]
        assert body["data"][0]["previous_balance"] == "1000000.00"
        assert body["data"][0]["new_balance"] == "903100.00"
        assert body["pagination"]["total"] == 2


class TestRateLimiting:
    """Tests for rate limiting behavior."""

    def test_order_endpoints_return_429(self, client, auth_headers) -> None:
        """Exceeding the trading limit returns HTTP 429."""
        headers = auth_headers("alice")
        limiter.reset()
        limiter.enabled = True

        statuses = [
            client.post(
                BUY_URL, json={"crypto_symbol": "DOGE", "amount": "1"}, headers=headers
            ).status_code
            for _ in range(11)
        ]

        assert statuses[:10] == [422] * 10
        assert statuses[10] == 429
        limiter.reset()


class TestReadIdempotence:
    """Reads without an intervening mutation return identical bodies."""

    def test_balance_and_history_are_repeatable(self, client, auth_headers) -> None:
        """Calling balance and history twice yields the same result."""
        headers = auth_headers("dave")
        _deposit(client, headers, "1000000")
        for symbol, amount in (("BTC", "0.001"), ("ETH", "0.01")):
            response = client.post(
                BUY_URL, json={"crypto_symbol": symbol, "amount": amount}, headers=headers
            )
            assert response.status_code == 201, response.text

        for url in (BALANCE_URL, HISTORY_URL, TRANSACTIONS_URL):
            first = client.get(url, headers=headers)
            second = client.get(url, headers=headers)

            assert first.status_code == 200
            assert first.json() == second.json()
