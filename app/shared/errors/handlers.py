"""
Centralized error handlers for FastAPI.

Maps domain-specific errors to HTTP responses.
No stack traces or internal details are exposed to clients.
All error responses share the ``{"success": false, "error": ...}`` shape.
"""

import logging
from decimal import Decimal
from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from app.domain.trading.errors import (
    AuthenticationError,
    BelowMinimumAmountError,
    BelowMinimumDepositError,
    BelowMinimumTransactionError,
    InsufficientFundsError,
    InsufficientHoldingsError,
    LedgerError,
    RateUnavailableError,
    TradingDomainError,
    UnsupportedAssetError,
    WalletNotFoundError,
)

logger = logging.getLogger(__name__)

HTTP_401 = 401
HTTP_404 = 404
HTTP_422 = 422
HTTP_500 = 500
HTTP_503 = 503


def _error_response(
    status_code: int,
    error: str,
    detail: str | None = None,
    **extra: Any,
) -> JSONResponse:
    """Build a consistent JSON error response."""
    body: dict[str, Any] = {"success": False, "error": error}
    if detail:
        body["detail"] = detail
    for key, value in extra.items():
        body[key] = str(value) if isinstance(value, Decimal) else value
    return JSONResponse(status_code=status_code, content=body)


def register_error_handlers(app: FastAPI) -> None:
    """Register all domain error handlers on the FastAPI application.

    Args:
        app: The FastAPI application instance.
    """

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(
        _request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        """Report malformed request input per field."""
        errors: dict[str, list[str]] = {}
        for item in exc.errors():
            location = [str(part) for part in item.get("loc", ()) if part != "body"]
            field = ".".join(location) or "body"
            errors.setdefault(field, []).append(item.get("msg", "Invalid value"))
        logger.warning("Request validation failed: %s", sorted(errors))
        return _error_response(HTTP_422, "Validation failed", errors=errors)

    @app.exception_handler(UnsupportedAssetError)
    async def handle_unsupported_asset(
        _request: Request, exc: UnsupportedAssetError
    ) -> JSONResponse:
        """Handle orders for assets the platform does not trade."""
        logger.warning("Unsupported asset: %s", exc.symbol)
        return _error_response(
            HTTP_422,
            "Unsupported asset",
            errors={"crypto_symbol": [exc.message]},
        )

    @app.exception_handler(BelowMinimumAmountError)
    async def handle_below_minimum_amount(
        _request: Request, exc: BelowMinimumAmountError
    ) -> JSONResponse:
        """Handle crypto amounts below the per-asset minimum."""
        logger.warning("Amount below minimum for %s", exc.symbol)
        return _error_response(
            HTTP_422,
            exc.message,
            errors={"amount": [exc.message]},
            minimum=exc.minimum,
        )

    @app.exception_handler(BelowMinimumTransactionError)
    async def handle_below_minimum_transaction(
        _request: Request, exc: BelowMinimumTransactionError
    ) -> JSONResponse:
        """Handle orders whose fiat value is too small."""
        logger.warning("Transaction below minimum: %s < %s", exc.amount, exc.minimum)
        return _error_response(
            HTTP_422, exc.message, amount=exc.amount, minimum=exc.minimum
        )

    @app.exception_handler(BelowMinimumDepositError)
    async def handle_below_minimum_deposit(
        _request: Request, exc: BelowMinimumDepositError
    ) -> JSONResponse:
        """Handle deposits below the minimum."""
        logger.warning("Deposit below minimum")
        return _error_response(
            HTTP_422,
            exc.message,
            errors={"amount": [exc.message]},
            minimum=exc.minimum,
        )

    @app.exception_handler(InsufficientFundsError)
    async def handle_insufficient_funds(
        _request: Request, exc: InsufficientFundsError
    ) -> JSONResponse:
        """Handle insufficient funds errors."""
        logger.warning("Insufficient funds")
        return _error_response(
            HTTP_422,
            "Insufficient fiat balance",
            required=exc.required,
            available=exc.available,
        )

    @app.exception_handler(InsufficientHoldingsError)
    async def handle_insufficient_holdings(
        _request: Request, exc: InsufficientHoldingsError
    ) -> JSONResponse:
        """Handle sales exceeding the holding."""
        logger.warning("Insufficient holdings: %s", exc.symbol)
        return _error_response(
            HTTP_422,
            f"Insufficient {exc.symbol} holdings",
            required=exc.required,
            available=exc.available,
        )

    @app.exception_handler(RateUnavailableError)
    async def handle_rate_unavailable(
        _request: Request, exc: RateUnavailableError
    ) -> JSONResponse:
        """Handle missing market rates. Clients may retry."""
        logger.warning("Rate unavailable: %s", exc.symbol)
        response = _error_response(HTTP_503, exc.message)
        response.headers["Retry-After"] = "30"
        return response

    @app.exception_handler(WalletNotFoundError)
    async def handle_wallet_not_found(
        _request: Request, exc: WalletNotFoundError
    ) -> JSONResponse:
        """Handle missing wallet errors."""
        logger.warning("Wallet not found: %s", exc.owner_id)
        return _error_response(HTTP_404, "Wallet not found")

    @app.exception_handler(AuthenticationError)
    async def handle_authentication(
        _request: Request, exc: AuthenticationError
    ) -> JSONResponse:
        """Handle missing or invalid credentials."""
        logger.warning("Authentication failed: %s", exc.message)
        response = _error_response(HTTP_401, "Unauthenticated")
        response.headers["WWW-Authenticate"] = "Bearer"
        return response

    @app.exception_handler(LedgerError)
    async def handle_ledger(_request: Request, exc: LedgerError) -> JSONResponse:
        """Handle storage failures. The unit of work was rolled back."""
        logger.error("Ledger failure: %s", exc.reason)
        return _error_response(HTTP_500, "Internal server error")

    @app.exception_handler(TradingDomainError)
    async def handle_trading_domain(
        _request: Request, exc: TradingDomainError
    ) -> JSONResponse:
        """Catch-all for unhandled trading domain errors."""
        logger.error("Unhandled trading domain error: %s", exc.message)
        return _error_response(HTTP_500, "Internal server error")

    @app.exception_handler(Exception)
    async def handle_unexpected(
        _request: Request, exc: Exception
    ) -> JSONResponse:
        """Catch-all for unexpected errors. Never exposes internals."""
        logger.exception("Unexpected error: %s", type(exc).__name__)
        return _error_response(HTTP_500, "Internal server error")
