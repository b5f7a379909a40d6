"""
Domain-specific errors for the trading bounded context.

All errors raised from the domain layer must be defined here.
These are mapped to HTTP responses at the interface layer.
No framework imports allowed.
"""

from decimal import Decimal


class TradingDomainError(Exception):
    """Base error for all trading domain errors."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(self.message)


class UnsupportedAssetError(TradingDomainError):
    """Raised when an order names a crypto asset the platform does not trade."""

    def __init__(self, symbol: str, supported: tuple[str, ...]) -> None:
        super().__init__(
            f"Unsupported asset: {symbol}. Supported assets: {', '.join(supported)}"
        )
        self.symbol = symbol
        self.supported = supported


class BelowMinimumAmountError(TradingDomainError):
    """Raised when the requested crypto amount is not a number or too small."""

    def __init__(self, symbol: str, minimum: Decimal) -> None:
        super().__init__(f"Minimum amount for {symbol} is {minimum}")
        self.symbol = symbol
        self.minimum = minimum


class BelowMinimumTransactionError(TradingDomainError):
    """Raised when the fee-adjusted fiat value of an order is too small."""

    def __init__(self, amount: Decimal, minimum: Decimal) -> None:
        super().__init__(
            f"Transaction amount too small. Minimum is {minimum:,}"
        )
        self.amount = amount
        self.minimum = minimum


class BelowMinimumDepositError(TradingDomainError):
    """Raised when a deposit is not a number or below the allowed minimum."""

    def __init__(self, minimum: Decimal) -> None:
        super().__init__(f"Minimum deposit is {minimum:,}")
        self.minimum = minimum


class RateUnavailableError(TradingDomainError):
    """Raised when no current rate can be obtained. Safe to retry."""

    def __init__(self, symbol: str) -> None:
        super().__init__(f"Unable to fetch current rate for {symbol}")
        self.symbol = symbol


class InsufficientFundsError(TradingDomainError):
    """Raised when the wallet lacks fiat funds for a purchase."""

    def __init__(self, required: Decimal, available: Decimal) -> None:
        super().__init__(
            f"Insufficient funds: required {required}, available {available}"
        )
        self.required = required
        self.available = available


class InsufficientHoldingsError(TradingDomainError):
    """Raised when the wallet holds less of an asset than a sale requires."""

    def __init__(self, symbol: str, required: Decimal, available: Decimal) -> None:
        super().__init__(
            f"Insufficient {symbol} holdings: required {required}, "
            f"available {available}"
        )
        self.symbol = symbol
        self.required = required
        self.available = available


class WalletNotFoundError(TradingDomainError):
    """Raised when the owner has no wallet."""

    def __init__(self, owner_id: str) -> None:
        super().__init__(f"Wallet not found for owner: {owner_id}")
        self.owner_id = owner_id


class AuthenticationError(TradingDomainError):
    """Raised when a request carries no valid credentials."""


class LedgerError(TradingDomainError):
    """Raised when the ledger store fails. The unit of work is rolled back."""

    def __init__(self, reason: str) -> None:
        super().__init__(f"Ledger operation failed: {reason}")
        self.reason = reason
