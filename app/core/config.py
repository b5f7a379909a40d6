"""
Application configuration.

Loads settings from environment variables and .env file.
All configuration is centralized here.
"""

from decimal import Decimal
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict

from app.domain.trading.pricing import TradingPolicy

DEFAULT_AUTH_SECRET = "change-me"
MEMORY_DATABASE_URL = "memory://"


class Settings(BaseSettings):
    """Application settings loaded from environment.

    Attributes:
        project_name: Display name for the API.
        version: Current API version string.
        debug: Enable debug mode. Must be False in production.
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR).
        rate_limit_default: Default rate limit for all endpoints.
        rate_limit_trading: Rate limit for order-executing endpoints.
        rate_limit_enabled: Turn request rate limiting on or off.
        database_url: SQLAlchemy URL of the ledger database, or "memory://"
            for a process-local ledger that is lost on restart.
        auth_secret: Shared secret used to verify bearer tokens. The default
            is only accepted in debug mode.
        supported_assets: Tradable crypto symbols.
        buy_fee_percent: Fee added to the gross value of a buy.
        sell_fee_percent: Fee subtracted from the gross value of a sell.
        minimum_transaction_amount: Smallest fee-adjusted order value (NGN).
        minimum_deposit_amount: Smallest fiat top-up (NGN).
        minimum_crypto_amounts: Smallest tradable amount per symbol.
        history_max_per_page: Upper bound on history page size.
        coingecko_base_url: Root of the CoinGecko API.
        rate_request_timeout_seconds: Timeout for one price request.
        rate_cache_ttl_seconds: Lifetime of a cached price.
        usd_to_ngn_rate: Fixed USD/NGN conversion.
        redis_url: Optional Redis URL. When set, prices are cached in Redis.
    """

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

    project_name: str = "CryptoDesk"
    version: str = "0.1.0"
    debug: bool = False
    log_level: str = "INFO"
    rate_limit_default: str = "60/minute"
    rate_limit_trading: str = "10/minute"
    rate_limit_enabled: bool = True

    database_url: str = "sqlite:///./cryptodesk.db"
    auth_secret: str = DEFAULT_AUTH_SECRET

    supported_assets: tuple[str, ...] = ("BTC", "ETH", "USDT")
    buy_fee_percent: Decimal = Decimal("2.0")
    sell_fee_percent: Decimal = Decimal("2.0")
    minimum_transaction_amount: Decimal = Decimal("5000")
    minimum_deposit_amount: Decimal = Decimal("100")
    minimum_crypto_amounts: dict[str, Decimal] = {
        "BTC": Decimal("0.0001"),
        "ETH": Decimal("0.001"),
        "USDT": Decimal("1"),
    }
    history_max_per_page: int = 100

    coingecko_base_url: str = "https://api.coingecko.com/api/v3"
    rate_request_timeout_seconds: float = 5.0
    rate_cache_ttl_seconds: int = 300
    usd_to_ngn_rate: Decimal = Decimal("1550")
    redis_url: Optional[str] = None

    def check_secrets(self) -> None:
        """Refuse the placeholder auth secret outside debug mode.

        Raises:
            RuntimeError: If anyone could mint tokens with the default secret.
        """
        if not self.debug and self.auth_secret == DEFAULT_AUTH_SECRET:
            raise RuntimeError("AUTH_SECRET must be set when DEBUG is off")

    def trading_policy(self) -> TradingPolicy:
        """Build the domain trading policy from these settings."""
        return TradingPolicy(
            supported_assets=tuple(s.upper() for s in self.supported_assets),
            minimum_crypto_amounts={
                symbol.upper(): amount
                for symbol, amount in self.minimum_crypto_amounts.items()
            },
            buy_fee_percent=self.buy_fee_percent,
            sell_fee_percent=self.sell_fee_percent,
            minimum_transaction_amount=self.minimum_transaction_amount,
            minimum_deposit_amount=self.minimum_deposit_amount,
        )


settings = Settings()
