"""
Adapter: CoinGecko rate provider.

Implements the RateProvider port on top of the public CoinGecko
``/simple/price`` endpoint. Rates are quoted in NGN; when CoinGecko has
no NGN price the USD price is converted with a fixed rate.

Every lookup goes through the injected RateCache first.
"""

import logging
from decimal import Decimal
from typing import Optional

import httpx

from app.domain.trading.ports import RateCache, RateProvider

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://api.coingecko.com/api/v3"
DEFAULT_TIMEOUT_SECONDS = 5.0
DEFAULT_CACHE_TTL_SECONDS = 300
DEFAULT_USD_TO_NGN_RATE = Decimal("1550")

COINGECKO_IDS = {
    "BTC": "bitcoin",
    "ETH": "ethereum",
    "USDT": "tether",
}


def _positive(value: object) -> Optional[Decimal]:
    if value is None or isinstance(value, bool):
        return None
    try:
        parsed = Decimal(str(value))
    except ArithmeticError:
        return None
    if not parsed.is_finite() or parsed <= 0:
        return None
    return parsed


class CoinGeckoRateProvider(RateProvider):
    """Fetches NGN prices from CoinGecko with caching and a short timeout.

    Transport errors, timeouts, non-2xx responses and malformed payloads
    are logged and reported as "no rate" (None).
    """

    def __init__(
        self,
        client: httpx.Client,
        cache: RateCache,
        base_url: str = DEFAULT_BASE_URL,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
        cache_ttl_seconds: int = DEFAULT_CACHE_TTL_SECONDS,
        usd_to_ngn_rate: Decimal = DEFAULT_USD_TO_NGN_RATE,
    ) -> None:
        """Initialize the provider.

        Args:
            client: HTTP client used for requests.
            cache: Cache consulted before, and filled after, each request.
            base_url: CoinGecko API root.
            timeout_seconds: Per-request timeout.
            cache_ttl_seconds: Lifetime of a cached rate.
            usd_to_ngn_rate: Conversion used when no NGN price is quoted.
        """
        self._client = client
        self._cache = cache
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout_seconds
        self._cache_ttl = cache_ttl_seconds
        self._usd_to_ngn = usd_to_ngn_rate

    def get_rate(self, symbol: str) -> Optional[Decimal]:
        """Return the NGN price of one unit of ``symbol``, or None."""
        symbol = symbol.upper()
        coin_id = COINGECKO_IDS.get(symbol)
        if coin_id is None:
            return None

        cache_key = f"crypto_rate_{symbol.lower()}"
        cached = self._cache.get(cache_key)
        if cached is not None:
            return cached

        payload = self._fetch_prices(coin_id)
        if payload is None:
            return None

        coin = payload.get(coin_id)
        if not isinstance(coin, dict):
            logger.warning("CoinGecko returned no price for %s", coin_id)
            return None

        rate = _positive(coin.get("ngn"))
        if rate is None:
            usd = _positive(coin.get("usd"))
            if usd is None:
                logger.warning("CoinGecko price for %s has no usable quote", coin_id)
                return None
            rate = usd * self._usd_to_ngn
            logger.info(
                "Using USD to NGN conversion for %s: usd=%s ngn=%s",
                symbol,
                usd,
                rate,
            )

        self._cache.set(cache_key, rate, self._cache_ttl)
        return rate

    def _fetch_prices(self, coin_id: str) -> Optional[dict]:
        url = f"{self._base_url}/simple/price"
        params = {"ids": coin_id, "vs_currencies": "usd,ngn"}
        logger.debug("CoinGecko request: %s %s", url, params)
        try:
            response = self._client.get(url, params=params, timeout=self._timeout)
            response.raise_for_status()
            payload = response.json(parse_float=Decimal)
        except httpx.HTTPError as exc:
            logger.error("CoinGecko request for %s failed: %s", coin_id, exc)
            return None
        except ValueError as exc:
            logger.error("CoinGecko returned invalid JSON for %s: %s", coin_id, exc)
            return None
        if not isinstance(payload, dict):
            logger.error("CoinGecko returned unexpected payload for %s", coin_id)
            return None
        return payload

    def close(self) -> None:
        """Close the underlying HTTP client."""
        self._client.close()
