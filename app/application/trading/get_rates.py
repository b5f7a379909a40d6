"""
Use case: Current rates for every supported asset.

Input: None
Output: RatesResult
Side effects: May populate the rate cache through the provider.
Failure cases: None. Unavailable rates are reported as null.
"""

import logging
from datetime import datetime, timezone
from decimal import ROUND_HALF_UP, Decimal

from app.application.trading.dtos import RateResult, RatesResult
from app.domain.trading.money import RATE_QUANTUM
from app.domain.trading.ports import RateProvider

logger = logging.getLogger(__name__)

DEFAULT_USD_TO_NGN_RATE = Decimal("1550")


class GetRatesUseCase:
    """Lists NGN and derived USD prices for the supported assets."""

    def __init__(
        self,
        rate_provider: RateProvider,
        supported_assets: tuple[str, ...],
        usd_to_ngn_rate: Decimal = DEFAULT_USD_TO_NGN_RATE,
    ) -> None:
        """Initialize the use case.

        Args:
            rate_provider: Source of NGN prices.
            supported_assets: Symbols to list, in display order.
            usd_to_ngn_rate: Divisor used to derive the USD price.
        """
        self._rates = rate_provider
        self._assets = supported_assets
        self._usd_to_ngn = usd_to_ngn_rate

    def execute(self) -> RatesResult:
        """Run the rates query."""
        results = []
        for symbol in self._assets:
            rate_ngn = self._rates.get_rate(symbol)
            if rate_ngn is None:
                logger.warning("Rate unavailable for %s", symbol)
                results.append(RateResult(symbol=symbol, rate_ngn=None, rate_usd=None))
                continue
            rate_usd = (rate_ngn / self._usd_to_ngn).quantize(
                RATE_QUANTUM, rounding=ROUND_HALF_UP
            )
            results.append(
                RateResult(symbol=symbol, rate_ngn=rate_ngn, rate_usd=rate_usd)
            )
        return RatesResult(rates=results, timestamp=datetime.now(timezone.utc))
