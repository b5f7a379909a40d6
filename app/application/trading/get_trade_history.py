"""
Use case: List a user's trades.

Input: GetTradeHistoryQuery (owner_id, page, per_page, symbol, side)
Output: TradeHistoryResult
Side effects: None (read-only query).
Failure cases: None. Unknown side values are ignored.
"""

import logging

from app.application.trading.dtos import GetTradeHistoryQuery, TradeHistoryResult
from app.application.trading.mappers import to_trade_result
from app.application.trading.pagination import build_pagination, normalize_page
from app.domain.trading.entities import TradeSide
from app.domain.trading.ports import LedgerStore

logger = logging.getLogger(__name__)

DEFAULT_MAX_PER_PAGE = 100


class GetTradeHistoryUseCase:
    """Returns one page of the caller's own trades, newest first.

    The owner scope always comes from the query's owner_id; filters can
    only narrow it.
    """

    def __init__(
        self, ledger: LedgerStore, max_per_page: int = DEFAULT_MAX_PER_PAGE
    ) -> None:
        """Initialize the use case.

        Args:
            ledger: Store holding the trade log.
            max_per_page: Upper bound applied to the requested page size.
        """
        self._ledger = ledger
        self._max_per_page = max_per_page

    def execute(self, query: GetTradeHistoryQuery) -> TradeHistoryResult:
        """Run the trade history query."""
        page, per_page = normalize_page(query.page, query.per_page, self._max_per_page)
        symbol = query.symbol.strip().upper() if query.symbol else None
        side = _parse_side(query.side)

        logger.info(
            "Listing trades: owner=%s page=%d per_page=%d symbol=%s side=%s",
            query.owner_id,
            page,
            per_page,
            symbol,
            side.value if side else None,
        )

        trades, total = self._ledger.list_trades(
            owner_id=query.owner_id,
            symbol=symbol,
            side=side,
            offset=(page - 1) * per_page,
            limit=per_page,
        )
        return TradeHistoryResult(
            trades=[to_trade_result(t) for t in trades],
            pagination=build_pagination(total, page, per_page),
        )


def _parse_side(value: str | None) -> TradeSide | None:
    if not value:
        return None
    try:
        return TradeSide(value.strip().lower())
    except ValueError:
        return None
