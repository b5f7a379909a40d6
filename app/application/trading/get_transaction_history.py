"""
Use case: List a user's ledger entries.

Input: GetTransactionHistoryQuery (owner_id, page, per_page)
Output: TransactionHistoryResult
Side effects: None (read-only query).
"""

from app.application.trading.dtos import (
    GetTransactionHistoryQuery,
    TransactionHistoryResult,
)
from app.application.trading.mappers import to_transaction_result
from app.application.trading.pagination import build_pagination, normalize_page
from app.domain.trading.ports import LedgerStore

DEFAULT_MAX_PER_PAGE = 100


class GetTransactionHistoryUseCase:
    """Returns one page of the caller's ledger entries, newest first."""

    def __init__(
        self, ledger: LedgerStore, max_per_page: int = DEFAULT_MAX_PER_PAGE
    ) -> None:
        self._ledger = ledger
        self._max_per_page = max_per_page

    def execute(self, query: GetTransactionHistoryQuery) -> TransactionHistoryResult:
        page, per_page = normalize_page(query.page, query.per_page, self._max_per_page)
        entries, total = self._ledger.list_transactions(
            owner_id=query.owner_id,
            offset=(page - 1) * per_page,
            limit=per_page,
        )
        return TransactionHistoryResult(
            transactions=[to_transaction_result(e) for e in entries],
            pagination=build_pagination(total, page, per_page),
        )
