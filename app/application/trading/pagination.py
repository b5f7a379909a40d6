"""
Pagination helpers shared by the history use cases.
"""

from app.application.trading.dtos import PaginationResult

DEFAULT_PER_PAGE = 20
# Keeps the row offset within a signed 64-bit SQL integer.
MAX_PAGE = 1_000_000


def normalize_page(page: int, per_page: int, max_per_page: int) -> tuple[int, int]:
    """Clamp a requested page and page size into the allowed range.

    Returns:
        Tuple of (1 <= page <= MAX_PAGE, 1 <= per_page <= max_per_page).
    """
    page = min(max(1, page), MAX_PAGE)
    if per_page < 1:
        per_page = DEFAULT_PER_PAGE
    return page, min(per_page, max_per_page)


def build_pagination(total: int, page: int, per_page: int) -> PaginationResult:
    """Build page metadata. ``last_page`` is at least 1, even when empty."""
    last_page = max(1, -(-total // per_page))
    return PaginationResult(
        total=total,
        per_page=per_page,
        current_page=page,
        last_page=last_page,
    )
