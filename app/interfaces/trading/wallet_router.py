"""
FastAPI router for wallet endpoints.

All routes delegate to use cases. No business logic here.
"""

from fastapi import APIRouter, Depends, Query

from app.application.trading.deposit_funds import DepositFundsUseCase
from app.application.trading.dtos import (
    DepositFundsCommand,
    GetTransactionHistoryQuery,
)
from app.application.trading.get_transaction_history import (
    GetTransactionHistoryUseCase,
)
from app.application.trading.get_wallet_balance import GetWalletBalanceUseCase
from app.interfaces.trading.dependencies import (
    get_current_user_id,
    get_deposit_funds_use_case,
    get_transaction_history_use_case,
    get_wallet_balance_use_case,
)
from app.interfaces.trading.schemas import (
    DepositRequest,
    DepositResponse,
    ErrorResponse,
    HoldingItem,
    PaginationSchema,
    TransactionHistoryResponse,
    TransactionItem,
    WalletBalanceResponse,
)

router = APIRouter(prefix="/wallet", tags=["wallet"])


@router.get(
    "/balance",
    response_model=WalletBalanceResponse,
    responses={401: {"model": ErrorResponse}},
    summary="Wallet balance",
    description="Fiat balance and crypto holdings of the caller.",
)
def get_balance(
    owner_id: str = Depends(get_current_user_id),
    use_case: GetWalletBalanceUseCase = Depends(get_wallet_balance_use_case),
) -> WalletBalanceResponse:
    """Show the authenticated user's balances."""
    result = use_case.execute(owner_id)
    return WalletBalanceResponse(
        fiat_balance=result.fiat_balance,
        holdings=[HoldingItem(symbol=h.symbol, amount=h.amount) for h in result.holdings],
    )


@router.post(
    "/add-funds",
    response_model=DepositResponse,
    responses={401: {"model": ErrorResponse}, 422: {"model": ErrorResponse}},
    summary="Add funds",
    description="Credit fiat to the caller's wallet.",
)
def add_funds(
    deposit: DepositRequest,
    owner_id: str = Depends(get_current_user_id),
    use_case: DepositFundsUseCase = Depends(get_deposit_funds_use_case),
) -> DepositResponse:
    """Top up the authenticated user's fiat balance."""
    result = use_case.execute(
        DepositFundsCommand(owner_id=owner_id, amount=deposit.amount)
    )
    return DepositResponse(balance=result.new_balance)


@router.get(
    "/transactions",
    response_model=TransactionHistoryResponse,
    responses={401: {"model": ErrorResponse}},
    summary="Ledger entries",
    description="The caller's balance changes, newest first.",
)
def get_transactions(
    page: int = Query(default=1, ge=1),
    per_page: int = Query(default=20, ge=1),
    owner_id: str = Depends(get_current_user_id),
    use_case: GetTransactionHistoryUseCase = Depends(get_transaction_history_use_case),
) -> TransactionHistoryResponse:
    """List the authenticated user's ledger entries."""
    result = use_case.execute(
        GetTransactionHistoryQuery(owner_id=owner_id, page=page, per_page=per_page)
    )
    return TransactionHistoryResponse(
        data=[
            TransactionItem(
                id=e.id,
                type=e.kind,
                amount=e.amount,
                previous_balance=e.previous_balance,
                new_balance=e.new_balance,
                description=e.description,
                created_at=e.created_at,
            )
            for e in result.transactions
        ],
        pagination=PaginationSchema(
            total=result.pagination.total,
            per_page=result.pagination.per_page,
            current_page=result.pagination.current_page,
            last_page=result.pagination.last_page,
        ),
    )
