"""
FastAPI router for trade endpoints.

All routes delegate to use cases. No business logic here.
Input validation is handled by Pydantic schemas.
Error mapping is handled by centralized error handlers.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query, Request, status

from app.application.trading.buy_crypto import BuyCryptoUseCase
from app.application.trading.dtos import GetTradeHistoryQuery, PlaceOrderCommand
from app.application.trading.get_rates import GetRatesUseCase
from app.application.trading.get_trade_history import GetTradeHistoryUseCase
from app.application.trading.sell_crypto import SellCryptoUseCase
from app.core.config import settings
from app.interfaces.trading.dependencies import (
    get_buy_crypto_use_case,
    get_current_user_id,
    get_rates_use_case,
    get_sell_crypto_use_case,
    get_trade_history_use_case,
)
from app.interfaces.trading.schemas import (
    BuyReceipt,
    BuyResponse,
    ErrorResponse,
    OrderRequest,
    PaginationSchema,
    RateItem,
    RatesResponse,
    SellReceipt,
    SellResponse,
    TradeHistoryResponse,
    TradeItem,
)
from app.shared.security.rate_limiting import limiter

router = APIRouter(prefix="/trades", tags=["trades"])

ORDER_ERROR_RESPONSES = {
    401: {"model": ErrorResponse},
    422: {"model": ErrorResponse},
    503: {"model": ErrorResponse},
}


@router.get(
    "/rates",
    response_model=RatesResponse,
    summary="Current exchange rates",
    description="NGN and USD prices for every supported asset. Public.",
)
def get_rates(
    use_case: GetRatesUseCase = Depends(get_rates_use_case),
) -> RatesResponse:
    """List current rates."""
    result = use_case.execute()
    return RatesResponse(
        data=[
            RateItem(symbol=r.symbol, rate_ngn=r.rate_ngn, rate_usd=r.rate_usd)
            for r in result.rates
        ],
        timestamp=result.timestamp,
    )


@router.post(
    "/buy",
    response_model=BuyResponse,
    status_code=status.HTTP_201_CREATED,
    responses=ORDER_ERROR_RESPONSES,
    summary="Buy crypto",
    description="Pay fiat (plus fee) to receive the requested crypto amount.",
)
@limiter.limit(settings.rate_limit_trading)
def buy_crypto(
    request: Request,
    order: OrderRequest,
    owner_id: str = Depends(get_current_user_id),
    use_case: BuyCryptoUseCase = Depends(get_buy_crypto_use_case),
) -> BuyResponse:
    """Buy crypto for the authenticated user."""
    result = use_case.execute(
        PlaceOrderCommand(
            owner_id=owner_id, symbol=order.crypto_symbol, amount=order.amount
        )
    )
    return BuyResponse(
        data=BuyReceipt(
            trade_id=result.trade_id,
            type=result.side,
            crypto=result.symbol,
            crypto_amount=result.crypto_amount,
            rate=result.rate,
            subtotal=result.gross,
            fee=result.fee,
            total_cost=result.total,
            fee_percent=result.fee_percent,
            timestamp=result.timestamp,
            new_balance=result.new_balance,
        )
    )


@router.post(
    "/sell",
    response_model=SellResponse,
    status_code=status.HTTP_201_CREATED,
    responses=ORDER_ERROR_RESPONSES,
    summary="Sell crypto",
    description="Give up the requested crypto amount to receive fiat (minus fee).",
)
@limiter.limit(settings.rate_limit_trading)
def sell_crypto(
    request: Request,
    order: OrderRequest,
    owner_id: str = Depends(get_current_user_id),
    use_case: SellCryptoUseCase = Depends(get_sell_crypto_use_case),
) -> SellResponse:
    """Sell crypto for the authenticated user."""
    result = use_case.execute(
        PlaceOrderCommand(
            owner_id=owner_id, symbol=order.crypto_symbol, amount=order.amount
        )
    )
    return SellResponse(
        data=SellReceipt(
            trade_id=result.trade_id,
            type=result.side,
            crypto=result.symbol,
            crypto_amount=result.crypto_amount,
            rate=result.rate,
            gross_proceeds=result.gross,
            fee=result.fee,
            net_proceeds=result.total,
            fee_percent=result.fee_percent,
            timestamp=result.timestamp,
            new_balance=result.new_balance,
        )
    )


@router.get(
    "/history",
    response_model=TradeHistoryResponse,
    responses={401: {"model": ErrorResponse}},
    summary="Trade history",
    description="The caller's trades, newest first, optionally filtered.",
)
def get_trade_history(
    page: int = Query(default=1, ge=1),
    per_page: int = Query(default=20, ge=1),
    symbol: Optional[str] = Query(default=None, max_length=10),
    type: Optional[str] = Query(default=None, description="buy or sell"),
    owner_id: str = Depends(get_current_user_id),
    use_case: GetTradeHistoryUseCase = Depends(get_trade_history_use_case),
) -> TradeHistoryResponse:
    """List the authenticated user's trades."""
    result = use_case.execute(
        GetTradeHistoryQuery(
            owner_id=owner_id,
            page=page,
            per_page=per_page,
            symbol=symbol,
            side=type,
        )
    )
    return TradeHistoryResponse(
        data=[
            TradeItem(
                id=t.id,
                type=t.side,
                crypto_symbol=t.symbol,
                amount=t.crypto_amount,
                fiat_amount=t.fiat_amount,
                rate=t.rate,
                fee=t.fee,
                status=t.status,
                created_at=t.created_at,
            )
            for t in result.trades
        ],
        pagination=PaginationSchema(
            total=result.pagination.total,
            per_page=result.pagination.per_page,
            current_page=result.pagination.current_page,
            last_page=result.pagination.last_page,
        ),
    )
