"""API endpoints for the debt swap quote service."""

import structlog
from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from debtswap.amm.factory import StaticReserveSource
from debtswap.errors import DebtSwapError
from debtswap.models.quote import ErrorResponse, QuoteRequest, QuoteResponse
from debtswap.pricing.path_pricer import PathPricer
from debtswap.pricing.quote import quote_exact_output

logger = structlog.get_logger()

router = APIRouter()

_default_pricer = PathPricer()


def get_pricer() -> PathPricer:
    """Dependency provider for the path pricer.

    Override this in tests to inject a pricer with another config:
        app.dependency_overrides[get_pricer] = lambda: custom_pricer
    """
    return _default_pricer


@router.post(
    "/quote",
    response_model=QuoteResponse,
    response_model_by_alias=True,
    responses={422: {"model": ErrorResponse}},
)
async def quote(
    request: QuoteRequest,
    pricer: PathPricer = Depends(get_pricer),
) -> QuoteResponse | JSONResponse:
    """Price a route for an exact output against caller-supplied reserves.

    Returns the per-hop amounts, the zero-slippage input and the ceiling a
    borrower should submit as ``maxSourceAmount``.

    Error Handling:
        - Invalid request schema: 422 (Pydantic)
        - Pricing failure (missing pool, insufficient liquidity): 422 with
          ``{"error": <kind>, "detail": <message>}``
    """
    logger.info(
        "received_quote_request",
        factory=request.factory,
        route=request.route,
        amount_out=request.amount_out,
        pool_count=len(request.pools),
    )

    try:
        source = StaticReserveSource(
            request.factory,
            [(p.token0, p.token1, p.reserve0, p.reserve1) for p in request.pools],
            pricer.config.init_code_hash,
        )
        result = quote_exact_output(
            pricer, source, request.route, request.amount_out, request.slippage_bps
        )
    except DebtSwapError as err:
        logger.warning("quote_failed", kind=err.kind, reason=str(err))
        return JSONResponse(
            status_code=422,
            content=ErrorResponse(error=err.kind, detail=str(err)).model_dump(),
        )

    logger.info(
        "returning_quote",
        amount_in=result.amount_in,
        max_amount_in=result.max_amount_in,
    )
    return QuoteResponse(
        route=list(result.path.route),
        amounts=list(result.path.amounts),
        amount_in=result.amount_in,
        max_amount_in=result.max_amount_in,
        slippage_bps=result.slippage_bps,
    )
