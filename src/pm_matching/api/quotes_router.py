"""Stateless trade previews.

POST /quotes/bet    — market or limit bet preview (payout, fees, new pool)
POST /quotes/range  — range order split, a preview of each leg and bound placeholders
POST /quotes/sale   — sale proceeds and resulting pool

The caller supplies the pool and the open book; nothing is read or written.
These run the exact functions used for execution, so previews match fills.
"""

from fastapi import APIRouter, Request

from src.pm_common.enums import Outcome
from src.pm_common.response import ApiResponse, success_response
from src.pm_matching.application.schemas import (
    BetQuoteRequest,
    BetQuoteResponse,
    RangeQuoteRequest,
    RangeQuoteResponse,
    SaleQuoteRequest,
    SaleQuoteResponse,
)
from src.pm_matching.engine.bet_stats import get_bet_stats
from src.pm_matching.engine.range_order import (
    default_range_bounds,
    plan_range_order,
    preview_request,
)
from src.pm_matching.engine.sale import calculate_sale, resolve_sell_quantity
from src.pm_pricing.engine.cpmm import get_probability

router = APIRouter(prefix="/quotes", tags=["quotes"])


@router.post("/bet")
async def quote_bet(body: BetQuoteRequest, request: Request) -> ApiResponse:
    state = body.state.to_domain()
    orders = [o.to_domain() for o in body.unfilled_orders]
    scale = body.scale.to_domain()
    stats = get_bet_stats(body.to_domain(scale), state, orders)
    result = BetQuoteResponse.from_domain(stats, scale)
    return success_response(request, result.model_dump())


@router.post("/range")
async def quote_range(body: RangeQuoteRequest, request: Request) -> ApiResponse:
    state = body.state.to_domain()
    orders = [o.to_domain() for o in body.unfilled_orders]
    scale = body.scale.to_domain()
    plan = plan_range_order(body.amount, *body.bounds(scale))
    low, high = default_range_bounds(get_probability(state))

    legs: dict[Outcome, BetQuoteResponse | None] = {Outcome.YES: None, Outcome.NO: None}
    for outcome, amount, limit_prob in plan.legs():
        trade = preview_request(outcome, amount, limit_prob)
        legs[outcome] = BetQuoteResponse.from_domain(
            get_bet_stats(trade, state, orders), scale
        )

    result = RangeQuoteResponse(
        shares=plan.shares,
        yes_amount=plan.yes_amount,
        no_amount=plan.no_amount,
        has_two_bets=plan.has_two_bets,
        profit_if_both_filled=plan.profit_if_both_filled if plan.has_two_bets else None,
        low_placeholder=scale.placeholder(low),
        high_placeholder=scale.placeholder(high),
        yes=legs[Outcome.YES],
        no=legs[Outcome.NO],
    )
    return success_response(request, result.model_dump())


@router.post("/sale")
async def quote_sale(body: SaleQuoteRequest, request: Request) -> ApiResponse:
    shares = body.shares
    if body.owned_shares is not None:
        shares = resolve_sell_quantity(shares, body.owned_shares)
    sale = calculate_sale(
        body.state.to_domain(),
        shares,
        Outcome(body.outcome),
        [o.to_domain() for o in body.unfilled_orders],
    )
    result = SaleQuoteResponse.from_domain(sale, body.scale.to_domain())
    return success_response(request, result.model_dump())
