"""Trade execution endpoints, committed through the TradingEngine.

POST /markets/{market_id}/bets          — market or limit bet
POST /markets/{market_id}/range-orders  — YES leg at low, NO leg at high
POST /markets/{market_id}/sells         — sell shares (sell-all rule applies)
"""

from fastapi import APIRouter, Request

from src.pm_common.enums import Outcome
from src.pm_common.response import ApiResponse, success_response
from src.pm_matching.application.schemas import (
    BetRecordResponse,
    PlaceBetRequest,
    PlaceRangeOrderRequest,
    SellSharesRequest,
)
from src.pm_matching.application.service import get_market_store, get_trading_engine
from src.pm_pricing.domain.scale import MarketScale

router = APIRouter(prefix="/markets/{market_id}", tags=["trading"])


async def _scale(market_id: str) -> MarketScale:
    """Scale used to read value-denominated limits; fixed for the life of a market."""
    return (await get_market_store().get_snapshot(market_id)).market.scale


@router.post("/bets", status_code=201)
async def place_bet(market_id: str, body: PlaceBetRequest, request: Request) -> ApiResponse:
    trade = body.to_domain(await _scale(market_id))
    bet = await get_trading_engine().place_bet(market_id, body.user_id, trade)
    return success_response(request, BetRecordResponse.from_domain(bet).model_dump())


@router.post("/range-orders", status_code=201)
async def place_range_order(
    market_id: str, body: PlaceRangeOrderRequest, request: Request
) -> ApiResponse:
    low, high = body.bounds(await _scale(market_id))
    bets = await get_trading_engine().place_range_order(
        market_id, body.user_id, body.amount, low, high
    )
    return success_response(request, [BetRecordResponse.from_domain(b).model_dump() for b in bets])


@router.post("/sells", status_code=201)
async def sell_shares(market_id: str, body: SellSharesRequest, request: Request) -> ApiResponse:
    bet = await get_trading_engine().sell_shares(
        market_id, body.user_id, Outcome(body.outcome), body.shares
    )
    return success_response(request, BetRecordResponse.from_domain(bet).model_dump())
