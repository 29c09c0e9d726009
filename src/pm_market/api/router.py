"""pm_market REST endpoints.

POST /markets                        — create a market on the in-process store
GET  /markets/{market_id}            — pool, probability and aggregated open book
POST /markets/{market_id}/liquidity  — subsidize the pool at constant probability
"""

from fastapi import APIRouter, Request

from src.pm_common.response import ApiResponse, success_response
from src.pm_market.application.schemas import AddLiquidityRequest, CreateMarketRequest
from src.pm_market.application.service import MarketApplicationService
from src.pm_matching.application.service import get_market_store

router = APIRouter(prefix="/markets", tags=["markets"])


def _service() -> MarketApplicationService:
    return MarketApplicationService(get_market_store())


@router.post("", status_code=201)
async def create_market(body: CreateMarketRequest, request: Request) -> ApiResponse:
    result = await _service().create_market(body)
    return success_response(request, result.model_dump())


@router.get("/{market_id}")
async def get_market(market_id: str, request: Request) -> ApiResponse:
    result = await _service().get_market(market_id)
    return success_response(request, result.model_dump())


@router.post("/{market_id}/liquidity")
async def add_liquidity(
    market_id: str, body: AddLiquidityRequest, request: Request
) -> ApiResponse:
    result = await _service().subsidize(market_id, body.amount)
    return success_response(request, result.model_dump())
