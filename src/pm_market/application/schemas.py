"""Pydantic schemas for pm_market API requests and responses.

Book view: resting YES limit orders are bids on the YES probability, resting
NO limit orders are asks on it. Levels aggregate the unfilled mana at each
limit probability.
"""

from collections import defaultdict

from pydantic import BaseModel, Field

from src.pm_common.enums import Outcome
from src.pm_market.domain.models import Market, MarketSnapshot
from src.pm_matching.application.schemas import PoolStateIn, PoolStateOut, ScaleIn
from src.pm_matching.domain.models import LimitOrder
from src.pm_pricing.engine.cpmm import get_probability


class CreateMarketRequest(BaseModel):
    question: str = Field(min_length=1)
    state: PoolStateIn
    scale: ScaleIn = ScaleIn()


class AddLiquidityRequest(BaseModel):
    amount: float


class BookLevelOut(BaseModel):
    limit_prob: float
    total_amount: float


class OrderbookOut(BaseModel):
    bids: list[BookLevelOut]  # YES orders, best (highest) first
    asks: list[BookLevelOut]  # NO orders, best (lowest) first


def _levels(orders: list[LimitOrder], descending: bool) -> list[BookLevelOut]:
    totals: dict[float, float] = defaultdict(float)
    for o in orders:
        totals[o.limit_prob] += o.remaining
    return [
        BookLevelOut(limit_prob=prob, total_amount=amount)
        for prob, amount in sorted(totals.items(), reverse=descending)
    ]


class MarketDetail(BaseModel):
    id: str
    question: str
    outcome_type: str
    state: PoolStateOut
    prob_display: str
    total_liquidity: float
    created_time: int
    version: int
    orderbook: OrderbookOut

    @classmethod
    def from_snapshot(cls, snapshot: MarketSnapshot) -> "MarketDetail":
        m: Market = snapshot.market
        orders = list(snapshot.resting_orders)
        return cls(
            id=m.id,
            question=m.question,
            outcome_type=m.scale.outcome_type.value,
            state=PoolStateOut.from_domain(m.state),
            prob_display=m.scale.format_prob(get_probability(m.state)),
            total_liquidity=m.total_liquidity,
            created_time=m.created_time,
            version=snapshot.version,
            orderbook=OrderbookOut(
                bids=_levels([o for o in orders if o.outcome == Outcome.YES], descending=True),
                asks=_levels([o for o in orders if o.outcome == Outcome.NO], descending=False),
            ),
        )
