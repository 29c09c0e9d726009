# src/pm_matching/application/schemas.py
"""Wire schemas for trade previews and executions.

Request models convert to engine dataclasses with ``to_domain``; response
models are built from engine results with ``from_domain``. Amount validation
is left to the engine so that API callers see the same error codes as any
other caller.
"""
from typing import Literal

from pydantic import BaseModel, Field, model_validator

from src.pm_common.enums import Outcome
from src.pm_matching.domain.models import (
    BetRecord,
    BetStats,
    Fill,
    LimitOrder,
    MakerFill,
    SaleResult,
    TradeRequest,
)
from src.pm_pricing.domain.models import CpmmState, Fees
from src.pm_pricing.domain.scale import BinaryScale, MarketScale, PseudoNumericScale
from src.pm_pricing.engine.cpmm import get_probability


class PoolStateIn(BaseModel):
    pool_yes: float = Field(gt=0)
    pool_no: float = Field(gt=0)
    p: float = Field(default=0.5, gt=0, lt=1)

    def to_domain(self) -> CpmmState:
        return CpmmState(pool_yes=self.pool_yes, pool_no=self.pool_no, p=self.p)


class LimitOrderIn(BaseModel):
    id: str
    outcome: Literal["YES", "NO"]
    limit_prob: float = Field(gt=0, lt=1)
    order_amount: float = Field(gt=0)
    amount: float = Field(default=0.0, ge=0)
    created_time: int = 0
    is_cancelled: bool = False

    @model_validator(mode="after")
    def not_overfilled(self) -> "LimitOrderIn":
        if self.amount > self.order_amount:
            raise ValueError("amount must not exceed order_amount")
        return self

    def to_domain(self) -> LimitOrder:
        return LimitOrder(
            id=self.id,
            outcome=Outcome(self.outcome),
            limit_prob=self.limit_prob,
            order_amount=self.order_amount,
            amount=self.amount,
            created_time=self.created_time,
            is_cancelled=self.is_cancelled,
        )


class ScaleIn(BaseModel):
    outcome_type: Literal["BINARY", "PSEUDO_NUMERIC"] = "BINARY"
    min: float | None = None
    max: float | None = None
    is_log_scale: bool = False

    @model_validator(mode="after")
    def bounds_for_numeric(self) -> "ScaleIn":
        if self.outcome_type == "PSEUDO_NUMERIC":
            if self.min is None or self.max is None or self.max <= self.min:
                raise ValueError("PSEUDO_NUMERIC markets need min < max")
        return self

    def to_domain(self) -> MarketScale:
        if self.outcome_type == "PSEUDO_NUMERIC" and self.min is not None and self.max is not None:
            return PseudoNumericScale(min=self.min, max=self.max, is_log_scale=self.is_log_scale)
        return BinaryScale()


def _check_one_limit(prob: float | None, value: float | None, name: str) -> None:
    if prob is not None and value is not None:
        raise ValueError(f"give either {name}_prob or {name}_value, not both")


def resolve_limit(
    limit_prob: float | None, limit_value: float | None, scale: MarketScale
) -> float | None:
    """Limit in probability space. A value is read on the market's own scale.

    On a PSEUDO_NUMERIC market the value is a point in [min, max]; on a BINARY
    market it is the probability itself.
    """
    if limit_value is None:
        return limit_prob
    return scale.value_to_prob(limit_value)


class BetQuoteRequest(BaseModel):
    state: PoolStateIn
    outcome: Literal["YES", "NO"]
    amount: float
    limit_prob: float | None = None
    limit_value: float | None = None
    unfilled_orders: list[LimitOrderIn] = []
    scale: ScaleIn = ScaleIn()

    @model_validator(mode="after")
    def one_limit(self) -> "BetQuoteRequest":
        _check_one_limit(self.limit_prob, self.limit_value, "limit")
        return self

    def to_domain(self, scale: MarketScale) -> TradeRequest:
        limit = resolve_limit(self.limit_prob, self.limit_value, scale)
        return TradeRequest(Outcome(self.outcome), self.amount, limit)


class RangeQuoteRequest(BaseModel):
    state: PoolStateIn
    amount: float
    low_limit_prob: float | None = None
    high_limit_prob: float | None = None
    low_limit_value: float | None = None
    high_limit_value: float | None = None
    unfilled_orders: list[LimitOrderIn] = []
    scale: ScaleIn = ScaleIn()

    @model_validator(mode="after")
    def one_limit_per_bound(self) -> "RangeQuoteRequest":
        _check_one_limit(self.low_limit_prob, self.low_limit_value, "low_limit")
        _check_one_limit(self.high_limit_prob, self.high_limit_value, "high_limit")
        return self

    def bounds(self, scale: MarketScale) -> tuple[float | None, float | None]:
        return (
            resolve_limit(self.low_limit_prob, self.low_limit_value, scale),
            resolve_limit(self.high_limit_prob, self.high_limit_value, scale),
        )


class SaleQuoteRequest(BaseModel):
    state: PoolStateIn
    outcome: Literal["YES", "NO"]
    shares: float
    owned_shares: float | None = None  # when given, applies the sell-all rule
    unfilled_orders: list[LimitOrderIn] = []
    scale: ScaleIn = ScaleIn()


class FeesOut(BaseModel):
    platform_fee: float
    creator_fee: float
    liquidity_fee: float
    total_fees: float

    @classmethod
    def from_domain(cls, fees: Fees) -> "FeesOut":
        return cls(
            platform_fee=fees.platform_fee,
            creator_fee=fees.creator_fee,
            liquidity_fee=fees.liquidity_fee,
            total_fees=fees.total,
        )


class FillOut(BaseModel):
    matched_order_id: str | None
    amount: float
    shares: float
    is_sale: bool = False

    @classmethod
    def from_domain(cls, fill: Fill) -> "FillOut":
        return cls(
            matched_order_id=fill.matched_order_id,
            amount=fill.amount,
            shares=fill.shares,
            is_sale=fill.is_sale,
        )


class MakerFillOut(BaseModel):
    order_id: str
    amount: float
    shares: float

    @classmethod
    def from_domain(cls, maker: MakerFill) -> "MakerFillOut":
        return cls(order_id=maker.order.id, amount=maker.amount, shares=maker.shares)


class PoolStateOut(BaseModel):
    pool_yes: float
    pool_no: float
    p: float
    prob: float

    @classmethod
    def from_domain(cls, state: CpmmState) -> "PoolStateOut":
        return cls(
            pool_yes=state.pool_yes, pool_no=state.pool_no, p=state.p, prob=get_probability(state)
        )


class BetQuoteResponse(BaseModel):
    outcome: str
    order_amount: float
    amount: float
    shares: float
    limit_prob: float | None
    is_filled: bool
    prob_before: float
    prob_after: float
    prob_before_display: str
    prob_after_display: str
    prob_stayed_same: bool
    current_payout: float
    current_return: float
    fees: FeesOut
    new_state: PoolStateOut
    takers: list[FillOut]
    makers: list[MakerFillOut]

    @classmethod
    def from_domain(cls, stats: BetStats, scale: MarketScale) -> "BetQuoteResponse":
        r = stats.result
        before = scale.format_prob(r.prob_before)
        after = scale.format_prob(r.prob_after)
        return cls(
            outcome=r.outcome.value,
            order_amount=r.order_amount,
            amount=r.amount,
            shares=r.shares,
            limit_prob=r.limit_prob,
            is_filled=r.is_filled,
            prob_before=r.prob_before,
            prob_after=r.prob_after,
            prob_before_display=before,
            prob_after_display=after,
            prob_stayed_same=before == after,
            current_payout=stats.current_payout,
            current_return=stats.current_return,
            fees=FeesOut.from_domain(r.fees),
            new_state=PoolStateOut.from_domain(r.state),
            takers=[FillOut.from_domain(t) for t in r.takers],
            makers=[MakerFillOut.from_domain(m) for m in r.makers],
        )


class RangeQuoteResponse(BaseModel):
    shares: float
    yes_amount: float
    no_amount: float
    has_two_bets: bool
    profit_if_both_filled: float | None
    low_placeholder: str
    high_placeholder: str
    yes: BetQuoteResponse | None
    no: BetQuoteResponse | None


class SaleQuoteResponse(BaseModel):
    outcome: str
    shares_sold: float
    sale_value: float
    prob_before: float
    prob_after: float
    prob_before_display: str
    prob_after_display: str
    fees: FeesOut
    new_state: PoolStateOut
    takers: list[FillOut]
    makers: list[MakerFillOut]

    @classmethod
    def from_domain(cls, sale: SaleResult, scale: MarketScale) -> "SaleQuoteResponse":
        return cls(
            outcome=sale.outcome.value,
            shares_sold=sale.shares_sold,
            sale_value=sale.sale_value,
            prob_before=sale.prob_before,
            prob_after=sale.prob_after,
            prob_before_display=scale.format_prob(sale.prob_before),
            prob_after_display=scale.format_prob(sale.prob_after),
            fees=FeesOut.from_domain(sale.fees),
            new_state=PoolStateOut.from_domain(sale.state),
            takers=[FillOut.from_domain(t) for t in sale.takers],
            makers=[MakerFillOut.from_domain(m) for m in sale.makers],
        )


class PlaceBetRequest(BaseModel):
    user_id: str
    outcome: Literal["YES", "NO"]
    amount: float
    limit_prob: float | None = None
    limit_value: float | None = None

    @model_validator(mode="after")
    def one_limit(self) -> "PlaceBetRequest":
        _check_one_limit(self.limit_prob, self.limit_value, "limit")
        return self

    def to_domain(self, scale: MarketScale) -> TradeRequest:
        limit = resolve_limit(self.limit_prob, self.limit_value, scale)
        return TradeRequest(Outcome(self.outcome), self.amount, limit)


class PlaceRangeOrderRequest(BaseModel):
    user_id: str
    amount: float
    low_limit_prob: float | None = None
    high_limit_prob: float | None = None
    low_limit_value: float | None = None
    high_limit_value: float | None = None

    @model_validator(mode="after")
    def one_limit_per_bound(self) -> "PlaceRangeOrderRequest":
        _check_one_limit(self.low_limit_prob, self.low_limit_value, "low_limit")
        _check_one_limit(self.high_limit_prob, self.high_limit_value, "high_limit")
        return self

    def bounds(self, scale: MarketScale) -> tuple[float | None, float | None]:
        return (
            resolve_limit(self.low_limit_prob, self.low_limit_value, scale),
            resolve_limit(self.high_limit_prob, self.high_limit_value, scale),
        )


class SellSharesRequest(BaseModel):
    user_id: str
    outcome: Literal["YES", "NO"]
    shares: float


class BetRecordResponse(BaseModel):
    id: str
    market_id: str
    user_id: str
    outcome: str
    order_amount: float
    amount: float
    shares: float
    limit_prob: float | None
    is_filled: bool
    is_sale: bool
    prob_before: float
    prob_after: float
    fees: FeesOut
    fills: list[FillOut]
    created_time: int

    @classmethod
    def from_domain(cls, bet: BetRecord) -> "BetRecordResponse":
        return cls(
            id=bet.id,
            market_id=bet.market_id,
            user_id=bet.user_id,
            outcome=bet.outcome.value,
            order_amount=bet.order_amount,
            amount=bet.amount,
            shares=bet.shares,
            limit_prob=bet.limit_prob,
            is_filled=bet.is_filled,
            is_sale=bet.is_sale,
            prob_before=bet.prob_before,
            prob_after=bet.prob_after,
            fees=FeesOut.from_domain(bet.fees),
            fills=[FillOut.from_domain(f) for f in bet.fills],
            created_time=bet.created_time,
        )
