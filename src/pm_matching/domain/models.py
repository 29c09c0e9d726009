from dataclasses import dataclass, field, replace

from src.pm_common.enums import Outcome
from src.pm_common.floats import floating_equal
from src.pm_pricing.domain.models import NO_FEES, CpmmState, Fees


@dataclass(frozen=True)
class LimitOrder:
    """Resting unfilled order, passed in by value from the store."""

    id: str
    outcome: Outcome
    limit_prob: float  # YES probability at which the order transacts
    order_amount: float  # total committed mana
    amount: float = 0.0  # mana already filled; only ever increases
    created_time: int = 0  # epoch ms, earlier fills first at equal price
    is_cancelled: bool = False
    user_id: str | None = None

    @property
    def remaining(self) -> float:
        return self.order_amount - self.amount

    @property
    def is_filled(self) -> bool:
        return self.amount >= self.order_amount or floating_equal(self.amount, self.order_amount)

    @property
    def is_matchable(self) -> bool:
        return not self.is_filled and not self.is_cancelled

    def with_fill(self, amount: float) -> "LimitOrder":
        return replace(self, amount=self.amount + amount)


@dataclass(frozen=True)
class TradeRequest:
    outcome: Outcome
    amount: float
    limit_prob: float | None = None  # None = market order


@dataclass(frozen=True)
class Fill:
    """Taker-side slice. matched_order_id is None when the pool was the counterparty."""

    matched_order_id: str | None
    amount: float
    shares: float
    is_sale: bool = False


@dataclass(frozen=True)
class MakerFill:
    """Resting order touched by a taker: ``amount`` mana of its order was filled."""

    order: LimitOrder
    amount: float
    shares: float


def merge_maker_fills(makers: list[MakerFill]) -> list[LimitOrder]:
    """Resting orders with their filled amounts incremented, one per order."""
    merged: dict[str, LimitOrder] = {}
    for m in makers:
        current = merged.get(m.order.id, m.order)
        merged[m.order.id] = current.with_fill(m.amount)
    return list(merged.values())


@dataclass
class TradeResult:
    outcome: Outcome
    order_amount: float
    state: CpmmState
    prob_before: float
    prob_after: float
    limit_prob: float | None = None
    takers: list[Fill] = field(default_factory=list)
    makers: list[MakerFill] = field(default_factory=list)
    fees: Fees = NO_FEES

    @property
    def amount(self) -> float:
        return sum(t.amount for t in self.takers)

    @property
    def shares(self) -> float:
        return sum(t.shares for t in self.takers)

    @property
    def remaining_amount(self) -> float:
        return max(0.0, self.order_amount - self.amount)

    @property
    def is_filled(self) -> bool:
        return floating_equal(self.order_amount, self.amount)

    @property
    def total_fees(self) -> float:
        return self.fees.total

    def updated_orders(self) -> list[LimitOrder]:
        return merge_maker_fills(self.makers)


@dataclass
class SaleResult:
    outcome: Outcome  # outcome of the shares being sold
    shares_sold: float
    sale_value: float
    state: CpmmState
    prob_before: float
    prob_after: float
    takers: list[Fill] = field(default_factory=list)
    makers: list[MakerFill] = field(default_factory=list)
    fees: Fees = NO_FEES

    def updated_orders(self) -> list[LimitOrder]:
        return merge_maker_fills(self.makers)


@dataclass(frozen=True)
class RangeOrderPlan:
    """Split of one "bet when prob reaches low and/or high" into two limit orders."""

    shares: float
    yes_amount: float
    no_amount: float
    yes_limit_prob: float | None
    no_limit_prob: float | None

    @property
    def has_two_bets(self) -> bool:
        return self.yes_limit_prob is not None and self.no_limit_prob is not None

    @property
    def profit_if_both_filled(self) -> float:
        return self.shares - (self.yes_amount + self.no_amount)

    def legs(self) -> list[tuple[Outcome, float, float]]:
        """(outcome, amount, limit_prob) for each leg that has a bound."""
        legs: list[tuple[Outcome, float, float]] = []
        if self.yes_limit_prob is not None:
            legs.append((Outcome.YES, self.yes_amount, self.yes_limit_prob))
        if self.no_limit_prob is not None:
            legs.append((Outcome.NO, self.no_amount, self.no_limit_prob))
        return legs

    def requests(self) -> list[TradeRequest]:
        return [TradeRequest(outcome, amount, limit) for outcome, amount, limit in self.legs()]


@dataclass
class BetStats:
    result: TradeResult
    current_payout: float
    current_return: float
    total_fees: float


@dataclass(frozen=True)
class UserBet:
    """A holder's past bet, used to work out how many shares can be sold."""

    outcome: Outcome
    shares: float  # negative for a sale
    is_sold: bool = False


@dataclass(frozen=True)
class BetRecord:
    """A taker bet or sale as handed to the store for persistence."""

    id: str
    market_id: str
    user_id: str
    outcome: Outcome
    order_amount: float
    amount: float  # negative sale value for a sale
    shares: float  # negative for a sale
    prob_before: float
    prob_after: float
    fees: Fees
    fills: tuple[Fill, ...]
    created_time: int
    limit_prob: float | None = None
    is_filled: bool = True
    is_sale: bool = False

    def to_user_bet(self) -> UserBet:
        return UserBet(outcome=self.outcome, shares=self.shares)


@dataclass(frozen=True)
class TradeCommit:
    """Everything one trade writes: applied atomically or not at all."""

    state: CpmmState
    bet: BetRecord
    updated_orders: tuple[LimitOrder, ...] = ()
    new_order: LimitOrder | None = None  # unfilled limit remainder left resting
