"""Price-then-time priority matching of a taker against resting orders and the pool.

A taker buying YES is matched against resting NO orders (and vice versa). At
every step the pool's spot probability is compared with the best remaining
order: whichever is at least as good for the taker is filled first. Resting
orders fill at their own price and never move the pool; pool fills move the
pool and carry fees.
"""
from dataclasses import dataclass

from src.pm_common.enums import Outcome
from src.pm_common.floats import floating_equal
from src.pm_matching.domain.models import Fill, LimitOrder, MakerFill, TradeRequest, TradeResult
from src.pm_pricing.domain.models import NO_FEES, CpmmState, Purchase
from src.pm_pricing.engine.cpmm import (
    calculate_amount_to_prob,
    calculate_purchase,
    get_probability,
    outcome_probability,
    validate_state,
)
from src.pm_risk.rules.order_limit import check_amount
from src.pm_risk.rules.price_range import check_limit_prob


@dataclass(frozen=True)
class _StepFill:
    taker: Fill
    maker: MakerFill | None = None
    purchase: Purchase | None = None


def match_order(
    request: TradeRequest, state: CpmmState, resting_orders: list[LimitOrder]
) -> TradeResult:
    check_amount(request.amount)
    check_limit_prob(request.limit_prob)
    validate_state(state)

    outcome = request.outcome
    book = sort_book(outcome, resting_orders)
    prob_before = get_probability(state)

    takers: list[Fill] = []
    makers: list[MakerFill] = []
    fees = NO_FEES
    amount = request.amount
    current = state
    i = 0
    while True:
        matched = book[i] if i < len(book) else None
        step = _compute_fill(amount, outcome, request.limit_prob, current, matched)
        if step is None:
            break
        if step.purchase is not None:
            current = step.purchase.state
            fees = fees + step.purchase.fees
        if step.maker is not None:
            makers.append(step.maker)
            i += 1
        takers.append(step.taker)
        amount -= step.taker.amount
        if floating_equal(amount, 0):
            break

    return TradeResult(
        outcome=outcome,
        order_amount=request.amount,
        state=current,
        prob_before=prob_before,
        prob_after=get_probability(current),
        limit_prob=request.limit_prob,
        takers=takers,
        makers=makers,
        fees=fees,
    )


def sort_book(outcome: Outcome, resting_orders: list[LimitOrder]) -> list[LimitOrder]:
    """Opposite-outcome, matchable orders; best price for the taker first, then oldest."""
    opposite = [o for o in resting_orders if o.outcome != outcome and o.is_matchable]
    if outcome == Outcome.YES:
        return sorted(opposite, key=lambda o: (o.limit_prob, o.created_time))
    return sorted(opposite, key=lambda o: (-o.limit_prob, o.created_time))


def _better_or_equal(a: float, b: float, outcome: Outcome) -> bool:
    """Is YES-probability ``a`` at least as cheap as ``b`` for a buyer of ``outcome``?"""
    return a <= b if outcome == Outcome.YES else a >= b


def _reached(prob: float, limit_prob: float, outcome: Outcome) -> bool:
    return prob >= limit_prob if outcome == Outcome.YES else prob <= limit_prob


def _compute_fill(
    amount: float,
    outcome: Outcome,
    limit_prob: float | None,
    state: CpmmState,
    matched: LimitOrder | None,
) -> _StepFill | None:
    prob = get_probability(state)
    matched_within_limit = matched is not None and (
        limit_prob is None or _better_or_equal(matched.limit_prob, limit_prob, outcome)
    )

    if limit_prob is not None and not matched_within_limit and _reached(prob, limit_prob, outcome):
        # Pool is at the taker's limit and no order inside it remains.
        return None

    if matched is None or not _better_or_equal(matched.limit_prob, prob, outcome):
        step = _fill_from_pool(amount, outcome, limit_prob, state, matched)
        if step is not None or matched is None or not matched_within_limit:
            return step
        # Pool already sits on the order's price: the order fills next.

    return _fill_from_order(amount, outcome, matched)


def _fill_from_pool(
    amount: float,
    outcome: Outcome,
    limit_prob: float | None,
    state: CpmmState,
    matched: LimitOrder | None,
) -> _StepFill | None:
    if matched is None:
        limit = limit_prob
    elif outcome == Outcome.YES:
        limit = min(matched.limit_prob, limit_prob if limit_prob is not None else 1.0)
    else:
        limit = max(matched.limit_prob, limit_prob if limit_prob is not None else 0.0)

    if limit is None:
        buy_amount = amount
    else:
        buy_amount = min(amount, calculate_amount_to_prob(state, limit, outcome))
    if buy_amount <= 0 or floating_equal(buy_amount, 0):
        return None

    purchase = calculate_purchase(state, buy_amount, outcome)
    taker = Fill(matched_order_id=None, amount=buy_amount, shares=purchase.shares)
    return _StepFill(taker=taker, purchase=purchase)


def _fill_from_order(amount: float, outcome: Outcome, matched: LimitOrder) -> _StepFill:
    taker_price = outcome_probability(matched.limit_prob, outcome)
    maker_price = 1 - taker_price
    shares = min(amount / taker_price, matched.remaining / maker_price)

    maker = MakerFill(order=matched, amount=shares * maker_price, shares=shares)
    taker = Fill(matched_order_id=matched.id, amount=shares * taker_price, shares=shares)
    return _StepFill(taker=taker, maker=maker)
