"""Range orders: "bet when the probability reaches Low and/or High".

The request splits into a YES limit order at the low bound and a NO limit
order at the high bound. Amounts are sized so that both legs buy the same
number of shares; if both fill, exactly one leg pays out ``shares`` and the
position locks in ``shares - (yes_amount + no_amount)``.
"""
from src.pm_common.enums import Outcome
from src.pm_common.errors import AppError
from src.pm_matching.domain.models import LimitOrder, RangeOrderPlan, TradeRequest, TradeResult
from src.pm_matching.engine.matching_algo import match_order
from src.pm_pricing.domain.models import CpmmState
from src.pm_risk.rules.order_limit import check_amount
from src.pm_risk.rules.price_range import check_range_bounds

# Preview limits stay inside these
_MAX_PREVIEW_YES_PROB = 0.999
_MIN_PREVIEW_NO_PROB = 0.01


def plan_range_order(
    amount: float, low_limit_prob: float | None, high_limit_prob: float | None
) -> RangeOrderPlan:
    check_amount(amount)
    check_range_bounds(low_limit_prob, high_limit_prob)

    if high_limit_prob is None:
        if low_limit_prob is None:
            raise AppError(
                4008, "Range order needs a low limit, a high limit or both", http_status=422
            )
        return RangeOrderPlan(
            shares=amount / low_limit_prob,
            yes_amount=amount,
            no_amount=0.0,
            yes_limit_prob=low_limit_prob,
            no_limit_prob=None,
        )

    if low_limit_prob is None:
        return RangeOrderPlan(
            shares=amount / (1 - high_limit_prob),
            yes_amount=0.0,
            no_amount=amount,
            yes_limit_prob=None,
            no_limit_prob=high_limit_prob,
        )

    shares = min(amount / low_limit_prob, amount / (1 - high_limit_prob))
    return RangeOrderPlan(
        shares=shares,
        yes_amount=shares * low_limit_prob,
        no_amount=shares * (1 - high_limit_prob),
        yes_limit_prob=low_limit_prob,
        no_limit_prob=high_limit_prob,
    )


def match_range_order(
    plan: RangeOrderPlan, state: CpmmState, resting_orders: list[LimitOrder]
) -> list[TradeResult]:
    """Match each leg independently against the same snapshot."""
    return [match_order(req, state, resting_orders) for req in plan.requests()]


def default_range_bounds(prob: float) -> tuple[float, float]:
    """Suggested (low, high) shown as placeholders: 10% of the way toward each edge."""
    return prob * 0.9, prob + (1 - prob) * 0.1


def preview_limit_prob(outcome: Outcome, limit_prob: float) -> float:
    """Leg limit used for a preview, kept off the edges."""
    if outcome == Outcome.YES:
        return min(limit_prob, _MAX_PREVIEW_YES_PROB)
    return max(limit_prob, _MIN_PREVIEW_NO_PROB)


def preview_request(outcome: Outcome, amount: float, limit_prob: float) -> TradeRequest:
    return TradeRequest(outcome, amount, preview_limit_prob(outcome, limit_prob))
