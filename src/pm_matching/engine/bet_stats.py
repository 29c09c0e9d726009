"""Payout preview for a bet: what the taker holds if the order fully fills."""
from src.pm_matching.domain.models import BetStats, LimitOrder, TradeRequest
from src.pm_matching.engine.matching_algo import match_order
from src.pm_pricing.domain.models import CpmmState
from src.pm_pricing.engine.cpmm import outcome_probability


def get_bet_stats(
    request: TradeRequest, state: CpmmState, resting_orders: list[LimitOrder]
) -> BetStats:
    result = match_order(request, state, resting_orders)

    # The unfilled part of a limit order buys at exactly its limit price.
    remaining_matched = 0.0
    if request.limit_prob is not None:
        price = outcome_probability(request.limit_prob, request.outcome)
        remaining_matched = result.remaining_amount / price

    current_payout = result.shares + remaining_matched
    current_return = (current_payout - request.amount) / request.amount
    return BetStats(
        result=result,
        current_payout=current_payout,
        current_return=current_return,
        total_fees=result.total_fees,
    )
