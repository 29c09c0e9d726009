"""Sell path: selling N shares of an outcome is buying N shares of the opposite.

A YES share plus a NO share always redeem for one mana, so the seller buys
opposite shares (through the same book and pool as any taker) and the pair
cancels out. The sale value is what the pairs are worth minus what the
opposite shares cost.
"""
import math

from src.pm_common.enums import Outcome
from src.pm_common.errors import InsufficientSharesError
from src.pm_common.floats import floating_equal
from src.pm_matching.domain.models import Fill, LimitOrder, SaleResult, TradeRequest, UserBet
from src.pm_matching.engine.matching_algo import match_order
from src.pm_pricing.domain.models import CpmmState
from src.pm_pricing.engine.cpmm import binary_search, get_probability
from src.pm_risk.rules.order_limit import check_amount


def calculate_sale(
    state: CpmmState,
    shares: float,
    outcome: Outcome,
    resting_orders: list[LimitOrder],
) -> SaleResult:
    check_amount(shares)
    prob_before = get_probability(state)
    opposite = outcome.opposite

    buy_amount = _amount_to_buy_shares(state, shares, opposite, resting_orders)
    result = match_order(TradeRequest(opposite, buy_amount), state, resting_orders)

    sale_takers = [
        Fill(
            matched_order_id=t.matched_order_id,
            amount=-(t.shares - t.amount),
            shares=-t.shares,
            is_sale=True,
        )
        for t in result.takers
    ]
    sale_value = -sum(t.amount for t in sale_takers)

    return SaleResult(
        outcome=outcome,
        shares_sold=shares,
        sale_value=sale_value,
        state=result.state,
        prob_before=prob_before,
        prob_after=result.prob_after,
        takers=sale_takers,
        makers=result.makers,
        fees=result.fees,
    )


def _amount_to_buy_shares(
    state: CpmmState, shares: float, outcome: Outcome, resting_orders: list[LimitOrder]
) -> float:
    def shares_bought(amount: float) -> float:
        if floating_equal(amount, 0):
            return 0.0
        return match_order(TradeRequest(outcome, amount), state, resting_orders).shares

    # A share costs under one mana before fees; widen until the bound holds.
    upper = shares
    while shares_bought(upper) < shares:
        upper *= 2

    return binary_search(0.0, upper, lambda amount: shares_bought(amount) - shares)


def owned_shares(bets: list[UserBet]) -> tuple[float, float]:
    """(yes_shares, no_shares) across the holder's open bets."""
    open_bets = [b for b in bets if not b.is_sold]
    yes = sum(b.shares for b in open_bets if b.outcome == Outcome.YES)
    no = sum(b.shares for b in open_bets if b.outcome == Outcome.NO)
    return yes, no


def resolve_sell_quantity(requested: float, owned: float) -> float:
    """Shares that will actually be sold for a requested quantity.

    Requests are capped at the rounded balance. Requesting the whole-share
    part of the balance, or anything above the exact balance, sells the exact
    balance so no unsellable fraction below one share is left behind.
    """
    check_amount(requested)
    max_shares = round(owned)
    if requested > max(max_shares, owned):
        raise InsufficientSharesError(max_shares)
    if requested == math.floor(owned) or requested >= owned:
        return owned
    return requested
