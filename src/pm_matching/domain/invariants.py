"""Trade invariant verification, run on every result before it is committed."""

import logging

from src.pm_common.enums import Outcome
from src.pm_common.floats import floating_lesser_equal
from src.pm_matching.domain.models import (
    Fill,
    LimitOrder,
    MakerFill,
    SaleResult,
    TradeResult,
    merge_maker_fills,
)
from src.pm_pricing.engine.cpmm import validate_state

logger = logging.getLogger(__name__)


def verify_trade_invariants(result: TradeResult, resting_orders: list[LimitOrder]) -> None:
    """Verify critical invariants of a computed buy. Raises AssertionError if violated.

    INV-1: resulting pool is valid (DegenerateMarketError otherwise)
    INV-2: taker never spends more than requested
    INV-3: a pool fill moves the probability toward the bought outcome
    INV-4: no resting order is filled beyond its order amount
    """
    validate_state(result.state)

    assert floating_lesser_equal(result.amount, result.order_amount), (
        f"INV-2 violated: filled {result.amount} > requested {result.order_amount}"
    )
    _verify_price_moved(result.takers, result.outcome, result.prob_before, result.prob_after)
    _verify_makers(result.makers, resting_orders)

    logger.debug(
        "Invariants OK: buy %s amount=%.6f, prob %.6f -> %.6f",
        result.outcome.value,
        result.amount,
        result.prob_before,
        result.prob_after,
    )


def verify_sale_invariants(sale: SaleResult, resting_orders: list[LimitOrder]) -> None:
    """Same checks for a sale; selling an outcome moves the price away from it."""
    validate_state(sale.state)
    _verify_price_moved(sale.takers, sale.outcome.opposite, sale.prob_before, sale.prob_after)
    _verify_makers(sale.makers, resting_orders)

    logger.debug(
        "Invariants OK: sell %s shares=%.6f value=%.6f",
        sale.outcome.value,
        sale.shares_sold,
        sale.sale_value,
    )


def _verify_price_moved(
    takers: list[Fill], bought: Outcome, prob_before: float, prob_after: float
) -> None:
    if not any(t.matched_order_id is None for t in takers):
        return
    moved = prob_after > prob_before if bought == Outcome.YES else prob_after < prob_before
    assert moved, (
        f"INV-3 violated: {bought.value} buy moved prob {prob_before} -> {prob_after}"
    )


def _verify_makers(makers: list[MakerFill], resting_orders: list[LimitOrder]) -> None:
    known = {o.id for o in resting_orders}
    for order in merge_maker_fills(makers):
        assert order.id in known, f"INV-4 violated: unknown order {order.id}"
        assert floating_lesser_equal(order.amount, order.order_amount), (
            f"INV-4 violated: order {order.id} filled {order.amount} > {order.order_amount}"
        )
