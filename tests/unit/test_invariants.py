"""Tests for trade invariant verification."""
from dataclasses import replace

import pytest

from src.pm_common.enums import Outcome
from src.pm_common.errors import DegenerateMarketError
from src.pm_matching.domain.invariants import verify_sale_invariants, verify_trade_invariants
from src.pm_matching.domain.models import Fill, LimitOrder, MakerFill, TradeRequest
from src.pm_matching.engine.matching_algo import match_order
from src.pm_matching.engine.sale import calculate_sale
from src.pm_pricing.domain.models import CpmmState

EVEN = CpmmState(pool_yes=100.0, pool_no=100.0, p=0.5)
ASK = LimitOrder(id="ask", outcome=Outcome.NO, limit_prob=0.45, order_amount=20.0)


class TestTradeInvariants:
    def test_real_trade_passes(self) -> None:
        result = match_order(TradeRequest(Outcome.YES, 80.0), EVEN, [ASK])
        verify_trade_invariants(result, [ASK])

    def test_overspend_detected(self) -> None:
        result = match_order(TradeRequest(Outcome.YES, 80.0), EVEN, [])
        tampered = replace(result, order_amount=10.0)
        with pytest.raises(AssertionError, match="INV-2"):
            verify_trade_invariants(tampered, [])

    def test_price_moving_wrong_way_detected(self) -> None:
        result = match_order(TradeRequest(Outcome.YES, 80.0), EVEN, [])
        tampered = replace(result, prob_after=0.4)
        with pytest.raises(AssertionError, match="INV-3"):
            verify_trade_invariants(tampered, [])

    def test_unknown_maker_detected(self) -> None:
        result = match_order(TradeRequest(Outcome.YES, 80.0), EVEN, [ASK])
        with pytest.raises(AssertionError, match="INV-4"):
            verify_trade_invariants(result, [])

    def test_overfilled_maker_detected(self) -> None:
        result = match_order(TradeRequest(Outcome.YES, 5.0), EVEN, [ASK])
        overfill = MakerFill(order=ASK, amount=25.0, shares=50.0)
        tampered = replace(result, makers=[overfill])
        with pytest.raises(AssertionError, match="INV-4"):
            verify_trade_invariants(tampered, [ASK])

    def test_degenerate_state_detected(self) -> None:
        result = match_order(TradeRequest(Outcome.YES, 5.0), EVEN, [])
        tampered = replace(result, state=CpmmState(0.0, 100.0, 0.5))
        with pytest.raises(DegenerateMarketError):
            verify_trade_invariants(tampered, [])

    def test_order_only_fill_need_not_move_price(self) -> None:
        result = match_order(TradeRequest(Outcome.YES, 5.0), EVEN, [ASK])
        assert all(isinstance(t, Fill) and t.matched_order_id == "ask" for t in result.takers)
        verify_trade_invariants(result, [ASK])


class TestSaleInvariants:
    def test_real_sale_passes(self) -> None:
        sale = calculate_sale(EVEN, 30.0, Outcome.YES, [])
        verify_sale_invariants(sale, [])

    def test_sale_moving_toward_sold_outcome_detected(self) -> None:
        sale = calculate_sale(EVEN, 30.0, Outcome.YES, [])
        tampered = replace(sale, prob_after=0.6)
        with pytest.raises(AssertionError, match="INV-3"):
            verify_sale_invariants(tampered, [])
