"""Unit tests for range order planning and previews."""
import pytest

from src.pm_common.enums import Outcome
from src.pm_common.errors import AppError, InvalidAmountError, InvertedRangeError, OutOfRangeError
from src.pm_matching.engine.range_order import (
    default_range_bounds,
    match_range_order,
    plan_range_order,
    preview_limit_prob,
    preview_request,
)
from src.pm_pricing.domain.models import CpmmState

EVEN = CpmmState(pool_yes=100.0, pool_no=100.0, p=0.5)


class TestPlanRangeOrder:
    def test_both_bounds_split_into_equal_shares(self) -> None:
        plan = plan_range_order(100.0, 0.4, 0.6)
        assert plan.shares == pytest.approx(250.0)
        assert plan.yes_amount == pytest.approx(100.0)
        assert plan.no_amount == pytest.approx(100.0)
        assert plan.has_two_bets
        assert plan.profit_if_both_filled == pytest.approx(50.0)

    def test_asymmetric_bounds_use_smaller_share_count(self) -> None:
        plan = plan_range_order(100.0, 0.2, 0.6)
        # 100 / 0.4 = 250 < 100 / 0.2 = 500
        assert plan.shares == pytest.approx(250.0)
        assert plan.yes_amount == pytest.approx(50.0)
        assert plan.no_amount == pytest.approx(100.0)

    def test_low_only(self) -> None:
        plan = plan_range_order(100.0, 0.25, None)
        assert plan.shares == pytest.approx(400.0)
        assert not plan.has_two_bets
        assert [r.outcome for r in plan.requests()] == [Outcome.YES]

    def test_high_only(self) -> None:
        plan = plan_range_order(100.0, None, 0.75)
        assert plan.shares == pytest.approx(400.0)
        (req,) = plan.requests()
        assert req.outcome == Outcome.NO
        assert req.limit_prob == 0.75
        assert req.amount == 100.0

    def test_requests_carry_limits(self) -> None:
        yes_req, no_req = plan_range_order(100.0, 0.4, 0.6).requests()
        assert (yes_req.outcome, yes_req.limit_prob) == (Outcome.YES, 0.4)
        assert (no_req.outcome, no_req.limit_prob) == (Outcome.NO, 0.6)

    def test_legs_skip_missing_bound(self) -> None:
        assert plan_range_order(100.0, None, 0.75).legs() == [(Outcome.NO, 100.0, 0.75)]

    def test_inverted_range(self) -> None:
        with pytest.raises(InvertedRangeError) as exc_info:
            plan_range_order(100.0, 0.6, 0.5)
        assert exc_info.value.code == 4007

    def test_equal_bounds_are_inverted(self) -> None:
        with pytest.raises(InvertedRangeError):
            plan_range_order(100.0, 0.5, 0.5)

    def test_bound_out_of_range(self) -> None:
        with pytest.raises(OutOfRangeError):
            plan_range_order(100.0, 0.0, 0.6)

    def test_no_bounds(self) -> None:
        with pytest.raises(AppError) as exc_info:
            plan_range_order(100.0, None, None)
        assert exc_info.value.code == 4008

    def test_bad_amount(self) -> None:
        with pytest.raises(InvalidAmountError):
            plan_range_order(-1.0, 0.4, 0.6)


class TestMatchRangeOrder:
    def test_both_legs_rest_when_price_inside_range(self) -> None:
        yes_leg, no_leg = match_range_order(plan_range_order(100.0, 0.4, 0.6), EVEN, [])
        assert yes_leg.takers == [] and no_leg.takers == []
        assert not yes_leg.is_filled and not no_leg.is_filled

    def test_legs_match_same_snapshot(self) -> None:
        yes_leg, no_leg = match_range_order(plan_range_order(100.0, 0.55, 0.6), EVEN, [])
        # YES leg buys up to 0.55; NO leg sees the untouched pool at 0.5
        assert yes_leg.prob_after == pytest.approx(0.55, abs=1e-9)
        assert no_leg.prob_before == pytest.approx(0.5)
        assert no_leg.takers == []


class TestPreview:
    def test_default_bounds(self) -> None:
        low, high = default_range_bounds(0.5)
        assert low == pytest.approx(0.45)
        assert high == pytest.approx(0.55)

    def test_preview_clamped(self) -> None:
        assert preview_limit_prob(Outcome.YES, 0.9995) == 0.999
        assert preview_limit_prob(Outcome.NO, 0.005) == 0.01

    def test_given_bound_kept(self) -> None:
        req = preview_request(Outcome.YES, 40.0, 0.3)
        assert req.limit_prob == 0.3
        assert req.amount == 40.0
