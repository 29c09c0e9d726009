"""Unit tests for market request and detail schemas."""
import pytest
from pydantic import ValidationError

from src.pm_common.enums import Outcome
from src.pm_market.application.schemas import CreateMarketRequest, MarketDetail
from src.pm_market.domain.models import Market, MarketSnapshot
from src.pm_matching.domain.models import LimitOrder
from src.pm_pricing.domain.models import CpmmState
from src.pm_pricing.domain.scale import PseudoNumericScale


def _snapshot(*orders: LimitOrder, scale: PseudoNumericScale | None = None) -> MarketSnapshot:
    market = Market(id="mkt-1", question="Q?", state=CpmmState(40.0, 60.0, 0.5))
    if scale is not None:
        market = Market(id="mkt-1", question="Q?", state=market.state, scale=scale)
    return MarketSnapshot(market=market, resting_orders=orders, version=3)


class TestMarketDetail:
    def test_pool_and_probability(self) -> None:
        detail = MarketDetail.from_snapshot(_snapshot())
        assert detail.state.prob == pytest.approx(0.6)
        assert detail.prob_display == "60%"
        assert detail.outcome_type == "BINARY"
        assert detail.version == 3

    def test_book_levels_aggregate_remaining(self) -> None:
        detail = MarketDetail.from_snapshot(
            _snapshot(
                LimitOrder("a", Outcome.YES, 0.4, 10.0, amount=4.0),
                LimitOrder("b", Outcome.YES, 0.4, 5.0),
                LimitOrder("c", Outcome.YES, 0.5, 8.0),
                LimitOrder("d", Outcome.NO, 0.8, 3.0),
                LimitOrder("e", Outcome.NO, 0.7, 2.0),
            )
        )
        bids = [(lv.limit_prob, lv.total_amount) for lv in detail.orderbook.bids]
        asks = [(lv.limit_prob, lv.total_amount) for lv in detail.orderbook.asks]
        assert bids == [(0.5, 8.0), (0.4, pytest.approx(11.0))]
        assert asks == [(0.7, 2.0), (0.8, 3.0)]

    def test_pseudo_numeric_display(self) -> None:
        detail = MarketDetail.from_snapshot(_snapshot(scale=PseudoNumericScale(min=0, max=1000)))
        assert detail.outcome_type == "PSEUDO_NUMERIC"
        assert detail.prob_display == "600"


class TestCreateMarketRequest:
    def test_defaults_to_binary(self) -> None:
        req = CreateMarketRequest(question="Q?", state={"pool_yes": 10, "pool_no": 10})
        assert req.scale.outcome_type == "BINARY"
        assert req.state.p == 0.5

    def test_empty_question_rejected(self) -> None:
        with pytest.raises(ValidationError):
            CreateMarketRequest(question="", state={"pool_yes": 10, "pool_no": 10})

    def test_numeric_scale_needs_bounds(self) -> None:
        with pytest.raises(ValidationError):
            CreateMarketRequest(
                question="Q?",
                state={"pool_yes": 10, "pool_no": 10},
                scale={"outcome_type": "PSEUDO_NUMERIC", "min": 5, "max": 5},
            )
