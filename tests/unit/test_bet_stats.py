"""Unit tests for bet payout previews."""
import pytest

from src.pm_common.enums import Outcome
from src.pm_matching.domain.models import LimitOrder, TradeRequest
from src.pm_matching.engine.bet_stats import get_bet_stats
from src.pm_pricing.domain.models import CpmmState

EVEN = CpmmState(pool_yes=100.0, pool_no=100.0, p=0.5)


class TestBetStats:
    def test_market_order_payout_is_shares(self) -> None:
        stats = get_bet_stats(TradeRequest(Outcome.YES, 100.0), EVEN, [])
        assert stats.current_payout == pytest.approx(stats.result.shares)
        assert stats.current_return == pytest.approx((stats.result.shares - 100.0) / 100.0)
        assert stats.total_fees == pytest.approx(stats.result.fees.total)

    def test_unfilled_limit_order_pays_at_limit(self) -> None:
        stats = get_bet_stats(TradeRequest(Outcome.YES, 100.0, limit_prob=0.4), EVEN, [])
        assert stats.result.shares == 0
        assert stats.current_payout == pytest.approx(250.0)
        assert stats.current_return == pytest.approx(1.5)
        assert stats.total_fees == 0

    def test_no_limit_remainder_priced_at_complement(self) -> None:
        stats = get_bet_stats(TradeRequest(Outcome.NO, 30.0, limit_prob=0.7), EVEN, [])
        # NO at 0.7 costs 0.3 per share
        assert stats.current_payout == pytest.approx(100.0)

    def test_order_fill_counts_toward_payout(self) -> None:
        ask = LimitOrder(id="ask", outcome=Outcome.NO, limit_prob=0.4, order_amount=60.0)
        stats = get_bet_stats(TradeRequest(Outcome.YES, 20.0), EVEN, [ask])
        # 20 mana at 0.40 buys 50 shares, no pool fees
        assert stats.current_payout == pytest.approx(50.0)
        assert stats.total_fees == 0
