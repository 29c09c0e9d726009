"""Unit tests for the sell path and the sell-all quantity rule."""
import pytest

from config.settings import settings
from src.pm_common.enums import Outcome
from src.pm_common.errors import InsufficientSharesError, InvalidAmountError
from src.pm_matching.domain.models import LimitOrder, TradeRequest, UserBet
from src.pm_matching.engine.matching_algo import match_order
from src.pm_matching.engine.sale import calculate_sale, owned_shares, resolve_sell_quantity
from src.pm_pricing.domain.models import CpmmState

EVEN = CpmmState(pool_yes=100.0, pool_no=100.0, p=0.5)


@pytest.fixture
def no_fees(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(settings, "PLATFORM_FEE_RATE", 0.0)
    monkeypatch.setattr(settings, "CREATOR_FEE_RATE", 0.0)
    monkeypatch.setattr(settings, "LIQUIDITY_FEE_RATE", 0.0)


class TestCalculateSale:
    def test_round_trip_loses_the_fees(self) -> None:
        bought = match_order(TradeRequest(Outcome.YES, 100.0), EVEN, [])
        sale = calculate_sale(bought.state, bought.shares, Outcome.YES, [])
        assert 0 < sale.sale_value < 100.0
        assert sale.prob_after < sale.prob_before
        assert sale.fees.total > 0

    def test_round_trip_without_fees_is_exact(self, no_fees: None) -> None:
        bought = match_order(TradeRequest(Outcome.YES, 100.0), EVEN, [])
        sale = calculate_sale(bought.state, bought.shares, Outcome.YES, [])
        assert sale.sale_value == pytest.approx(100.0, abs=1e-6)
        assert sale.state.pool_yes == pytest.approx(100.0, abs=1e-6)
        assert sale.state.pool_no == pytest.approx(100.0, abs=1e-6)

    def test_sale_into_resting_order(self) -> None:
        # A YES bid at 0.70 beats the pool at 0.60: 10 shares sell for 7 mana
        bid = LimitOrder(id="bid", outcome=Outcome.YES, limit_prob=0.7, order_amount=70.0)
        state = CpmmState(pool_yes=40.0, pool_no=60.0, p=0.5)

        sale = calculate_sale(state, 10.0, Outcome.YES, [bid])

        assert sale.sale_value == pytest.approx(7.0, abs=1e-6)
        assert sale.state == state
        assert sale.takers[0].matched_order_id == "bid"
        assert sale.takers[0].is_sale
        assert sale.takers[0].shares == pytest.approx(-10.0)
        assert sale.updated_orders()[0].amount == pytest.approx(7.0, abs=1e-6)

    def test_selling_no_raises_probability(self) -> None:
        sale = calculate_sale(EVEN, 20.0, Outcome.NO, [])
        assert sale.prob_after > 0.5
        assert sale.shares_sold == 20.0

    def test_zero_shares_rejected(self) -> None:
        with pytest.raises(InvalidAmountError):
            calculate_sale(EVEN, 0.0, Outcome.YES, [])


class TestOwnedShares:
    def test_sums_per_outcome_and_skips_sold(self) -> None:
        bets = [
            UserBet(Outcome.YES, 10.0),
            UserBet(Outcome.YES, 5.0),
            UserBet(Outcome.YES, -3.0),  # partial sale
            UserBet(Outcome.NO, 8.0),
            UserBet(Outcome.NO, 100.0, is_sold=True),
        ]
        assert owned_shares(bets) == (pytest.approx(12.0), pytest.approx(8.0))

    def test_no_bets(self) -> None:
        assert owned_shares([]) == (0, 0)


class TestResolveSellQuantity:
    def test_floor_request_sells_everything(self) -> None:
        assert resolve_sell_quantity(7.0, 7.3) == 7.3

    def test_rounded_request_sells_everything(self) -> None:
        assert resolve_sell_quantity(8.0, 7.6) == 7.6
        assert resolve_sell_quantity(7.0, 7.6) == 7.6

    def test_request_between_balance_and_rounded_balance(self) -> None:
        assert resolve_sell_quantity(7.8, 7.6) == 7.6

    def test_fractional_balance_below_one_share(self) -> None:
        assert resolve_sell_quantity(0.3, 0.3) == 0.3

    def test_partial_request_kept(self) -> None:
        assert resolve_sell_quantity(5.0, 7.3) == 5.0
        assert resolve_sell_quantity(2.5, 7.3) == 2.5

    def test_more_than_owned_rejected(self) -> None:
        with pytest.raises(InsufficientSharesError) as exc_info:
            resolve_sell_quantity(9.0, 7.3)
        assert exc_info.value.message == "Maximum 7 shares"
        assert exc_info.value.code == 5001

    def test_thousands_separator(self) -> None:
        with pytest.raises(InsufficientSharesError) as exc_info:
            resolve_sell_quantity(5000.0, 1234.4)
        assert exc_info.value.message == "Maximum 1,234 shares"

    def test_non_positive_request_rejected(self) -> None:
        with pytest.raises(InvalidAmountError):
            resolve_sell_quantity(0.0, 7.3)
