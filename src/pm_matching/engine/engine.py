"""TradingEngine — read-match-commit orchestrator with optimistic retry.

The pricing and matching functions are pure; this class is the calling
layer that makes them safe under concurrent trading. Each attempt reads a
fresh snapshot, recomputes the whole trade and commits against the
snapshot's version. A ConcurrentModificationError from the store discards
the computed result and starts over; nothing is locked inside the engine.
"""
import logging
import uuid
from collections.abc import Awaitable, Callable

from config.settings import settings
from src.pm_common.datetime_utils import utc_now_ms
from src.pm_common.enums import Outcome
from src.pm_common.errors import ConcurrentModificationError
from src.pm_market.domain.models import MarketSnapshot
from src.pm_market.domain.repository import MarketStoreProtocol
from src.pm_matching.domain.invariants import verify_sale_invariants, verify_trade_invariants
from src.pm_matching.domain.models import (
    BetRecord,
    LimitOrder,
    TradeCommit,
    TradeRequest,
)
from src.pm_matching.engine.matching_algo import match_order
from src.pm_matching.engine.range_order import plan_range_order
from src.pm_matching.engine.sale import calculate_sale, owned_shares, resolve_sell_quantity

logger = logging.getLogger(__name__)


class TradingEngine:
    def __init__(self, store: MarketStoreProtocol, max_retries: int | None = None) -> None:
        self._store = store
        self._max_retries = max_retries if max_retries is not None else settings.MAX_TRADE_RETRIES

    async def place_bet(self, market_id: str, user_id: str, request: TradeRequest) -> BetRecord:
        """Main entry point for buys and limit orders."""

        async def build(snapshot: MarketSnapshot) -> TradeCommit:
            return self._build_bet(snapshot, user_id, request)

        return await self._commit_with_retry(market_id, build)

    async def place_range_order(
        self,
        market_id: str,
        user_id: str,
        amount: float,
        low_limit_prob: float | None,
        high_limit_prob: float | None,
    ) -> list[BetRecord]:
        """Place each leg of a range order as its own limit bet, YES leg first."""
        plan = plan_range_order(amount, low_limit_prob, high_limit_prob)
        return [await self.place_bet(market_id, user_id, req) for req in plan.requests()]

    async def sell_shares(
        self, market_id: str, user_id: str, outcome: Outcome, shares: float
    ) -> BetRecord:
        async def build(snapshot: MarketSnapshot) -> TradeCommit:
            bets = await self._store.get_user_bets(market_id, user_id)
            yes_shares, no_shares = owned_shares(bets)
            owned = yes_shares if outcome == Outcome.YES else no_shares
            quantity = resolve_sell_quantity(shares, owned)
            return self._build_sale(snapshot, user_id, outcome, quantity)

        return await self._commit_with_retry(market_id, build)

    async def _commit_with_retry(
        self,
        market_id: str,
        build: Callable[[MarketSnapshot], Awaitable[TradeCommit]],
    ) -> BetRecord:
        attempt = 0
        while True:
            attempt += 1
            snapshot = await self._store.get_snapshot(market_id)
            commit = await build(snapshot)
            try:
                version = await self._store.commit_trade(market_id, snapshot.version, commit)
            except ConcurrentModificationError:
                if attempt >= self._max_retries:
                    logger.error(
                        "Giving up on market %s after %d conflicting attempts", market_id, attempt
                    )
                    raise
                logger.warning(
                    "Market %s changed during trade (attempt %d/%d), retrying",
                    market_id,
                    attempt,
                    self._max_retries,
                )
                continue

            bet = commit.bet
            logger.info(
                "%s %s on %s: amount=%.4f shares=%.4f prob %.4f -> %.4f (v%d)",
                "Sold" if bet.is_sale else "Bet",
                bet.outcome.value,
                market_id,
                bet.amount,
                bet.shares,
                bet.prob_before,
                bet.prob_after,
                version,
            )
            return bet

    def _build_bet(
        self, snapshot: MarketSnapshot, user_id: str, request: TradeRequest
    ) -> TradeCommit:
        orders = list(snapshot.resting_orders)
        result = match_order(request, snapshot.market.state, orders)
        verify_trade_invariants(result, orders)

        now = utc_now_ms()
        bet = BetRecord(
            id=uuid.uuid4().hex,
            market_id=snapshot.market.id,
            user_id=user_id,
            outcome=request.outcome,
            order_amount=request.amount,
            amount=result.amount,
            shares=result.shares,
            prob_before=result.prob_before,
            prob_after=result.prob_after,
            fees=result.fees,
            fills=tuple(result.takers),
            created_time=now,
            limit_prob=request.limit_prob,
            is_filled=result.is_filled,
        )

        new_order = None
        if request.limit_prob is not None and not result.is_filled:
            # The unfilled remainder rests on the book under the bet's id.
            new_order = LimitOrder(
                id=bet.id,
                outcome=request.outcome,
                limit_prob=request.limit_prob,
                order_amount=request.amount,
                amount=result.amount,
                created_time=now,
                user_id=user_id,
            )

        return TradeCommit(
            state=result.state,
            bet=bet,
            updated_orders=tuple(result.updated_orders()),
            new_order=new_order,
        )

    def _build_sale(
        self, snapshot: MarketSnapshot, user_id: str, outcome: Outcome, shares: float
    ) -> TradeCommit:
        orders = list(snapshot.resting_orders)
        sale = calculate_sale(snapshot.market.state, shares, outcome, orders)
        verify_sale_invariants(sale, orders)

        bet = BetRecord(
            id=uuid.uuid4().hex,
            market_id=snapshot.market.id,
            user_id=user_id,
            outcome=outcome,
            order_amount=-sale.sale_value,
            amount=-sale.sale_value,
            shares=-shares,
            prob_before=sale.prob_before,
            prob_after=sale.prob_after,
            fees=sale.fees,
            fills=tuple(sale.takers),
            created_time=utc_now_ms(),
            is_sale=True,
        )
        return TradeCommit(
            state=sale.state,
            bet=bet,
            updated_orders=tuple(sale.updated_orders()),
        )
