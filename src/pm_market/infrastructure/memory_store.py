"""InMemoryMarketStore — process-local implementation of MarketStoreProtocol.

Each market carries a version counter. A commit is accepted only against the
version its snapshot was read at, so two trades that read the same pool
cannot both land; the loser gets ConcurrentModificationError and re-runs.
"""

import asyncio
import logging
from collections import defaultdict
from dataclasses import replace

from src.pm_common.errors import ConcurrentModificationError, MarketNotFoundError
from src.pm_market.domain.models import Market, MarketSnapshot
from src.pm_matching.domain.models import BetRecord, Fill, LimitOrder, TradeCommit, UserBet
from src.pm_pricing.domain.models import CpmmState
from src.pm_pricing.engine.cpmm import outcome_probability

logger = logging.getLogger(__name__)


class InMemoryMarketStore:
    def __init__(self) -> None:
        self._markets: dict[str, Market] = {}
        self._versions: dict[str, int] = {}
        self._orders: dict[str, dict[str, LimitOrder]] = defaultdict(dict)
        self._bets: dict[str, list[BetRecord]] = defaultdict(list)
        self._locks: dict[str, asyncio.Lock] = defaultdict(asyncio.Lock)

    async def add_market(self, market: Market) -> None:
        async with self._locks[market.id]:
            self._markets[market.id] = market
            self._versions[market.id] = 0

    async def add_order(self, market_id: str, order: LimitOrder) -> None:
        """Seed a resting order directly (fixtures, migrations)."""
        async with self._locks[market_id]:
            self._require(market_id)
            self._orders[market_id][order.id] = order
            self._versions[market_id] += 1

    async def get_snapshot(self, market_id: str) -> MarketSnapshot:
        async with self._locks[market_id]:
            market = self._require(market_id)
            open_orders = sorted(
                (o for o in self._orders[market_id].values() if o.is_matchable),
                key=lambda o: o.created_time,
            )
            return MarketSnapshot(
                market=market,
                resting_orders=tuple(open_orders),
                version=self._versions[market_id],
            )

    async def get_user_bets(self, market_id: str, user_id: str) -> list[UserBet]:
        return [b.to_user_bet() for b in self._bets[market_id] if b.user_id == user_id]

    async def commit_trade(
        self, market_id: str, expected_version: int, commit: TradeCommit
    ) -> int:
        async with self._locks[market_id]:
            market = self._require(market_id)
            actual = self._versions[market_id]
            if actual != expected_version:
                raise ConcurrentModificationError(market_id, expected_version, actual)

            self._markets[market_id] = replace(
                market,
                state=commit.state,
                total_liquidity=market.total_liquidity + commit.bet.fees.liquidity_fee,
            )
            orders = self._orders[market_id]
            for order in commit.updated_orders:
                previous = orders.get(order.id)
                if previous is not None:
                    filled = order.amount - previous.amount
                    self._credit_maker(market_id, order, filled, commit.bet.id)
                orders[order.id] = order
            if commit.new_order is not None:
                orders[commit.new_order.id] = commit.new_order
            self._bets[market_id].append(commit.bet)

            self._versions[market_id] = actual + 1
            logger.debug(
                "Committed bet %s on market %s: version %d -> %d",
                commit.bet.id,
                market_id,
                actual,
                actual + 1,
            )
            return actual + 1

    async def commit_liquidity(
        self, market_id: str, expected_version: int, state: CpmmState, liquidity: float
    ) -> int:
        async with self._locks[market_id]:
            market = self._require(market_id)
            actual = self._versions[market_id]
            if actual != expected_version:
                raise ConcurrentModificationError(market_id, expected_version, actual)
            self._markets[market_id] = replace(
                market, state=state, total_liquidity=market.total_liquidity + liquidity
            )
            self._versions[market_id] = actual + 1
            return actual + 1

    def _credit_maker(
        self, market_id: str, order: LimitOrder, filled: float, taker_bet_id: str
    ) -> None:
        """Add a maker fill to the limit bet that placed ``order``, so its owner can sell."""
        if filled <= 0:
            return
        shares = filled / outcome_probability(order.limit_prob, order.outcome)
        bets = self._bets[market_id]
        for i, bet in enumerate(bets):
            if bet.id == order.id:
                bets[i] = replace(
                    bet,
                    amount=bet.amount + filled,
                    shares=bet.shares + shares,
                    fills=(*bet.fills, Fill(taker_bet_id, filled, shares)),
                    is_filled=order.is_filled,
                )
                return

    def bets(self, market_id: str) -> list[BetRecord]:
        return list(self._bets[market_id])

    def orders(self, market_id: str) -> list[LimitOrder]:
        return list(self._orders[market_id].values())

    def _require(self, market_id: str) -> Market:
        market = self._markets.get(market_id)
        if market is None:
            raise MarketNotFoundError(market_id)
        return market
