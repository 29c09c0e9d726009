"""MarketApplicationService — thin composition layer over the market store."""

import logging
import uuid

from src.pm_common.datetime_utils import utc_now_ms
from src.pm_market.application.schemas import CreateMarketRequest, MarketDetail
from src.pm_market.domain.models import Market
from src.pm_market.domain.repository import MarketStoreProtocol
from src.pm_pricing.engine.cpmm import add_liquidity, get_liquidity, validate_state

logger = logging.getLogger(__name__)


class MarketApplicationService:
    def __init__(self, store: MarketStoreProtocol) -> None:
        self._store = store

    async def create_market(self, req: CreateMarketRequest) -> MarketDetail:
        state = req.state.to_domain()
        validate_state(state)
        market = Market(
            id=uuid.uuid4().hex,
            question=req.question,
            state=state,
            scale=req.scale.to_domain(),
            total_liquidity=get_liquidity(state),
            created_time=utc_now_ms(),
        )
        await self._store.add_market(market)
        logger.info("Created market %s: %r", market.id, market.question)
        return MarketDetail.from_snapshot(await self._store.get_snapshot(market.id))

    async def get_market(self, market_id: str) -> MarketDetail:
        return MarketDetail.from_snapshot(await self._store.get_snapshot(market_id))

    async def subsidize(self, market_id: str, amount: float) -> MarketDetail:
        """Add ``amount`` to both reserves without moving the probability.

        A concurrent trade between the read and the commit surfaces as
        ConcurrentModificationError; the caller may simply resend.
        """
        snapshot = await self._store.get_snapshot(market_id)
        new_state, liquidity = add_liquidity(snapshot.market.state, amount)
        await self._store.commit_liquidity(market_id, snapshot.version, new_state, liquidity)
        logger.info(
            "Market %s subsidized with %.4f (liquidity +%.4f)", market_id, amount, liquidity
        )
        return MarketDetail.from_snapshot(await self._store.get_snapshot(market_id))
