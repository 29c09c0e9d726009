"""Domain models for pm_market — pure dataclasses, no business logic."""

from dataclasses import dataclass, field

from src.pm_matching.domain.models import LimitOrder
from src.pm_pricing.domain.models import CpmmState
from src.pm_pricing.domain.scale import BinaryScale, MarketScale


@dataclass(frozen=True)
class Market:
    id: str
    question: str
    state: CpmmState
    scale: MarketScale = field(default_factory=BinaryScale)
    total_liquidity: float = 0.0
    created_time: int = 0


@dataclass(frozen=True)
class MarketSnapshot:
    """Consistent read of one market: pool, open book and the version it was read at."""

    market: Market
    resting_orders: tuple[LimitOrder, ...]
    version: int
