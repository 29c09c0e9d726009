# src/pm_market/domain/repository.py
"""Market store Protocol — the engine's only persistence contract.

Unit tests inject a mock that conforms to this Protocol.
Infrastructure layer provides the real implementation.
"""

from typing import Protocol

from src.pm_market.domain.models import Market, MarketSnapshot
from src.pm_matching.domain.models import TradeCommit, UserBet
from src.pm_pricing.domain.models import CpmmState


class MarketStoreProtocol(Protocol):
    async def add_market(self, market: Market) -> None: ...

    async def get_snapshot(self, market_id: str) -> MarketSnapshot:
        """Raise MarketNotFoundError for an unknown id."""
        ...

    async def get_user_bets(self, market_id: str, user_id: str) -> list[UserBet]: ...

    async def commit_trade(
        self, market_id: str, expected_version: int, commit: TradeCommit
    ) -> int:
        """Apply ``commit`` atomically and return the new version.

        Raise ConcurrentModificationError if the market is no longer at
        ``expected_version``.
        """
        ...

    async def commit_liquidity(
        self, market_id: str, expected_version: int, state: CpmmState, liquidity: float
    ) -> int:
        """Replace the pool after a subsidy; same version check as commit_trade."""
        ...
