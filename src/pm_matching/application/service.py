# src/pm_matching/application/service.py
from src.pm_market.infrastructure.memory_store import InMemoryMarketStore
from src.pm_matching.engine.engine import TradingEngine

_store: InMemoryMarketStore | None = None
_engine: TradingEngine | None = None


def get_market_store() -> InMemoryMarketStore:
    global _store  # noqa: PLW0603
    if _store is None:
        _store = InMemoryMarketStore()
    return _store


def get_trading_engine() -> TradingEngine:
    global _engine  # noqa: PLW0603
    if _engine is None:
        _engine = TradingEngine(get_market_store())
    return _engine


def reset_services() -> None:
    """Drop the process-wide store and engine; the next getter call rebuilds them."""
    global _store, _engine  # noqa: PLW0603
    _store = None
    _engine = None
