"""Unified error codes and custom exceptions.

Error code ranges:
  3xxx: Market
  4xxx: Order / trade input
  5xxx: Position
  9xxx: System
"""


class AppError(Exception):
    """Base application error."""

    def __init__(
        self,
        code: int,
        message: str,
        http_status: int = 500,
    ) -> None:
        self.code = code
        self.message = message
        self.http_status = http_status
        super().__init__(message)


# --- 3xxx: Market ---

class MarketNotFoundError(AppError):
    def __init__(self, market_id: str) -> None:
        super().__init__(3001, f"Market not found: {market_id}", 404)


# --- 4xxx: Order ---

class OutOfRangeError(AppError):
    def __init__(self, limit_prob: float) -> None:
        super().__init__(4001, f"Limit probability out of range (0, 1): {limit_prob}", 422)


class InvalidAmountError(AppError):
    def __init__(self, amount: float | None) -> None:
        super().__init__(4002, f"Amount must be positive, got {amount}", 422)


class InvertedRangeError(AppError):
    def __init__(self, low: float, high: float) -> None:
        super().__init__(
            4007, f"Low limit must be less than high limit: low={low}, high={high}", 422
        )


# --- 5xxx: Position ---

class InsufficientSharesError(AppError):
    def __init__(self, max_shares: int) -> None:
        super().__init__(5001, f"Maximum {max_shares:,} shares", 422)


# --- 9xxx: System ---

class ConcurrentModificationError(AppError):
    """Raised by a market store when the snapshot changed under a commit."""

    def __init__(self, market_id: str, expected: int, actual: int) -> None:
        super().__init__(
            9003,
            f"Market {market_id} changed concurrently: expected version {expected}, got {actual}",
            409,
        )


class DegenerateMarketError(AppError):
    """Pool state at or beyond the boundary. Caller-supplied state is corrupt."""

    def __init__(self, detail: str) -> None:
        super().__init__(9004, f"Degenerate market state: {detail}", 500)
