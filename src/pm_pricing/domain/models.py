"""Pricing domain models — pure dataclasses, no I/O."""
from dataclasses import dataclass


@dataclass(frozen=True)
class CpmmState:
    """Weighted constant-product pool. Replaced after every trade, never mutated."""

    pool_yes: float
    pool_no: float
    p: float  # weight of the YES reserve in YES^p * NO^(1-p) = k


@dataclass(frozen=True)
class Fees:
    platform_fee: float = 0.0
    creator_fee: float = 0.0
    liquidity_fee: float = 0.0

    @property
    def total(self) -> float:
        return self.platform_fee + self.creator_fee + self.liquidity_fee

    def __add__(self, other: "Fees") -> "Fees":
        return Fees(
            platform_fee=self.platform_fee + other.platform_fee,
            creator_fee=self.creator_fee + other.creator_fee,
            liquidity_fee=self.liquidity_fee + other.liquidity_fee,
        )


NO_FEES = Fees()


@dataclass(frozen=True)
class Purchase:
    """Result of buying from the pool: shares credited after fees."""

    shares: float
    state: CpmmState
    fees: Fees
