"""Weighted constant-product market maker (CPMM) for binary pools.

Invariant: YES^p * NO^(1-p) = k is preserved by every trade.
Implied YES probability: p*NO / ((1-p)*YES + p*NO).

Every function here is pure: the same (state, outcome, amount) always yields
the same numbers, so a client-side preview and the authoritative server-side
execution agree to the last bit.
"""
import math
from collections.abc import Callable

from config.settings import settings
from src.pm_common.enums import Outcome
from src.pm_common.errors import DegenerateMarketError, InvalidAmountError
from src.pm_pricing.domain.models import NO_FEES, CpmmState, Fees, Purchase


def validate_state(state: CpmmState) -> None:
    """Raise DegenerateMarketError unless reserves > 0 and 0 < p < 1."""
    y, n, p = state.pool_yes, state.pool_no, state.p
    if not (math.isfinite(y) and math.isfinite(n) and math.isfinite(p)):
        raise DegenerateMarketError(f"non-finite pool {y=}, {n=}, {p=}")
    if y <= 0 or n <= 0:
        raise DegenerateMarketError(f"reserves must be positive: YES={y}, NO={n}")
    if not (0 < p < 1):
        raise DegenerateMarketError(f"p must be in (0, 1), got {p}")


def get_probability(state: CpmmState) -> float:
    validate_state(state)
    y, n, p = state.pool_yes, state.pool_no, state.p
    # Positive reserves keep this inside (0, 1); only float rounding can land on an edge.
    return (p * n) / ((1 - p) * y + p * n)


def outcome_probability(prob: float, outcome: Outcome) -> float:
    """Price of one share of ``outcome`` given the YES probability."""
    return prob if outcome == Outcome.YES else 1 - prob


def _reserves_after(state: CpmmState, bet: float, outcome: Outcome) -> tuple[float, float]:
    """Reserves once ``bet`` is added to both sides and the bought side is paid out.

    The bought reserve is solved straight from the invariant rather than as
    ``y + b - shares``, which cancels to zero for bets far larger than the pool.
    """
    y, n, p = state.pool_yes, state.pool_no, state.p
    if outcome == Outcome.YES:
        # new_y^p * (n + b)^(1-p) = y^p * n^(1-p)
        return y * (n / (n + bet)) ** ((1 - p) / p), n + bet
    return y + bet, n * (y / (y + bet)) ** (p / (1 - p))


def calculate_shares(state: CpmmState, bet: float, outcome: Outcome) -> float:
    """Shares of ``outcome`` the pool pays out for ``bet`` mana, before fees."""
    new_y, new_n = _reserves_after(state, bet, outcome)
    if outcome == Outcome.YES:
        return state.pool_yes + bet - new_y
    return state.pool_no + bet - new_n


def apply_trade(state: CpmmState, outcome: Outcome, bet: float) -> tuple[CpmmState, float]:
    """Add ``bet`` to both reserves and remove the bought side's shares.

    Returns (new_state, shares). ``shares >= bet`` for every valid pool since
    each share costs less than one mana.
    """
    validate_state(state)
    if bet < 0 or math.isnan(bet):
        raise InvalidAmountError(bet)
    if bet == 0:
        return state, 0.0

    new_y, new_n = _reserves_after(state, bet, outcome)
    if outcome == Outcome.YES:
        shares = state.pool_yes + bet - new_y
    else:
        shares = state.pool_no + bet - new_n

    new_state = CpmmState(pool_yes=new_y, pool_no=new_n, p=state.p)
    validate_state(new_state)
    return new_state, shares


def compute_fees(bet_amount: float, shares: float, prob: float) -> Fees:
    """Fee schedule: a flat platform cut plus a prob * (1 - prob) * shares component.

    The probability-sensitive part vanishes at the edges where a share is
    either nearly certain or nearly worthless.
    """
    spread_weight = prob * (1 - prob) * shares
    return Fees(
        platform_fee=settings.PLATFORM_FEE_RATE * bet_amount,
        creator_fee=settings.CREATOR_FEE_RATE * spread_weight,
        liquidity_fee=settings.LIQUIDITY_FEE_RATE * spread_weight,
    )


def calculate_purchase(state: CpmmState, bet: float, outcome: Outcome) -> Purchase:
    """Buy from the pool: fees come off the bet, the remainder trades.

    Fees are assessed on the gross bet and the shares it would buy at the
    current spot probability. They are paid out of the bet and never enter
    the reserves.
    """
    prob = get_probability(state)
    if bet == 0:
        return Purchase(shares=0.0, state=state, fees=NO_FEES)

    _, gross_shares = apply_trade(state, outcome, bet)
    fees = compute_fees(bet, gross_shares, prob)
    new_state, shares = apply_trade(state, outcome, bet - fees.total)
    return Purchase(shares=shares, state=new_state, fees=fees)


def get_outcome_probability_after_bet(state: CpmmState, outcome: Outcome, bet: float) -> float:
    new_prob = get_probability(calculate_purchase(state, bet, outcome).state)
    return outcome_probability(new_prob, outcome)


def binary_search(lo: float, hi: float, comparator: Callable[[float], float]) -> float:
    """Bisect until float precision is exhausted or comparator hits exactly zero.

    ``comparator`` must be increasing: negative below the target, positive above.
    """
    mid = lo
    while True:
        mid = lo + (hi - lo) / 2
        if mid == lo or mid == hi:
            break
        comparison = comparator(mid)
        if comparison == 0:
            break
        if comparison > 0:
            hi = mid
        else:
            lo = mid
    return mid


def calculate_amount_to_prob(state: CpmmState, prob: float, outcome: Outcome) -> float:
    """Gross bet on ``outcome`` that moves the YES probability to ``prob``.

    ``prob`` is always expressed as a YES probability. Returns inf for targets
    outside (0, 1) and 0 when the pool is already at or past the target.
    """
    if math.isnan(prob) or prob <= 0 or prob >= 1:
        return math.inf
    target = outcome_probability(prob, outcome)
    if outcome_probability(get_probability(state), outcome) >= target:
        return 0.0

    max_guess = 10.0
    while True:
        max_guess *= 10
        if get_outcome_probability_after_bet(state, outcome, max_guess) >= target:
            break

    return binary_search(
        0.0,
        max_guess,
        lambda amount: get_outcome_probability_after_bet(state, outcome, amount) - target,
    )


def get_liquidity(state: CpmmState) -> float:
    return state.pool_yes**state.p * state.pool_no ** (1 - state.p)


def add_liquidity(state: CpmmState, amount: float) -> tuple[CpmmState, float]:
    """Subsidize both reserves by ``amount`` keeping the probability fixed.

    Returns (new_state, liquidity_added). ``p`` is re-solved so that
    p'(n+a) / ((1-p')(y+a) + p'(n+a)) equals the old probability.
    """
    if amount <= 0 or math.isnan(amount):
        raise InvalidAmountError(amount)
    prob = get_probability(state)
    y, n = state.pool_yes, state.pool_no

    new_p = prob * (amount + y) / (amount - n * (prob - 1) + prob * y)
    new_state = CpmmState(pool_yes=y + amount, pool_no=n + amount, p=new_p)
    validate_state(new_state)

    liquidity = get_liquidity(new_state) - get_liquidity(CpmmState(y, n, new_p))
    return new_state, liquidity
