import math

from src.pm_common.errors import InvertedRangeError, OutOfRangeError


def check_limit_prob(limit_prob: float | None) -> None:
    """Raise OutOfRangeError unless limit_prob is None or strictly inside (0, 1)."""
    if limit_prob is None:
        return
    if math.isnan(limit_prob) or not (0 < limit_prob < 1):
        raise OutOfRangeError(limit_prob)


def check_range_bounds(low_limit_prob: float | None, high_limit_prob: float | None) -> None:
    """Both bounds in (0, 1); when both are given, low must be below high."""
    check_limit_prob(low_limit_prob)
    check_limit_prob(high_limit_prob)
    if (
        low_limit_prob is not None
        and high_limit_prob is not None
        and low_limit_prob >= high_limit_prob
    ):
        raise InvertedRangeError(low_limit_prob, high_limit_prob)
