"""Float comparison and display helpers for pool amounts and probabilities.

Pool reserves, bet amounts and shares are all floats. Comparisons that decide
whether an amount is exhausted or an order is filled go through
``floating_equal`` so that accumulated rounding never leaves a phantom
remainder.
"""

import math

from config.settings import settings


def floating_equal(a: float, b: float, epsilon: float | None = None) -> bool:
    eps = settings.FLOAT_EPSILON if epsilon is None else epsilon
    return abs(a - b) < eps


def floating_lesser_equal(a: float, b: float, epsilon: float | None = None) -> bool:
    eps = settings.FLOAT_EPSILON if epsilon is None else epsilon
    return a <= b + eps


def format_percent(zero_to_one: float) -> str:
    """0.5 -> '50%'. Near the edges one decimal is kept: 0.015 -> '1.5%'."""
    near_edge = 0 < zero_to_one < 0.02 or 0.98 < zero_to_one < 1
    decimals = 1 if near_edge else 0
    return f"{zero_to_one * 100:.{decimals}f}%"


def _show_precision(x: float, sigfigs: int) -> str:
    return f"{float(f'{x:.{sigfigs}g}'):g}"


def format_large_number(num: float, sigfigs: int = 2) -> str:
    """Compact display for pseudo-numeric values: 1500 -> '1500', 25000 -> '25K'."""
    abs_num = abs(num)
    if abs_num < 1:
        return _show_precision(num, sigfigs)
    if abs_num < 100:
        return _show_precision(num, 2)
    if abs_num < 1000:
        return _show_precision(num, 3)
    if abs_num < 10000:
        return _show_precision(num, 4)

    suffixes = ["", "K", "M", "B", "T", "Q"]
    i = int(math.floor(math.log10(abs_num) / 3))
    suffix = suffixes[i] if i < len(suffixes) else ""
    return f"{_show_precision(num / 10 ** (3 * i), sigfigs)}{suffix}"
