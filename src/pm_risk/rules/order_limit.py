import math

from src.pm_common.errors import InvalidAmountError
from src.pm_common.floats import floating_equal


def check_amount(amount: float | None) -> None:
    """Raise InvalidAmountError if amount is missing, NaN/inf, not positive or below epsilon."""
    if amount is None or not math.isfinite(amount) or amount <= 0 or floating_equal(amount, 0):
        raise InvalidAmountError(amount)
