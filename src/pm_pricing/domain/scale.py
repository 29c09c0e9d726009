"""Market scales: map engine probabilities to what a market displays.

Binary markets show the probability itself. Pseudo-numeric markets show a
value in [min, max] (optionally on a log scale) that is carried internally as
a binary probability, so one pricing engine serves both flavours.
"""
import math
from dataclasses import dataclass

from src.pm_common.enums import OutcomeType
from src.pm_common.floats import format_large_number, format_percent


@dataclass(frozen=True)
class BinaryScale:
    outcome_type: OutcomeType = OutcomeType.BINARY

    def prob_to_value(self, prob: float) -> float:
        return prob

    def value_to_prob(self, value: float) -> float:
        return min(1.0, max(0.0, value))

    def format_prob(self, prob: float) -> str:
        return format_percent(prob)

    def placeholder(self, prob: float) -> str:
        """Whole-percent hint for an empty probability input."""
        return str(round(prob * 100))


@dataclass(frozen=True)
class PseudoNumericScale:
    min: float
    max: float
    is_log_scale: bool = False
    outcome_type: OutcomeType = OutcomeType.PSEUDO_NUMERIC

    def __post_init__(self) -> None:
        if not self.max > self.min:
            raise ValueError(f"max must exceed min: min={self.min}, max={self.max}")

    def prob_to_value(self, prob: float) -> float:
        if self.is_log_scale:
            log_value = prob * math.log10(self.max - self.min + 1)
            return 10**log_value + self.min - 1
        return prob * (self.max - self.min) + self.min

    def value_to_prob(self, value: float) -> float:
        if value < self.min:
            return 0.0
        if value > self.max:
            return 1.0
        if self.is_log_scale:
            return math.log10(value - self.min + 1) / math.log10(self.max - self.min + 1)
        return (value - self.min) / (self.max - self.min)

    def format_prob(self, prob: float) -> str:
        return format_large_number(self.prob_to_value(prob))

    def placeholder(self, prob: float) -> str:
        return str(round(self.prob_to_value(prob)))


MarketScale = BinaryScale | PseudoNumericScale
