"""Global enums shared by the pricing and matching engines."""

from enum import Enum


class Outcome(str, Enum):
    YES = "YES"
    NO = "NO"

    @property
    def opposite(self) -> "Outcome":
        return Outcome.NO if self is Outcome.YES else Outcome.YES


class OutcomeType(str, Enum):
    """Market flavour: both share one probability-space engine."""
    BINARY = "BINARY"
    PSEUDO_NUMERIC = "PSEUDO_NUMERIC"
