"""Small numeric helpers shared by the scorers."""

import math


def clamp(value: float, low: float = 0.0, high: float = 100.0) -> float:
    """Limit value to [low, high]."""
    return max(low, min(high, value))


def round_half_up(value: float) -> int:
    """Round to the nearest integer with .5 going up (2.5 -> 3, -2.5 -> -2)."""
    return int(math.floor(value + 0.5))
