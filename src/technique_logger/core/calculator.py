"""
Pure weight and target calculations.

All functions are pure and typed for testability. Every derived weight
passes through round_weight(), which rounds half-up to the nearest
WEIGHT_INCREMENT_KG using decimal arithmetic, so 21.25 -> 21.5 and
21.24 -> 21.0 regardless of binary float representation.
"""

import math
from decimal import ROUND_HALF_UP, Decimal

from .config import (
    PYRAMID_BASE_REPS,
    PYRAMID_FLOOR_FRACTION,
    PYRAMID_MIN_REPS,
    PYRAMID_STEP_FRACTION,
    WEIGHT_INCREMENT_KG,
)
from .models import PyramidDirection, require_positive_weight


def _dec(value: float) -> Decimal:
    return Decimal(str(value))


def round_weight(weight: float, increment: float = WEIGHT_INCREMENT_KG) -> float:
    """
    Round a weight half-up to the nearest increment.

    Args:
        weight: Weight in kg
        increment: Plate increment (default 0.5 kg)

    Returns:
        Rounded weight
    """
    step = _dec(increment)
    units = (_dec(weight) / step).quantize(Decimal(1), rounding=ROUND_HALF_UP)
    return float(units * step)


def reduce_weight(weight: float, percentage: float) -> float:
    """
    Reduce a weight by a percentage and round.

    round_weight(weight * (1 - percentage / 100))
    """
    reduced = _dec(weight) * (Decimal(1) - _dec(percentage) / Decimal(100))
    return round_weight(float(reduced))


def drop_set_ladder(initial_weight: float, drops: int, drop_percentage: float) -> list[float]:
    """
    Calculate the weight for the top set and each drop.

    weight[0] = initial_weight
    weight[i] = round_weight(weight[i-1] * (1 - drop_percentage/100))

    Each drop is derived from the previous rounded weight, so the ladder
    is exactly what the lifter loads on the bar.

    Args:
        initial_weight: Top-set weight
        drops: Number of drops
        drop_percentage: Reduction per drop (0-100)

    Returns:
        List of drops + 1 weights, non-increasing
    """
    weights = [float(initial_weight)]
    for _ in range(drops):
        weights.append(reduce_weight(weights[-1], drop_percentage))
    return weights


def backoff_weight(top_weight: float, backoff_percentage: float) -> float:
    """round_weight(top_weight * (1 - backoff_percentage/100))"""
    return reduce_weight(top_weight, backoff_percentage)


def _pyramid_weight(initial_weight: float, steps_below_peak: int) -> float:
    increment = initial_weight * PYRAMID_STEP_FRACTION
    weight = initial_weight - increment * steps_below_peak
    return round_weight(max(weight, initial_weight * PYRAMID_FLOOR_FRACTION))


def pyramid_ladder(initial_weight: float, steps: int, direction: PyramidDirection) -> list[float]:
    """
    Calculate pyramid weights around a working weight.

    Each step is 5% of the working weight away from the peak, floored at
    70% of it. A full pyramid climbs to the peak and comes back down
    without repeating the peak step (2 * steps - 1 entries).

    Args:
        initial_weight: Peak (working) weight
        steps: Steps per direction
        direction: "ascending", "descending" or "full"

    Returns:
        List of rounded weights in execution order

    Raises:
        TechniqueConfigError: If initial_weight is not a positive finite number
    """
    require_positive_weight("pyramid", initial_weight)
    ascending = [_pyramid_weight(initial_weight, steps - 1 - i) for i in range(steps)]
    descending = [_pyramid_weight(initial_weight, i) for i in range(steps)]
    if direction == "ascending":
        return ascending
    if direction == "descending":
        return descending
    return ascending + descending[1:]


def _rep_span(i: int, steps: int) -> int:
    return math.floor((PYRAMID_BASE_REPS - PYRAMID_MIN_REPS) * (i / (steps - 1 or 1)))


def pyramid_reps(steps: int, direction: PyramidDirection) -> list[int]:
    """
    Target reps for each pyramid step (inverse of the weight progression).

    Ascending goes 12 -> 6 reps, descending 6 -> 12; a full pyramid does
    both and skips the repeated peak.
    """
    high_to_low = [PYRAMID_BASE_REPS - _rep_span(i, steps) for i in range(steps)]
    low_to_high = [PYRAMID_MIN_REPS + _rep_span(i, steps) for i in range(steps)]
    if direction == "ascending":
        return high_to_low
    if direction == "descending":
        return low_to_high
    return high_to_low + low_to_high[1:]
