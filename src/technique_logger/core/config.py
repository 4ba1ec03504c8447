"""
Configuration constants for the technique execution engines.

All numeric policy (rounding, tolerances, fixed protocol sizes, timer and
vibration settings, simple-mode expansion rules) is centralized here so
every technique applies the same rules.
"""

from typing import Final

# =============================================================================
# WEIGHT ROUNDING
# =============================================================================

# Every derived weight is rounded half-up to this increment (kg).
WEIGHT_INCREMENT_KG: Final[float] = 0.5

# =============================================================================
# TIMER
# =============================================================================

TICK_INTERVAL_SECONDS: Final[float] = 1.0

# Vibration patterns (ms on/off) fired when a countdown reaches zero.
VIBRATION_REST_PAUSE: Final[tuple[int, ...]] = (200, 100, 200)
VIBRATION_MYO_REPS: Final[tuple[int, ...]] = (100, 50, 100)
VIBRATION_CLUSTER: Final[tuple[int, ...]] = (150, 50, 150)
VIBRATION_DEFAULT: Final[tuple[int, ...]] = (200,)
VIBRATION_COMPLETE: Final[tuple[int, ...]] = (100, 50, 100, 50, 300)

# =============================================================================
# MYO-REPS
# =============================================================================

# Activation set is accepted at activation_reps - tolerance or more.
MYO_ACTIVATION_TOLERANCE: Final[int] = 2

# =============================================================================
# FST-7
# =============================================================================

FST7_SETS: Final[int] = 7
FST7_ALLOWED_REST_SECONDS: Final[frozenset[int]] = frozenset({30, 45})

# =============================================================================
# LOADED STRETCHING
# =============================================================================

RPE_MIN: Final[int] = 1
RPE_MAX: Final[int] = 10
# Values offered for the post-hold RPE entry.
ACTUAL_RPE_CHOICES: Final[tuple[int, ...]] = (5, 6, 7, 8, 9, 10)

# =============================================================================
# PYRAMID LADDER
# =============================================================================

PYRAMID_STEP_FRACTION: Final[float] = 0.05  # 5% of working weight per step
PYRAMID_FLOOR_FRACTION: Final[float] = 0.70  # never below 70% of working weight
PYRAMID_BASE_REPS: Final[int] = 12
PYRAMID_MIN_REPS: Final[int] = 6

# =============================================================================
# SIMPLE-MODE EXPANSION (virtual sets)
# =============================================================================

EXPANSION_DROP_REST_SECONDS: Final[int] = 10
EXPANSION_DROP_MIN_REPS: Final[int] = 6
EXPANSION_DROP_REP_REDUCTION: Final[int] = 2
EXPANSION_REST_PAUSE_MIN_REPS: Final[int] = 2
EXPANSION_REST_PAUSE_REP_DIVISOR: Final[int] = 3

# =============================================================================
# CATALOG
# =============================================================================

EXPERIENCE_LEVELS: Final[tuple[str, ...]] = ("beginner", "intermediate", "advanced")
