"""
Technique expansion to virtual sets.

Converts one configured technique into the flat list of sets the plain
set logger shows, so a lifter can follow the technique without a
specialized engine. Example: a drop set with 2 drops of 20% on 3 working sets
at 50 kg x 12 becomes

    Set 1: 50.0 x 12
    Set 2: 50.0 x 12
    Set 3: 50.0 x 12          (trigger set)
    Set 4: 40.0 x 10  [DROP]
    Set 5: 32.0 x 10  [DROP]

Techniques that need pairing, a partner or a timer cannot be flattened;
they expand to plain working sets with is_supported=False and a reason.
"""

from typing import Callable

from .calculator import drop_set_ladder, pyramid_ladder, pyramid_reps, round_weight
from .config import (
    EXPANSION_DROP_MIN_REPS,
    EXPANSION_DROP_REP_REDUCTION,
    EXPANSION_DROP_REST_SECONDS,
    EXPANSION_REST_PAUSE_MIN_REPS,
    EXPANSION_REST_PAUSE_REP_DIVISOR,
)
from .models import (
    AppliedTechnique,
    ClusterSetConfig,
    DropSetConfig,
    Fst7ProtocolConfig,
    MyoRepsConfig,
    PyramidConfig,
    RestPauseConfig,
    TechniqueConfig,
    TechniqueExpansionResult,
    VirtualSet,
    is_positive_weight,
)

UNSUPPORTED_TECHNIQUES: dict[str, str] = {
    "superset": "Requires pairing with another exercise",
    "giant_set": "Requires multiple exercises in sequence",
    "top_set_backoff": "Requires understanding of top set vs backoff sets",
    "mechanical_drop_set": "Requires changing exercise variation",
    "loaded_stretching": "Requires timer and RPE tracking",
    "forced_reps": "Requires a training partner",
    "pre_exhaust": "Requires exercise pairing",
    "lengthened_partials": "Requires understanding of partial ROM",
}


def _normal_sets(weight: float, reps: int, sets: int) -> list[VirtualSet]:
    return [VirtualSet(set_number=i + 1, weight=round_weight(weight), target_reps=reps) for i in range(sets)]


def _expand_drop_set(config: DropSetConfig, weight: float, reps: int, sets: int) -> list[VirtualSet]:
    result = _normal_sets(weight, reps, sets)
    ladder = drop_set_ladder(round_weight(weight), config.drops, config.drop_percentage)
    drop_reps = max(EXPANSION_DROP_MIN_REPS, reps - EXPANSION_DROP_REP_REDUCTION)
    for drop, drop_weight in enumerate(ladder[1:], start=1):
        result.append(
            VirtualSet(
                set_number=sets + drop,
                weight=drop_weight,
                target_reps=drop_reps,
                label="DROP",
                rest_seconds=EXPANSION_DROP_REST_SECONDS,
            )
        )
    return result


def _expand_rest_pause(config: RestPauseConfig, weight: float, reps: int, sets: int) -> list[VirtualSet]:
    result = _normal_sets(weight, reps, sets)
    mini_reps = max(EXPANSION_REST_PAUSE_MIN_REPS, reps // EXPANSION_REST_PAUSE_REP_DIVISOR)
    for mini in range(1, config.mini_sets + 1):
        result.append(
            VirtualSet(
                set_number=sets + mini,
                weight=round_weight(weight),
                target_reps=mini_reps,
                label="+15s",
                rest_seconds=int(config.rest_seconds),
            )
        )
    return result


def _expand_myo_reps(config: MyoRepsConfig, weight: float, reps: int, sets: int) -> list[VirtualSet]:
    # The last working set is the activation set.
    result = _normal_sets(weight, config.activation_reps, sets)
    for mini in range(1, config.mini_sets + 1):
        result.append(
            VirtualSet(
                set_number=sets + mini,
                weight=round_weight(weight),
                target_reps=config.mini_set_reps,
                label="MYO",
                rest_seconds=int(config.rest_seconds),
            )
        )
    return result


def _expand_cluster_set(config: ClusterSetConfig, weight: float, reps: int, sets: int) -> list[VirtualSet]:
    # Clusters replace the last working set; earlier sets carry the same total volume.
    result = _normal_sets(weight, config.reps_per_cluster * config.clusters, sets - 1)
    for cluster in range(config.clusters):
        result.append(
            VirtualSet(
                set_number=sets + cluster,
                weight=round_weight(weight),
                target_reps=config.reps_per_cluster,
                label="CLUSTER",
                rest_seconds=int(config.intra_rest_seconds),
            )
        )
    return result


def _expand_fst7(config: Fst7ProtocolConfig, weight: float, reps: int, sets: int) -> list[VirtualSet]:
    return [
        VirtualSet(
            set_number=i + 1,
            weight=round_weight(weight),
            target_reps=config.target_reps,
            label="FST-7",
            rest_seconds=config.rest_seconds,
        )
        for i in range(config.sets)
    ]


def _expand_pyramid(config: PyramidConfig, weight: float, reps: int, sets: int) -> list[VirtualSet]:
    weights = pyramid_ladder(weight, config.steps, config.direction)
    targets = pyramid_reps(config.steps, config.direction)
    return [
        VirtualSet(set_number=i + 1, weight=w, target_reps=r)
        for i, (w, r) in enumerate(zip(weights, targets))
    ]


_EXPANDERS: dict[str, Callable[..., list[VirtualSet]]] = {
    "drop_set": _expand_drop_set,
    "rest_pause": _expand_rest_pause,
    "myo_reps": _expand_myo_reps,
    "cluster_set": _expand_cluster_set,
    "fst7_protocol": _expand_fst7,
    "pyramid": _expand_pyramid,
}


def expand_technique(
    technique: AppliedTechnique | TechniqueConfig,
    base_weight: float,
    base_reps: int,
    base_sets: int,
) -> TechniqueExpansionResult:
    """
    Expand a technique into virtual sets for the plain set logger.

    Args:
        technique: Applied technique or bare configuration
        base_weight: Working weight of the exercise
        base_reps: Target reps of a working set
        base_sets: Number of working sets in the plan

    Returns:
        TechniqueExpansionResult; unsupported techniques carry plain sets,
        is_supported=False and a reason

    Raises:
        ValueError: If weight, reps or sets are not positive
    """
    if not is_positive_weight(base_weight):
        raise ValueError(f"base_weight must be a positive number, got {base_weight!r}")
    if base_reps < 1 or base_sets < 1:
        raise ValueError(f"base_reps and base_sets must be >= 1, got {base_reps}, {base_sets}")

    config = technique.config if isinstance(technique, AppliedTechnique) else technique
    if config.type in UNSUPPORTED_TECHNIQUES:
        return TechniqueExpansionResult(
            virtual_sets=_normal_sets(base_weight, base_reps, base_sets),
            is_supported=False,
            unsupported_reason=UNSUPPORTED_TECHNIQUES[config.type],
        )
    expander = _EXPANDERS.get(config.type)
    if expander is None:
        return TechniqueExpansionResult(
            virtual_sets=_normal_sets(base_weight, base_reps, base_sets),
            is_supported=False,
            unsupported_reason="Technique type not supported in simple mode",
        )
    return TechniqueExpansionResult(virtual_sets=expander(config, base_weight, base_reps, base_sets))


def total_virtual_sets(
    technique: AppliedTechnique | TechniqueConfig | None,
    base_sets: int,
    base_weight: float,
    base_reps: int,
) -> int:
    """Number of sets the plain logger shows (base_sets when no technique)."""
    if technique is None:
        return base_sets
    return len(expand_technique(technique, base_weight, base_reps, base_sets).virtual_sets)


def is_supported_in_simple_mode(technique: str) -> bool:
    return technique in _EXPANDERS


def supported_simple_mode_techniques() -> list[str]:
    return list(_EXPANDERS)
