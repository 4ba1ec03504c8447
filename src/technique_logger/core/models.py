"""
Data models for technique-logger.

Technique configurations form a tagged union: one frozen dataclass per
technique type, each carrying a class-level ``type`` tag. Configurations
arrive from an upstream recommendation service, so every variant validates
its numeric ranges on construction and raises TechniqueConfigError when a
value is out of range.
"""

import math
from dataclasses import dataclass, field
from datetime import datetime
from typing import ClassVar, Literal, Union

from .config import FST7_ALLOWED_REST_SECONDS, FST7_SETS, RPE_MAX, RPE_MIN

TechniqueType = Literal[
    "drop_set",
    "rest_pause",
    "superset",
    "top_set_backoff",
    "myo_reps",
    "giant_set",
    "cluster_set",
    "pyramid",
    "fst7_protocol",
    "loaded_stretching",
    "mechanical_drop_set",
    "lengthened_partials",
    "forced_reps",
    "pre_exhaust",
]
PyramidDirection = Literal["ascending", "descending", "full"]
TechniqueLabel = Literal["DROP", "MYO", "CLUSTER", "+15s", "FST-7"]

TECHNIQUE_TYPES: tuple[str, ...] = (
    "drop_set",
    "rest_pause",
    "superset",
    "top_set_backoff",
    "myo_reps",
    "giant_set",
    "cluster_set",
    "pyramid",
    "fst7_protocol",
    "loaded_stretching",
    "mechanical_drop_set",
    "lengthened_partials",
    "forced_reps",
    "pre_exhaust",
)


class TechniqueConfigError(ValueError):
    """
    Raised when a technique cannot start because its configuration is invalid.

    Carries the technique tag and a human-readable reason so a host can show
    a configuration-error affordance instead of a half-built logger.
    """

    def __init__(self, technique: str, reason: str):
        self.technique = technique
        self.reason = reason
        super().__init__(f"{technique}: {reason}")


# ---------------------------------------------------------------------------
# Validation helpers
# ---------------------------------------------------------------------------


def is_finite_number(value: object) -> bool:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return isinstance(value, int) or math.isfinite(value)


def is_positive_weight(value: object) -> bool:
    """True for a finite number above zero (bools excluded)."""
    return is_finite_number(value) and value > 0


def require_positive_weight(technique: str, weight: object) -> None:
    if not is_positive_weight(weight):
        raise TechniqueConfigError(technique, f"initial_weight must be a positive number, got {weight!r}")


def _require_count(technique: str, name: str, value: object, minimum: int = 1) -> None:
    if not isinstance(value, int) or isinstance(value, bool) or value < minimum:
        raise TechniqueConfigError(technique, f"{name} must be an integer >= {minimum}, got {value!r}")


def _require_seconds(technique: str, name: str, value: object) -> None:
    if not isinstance(value, int) or isinstance(value, bool) or value < 0:
        raise TechniqueConfigError(technique, f"{name} must be a whole number of seconds >= 0, got {value!r}")


def _require_percentage(technique: str, name: str, value: object) -> None:
    if not is_finite_number(value) or not 0 < value < 100:
        raise TechniqueConfigError(technique, f"{name} must be between 0 and 100 (exclusive), got {value!r}")


# ---------------------------------------------------------------------------
# Specialized technique configurations
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class DropSetConfig:
    """Top set followed by ``drops`` weight reductions of ``drop_percentage`` each."""

    type: ClassVar[str] = "drop_set"

    drops: int               # number of weight drops (typically 2-4)
    drop_percentage: float   # reduction per drop (typically 20-25%)

    def __post_init__(self) -> None:
        _require_count(self.type, "drops", self.drops)
        _require_percentage(self.type, "drop_percentage", self.drop_percentage)


@dataclass(frozen=True)
class RestPauseConfig:
    """Mini-sets after an initial set, separated by short pauses."""

    type: ClassVar[str] = "rest_pause"

    mini_sets: int        # typically 2-4
    rest_seconds: int     # typically 10-15s

    def __post_init__(self) -> None:
        _require_count(self.type, "mini_sets", self.mini_sets)
        _require_seconds(self.type, "rest_seconds", self.rest_seconds)


@dataclass(frozen=True)
class TopSetBackoffConfig:
    """
    Heavy top set(s) followed by lighter backoff sets.

    ``top_sets`` defaults to 1 for configurations that predate multiple
    top sets.
    """

    type: ClassVar[str] = "top_set_backoff"

    top_set_reps: int
    backoff_sets: int
    backoff_percentage: float
    backoff_reps: int
    top_sets: int = 1

    def __post_init__(self) -> None:
        _require_count(self.type, "top_sets", self.top_sets)
        _require_count(self.type, "top_set_reps", self.top_set_reps)
        _require_count(self.type, "backoff_sets", self.backoff_sets)
        _require_percentage(self.type, "backoff_percentage", self.backoff_percentage)
        _require_count(self.type, "backoff_reps", self.backoff_reps)


@dataclass(frozen=True)
class MyoRepsConfig:
    """Activation set followed by short-rest mini-sets."""

    type: ClassVar[str] = "myo_reps"

    activation_reps: int   # typically 12-20
    mini_set_reps: int     # typically 3-5
    mini_sets: int         # typically 3-5
    rest_seconds: int      # typically 3-5s

    def __post_init__(self) -> None:
        _require_count(self.type, "activation_reps", self.activation_reps)
        _require_count(self.type, "mini_set_reps", self.mini_set_reps)
        _require_count(self.type, "mini_sets", self.mini_sets)
        _require_seconds(self.type, "rest_seconds", self.rest_seconds)


@dataclass(frozen=True)
class ClusterSetConfig:
    """Small rep clusters separated by intra-set rest."""

    type: ClassVar[str] = "cluster_set"

    reps_per_cluster: int      # typically 2-3
    clusters: int              # typically 4-6
    intra_rest_seconds: int    # typically 15-30s

    def __post_init__(self) -> None:
        _require_count(self.type, "reps_per_cluster", self.reps_per_cluster)
        _require_count(self.type, "clusters", self.clusters)
        _require_seconds(self.type, "intra_rest_seconds", self.intra_rest_seconds)


@dataclass(frozen=True)
class Fst7ProtocolConfig:
    """Seven sets with 30 or 45 seconds of rest between them."""

    type: ClassVar[str] = "fst7_protocol"

    rest_seconds: int
    target_reps: int
    inter_set_posing: bool = False
    sets: int = FST7_SETS

    def __post_init__(self) -> None:
        if self.sets != FST7_SETS:
            raise TechniqueConfigError(self.type, f"sets is fixed at {FST7_SETS}, got {self.sets!r}")
        rest = self.rest_seconds
        if not isinstance(rest, int) or isinstance(rest, bool) or rest not in FST7_ALLOWED_REST_SECONDS:
            allowed = sorted(FST7_ALLOWED_REST_SECONDS)
            raise TechniqueConfigError(self.type, f"rest_seconds must be one of {allowed}, got {self.rest_seconds!r}")
        _require_count(self.type, "target_reps", self.target_reps)


@dataclass(frozen=True)
class LoadedStretchingConfig:
    """Isometric hold in the stretched position."""

    type: ClassVar[str] = "loaded_stretching"

    hold_seconds: int                    # typically 30-60s
    target_rpe: int                      # typically 7-8
    breathing_pattern: str | None = None

    def __post_init__(self) -> None:
        _require_count(self.type, "hold_seconds", self.hold_seconds)
        rpe = self.target_rpe
        if not isinstance(rpe, int) or isinstance(rpe, bool) or not RPE_MIN <= rpe <= RPE_MAX:
            raise TechniqueConfigError(
                self.type, f"target_rpe must be an integer in {RPE_MIN}..{RPE_MAX}, got {self.target_rpe!r}"
            )


@dataclass(frozen=True)
class MechanicalDropSetConfig:
    """
    Same weight across successively easier exercise variations.

    An empty variation list is representable (it is the catalog placeholder)
    but a session refuses to start with it.
    """

    type: ClassVar[str] = "mechanical_drop_set"

    variations: tuple[str, ...]
    reps_per_variation: int     # typically 8-12
    rest_between: int = 0       # 0-10s

    def __post_init__(self) -> None:
        if isinstance(self.variations, str):
            raise TechniqueConfigError(self.type, "variations must be a list of names, not a string")
        object.__setattr__(self, "variations", tuple(self.variations))
        if not all(isinstance(v, str) and v.strip() for v in self.variations):
            raise TechniqueConfigError(self.type, "variation names must be non-empty strings")
        _require_count(self.type, "reps_per_variation", self.reps_per_variation)
        _require_seconds(self.type, "rest_between", self.rest_between)


# ---------------------------------------------------------------------------
# Techniques without a specialized engine
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class SupersetConfig:
    type: ClassVar[str] = "superset"

    paired_exercise_index: int
    rest_after_both: int

    def __post_init__(self) -> None:
        _require_seconds(self.type, "rest_after_both", self.rest_after_both)


@dataclass(frozen=True)
class GiantSetConfig:
    type: ClassVar[str] = "giant_set"

    exercise_indices: tuple[int, ...]
    rest_after_all: int

    def __post_init__(self) -> None:
        object.__setattr__(self, "exercise_indices", tuple(self.exercise_indices))
        _require_seconds(self.type, "rest_after_all", self.rest_after_all)


@dataclass(frozen=True)
class PyramidConfig:
    type: ClassVar[str] = "pyramid"

    direction: PyramidDirection
    steps: int

    def __post_init__(self) -> None:
        if self.direction not in ("ascending", "descending", "full"):
            raise TechniqueConfigError(self.type, f"Invalid direction: {self.direction!r}")
        _require_count(self.type, "steps", self.steps)


@dataclass(frozen=True)
class LengthenedPartialsConfig:
    type: ClassVar[str] = "lengthened_partials"

    partial_reps: int
    range_percentage: float

    def __post_init__(self) -> None:
        _require_count(self.type, "partial_reps", self.partial_reps)
        _require_percentage(self.type, "range_percentage", self.range_percentage)


@dataclass(frozen=True)
class ForcedRepsConfig:
    type: ClassVar[str] = "forced_reps"

    assisted_reps: int
    requires_partner: bool = True

    def __post_init__(self) -> None:
        _require_count(self.type, "assisted_reps", self.assisted_reps)


@dataclass(frozen=True)
class PreExhaustConfig:
    type: ClassVar[str] = "pre_exhaust"

    isolation_exercise_index: int
    compound_exercise_index: int
    rest_between: int = 0

    def __post_init__(self) -> None:
        rest = self.rest_between
        if not isinstance(rest, int) or isinstance(rest, bool) or rest not in (0, 10):
            raise TechniqueConfigError(self.type, f"rest_between must be 0 or 10, got {self.rest_between!r}")


TechniqueConfig = Union[
    DropSetConfig,
    RestPauseConfig,
    SupersetConfig,
    TopSetBackoffConfig,
    MyoRepsConfig,
    GiantSetConfig,
    ClusterSetConfig,
    PyramidConfig,
    Fst7ProtocolConfig,
    LoadedStretchingConfig,
    MechanicalDropSetConfig,
    LengthenedPartialsConfig,
    ForcedRepsConfig,
    PreExhaustConfig,
]

CONFIG_CLASSES: dict[str, type] = {
    cls.type: cls
    for cls in (
        DropSetConfig,
        RestPauseConfig,
        SupersetConfig,
        TopSetBackoffConfig,
        MyoRepsConfig,
        GiantSetConfig,
        ClusterSetConfig,
        PyramidConfig,
        Fst7ProtocolConfig,
        LoadedStretchingConfig,
        MechanicalDropSetConfig,
        LengthenedPartialsConfig,
        ForcedRepsConfig,
        PreExhaustConfig,
    )
}


@dataclass(frozen=True)
class AppliedTechnique:
    """A technique configuration paired with the recommender's rationale."""

    config: TechniqueConfig
    rationale: str = ""

    @property
    def technique(self) -> str:
        return self.config.type


# ---------------------------------------------------------------------------
# Execution output
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class TechniqueExecutionResult:
    """
    Outcome of one technique execution, handed to the persistence layer.

    Only the arrays relevant to the technique are populated; each holds
    exactly the steps that were logged (a cancelled or force-completed run
    has shorter arrays and ``completed_fully=False``).
    """

    technique: str
    config: TechniqueConfig
    completed_fully: bool
    drop_weights: tuple[float, ...] | None = None
    drop_reps: tuple[int, ...] | None = None
    mini_set_reps: tuple[int, ...] | None = None
    activation_reps: int | None = None
    cluster_reps: tuple[int, ...] | None = None
    pyramid_weights: tuple[float, ...] | None = None
    pyramid_reps: tuple[int, ...] | None = None
    notes: str | None = None

    def __post_init__(self) -> None:
        for name in ("drop_weights", "drop_reps", "mini_set_reps", "cluster_reps", "pyramid_weights", "pyramid_reps"):
            value = getattr(self, name)
            if value is not None:
                object.__setattr__(self, name, tuple(value))

    @property
    def total_reps(self) -> int:
        """Sum of every logged rep count (activation included)."""
        total = self.activation_reps or 0
        for reps in (self.drop_reps, self.mini_set_reps, self.cluster_reps, self.pyramid_reps):
            if reps:
                total += sum(reps)
        return total


@dataclass(frozen=True)
class VirtualSet:
    """A single set of an expanded technique, as shown by the plain set logger."""

    set_number: int                      # 1-indexed
    weight: float
    target_reps: int
    label: TechniqueLabel | None = None
    rest_seconds: int | None = None      # overrides the exercise rest when set


@dataclass
class TechniqueExpansionResult:
    """Virtual sets for one technique, plus whether simple mode supports it."""

    virtual_sets: list[VirtualSet] = field(default_factory=list)
    is_supported: bool = True
    unsupported_reason: str | None = None


@dataclass
class TechniqueLogEntry:
    """
    One technique execution as stored by the persistence layer.

    ``result`` is None when the technique was applied but no execution was
    recorded (e.g. the lifter used the plain set logger).
    """

    completed_at: str  # ISO format: YYYY-MM-DDTHH:MM:SS
    exercise_name: str
    technique: str
    config: TechniqueConfig
    initial_weight: float
    result: TechniqueExecutionResult | None = None
    muscle_group: str | None = None

    def __post_init__(self) -> None:
        """Validate entry data."""
        try:
            datetime.fromisoformat(self.completed_at)
        except ValueError as e:
            raise ValueError(f"Invalid completed_at: {self.completed_at}") from e

        if not self.exercise_name.strip():
            raise ValueError("exercise_name must not be empty")
        if self.technique != self.config.type:
            raise ValueError(f"config is for {self.config.type!r}, entry says {self.technique!r}")
        if not is_positive_weight(self.initial_weight):
            raise ValueError(f"initial_weight must be a positive number, got {self.initial_weight!r}")
        if self.result is not None and self.result.technique != self.technique:
            raise ValueError(f"result is for {self.result.technique!r}, entry says {self.technique!r}")
