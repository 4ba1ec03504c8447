"""
Base type for technique strategies.

A TechniqueStrategy parameterises the shared phased-execution engine for
one technique: how many steps there are, which weight and rep target each
step carries, how long to rest after it, what counts as a valid entry,
when the sequence ends, and how the logged arrays map onto the result.
Each specialized technique is a small subclass; the engine itself lives
in core.engine.session and is implemented once.
"""

from dataclasses import dataclass
from typing import Any, ClassVar

from ..config import VIBRATION_DEFAULT
from ..engine.state import ExecutionState
from ..models import TechniqueConfig, TechniqueConfigError, require_positive_weight


@dataclass(frozen=True)
class StepPlan:
    """Preview of one configured step, for hosts that render the whole ladder."""

    index: int
    label: str
    target_weight: float
    target_reps: int | None
    rest_after: int
    hold_seconds: int | None = None


class TechniqueStrategy:
    """
    Per-technique policy consumed by TechniqueSession.

    Subclasses set ``technique`` and ``config_type`` and override the hooks
    whose default does not fit. Defaults describe a fixed list of steps at
    the initial weight, no rest, any positive rep count accepted, fully
    completed when every configured step is logged.
    """

    technique: ClassVar[str] = ""
    config_type: ClassVar[type] = object
    # One weight shared by every step (changing it carries forward).
    shared_weight: ClassVar[bool] = False
    vibration: ClassVar[tuple[int, ...]] = VIBRATION_DEFAULT
    records_rpe: ClassVar[bool] = False

    def __init__(self, config: TechniqueConfig, initial_weight: float):
        if not isinstance(config, self.config_type):
            raise TechniqueConfigError(
                self.technique, f"expected {self.config_type.__name__}, got {type(config).__name__}"
            )
        require_positive_weight(self.technique, initial_weight)
        self.config = config
        self.initial_weight = float(initial_weight)
        self.validate()

    # -- configuration ------------------------------------------------------

    def validate(self) -> None:
        """Reject configurations the engine cannot run (raise TechniqueConfigError)."""

    def step_count(self) -> int:
        """Number of configured steps."""
        raise NotImplementedError

    # -- per-step targets ---------------------------------------------------

    def step_label(self, index: int) -> str:
        return f"Set {index + 1}"

    def target_weight(self, index: int) -> float:
        return self.initial_weight

    def target_reps(self, index: int) -> int | None:
        return None

    def rest_after(self, index: int) -> int:
        """Seconds of rest after step *index* when another step follows."""
        return 0

    def hold_seconds(self, index: int) -> int | None:
        """Duration of a timed hold step, or None for a rep-logged step."""
        return None

    def min_reps(self, index: int) -> int:
        """Smallest rep count that may be confirmed for step *index*."""
        return 1

    def plan(self) -> list[StepPlan]:
        return [
            StepPlan(
                index=i,
                label=self.step_label(i),
                target_weight=self.target_weight(i),
                target_reps=self.target_reps(i),
                rest_after=self.rest_after(i) if i < self.step_count() - 1 else 0,
                hold_seconds=self.hold_seconds(i),
            )
            for i in range(self.step_count())
        ]

    # -- transitions --------------------------------------------------------

    def next_step(self, index: int, state: ExecutionState) -> int | None:
        """Step to run after *index* was confirmed, or None when the sequence ends."""
        following = index + 1
        return following if following < self.step_count() else None

    def can_extend(self, state: ExecutionState) -> bool:
        """Whether add_step() may append a step after the sequence ended."""
        return False

    def can_complete(self, state: ExecutionState) -> bool:
        return state.logged_steps >= 1

    # -- result -------------------------------------------------------------

    def completed_fully(self, state: ExecutionState) -> bool:
        return state.logged_steps == self.step_count() and all(r > 0 for r in state.reps)

    def result_fields(self, state: ExecutionState) -> dict[str, Any]:
        """Technique-specific TechniqueExecutionResult fields."""
        return {}

    def notes(self, state: ExecutionState) -> str | None:
        return None
