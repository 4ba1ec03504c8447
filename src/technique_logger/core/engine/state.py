"""
Mutable execution state owned by one running technique session.

The state is created when a session starts and dropped when the session
completes or is cancelled; only the TechniqueExecutionResult built from it
is ever persisted.
"""

from dataclasses import dataclass, field
from enum import Enum


class Phase(str, Enum):
    IDLE = "idle"            # created, not started
    WORK = "work"            # current step accepts input
    REST = "rest"            # countdown before the next step
    HOLD = "hold"            # timed isometric step in progress
    DONE = "done"            # every step resolved, awaiting complete()
    COMPLETE = "complete"    # result emitted
    CANCELLED = "cancelled"  # abandoned or disposed

    @property
    def is_terminal(self) -> bool:
        return self in (Phase.COMPLETE, Phase.CANCELLED)


@dataclass
class ExecutionState:
    """
    Phase, cursor and everything logged so far.

    ``weights`` and ``reps`` hold one entry per confirmed step, in order;
    they are never padded for steps that were not performed.
    """

    phase: Phase = Phase.IDLE
    current_step: int = 0
    weights: list[float] = field(default_factory=list)
    reps: list[int] = field(default_factory=list)
    step_weight: float | None = None      # override for the current step only
    shared_weight: float | None = None    # weight carried across steps
    sequence_finished: bool = False       # natural end of the step sequence reached
    hold_elapsed: int = 0
    hold_completed: bool = False
    rpe: int | None = None

    @property
    def logged_steps(self) -> int:
        return len(self.reps)

    @property
    def total_reps(self) -> int:
        return sum(self.reps)
