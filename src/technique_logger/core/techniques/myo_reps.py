"""
Myo-reps: one activation set, then short-rest mini-sets.

Step 0 is the activation set and is accepted within a tolerance band
(activation_reps - MYO_ACTIVATION_TOLERANCE or more). Mini-sets continue
until one falls below ``mini_set_reps`` or ``mini_sets`` have been
logged, whichever comes first. After that natural stop the lifter may
still add mini-sets by hand.
"""

from typing import Any

from ..config import MYO_ACTIVATION_TOLERANCE, VIBRATION_MYO_REPS
from ..engine.state import ExecutionState
from ..models import MyoRepsConfig
from .base import TechniqueStrategy


class MyoRepsStrategy(TechniqueStrategy):
    technique = "myo_reps"
    config_type = MyoRepsConfig
    shared_weight = True
    vibration = VIBRATION_MYO_REPS

    config: MyoRepsConfig

    def step_count(self) -> int:
        return 1 + self.config.mini_sets

    def step_label(self, index: int) -> str:
        return "Activation" if index == 0 else f"Mini-set {index}"

    def target_reps(self, index: int) -> int | None:
        return self.config.activation_reps if index == 0 else self.config.mini_set_reps

    def rest_after(self, index: int) -> int:
        return int(self.config.rest_seconds)

    def min_reps(self, index: int) -> int:
        if index == 0:
            return max(1, self.config.activation_reps - MYO_ACTIVATION_TOLERANCE)
        return 1

    def next_step(self, index: int, state: ExecutionState) -> int | None:
        if index == 0:
            return 1
        mini_sets = state.reps[1:]
        if mini_sets[-1] < self.config.mini_set_reps or len(mini_sets) >= self.config.mini_sets:
            return None
        return index + 1

    def can_extend(self, state: ExecutionState) -> bool:
        return state.logged_steps >= 1

    def completed_fully(self, state: ExecutionState) -> bool:
        # The stop condition may end the loop early; that still counts.
        return state.sequence_finished and state.logged_steps >= 2

    def result_fields(self, state: ExecutionState) -> dict[str, Any]:
        return {
            "activation_reps": state.reps[0] if state.reps else None,
            "mini_set_reps": list(state.reps[1:]),
        }
