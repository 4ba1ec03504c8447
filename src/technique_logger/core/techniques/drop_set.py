"""
Drop set: a top set followed by immediate weight reductions.

Steps are the top set plus one step per drop. Every step's target weight
comes from the drop-set ladder; there is no rest between drops.
"""

from typing import Any

from ..calculator import drop_set_ladder
from ..engine.state import ExecutionState
from ..models import DropSetConfig
from .base import TechniqueStrategy


class DropSetStrategy(TechniqueStrategy):
    technique = "drop_set"
    config_type = DropSetConfig

    config: DropSetConfig

    def validate(self) -> None:
        self.ladder = drop_set_ladder(self.initial_weight, self.config.drops, self.config.drop_percentage)

    def step_count(self) -> int:
        return self.config.drops + 1

    def step_label(self, index: int) -> str:
        return "Top Set" if index == 0 else f"Drop {index}"

    def target_weight(self, index: int) -> float:
        return self.ladder[index]

    def result_fields(self, state: ExecutionState) -> dict[str, Any]:
        return {"drop_weights": list(state.weights), "drop_reps": list(state.reps)}
