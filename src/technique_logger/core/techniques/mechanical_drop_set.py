"""
Mechanical drop set: one weight across successively easier variations.

The ordered variation list is fixed by the configuration; an empty list
is a configuration error and the session refuses to start.
"""

from typing import Any

from ..engine.state import ExecutionState
from ..models import MechanicalDropSetConfig, TechniqueConfigError
from .base import TechniqueStrategy


class MechanicalDropSetStrategy(TechniqueStrategy):
    technique = "mechanical_drop_set"
    config_type = MechanicalDropSetConfig
    shared_weight = True

    config: MechanicalDropSetConfig

    def validate(self) -> None:
        if not self.config.variations:
            raise TechniqueConfigError(self.technique, "no variations configured")

    def step_count(self) -> int:
        return len(self.config.variations)

    def step_label(self, index: int) -> str:
        return self.config.variations[index]

    def target_reps(self, index: int) -> int | None:
        return self.config.reps_per_variation

    def rest_after(self, index: int) -> int:
        return int(self.config.rest_between)

    def result_fields(self, state: ExecutionState) -> dict[str, Any]:
        return {"drop_weights": list(state.weights), "drop_reps": list(state.reps)}

    def notes(self, state: ExecutionState) -> str | None:
        if not state.reps:
            return None
        logged = zip(self.config.variations, state.reps)
        return "Variations: " + ", ".join(f"{name}:{reps}" for name, reps in logged)
