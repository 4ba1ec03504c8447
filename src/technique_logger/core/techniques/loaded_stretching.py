"""
Loaded stretching: one timed isometric hold in the stretched position.

Phases map onto the engine as ready (WORK) -> holding (HOLD) -> completed
(DONE). The hold counts down from ``hold_seconds``; reaching zero marks
the technique fully completed. The actual RPE recorded afterwards is
metadata only.
"""

from ..engine.state import ExecutionState
from ..models import LoadedStretchingConfig
from .base import TechniqueStrategy


class LoadedStretchingStrategy(TechniqueStrategy):
    technique = "loaded_stretching"
    config_type = LoadedStretchingConfig
    shared_weight = True
    records_rpe = True

    config: LoadedStretchingConfig

    def step_count(self) -> int:
        return 1

    def step_label(self, index: int) -> str:
        return "Stretch hold"

    def hold_seconds(self, index: int) -> int | None:
        return self.config.hold_seconds

    def can_complete(self, state: ExecutionState) -> bool:
        return True

    def completed_fully(self, state: ExecutionState) -> bool:
        return state.hold_completed

    def notes(self, state: ExecutionState) -> str | None:
        rpe = state.rpe if state.rpe is not None else self.config.target_rpe
        return f"Hold: {state.hold_elapsed}s, RPE: {rpe}"
