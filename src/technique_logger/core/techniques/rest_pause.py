"""
Rest-pause: mini-sets after an initial set, separated by short pauses.

The initial set is logged outside this engine. Each mini-set except the
last is followed by a rest of ``rest_seconds``.
"""

from typing import Any

from ..config import VIBRATION_REST_PAUSE
from ..engine.state import ExecutionState
from ..models import RestPauseConfig
from .base import TechniqueStrategy


class RestPauseStrategy(TechniqueStrategy):
    technique = "rest_pause"
    config_type = RestPauseConfig
    shared_weight = True
    vibration = VIBRATION_REST_PAUSE

    config: RestPauseConfig

    def step_count(self) -> int:
        return self.config.mini_sets

    def step_label(self, index: int) -> str:
        return f"Mini-set {index + 1}"

    def rest_after(self, index: int) -> int:
        return int(self.config.rest_seconds)

    def result_fields(self, state: ExecutionState) -> dict[str, Any]:
        return {"mini_set_reps": list(state.reps)}
