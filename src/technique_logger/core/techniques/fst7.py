"""FST-7: seven sets with a fixed short rest between them."""

from typing import Any

from ..engine.state import ExecutionState
from ..models import Fst7ProtocolConfig
from .base import TechniqueStrategy


class Fst7Strategy(TechniqueStrategy):
    technique = "fst7_protocol"
    config_type = Fst7ProtocolConfig
    shared_weight = True

    config: Fst7ProtocolConfig

    def step_count(self) -> int:
        return self.config.sets

    def target_reps(self, index: int) -> int | None:
        return self.config.target_reps

    def rest_after(self, index: int) -> int:
        return int(self.config.rest_seconds)

    def result_fields(self, state: ExecutionState) -> dict[str, Any]:
        return {"mini_set_reps": list(state.reps)}
