"""
Top set + backoff: heavy top sets, then lighter higher-rep backoff sets.

All top sets run before any backoff set. Backoff weight is derived from
the initial (top-set) weight with backoff_weight().
"""

from typing import Any

from ..calculator import backoff_weight
from ..engine.state import ExecutionState
from ..models import TopSetBackoffConfig
from .base import TechniqueStrategy


class TopSetBackoffStrategy(TechniqueStrategy):
    technique = "top_set_backoff"
    config_type = TopSetBackoffConfig

    config: TopSetBackoffConfig

    def validate(self) -> None:
        self.backoff_weight = backoff_weight(self.initial_weight, self.config.backoff_percentage)

    def step_count(self) -> int:
        return self.config.top_sets + self.config.backoff_sets

    def is_top_set(self, index: int) -> bool:
        return index < self.config.top_sets

    def step_label(self, index: int) -> str:
        if self.is_top_set(index):
            return "Top Set" if self.config.top_sets == 1 else f"Top Set {index + 1}"
        return f"Backoff {index - self.config.top_sets + 1}"

    def target_weight(self, index: int) -> float:
        return self.initial_weight if self.is_top_set(index) else self.backoff_weight

    def target_reps(self, index: int) -> int | None:
        return self.config.top_set_reps if self.is_top_set(index) else self.config.backoff_reps

    def result_fields(self, state: ExecutionState) -> dict[str, Any]:
        return {"pyramid_weights": list(state.weights), "pyramid_reps": list(state.reps)}
