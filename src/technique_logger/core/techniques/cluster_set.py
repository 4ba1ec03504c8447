"""
Cluster set: small rep clusters separated by intra-set rest.

Completion needs at least one logged cluster; full completion needs all
of them.
"""

from typing import Any

from ..config import VIBRATION_CLUSTER
from ..engine.state import ExecutionState
from ..models import ClusterSetConfig
from .base import TechniqueStrategy


class ClusterSetStrategy(TechniqueStrategy):
    technique = "cluster_set"
    config_type = ClusterSetConfig
    shared_weight = True
    vibration = VIBRATION_CLUSTER

    config: ClusterSetConfig

    def step_count(self) -> int:
        return self.config.clusters

    def step_label(self, index: int) -> str:
        return f"Cluster {index + 1}"

    def target_reps(self, index: int) -> int | None:
        return self.config.reps_per_cluster

    def rest_after(self, index: int) -> int:
        return int(self.config.intra_rest_seconds)

    def result_fields(self, state: ExecutionState) -> dict[str, Any]:
        return {"cluster_reps": list(state.reps)}
