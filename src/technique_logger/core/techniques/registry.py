"""
Technique dispatcher.

Maps a configuration's technique tag to its strategy. Tags without a
specialized engine (superset, pyramid, giant set, lengthened partials,
forced reps, pre-exhaust) have no entry: hosts fall back to the plain set
logger and use expand_technique() for labels and timing.
"""

from typing import Callable

from ..engine.session import TechniqueSession
from ..haptics import Haptics
from ..models import AppliedTechnique, TechniqueConfig, TechniqueExecutionResult
from ..timer import Scheduler
from .base import TechniqueStrategy
from .cluster_set import ClusterSetStrategy
from .drop_set import DropSetStrategy
from .fst7 import Fst7Strategy
from .loaded_stretching import LoadedStretchingStrategy
from .mechanical_drop_set import MechanicalDropSetStrategy
from .myo_reps import MyoRepsStrategy
from .rest_pause import RestPauseStrategy
from .top_set_backoff import TopSetBackoffStrategy

STRATEGY_REGISTRY: dict[str, type[TechniqueStrategy]] = {
    "drop_set": DropSetStrategy,
    "rest_pause": RestPauseStrategy,
    "myo_reps": MyoRepsStrategy,
    "cluster_set": ClusterSetStrategy,
    "fst7_protocol": Fst7Strategy,
    "loaded_stretching": LoadedStretchingStrategy,
    "mechanical_drop_set": MechanicalDropSetStrategy,
    "top_set_backoff": TopSetBackoffStrategy,
}


def has_specialized_engine(technique: str) -> bool:
    return technique in STRATEGY_REGISTRY


def get_strategy(config: TechniqueConfig, initial_weight: float) -> TechniqueStrategy | None:
    """
    Build the strategy for a configuration.

    Returns:
        A validated strategy, or None if the technique has no specialized engine

    Raises:
        TechniqueConfigError: If the configuration or weight cannot start
    """
    strategy_cls = STRATEGY_REGISTRY.get(config.type)
    if strategy_cls is None:
        return None
    return strategy_cls(config, initial_weight)


def create_session(
    technique: AppliedTechnique | TechniqueConfig,
    initial_weight: float,
    scheduler: Scheduler,
    haptics: Haptics | None = None,
    on_complete: Callable[[TechniqueExecutionResult], None] | None = None,
    on_cancel: Callable[[], None] | None = None,
) -> TechniqueSession | None:
    """
    Create an idle session for a technique.

    Args:
        technique: Applied technique or bare configuration
        initial_weight: Starting (top-set) weight, must be positive
        scheduler: Repeating-timer primitive used for rests and holds
        haptics: Optional vibration primitive
        on_complete: Receives the result when the session completes
        on_cancel: Called when the session is cancelled

    Returns:
        TechniqueSession in the IDLE phase, or None if the technique has
        no specialized engine

    Raises:
        TechniqueConfigError: Before any state exists, if the technique
            cannot start
    """
    config = technique.config if isinstance(technique, AppliedTechnique) else technique
    strategy = get_strategy(config, initial_weight)
    if strategy is None:
        return None
    return TechniqueSession(strategy, scheduler, haptics=haptics, on_complete=on_complete, on_cancel=on_cancel)
