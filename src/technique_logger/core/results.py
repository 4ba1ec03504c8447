"""
Result normalization.

Packages a session's logged arrays into the shared TechniqueExecutionResult
shape. Arrays are truncated to the steps that were actually logged: a
forced completion never pads unlogged steps with zeros, and then reports
completed_fully=False.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from .engine.state import ExecutionState
from .models import TechniqueExecutionResult

if TYPE_CHECKING:
    from .techniques.base import TechniqueStrategy


def build_result(
    strategy: TechniqueStrategy,
    state: ExecutionState,
    notes: str | None = None,
) -> TechniqueExecutionResult:
    """
    Build the immutable result for a finished (or force-completed) session.

    Args:
        strategy: Strategy of the session
        state: Session state at completion time
        notes: Optional free text from the lifter, appended after any
            technique-generated notes

    Returns:
        TechniqueExecutionResult echoing the technique tag and config
    """
    combined = [n for n in (strategy.notes(state), notes) if n]
    return TechniqueExecutionResult(
        technique=strategy.technique,
        config=strategy.config,
        completed_fully=strategy.completed_fully(state),
        notes="; ".join(combined) if combined else None,
        **strategy.result_fields(state),
    )
