"""
Generic phased-execution engine.

One TechniqueSession drives one exercise-in-progress through its technique:

    IDLE -> WORK[0] -> (REST) -> WORK[1] -> ... -> DONE -> COMPLETE
                 \\-> HOLD (timed steps) -/
    any non-terminal phase -> CANCELLED

All technique-specific policy comes from a TechniqueStrategy. The session
owns its countdown timer exclusively; hosts interact with it only through
pause/resume/skip_rest/reset_timer. User-input problems are reported by
return values (False / None) and never raised, so the on_complete and
on_cancel callbacks only ever see a well-formed result or a cancellation.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Callable

from ..config import ACTUAL_RPE_CHOICES, VIBRATION_COMPLETE
from ..haptics import Haptics, pulse
from ..models import TechniqueExecutionResult, is_positive_weight
from ..results import build_result
from ..timer import CountdownTimer, Scheduler
from .state import ExecutionState, Phase

if TYPE_CHECKING:
    from ..techniques.base import StepPlan, TechniqueStrategy

_ACTIVE_PHASES = (Phase.WORK, Phase.REST, Phase.HOLD, Phase.DONE)


def _valid_reps(reps: object) -> bool:
    return isinstance(reps, int) and not isinstance(reps, bool)


def _valid_weight(weight: object) -> bool:
    return is_positive_weight(weight)


class TechniqueSession:
    """
    State machine for one technique execution.

    Args:
        strategy: Technique policy (validated on construction)
        scheduler: Host repeating-timer primitive
        haptics: Optional host vibration primitive
        on_complete: Receives the result when complete() succeeds
        on_cancel: Called once when cancel() abandons the session
    """

    def __init__(
        self,
        strategy: TechniqueStrategy,
        scheduler: Scheduler,
        haptics: Haptics | None = None,
        on_complete: Callable[[TechniqueExecutionResult], None] | None = None,
        on_cancel: Callable[[], None] | None = None,
    ):
        self.strategy = strategy
        self.state = ExecutionState()
        self._haptics = haptics
        self._on_complete = on_complete
        self._on_cancel = on_cancel
        self._timer = CountdownTimer(
            scheduler,
            on_zero=self._on_timer_zero,
            on_tick=self._on_timer_tick,
            haptics=haptics,
            vibration=strategy.vibration,
        )
        self.result: TechniqueExecutionResult | None = None

    # ------------------------------------------------------------------
    # Read-only view
    # ------------------------------------------------------------------

    @property
    def technique(self) -> str:
        return self.strategy.technique

    @property
    def phase(self) -> Phase:
        return self.state.phase

    @property
    def current_step(self) -> int:
        return self.state.current_step

    @property
    def current_label(self) -> str:
        return self.strategy.step_label(self.state.current_step)

    @property
    def current_target_reps(self) -> int | None:
        return self.strategy.target_reps(self.state.current_step)

    @property
    def current_weight(self) -> float:
        """Weight that confirm() logs when no explicit weight is given."""
        if self.state.step_weight is not None:
            return self.state.step_weight
        if self.strategy.shared_weight and self.state.shared_weight is not None:
            return self.state.shared_weight
        return self.strategy.target_weight(self.state.current_step)

    @property
    def remaining_seconds(self) -> int:
        return self._timer.remaining

    @property
    def is_paused(self) -> bool:
        return self._timer.is_paused

    @property
    def timer_active(self) -> bool:
        return self._timer.is_active

    @property
    def is_timed_step(self) -> bool:
        return self.strategy.hold_seconds(self.state.current_step) is not None

    @property
    def current_min_reps(self) -> int:
        return max(1, self.strategy.min_reps(self.state.current_step))

    @property
    def can_add_step(self) -> bool:
        return self.state.phase == Phase.DONE and self.strategy.can_extend(self.state)

    @property
    def records_rpe(self) -> bool:
        return self.strategy.records_rpe

    def plan(self) -> list[StepPlan]:
        return self.strategy.plan()

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------

    def start(self) -> bool:
        """Leave IDLE and make the first step active."""
        if self.state.phase != Phase.IDLE:
            return False
        self.state.phase = Phase.WORK
        self.state.current_step = 0
        return True

    def set_weight(self, weight: float) -> bool:
        """
        Change the working weight.

        Shared-weight techniques carry the value to every following step;
        others override the current step only. Rejected while a hold runs
        or once every step is resolved.
        """
        if not _valid_weight(weight):
            return False
        if self.state.phase not in (Phase.IDLE, Phase.WORK, Phase.REST):
            return False
        if self.strategy.shared_weight:
            self.state.shared_weight = float(weight)
        else:
            self.state.step_weight = float(weight)
        return True

    def can_confirm(self, reps: int, weight: float | None = None) -> bool:
        """Whether confirm(reps, weight) would be accepted right now."""
        if self.state.phase != Phase.WORK or self.is_timed_step:
            return False
        if not _valid_reps(reps) or reps < self.current_min_reps:
            return False
        return _valid_weight(self.current_weight if weight is None else weight)

    def confirm(self, reps: int, weight: float | None = None) -> bool:
        """
        Log the current step and advance.

        Returns False (and changes nothing) when the entry is rejected.
        """
        if not self.can_confirm(reps, weight):
            return False
        index = self.state.current_step
        logged_weight = float(self.current_weight if weight is None else weight)
        self.state.weights.append(logged_weight)
        self.state.reps.append(int(reps))
        if self.strategy.shared_weight:
            self.state.shared_weight = logged_weight
        self.state.step_weight = None

        following = self.strategy.next_step(index, self.state)
        if following is None:
            self._finish_sequence()
        else:
            self._advance_to(following, self.strategy.rest_after(index))
        return True

    def add_step(self) -> bool:
        """Append one more step after the sequence ended (myo-reps "add mini-set")."""
        if not self.can_add_step:
            return False
        last = self.state.logged_steps - 1
        self._advance_to(self.state.logged_steps, self.strategy.rest_after(last))
        return True

    def begin_hold(self) -> bool:
        """Start the countdown of a timed step (requires a positive weight)."""
        if self.state.phase != Phase.WORK or not self.is_timed_step:
            return False
        if not _valid_weight(self.current_weight):
            return False
        self.state.hold_elapsed = 0
        self.state.phase = Phase.HOLD
        self._timer.start(self.strategy.hold_seconds(self.state.current_step) or 0)
        return True

    def pause(self) -> bool:
        if self.state.phase not in (Phase.REST, Phase.HOLD) or not self._timer.is_running:
            return False
        self._timer.pause()
        return True

    def resume(self) -> bool:
        if self.state.phase not in (Phase.REST, Phase.HOLD) or not self._timer.is_paused:
            return False
        self._timer.resume()
        return True

    def skip_rest(self) -> bool:
        """End the current rest now; the next step becomes active immediately."""
        if self.state.phase != Phase.REST:
            return False
        self._timer.skip()
        return True

    def reset_timer(self) -> bool:
        """
        Restart the running countdown.

        During a rest the counter returns to the full duration and waits for
        resume(). During a hold the step returns to its ready state.
        """
        if self.state.phase == Phase.REST:
            self._timer.reset()
            return True
        if self.state.phase == Phase.HOLD:
            self._timer.cancel()
            self.state.hold_elapsed = 0
            self.state.phase = Phase.WORK
            return True
        return False

    def record_rpe(self, rpe: int) -> bool:
        """Record the perceived exertion after a timed hold finished."""
        if not self.strategy.records_rpe or self.state.phase != Phase.DONE:
            return False
        if rpe not in ACTUAL_RPE_CHOICES or isinstance(rpe, bool):
            return False
        self.state.rpe = int(rpe)
        return True

    @property
    def can_complete(self) -> bool:
        return self.state.phase in _ACTIVE_PHASES and self.strategy.can_complete(self.state)

    def snapshot(self, notes: str | None = None) -> TechniqueExecutionResult:
        """Result for what has been logged so far, without changing phase."""
        return build_result(self.strategy, self.state, notes)

    def complete(self, notes: str | None = None) -> TechniqueExecutionResult | None:
        """
        Finish the technique and emit the result.

        Allowed before every step is logged (forced completion); the result
        then carries only the logged steps and completed_fully=False.
        Returns None when completion is not possible in the current phase.
        """
        if not self.can_complete:
            return None
        if self.state.phase == Phase.HOLD:
            self.state.hold_elapsed = self._timer.duration - self._timer.remaining
        self._timer.dispose()
        self.result = build_result(self.strategy, self.state, notes)
        self.state.phase = Phase.COMPLETE
        pulse(self._haptics, VIBRATION_COMPLETE)
        if self._on_complete is not None:
            self._on_complete(self.result)
        return self.result

    def cancel(self) -> bool:
        """Abandon the technique; logged data stays readable via snapshot()."""
        if self.state.phase.is_terminal:
            return False
        self._timer.dispose()
        self.state.phase = Phase.CANCELLED
        if self._on_cancel is not None:
            self._on_cancel()
        return True

    def dispose(self) -> None:
        """Release the timer when the host goes away (no callbacks fire)."""
        self._timer.dispose()
        if not self.state.phase.is_terminal:
            self.state.phase = Phase.CANCELLED

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _advance_to(self, step: int, rest_seconds: int) -> None:
        self.state.current_step = step
        if rest_seconds > 0:
            self.state.phase = Phase.REST
            self._timer.start(rest_seconds)
        else:
            self.state.phase = Phase.WORK

    def _finish_sequence(self) -> None:
        self.state.sequence_finished = True
        self.state.phase = Phase.DONE

    def _on_timer_tick(self, remaining: int) -> None:
        if self.state.phase == Phase.HOLD:
            self.state.hold_elapsed = self._timer.duration - remaining

    def _on_timer_zero(self) -> None:
        if self.state.phase == Phase.REST:
            self.state.phase = Phase.WORK
        elif self.state.phase == Phase.HOLD:
            index = self.state.current_step
            self.state.hold_elapsed = self.strategy.hold_seconds(index) or 0
            self.state.hold_completed = True
            self.state.weights.append(self.current_weight)
            following = self.strategy.next_step(index, self.state)
            if following is None:
                self._finish_sequence()
            else:
                self._advance_to(following, self.strategy.rest_after(index))
