"""Interactive execution of a specialized technique: run."""

import time
from datetime import datetime
from typing import Annotated, Optional

import typer

from ...core.config import ACTUAL_RPE_CHOICES
from ...core.engine.session import TechniqueSession
from ...core.engine.state import Phase
from ...core.models import TechniqueExecutionResult, TechniqueLogEntry
from ...core.techniques.registry import create_session
from ...core.timer import ManualScheduler
from ...io.serializers import ValidationError
from .. import views
from ..app import ConfigOverridesOption, ResultsPathOption, app, get_store, resolve_config

_HELP_LINE = "Enter reps, 'w <kg>' to change weight, 'f' to finish early, 'q' to quit. Ctrl+C skips a rest."


def _ask(prompt: str) -> str | None:
    """Read one answer; None when input is exhausted."""
    try:
        return views.console.input(prompt).strip()
    except EOFError:
        return None


def _confirm(message: str) -> bool:
    try:
        return views.confirm_action(message)
    except EOFError:
        return False


def _change_weight(session: TechniqueSession, answer: str) -> None:
    raw = answer[1:].strip()
    try:
        weight = float(raw)
    except ValueError:
        views.print_warning(f"Not a weight: {raw!r}")
        return
    if not session.set_weight(weight):
        views.print_warning(f"Weight {raw} not accepted.")
        return
    views.print_info(f"Weight set to {weight:g} kg.")


def _countdown(session: TechniqueSession, scheduler: ManualScheduler, label: str, no_wait: bool) -> None:
    """Drive the session's timer until the current rest or hold ends."""
    if no_wait:
        if session.phase == Phase.REST:
            session.skip_rest()
        else:
            scheduler.advance(session.remaining_seconds)
        return

    try:
        with views.console.status(f"{label}: {session.remaining_seconds}s") as status:
            while session.timer_active:
                time.sleep(1)
                scheduler.advance(1)
                status.update(f"{label}: {session.remaining_seconds}s")
    except KeyboardInterrupt:
        if session.phase != Phase.REST:
            raise
        session.skip_rest()


def _ask_rpe(session: TechniqueSession) -> None:
    choices = "/".join(str(c) for c in ACTUAL_RPE_CHOICES)
    while True:
        answer = _ask(f"Actual RPE ({choices}, Enter to skip): ")
        if not answer:
            return
        try:
            rpe = int(answer)
        except ValueError:
            rpe = -1
        if session.record_rpe(rpe):
            return
        views.print_warning(f"RPE must be one of {choices}.")


def _work_step(session: TechniqueSession, notes: str | None) -> TechniqueExecutionResult | None | bool:
    """
    Handle one prompt while a step accepts input.

    Returns the result when the lifter finishes early, None when they quit,
    and True to keep going.
    """
    weight = session.current_weight
    if session.is_timed_step:
        hold = session.strategy.hold_seconds(session.current_step)
        answer = _ask(f"[bold]{session.current_label}[/bold] @ {weight:g} kg, {hold}s. Enter to start: ")
    else:
        target = session.current_target_reps
        target_str = f", target {target}" if target is not None else ""
        answer = _ask(f"[bold]{session.current_label}[/bold] @ {weight:g} kg{target_str}. Reps: ")

    if answer is None or answer.lower() == "q":
        session.cancel()
        return None
    command = answer.lower()
    if command == "f":
        if session.can_complete:
            return session.complete(notes)
        views.print_warning("Log at least one step before finishing.")
        return True
    if command.startswith("w"):
        _change_weight(session, answer)
        return True
    if session.is_timed_step:
        session.begin_hold()
        return True

    try:
        reps = int(answer)
    except ValueError:
        views.print_warning(f"Not a rep count: {answer!r}")
        return True
    if not session.confirm(reps):
        views.print_warning(f"{reps} reps not accepted for {session.current_label} (minimum {session.current_min_reps}).")
    return True


def _drive(
    session: TechniqueSession,
    scheduler: ManualScheduler,
    no_wait: bool,
    notes: str | None,
) -> TechniqueExecutionResult | None:
    """Run the session to completion; None if the lifter quit."""
    while True:
        phase = session.phase
        if phase == Phase.REST:
            _countdown(session, scheduler, f"Rest before {session.current_label}", no_wait)
        elif phase == Phase.HOLD:
            _countdown(session, scheduler, session.current_label, no_wait)
        elif phase == Phase.WORK:
            outcome = _work_step(session, notes)
            if outcome is not True:
                return outcome
        elif phase == Phase.DONE:
            if session.can_add_step and _confirm("Add another mini-set?"):
                session.add_step()
                continue
            if session.records_rpe:
                _ask_rpe(session)
            return session.complete(notes)
        else:
            return session.result


@app.command()
def run(
    technique: Annotated[str, typer.Argument(help="Technique tag, e.g. drop_set")],
    weight: Annotated[float, typer.Option("--weight", "-w", help="Starting (top-set) weight in kg")],
    exercise: Annotated[str, typer.Option("--exercise", "-e", help="Exercise name")],
    muscle_group: Annotated[
        Optional[str],
        typer.Option("--muscle-group", "-m", help="Muscle group, used by 'stats'"),
    ] = None,
    notes: Annotated[
        Optional[str],
        typer.Option("--notes", help="Free-text notes stored with the result"),
    ] = None,
    no_wait: Annotated[
        bool,
        typer.Option("--no-wait", help="Skip rests and holds instead of counting down"),
    ] = False,
    overrides: ConfigOverridesOption = None,
    results_path: ResultsPathOption = None,
) -> None:
    """
    Execute a technique step by step and save the result.
    """
    scheduler = ManualScheduler()
    try:
        config = resolve_config(technique, overrides)
        session = create_session(config, weight, scheduler, haptics=views.BellHaptics())
    except ValueError as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    if session is None:
        views.print_error(f"'{technique}' has no specialized engine; use 'expand' to follow it as plain sets.")
        raise typer.Exit(1)

    views.console.print(views.format_plan_table(technique, session.plan()))
    views.print_info(_HELP_LINE)
    session.start()

    try:
        result = _drive(session, scheduler, no_wait, notes)
    except KeyboardInterrupt:
        session.cancel()
        result = None

    if result is None:
        views.print_info("Cancelled; nothing saved.")
        raise typer.Exit(0)

    views.console.print()
    views.console.print(views.format_result_table(result, weight))

    store = get_store(results_path)
    try:
        entry = TechniqueLogEntry(
            completed_at=datetime.now().isoformat(timespec="seconds"),
            exercise_name=exercise,
            technique=config.type,
            config=config,
            initial_weight=weight,
            result=result,
            muscle_group=muscle_group,
        )
        store.append_entry(entry)
    except (OSError, ValueError, ValidationError) as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    views.print_success(f"Saved to {store.results_path}")
