"""
CLI view formatters using Rich for pretty console output.

Handles table formatting of catalogs, ladders, virtual sets, execution
results and stored history.
"""

from typing import Sequence

from rich.console import Console
from rich.table import Table

from ..core.analytics import TechniqueEffectiveness, TechniqueStats, result_volume
from ..core.catalog import TechniqueInfo
from ..core.expansion import is_supported_in_simple_mode
from ..core.models import TechniqueExecutionResult, TechniqueExpansionResult, TechniqueLogEntry
from ..core.techniques.base import StepPlan
from ..core.techniques.registry import has_specialized_engine

console = Console()


class BellHaptics:
    """Terminal stand-in for a vibration motor: rings the bell once per pattern."""

    def vibrate(self, pattern: Sequence[int]) -> None:
        console.bell()


def _fmt_weight(weight: float) -> str:
    return f"{weight:g}"


def _fmt_list(values: Sequence[float] | None) -> str:
    if values is None:
        return ""
    return ", ".join(_fmt_weight(v) for v in values)


def _check(flag: bool) -> str:
    return "[green]yes[/green]" if flag else "[dim]no[/dim]"


def format_catalog_table(catalog: dict[str, TechniqueInfo]) -> Table:
    """Create a Rich table of every technique in the catalog."""
    table = Table(title="Techniques", show_header=True, header_style="bold cyan")

    table.add_column("Technique", style="bold")
    table.add_column("Name")
    table.add_column("Level")
    table.add_column("Engine", justify="center")
    table.add_column("Simple", justify="center")
    table.add_column("Description")

    for tag, info in catalog.items():
        level = info.min_experience
        if info.requires_compound:
            level += " (compound)"
        elif info.requires_isolation:
            level += " (isolation)"
        table.add_row(
            tag,
            info.display_name,
            level,
            _check(has_specialized_engine(tag)),
            _check(is_supported_in_simple_mode(tag)),
            info.description,
        )

    return table


def format_plan_table(title: str, steps: list[StepPlan]) -> Table:
    """Create a Rich table previewing the steps of a technique."""
    table = Table(title=title, show_header=True, header_style="bold cyan")

    table.add_column("#", justify="right", style="dim")
    table.add_column("Step")
    table.add_column("Weight", justify="right")
    table.add_column("Target", justify="right")
    table.add_column("Rest after", justify="right")

    for step in steps:
        if step.hold_seconds is not None:
            target = f"{step.hold_seconds}s hold"
        else:
            target = str(step.target_reps) if step.target_reps is not None else "max"
        table.add_row(
            str(step.index + 1),
            step.label,
            _fmt_weight(step.target_weight),
            target,
            f"{step.rest_after}s" if step.rest_after else "-",
        )

    return table


def format_ladder_table(title: str, weights: list[float], reps: list[int] | None = None) -> Table:
    """Create a Rich table for a bare weight ladder (pyramid preview)."""
    table = Table(title=title, show_header=True, header_style="bold cyan")

    table.add_column("#", justify="right", style="dim")
    table.add_column("Weight", justify="right")
    if reps is not None:
        table.add_column("Reps", justify="right")

    for i, weight in enumerate(weights):
        row = [str(i + 1), _fmt_weight(weight)]
        if reps is not None:
            row.append(str(reps[i]))
        table.add_row(*row)

    return table


def format_expansion_table(technique: str, expansion: TechniqueExpansionResult) -> Table:
    """Create a Rich table of the virtual sets of an expanded technique."""
    table = Table(title=f"Virtual sets: {technique}", show_header=True, header_style="bold cyan")

    table.add_column("Set", justify="right", style="dim")
    table.add_column("Weight", justify="right")
    table.add_column("Reps", justify="right")
    table.add_column("Label")
    table.add_column("Rest", justify="right")

    for vs in expansion.virtual_sets:
        table.add_row(
            str(vs.set_number),
            _fmt_weight(vs.weight),
            str(vs.target_reps),
            f"[magenta]{vs.label}[/magenta]" if vs.label else "",
            f"{vs.rest_seconds}s" if vs.rest_seconds is not None else "",
        )

    return table


def format_result_table(result: TechniqueExecutionResult, working_weight: float) -> Table:
    """Create a Rich summary table for one execution result."""
    table = Table(title=f"Result: {result.technique}", show_header=False)

    table.add_column("Field", style="bold")
    table.add_column("Value")

    rows: list[tuple[str, str]] = [
        ("Completed fully", _check(result.completed_fully)),
    ]
    if result.activation_reps is not None:
        rows.append(("Activation reps", str(result.activation_reps)))
    for label, values in (
        ("Drop weights", result.drop_weights),
        ("Drop reps", result.drop_reps),
        ("Mini-set reps", result.mini_set_reps),
        ("Cluster reps", result.cluster_reps),
        ("Weights", result.pyramid_weights),
        ("Reps", result.pyramid_reps),
    ):
        if values is not None:
            rows.append((label, _fmt_list(values)))
    rows.append(("Total reps", str(result.total_reps)))
    rows.append(("Volume (kg)", _fmt_weight(round(result_volume(result, working_weight), 1))))
    if result.notes:
        rows.append(("Notes", result.notes))

    for field, value in rows:
        table.add_row(field, value)
    return table


def format_history_table(rows: list[tuple[int, TechniqueLogEntry]]) -> Table:
    """Create a Rich table of stored executions, each with its record number."""
    table = Table(title="Technique History", show_header=True, header_style="bold cyan")

    table.add_column("#", justify="right", style="dim")
    table.add_column("When")
    table.add_column("Exercise")
    table.add_column("Technique")
    table.add_column("Weight", justify="right")
    table.add_column("Reps", justify="right")
    table.add_column("Full", justify="center")

    for record_id, entry in rows:
        result = entry.result
        table.add_row(
            str(record_id),
            entry.completed_at.replace("T", " ")[:16],
            entry.exercise_name,
            entry.technique,
            _fmt_weight(entry.initial_weight),
            str(result.total_reps) if result is not None else "-",
            _check(result.completed_fully) if result is not None else "-",
        )

    return table


def print_stats(stats: TechniqueStats, effectiveness: list[TechniqueEffectiveness]) -> None:
    """Print the usage summary followed by the per-technique table."""
    console.print(f"[bold]Techniques applied:[/bold] {stats.total_techniques_applied}")
    console.print(f"[bold]Most used:[/bold] {stats.most_used_technique or '-'}")

    if not effectiveness:
        return

    table = Table(show_header=True, header_style="bold cyan")
    table.add_column("Technique", style="bold")
    table.add_column("Muscle group")
    table.add_column("Used", justify="right")
    table.add_column("Completion", justify="right")
    for row in effectiveness:
        table.add_row(row.technique, row.muscle_group, str(row.times_used), f"{row.completion_rate:.0%}")
    console.print(table)


def print_success(message: str) -> None:
    """Print a success message."""
    console.print(f"[green]{message}[/green]")


def print_error(message: str) -> None:
    """Print an error message."""
    console.print(f"[red]Error: {message}[/red]")


def print_warning(message: str) -> None:
    """Print a warning message."""
    console.print(f"[yellow]Warning: {message}[/yellow]")


def print_info(message: str) -> None:
    """Print an info message."""
    console.print(f"[blue]{message}[/blue]")


def confirm_action(message: str) -> bool:
    """
    Prompt user for confirmation.

    Args:
        message: Confirmation message

    Returns:
        True if confirmed, False otherwise
    """
    response = console.input(f"{message} \\[y/N]: ")
    return response.lower() in ("y", "yes")
