"""History and analytics commands: history, stats, delete-record."""

import json
from typing import Annotated, Optional

import typer

from ...core.analytics import technique_effectiveness, technique_history, technique_stats
from ...io.serializers import ValidationError, entry_to_dict
from .. import views
from ..app import ResultsPathOption, app, get_store


@app.command()
def history(
    technique: Annotated[
        Optional[str],
        typer.Option("--technique", "-t", help="Only show this technique"),
    ] = None,
    exercise: Annotated[
        Optional[str],
        typer.Option("--exercise", "-e", help="Only show this exercise"),
    ] = None,
    limit: Annotated[
        Optional[int],
        typer.Option("--limit", "-n", help="Show at most this many entries"),
    ] = None,
    json_out: Annotated[
        bool,
        typer.Option("--json", "-j", help="Output as JSON for machine processing"),
    ] = False,
    results_path: ResultsPathOption = None,
) -> None:
    """
    Show stored technique executions, newest first.
    """
    store = get_store(results_path)
    try:
        entries = store.load_entries()
    except ValidationError as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    record_ids = {id(e): i for i, e in enumerate(entries, 1)}
    entries = technique_history(entries, technique=technique, exercise_name=exercise, limit=limit)

    if json_out:
        print(json.dumps([entry_to_dict(e) for e in entries], indent=2))
        return

    if not entries:
        views.print_info("No technique executions recorded.")
        return

    views.console.print()
    views.console.print(views.format_history_table([(record_ids[id(e)], e) for e in entries]))
    views.console.print()


@app.command()
def stats(
    muscle_group: Annotated[
        Optional[str],
        typer.Option("--muscle-group", "-m", help="Only count this muscle group"),
    ] = None,
    json_out: Annotated[
        bool,
        typer.Option("--json", "-j", help="Output as JSON for machine processing"),
    ] = False,
    results_path: ResultsPathOption = None,
) -> None:
    """
    Show technique usage counts and completion rates.
    """
    store = get_store(results_path)
    try:
        entries = store.load_entries()
    except ValidationError as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    summary = technique_stats(entries)
    effectiveness = technique_effectiveness(entries, muscle_group)

    if json_out:
        print(json.dumps({
            "usage_counts": summary.usage_counts,
            "completion_rates": {t: round(r, 4) for t, r in summary.completion_rates.items()},
            "most_used_technique": summary.most_used_technique,
            "total_techniques_applied": summary.total_techniques_applied,
            "effectiveness": [
                {
                    "technique": row.technique,
                    "muscle_group": row.muscle_group,
                    "times_used": row.times_used,
                    "completion_rate": round(row.completion_rate, 4),
                }
                for row in effectiveness
            ],
        }, indent=2))
        return

    views.console.print()
    views.print_stats(summary, effectiveness)
    views.console.print()


@app.command("delete-record")
def delete_record(
    record_id: Annotated[int, typer.Argument(help="Record number shown in the # column of 'history'")],
    force: Annotated[
        bool,
        typer.Option("--force", "-f", help="Delete without confirmation"),
    ] = False,
    results_path: ResultsPathOption = None,
) -> None:
    """
    Delete one stored technique execution.
    """
    store = get_store(results_path)
    try:
        entries = store.load_entries()
    except ValidationError as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    if not entries:
        views.print_error("No technique executions recorded.")
        raise typer.Exit(1)

    if record_id < 1 or record_id > len(entries):
        views.print_error(f"Record ID must be between 1 and {len(entries)}")
        raise typer.Exit(1)

    target = entries[record_id - 1]
    views.console.print(f"Entry to delete: [bold]{target.completed_at}[/bold] {target.exercise_name} ({target.technique})")

    if not force and not views.confirm_action("Delete this entry?"):
        views.print_info("Cancelled.")
        raise typer.Exit(0)

    store.delete_entry_at(record_id - 1)
    views.print_success(f"Deleted entry #{record_id}: {target.exercise_name} ({target.technique})")
