"""Catalog and preview commands: list, ladder, expand."""

import json
from typing import Annotated

import typer

from ...core.calculator import pyramid_ladder, pyramid_reps
from ...core.catalog import TECHNIQUE_CATALOG
from ...core.expansion import expand_technique
from ...core.techniques.registry import get_strategy
from ...io.serializers import config_to_dict
from .. import views
from ..app import ConfigOverridesOption, app, resolve_config


@app.command("list")
def list_techniques(
    json_out: Annotated[
        bool,
        typer.Option("--json", "-j", help="Output catalog defaults as JSON"),
    ] = False,
) -> None:
    """
    List every technique with its level and support flags.
    """
    if json_out:
        print(json.dumps({tag: config_to_dict(info.defaults) for tag, info in TECHNIQUE_CATALOG.items()}, indent=2))
        return

    views.console.print()
    views.console.print(views.format_catalog_table(TECHNIQUE_CATALOG))
    views.console.print()


@app.command()
def ladder(
    technique: Annotated[str, typer.Argument(help="Technique tag, e.g. drop_set")],
    weight: Annotated[float, typer.Option("--weight", "-w", help="Starting (top-set) weight in kg")],
    overrides: ConfigOverridesOption = None,
) -> None:
    """
    Preview the steps of a technique: weights, rep targets and rests.
    """
    try:
        config = resolve_config(technique, overrides)
        if config.type == "pyramid":
            weights = pyramid_ladder(weight, config.steps, config.direction)
            reps = pyramid_reps(config.steps, config.direction)
            views.console.print(views.format_ladder_table(f"Pyramid ({config.direction})", weights, reps))
            return
        strategy = get_strategy(config, weight)
    except ValueError as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    if strategy is None:
        views.print_error(f"'{technique}' has no step ladder; try 'expand' instead.")
        raise typer.Exit(1)

    views.console.print(views.format_plan_table(technique, strategy.plan()))


@app.command()
def expand(
    technique: Annotated[str, typer.Argument(help="Technique tag, e.g. rest_pause")],
    weight: Annotated[float, typer.Option("--weight", "-w", help="Working weight in kg")],
    reps: Annotated[int, typer.Option("--reps", "-r", help="Target reps per working set")] = 10,
    sets: Annotated[int, typer.Option("--sets", "-n", help="Number of working sets")] = 3,
    overrides: ConfigOverridesOption = None,
) -> None:
    """
    Flatten a technique into virtual sets for the plain set logger.
    """
    try:
        config = resolve_config(technique, overrides)
        expansion = expand_technique(config, weight, reps, sets)
    except ValueError as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    views.console.print(views.format_expansion_table(technique, expansion))
    if not expansion.is_supported:
        views.print_warning(f"Not supported in simple mode: {expansion.unsupported_reason}")
