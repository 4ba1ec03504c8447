"""Shared Typer app object, shared option types, and store/config utilities."""

from dataclasses import fields, replace
from pathlib import Path
from typing import Annotated, Optional

import typer
import yaml

from ..core.catalog import get_technique_info
from ..core.models import TechniqueConfig, TechniqueConfigError
from ..io.results_store import ResultStore, get_default_results_path

# Shared --results-path option type used by every command that touches storage
ResultsPathOption = Annotated[
    Optional[Path],
    typer.Option("--results-path", "-p", help="Path to results JSONL file"),
]

# Shared --set option type: config overrides as key=value pairs
ConfigOverridesOption = Annotated[
    Optional[list[str]],
    typer.Option(
        "--set",
        "-s",
        help="Override a config field, e.g. --set drops=3 --set 'variations=[Incline, Flat]'",
    ),
]

app = typer.Typer(
    name="technique-logger",
    help="Set-by-set logger for advanced resistance-training techniques.",
    no_args_is_help=True,
)


def get_store(results_path: Path | None) -> ResultStore:
    """Get result store from path or the default location."""
    if results_path is None:
        results_path = get_default_results_path()
    return ResultStore(results_path)


def parse_overrides(pairs: list[str] | None) -> dict[str, object]:
    """
    Parse ``key=value`` pairs; values are read as YAML scalars or lists.

    Raises:
        typer.BadParameter: If a pair has no '=' or an unparsable value
    """
    overrides: dict[str, object] = {}
    for pair in pairs or []:
        key, sep, raw = pair.partition("=")
        if not sep or not key.strip():
            raise typer.BadParameter(f"Expected key=value, got {pair!r}")
        try:
            value = yaml.safe_load(raw)
        except yaml.YAMLError as e:
            raise typer.BadParameter(f"Cannot parse value for {key}: {e}") from e
        overrides[key.strip().replace("-", "_")] = value
    return overrides


def resolve_config(technique: str, pairs: list[str] | None) -> TechniqueConfig:
    """
    Catalog defaults for *technique* with the command-line overrides applied.

    Raises:
        ValueError: Unknown technique (from the catalog)
        TechniqueConfigError: Unknown field or out-of-range value
    """
    defaults = get_technique_info(technique).defaults
    overrides = parse_overrides(pairs)
    known = {f.name for f in fields(defaults)}
    unknown = sorted(set(overrides) - known)
    if unknown:
        raise TechniqueConfigError(technique, f"unknown field(s) {unknown}; valid: {sorted(known)}")
    return replace(defaults, **overrides)
