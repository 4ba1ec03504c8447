"""
JSON serialization for technique data models.

Handles conversion between dataclasses and JSON-compatible dicts. The wire
format uses camelCase keys (``dropPercentage``, ``completedFully``) so the
records stay readable by the mobile and web clients that share them.
"""

import json
import re
from dataclasses import fields
from typing import Any

from ..core.models import (
    CONFIG_CLASSES,
    AppliedTechnique,
    TechniqueConfig,
    TechniqueConfigError,
    TechniqueExecutionResult,
    TechniqueLogEntry,
    is_finite_number,
)


class ValidationError(Exception):
    """Raised when data validation fails."""

    pass


_RESULT_ARRAYS = (
    "drop_weights",
    "drop_reps",
    "mini_set_reps",
    "cluster_reps",
    "pyramid_weights",
    "pyramid_reps",
)


def to_camel(name: str) -> str:
    """drop_percentage -> dropPercentage"""
    head, *rest = name.split("_")
    return head + "".join(part.capitalize() for part in rest)


def to_snake(name: str) -> str:
    """dropPercentage -> drop_percentage"""
    return re.sub(r"(?<!^)(?=[A-Z])", "_", name).lower()


def validate_positive(value: int | float, name: str) -> int | float:
    """
    Validate that a value is a positive number.

    Raises:
        ValidationError: If value is not a number or not positive
    """
    if not is_finite_number(value) or value <= 0:
        raise ValidationError(f"{name} must be a positive number, got {value!r}")
    return value


def _int_list(data: dict[str, Any], key: str) -> list[int] | None:
    value = data.get(key)
    if value is None:
        return None
    if not isinstance(value, list):
        raise ValidationError(f"{key} must be a list, got {value!r}")
    for v in value:
        if not is_finite_number(v) or v < 0:
            raise ValidationError(f"{key} entries must be non-negative numbers, got {v!r}")
    return value


def config_to_dict(config: TechniqueConfig) -> dict[str, Any]:
    """
    Convert a technique configuration to a JSON-compatible dict.

    Returns:
        Dict with a ``type`` tag and camelCase fields
    """
    data: dict[str, Any] = {"type": config.type}
    for f in fields(config):
        value = getattr(config, f.name)
        data[to_camel(f.name)] = list(value) if isinstance(value, tuple) else value
    return data


def dict_to_config(data: dict[str, Any]) -> TechniqueConfig:
    """
    Convert a dict to the matching technique configuration.

    Raises:
        ValidationError: If the tag is unknown, a field is unknown or
            missing, or a value is out of range
    """
    if not isinstance(data, dict):
        raise ValidationError(f"Technique config must be an object, got {data!r}")
    tag = data.get("type")
    if tag not in CONFIG_CLASSES:
        raise ValidationError(f"Unknown technique type: {tag!r}")
    cls = CONFIG_CLASSES[tag]
    known = {f.name for f in fields(cls)}
    kwargs: dict[str, Any] = {}
    for key, value in data.items():
        if key == "type":
            continue
        name = to_snake(key)
        if name not in known:
            raise ValidationError(f"Unknown field for {tag}: {key}")
        kwargs[name] = value
    try:
        return cls(**kwargs)
    except TechniqueConfigError as e:
        raise ValidationError(str(e)) from e
    except TypeError as e:
        raise ValidationError(f"Invalid {tag} config: {e}") from e


def applied_technique_to_dict(applied: AppliedTechnique) -> dict[str, Any]:
    return {
        "technique": applied.technique,
        "config": config_to_dict(applied.config),
        "rationale": applied.rationale,
    }


def dict_to_applied_technique(data: dict[str, Any]) -> AppliedTechnique:
    """
    Convert a dict to an AppliedTechnique.

    The ``technique`` tag, when present, must agree with the config's tag.

    Raises:
        ValidationError: If data is invalid
    """
    config = dict_to_config(data.get("config"))
    tag = data.get("technique", config.type)
    if tag != config.type:
        raise ValidationError(f"Technique {tag!r} does not match config type {config.type!r}")
    return AppliedTechnique(config=config, rationale=str(data.get("rationale", "")))


def result_to_dict(result: TechniqueExecutionResult) -> dict[str, Any]:
    """
    Convert a TechniqueExecutionResult to a JSON-compatible dict.

    Arrays that do not apply to the technique are omitted.
    """
    data: dict[str, Any] = {
        "technique": result.technique,
        "config": config_to_dict(result.config),
    }
    for name in _RESULT_ARRAYS:
        value = getattr(result, name)
        if value is not None:
            data[to_camel(name)] = list(value)
    if result.activation_reps is not None:
        data["activationReps"] = result.activation_reps
    data["completedFully"] = result.completed_fully
    if result.notes is not None:
        data["notes"] = result.notes
    return data


def dict_to_result(data: dict[str, Any]) -> TechniqueExecutionResult:
    """
    Convert a dict to a TechniqueExecutionResult.

    Raises:
        ValidationError: If data is invalid
    """
    config = dict_to_config(data.get("config"))
    technique = data.get("technique", config.type)
    if technique != config.type:
        raise ValidationError(f"Result technique {technique!r} does not match config type {config.type!r}")
    if not isinstance(data.get("completedFully"), bool):
        raise ValidationError("completedFully must be a boolean")

    activation = data.get("activationReps")
    if activation is not None and (not isinstance(activation, int) or activation < 0):
        raise ValidationError(f"activationReps must be a non-negative integer, got {activation!r}")

    arrays: dict[str, Any] = {}
    for name in _RESULT_ARRAYS:
        values = _int_list(data, to_camel(name))
        if values is not None:
            arrays[name] = [float(v) for v in values] if name.endswith("weights") else [int(v) for v in values]

    return TechniqueExecutionResult(
        technique=technique,
        config=config,
        completed_fully=data["completedFully"],
        activation_reps=activation,
        notes=data.get("notes"),
        **arrays,
    )


def entry_to_dict(entry: TechniqueLogEntry) -> dict[str, Any]:
    data: dict[str, Any] = {
        "completedAt": entry.completed_at,
        "exerciseName": entry.exercise_name,
        "techniqueType": entry.technique,
        "techniqueConfig": config_to_dict(entry.config),
        "initialWeight": entry.initial_weight,
        "executionResult": result_to_dict(entry.result) if entry.result is not None else None,
    }
    if entry.muscle_group is not None:
        data["muscleGroup"] = entry.muscle_group
    return data


def dict_to_entry(data: dict[str, Any]) -> TechniqueLogEntry:
    """
    Convert a stored dict to a TechniqueLogEntry.

    Raises:
        ValidationError: If data is invalid
    """
    for key in ("completedAt", "exerciseName", "techniqueType", "techniqueConfig", "initialWeight"):
        if key not in data:
            raise ValidationError(f"Missing field: {key}")
    raw_result = data.get("executionResult")
    try:
        return TechniqueLogEntry(
            completed_at=str(data["completedAt"]),
            exercise_name=str(data["exerciseName"]),
            technique=str(data["techniqueType"]),
            config=dict_to_config(data["techniqueConfig"]),
            initial_weight=float(validate_positive(data["initialWeight"], "initialWeight")),
            result=dict_to_result(raw_result) if raw_result is not None else None,
            muscle_group=data.get("muscleGroup"),
        )
    except ValueError as e:
        raise ValidationError(str(e)) from e


def entry_to_json_line(entry: TechniqueLogEntry) -> str:
    """
    Serialize an entry to a single JSON line (no trailing newline).
    """
    return json.dumps(entry_to_dict(entry), separators=(",", ":"))


def json_line_to_entry(line: str) -> TechniqueLogEntry:
    """
    Deserialize a JSON line to a TechniqueLogEntry.

    Raises:
        ValidationError: If JSON is invalid or data validation fails
    """
    try:
        data = json.loads(line.strip())
    except json.JSONDecodeError as e:
        raise ValidationError(f"Invalid JSON: {e}") from e
    if not isinstance(data, dict):
        raise ValidationError("Entry must be a JSON object")
    return dict_to_entry(data)
