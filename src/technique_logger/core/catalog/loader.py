"""
YAML -> TechniqueInfo loader.

Loads the technique catalog from the bundled ``techniques.yaml`` shipped
next to the package. A user file at ``~/.technique-logger/techniques.yaml``
is deep-merged over it, so only changed keys need to be listed. A user
entry whose tag is not a known technique is skipped with a warning, and
an override that makes an entry invalid is dropped in favour of the
bundled entry.

Usage (internal, called by registry.py):
    from .loader import load_catalog_from_yaml
    catalog = load_catalog_from_yaml()   # dict or None on failure
"""

from __future__ import annotations

import os
import warnings
from pathlib import Path

import yaml

from ..models import CONFIG_CLASSES
from .base import TechniqueInfo

_REQUIRED_FIELDS: frozenset[str] = frozenset(
    {
        "display_name",
        "description",
        "min_experience",
        "defaults",
    }
)


def technique_from_dict(technique: str, d: dict) -> TechniqueInfo:
    """Convert a raw catalog entry (from YAML) to a TechniqueInfo.

    Raises ValueError if the tag is unknown, a required field is absent or
    the default configuration is out of range.
    """
    if technique not in CONFIG_CLASSES:
        raise ValueError(f"unknown technique '{technique}'")
    missing = _REQUIRED_FIELDS - set(d)
    if missing:
        raise ValueError(f"TechniqueInfo missing fields: {sorted(missing)}")
    raw_defaults = d["defaults"]
    if not isinstance(raw_defaults, dict):
        raise ValueError("defaults must be a mapping")
    try:
        defaults = CONFIG_CLASSES[technique](**raw_defaults)
    except TypeError as exc:
        raise ValueError(f"bad defaults: {exc}") from exc

    return TechniqueInfo(
        technique=technique,
        display_name=str(d["display_name"]),
        description=str(d["description"]),
        min_experience=str(d["min_experience"]),
        defaults=defaults,
        requires_compound=bool(d.get("requires_compound", False)),
        requires_isolation=bool(d.get("requires_isolation", False)),
    )


def _entry_to_info(technique: str, entry: object) -> TechniqueInfo:
    if not isinstance(entry, dict):
        raise ValueError("not a mapping")
    return technique_from_dict(technique, entry)


def _load_yaml_file(path: Path) -> dict:
    """Load a YAML mapping; warn and return {} when the file cannot be parsed."""
    try:
        with open(path, "r", encoding="utf-8") as fh:
            data = yaml.safe_load(fh)
    except (OSError, yaml.YAMLError) as exc:
        warnings.warn(f"technique-logger: cannot read {path} ({exc})", stacklevel=2)
        return {}
    return data if isinstance(data, dict) else {}


def _deep_merge(base: dict, override: dict) -> dict:
    """Recursively merge override into base (non-destructive to base)."""
    result = dict(base)
    for k, v in override.items():
        if isinstance(v, dict) and isinstance(result.get(k), dict):
            result[k] = _deep_merge(result[k], v)
        else:
            result[k] = v
    return result


def get_bundled_catalog_path() -> Path:
    # loader.py lives at src/technique_logger/core/catalog/loader.py
    return Path(__file__).parent.parent.parent / "techniques.yaml"


def get_user_catalog_path() -> Path | None:
    """Return ~/.technique-logger/techniques.yaml if it exists, else None."""
    home = Path(os.environ.get("HOME", "~")).expanduser()
    p = home / ".technique-logger" / "techniques.yaml"
    return p if p.is_file() else None


def load_catalog_from_yaml(
    bundled_path: Path | None = None,
    user_path: Path | None = None,
) -> dict[str, TechniqueInfo] | None:
    """Return {technique: TechniqueInfo} loaded from the catalog YAML files.

    Args:
        bundled_path: Catalog shipped with the package (default: bundled file)
        user_path: Optional override file (default: ~/.technique-logger/techniques.yaml)

    Returns None (rather than raising) when nothing could be loaded, so the
    registry decides how to fail.
    """
    bundled_path = bundled_path or get_bundled_catalog_path()
    user_path = user_path or get_user_catalog_path()

    bundled = _load_yaml_file(bundled_path) if bundled_path.is_file() else {}
    overrides: dict = {}
    if user_path is not None:
        for technique, entry in _load_yaml_file(user_path).items():
            if technique in CONFIG_CLASSES:
                overrides[technique] = entry
            else:
                warnings.warn(
                    f"technique-logger: ignoring unknown technique '{technique}' in {user_path}",
                    stacklevel=2,
                )

    result: dict[str, TechniqueInfo] = {}
    for technique in dict.fromkeys([*bundled, *overrides]):
        base = bundled.get(technique)
        if technique in overrides:
            override = overrides[technique]
            if isinstance(base, dict) and isinstance(override, dict):
                override = _deep_merge(base, override)
            try:
                result[technique] = _entry_to_info(technique, override)
                continue
            except ValueError as exc:
                warnings.warn(
                    f"technique-logger: ignoring override of '{technique}' in {user_path} ({exc})",
                    stacklevel=2,
                )
        if base is None:
            continue
        try:
            result[technique] = _entry_to_info(technique, base)
        except ValueError as exc:
            warnings.warn(f"technique-logger: skipping technique '{technique}' ({exc})", stacklevel=2)

    return result if result else None
