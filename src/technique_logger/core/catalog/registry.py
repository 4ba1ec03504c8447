"""
Technique catalog registry.

The catalog is loaded from YAML at import time. If nothing can be loaded
a RuntimeError is raised: the CLI cannot offer techniques without it.

User overrides: ``~/.technique-logger/techniques.yaml``.
"""

from .base import TechniqueInfo


def _build_catalog() -> dict[str, TechniqueInfo]:
    from .loader import load_catalog_from_yaml

    loaded = load_catalog_from_yaml()
    if not loaded:
        raise RuntimeError(
            "technique-logger: no technique catalog could be loaded. "
            "Check that src/technique_logger/techniques.yaml is present and valid."
        )
    return loaded


TECHNIQUE_CATALOG: dict[str, TechniqueInfo] = _build_catalog()


def get_technique_info(technique: str) -> TechniqueInfo:
    """
    Return the TechniqueInfo for the given technique tag.

    Raises:
        ValueError: If the tag is not in the catalog
    """
    if technique not in TECHNIQUE_CATALOG:
        valid = ", ".join(TECHNIQUE_CATALOG)
        raise ValueError(f"Unknown technique '{technique}'. Valid techniques: {valid}")
    return TECHNIQUE_CATALOG[technique]
