"""
Technique catalog for technique-logger.

Each technique tag is described by a TechniqueInfo: its default
configuration, minimum experience level and exercise requirements.
"""

from .base import TechniqueInfo
from .registry import TECHNIQUE_CATALOG, get_technique_info

__all__ = [
    "TechniqueInfo",
    "TECHNIQUE_CATALOG",
    "get_technique_info",
]
