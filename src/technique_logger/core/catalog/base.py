"""
TechniqueInfo: catalog metadata for one technique tag.
"""

from dataclasses import dataclass

from ..config import EXPERIENCE_LEVELS
from ..models import TechniqueConfig


@dataclass(frozen=True)
class TechniqueInfo:
    """
    Catalog entry for one technique.

    Attributes:
        technique: Technique tag (e.g. "drop_set")
        display_name: Human-readable name
        description: One-line summary of the technique
        min_experience: Least experienced level the technique is offered to
        defaults: Configuration used when the lifter picks the technique by hand
        requires_compound: Only suitable for compound lifts
        requires_isolation: Only suitable for isolation exercises
    """

    technique: str
    display_name: str
    description: str
    min_experience: str
    defaults: TechniqueConfig
    requires_compound: bool = False
    requires_isolation: bool = False

    def __post_init__(self) -> None:
        if self.min_experience not in EXPERIENCE_LEVELS:
            raise ValueError(f"Invalid min_experience: {self.min_experience!r}")
        if self.defaults.type != self.technique:
            raise ValueError(f"defaults are for {self.defaults.type!r}, expected {self.technique!r}")
        if self.requires_compound and self.requires_isolation:
            raise ValueError("a technique cannot require both compound and isolation exercises")

    def allowed_for(self, experience: str) -> bool:
        """Whether a lifter at *experience* may use this technique."""
        if experience not in EXPERIENCE_LEVELS:
            raise ValueError(f"Invalid experience level: {experience!r}")
        return EXPERIENCE_LEVELS.index(experience) >= EXPERIENCE_LEVELS.index(self.min_experience)
