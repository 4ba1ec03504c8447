"""
Haptic feedback hooks.

Hosts that can vibrate pass an object with a ``vibrate(pattern)`` method.
Vibration is best-effort: a host without the capability, or one whose
vibrate call fails, never affects technique execution.
"""

import warnings
from typing import Protocol, Sequence


class Haptics(Protocol):
    def vibrate(self, pattern: Sequence[int]) -> None:
        """Vibrate using an on/off pattern in milliseconds."""


class NullHaptics:
    """Host without vibration support."""

    def vibrate(self, pattern: Sequence[int]) -> None:
        return None


class RecordingHaptics:
    """Keeps every requested pattern; useful for headless hosts and tests."""

    def __init__(self) -> None:
        self.patterns: list[tuple[int, ...]] = []

    def vibrate(self, pattern: Sequence[int]) -> None:
        self.patterns.append(tuple(pattern))


def pulse(haptics: Haptics | None, pattern: Sequence[int]) -> bool:
    """
    Fire a vibration pattern if the host supports it.

    Args:
        haptics: Host vibration primitive, or None when unsupported
        pattern: On/off pattern in milliseconds

    Returns:
        True if the host accepted the pattern, False otherwise
    """
    if haptics is None or not pattern:
        return False
    try:
        haptics.vibrate(tuple(pattern))
    except Exception as exc:
        warnings.warn(f"technique-logger: vibration unavailable ({exc})", stacklevel=2)
        return False
    return True
