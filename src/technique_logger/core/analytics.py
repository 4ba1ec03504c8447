"""
Technique usage analytics.

Pure functions over stored TechniqueLogEntry records: how often each
technique is used, how often it is completed as prescribed, and the
volume a single execution moved.
"""

from dataclasses import dataclass, field

from .models import TechniqueExecutionResult, TechniqueLogEntry


@dataclass
class TechniqueStats:
    """Usage summary across all logged techniques."""

    usage_counts: dict[str, int] = field(default_factory=dict)
    completion_rates: dict[str, float] = field(default_factory=dict)  # 0-1
    most_used_technique: str | None = None
    total_techniques_applied: int = 0


@dataclass
class TechniqueEffectiveness:
    technique: str
    muscle_group: str
    times_used: int
    completion_rate: float


def _count(entries: list[TechniqueLogEntry]) -> tuple[dict[str, int], dict[str, int]]:
    used: dict[str, int] = {}
    completed: dict[str, int] = {}
    for entry in entries:
        used[entry.technique] = used.get(entry.technique, 0) + 1
        if entry.result is not None and entry.result.completed_fully:
            completed[entry.technique] = completed.get(entry.technique, 0) + 1
    return used, completed


def technique_stats(entries: list[TechniqueLogEntry]) -> TechniqueStats:
    """
    Summarize technique usage.

    Entries without a recorded result count as used but not completed.
    Ties for most used go to the technique seen first.

    Args:
        entries: Stored technique executions, any order

    Returns:
        TechniqueStats (empty stats for no entries)
    """
    used, completed = _count(entries)
    rates = {t: completed.get(t, 0) / n for t, n in used.items()}

    most_used: str | None = None
    best = 0
    for technique, n in used.items():
        if n > best:
            best = n
            most_used = technique

    return TechniqueStats(
        usage_counts=used,
        completion_rates=rates,
        most_used_technique=most_used,
        total_techniques_applied=len(entries),
    )


def technique_effectiveness(
    entries: list[TechniqueLogEntry],
    muscle_group: str | None = None,
) -> list[TechniqueEffectiveness]:
    """
    Per-technique usage and completion rate, most used first.

    Args:
        entries: Stored technique executions
        muscle_group: Only count entries for this muscle group (None = all)
    """
    if muscle_group is not None:
        entries = [e for e in entries if e.muscle_group == muscle_group]
    used, completed = _count(entries)
    rows = [
        TechniqueEffectiveness(
            technique=t,
            muscle_group=muscle_group or "all",
            times_used=n,
            completion_rate=completed.get(t, 0) / n,
        )
        for t, n in used.items()
    ]
    return sorted(rows, key=lambda r: r.times_used, reverse=True)


def technique_history(
    entries: list[TechniqueLogEntry],
    technique: str | None = None,
    exercise_name: str | None = None,
    limit: int | None = None,
) -> list[TechniqueLogEntry]:
    """Filter entries and return them newest first."""
    filtered = [
        e
        for e in entries
        if (technique is None or e.technique == technique)
        and (exercise_name is None or e.exercise_name == exercise_name)
    ]
    filtered.sort(key=lambda e: e.completed_at, reverse=True)
    return filtered[:limit] if limit is not None else filtered


def result_volume(result: TechniqueExecutionResult, working_weight: float) -> float:
    """
    Total load moved (weight x reps) in one execution.

    Techniques that log a weight per step (drop sets, top set + backoff,
    mechanical drop sets) use those weights; the others use the single
    working weight for every rep.
    """
    if result.drop_weights is not None and result.drop_reps is not None:
        return sum(w * r for w, r in zip(result.drop_weights, result.drop_reps))
    if result.pyramid_weights is not None and result.pyramid_reps is not None:
        return sum(w * r for w, r in zip(result.pyramid_weights, result.pyramid_reps))
    return working_weight * result.total_reps
