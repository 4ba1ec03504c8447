"""
JSONL-based storage for technique executions.

The CLI's persistence collaborator: every completed (or force-completed)
technique is appended as one TechniqueLogEntry per line.
"""

from pathlib import Path

from ..core.models import TechniqueLogEntry
from .serializers import ValidationError, entry_to_json_line, json_line_to_entry


class ResultStore:
    """
    Manages technique executions stored in JSONL format.

    Lines are kept in chronological order of ``completed_at``.
    """

    def __init__(self, results_path: str | Path):
        """
        Initialize the result store.

        Args:
            results_path: Path to the JSONL results file
        """
        self.results_path = Path(results_path)

    def exists(self) -> bool:
        """Check if the results file exists."""
        return self.results_path.exists()

    def init(self) -> None:
        """
        Create an empty results file (and parent directories) if needed.
        """
        self.results_path.parent.mkdir(parents=True, exist_ok=True)
        if not self.results_path.exists():
            self.results_path.touch()

    def load_entries(self) -> list[TechniqueLogEntry]:
        """
        Load all entries, oldest first.

        A missing file is an empty history.

        Raises:
            ValidationError: If a line cannot be parsed
        """
        if not self.results_path.exists():
            return []

        entries: list[TechniqueLogEntry] = []
        with open(self.results_path, "r", encoding="utf-8") as f:
            for line_num, line in enumerate(f, 1):
                line = line.strip()
                if not line:
                    continue
                try:
                    entries.append(json_line_to_entry(line))
                except ValidationError as e:
                    raise ValidationError(
                        f"Error parsing line {line_num} in {self.results_path}: {e}"
                    ) from e

        entries.sort(key=lambda e: e.completed_at)
        return entries

    def append_entry(self, entry: TechniqueLogEntry) -> None:
        """
        Append an entry, keeping the file in chronological order.
        """
        self.init()
        entries = self.load_entries()
        if entries and entry.completed_at < entries[-1].completed_at:
            entries.append(entry)
            self._write_entries(entries)
            return
        with open(self.results_path, "a", encoding="utf-8") as f:
            f.write(entry_to_json_line(entry) + "\n")

    def delete_entry_at(self, index: int) -> None:
        """
        Delete the entry at *index* (0-based, chronological order).

        Raises:
            IndexError: If index is out of range
        """
        entries = self.load_entries()
        if not 0 <= index < len(entries):
            raise IndexError(f"Entry index {index} out of range (0-{len(entries) - 1})")
        del entries[index]
        self._write_entries(entries)

    def _write_entries(self, entries: list[TechniqueLogEntry]) -> None:
        entries = sorted(entries, key=lambda e: e.completed_at)
        with open(self.results_path, "w", encoding="utf-8") as f:
            for entry in entries:
                f.write(entry_to_json_line(entry) + "\n")

    def clear(self) -> None:
        """
        Remove every stored entry.
        """
        if self.results_path.exists():
            self.results_path.write_text("")


def get_default_results_path() -> Path:
    """
    Get the default results file path (~/.technique-logger/results.jsonl).
    """
    return Path.home() / ".technique-logger" / "results.jsonl"
