"""
Minimal smoke tests for technique-logger CLI.

Tests basic functionality:
- App runs without errors
- Catalog, ladders and expansions are shown
- Techniques can be run interactively and are saved
- History and stats read the saved results
"""

import json
import tempfile
from pathlib import Path

import pytest
from typer.testing import CliRunner

from technique_logger.cli.main import app


runner = CliRunner()


@pytest.fixture
def temp_results_dir():
    """Create a temporary directory for test files."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


def _stored(results_path: Path) -> list[dict]:
    return [json.loads(line) for line in results_path.read_text().splitlines() if line.strip()]


def _run(results_path: Path, technique: str, user_input: str, *extra: str):
    return runner.invoke(
        app,
        [
            "run", technique,
            "--weight", "100",
            "--exercise", "Bench Press",
            "--muscle-group", "chest",
            "--no-wait",
            "--results-path", str(results_path),
            *extra,
        ],
        input=user_input,
    )


class TestCatalogCommands:
    """Commands that only read the catalog."""

    def test_app_help(self):
        result = runner.invoke(app, ["--help"])
        assert result.exit_code == 0
        assert "run" in result.output
        assert "history" in result.output

    def test_list_json(self):
        result = runner.invoke(app, ["list", "--json"])
        assert result.exit_code == 0
        catalog = json.loads(result.output)
        assert len(catalog) == 14
        assert catalog["drop_set"] == {"type": "drop_set", "drops": 2, "dropPercentage": 20}
        assert catalog["mechanical_drop_set"]["variations"] == []

    def test_list_table(self):
        result = runner.invoke(app, ["list"])
        assert result.exit_code == 0
        assert "drop_set" in result.output

    def test_drop_set_ladder(self):
        result = runner.invoke(app, ["ladder", "drop_set", "--weight", "100"])
        assert result.exit_code == 0
        assert "Top Set" in result.output
        assert "64" in result.output

    def test_ladder_with_override(self):
        result = runner.invoke(app, ["ladder", "drop_set", "-w", "100", "--set", "drops=3"])
        assert result.exit_code == 0
        assert "Drop 3" in result.output

    def test_pyramid_ladder(self):
        result = runner.invoke(app, ["ladder", "pyramid", "--weight", "100"])
        assert result.exit_code == 0
        assert "Pyramid" in result.output

    @pytest.mark.parametrize("weight", ["0", "nan", "inf"])
    def test_pyramid_ladder_rejects_bad_weight(self, weight):
        result = runner.invoke(app, ["ladder", "pyramid", "--weight", weight])
        assert result.exit_code == 1
        assert "initial_weight" in result.output

    @pytest.mark.parametrize("override", ["rest_seconds=[30]", "rest_seconds=.inf", "rest_seconds=30.5"])
    def test_malformed_override_is_reported(self, override):
        result = runner.invoke(app, ["ladder", "fst7_protocol", "-w", "50", "--set", override])
        assert result.exit_code == 1
        assert "rest_seconds" in result.output

    def test_ladder_without_steps(self):
        result = runner.invoke(app, ["ladder", "superset", "--weight", "100"])
        assert result.exit_code == 1

    def test_unknown_override_field(self):
        result = runner.invoke(app, ["ladder", "drop_set", "-w", "100", "--set", "tempo=3010"])
        assert result.exit_code == 1
        assert "unknown field" in result.output

    def test_unknown_technique(self):
        result = runner.invoke(app, ["ladder", "german_volume", "--weight", "100"])
        assert result.exit_code == 1

    def test_expand_rest_pause(self):
        result = runner.invoke(app, ["expand", "rest_pause", "--weight", "80"])
        assert result.exit_code == 0
        assert "+15s" in result.output

    def test_expand_unsupported(self):
        result = runner.invoke(app, ["expand", "superset", "--weight", "80"])
        assert result.exit_code == 0
        assert "Not supported" in result.output


class TestRunCommand:
    """Interactive execution through stdin."""

    def test_rest_pause_saved(self, temp_results_dir):
        results_path = temp_results_dir / "results.jsonl"
        result = _run(results_path, "rest_pause", "8\n5\n3\n", "--set", "mini_sets=3")
        assert result.exit_code == 0, result.output

        entries = _stored(results_path)
        assert len(entries) == 1
        entry = entries[0]
        assert entry["techniqueType"] == "rest_pause"
        assert entry["exerciseName"] == "Bench Press"
        assert entry["muscleGroup"] == "chest"
        assert entry["techniqueConfig"]["miniSets"] == 3
        assert entry["executionResult"]["miniSetReps"] == [8, 5, 3]
        assert entry["executionResult"]["completedFully"] is True

    def test_drop_set_finished_early(self, temp_results_dir):
        results_path = temp_results_dir / "results.jsonl"
        result = _run(results_path, "drop_set", "8\nf\n")
        assert result.exit_code == 0, result.output

        stored = _stored(results_path)[0]["executionResult"]
        assert stored["dropReps"] == [8]
        assert stored["dropWeights"] == [100.0]
        assert stored["completedFully"] is False

    def test_myo_reps_natural_stop(self, temp_results_dir):
        results_path = temp_results_dir / "results.jsonl"
        result = _run(results_path, "myo_reps", "15\n5\n4\nn\n")
        assert result.exit_code == 0, result.output

        stored = _stored(results_path)[0]["executionResult"]
        assert stored["activationReps"] == 15
        assert stored["miniSetReps"] == [5, 4]
        assert stored["completedFully"] is True

    def test_loaded_stretching_with_rpe(self, temp_results_dir):
        results_path = temp_results_dir / "results.jsonl"
        result = _run(results_path, "loaded_stretching", "\n8\n")
        assert result.exit_code == 0, result.output

        stored = _stored(results_path)[0]["executionResult"]
        assert stored["notes"] == "Hold: 45s, RPE: 8"
        assert stored["completedFully"] is True

    def test_quit_saves_nothing(self, temp_results_dir):
        results_path = temp_results_dir / "results.jsonl"
        result = _run(results_path, "drop_set", "8\nq\n")
        assert result.exit_code == 0
        assert "nothing saved" in result.output
        assert not results_path.exists()

    def test_mechanical_without_variations(self, temp_results_dir):
        results_path = temp_results_dir / "results.jsonl"
        result = _run(results_path, "mechanical_drop_set", "")
        assert result.exit_code == 1
        assert "no variations" in result.output
        assert not results_path.exists()

    def test_malformed_override_saves_nothing(self, temp_results_dir):
        results_path = temp_results_dir / "results.jsonl"
        result = _run(results_path, "fst7_protocol", "", "--set", "rest_seconds=[30]")
        assert result.exit_code == 1
        assert not results_path.exists()

    def test_technique_without_engine(self, temp_results_dir):
        results_path = temp_results_dir / "results.jsonl"
        result = _run(results_path, "pyramid", "")
        assert result.exit_code == 1
        assert not results_path.exists()


class TestAnalysisCommands:
    """Commands that read stored results."""

    @pytest.fixture
    def results_path(self, temp_results_dir):
        path = temp_results_dir / "results.jsonl"
        _run(path, "rest_pause", "8\n5\n")
        _run(path, "drop_set", "8\n6\n4\n")
        _run(path, "drop_set", "8\nf\n")
        return path

    def test_history_json(self, results_path):
        result = runner.invoke(app, ["history", "--json", "--results-path", str(results_path)])
        assert result.exit_code == 0
        entries = json.loads(result.output)
        assert len(entries) == 3

    def test_history_filter(self, results_path):
        result = runner.invoke(
            app, ["history", "--json", "-t", "drop_set", "-n", "1", "--results-path", str(results_path)]
        )
        assert result.exit_code == 0
        entries = json.loads(result.output)
        assert len(entries) == 1
        assert entries[0]["techniqueType"] == "drop_set"

    def test_history_table(self, results_path):
        result = runner.invoke(app, ["history", "--results-path", str(results_path)])
        assert result.exit_code == 0
        assert "Technique History" in result.output

    def test_stats_json(self, results_path):
        result = runner.invoke(app, ["stats", "--json", "--results-path", str(results_path)])
        assert result.exit_code == 0
        stats = json.loads(result.output)
        assert stats["usage_counts"] == {"rest_pause": 1, "drop_set": 2}
        assert stats["completion_rates"]["drop_set"] == 0.5
        assert stats["most_used_technique"] == "drop_set"
        assert stats["total_techniques_applied"] == 3

    def test_delete_record(self, results_path):
        result = runner.invoke(app, ["delete-record", "1", "--force", "--results-path", str(results_path)])
        assert result.exit_code == 0
        assert len(_stored(results_path)) == 2

    def test_delete_record_out_of_range(self, results_path):
        result = runner.invoke(app, ["delete-record", "9", "--force", "--results-path", str(results_path)])
        assert result.exit_code == 1
        assert len(_stored(results_path)) == 3

    def test_empty_history(self, temp_results_dir):
        result = runner.invoke(app, ["history", "--results-path", str(temp_results_dir / "none.jsonl")])
        assert result.exit_code == 0
        assert "No technique executions" in result.output
