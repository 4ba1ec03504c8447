"""
Tests for the camelCase wire format and the JSONL result store.
"""

import json

import pytest

from technique_logger.core.models import (
    AppliedTechnique,
    DropSetConfig,
    LoadedStretchingConfig,
    MechanicalDropSetConfig,
    MyoRepsConfig,
    RestPauseConfig,
    TechniqueExecutionResult,
    TechniqueLogEntry,
)
from technique_logger.io.results_store import ResultStore
from technique_logger.io.serializers import (
    ValidationError,
    applied_technique_to_dict,
    config_to_dict,
    dict_to_applied_technique,
    dict_to_config,
    dict_to_entry,
    dict_to_result,
    entry_to_dict,
    entry_to_json_line,
    json_line_to_entry,
    result_to_dict,
    to_camel,
    to_snake,
)


def _entry(completed_at: str, exercise: str = "Bench Press", reps=(8, 6, 4)) -> TechniqueLogEntry:
    config = DropSetConfig(drops=2, drop_percentage=20)
    result = TechniqueExecutionResult(
        technique="drop_set",
        config=config,
        completed_fully=True,
        drop_weights=(100.0, 80.0, 64.0),
        drop_reps=reps,
    )
    return TechniqueLogEntry(
        completed_at=completed_at,
        exercise_name=exercise,
        technique="drop_set",
        config=config,
        initial_weight=100.0,
        result=result,
        muscle_group="chest",
    )


class TestNames:
    @pytest.mark.parametrize(
        "snake,camel",
        [
            ("drop_percentage", "dropPercentage"),
            ("completed_fully", "completedFully"),
            ("drops", "drops"),
            ("intra_rest_seconds", "intraRestSeconds"),
        ],
    )
    def test_case_conversion(self, snake, camel):
        assert to_camel(snake) == camel
        assert to_snake(camel) == snake


class TestConfigSerialization:
    def test_config_dict_shape(self):
        data = config_to_dict(MyoRepsConfig(activation_reps=15, mini_set_reps=5, mini_sets=4, rest_seconds=5))
        assert data == {
            "type": "myo_reps",
            "activationReps": 15,
            "miniSetReps": 5,
            "miniSets": 4,
            "restSeconds": 5,
        }

    def test_variations_become_list(self):
        config = MechanicalDropSetConfig(variations=("Incline", "Flat"), reps_per_variation=10)
        data = config_to_dict(config)
        assert data["variations"] == ["Incline", "Flat"]
        assert dict_to_config(data) == config

    def test_optional_fields_round_trip(self):
        config = LoadedStretchingConfig(hold_seconds=45, target_rpe=7, breathing_pattern="box")
        assert dict_to_config(config_to_dict(config)) == config

    def test_unknown_type_rejected(self):
        with pytest.raises(ValidationError, match="Unknown technique type"):
            dict_to_config({"type": "german_volume", "sets": 10})

    def test_unknown_field_rejected(self):
        with pytest.raises(ValidationError, match="Unknown field"):
            dict_to_config({"type": "drop_set", "drops": 2, "dropPercentage": 20, "tempo": "3010"})

    def test_missing_field_rejected(self):
        with pytest.raises(ValidationError, match="Invalid drop_set config"):
            dict_to_config({"type": "drop_set", "drops": 2})

    def test_out_of_range_rejected(self):
        with pytest.raises(ValidationError, match="drop_percentage"):
            dict_to_config({"type": "drop_set", "drops": 2, "dropPercentage": 150})

    @pytest.mark.parametrize(
        "raw",
        [
            '{"type": "rest_pause", "miniSets": 2, "restSeconds": Infinity}',
            '{"type": "rest_pause", "miniSets": 2, "restSeconds": NaN}',
            '{"type": "rest_pause", "miniSets": 2, "restSeconds": 12.5}',
            '{"type": "drop_set", "drops": 2, "dropPercentage": NaN}',
            '{"type": "fst7_protocol", "restSeconds": [30], "targetReps": 12}',
        ],
    )
    def test_non_finite_or_fractional_values_rejected(self, raw):
        with pytest.raises(ValidationError):
            dict_to_config(json.loads(raw))

    def test_non_object_rejected(self):
        with pytest.raises(ValidationError):
            dict_to_config(None)

    def test_applied_technique(self):
        applied = AppliedTechnique(config=RestPauseConfig(mini_sets=3, rest_seconds=15), rationale="plateau")
        data = applied_technique_to_dict(applied)
        assert data["technique"] == "rest_pause"
        assert dict_to_applied_technique(data) == applied

    def test_applied_technique_tag_mismatch(self):
        data = applied_technique_to_dict(AppliedTechnique(config=DropSetConfig(2, 20)))
        data["technique"] = "rest_pause"
        with pytest.raises(ValidationError, match="does not match"):
            dict_to_applied_technique(data)


class TestResultSerialization:
    def test_inapplicable_arrays_omitted(self):
        result = TechniqueExecutionResult(
            technique="rest_pause",
            config=RestPauseConfig(3, 15),
            completed_fully=False,
            mini_set_reps=(8, 5),
        )
        data = result_to_dict(result)
        assert data == {
            "technique": "rest_pause",
            "config": {"type": "rest_pause", "miniSets": 3, "restSeconds": 15},
            "miniSetReps": [8, 5],
            "completedFully": False,
        }

    def test_myo_result(self):
        result = TechniqueExecutionResult(
            technique="myo_reps",
            config=MyoRepsConfig(15, 5, 4, 5),
            completed_fully=True,
            activation_reps=15,
            mini_set_reps=(5, 4),
            notes="pump",
        )
        data = result_to_dict(result)
        assert data["activationReps"] == 15
        assert data["notes"] == "pump"
        assert dict_to_result(data) == result

    def test_completed_fully_required(self):
        data = result_to_dict(_entry("2026-01-01T10:00:00").result)
        del data["completedFully"]
        with pytest.raises(ValidationError, match="completedFully"):
            dict_to_result(data)

    @pytest.mark.parametrize("bad", [float("nan"), float("inf")])
    def test_non_finite_array_values_rejected(self, bad):
        data = result_to_dict(_entry("2026-01-01T10:00:00").result)
        data["dropWeights"] = [100.0, bad, 64.0]
        with pytest.raises(ValidationError, match="dropWeights"):
            dict_to_result(data)

    def test_negative_reps_rejected(self):
        data = result_to_dict(_entry("2026-01-01T10:00:00").result)
        data["dropReps"] = [8, -1, 4]
        with pytest.raises(ValidationError, match="dropReps"):
            dict_to_result(data)


class TestEntrySerialization:
    def test_entry_dict_keys(self):
        data = entry_to_dict(_entry("2026-01-01T10:00:00"))
        assert data["completedAt"] == "2026-01-01T10:00:00"
        assert data["techniqueType"] == "drop_set"
        assert data["techniqueConfig"]["dropPercentage"] == 20
        assert data["executionResult"]["dropWeights"] == [100.0, 80.0, 64.0]
        assert data["muscleGroup"] == "chest"
        assert dict_to_entry(data) == _entry("2026-01-01T10:00:00")

    def test_invalid_json(self):
        with pytest.raises(ValidationError, match="Invalid JSON"):
            json_line_to_entry("{not json")

    def test_json_must_be_object(self):
        with pytest.raises(ValidationError, match="JSON object"):
            json_line_to_entry("[1, 2]")

    def test_missing_field(self):
        data = entry_to_dict(_entry("2026-01-01T10:00:00"))
        del data["exerciseName"]
        with pytest.raises(ValidationError, match="exerciseName"):
            dict_to_entry(data)

    def test_bad_timestamp(self):
        data = entry_to_dict(_entry("2026-01-01T10:00:00"))
        data["completedAt"] = "yesterday"
        with pytest.raises(ValidationError):
            dict_to_entry(data)

    def test_non_positive_weight(self):
        data = entry_to_dict(_entry("2026-01-01T10:00:00"))
        data["initialWeight"] = 0
        with pytest.raises(ValidationError, match="initialWeight"):
            dict_to_entry(data)

    def test_non_finite_weight_in_stored_line(self):
        line = entry_to_json_line(_entry("2026-01-01T10:00:00")).replace(
            '"initialWeight":100.0', '"initialWeight":NaN'
        )
        assert "NaN" in line
        with pytest.raises(ValidationError, match="initialWeight"):
            json_line_to_entry(line)


class TestResultStore:
    def test_missing_file_is_empty(self, tmp_path):
        store = ResultStore(tmp_path / "results.jsonl")
        assert not store.exists()
        assert store.load_entries() == []

    def test_append_creates_file(self, tmp_path):
        store = ResultStore(tmp_path / "nested" / "results.jsonl")
        store.append_entry(_entry("2026-01-01T10:00:00"))
        assert store.exists()
        lines = store.results_path.read_text().splitlines()
        assert len(lines) == 1
        assert json.loads(lines[0])["exerciseName"] == "Bench Press"

    def test_entries_kept_chronological(self, tmp_path):
        store = ResultStore(tmp_path / "results.jsonl")
        store.append_entry(_entry("2026-01-03T10:00:00", "C"))
        store.append_entry(_entry("2026-01-01T10:00:00", "A"))
        store.append_entry(_entry("2026-01-02T10:00:00", "B"))
        assert [e.exercise_name for e in store.load_entries()] == ["A", "B", "C"]
        lines = store.results_path.read_text().splitlines()
        assert [json.loads(line)["exerciseName"] for line in lines] == ["A", "B", "C"]

    def test_delete_entry(self, tmp_path):
        store = ResultStore(tmp_path / "results.jsonl")
        store.append_entry(_entry("2026-01-01T10:00:00", "A"))
        store.append_entry(_entry("2026-01-02T10:00:00", "B"))
        store.delete_entry_at(0)
        assert [e.exercise_name for e in store.load_entries()] == ["B"]
        with pytest.raises(IndexError):
            store.delete_entry_at(5)

    def test_corrupt_line_reports_position(self, tmp_path):
        store = ResultStore(tmp_path / "results.jsonl")
        store.append_entry(_entry("2026-01-01T10:00:00"))
        with open(store.results_path, "a", encoding="utf-8") as f:
            f.write("garbage\n")
        with pytest.raises(ValidationError, match="line 2"):
            store.load_entries()

    def test_blank_lines_ignored(self, tmp_path):
        store = ResultStore(tmp_path / "results.jsonl")
        store.append_entry(_entry("2026-01-01T10:00:00"))
        with open(store.results_path, "a", encoding="utf-8") as f:
            f.write("\n\n")
        assert len(store.load_entries()) == 1

    def test_clear(self, tmp_path):
        store = ResultStore(tmp_path / "results.jsonl")
        store.append_entry(_entry("2026-01-01T10:00:00"))
        store.clear()
        assert store.load_entries() == []
