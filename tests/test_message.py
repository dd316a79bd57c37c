"""
Tests for prediction message decoding.
"""

from __future__ import annotations

import copy

import pytest

from pyobstacles.exceptions import (
    DataError,
    InvalidPredictionError,
    PredictionFileNotFoundError,
)
from pyobstacles.message import decode_prediction_message, load_prediction_message
from pyobstacles.types import PerceptionType


class TestDecode:
    """Tests for decode_prediction_message."""

    def test_well_formed(self, raw_message):
        message = decode_prediction_message(raw_message)
        assert len(message) == 2
        assert message.timestamp == pytest.approx(12.5)

        first, second = message.objects
        assert first.id == 7
        assert first.perception.type is PerceptionType.UNKNOWN_UNMOVABLE
        assert first.trajectories == ()

        assert second.perception.type is PerceptionType.VEHICLE
        assert len(second.trajectories) == 1
        assert len(second.trajectories[0]) == 2
        assert second.trajectories[0].probability is None

    def test_optional_fields_default(self, raw_message):
        message = decode_prediction_message(raw_message)
        perception = message.objects[0].perception
        assert perception.velocity_x == 0.0
        assert perception.speed == 0.0
        assert message.objects[1].trajectories[0][0].v == 0.0

    def test_missing_type_is_unset(self, raw_message):
        del raw_message["objects"][0]["perception"]["type"]
        message = decode_prediction_message(raw_message)
        assert message.objects[0].perception.type is None

    def test_string_ids(self, raw_message):
        raw_message["objects"][0]["id"] = "cone_3"
        message = decode_prediction_message(raw_message)
        assert message.objects[0].id == "cone_3"

    def test_empty_message(self):
        message = decode_prediction_message({})
        assert len(message) == 0
        assert message.timestamp is None

    def test_not_a_mapping(self):
        with pytest.raises(InvalidPredictionError):
            decode_prediction_message([1, 2, 3])

    def test_objects_not_a_list(self):
        with pytest.raises(InvalidPredictionError):
            decode_prediction_message({"objects": {"id": 1}})


class TestMalformedRecords:
    """Strict and lenient handling of malformed records."""

    @pytest.fixture
    def broken_message(self, raw_message):
        message = copy.deepcopy(raw_message)
        del message["objects"][0]["perception"]["x"]
        return message

    def test_strict_raises_with_record_index(self, broken_message):
        with pytest.raises(InvalidPredictionError) as excinfo:
            decode_prediction_message(broken_message, strict=True)
        assert excinfo.value.details["record"] == 0
        assert "'x'" in excinfo.value.message

    def test_lenient_drops_whole_record(self, broken_message):
        message = decode_prediction_message(broken_message, strict=False)
        assert len(message) == 1
        assert message.objects[0].id == 8

    def test_negative_length(self, raw_message):
        raw_message["objects"][1]["perception"]["length"] = -1.0
        with pytest.raises(InvalidPredictionError) as excinfo:
            decode_prediction_message(raw_message)
        assert excinfo.value.details["record"] == 1
        assert isinstance(excinfo.value.__cause__, DataError)

    def test_unordered_trajectory(self, raw_message):
        points = raw_message["objects"][1]["trajectories"][0]["points"]
        points[1]["relative_time"] = 0.0
        with pytest.raises(InvalidPredictionError):
            decode_prediction_message(raw_message)
        assert len(decode_prediction_message(raw_message, strict=False)) == 1

    def test_non_numeric_field(self, raw_message):
        raw_message["objects"][0]["perception"]["heading"] = "north"
        with pytest.raises(InvalidPredictionError):
            decode_prediction_message(raw_message)

    def test_unknown_type(self, raw_message):
        raw_message["objects"][0]["perception"]["type"] = "SPACESHIP"
        with pytest.raises(InvalidPredictionError):
            decode_prediction_message(raw_message)

    @pytest.mark.parametrize("bad_id", [True, 1.5, None, [1]])
    def test_bad_id(self, raw_message, bad_id):
        raw_message["objects"][0]["id"] = bad_id
        with pytest.raises(InvalidPredictionError):
            decode_prediction_message(raw_message)


class TestLoad:
    """Tests for load_prediction_message."""

    def test_sample_file(self, sample_prediction_file):
        message = load_prediction_message(sample_prediction_file)
        assert [obj.id for obj in message] == [2156, 2157, 2161]
        assert message.objects[0].predicted_period == pytest.approx(5.0)
        assert message.timestamp == pytest.approx(1500000000.25)

    def test_file_not_found(self, tmp_path):
        with pytest.raises(PredictionFileNotFoundError):
            load_prediction_message(tmp_path / "missing.yml")

    def test_json_file(self, tmp_path, raw_message):
        import json

        path = tmp_path / "prediction.json"
        path.write_text(json.dumps(raw_message))
        assert len(load_prediction_message(path)) == 2

    def test_strict_from_config(self, tmp_path, raw_message, monkeypatch):
        import yaml

        del raw_message["objects"][1]["perception"]["width"]
        path = tmp_path / "prediction.yml"
        with open(path, "w") as f:
            yaml.dump(raw_message, f)

        monkeypatch.setattr("pyobstacles.config._global_config", None)
        monkeypatch.setenv("PYOBSTACLES_MESSAGE_STRICT", "false")
        assert len(load_prediction_message(path)) == 1

        monkeypatch.setattr("pyobstacles.config._global_config", None)
        monkeypatch.setenv("PYOBSTACLES_MESSAGE_STRICT", "true")
        with pytest.raises(InvalidPredictionError):
            load_prediction_message(path)
