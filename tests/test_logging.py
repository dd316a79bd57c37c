"""
Tests for package logging.
"""

from __future__ import annotations

import copy
import logging

import pytest

from pyobstacles.logging import (
    DEFAULT_FORMAT,
    LOG_WARN,
    get_logger,
    profile_scope,
    setup_logging,
    timed,
)


@pytest.fixture
def restore_logging():
    """Reinstall the default handlers after a test reconfigures logging."""
    yield
    setup_logging(level=logging.INFO, format_str=DEFAULT_FORMAT, force=True)


def _messages(records, level):
    return [r.getMessage() for r in records if r.levelno == level]


@pytest.mark.usefixtures("restore_logging")
class TestSetupLogging:
    """Tests for setup_logging."""

    def test_level_from_env(self, monkeypatch):
        """PYOBSTACLES_LOG_LEVEL should set the package level."""
        monkeypatch.setenv("PYOBSTACLES_LOG_LEVEL", "debug")
        logger = setup_logging(force=True)
        assert logger.name == "pyobstacles"
        assert logger.level == logging.DEBUG

    @pytest.mark.parametrize("level, expected", [
        ("warning", logging.WARNING),
        ("15", 15),
        (logging.ERROR, logging.ERROR),
        ("chatty", logging.INFO),
    ])
    def test_level_argument(self, level, expected):
        """Level names, numbers and unknown names should resolve."""
        assert setup_logging(level=level, force=True).level == expected

    def test_no_reconfigure_without_force(self):
        """A second call without force should keep the current setup."""
        setup_logging(level="ERROR", force=True)
        setup_logging(level="DEBUG")
        assert get_logger().level == logging.ERROR

    def test_does_not_propagate(self):
        assert setup_logging(force=True).propagate is False

    def test_stderr_output(self, capsys):
        """Records should reach the stderr of the moment they are emitted."""
        setup_logging(level="WARNING", force=True)
        LOG_WARN("stop wall placed")
        assert "stop wall placed" in capsys.readouterr().err

    def test_log_file(self, tmp_path):
        """Records should also be written to the log file."""
        path = tmp_path / "obstacles.log"
        setup_logging(level="WARNING", log_file=str(path), force=True)
        LOG_WARN("overwriting obstacle")
        assert "[WARNING] pyobstacles: overwriting obstacle" in path.read_text()

    def test_json_format(self, tmp_path, monkeypatch):
        """PYOBSTACLES_LOG_FORMAT=json should emit one JSON object per record."""
        monkeypatch.setenv("PYOBSTACLES_LOG_FORMAT", "json")
        path = tmp_path / "obstacles.log"
        setup_logging(level="WARNING", log_file=str(path), force=True)
        LOG_WARN("dropped")
        line = path.read_text().strip()
        assert line.startswith('{"time": ')
        assert '"level": "WARNING"' in line
        assert '"message": "dropped"' in line


class TestTiming:
    """Tests for the timing helpers."""

    def test_timed(self, log_records):
        @timed
        def build():
            return 3

        assert build() == 3
        debug = _messages(log_records, logging.DEBUG)
        assert len(debug) == 1
        assert "build took" in debug[0]
        assert debug[0].endswith(" ms")

    def test_timed_logs_on_error(self, log_records):
        @timed
        def fail():
            raise ValueError("boom")

        with pytest.raises(ValueError):
            fail()
        assert any("fail took" in m for m in _messages(log_records, logging.DEBUG))

    def test_profile_scope(self, log_records):
        with profile_scope("build registry"):
            pass
        assert any(m.startswith("build registry took")
                   for m in _messages(log_records, logging.DEBUG))


class TestPackageWarnings:
    """Warnings emitted while building one planning cycle."""

    def test_dropped_record(self, raw_message, log_records):
        """Lenient decoding should warn about every dropped record."""
        from pyobstacles.message import decode_prediction_message

        message = copy.deepcopy(raw_message)
        del message["objects"][1]["perception"]["width"]
        decode_prediction_message(message, strict=False)

        warnings = _messages(log_records, logging.WARNING)
        assert len(warnings) == 1
        assert warnings[0].startswith("Dropping prediction record 1:")
        assert "'width'" in warnings[0]

    def test_no_warning_when_strict(self, raw_message, log_records):
        from pyobstacles.message import decode_prediction_message

        decode_prediction_message(raw_message, strict=True)
        assert _messages(log_records, logging.WARNING) == []

    def test_registry_overwrite(self, log_records):
        """Overwriting a registered obstacle should be logged at WARNING."""
        from pyobstacles.obstacle import Obstacle
        from pyobstacles.registry import IndexedObstacles
        from pyobstacles.types import ObstacleId, PerceptionSnapshot, PerceptionType

        perception = PerceptionSnapshot(
            id=4, type=PerceptionType.BICYCLE, x=0.0, y=0.0, heading=0.0, length=2.0, width=0.6
        )
        registry = IndexedObstacles(duplicate_policy="overwrite")
        registry.add(ObstacleId(4), Obstacle(ObstacleId(4), perception))
        assert _messages(log_records, logging.WARNING) == []

        registry.add(ObstacleId(4), Obstacle(ObstacleId(4), perception))
        assert _messages(log_records, logging.WARNING) == [
            "Overwriting registered obstacle '4'"
        ]

    def test_create_obstacles_timing(self, sample_message, log_records):
        """Obstacle creation should log its count and duration at DEBUG."""
        from pyobstacles.obstacle import create_obstacles

        create_obstacles(sample_message)
        debug = _messages(log_records, logging.DEBUG)
        assert "Created 5 obstacles from 3 predicted objects" in debug
        assert any(m.startswith("create_obstacles took") for m in debug)

    def test_unrecognized_type(self, log_records):
        """The classifier should note unrecognized types at DEBUG."""
        from pyobstacles.classifier import is_static_obstacle

        assert is_static_obstacle("hovercraft") is True
        assert any("Unrecognized perception type" in m
                   for m in _messages(log_records, logging.DEBUG))
