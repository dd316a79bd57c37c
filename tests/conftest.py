"""
Pytest configuration and fixtures for PyObstacles tests.

This module provides shared fixtures for testing:
- Configuration and logging fixtures
- Perception and trajectory fixtures
- Prediction message and registry fixtures
"""

from __future__ import annotations

from pathlib import Path
from typing import List

import pytest

DATA_DIR = Path(__file__).parent / "data"


# =============================================================================
# Configuration Fixtures
# =============================================================================


@pytest.fixture
def default_config():
    """Create typed default configuration."""
    from pyobstacles.config import ObstacleConfig

    return ObstacleConfig()


@pytest.fixture
def temp_config_file(tmp_path) -> Path:
    """Create a temporary configuration file."""
    import yaml

    config = {
        "registry": {"duplicate_policy": "overwrite"},
        "message": {"strict": False},
    }

    config_path = tmp_path / "test_config.yml"
    with open(config_path, "w") as f:
        yaml.dump(config, f)

    return config_path


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep PYOBSTACLES_* settings from the host out of the tests."""
    import os

    for key in list(os.environ):
        if key.startswith("PYOBSTACLES_") and not key.startswith("PYOBSTACLES_LOG_"):
            monkeypatch.delenv(key, raising=False)


@pytest.fixture
def log_records():
    """Collect records of the pyobstacles logger down to DEBUG."""
    import logging

    from pyobstacles.logging import get_logger

    class _Collector(logging.Handler):
        def __init__(self):
            super().__init__(logging.DEBUG)
            self.records = []

        def emit(self, record):
            self.records.append(record)

    logger = get_logger()
    collector = _Collector()
    previous_level = logger.level
    logger.setLevel(logging.DEBUG)
    logger.addHandler(collector)
    yield collector.records
    logger.removeHandler(collector)
    logger.setLevel(previous_level)


# =============================================================================
# Perception and Trajectory Fixtures
# =============================================================================


@pytest.fixture
def vehicle_perception():
    """Create a vehicle snapshot heading along +x."""
    from pyobstacles.types import PerceptionSnapshot, PerceptionType

    return PerceptionSnapshot(
        id=42,
        type=PerceptionType.VEHICLE,
        x=10.0,
        y=5.0,
        heading=0.0,
        length=4.0,
        width=2.0,
        velocity_x=3.0,
        velocity_y=4.0,
    )


@pytest.fixture
def straight_points() -> List:
    """Create points moving along +x at 2 m/s, one per second."""
    from pyobstacles.types import TrajectoryPoint

    return [
        TrajectoryPoint(relative_time=float(t), x=10.0 + 2.0 * t, y=5.0, heading=0.0, v=2.0)
        for t in range(5)
    ]


@pytest.fixture
def straight_trajectory(straight_points):
    """Create a five point straight trajectory."""
    from pyobstacles.types import Trajectory

    return Trajectory(straight_points, probability=1.0)


# =============================================================================
# Prediction Message Fixtures
# =============================================================================


@pytest.fixture
def sample_prediction_file() -> Path:
    """Path to the sample prediction message (objects 2156, 2157, 2161)."""
    return DATA_DIR / "sample_prediction.yml"


@pytest.fixture
def sample_message(sample_prediction_file):
    """Decoded sample prediction message."""
    from pyobstacles.message import load_prediction_message

    return load_prediction_message(sample_prediction_file, strict=True)


@pytest.fixture
def indexed_obstacles(sample_message):
    """Registry filled from the sample prediction message."""
    from pyobstacles.obstacle import create_obstacles
    from pyobstacles.registry import IndexedObstacles

    obstacles = create_obstacles(sample_message)
    assert len(obstacles) == 5

    registry = IndexedObstacles()
    for obstacle in obstacles:
        registry.add(obstacle.id, obstacle)
    return registry


@pytest.fixture
def raw_message() -> dict:
    """Minimal well-formed prediction message mapping."""
    return {
        "timestamp": 12.5,
        "objects": [
            {
                "id": 7,
                "perception": {
                    "type": "UNKNOWN_UNMOVABLE",
                    "x": 1.0,
                    "y": 2.0,
                    "heading": 0.5,
                    "length": 1.0,
                    "width": 1.0,
                },
            },
            {
                "id": 8,
                "perception": {
                    "type": 5,
                    "x": 0.0,
                    "y": 0.0,
                    "heading": 0.0,
                    "length": 4.5,
                    "width": 1.8,
                },
                "trajectories": [
                    {
                        "points": [
                            {"relative_time": 0.0, "x": 0.0, "y": 0.0, "heading": 0.0},
                            {"relative_time": 1.0, "x": 5.0, "y": 0.0, "heading": 0.0},
                        ]
                    }
                ],
            },
        ],
    }


# =============================================================================
# Marker Registrations
# =============================================================================


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "cli: marks tests that drive the command-line interface"
    )
