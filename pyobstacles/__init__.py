"""
PyObstacles - Obstacle model for one autonomous-driving planning cycle.

This package turns a motion-prediction message into obstacles that
planning code can query:
- classification of perceived objects as static or dynamic
- trajectory interpolation ("where is this obstacle at time t")
- oriented bounding boxes at any pose
- identifier-keyed lookup for the current cycle

Basic Usage:
    from pyobstacles import load_prediction_message, create_obstacles, IndexedObstacles

    message = load_prediction_message("prediction.yml")
    obstacles = IndexedObstacles.from_obstacles(create_obstacles(message))
    obstacle = obstacles.find("2156_0")
    point = obstacle.point_at_time(3.0)
    box = obstacle.bounding_box_at(point)
"""

from __future__ import annotations

__version__ = "0.1.0"

# =============================================================================
# Core API
# =============================================================================

from pyobstacles.types import (
    PerceptionType,
    PerceptionSnapshot,
    TrajectoryPoint,
    Trajectory,
    ObstacleId,
    PredictedObject,
    PredictionMessage,
    interpolate_trajectory_point,
)

from pyobstacles.geometry import (
    BoundingBox2D,
    normalize_angle,
    lerp,
    slerp,
)

from pyobstacles.classifier import is_static_obstacle

from pyobstacles.obstacle import (
    Obstacle,
    create_obstacles,
    create_static_virtual_obstacle,
)

from pyobstacles.registry import IndexedObstacles

from pyobstacles.message import (
    decode_prediction_message,
    load_prediction_message,
)

from pyobstacles.config import (
    create_default_config,
    load_config,
    ObstacleConfig,
    ConfigManager,
    get_config,
    init_config,
)

# =============================================================================
# Logging
# =============================================================================

from pyobstacles.logging import (
    LOG_DEBUG,
    LOG_WARN,
    get_logger,
    setup_logging,
    profile_scope,
    timed,
)

# =============================================================================
# Exceptions
# =============================================================================

from pyobstacles.exceptions import (
    PyObstaclesError,
    ConfigurationError,
    ConfigNotFoundError,
    ConfigValidationError,
    DataError,
    InvalidObstacleError,
    InvalidTrajectoryError,
    InvalidPredictionError,
    PredictionFileNotFoundError,
    GeometryError,
    InvalidGeometryError,
    QueryError,
    NoTrajectoryError,
    RegistryError,
    DuplicateObstacleError,
    AmbiguousObstacleIdError,
)

# =============================================================================
# Public API
# =============================================================================

__all__ = [
    # Version
    "__version__",
    # Types
    "PerceptionType",
    "PerceptionSnapshot",
    "TrajectoryPoint",
    "Trajectory",
    "ObstacleId",
    "PredictedObject",
    "PredictionMessage",
    "interpolate_trajectory_point",
    # Geometry
    "BoundingBox2D",
    "normalize_angle",
    "lerp",
    "slerp",
    # Obstacles
    "is_static_obstacle",
    "Obstacle",
    "create_obstacles",
    "create_static_virtual_obstacle",
    "IndexedObstacles",
    # Messages
    "decode_prediction_message",
    "load_prediction_message",
    # Config
    "create_default_config",
    "load_config",
    "ObstacleConfig",
    "ConfigManager",
    "get_config",
    "init_config",
    # Logging
    "LOG_DEBUG",
    "LOG_WARN",
    "get_logger",
    "setup_logging",
    "profile_scope",
    "timed",
    # Exceptions
    "PyObstaclesError",
    "ConfigurationError",
    "ConfigNotFoundError",
    "ConfigValidationError",
    "DataError",
    "InvalidObstacleError",
    "InvalidTrajectoryError",
    "InvalidPredictionError",
    "PredictionFileNotFoundError",
    "GeometryError",
    "InvalidGeometryError",
    "QueryError",
    "NoTrajectoryError",
    "RegistryError",
    "DuplicateObstacleError",
    "AmbiguousObstacleIdError",
]
