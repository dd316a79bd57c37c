"""
PyObstacles Exception Hierarchy.

This module defines all custom exceptions used in the PyObstacles package.
Errors are grouped by concern so callers can handle a whole family
(e.g. every registry error) with one except clause:
- ConfigurationError: loading or validating configuration
- DataError: malformed perception, trajectory or prediction data
- GeometryError: invalid bounding geometry
- QueryError: queries an obstacle cannot answer
- RegistryError: inserting into or looking up the obstacle registry
"""

from typing import Any, Optional


class PyObstaclesError(Exception):
    """Base exception for all PyObstacles errors.

    All custom exceptions in PyObstacles should inherit from this class.

    Attributes:
        message: Human-readable error description.
        details: Optional dictionary with additional context.
    """

    def __init__(self, message: str, details: Optional[dict] = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)

    def __str__(self) -> str:
        if self.details:
            detail_str = ", ".join(f"{k}={v}" for k, v in self.details.items())
            return f"{self.message} ({detail_str})"
        return self.message


# =============================================================================
# Configuration Errors
# =============================================================================


class ConfigurationError(PyObstaclesError):
    """Error in configuration loading or validation."""

    pass


class ConfigNotFoundError(ConfigurationError):
    """Configuration file not found."""

    def __init__(self, config_path: str):
        super().__init__(
            f"Configuration file not found: {config_path}",
            details={"path": config_path},
        )


class ConfigValidationError(ConfigurationError):
    """Configuration validation failed."""

    def __init__(self, key: str, reason: str, value: Any = None):
        details = {"key": key, "reason": reason}
        if value is not None:
            details["value"] = str(value)
        super().__init__(
            f"Invalid configuration for '{key}': {reason}",
            details=details,
        )


# =============================================================================
# Data Errors
# =============================================================================


class DataError(PyObstaclesError):
    """Base class for data-related errors."""

    pass


class InvalidObstacleError(DataError):
    """Invalid perception data for an obstacle."""

    def __init__(self, obstacle_id: Any, reason: str):
        super().__init__(
            f"Invalid obstacle (id={obstacle_id}): {reason}",
            details={"obstacle_id": obstacle_id, "reason": reason},
        )


class InvalidTrajectoryError(DataError):
    """Trajectory points violate ordering or value constraints."""

    def __init__(self, reason: str, index: Optional[int] = None):
        details = {"reason": reason}
        if index is not None:
            details["index"] = index
        super().__init__(f"Invalid trajectory: {reason}", details=details)


class InvalidPredictionError(DataError):
    """Prediction message record is missing fields or malformed."""

    def __init__(self, reason: str, record: Optional[int] = None):
        details = {"reason": reason}
        if record is not None:
            details["record"] = record
        super().__init__(f"Invalid prediction: {reason}", details=details)


class PredictionFileNotFoundError(DataError):
    """Prediction message file not found."""

    def __init__(self, path: str):
        super().__init__(
            f"Prediction file not found: {path}",
            details={"path": path},
        )


# =============================================================================
# Geometry Errors
# =============================================================================


class GeometryError(PyObstaclesError):
    """Base class for geometry errors."""

    pass


class InvalidGeometryError(GeometryError):
    """Bounding geometry cannot be built from the given values."""

    def __init__(self, field: str, value: float):
        super().__init__(
            f"Invalid geometry: {field} must be non-negative",
            details={"field": field, "value": value},
        )


# =============================================================================
# Query Errors
# =============================================================================


class QueryError(PyObstaclesError):
    """Base class for errors raised while querying obstacles."""

    pass


class NoTrajectoryError(QueryError):
    """Time query on an obstacle that has no trajectory points."""

    def __init__(self, obstacle_id: Any = None):
        if obstacle_id is None:
            super().__init__("No trajectory to interpolate")
        else:
            super().__init__(
                f"Obstacle '{obstacle_id}' has no trajectory",
                details={"obstacle_id": obstacle_id},
            )


# =============================================================================
# Registry Errors
# =============================================================================


class RegistryError(PyObstaclesError):
    """Base class for obstacle registry errors."""

    pass


class DuplicateObstacleError(RegistryError):
    """An obstacle with the same identifier is already registered."""

    def __init__(self, obstacle_id: Any):
        super().__init__(
            f"Obstacle '{obstacle_id}' is already registered",
            details={"obstacle_id": obstacle_id},
        )


class AmbiguousObstacleIdError(RegistryError):
    """A string label matches more than one registered identifier."""

    def __init__(self, label: str, candidates: list):
        super().__init__(
            f"Label '{label}' matches several obstacles",
            details={"label": label, "candidates": candidates},
        )
