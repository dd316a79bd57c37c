"""
Decoding of prediction messages.

A message is a mapping (usually read from a YAML or JSON file) with an
``objects`` list; each object holds ``id``, ``perception`` and
``trajectories``. A record is either decoded completely or not at all.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Union

import yaml

from pyobstacles.config import get_config
from pyobstacles.exceptions import (
    DataError,
    InvalidPredictionError,
    PredictionFileNotFoundError,
)
from pyobstacles.logging import LOG_DEBUG, LOG_WARN
from pyobstacles.types import (
    PerceptionSnapshot,
    PerceptionType,
    PredictedObject,
    PredictionMessage,
    Trajectory,
    TrajectoryPoint,
)

_OPTIONAL_POINT_FIELDS = ("v", "a", "kappa", "dkappa", "s")


def _require(data: Mapping[str, Any], key: str, where: str) -> Any:
    if not isinstance(data, Mapping):
        raise InvalidPredictionError(f"{where} must be a mapping")
    if key not in data or data[key] is None:
        raise InvalidPredictionError(f"missing '{key}' in {where}")
    return data[key]


def _as_float(value: Any, name: str) -> float:
    try:
        return float(value)
    except (TypeError, ValueError):
        raise InvalidPredictionError(f"'{name}' is not a number: {value!r}") from None


def _decode_perception(raw_id: Any, data: Mapping[str, Any]) -> PerceptionSnapshot:
    where = "perception"
    perception_type = None
    if isinstance(data, Mapping) and data.get("type") is not None:
        try:
            perception_type = PerceptionType.parse(data["type"])
        except ValueError as e:
            raise InvalidPredictionError(str(e)) from None

    values = {
        name: _as_float(_require(data, name, where), name)
        for name in ("x", "y", "heading", "length", "width")
    }
    for name in ("height", "velocity_x", "velocity_y"):
        if data.get(name) is not None:
            values[name] = _as_float(data[name], name)

    return PerceptionSnapshot(id=raw_id, type=perception_type, **values)


def _decode_point(data: Mapping[str, Any]) -> TrajectoryPoint:
    where = "trajectory point"
    values = {
        name: _as_float(_require(data, name, where), name)
        for name in ("relative_time", "x", "y", "heading")
    }
    for name in _OPTIONAL_POINT_FIELDS:
        if data.get(name) is not None:
            values[name] = _as_float(data[name], name)
    return TrajectoryPoint(**values)


def _decode_trajectory(data: Mapping[str, Any]) -> Trajectory:
    points = _require(data, "points", "trajectory")
    if not isinstance(points, list):
        raise InvalidPredictionError("trajectory 'points' must be a list")

    probability = data.get("probability")
    if probability is not None:
        probability = _as_float(probability, "probability")
    return Trajectory([_decode_point(p) for p in points], probability=probability)


def _decode_object(data: Mapping[str, Any]) -> PredictedObject:
    raw_id = _require(data, "id", "object")
    if isinstance(raw_id, bool) or not isinstance(raw_id, (int, str)):
        raise InvalidPredictionError(f"object id must be an int or str, got {raw_id!r}")

    perception = _decode_perception(raw_id, _require(data, "perception", "object"))

    trajectories = data.get("trajectories") or []
    if not isinstance(trajectories, list):
        raise InvalidPredictionError("'trajectories' must be a list")

    predicted_period = data.get("predicted_period")
    if predicted_period is not None:
        predicted_period = _as_float(predicted_period, "predicted_period")

    return PredictedObject(
        perception=perception,
        trajectories=tuple(_decode_trajectory(t) for t in trajectories),
        predicted_period=predicted_period,
    )


def decode_prediction_message(data: Mapping[str, Any],
                              strict: bool = True) -> PredictionMessage:
    """Decode a prediction message mapping.

    Args:
        data: Mapping with an ``objects`` list and optional ``timestamp``.
        strict: Raise on the first malformed record. When False, malformed
            records are logged and dropped whole.

    Returns:
        The decoded PredictionMessage.

    Raises:
        InvalidPredictionError: On a malformed message or, in strict mode,
            a malformed record.
    """
    if not isinstance(data, Mapping):
        raise InvalidPredictionError("message must be a mapping")

    records = data.get("objects") or []
    if not isinstance(records, list):
        raise InvalidPredictionError("'objects' must be a list")

    objects: List[PredictedObject] = []
    for index, record in enumerate(records):
        try:
            objects.append(_decode_object(record))
        except DataError as e:
            if strict:
                if isinstance(e, InvalidPredictionError):
                    e.details.setdefault("record", index)
                    raise
                raise InvalidPredictionError(str(e), record=index) from e
            LOG_WARN(f"Dropping prediction record {index}: {e}")

    timestamp = data.get("timestamp")
    if timestamp is not None:
        timestamp = _as_float(timestamp, "timestamp")

    LOG_DEBUG(f"Decoded {len(objects)} of {len(records)} prediction records")
    return PredictionMessage(objects=tuple(objects), timestamp=timestamp)


def load_prediction_message(path: Union[str, Path],
                            strict: Optional[bool] = None) -> PredictionMessage:
    """Load a prediction message from a YAML (or JSON) file.

    Args:
        path: File to read.
        strict: Decoding mode; None uses the ``message.strict`` setting.
    """
    path = Path(path)
    if not path.exists():
        raise PredictionFileNotFoundError(str(path))

    if strict is None:
        strict = get_config().config.message.strict

    with open(path, "r") as f:
        data: Dict[str, Any] = yaml.safe_load(f) or {}

    return decode_prediction_message(data, strict=strict)
