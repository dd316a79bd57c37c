"""
Static/dynamic classification of perceived objects.

Only objects known to be immobile are static. Unset or unrecognized types
also count as static.
"""

from typing import Dict, Optional, Union

from pyobstacles.logging import LOG_DEBUG
from pyobstacles.types import PerceptionSnapshot, PerceptionType

_STATIC_BY_TYPE: Dict[PerceptionType, bool] = {
    PerceptionType.UNKNOWN: False,
    PerceptionType.UNKNOWN_MOVABLE: False,
    PerceptionType.UNKNOWN_UNMOVABLE: True,
    PerceptionType.PEDESTRIAN: False,
    PerceptionType.BICYCLE: False,
    PerceptionType.VEHICLE: False,
}

_missing = set(PerceptionType) - set(_STATIC_BY_TYPE)
if _missing:
    raise RuntimeError(
        f"No static/dynamic decision for perception types: {sorted(t.name for t in _missing)}"
    )


def is_static_obstacle(
    perception: Union[PerceptionSnapshot, PerceptionType, None],
) -> bool:
    """Decide whether an object is assumed not to move.

    Args:
        perception: A snapshot, its type, or None for an unset type.

    Returns:
        True for unset and UNKNOWN_UNMOVABLE, False for every movable kind.
    """
    perception_type: Optional[PerceptionType]
    if isinstance(perception, PerceptionSnapshot):
        perception_type = perception.type
    else:
        perception_type = perception

    if perception_type is None:
        return True

    static = _STATIC_BY_TYPE.get(perception_type)
    if static is None:
        LOG_DEBUG(f"Unrecognized perception type {perception_type!r}, treating as static")
        return True
    return static
