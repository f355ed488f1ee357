"""Waypoint mission queues.

A unit's mission is a FIFO of waypoints: the front waypoint is the next
target and is consumed once the unit comes within tolerance of it.
"""

import logging
from dataclasses import dataclass
from typing import Iterable, Optional, Sequence, Tuple

from ..core.geometry import Vector3

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MissionStep:
    """Outcome of advancing a mission queue by one tick.

    Attributes:
        target: Waypoint steered toward this tick
        remaining: Queue after this tick
        reached: Whether the front waypoint was consumed
    """
    target: Vector3
    remaining: Tuple[Vector3, ...]
    reached: bool

    @property
    def is_complete(self) -> bool:
        """True once the last waypoint has been consumed."""
        return self.reached and not self.remaining


def sanitize_waypoints(waypoints: Iterable) -> Tuple[Vector3, ...]:
    """Coerce waypoints to Vector3 and clamp altitudes to the ground.

    Args:
        waypoints: Vector3 objects or (x, y, z) sequences

    Returns:
        Tuple of waypoints with z >= 0
    """
    cleaned = []
    for wp in waypoints:
        point = Vector3.of(wp)
        if point.z < 0.0:
            logger.debug(f"Clamping waypoint altitude {point.z:.2f}m to 0")
            point = point.with_z(0.0)
        cleaned.append(point)
    return tuple(cleaned)


def advance_mission(
    position: Vector3,
    mission_path: Sequence[Vector3],
    tolerance: float,
) -> Optional[MissionStep]:
    """Advance a mission queue by at most one waypoint.

    The front waypoint becomes the target. If the unit is within
    ``tolerance`` of it (3D distance) it is popped. Only one waypoint is
    popped per call even if the next one is also within tolerance.

    Args:
        position: Current unit position
        mission_path: Remaining waypoints
        tolerance: Arrival radius (meters)

    Returns:
        MissionStep, or None if the queue is empty
    """
    if not mission_path:
        return None

    waypoint = mission_path[0]
    if position.distance_to(waypoint) < tolerance:
        return MissionStep(target=waypoint, remaining=tuple(mission_path[1:]), reached=True)

    return MissionStep(target=waypoint, remaining=tuple(mission_path), reached=False)


def patrol_route(
    corners: Sequence[Tuple[float, float]],
    altitude: float,
    loops: int = 1,
) -> Tuple[Vector3, ...]:
    """Build a closed patrol route through 2D corner points.

    Args:
        corners: List of (x, y) corner points
        altitude: Patrol altitude (meters)
        loops: Number of times to fly the circuit

    Returns:
        Waypoints visiting every corner ``loops`` times and returning to
        the first corner.
    """
    if not corners:
        return ()

    route = []
    for _ in range(max(1, loops)):
        route.extend(Vector3(float(x), float(y), altitude) for x, y in corners)
    route.append(Vector3(float(corners[0][0]), float(corners[0][1]), altitude))
    return sanitize_waypoints(route)
