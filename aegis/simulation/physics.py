"""Point-mass physics integrator.

Each tick a unit is pulled toward its target by a proportional
acceleration, pushed away from close neighbours, and integrated with
semi-implicit Euler and linear drag. Vector arithmetic uses numpy.
"""

import logging
from dataclasses import dataclass
from typing import Sequence, Tuple

import numpy as np

from ..core.config import SimConfig
from ..core.geometry import Vector3, clamp_magnitude
from ..core.unit import BatteryState, Unit, UnitStatus

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class IntegrationResult:
    """Kinematics after one integration step.

    Attributes:
        position: New position, altitude clamped to >= 0
        velocity: New velocity, magnitude clamped to max velocity
        acceleration: Applied acceleration, magnitude clamped
        demand_magnitude: Acceleration magnitude requested before clamping,
            used for the battery draw
    """
    position: Vector3
    velocity: Vector3
    acceleration: Vector3
    demand_magnitude: float = 0.0

    @property
    def accel_magnitude(self) -> float:
        return self.acceleration.magnitude


def _finite(vec: np.ndarray) -> np.ndarray:
    return np.nan_to_num(vec, nan=0.0, posinf=0.0, neginf=0.0)


def separation_acceleration(
    unit: Unit,
    neighbors: Sequence[Unit],
    config: SimConfig,
) -> np.ndarray:
    """Repulsive acceleration from nearby airborne units.

    Only applies when the unit itself is above the separation altitude.
    Each neighbour above that altitude within the separation radius adds
    (p_self - p_other) * (radius - d) / d * gain on the horizontal axes.
    Neighbours closer than the minimum distance contribute nothing.

    Returns:
        Length-3 array with zero vertical component
    """
    accel = np.zeros(3)
    if unit.altitude <= config.separation_min_altitude:
        return accel

    own = unit.position.to_array()
    for other in neighbors:
        if other.id == unit.id or other.altitude < config.separation_min_altitude:
            continue

        offset = own - other.position.to_array()
        dist = float(np.linalg.norm(offset))
        if config.separation_min_distance < dist < config.separation_radius:
            factor = (config.separation_radius - dist) / dist * config.separation_gain
            accel[0] += offset[0] * factor
            accel[1] += offset[1] * factor

    return accel


def integrate(
    unit: Unit,
    target: Vector3,
    neighbors: Sequence[Unit],
    config: SimConfig,
    dt: float,
) -> IntegrationResult:
    """Advance a unit's kinematics by one step.

    Args:
        unit: Unit at the start of the tick
        target: Point to steer toward
        neighbors: Roster at the start of the tick (may include ``unit``)
        config: Simulation configuration
        dt: Step size (seconds)

    Returns:
        IntegrationResult with new position, velocity and acceleration
    """
    position = unit.position.to_array()
    velocity = _finite(unit.velocity.to_array())

    accel = config.attraction_gain * (target.to_array() - position)
    accel = accel + separation_acceleration(unit, neighbors, config)
    accel = _finite(accel)
    demand = float(np.linalg.norm(accel))
    accel = clamp_magnitude(accel, config.max_acceleration)

    velocity = (velocity + accel * dt) * (1.0 - config.drag_coeff_linear * dt)
    velocity = clamp_magnitude(_finite(velocity), config.max_velocity)

    position = _finite(position + velocity * dt)
    position[2] = max(0.0, position[2])

    return IntegrationResult(
        position=Vector3.from_array(position),
        velocity=Vector3.from_array(velocity),
        acceleration=Vector3.from_array(accel),
        demand_magnitude=demand,
    )


def power_draw(status: UnitStatus, accel_magnitude: float, config: SimConfig) -> float:
    """Relative power draw for the battery model."""
    if status == UnitStatus.FLYING:
        return config.flying_base_draw + config.flying_accel_draw * accel_magnitude
    if status == UnitStatus.ARMED:
        return config.armed_draw
    return 0.0


def drain_battery(
    battery: BatteryState,
    status: UnitStatus,
    accel_magnitude: float,
    config: SimConfig,
) -> BatteryState:
    """Deplete the battery for one tick.

    Charge never goes below 0 or above 100. Depletion alone does not fail
    a unit; that is left to an outer policy.
    """
    draw = power_draw(status, accel_magnitude, config)
    percentage = battery.percentage - config.battery_drain_base * draw
    percentage = min(100.0, max(0.0, percentage))
    return BatteryState(
        voltage=battery.voltage,
        current=battery.current,
        percentage=percentage,
        sag=draw * config.sag_per_draw,
    )


def record_trail(
    trail: Tuple[Vector3, ...],
    position: Vector3,
    capacity: int,
) -> Tuple[Vector3, ...]:
    """Append ``position``, evicting the oldest entries beyond ``capacity``."""
    if capacity <= 0:
        return ()
    return (trail + (position,))[-capacity:]
